"""Health check endpoints — Service and remote index health."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from orderindex import __version__
from orderindex.adapters.base.adapter import AdapterHealth
from orderindex.api.deps import get_plugin
from orderindex.core.plugin import OrdersSearchPlugin

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Response models ──────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="orderindex version")
    service: str = Field(description="Service name ('orderindex')")
    active_indices: list[str] = Field(description="IDs of the loaded indices")


class IndexHealthResponse(BaseModel):
    """Per-index remote health, keyed by index ID."""

    indices: dict[str, AdapterHealth] = Field(description="Map of index ID to remote adapter health")


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service Health Check",
)
def health_check(plugin: OrdersSearchPlugin = Depends(get_plugin)) -> HealthResponse:
    """Basic health check with the list of loaded indices."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="orderindex",
        active_indices=plugin.registry.active_indices,
    )


@router.get(
    "/health/index",
    response_model=IndexHealthResponse,
    summary="Remote Index Health Check",
)
def index_health(plugin: OrdersSearchPlugin = Depends(get_plugin)) -> IndexHealthResponse:
    """Check the remote service behind every loaded index."""
    statuses: dict[str, AdapterHealth] = {}
    for index in plugin.registry:
        try:
            statuses[index.index_id] = index.remote.health_check()
        except Exception as e:
            statuses[index.index_id] = AdapterHealth(status="unhealthy", message=str(e))
    return IndexHealthResponse(indices=statuses)
