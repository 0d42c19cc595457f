"""Index maintenance endpoints — Re-index, push settings, sync one order."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from orderindex.adapters.base.exceptions import AdapterError
from orderindex.api.deps import get_orders_index, get_plugin
from orderindex.core.exceptions import SyncError
from orderindex.core.index import SearchIndex
from orderindex.core.plugin import OrdersSearchPlugin
from orderindex.models.result import ReindexReport, SyncResult

logger = logging.getLogger(__name__)

router = APIRouter()


class ReindexRequest(BaseModel):
    batch_size: int = Field(default=100, ge=1, le=1000, description="Orders per page")


@router.post("/index/reindex", response_model=ReindexReport, summary="Re-index All Orders")
def reindex(request: ReindexRequest, index: SearchIndex = Depends(get_orders_index)) -> ReindexReport:
    try:
        return index.re_index_all(batch_size=request.batch_size)
    except AdapterError as e:
        logger.error("Re-index failed: %s", e, exc_info=True)
        raise HTTPException(status_code=502, detail=f"Re-index failed: {e!s}") from e


@router.post("/index/settings", status_code=204, summary="Push Index Settings")
def push_settings(index: SearchIndex = Depends(get_orders_index)) -> None:
    try:
        index.push_settings()
    except AdapterError as e:
        logger.error("Pushing settings failed: %s", e, exc_info=True)
        raise HTTPException(status_code=502, detail=f"Pushing settings failed: {e!s}") from e


@router.post("/index/orders/{order_id}/sync", response_model=SyncResult, summary="Sync One Order")
def sync_order(
    order_id: int,
    index: SearchIndex = Depends(get_orders_index),
    plugin: OrdersSearchPlugin = Depends(get_plugin),
) -> SyncResult:
    """Synchronously re-sync one order; errors are reported, not swallowed."""
    order = plugin.platform.orders.get(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    try:
        return index.sync(order)
    except SyncError as e:
        logger.error("Sync of order %s failed: %s", order_id, e, exc_info=True)
        raise HTTPException(status_code=502, detail=str(e)) from e
