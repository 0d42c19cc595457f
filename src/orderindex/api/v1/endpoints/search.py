"""Search endpoints — Backend of the admin order autocomplete.

The widget either queries the remote index directly with the search-only
key (``GET /search/config`` hands it the credentials) or goes through
``POST /search``, which also returns rendered display lines.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from orderindex.adapters.base.exceptions import AdapterError
from orderindex.api.deps import get_orders_index, get_plugin
from orderindex.core.index import ORDERS_INDEX_ID, SearchIndex
from orderindex.core.plugin import OrdersSearchPlugin
from orderindex.core.presenter import HitPresenter, HitSummary

logger = logging.getLogger(__name__)

router = APIRouter()

_presenter = HitPresenter()


class SearchConfigResponse(BaseModel):
    """Credentials and index name for the browser widget."""

    application_id: str = Field(description="Algolia application ID")
    index_name: str = Field(description="Full orders index name")
    search_api_key: str = Field(description="Search-only API key")
    hits_per_page: int = Field(description="Results per page")
    debug: bool = Field(description="Widget debug mode")


class OrderSearchRequest(BaseModel):
    """Free-text order search."""

    query: str = Field(default="", max_length=512, description="Free-text query")
    page: int = Field(default=0, ge=0, description="Zero-based page")


class OrderSearchResponse(BaseModel):
    """Search results, raw and rendered."""

    query: str = Field(description="The query as received")
    nb_hits: int = Field(description="Total matching records")
    page: int = Field(description="Zero-based page")
    nb_pages: int = Field(description="Number of pages")
    hits: list[dict[str, Any]] = Field(description="Raw hits")
    summaries: list[HitSummary] = Field(description="Rendered display lines, one per hit")


@router.get(
    "/search/config",
    response_model=SearchConfigResponse,
    summary="Autocomplete Widget Configuration",
)
def search_config(plugin: OrdersSearchPlugin = Depends(get_plugin)) -> SearchConfigResponse:
    algolia = plugin.settings.algolia
    return SearchConfigResponse(
        application_id=algolia.application_id,
        index_name=algolia.index_name(ORDERS_INDEX_ID),
        search_api_key=algolia.search_api_key,
        hits_per_page=algolia.hits_per_page,
        debug=plugin.settings.debug,
    )


@router.post(
    "/search",
    response_model=OrderSearchResponse,
    summary="Search Orders",
    responses={
        502: {"description": "The remote search service failed"},
        503: {"description": "The orders index is not loaded"},
    },
)
def search_orders(
    request: OrderSearchRequest,
    index: SearchIndex = Depends(get_orders_index),
    plugin: OrdersSearchPlugin = Depends(get_plugin),
) -> OrderSearchResponse:
    """Search orders and render each hit for the autocomplete dropdown."""
    params = {
        "hitsPerPage": plugin.settings.algolia.hits_per_page,
        "page": request.page,
        "attributesToSnippet": ["number:15"],
        "snippetEllipsisText": "…",
    }
    try:
        results = index.remote.search(request.query, params)
    except AdapterError as e:
        logger.error("Order search failed: %s", e, exc_info=True)
        raise HTTPException(status_code=502, detail=f"Order search failed: {e!s}") from e

    return OrderSearchResponse(
        query=request.query,
        nb_hits=results.nb_hits,
        page=results.page,
        nb_pages=results.nb_pages,
        hits=results.hits,
        summaries=_presenter.render_all(results.hits),
    )
