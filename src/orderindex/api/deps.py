"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from fastapi import Depends, HTTPException

from orderindex.core.index import ORDERS_INDEX_ID, IndexNotFoundError, SearchIndex
from orderindex.core.plugin import OrdersSearchPlugin

# Global plugin instance (set during application lifespan)
_plugin: OrdersSearchPlugin | None = None


def set_plugin(plugin: OrdersSearchPlugin | None) -> None:
    """Set the global plugin instance (called during app lifespan)."""
    global _plugin
    _plugin = plugin


def get_plugin() -> OrdersSearchPlugin:
    """Get the global plugin instance.

    Raises:
        RuntimeError: If the plugin is not initialized.
    """
    if _plugin is None:
        raise RuntimeError("Orders search plugin not initialized. Is the server running?")
    return _plugin


def get_orders_index(plugin: OrdersSearchPlugin = Depends(get_plugin)) -> SearchIndex:
    """Resolve the registered orders index.

    Raises:
        HTTPException: 503 if the index is not loaded (inactive platform).
    """
    try:
        return plugin.registry.get(ORDERS_INDEX_ID)
    except IndexNotFoundError as e:
        raise HTTPException(status_code=503, detail="Orders index not loaded") from e
