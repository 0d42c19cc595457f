"""Orders watcher — Reacts to order lifecycle signals from the host.

Indexing must never break the operation that triggered it: placing,
editing, or deleting an order succeeds even when the search index is
unreachable.  Every failure is logged here and swallowed.
"""

from __future__ import annotations

import logging
from typing import Any

from orderindex.core.index import SearchIndex
from orderindex.host import hooks as hook_names
from orderindex.host.platform import CommercePlatform, doing_autosave
from orderindex.models.result import SyncResult

logger = logging.getLogger(__name__)


class OrdersWatcher:
    """Subscribes an index to the host's order lifecycle actions.

    Args:
        index: The index to keep in sync.
        platform: Host platform providing hooks and the order repository.
    """

    def __init__(self, index: SearchIndex, platform: CommercePlatform) -> None:
        self.index = index
        self.platform = platform
        self._watching = False

    @property
    def watching(self) -> bool:
        return self._watching

    def watch(self) -> None:
        """Subscribe to the lifecycle actions.  Subsequent calls do nothing."""
        if self._watching:
            return

        hooks = self.platform.hooks
        hooks.add_action(hook_names.ORDER_META_SAVED, self.process_order_meta)
        hooks.add_action(hook_names.ORDER_CREATED, self.new_order)
        hooks.add_action(hook_names.ORDER_BEFORE_DELETE, self.delete_order)
        hooks.add_action(hook_names.POST_BEFORE_DELETE, self.delete_order_legacy)
        self._watching = True
        logger.info("Watching order lifecycle for index '%s'", self.index.index_id)

    def unwatch(self) -> None:
        if not self._watching:
            return

        hooks = self.platform.hooks
        hooks.remove_action(hook_names.ORDER_META_SAVED, self.process_order_meta)
        hooks.remove_action(hook_names.ORDER_CREATED, self.new_order)
        hooks.remove_action(hook_names.ORDER_BEFORE_DELETE, self.delete_order)
        hooks.remove_action(hook_names.POST_BEFORE_DELETE, self.delete_order_legacy)
        self._watching = False

    # ── Signal handlers ──────────────────────────────────────────────────

    def process_order_meta(self, order_id: int, order: Any) -> SyncResult | None:
        """An order was saved from the admin screen."""
        logger.debug("Triggered: %s (order %s)", hook_names.ORDER_META_SAVED, order_id)
        return self.sync_item(order)

    def new_order(self, order_id: int, order: Any) -> SyncResult | None:
        """A new order was created."""
        logger.debug("Triggered: %s (order %s)", hook_names.ORDER_CREATED, order_id)
        return self.sync_item(order)

    def delete_order(self, order_id: int, order: Any) -> SyncResult | None:
        """An order is about to be deleted."""
        logger.debug("Triggered: %s (order %s)", hook_names.ORDER_BEFORE_DELETE, order_id)
        return self.delete_item(order)

    def delete_order_legacy(self, post_id: int, post: Any = None) -> SyncResult | None:
        """Generic content deletion; only carries a raw ID.

        The typed order is looked up by ID.  IDs that do not resolve to an
        order are ignored.
        """
        logger.debug("Triggered: %s (post %s)", hook_names.POST_BEFORE_DELETE, post_id)
        if doing_autosave():
            return None
        try:
            order = self.platform.orders.get(int(post_id))
        except Exception:
            logger.exception("Could not resolve order %s for deletion", post_id)
            return None
        if order is None:
            return None
        return self.delete_item(order)

    # ── Dispatch ─────────────────────────────────────────────────────────

    def sync_item(self, order: Any) -> SyncResult | None:
        if doing_autosave():
            return None
        if not self.index.supports(order):
            return None

        try:
            return self.index.sync(order)
        except Exception:
            logger.exception("Failed to sync order %s", getattr(order, "id", order))
            return None

    def delete_item(self, order: Any) -> SyncResult | None:
        if doing_autosave():
            return None
        if not self.index.supports(order):
            return None

        try:
            return self.index.delete_item(order)
        except Exception:
            logger.exception("Failed to delete order %s from index", getattr(order, "id", order))
            return None
