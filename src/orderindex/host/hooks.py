"""Hook registry — Actions and filters exposed by the host platform.

Actions are lifecycle signals (``do_action`` calls every subscriber).  Filters
let integrators override a value (``apply_filters`` threads the value through
every subscriber in priority order).

Example:
    >>> hooks = HookRegistry()
    >>> hooks.add_filter(SHOULD_WAIT_ON_DELETE_ITEM, lambda wait, order, records: True)
    >>> hooks.apply_filters(SHOULD_WAIT_ON_DELETE_ITEM, False, order, records)
    True
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# ── Lifecycle actions ──
ORDER_META_SAVED = "order_meta_saved"
ORDER_CREATED = "order_created"
ORDER_BEFORE_DELETE = "order_before_delete"
POST_BEFORE_DELETE = "post_before_delete"

# ── Filters ──
GET_ORDER_OBJECT_ID = "get_order_object_id"
SHOULD_WAIT_ON_DELETE_ITEM = "should_wait_on_delete_item"
ORDERS_INDEX_SYNONYMS = "orders_index_synonyms"
ORDER_ITEM_NAME = "order_item_name"

DEFAULT_PRIORITY = 10


class HookRegistry:
    """Priority-ordered registry of action and filter callbacks."""

    def __init__(self) -> None:
        self._actions: dict[str, list[tuple[int, int, Callable[..., Any]]]] = {}
        self._filters: dict[str, list[tuple[int, int, Callable[..., Any]]]] = {}
        self._seq = 0

    def add_action(self, name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        self._add(self._actions, name, callback, priority)

    def add_filter(self, name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY) -> None:
        self._add(self._filters, name, callback, priority)

    def remove_action(self, name: str, callback: Callable[..., Any]) -> bool:
        return self._remove(self._actions, name, callback)

    def remove_filter(self, name: str, callback: Callable[..., Any]) -> bool:
        return self._remove(self._filters, name, callback)

    def do_action(self, name: str, *args: Any) -> None:
        """Call every subscriber of ``name`` with ``args``.

        Subscribers are responsible for their own error handling; an
        exception raised by one propagates to the caller.
        """
        for _, _, callback in self._actions.get(name, []):
            callback(*args)

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        """Pass ``value`` through every filter registered under ``name``."""
        for _, _, callback in self._filters.get(name, []):
            value = callback(value, *args)
        return value

    def has_action(self, name: str) -> bool:
        return bool(self._actions.get(name))

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.get(name))

    # ── Helpers ──────────────────────────────────────────────────────────

    def _add(
        self,
        table: dict[str, list[tuple[int, int, Callable[..., Any]]]],
        name: str,
        callback: Callable[..., Any],
        priority: int,
    ) -> None:
        self._seq += 1
        entries = table.setdefault(name, [])
        entries.append((priority, self._seq, callback))
        entries.sort(key=lambda entry: (entry[0], entry[1]))
        logger.debug("Registered hook %s (priority %d)", name, priority)

    @staticmethod
    def _remove(
        table: dict[str, list[tuple[int, int, Callable[..., Any]]]],
        name: str,
        callback: Callable[..., Any],
    ) -> bool:
        entries = table.get(name, [])
        remaining = [entry for entry in entries if entry[2] != callback]
        table[name] = remaining
        return len(remaining) != len(entries)
