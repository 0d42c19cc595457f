"""Record-count ledger — How many remote addresses an order last occupied.

The count lives in the order's own meta data and is the only way to know
which positional addresses may still exist remotely.
"""

from __future__ import annotations

import logging

from orderindex.core.exceptions import LedgerPersistenceError
from orderindex.host.platform import OrderRepository
from orderindex.models.order import Order

logger = logging.getLogger(__name__)


class RecordCountLedger:
    """Reads and writes the per-order record count.

    Args:
        orders: Repository used to re-read and persist orders.
        index_id: Index identifier, part of the meta key.
    """

    def __init__(self, orders: OrderRepository, index_id: str = "orders") -> None:
        self.orders = orders
        self.meta_key = f"algolia_{index_id}_records_count"

    def get_count(self, order: Order) -> int:
        """Return the stored count, 0 when never set.

        The order is re-read from the repository so a stale in-memory copy
        cannot hide a count written by an earlier sync.
        """
        stored = self.orders.get(order.id)
        source = stored if stored is not None else order
        try:
            return max(int(source.get_meta(self.meta_key, 0) or 0), 0)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed record count on order %s", order.id)
            return 0

    def set_count(self, order: Order, count: int) -> None:
        """Persist ``count`` on the order immediately.

        A count of 0 removes the entry.  An order the host already removed
        is left alone, so syncing it cannot bring it back.

        Raises:
            ValueError: If ``count`` is negative.
            LedgerPersistenceError: If the repository fails to save the order.
        """
        if count < 0:
            raise ValueError(f"Record count must be non-negative, got {count}")

        if count:
            order.update_meta(self.meta_key, int(count))
        else:
            order.delete_meta(self.meta_key)
        self._save_if_present(order)

    def reset(self, order: Order) -> None:
        """Drop the count after the order's records were deleted.

        Only orders still present in the repository are written back, so
        resetting an order the host already removed does not resurrect it.
        """
        order.delete_meta(self.meta_key)
        self._save_if_present(order)

    def _save_if_present(self, order: Order) -> None:
        if self.orders.get(order.id) is None:
            logger.debug("Order %s no longer exists; record count not stored", order.id)
            return
        self._save(order)

    def _save(self, order: Order) -> None:
        try:
            self.orders.save(order)
        except Exception as e:
            raise LedgerPersistenceError(
                order.id, f"Failed to persist record count for order {order.id}: {e}"
            ) from e
