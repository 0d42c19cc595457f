"""Synchronizer — Keeps an order's remote records in step with the order.

Addresses are positional (``{order_id}-0 .. {order_id}-(n-1)``) and cannot be
listed remotely, so every sync:

  1. Projects the order into its new records
  2. Deletes every address recorded by the ledger on the previous sync
  3. Writes the new records (replacing in place)
  4. Stores the new record count in the ledger

Deleting before writing is what keeps a shrinking record set from leaving
trailing addresses live.  Syncs of the same order are serialized within the
process; syncs of different orders run independently.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Iterator

from orderindex.adapters.base.adapter import RemoteIndex
from orderindex.adapters.base.exceptions import AdapterError
from orderindex.core.exceptions import RemoteSyncError
from orderindex.core.ledger import RecordCountLedger
from orderindex.core.projector import RecordProjector
from orderindex.host import hooks as hook_names
from orderindex.host.hooks import HookRegistry
from orderindex.models.order import Order
from orderindex.models.record import OrderRecord
from orderindex.models.result import SyncAction, SyncResult

logger = logging.getLogger(__name__)


class Synchronizer:
    """Delete-then-write synchronization of one order at a time.

    Attributes:
        remote: Remote index adapter.
        projector: Order to record projector.
        ledger: Per-order record count store.
        hooks: Host filters (wait override).
        wait_on_delete: Default for blocking on stale-record deletes.
    """

    def __init__(
        self,
        remote: RemoteIndex,
        projector: RecordProjector,
        ledger: RecordCountLedger,
        hooks: HookRegistry,
        wait_on_delete: bool = False,
    ) -> None:
        self.remote = remote
        self.projector = projector
        self.ledger = ledger
        self.hooks = hooks
        self.wait_on_delete = wait_on_delete
        self._locks: dict[int, list] = {}
        self._locks_guard = threading.Lock()

    def stale_object_ids(self, order: Order) -> list[str]:
        """Addresses the order may still occupy remotely, per the ledger."""
        count = self.ledger.get_count(order)
        return [self.projector.object_id(order.id, i) for i in range(count)]

    def sync(self, order: Order) -> SyncResult:
        """Rewrite the order's remote records.

        Raises:
            RemoteSyncError: If a remote delete, write, or wait failed.
            LedgerPersistenceError: If the new count could not be stored.
        """
        with self._order_lock(order.id):
            records = self.projector.project(order)
            old_count = self.ledger.get_count(order)
            stale = [self.projector.object_id(order.id, i) for i in range(old_count)]

            waited = self._delete(order, stale, records)

            written: list[str] = []
            if records:
                try:
                    self.remote.save_objects([record.to_payload() for record in records])
                except AdapterError as e:
                    raise RemoteSyncError(order.id, f"Failed to write records for order {order.id}: {e}") from e
                written = [record.object_id for record in records]

            if len(records) != old_count:
                self.ledger.set_count(order, len(records))

        logger.info(
            "Synced order %s: %d stale address(es) deleted, %d record(s) written",
            order.id,
            len(stale),
            len(written),
        )
        return SyncResult(
            order_id=order.id,
            action=SyncAction.SYNCED,
            deleted_object_ids=stale,
            written_object_ids=written,
            records_count=len(records),
            waited=waited,
        )

    def delete(self, order: Order) -> SyncResult:
        """Remove every remote record of the order and reset its ledger.

        Idempotent: once the ledger is back at 0 no remote call is made.

        Raises:
            RemoteSyncError: If the remote delete failed.
            LedgerPersistenceError: If the ledger reset could not be stored.
        """
        with self._order_lock(order.id):
            stale = self.stale_object_ids(order)
            if not stale:
                return SyncResult(order_id=order.id, action=SyncAction.DELETED)

            waited = self._delete(order, stale, [])
            self.ledger.reset(order)

        logger.info("Deleted %d record(s) of order %s", len(stale), order.id)
        return SyncResult(
            order_id=order.id,
            action=SyncAction.DELETED,
            deleted_object_ids=stale,
            waited=waited,
        )

    # ── Helpers ──────────────────────────────────────────────────────────

    def _delete(self, order: Order, object_ids: list[str], records: list[OrderRecord]) -> bool:
        if not object_ids:
            return False

        should_wait = bool(
            self.hooks.apply_filters(
                hook_names.SHOULD_WAIT_ON_DELETE_ITEM,
                self.wait_on_delete,
                order,
                records,
            )
        )
        try:
            task = self.remote.delete_objects(object_ids)
            if should_wait:
                self.remote.wait_task(task)
        except AdapterError as e:
            raise RemoteSyncError(order.id, f"Failed to delete records of order {order.id}: {e}") from e
        return should_wait

    @contextlib.contextmanager
    def _order_lock(self, order_id: int) -> Iterator[None]:
        # Entries are [lock, holders]; dropped once nobody holds or waits.
        with self._locks_guard:
            entry = self._locks.setdefault(order_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._locks.pop(order_id, None)
