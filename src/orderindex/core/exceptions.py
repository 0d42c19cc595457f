"""Synchronization exceptions."""

from __future__ import annotations


class SyncError(Exception):
    """Base exception for a failed sync or delete of one order."""

    def __init__(self, order_id: int, message: str) -> None:
        super().__init__(message)
        self.order_id = order_id


class RemoteSyncError(SyncError):
    """Raised when the remote index rejected or failed a write or delete."""


class LedgerPersistenceError(SyncError):
    """Raised when the record count could not be written back to the order."""
