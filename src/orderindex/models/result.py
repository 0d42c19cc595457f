"""Synchronization outcome models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class SyncAction(StrEnum):
    """What a synchronization call did for one order."""

    SYNCED = "synced"
    DELETED = "deleted"
    SKIPPED = "skipped"


class SyncResult(BaseModel):
    """Outcome of a single sync or delete call."""

    order_id: int | None = Field(default=None, description="Order ID, None when the item was not an order")
    action: SyncAction = Field(description="synced, deleted or skipped")
    deleted_object_ids: list[str] = Field(default_factory=list, description="Addresses targeted for deletion")
    written_object_ids: list[str] = Field(default_factory=list, description="Addresses written")
    records_count: int = Field(default=0, description="Ledger value after the call")
    waited: bool = Field(default=False, description="Whether the delete waited for the remote task")


class ReindexReport(BaseModel):
    """Summary of a re-index run."""

    total_items: int = Field(default=0, description="Orders known to the repository")
    processed: int = Field(default=0, description="Orders synced successfully")
    failed: int = Field(default=0, description="Orders whose sync raised")
    pages: int = Field(default=0, description="Pages processed")
