"""Base remote index adapter — Abstract interface for hosted search indices.

Every remote backend must implement this interface.  The adapter is
responsible for:
  1. Writing records keyed by ``objectID`` (replacing in place)
  2. Deleting records by ``objectID`` (missing IDs are a no-op)
  3. Pushing index settings and synonyms
  4. Running read-only searches for the admin widget
  5. Reporting health status
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class AdapterHealth(BaseModel):
    """Health status of a remote index adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class IndexTask(BaseModel):
    """Handle to an asynchronous remote write.

    Remote writes are acknowledged immediately and applied later.  Pass the
    task to ``RemoteIndex.wait_task`` to block until it is published.
    """

    task_id: int | None = Field(default=None, description="Remote task ID (None when nothing was sent)")
    object_ids: list[str] = Field(default_factory=list, description="Object IDs affected by the task")


class SearchHits(BaseModel):
    """Raw search results from the remote index."""

    hits: list[dict[str, Any]] = Field(default_factory=list, description="Raw hit objects")
    nb_hits: int = Field(default=0, description="Total number of matching records")
    page: int = Field(default=0, description="Zero-based page number")
    nb_pages: int = Field(default=0, description="Number of pages")
    hits_per_page: int = Field(default=0, description="Page size")
    took_ms: int = Field(default=0, description="Round-trip time in ms")


class RemoteIndex(ABC):
    """Abstract base class for remote index adapters.

    One instance addresses exactly one remote index.  All calls are
    synchronous; they return once the remote service acknowledged the
    request, not once the change is searchable.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Adapter name (e.g., 'algolia', 'memory')."""

    @property
    @abstractmethod
    def index_name(self) -> str:
        """Name of the remote index this adapter writes to."""

    @abstractmethod
    def save_objects(self, objects: list[dict[str, Any]]) -> IndexTask:
        """Write objects, replacing any existing object with the same ``objectID``."""

    @abstractmethod
    def delete_objects(self, object_ids: list[str]) -> IndexTask:
        """Delete objects by ``objectID``.  Unknown IDs are ignored."""

    @abstractmethod
    def clear_objects(self) -> IndexTask:
        """Remove every object from the index, keeping its settings."""

    @abstractmethod
    def set_settings(self, settings: dict[str, Any]) -> IndexTask:
        """Replace the index settings."""

    @abstractmethod
    def save_synonyms(self, synonyms: list[dict[str, Any]], replace_existing: bool = True) -> IndexTask:
        """Write synonyms, optionally replacing all existing ones."""

    @abstractmethod
    def search(self, query: str, params: dict[str, Any] | None = None) -> SearchHits:
        """Run a search query.

        Args:
            query: Free-text query.
            params: Extra search parameters (hitsPerPage, page, snippets...).

        Returns:
            Raw search hits.
        """

    @abstractmethod
    def wait_task(self, task: IndexTask) -> None:
        """Block until ``task`` is published.

        Raises:
            TaskTimeoutError: If the task is not published in time.
        """

    @abstractmethod
    def health_check(self) -> AdapterHealth:
        """Check the health of the remote service."""

    def close(self) -> None:
        """Release network resources.  No-op by default."""
