"""Algolia adapter — Hosted search index connector.

Communicates with Algolia via its REST API using ``httpx``.  Writes go to the
application's primary host with the admin key; searches go to the DSN host
with the search-only key.

Usage::

    adapter = AlgoliaIndexAdapter(
        application_id="LATENCY",
        api_key="admin-key",
        index_name="wp_orders",
        search_api_key="search-key",
    )
    adapter.initialize()
    task = adapter.delete_objects(["42-0", "42-1"])
    adapter.wait_task(task)
"""

from __future__ import annotations

import json
import logging
import time
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from orderindex.adapters.base.adapter import AdapterHealth, IndexTask, RemoteIndex, SearchHits
from orderindex.adapters.base.exceptions import (
    ConfigurationError,
    ConnectionError,
    RemoteIndexError,
    TaskTimeoutError,
)

logger = logging.getLogger(__name__)


class AlgoliaIndexAdapter(RemoteIndex):
    """Remote index adapter for Algolia.

    Args:
        application_id: Algolia application ID.
        api_key: Admin API key used for every write.
        index_name: Full index name (prefix included).
        search_api_key: Search-only key for queries (falls back to ``api_key``).
        timeout: HTTP request timeout in seconds.
        wait_poll_interval: Seconds between task status polls.
        wait_timeout: Maximum seconds ``wait_task`` blocks.
        write_url: Override of the write host (proxies, tests).
        read_url: Override of the read host (proxies, tests).
    """

    def __init__(
        self,
        application_id: str,
        api_key: str,
        index_name: str,
        search_api_key: str | None = None,
        timeout: float = 30.0,
        wait_poll_interval: float = 0.5,
        wait_timeout: float = 60.0,
        write_url: str | None = None,
        read_url: str | None = None,
    ) -> None:
        if not application_id or not api_key:
            raise ConfigurationError("Algolia application ID and admin API key are required.")
        if not index_name:
            raise ConfigurationError("Algolia index name is required.")

        self._application_id = application_id
        self._api_key = api_key
        self._search_api_key = search_api_key or api_key
        self._index_name = index_name
        self._timeout = timeout
        self._wait_poll_interval = wait_poll_interval
        self._wait_timeout = wait_timeout
        self._write_url = (write_url or f"https://{application_id}.algolia.net").rstrip("/")
        self._read_url = (read_url or f"https://{application_id}-dsn.algolia.net").rstrip("/")
        self._client: httpx.Client | None = None

    @property
    def name(self) -> str:
        return "algolia"

    @property
    def index_name(self) -> str:
        return self._index_name

    def initialize(self) -> None:
        """Create the ``httpx.Client`` used for every request."""
        self._client = httpx.Client(
            timeout=httpx.Timeout(self._timeout),
            headers={
                "Content-Type": "application/json",
                "X-Algolia-Application-Id": self._application_id,
                "X-Algolia-API-Key": self._api_key,
            },
        )
        logger.info("Algolia adapter ready (app: %s, index: %s)", self._application_id, self._index_name)

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    # ── Writes ───────────────────────────────────────────────────────────

    def save_objects(self, objects: list[dict[str, Any]]) -> IndexTask:
        """Replace objects via the ``/batch`` endpoint (``updateObject`` action)."""
        if not objects:
            return IndexTask()
        missing = [o for o in objects if not o.get("objectID")]
        if missing:
            raise RemoteIndexError("Every object written to Algolia needs an objectID.")

        requests = [{"action": "updateObject", "body": obj} for obj in objects]
        data = self._request("POST", f"{self._index_path}/batch", json={"requests": requests})
        return IndexTask(
            task_id=data.get("taskID"),
            object_ids=[str(o["objectID"]) for o in objects],
        )

    def delete_objects(self, object_ids: list[str]) -> IndexTask:
        """Delete objects via the ``/batch`` endpoint (``deleteObject`` action).

        Algolia treats deleting an unknown objectID as success.
        """
        if not object_ids:
            return IndexTask()

        requests = [{"action": "deleteObject", "body": {"objectID": object_id}} for object_id in object_ids]
        data = self._request("POST", f"{self._index_path}/batch", json={"requests": requests})
        return IndexTask(task_id=data.get("taskID"), object_ids=list(object_ids))

    def clear_objects(self) -> IndexTask:
        data = self._request("POST", f"{self._index_path}/clear")
        return IndexTask(task_id=data.get("taskID"))

    def set_settings(self, settings: dict[str, Any]) -> IndexTask:
        data = self._request("PUT", f"{self._index_path}/settings", json=settings)
        return IndexTask(task_id=data.get("taskID"))

    def save_synonyms(self, synonyms: list[dict[str, Any]], replace_existing: bool = True) -> IndexTask:
        params = {"replaceExistingSynonyms": "true" if replace_existing else "false"}
        data = self._request("POST", f"{self._index_path}/synonyms/batch", json=synonyms, params=params)
        return IndexTask(task_id=data.get("taskID"))

    # ── Search ───────────────────────────────────────────────────────────

    def search(self, query: str, params: dict[str, Any] | None = None) -> SearchHits:
        """Query the index through the ``/query`` endpoint on the DSN host."""
        encoded = {"query": query}
        for key, value in (params or {}).items():
            encoded[key] = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)

        start = time.monotonic()
        data = self._request(
            "POST",
            f"{self._index_path}/query",
            json={"params": urlencode(encoded)},
            read=True,
        )
        took_ms = int((time.monotonic() - start) * 1000)

        return SearchHits(
            hits=data.get("hits", []),
            nb_hits=data.get("nbHits", 0),
            page=data.get("page", 0),
            nb_pages=data.get("nbPages", 0),
            hits_per_page=data.get("hitsPerPage", 0),
            took_ms=took_ms,
        )

    # ── Tasks ────────────────────────────────────────────────────────────

    def wait_task(self, task: IndexTask) -> None:
        """Poll ``/task/{id}`` until Algolia reports the task as published."""
        if task.task_id is None:
            return

        deadline = time.monotonic() + self._wait_timeout
        while True:
            data = self._request("GET", f"{self._index_path}/task/{task.task_id}")
            if data.get("status") == "published":
                return
            if time.monotonic() >= deadline:
                raise TaskTimeoutError(
                    f"Algolia task {task.task_id} not published after {self._wait_timeout:.0f}s"
                )
            time.sleep(self._wait_poll_interval)

    # ── Health ───────────────────────────────────────────────────────────

    def health_check(self) -> AdapterHealth:
        """Check Algolia availability via ``/1/isalive``."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            resp = self._client.get(f"{self._read_url}/1/isalive")
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                return AdapterHealth(
                    status="healthy",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"Index: {self._index_name}",
                )
            return AdapterHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Algolia returned HTTP {resp.status_code}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    @property
    def _index_path(self) -> str:
        return f"/1/indexes/{quote(self._index_name, safe='')}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
        read: bool = False,
    ) -> dict[str, Any]:
        if not self._client:
            raise ConnectionError("Algolia client not initialized.")

        url = f"{self._read_url if read else self._write_url}{path}"
        headers = {"X-Algolia-API-Key": self._search_api_key} if read else None
        try:
            resp = self._client.request(method, url, json=json, params=params, headers=headers)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            raise RemoteIndexError(f"Algolia {method} {path} failed: {e}") from e
