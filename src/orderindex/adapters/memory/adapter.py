"""In-memory adapter — A local stand-in for the hosted index.

Applies writes immediately, so every task is published as soon as it is
returned.  Keeps a log of calls, which makes it the adapter of choice for
tests and for running the API without remote credentials.
"""

from __future__ import annotations

import copy
import itertools
import threading
from datetime import UTC, datetime
from typing import Any

from orderindex.adapters.base.adapter import AdapterHealth, IndexTask, RemoteIndex, SearchHits
from orderindex.adapters.base.exceptions import RemoteIndexError


class InMemoryIndexAdapter(RemoteIndex):
    """Dict-backed remote index.

    Attributes:
        objects: Stored records keyed by ``objectID``.
        settings: Last settings written.
        synonyms: Stored synonyms.
        calls: Ordered log of ``(operation, argument)`` tuples.
        waited_tasks: IDs of tasks passed to ``wait_task``.
    """

    def __init__(self, index_name: str = "orders") -> None:
        self._index_name = index_name
        self._task_ids = itertools.count(1)
        self._lock = threading.Lock()
        self.objects: dict[str, dict[str, Any]] = {}
        self.settings: dict[str, Any] = {}
        self.synonyms: list[dict[str, Any]] = []
        self.calls: list[tuple[str, Any]] = []
        self.waited_tasks: list[int] = []

    @property
    def name(self) -> str:
        return "memory"

    @property
    def index_name(self) -> str:
        return self._index_name

    def save_objects(self, objects: list[dict[str, Any]]) -> IndexTask:
        if not objects:
            return IndexTask()
        with self._lock:
            for obj in objects:
                object_id = obj.get("objectID")
                if not object_id:
                    raise RemoteIndexError("Every object needs an objectID.")
                self.objects[str(object_id)] = copy.deepcopy(obj)
            ids = [str(o["objectID"]) for o in objects]
            self.calls.append(("save_objects", ids))
            return IndexTask(task_id=next(self._task_ids), object_ids=ids)

    def delete_objects(self, object_ids: list[str]) -> IndexTask:
        if not object_ids:
            return IndexTask()
        with self._lock:
            for object_id in object_ids:
                self.objects.pop(object_id, None)
            self.calls.append(("delete_objects", list(object_ids)))
            return IndexTask(task_id=next(self._task_ids), object_ids=list(object_ids))

    def clear_objects(self) -> IndexTask:
        with self._lock:
            self.objects.clear()
            self.calls.append(("clear_objects", None))
            return IndexTask(task_id=next(self._task_ids))

    def set_settings(self, settings: dict[str, Any]) -> IndexTask:
        with self._lock:
            self.settings = copy.deepcopy(settings)
            self.calls.append(("set_settings", None))
            return IndexTask(task_id=next(self._task_ids))

    def save_synonyms(self, synonyms: list[dict[str, Any]], replace_existing: bool = True) -> IndexTask:
        with self._lock:
            if replace_existing:
                self.synonyms = []
            self.synonyms.extend(copy.deepcopy(synonyms))
            self.calls.append(("save_synonyms", len(synonyms)))
            return IndexTask(task_id=next(self._task_ids))

    def search(self, query: str, params: dict[str, Any] | None = None) -> SearchHits:
        """Case-insensitive substring match over every string value of a record.

        Results are ordered by ``date_timestamp`` descending, like the
        custom ranking configured on the remote index.
        """
        params = params or {}
        hits_per_page = int(params.get("hitsPerPage", 20))
        page = int(params.get("page", 0))
        needle = query.lower().strip()

        with self._lock:
            matches = [
                copy.deepcopy(obj)
                for obj in self.objects.values()
                if not needle or needle in " ".join(_iter_strings(obj)).lower()
            ]
        matches.sort(key=lambda obj: obj.get("date_timestamp", 0), reverse=True)

        start = page * hits_per_page
        nb_pages = -(-len(matches) // hits_per_page) if matches else 0
        return SearchHits(
            hits=matches[start : start + hits_per_page],
            nb_hits=len(matches),
            page=page,
            nb_pages=nb_pages,
            hits_per_page=hits_per_page,
        )

    def wait_task(self, task: IndexTask) -> None:
        if task.task_id is not None:
            self.waited_tasks.append(task.task_id)

    def health_check(self) -> AdapterHealth:
        return AdapterHealth(
            status="healthy",
            last_check=datetime.now(UTC).isoformat(),
            message=f"Index: {self._index_name}, {len(self.objects)} objects",
        )

    def object_ids_for(self, order_id: int) -> list[str]:
        """All stored objectIDs belonging to ``order_id``."""
        prefix = f"{order_id}-"
        return sorted(oid for oid in self.objects if oid.startswith(prefix))


def _iter_strings(value: Any):
    if isinstance(value, str):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from _iter_strings(item)
    elif isinstance(value, list):
        for item in value:
            yield from _iter_strings(item)
    elif isinstance(value, int | float) and not isinstance(value, bool):
        yield str(value)
