"""Tests for the in-memory adapter."""

from __future__ import annotations

import pytest

from orderindex.adapters.base.adapter import IndexTask
from orderindex.adapters.base.exceptions import RemoteIndexError
from orderindex.adapters.memory.adapter import InMemoryIndexAdapter


@pytest.fixture
def adapter() -> InMemoryIndexAdapter:
    a = InMemoryIndexAdapter(index_name="wp_orders")
    a.save_objects(
        [
            {"objectID": "1-0", "number": "1001", "date_timestamp": 100, "billing": {"city": "London"}},
            {"objectID": "2-0", "number": "1002", "date_timestamp": 300, "billing": {"city": "Paris"}},
            {"objectID": "3-0", "number": "1003", "date_timestamp": 200, "billing": {"city": "London"}},
        ]
    )
    a.calls.clear()
    return a


class TestInMemoryWrites:
    def test_delete_unknown_ids_is_noop(self, adapter: InMemoryIndexAdapter) -> None:
        task = adapter.delete_objects(["9-0", "1-0"])
        assert task.task_id is not None
        assert sorted(adapter.objects) == ["2-0", "3-0"]

    def test_save_replaces_in_place(self, adapter: InMemoryIndexAdapter) -> None:
        adapter.save_objects([{"objectID": "1-0", "number": "X"}])
        assert adapter.objects["1-0"] == {"objectID": "1-0", "number": "X"}
        assert len(adapter.objects) == 3

    def test_save_requires_object_id(self, adapter: InMemoryIndexAdapter) -> None:
        with pytest.raises(RemoteIndexError):
            adapter.save_objects([{"number": "1"}])

    def test_stored_objects_are_copies(self, adapter: InMemoryIndexAdapter) -> None:
        obj = {"objectID": "5-0", "items": []}
        adapter.save_objects([obj])
        obj["items"].append("mutated")
        assert adapter.objects["5-0"]["items"] == []

    def test_empty_calls_are_not_logged(self, adapter: InMemoryIndexAdapter) -> None:
        assert adapter.delete_objects([]) == IndexTask()
        assert adapter.calls == []

    def test_clear(self, adapter: InMemoryIndexAdapter) -> None:
        adapter.clear_objects()
        assert adapter.objects == {}

    def test_object_ids_for(self, adapter: InMemoryIndexAdapter) -> None:
        adapter.save_objects([{"objectID": "1-1"}, {"objectID": "11-0"}])
        assert adapter.object_ids_for(1) == ["1-0", "1-1"]


class TestInMemorySearch:
    def test_substring_match_in_nested_values(self, adapter: InMemoryIndexAdapter) -> None:
        results = adapter.search("london")
        assert [h["objectID"] for h in results.hits] == ["3-0", "1-0"]
        assert results.nb_hits == 2

    def test_empty_query_returns_all_by_recency(self, adapter: InMemoryIndexAdapter) -> None:
        results = adapter.search("")
        assert [h["objectID"] for h in results.hits] == ["2-0", "3-0", "1-0"]

    def test_paging(self, adapter: InMemoryIndexAdapter) -> None:
        results = adapter.search("", {"hitsPerPage": 2, "page": 1})
        assert [h["objectID"] for h in results.hits] == ["1-0"]
        assert results.nb_pages == 2


class TestInMemoryTasks:
    def test_wait_records_task(self, adapter: InMemoryIndexAdapter) -> None:
        task = adapter.delete_objects(["1-0"])
        adapter.wait_task(task)
        assert adapter.waited_tasks == [task.task_id]

    def test_health(self, adapter: InMemoryIndexAdapter) -> None:
        health = adapter.health_check()
        assert health.status == "healthy"
        assert "3 objects" in (health.message or "")
