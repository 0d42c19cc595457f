"""Tests for the orders lifecycle watcher."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from orderindex.adapters.base.exceptions import RemoteIndexError
from orderindex.adapters.memory.adapter import InMemoryIndexAdapter
from orderindex.core.exceptions import LedgerPersistenceError
from orderindex.core.index import OrdersIndex
from orderindex.core.watcher import OrdersWatcher
from orderindex.host import hooks as hook_names
from orderindex.host.platform import CommercePlatform, autosave, doing_autosave
from orderindex.models.order import Order
from orderindex.models.result import SyncAction


@pytest.fixture
def watcher(orders_index: OrdersIndex, platform: CommercePlatform) -> OrdersWatcher:
    w = OrdersWatcher(orders_index, platform)
    w.watch()
    return w


class TestSubscription:
    def test_watch_subscribes_all_signals(self, watcher: OrdersWatcher, platform: CommercePlatform) -> None:
        for name in (
            hook_names.ORDER_META_SAVED,
            hook_names.ORDER_CREATED,
            hook_names.ORDER_BEFORE_DELETE,
            hook_names.POST_BEFORE_DELETE,
        ):
            assert platform.hooks.has_action(name)
        assert watcher.watching

    def test_watch_twice_subscribes_once(
        self, watcher: OrdersWatcher, platform: CommercePlatform, remote: InMemoryIndexAdapter, sample_order: Order
    ) -> None:
        watcher.watch()
        platform.hooks.do_action(hook_names.ORDER_CREATED, sample_order.id, sample_order)
        assert [op for op, _ in remote.calls] == ["save_objects"]

    def test_unwatch(
        self, watcher: OrdersWatcher, platform: CommercePlatform, remote: InMemoryIndexAdapter, sample_order: Order
    ) -> None:
        watcher.unwatch()
        platform.hooks.do_action(hook_names.ORDER_CREATED, sample_order.id, sample_order)
        assert remote.calls == []
        assert not watcher.watching


class TestSignals:
    def test_created_order_is_indexed(
        self, watcher: OrdersWatcher, platform: CommercePlatform, remote: InMemoryIndexAdapter, sample_order: Order
    ) -> None:
        platform.hooks.do_action(hook_names.ORDER_CREATED, sample_order.id, sample_order)
        assert remote.object_ids_for(42) == ["42-0"]

    def test_meta_saved_reindexes(
        self, watcher: OrdersWatcher, platform: CommercePlatform, remote: InMemoryIndexAdapter, sample_order: Order
    ) -> None:
        watcher.new_order(sample_order.id, sample_order)
        sample_order.status = "completed"

        result = watcher.process_order_meta(sample_order.id, sample_order)

        assert result is not None and result.action == SyncAction.SYNCED
        assert remote.objects["42-0"]["status_name"] == "Completed"

    def test_before_delete_removes_records(
        self, watcher: OrdersWatcher, platform: CommercePlatform, remote: InMemoryIndexAdapter, sample_order: Order
    ) -> None:
        watcher.new_order(sample_order.id, sample_order)
        platform.hooks.do_action(hook_names.ORDER_BEFORE_DELETE, sample_order.id, sample_order)
        assert remote.object_ids_for(42) == []

    def test_legacy_delete_resolves_order_by_id(
        self, watcher: OrdersWatcher, platform: CommercePlatform, remote: InMemoryIndexAdapter, sample_order: Order
    ) -> None:
        watcher.new_order(sample_order.id, sample_order)

        result = watcher.delete_order_legacy(42, {"post_type": "shop_order"})

        assert result is not None
        assert result.deleted_object_ids == ["42-0"]
        assert remote.object_ids_for(42) == []

    def test_legacy_delete_ignores_unknown_ids(
        self, watcher: OrdersWatcher, platform: CommercePlatform, remote: InMemoryIndexAdapter
    ) -> None:
        platform.hooks.do_action(hook_names.POST_BEFORE_DELETE, 12345, None)
        assert remote.calls == []

    def test_unsupported_item_ignored(self, watcher: OrdersWatcher, remote: InMemoryIndexAdapter) -> None:
        assert watcher.sync_item({"id": 1}) is None
        assert watcher.delete_item("1") is None
        assert remote.calls == []


class TestAutosave:
    def test_autosave_context(self) -> None:
        assert not doing_autosave()
        with autosave():
            assert doing_autosave()
        assert not doing_autosave()

    def test_no_indexing_during_autosave(
        self, watcher: OrdersWatcher, platform: CommercePlatform, remote: InMemoryIndexAdapter, sample_order: Order
    ) -> None:
        with autosave():
            platform.hooks.do_action(hook_names.ORDER_META_SAVED, sample_order.id, sample_order)
            platform.hooks.do_action(hook_names.ORDER_CREATED, sample_order.id, sample_order)
            platform.hooks.do_action(hook_names.ORDER_BEFORE_DELETE, sample_order.id, sample_order)
            platform.hooks.do_action(hook_names.POST_BEFORE_DELETE, sample_order.id, None)
        assert remote.calls == []


class TestFailureIsolation:
    def test_remote_failure_is_logged_not_raised(
        self,
        platform: CommercePlatform,
        sample_order: Order,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        remote = InMemoryIndexAdapter()
        remote.save_objects = MagicMock(side_effect=RemoteIndexError("network down"))  # type: ignore[method-assign]
        watcher = OrdersWatcher(OrdersIndex(platform, remote), platform)
        watcher.watch()

        with caplog.at_level(logging.ERROR, logger="orderindex.core.watcher"):
            platform.hooks.do_action(hook_names.ORDER_CREATED, sample_order.id, sample_order)

        assert "Failed to sync order 42" in caplog.text
        assert "network down" in caplog.text

    def test_ledger_failure_is_logged_not_raised(
        self, orders_index: OrdersIndex, platform: CommercePlatform, sample_order: Order
    ) -> None:
        orders_index.synchronizer.ledger.set_count = MagicMock(  # type: ignore[method-assign]
            side_effect=LedgerPersistenceError(42, "cannot save")
        )
        watcher = OrdersWatcher(orders_index, platform)

        assert watcher.new_order(sample_order.id, sample_order) is None

    def test_delete_failure_is_logged_not_raised(
        self, platform: CommercePlatform, sample_order: Order, caplog: pytest.LogCaptureFixture
    ) -> None:
        index = MagicMock(spec=OrdersIndex)
        index.index_id = "orders"
        index.supports.return_value = True
        index.delete_item.side_effect = RuntimeError("unexpected")
        watcher = OrdersWatcher(index, platform)

        with caplog.at_level(logging.ERROR, logger="orderindex.core.watcher"):
            assert watcher.delete_order(sample_order.id, sample_order) is None
        assert "Failed to delete order 42" in caplog.text

    def test_legacy_lookup_failure_is_logged(self, orders_index: OrdersIndex, platform: CommercePlatform) -> None:
        platform.orders.get = MagicMock(side_effect=RuntimeError("db gone"))  # type: ignore[method-assign]
        watcher = OrdersWatcher(orders_index, platform)
        assert watcher.delete_order_legacy(42) is None
