"""Search indices — The interface the host expects and the orders index.

``SearchIndex`` is the contract an indexable entity type fulfils.  The
orders index implements it over a remote adapter and a ``Synchronizer``.
``IndexRegistry`` holds the active indices by ID.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from orderindex.adapters.base.adapter import RemoteIndex
from orderindex.core.ledger import RecordCountLedger
from orderindex.core.projector import RecordProjector
from orderindex.core.synchronizer import Synchronizer
from orderindex.host import hooks as hook_names
from orderindex.host.platform import CommercePlatform
from orderindex.models.order import Order
from orderindex.models.result import ReindexReport, SyncAction, SyncResult

logger = logging.getLogger(__name__)


class SearchIndex(ABC):
    """Abstract indexable entity type.

    Implementations must keep ``supports`` free of I/O: it is called on every
    lifecycle signal.
    """

    @property
    @abstractmethod
    def index_id(self) -> str:
        """Short identifier, appended to the configured index name prefix."""

    @property
    @abstractmethod
    def admin_name(self) -> str:
        """Name displayed in admin screens."""

    @property
    @abstractmethod
    def remote(self) -> RemoteIndex:
        """The remote index adapter this index writes to."""

    @abstractmethod
    def supports(self, item: Any) -> bool:
        """Whether ``item`` can be handled by this index at all."""

    @abstractmethod
    def sync(self, item: Any) -> SyncResult:
        """Bring the remote records of ``item`` up to date."""

    @abstractmethod
    def delete_item(self, item: Any) -> SyncResult:
        """Remove every remote record of ``item``."""

    @abstractmethod
    def get_settings(self) -> dict[str, Any]:
        """Remote index settings."""

    @abstractmethod
    def get_synonyms(self) -> list[dict[str, Any]]:
        """Remote index synonyms."""

    @abstractmethod
    def re_index_items_count(self) -> int:
        """Number of items a full re-index walks over."""

    @abstractmethod
    def re_index(self, page: int, batch_size: int = 100) -> ReindexReport:
        """Re-index one page of items (1-based)."""

    def push_settings(self) -> None:
        """Write settings and synonyms to the remote index."""
        self.remote.set_settings(self.get_settings())
        self.remote.save_synonyms(self.get_synonyms(), replace_existing=True)
        logger.info("Pushed settings for index '%s'", self.index_id)

    def re_index_all(self, batch_size: int = 100) -> ReindexReport:
        """Re-index every item, page by page.

        Raises:
            ValueError: If ``batch_size`` is not positive.
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        total = self.re_index_items_count()
        pages = max(-(-total // batch_size), 1)
        report = ReindexReport(total_items=total)
        for page in range(1, pages + 1):
            page_report = self.re_index(page, batch_size)
            report.processed += page_report.processed
            report.failed += page_report.failed
            report.pages += 1
        logger.info(
            "Re-indexed '%s': %d processed, %d failed over %d page(s)",
            self.index_id,
            report.processed,
            report.failed,
            report.pages,
        )
        return report


ORDERS_INDEX_ID = "orders"

ORDERS_INDEX_SETTINGS: dict[str, Any] = {
    "searchableAttributes": [
        "id",
        "number",
        "customer.display_name",
        "customer.email",
        "billing.display_name",
        "shipping.display_name",
        "billing.email",
        "billing.phone",
        "billing.company",
        "shipping.company",
        "billing.address_1",
        "shipping.address_1",
        "billing.address_2",
        "shipping.address_2",
        "billing.city",
        "shipping.city",
        "billing.state",
        "shipping.state",
        "billing.postcode",
        "shipping.postcode",
        "billing.country",
        "shipping.country",
        "items.sku",
        "status_name",
        "order_total",
    ],
    "disableTypoToleranceOnAttributes": [
        "id",
        "number",
        "items.sku",
        "billing.phone",
        "order_total",
        "billing.postcode",
        "shipping.postcode",
    ],
    "customRanking": ["desc(date_timestamp)"],
    "attributesForFaceting": [
        "customer.display_name",
        "type",
        "items.sku",
        "order_total",
    ],
}


class OrdersIndex(SearchIndex):
    """Index of commerce orders.

    Args:
        platform: Host platform (repository, locale, hooks).
        remote: Remote index adapter.
        wait_on_delete: Default for blocking on stale-record deletes.
    """

    def __init__(self, platform: CommercePlatform, remote: RemoteIndex, wait_on_delete: bool = False) -> None:
        self.platform = platform
        self._remote = remote
        self.projector = RecordProjector(platform)
        self.ledger = RecordCountLedger(platform.orders, index_id=self.index_id)
        self.synchronizer = Synchronizer(
            remote=remote,
            projector=self.projector,
            ledger=self.ledger,
            hooks=platform.hooks,
            wait_on_delete=wait_on_delete,
        )

    @property
    def index_id(self) -> str:
        return ORDERS_INDEX_ID

    @property
    def admin_name(self) -> str:
        return "Orders"

    @property
    def remote(self) -> RemoteIndex:
        return self._remote

    def supports(self, item: Any) -> bool:
        return isinstance(item, Order)

    def sync(self, item: Any) -> SyncResult:
        if not self.supports(item):
            return SyncResult(action=SyncAction.SKIPPED)
        return self.synchronizer.sync(item)

    def delete_item(self, item: Any) -> SyncResult:
        if not self.supports(item):
            return SyncResult(action=SyncAction.SKIPPED)
        return self.synchronizer.delete(item)

    def get_settings(self) -> dict[str, Any]:
        return {key: list(value) for key, value in ORDERS_INDEX_SETTINGS.items()}

    def get_synonyms(self) -> list[dict[str, Any]]:
        return list(self.platform.hooks.apply_filters(hook_names.ORDERS_INDEX_SYNONYMS, []))

    def re_index_items_count(self) -> int:
        return self.platform.orders.count()

    def re_index(self, page: int, batch_size: int = 100) -> ReindexReport:
        """Sync one page of orders.

        The first page starts from a clean slate: the remote index is
        cleared and its settings pushed again.  A failing order is logged
        and counted; the page carries on.
        """
        if page == 1:
            self.remote.clear_objects()
            self.push_settings()

        report = ReindexReport(total_items=self.re_index_items_count(), pages=1)
        for order in self.platform.orders.list_page(page, batch_size):
            try:
                self.sync(order)
                report.processed += 1
            except Exception:
                report.failed += 1
                logger.warning("Re-index failed for order %s", order.id, exc_info=True)
        return report


class IndexNotFoundError(Exception):
    """Raised when a requested index is not registered."""


class IndexRegistry:
    """Registry of active search indices, keyed by ``index_id``."""

    def __init__(self) -> None:
        self._indices: dict[str, SearchIndex] = {}

    def register(self, index: SearchIndex) -> None:
        if index.index_id in self._indices:
            logger.warning("Overwriting existing index registration: %s", index.index_id)
        self._indices[index.index_id] = index
        logger.info("Registered index: %s", index.index_id)

    def get(self, index_id: str) -> SearchIndex:
        """Get a registered index by ID.

        Raises:
            IndexNotFoundError: If no index is registered under this ID.
        """
        if index_id not in self._indices:
            raise IndexNotFoundError(
                f"No index registered with id '{index_id}'. "
                f"Available indices: {list(self._indices.keys())}"
            )
        return self._indices[index_id]

    def close_all(self) -> None:
        """Release the network resources of every index."""
        for index_id, index in self._indices.items():
            try:
                index.remote.close()
            except Exception:
                logger.warning("Error closing index: %s", index_id, exc_info=True)
        self._indices.clear()

    @property
    def active_indices(self) -> list[str]:
        return list(self._indices.keys())

    def __iter__(self):
        return iter(self._indices.values())
