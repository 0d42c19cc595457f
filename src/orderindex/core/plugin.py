"""Plugin bootstrap — Wires settings, host platform, adapter, index, and watcher.

Lifecycle::

    plugin = OrdersSearchPlugin(settings)
    plugin.load()        # build adapter + index, subscribe the watcher
    ...
    plugin.shutdown()    # close remote connections
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from orderindex.adapters.algolia.adapter import AlgoliaIndexAdapter
from orderindex.adapters.base.adapter import RemoteIndex
from orderindex.adapters.base.exceptions import ConfigurationError
from orderindex.adapters.memory.adapter import InMemoryIndexAdapter
from orderindex.core.index import ORDERS_INDEX_ID, IndexRegistry, OrdersIndex
from orderindex.core.watcher import OrdersWatcher
from orderindex.host.platform import CommercePlatform

if TYPE_CHECKING:
    from orderindex.config.settings import Settings

logger = logging.getLogger(__name__)


def create_adapter(settings: Settings, index_id: str) -> RemoteIndex:
    """Build the remote adapter declared in ``settings.algolia.backend``."""
    algolia = settings.algolia
    index_name = algolia.index_name(index_id)

    if algolia.backend == "memory":
        return InMemoryIndexAdapter(index_name=index_name)

    adapter = AlgoliaIndexAdapter(
        application_id=algolia.application_id,
        api_key=algolia.api_key,
        index_name=index_name,
        search_api_key=algolia.search_api_key or None,
        timeout=algolia.timeout,
        wait_poll_interval=algolia.wait_poll_interval,
        wait_timeout=algolia.wait_timeout,
    )
    adapter.initialize()
    return adapter


def load_platform(settings: Settings) -> CommercePlatform:
    """Import and call the platform factory named in ``settings.platform.factory``.

    The factory is a ``"module.path:callable"`` string.  The in-memory
    factory receives the configured seed file.
    """
    spec = settings.platform.factory
    module_path, sep, attr = spec.partition(":")
    if not sep or not module_path or not attr:
        raise ConfigurationError(f"Platform factory must look like 'module:callable', got '{spec}'")

    try:
        module = importlib.import_module(module_path)
        factory: Callable[..., CommercePlatform] = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot load platform factory '{spec}': {e}") from e

    if settings.platform.seed_file:
        return factory(seed_file=settings.platform.seed_file)
    return factory()


class OrdersSearchPlugin:
    """Top-level object of the orders search integration.

    Attributes:
        settings: Application configuration.
        platform: Host platform.
        registry: Active indices.
        orders_index: The orders index (after ``load``).
        watcher: Lifecycle watcher (after ``load``).
    """

    def __init__(
        self,
        settings: Settings,
        platform: CommercePlatform | None = None,
        adapter: RemoteIndex | None = None,
    ) -> None:
        self.settings = settings
        self.platform = platform
        self.registry = IndexRegistry()
        self.orders_index: OrdersIndex | None = None
        self.watcher: OrdersWatcher | None = None
        self._adapter = adapter

    @property
    def loaded(self) -> bool:
        return self.orders_index is not None

    def load(self) -> None:
        """Build the orders index and start watching order changes.

        Does nothing when the commerce platform is inactive.
        """
        if self.loaded:
            return
        if self.platform is None:
            self.platform = load_platform(self.settings)
        if not self.platform.active:
            logger.warning("Commerce platform is not active; orders index not loaded")
            return

        adapter = self._adapter or create_adapter(self.settings, ORDERS_INDEX_ID)
        self.orders_index = OrdersIndex(
            self.platform,
            adapter,
            wait_on_delete=self.settings.algolia.wait_on_delete,
        )
        self.registry.register(self.orders_index)

        self.watcher = OrdersWatcher(self.orders_index, self.platform)
        self.watcher.watch()
        logger.info("Orders search plugin loaded (index: %s)", adapter.index_name)

    def shutdown(self) -> None:
        if self.watcher:
            self.watcher.unwatch()
        self.registry.close_all()
        self.orders_index = None
        self.watcher = None
        logger.info("Orders search plugin shut down")

    def require_orders_index(self) -> OrdersIndex:
        if self.orders_index is None:
            raise RuntimeError("Orders index not loaded. Call load() first.")
        return self.orders_index
