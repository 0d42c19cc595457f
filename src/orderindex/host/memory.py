"""In-memory host platform — Used for local development and tests.

Orders can be seeded from a JSON or YAML file holding a list of order objects.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable
from pathlib import Path

from orderindex.host.platform import CommercePlatform, OrderRepository, RepositoryError
from orderindex.models.order import Order

logger = logging.getLogger(__name__)


class InMemoryOrderRepository(OrderRepository):
    """Dict-backed order store.

    Orders are copied on the way in and out so callers never share state with
    the store, mirroring a database round-trip.
    """

    def __init__(self, orders: Iterable[Order] = ()) -> None:
        self._orders: dict[int, Order] = {}
        self._lock = threading.Lock()
        self.save_calls = 0
        for order in orders:
            self._orders[order.id] = order.model_copy(deep=True)

    def get(self, order_id: int) -> Order | None:
        with self._lock:
            order = self._orders.get(order_id)
            return order.model_copy(deep=True) if order else None

    def save(self, order: Order) -> None:
        with self._lock:
            self.save_calls += 1
            self._orders[order.id] = order.model_copy(deep=True)

    def delete(self, order_id: int) -> None:
        with self._lock:
            self._orders.pop(order_id, None)

    def list_page(self, page: int, limit: int) -> list[Order]:
        if page < 1 or limit < 1:
            return []
        with self._lock:
            ordered = sorted(self._orders.values(), key=lambda o: o.id, reverse=True)
            start = (page - 1) * limit
            return [o.model_copy(deep=True) for o in ordered[start : start + limit]]

    def count(self) -> int:
        with self._lock:
            return len(self._orders)


def load_orders(path: str | Path) -> list[Order]:
    """Load a list of orders from a JSON or YAML file."""
    seed_path = Path(path)
    if not seed_path.exists():
        raise RepositoryError(f"Seed file not found: {seed_path}")

    with open(seed_path, encoding="utf-8") as f:
        if seed_path.suffix in {".yaml", ".yml"}:
            import yaml  # type: ignore[import-untyped]

            data = yaml.safe_load(f) or []
        else:
            data = json.load(f)

    if not isinstance(data, list):
        raise RepositoryError(f"Seed file must contain a list of orders: {seed_path}")
    return [Order.model_validate(item) for item in data]


def create_platform(seed_file: str | None = None) -> CommercePlatform:
    """Build an in-memory platform, optionally seeded from ``seed_file``."""
    orders = load_orders(seed_file) if seed_file else []
    logger.info("In-memory platform created with %d orders", len(orders))
    return CommercePlatform(orders=InMemoryOrderRepository(orders))
