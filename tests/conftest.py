"""Shared test fixtures and configuration."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from orderindex.adapters.memory.adapter import InMemoryIndexAdapter
from orderindex.config.settings import Settings
from orderindex.core.index import OrdersIndex
from orderindex.host.memory import InMemoryOrderRepository
from orderindex.host.platform import CommercePlatform
from orderindex.models.order import Address, Customer, LineItem, Order


@pytest.fixture(autouse=True)
def _isolate_root_logging():
    """Drop handlers installed by setup_logging() so they do not outlive the test."""
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance backed by the in-memory index."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        algolia={
            "backend": "memory",
            "application_id": "TESTAPP",
            "search_api_key": "search-key",
            "index_name_prefix": "wp_",
        },
    )


@pytest.fixture
def sample_order() -> Order:
    """A regular order with a registered customer and two line items."""
    return Order(
        id=42,
        number="1042",
        status="wc-processing",
        date_created=datetime(2024, 3, 5, 14, 30, tzinfo=UTC),
        total=129.5,
        currency="USD",
        payment_method_title="Credit card",
        shipping_method_title="Flat rate",
        customer=Customer(id=7, first_name="Ada", last_name="Lovelace", email="ada@example.com"),
        billing=Address(
            first_name="Ada",
            last_name="Lovelace",
            company="Analytical Engines",
            address_1="12 St James's Square",
            city="London",
            postcode="SW1Y 4JH",
            country="GB",
            email="billing@example.com",
            phone="+44 20 7946 0000",
        ),
        shipping=Address(
            first_name="Ada",
            last_name="Lovelace",
            company="Analytical Engines",
            address_1="12 St James's Square",
            city="London",
            postcode="SW1Y 4JH",
            country="GB",
        ),
        items=[
            LineItem(id=501, name="Brass gear", quantity=3, sku="GEAR-01"),
            LineItem(id=502, name="Punch cards & ink", quantity=1, sku=None),
        ],
    )


@pytest.fixture
def guest_order() -> Order:
    """A guest order without a creation date."""
    return Order(
        id=77,
        status="pending",
        total=10.0,
        billing=Address(first_name="Grace", last_name="Hopper", country="ZZ"),
        shipping=Address(first_name="Grace", last_name="Hopper", city="Arlington", country="US"),
        items=[LineItem(id=900, name="Compiler manual", quantity=2, sku="MAN-1")],
    )


@pytest.fixture
def repository(sample_order: Order, guest_order: Order) -> InMemoryOrderRepository:
    return InMemoryOrderRepository([sample_order, guest_order])


@pytest.fixture
def platform(repository: InMemoryOrderRepository) -> CommercePlatform:
    return CommercePlatform(orders=repository)


@pytest.fixture
def remote() -> InMemoryIndexAdapter:
    return InMemoryIndexAdapter(index_name="wp_orders")


@pytest.fixture
def orders_index(platform: CommercePlatform, remote: InMemoryIndexAdapter) -> OrdersIndex:
    return OrdersIndex(platform, remote)
