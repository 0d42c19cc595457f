"""Host platform contract — What the indexer needs from the commerce platform.

The host owns orders, their storage, localization, and lifecycle hooks.  The
indexer depends only on the abstractions below:

  - ``OrderRepository``: load, persist, and page through orders
  - ``StoreLocale``: status, country, date, and price display strings
  - ``HookRegistry``: lifecycle actions and override filters
  - ``doing_autosave()``: whether the current request is a background autosave
"""

from __future__ import annotations

import contextlib
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextvars import ContextVar
from datetime import datetime

from pydantic import BaseModel, Field

from orderindex.host.hooks import HookRegistry
from orderindex.models.order import Order

_autosave: ContextVar[bool] = ContextVar("orderindex_autosave", default=False)


def doing_autosave() -> bool:
    """Return True while the current context is running an autosave."""
    return _autosave.get()


@contextlib.contextmanager
def autosave() -> Iterator[None]:
    """Mark the enclosed block as an autosave request."""
    token = _autosave.set(True)
    try:
        yield
    finally:
        _autosave.reset(token)


class RepositoryError(Exception):
    """Raised when the order repository cannot load or persist an order."""


class OrderRepository(ABC):
    """Storage-side access to orders."""

    @abstractmethod
    def get(self, order_id: int) -> Order | None:
        """Load an order by ID, or None if it does not exist."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist the order, including its meta data.

        Raises:
            RepositoryError: If the order could not be written.
        """

    @abstractmethod
    def list_page(self, page: int, limit: int) -> list[Order]:
        """Return one page (1-based) of orders, newest first."""

    @abstractmethod
    def count(self) -> int:
        """Total number of orders."""


DEFAULT_ORDER_STATUSES: dict[str, str] = {
    "pending": "Pending payment",
    "processing": "Processing",
    "on-hold": "On hold",
    "completed": "Completed",
    "cancelled": "Cancelled",
    "refunded": "Refunded",
    "failed": "Failed",
    "checkout-draft": "Draft",
}

DEFAULT_COUNTRIES: dict[str, str] = {
    "AU": "Australia",
    "BR": "Brazil",
    "CA": "Canada",
    "CN": "China",
    "CR": "Costa Rica",
    "DE": "Germany",
    "ES": "Spain",
    "FR": "France",
    "GB": "United Kingdom (UK)",
    "IN": "India",
    "IT": "Italy",
    "JP": "Japan",
    "MX": "Mexico",
    "NL": "Netherlands",
    "US": "United States (US)",
}

DEFAULT_CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CRC": "₡",
}


class StoreLocale(BaseModel):
    """Display strings used when projecting orders."""

    statuses: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ORDER_STATUSES))
    countries: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_COUNTRIES))
    currency_symbols: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CURRENCY_SYMBOLS))
    date_format: str = Field(default="%B %d, %Y", description="strftime format for dates")

    def status_name(self, status: str) -> str:
        slug = status.removeprefix("wc-")
        return self.statuses.get(slug, status)

    def country_name(self, code: str) -> str:
        return self.countries.get(code, code)

    def format_date(self, value: datetime) -> str:
        return value.strftime(self.date_format)

    def format_price(self, amount: float, currency: str) -> str:
        symbol = self.currency_symbols.get(currency, f"{currency} ")
        return f"{symbol}{amount:,.2f}"


class CommercePlatform:
    """Bundle of the host services the indexer consumes.

    Attributes:
        orders: Order repository.
        locale: Display-string lookups.
        hooks: Action and filter registry.
        active: False when the commerce extension is not loaded; nothing is
            projected in that case.
    """

    def __init__(
        self,
        orders: OrderRepository,
        locale: StoreLocale | None = None,
        hooks: HookRegistry | None = None,
        active: bool = True,
    ) -> None:
        self.orders = orders
        self.locale = locale or StoreLocale()
        self.hooks = hooks or HookRegistry()
        self.active = active
