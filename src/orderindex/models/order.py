"""Order entity — The commerce platform's order as seen by the indexer.

The order is owned by the host platform.  The indexer only reads it, except
for the record-count entry it keeps in ``meta``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_ORDER_TYPE = "shop_order"


class Customer(BaseModel):
    """Registered customer attached to an order."""

    id: int = Field(description="Customer (user) ID")
    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    email: str = Field(default="", description="Account email")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Address(BaseModel):
    """Billing or shipping address block."""

    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    company: str = Field(default="", description="Company name")
    address_1: str = Field(default="", description="Address line 1")
    address_2: str = Field(default="", description="Address line 2")
    city: str = Field(default="", description="City")
    state: str = Field(default="", description="State / county code")
    postcode: str = Field(default="", description="Postcode / ZIP")
    country: str = Field(default="", description="ISO 3166-1 alpha-2 country code")
    email: str = Field(default="", description="Contact email (billing only)")
    phone: str = Field(default="", description="Contact phone (billing only)")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class LineItem(BaseModel):
    """A product line on an order."""

    id: int = Field(description="Order item ID")
    name: str = Field(description="Item name as shown on the order")
    quantity: int = Field(default=1, description="Quantity ordered")
    sku: str | None = Field(default=None, description="Product SKU, None when the product is gone")


class Order(BaseModel):
    """An order as exposed by the host commerce platform."""

    id: int = Field(description="Stable order ID")
    type: str = Field(default=DEFAULT_ORDER_TYPE, description="Order type, e.g. shop_order or shop_order_refund")
    number: str | None = Field(default=None, description="Display order number (defaults to the ID)")
    status: str = Field(default="pending", description="Status slug, with or without the 'wc-' prefix")
    date_created: datetime | None = Field(default=None, description="Creation timestamp")
    total: float = Field(default=0.0, description="Order grand total")
    currency: str = Field(default="USD", description="ISO 4217 currency code")
    payment_method_title: str = Field(default="", description="Payment method label")
    shipping_method_title: str = Field(default="", description="Shipping method label(s)")
    customer: Customer | None = Field(default=None, description="Registered customer, None for guest orders")
    billing: Address = Field(default_factory=Address, description="Billing address")
    shipping: Address = Field(default_factory=Address, description="Shipping address")
    items: list[LineItem] = Field(default_factory=list, description="Ordered line items")
    meta: dict[str, Any] = Field(default_factory=dict, description="Order meta data")

    @property
    def order_number(self) -> str:
        return self.number if self.number else str(self.id)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def get_meta(self, key: str, default: Any = None) -> Any:
        return self.meta.get(key, default)

    def update_meta(self, key: str, value: Any) -> None:
        self.meta[key] = value

    def delete_meta(self, key: str) -> None:
        self.meta.pop(key, None)
