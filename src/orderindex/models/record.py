"""Search record models — The flat shape an order takes in the remote index.

Billing and shipping blocks share the same field names so that consumers can
compare them field by field.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CustomerBlock(BaseModel):
    """Registered customer as stored in a record."""

    id: int = Field(description="Customer ID")
    display_name: str = Field(default="", description="First and last name")
    email: str = Field(default="", description="Account email")


class AddressBlock(BaseModel):
    """Billing or shipping block as stored in a record."""

    display_name: str = Field(default="", description="Formatted full name")
    email: str = Field(default="", description="Contact email")
    phone: str = Field(default="", description="Contact phone")
    company: str = Field(default="", description="Company")
    address_1: str = Field(default="", description="Address line 1")
    address_2: str = Field(default="", description="Address line 2")
    city: str = Field(default="", description="City")
    state: str = Field(default="", description="State / county")
    postcode: str = Field(default="", description="Postcode")
    country: str = Field(default="", description="Country display name, or code when unknown")


class ItemBlock(BaseModel):
    """Line item as stored in a record."""

    id: int = Field(description="Order item ID")
    name: str = Field(description="Escaped item name")
    qty: int = Field(description="Quantity")
    sku: str = Field(default="", description="Product SKU")


class OrderRecord(BaseModel):
    """One remote record for an order, addressed by ``objectID``."""

    model_config = ConfigDict(populate_by_name=True)

    object_id: str = Field(alias="objectID", description="Remote address: '{order_id}-{record_index}'")
    id: int = Field(description="Order ID")
    type: str = Field(description="Order type")
    number: str = Field(description="Display order number")
    status: str = Field(description="Status slug")
    status_name: str = Field(description="Human-readable status")
    date_timestamp: int = Field(default=0, description="Creation time as UNIX seconds (0 if unknown)")
    date_formatted: str = Field(default="", description="Creation date in the store's date format")
    order_total: float = Field(default=0.0, description="Grand total")
    formatted_order_total: str = Field(default="", description="Grand total with currency")
    items_count: int = Field(default=0, description="Total quantity of items")
    payment_method_title: str = Field(default="", description="Payment method label")
    shipping_method_title: str = Field(default="", description="Shipping method label")
    customer: CustomerBlock | None = Field(default=None, description="Registered customer")
    billing: AddressBlock = Field(default_factory=AddressBlock, description="Billing block")
    shipping: AddressBlock = Field(default_factory=AddressBlock, description="Shipping block")
    items: list[ItemBlock] = Field(default_factory=list, description="Line items")

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON object sent to the remote index."""
        return self.model_dump(by_alias=True, exclude_none=True)
