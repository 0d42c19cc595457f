"""Hit presenter — Renders order search hits for the admin autocomplete.

Hits may carry Algolia's ``_highlightResult``.  When they do, address
attributes are shown only when they matched the query, using the
highlighted value.  Billing and shipping values that are identical are
collapsed into a single line.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

ADDRESS_ATTRIBUTES: list[tuple[str, str]] = [
    ("phone", "Phone"),
    ("company", "Company"),
    ("address_1", "Address 1"),
    ("address_2", "Address 2"),
    ("city", "City"),
    ("state", "State"),
    ("postcode", "Postcode"),
    ("country", "Country"),
]


class HitSummary(BaseModel):
    """Display lines for one order hit."""

    object_id: str = Field(default="", description="Remote address of the hit")
    order_id: int | None = Field(default=None, description="Order ID")
    title: str = Field(description="'#number - date'")
    description: str = Field(description="Status, billing name, and payment method")
    customer_line: str = Field(default="", description="Best matching name and email")
    totals_line: str = Field(default="", description="Item count and formatted total")
    methods_line: str = Field(default="", description="Shipping and payment methods")
    lines: list[str] = Field(default_factory=list, description="Matching billing / shipping attribute lines")


class HitPresenter:
    """Builds ``HitSummary`` objects from raw hits."""

    def render(self, hit: dict[str, Any]) -> HitSummary:
        billing = hit.get("billing") or {}
        methods = [m for m in (hit.get("shipping_method_title"), hit.get("payment_method_title")) if m]

        return HitSummary(
            object_id=str(hit.get("objectID", "")),
            order_id=hit.get("id"),
            title=f"#{self._text(hit, 'number')} - {hit.get('date_formatted', '')}",
            description=(
                f"{self._text(hit, 'status_name')} | Placed by {billing.get('display_name', '')} "
                f"using {hit.get('payment_method_title', '')}"
            ),
            customer_line=f"{self.display_name(hit)} ({self.email(hit)})",
            totals_line=f"{hit.get('items_count', 0)} item(s) {hit.get('formatted_order_total', '')}".strip(),
            methods_line=" | ".join(methods),
            lines=[line for attr, title in ADDRESS_ATTRIBUTES for line in self.address_lines(hit, attr, title)],
        )

    def render_all(self, hits: list[dict[str, Any]]) -> list[HitSummary]:
        return [self.render(hit) for hit in hits]

    def address_lines(self, hit: dict[str, Any], attribute: str, title: str) -> list[str]:
        """Lines for one billing / shipping attribute.

        Equal values render once as ``"{title}: value"``; different values
        render as separate ``Billing`` and ``Shipping`` lines.
        """
        billing_value = self.attribute(hit, f"billing.{attribute}")
        shipping_value = self.attribute(hit, f"shipping.{attribute}")

        if billing_value == shipping_value:
            return [f"{title}: {billing_value}"] if billing_value else []

        lines = []
        if billing_value:
            lines.append(f"Billing {title}: {billing_value}")
        if shipping_value:
            lines.append(f"Shipping {title}: {shipping_value}")
        return lines

    def attribute(self, hit: dict[str, Any], path: str) -> str:
        """Value at dotted ``path``: the highlighted match if highlighting is
        present (empty when it did not match), else the raw value."""
        highlight = hit.get("_highlightResult")
        if highlight is None:
            value = _dig(hit, path)
            return "" if value is None or isinstance(value, dict | list) else str(value)

        node = _dig(highlight, path)
        if not isinstance(node, dict) or node.get("matchLevel") == "none":
            return ""
        return str(node.get("value", ""))

    def display_name(self, hit: dict[str, Any]) -> str:
        highlight = hit.get("_highlightResult")
        if highlight is None:
            source = hit.get("customer") or hit.get("billing") or {}
            return str(source.get("display_name", ""))

        for level in ("full", "partial"):
            for block in ("customer", "billing", "shipping"):
                node = _dig(highlight, f"{block}.display_name")
                if block in hit and isinstance(node, dict) and node.get("matchLevel") == level:
                    return str(node.get("value", ""))

        block = "customer" if "customer" in hit else "billing"
        node = _dig(highlight, f"{block}.display_name")
        return str(node.get("value", "")) if isinstance(node, dict) else ""

    def email(self, hit: dict[str, Any]) -> str:
        highlight = hit.get("_highlightResult")
        if highlight is None:
            source = hit.get("customer") or hit.get("billing") or {}
            return str(source.get("email", ""))

        for block in ("customer", "billing"):
            node = _dig(highlight, f"{block}.email")
            if block in hit and isinstance(node, dict) and node.get("matchLevel") != "none":
                return str(node.get("value", ""))

        block = "customer" if "customer" in hit else "billing"
        node = _dig(highlight, f"{block}.email")
        return str(node.get("value", "")) if isinstance(node, dict) else ""

    @staticmethod
    def _text(hit: dict[str, Any], attribute: str) -> str:
        # Prefer the highlighted / snippeted value for top-level attributes.
        for key in ("_snippetResult", "_highlightResult"):
            node = (hit.get(key) or {}).get(attribute)
            if isinstance(node, dict) and "value" in node:
                return str(node["value"])
        return str(hit.get(attribute, ""))


def _dig(data: dict[str, Any], path: str) -> Any:
    node: Any = data
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node
