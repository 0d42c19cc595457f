"""Record projector — Turns an order into the records stored remotely.

A projection is a pure function of the order and the store's display
lookups.  Regular orders produce exactly one record today.  Addresses are
positional (``{order_id}-{record_index}``), so an order may produce several
records without any change to the synchronization protocol.
"""

from __future__ import annotations

import html
import logging

from orderindex.host import hooks as hook_names
from orderindex.host.platform import CommercePlatform
from orderindex.models.order import DEFAULT_ORDER_TYPE, Address, Order
from orderindex.models.record import AddressBlock, CustomerBlock, ItemBlock, OrderRecord

logger = logging.getLogger(__name__)


class RecordProjector:
    """Projects orders into ``OrderRecord`` objects.

    Attributes:
        platform: Host platform providing locale lookups and filters.
    """

    def __init__(self, platform: CommercePlatform) -> None:
        self.platform = platform

    def object_id(self, order_id: int, record_index: int) -> str:
        """Remote address of record ``record_index`` of ``order_id``.

        Integrators may rewrite the address through the
        ``get_order_object_id`` filter.
        """
        return str(
            self.platform.hooks.apply_filters(
                hook_names.GET_ORDER_OBJECT_ID,
                f"{order_id}-{record_index}",
                order_id,
                record_index,
            )
        )

    def project(self, order: Order) -> list[OrderRecord]:
        """Project ``order`` into zero or more records.

        Returns an empty list when the commerce platform is inactive or the
        order is not a regular order (refunds and other types are not
        indexed).  An empty projection means the order should have no
        presence in the index.
        """
        if not self.platform.active:
            logger.debug("Commerce platform inactive, nothing projected for order %s", order.id)
            return []
        if order.type != DEFAULT_ORDER_TYPE:
            return []

        locale = self.platform.locale
        created = order.date_created

        record = OrderRecord(
            object_id=self.object_id(order.id, 0),
            id=order.id,
            type=order.type,
            number=order.order_number,
            status=order.status,
            status_name=locale.status_name(order.status),
            date_timestamp=int(created.timestamp()) if created else 0,
            date_formatted=locale.format_date(created) if created else "",
            order_total=float(order.total),
            formatted_order_total=locale.format_price(order.total, order.currency),
            items_count=order.item_count,
            payment_method_title=order.payment_method_title,
            shipping_method_title=order.shipping_method_title,
            customer=(
                CustomerBlock(
                    id=order.customer.id,
                    display_name=order.customer.display_name,
                    email=order.customer.email,
                )
                if order.customer
                else None
            ),
            billing=self._address_block(order.billing, with_contact=True),
            shipping=self._address_block(order.shipping, with_contact=False),
            items=[
                ItemBlock(
                    id=item.id,
                    name=self.platform.hooks.apply_filters(
                        hook_names.ORDER_ITEM_NAME,
                        html.escape(item.name),
                        order,
                        False,
                    ),
                    qty=item.quantity,
                    sku=item.sku or "",
                )
                for item in order.items
            ],
        )
        return [record]

    def _address_block(self, address: Address, with_contact: bool) -> AddressBlock:
        return AddressBlock(
            display_name=address.full_name,
            email=address.email if with_contact else "",
            phone=address.phone if with_contact else "",
            company=address.company,
            address_1=address.address_1,
            address_2=address.address_2,
            city=address.city,
            state=address.state,
            postcode=address.postcode,
            country=self.platform.locale.country_name(address.country),
        )
