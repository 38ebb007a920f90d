"""UCP Order Capability (dev.ucp.shopping.order).

Read-only view of finalized backend orders with fulfillment history and
refund adjustments.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..backend.base import CommerceBackend, response_data
from ..backend import documents
from ..mapping import (
    DEFAULT_CURRENCY,
    address_from_backend,
    build_totals,
    dig,
    line_item_from_backend,
    money_from_set,
    nodes,
    record_currency,
)
from ..models.orders import (
    UCPAdjustment,
    UCPAdjustmentType,
    UCPExpectation,
    UCPFulfillmentEvent,
    UCPFulfillmentStatus,
    UCPOrder,
    UCPOrderLineItem,
)

logger = logging.getLogger(__name__)

# Backend fulfillment status -> UCP fulfillment event status
FULFILLMENT_STATUS_MAP: Dict[str, UCPFulfillmentStatus] = {
    "SUCCESS": UCPFulfillmentStatus.DELIVERED,
    "IN_PROGRESS": UCPFulfillmentStatus.IN_TRANSIT,
    "FAILURE": UCPFulfillmentStatus.FAILED,
    "CANCELLED": UCPFulfillmentStatus.FAILED,
}

# Tag convention linking an order back to the checkout that produced it
CHECKOUT_TAG_PREFIX = "checkout_"


def map_fulfillment_status(status: Optional[str]) -> UCPFulfillmentStatus:
    return FULFILLMENT_STATUS_MAP.get(status or "", UCPFulfillmentStatus.PENDING)


def _fulfillment_line_items(fulfillment: Dict[str, Any]) -> List[Dict[str, Any]]:
    return nodes(fulfillment.get("fulfillmentLineItems"))


def map_fulfillment_events(fulfillments: Optional[List[Dict[str, Any]]]) -> List[UCPFulfillmentEvent]:
    events = []
    for fulfillment in fulfillments or []:
        tracking = (fulfillment.get("trackingInfo") or [{}])[0] or {}
        events.append(UCPFulfillmentEvent(
            id=fulfillment["id"],
            status=map_fulfillment_status(fulfillment.get("status")),
            created_at=fulfillment.get("createdAt"),
            line_item_ids=[
                node["lineItem"]["id"]
                for node in _fulfillment_line_items(fulfillment)
                if dig(node, "lineItem", "id")
            ],
            tracking_number=tracking.get("number"),
            tracking_url=tracking.get("url"),
            carrier=tracking.get("company"),
        ))
    return events


def fulfilled_quantities(fulfillments: Optional[List[Dict[str, Any]]]) -> Dict[str, int]:
    """Quantity per line item ID shipped by fulfillments that did not fail."""
    totals: Dict[str, int] = {}
    for fulfillment in fulfillments or []:
        if map_fulfillment_status(fulfillment.get("status")) is UCPFulfillmentStatus.FAILED:
            continue
        for node in _fulfillment_line_items(fulfillment):
            line_item_id = dig(node, "lineItem", "id")
            if line_item_id:
                totals[line_item_id] = totals.get(line_item_id, 0) + (node.get("quantity") or 0)
    return totals


def map_refund_adjustments(refunds: Optional[List[Dict[str, Any]]], currency: str) -> List[UCPAdjustment]:
    return [
        UCPAdjustment(
            id=refund["id"],
            type=UCPAdjustmentType.REFUND,
            amount=money_from_set(refund.get("totalRefundedSet"), currency),
            reason=refund.get("note"),
            created_at=refund.get("createdAt"),
        )
        for refund in refunds or []
    ]


def map_order(
    record: Dict[str, Any],
    checkout_id: Optional[str] = None,
    default_currency: str = DEFAULT_CURRENCY,
) -> UCPOrder:
    """Map a finalized backend order to a UCP Order."""
    currency = record_currency(record, default_currency)
    fulfillments = record.get("fulfillments")
    shipped = fulfilled_quantities(fulfillments)

    line_items = []
    for node in nodes(record.get("lineItems")):
        base = line_item_from_backend(node, currency)
        line_items.append(UCPOrderLineItem(
            id=node["id"],
            product_id=base.product_id,
            variant_id=base.variant_id,
            quantity=base.quantity,
            price=base.price,
            title=base.title,
            sku=base.sku,
            image_url=base.image_url,
            fulfilled_quantity=shipped.get(node["id"], 0),
            fulfillable_quantity=node.get("fulfillableQuantity"),
        ))

    expectations = []
    destination = address_from_backend(record.get("shippingAddress"))
    if destination is not None:
        expectations.append(UCPExpectation(
            id=f"exp-{record['id']}",
            method="shipping",
            line_item_ids=[item.id for item in line_items],
            destination=destination,
        ))

    return UCPOrder(
        id=record["id"],
        # no draft order back-reference on orders; fall back to the order id
        checkout_id=checkout_id or record["id"],
        currency=currency,
        permalink_url=record.get("statusPageUrl"),
        line_items=line_items,
        expectations=expectations,
        events=map_fulfillment_events(fulfillments),
        adjustments=map_refund_adjustments(record.get("refunds"), currency),
        totals=build_totals(record, currency),
    )


class UCPOrderCapability:
    """UCP Order capability backed by finalized orders."""

    def __init__(
        self,
        backend: CommerceBackend,
        default_currency: str = DEFAULT_CURRENCY,
        line_items_page_size: int = 50,
        default_list_limit: int = 20,
    ) -> None:
        self._backend = backend
        self._default_currency = default_currency
        self._page_size = line_items_page_size
        self._default_list_limit = default_list_limit

    async def get_order(self, order_id: str) -> Optional[UCPOrder]:
        """Get an order by ID, or None if it does not exist."""
        response = await self._backend.execute(
            documents.ORDER_QUERY,
            {"id": order_id, "lineItemsFirst": self._page_size},
        )
        record = response_data(response).get("order")
        if not record:
            return None
        return map_order(record, default_currency=self._default_currency)

    async def list_orders(self, limit: Optional[int] = None) -> List[UCPOrder]:
        """List orders, newest first."""
        response = await self._backend.execute(
            documents.ORDERS_QUERY,
            {"first": limit or self._default_list_limit, "lineItemsFirst": self._page_size},
        )
        return [
            map_order(node, default_currency=self._default_currency)
            for node in nodes(response_data(response).get("orders"))
        ]

    async def get_order_by_checkout_id(self, checkout_id: str) -> Optional[UCPOrder]:
        """
        Best-effort lookup of the order produced by a checkout.

        Relies on the order being tagged ``checkout_<id>``. Tags are neither
        unique nor guaranteed to exist, so None does not prove the checkout
        produced no order.
        """
        response = await self._backend.execute(
            documents.ORDERS_SEARCH_QUERY,
            {
                "first": 1,
                "query": f"tag:{CHECKOUT_TAG_PREFIX}{checkout_id}",
                "lineItemsFirst": self._page_size,
            },
        )
        matches = nodes(response_data(response).get("orders"))
        if not matches:
            logger.debug(f"No order tagged for checkout: checkout_id={checkout_id}")
            return None
        return map_order(matches[0], checkout_id=checkout_id, default_currency=self._default_currency)

    async def count_orders(self) -> int:
        response = await self._backend.execute(documents.ORDERS_COUNT_QUERY)
        return dig(response_data(response), "ordersCount", "count") or 0


__all__ = [
    "FULFILLMENT_STATUS_MAP",
    "CHECKOUT_TAG_PREFIX",
    "map_fulfillment_status",
    "map_fulfillment_events",
    "fulfilled_quantities",
    "map_refund_adjustments",
    "map_order",
    "UCPOrderCapability",
]
