"""Response formatting for UCP consumers.

Final pass over mapped entities: every amount becomes integer minor units
and line items are wrapped in the UCP ``{id, item, quantity, totals}``
envelope. Structural fields (buyer, messages, links, fulfillment, order) pass
through unchanged. Transport layers return the result as-is.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Union

from .mapping import DEFAULT_CURRENCY
from .models.cart import UCPCart
from .models.checkout import UCPCheckout
from .models.common import UCPLineItem, UCPTotal, compact
from .models.orders import UCPOrder, UCPOrderLineItem
from .money import money_to_ucp

DEFAULT_RESPONSE_TTL = timedelta(hours=24)

LineItem = Union[UCPLineItem, UCPOrderLineItem]


def format_line_item(line_item: LineItem) -> Dict[str, Any]:
    """Wrap a line item in the UCP envelope with a minor unit ``line_total``."""
    price = money_to_ucp(line_item.price) if line_item.price else 0
    result: Dict[str, Any] = {
        "id": line_item.variant_id or line_item.product_id,
        "item": compact({
            "id": line_item.product_id,
            "variant_id": line_item.variant_id,
            "title": line_item.title,
            "sku": line_item.sku,
            "image_url": line_item.image_url,
            "price": price,
        }),
        "quantity": line_item.quantity,
    }
    if price > 0:
        result["totals"] = [{"type": "line_total", "amount": price * line_item.quantity}]
    return result


def format_totals(totals: List[UCPTotal]) -> List[Dict[str, Any]]:
    return [
        compact({
            "type": total.type.value,
            "amount": money_to_ucp(total.amount),
            "label": total.label,
        })
        for total in totals
    ]


def _default_expires_at(now: Optional[datetime]) -> str:
    now = now or datetime.now(timezone.utc)
    return (now + DEFAULT_RESPONSE_TTL).isoformat()


def format_checkout_response(
    checkout: UCPCheckout,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Format a checkout for UCP consumers.

    ``expires_at`` falls back to now + 24h when the mapper left it unset.
    """
    return compact({
        "ucp": checkout.ucp,
        "id": checkout.id,
        "status": checkout.status.value,
        "currency": checkout.currency or DEFAULT_CURRENCY,
        "expires_at": checkout.expires_at or _default_expires_at(now),
        "line_items": [format_line_item(item) for item in checkout.line_items],
        "totals": format_totals(checkout.totals),
        "buyer": checkout.buyer.to_dict() if checkout.buyer else None,
        "messages": [m.to_dict() for m in checkout.messages] or None,
        "links": [link.to_dict() for link in checkout.links],
        "continue_url": checkout.continue_url,
        "order": checkout.order.to_dict() if checkout.order else None,
        "fulfillment": checkout.fulfillment_dict(),
    })


def format_cart_response(cart: UCPCart) -> Dict[str, Any]:
    """Format a cart for UCP consumers."""
    return compact({
        "ucp": cart.ucp,
        "id": cart.id,
        "currency": cart.currency or DEFAULT_CURRENCY,
        "line_items": [format_line_item(item) for item in cart.line_items],
        "totals": format_totals(cart.totals),
        "buyer": cart.buyer.to_dict() if cart.buyer else None,
        "continue_url": cart.continue_url,
        "expires_at": cart.expires_at,
    })


def format_order_response(order: UCPOrder) -> Dict[str, Any]:
    """Format an order for UCP consumers."""
    line_items = []
    for item in order.line_items:
        formatted = format_line_item(item)
        formatted["id"] = item.id
        formatted["fulfilled_quantity"] = item.fulfilled_quantity
        if item.fulfillable_quantity is not None:
            formatted["fulfillable_quantity"] = item.fulfillable_quantity
        line_items.append(formatted)

    adjustments = []
    for adjustment in order.adjustments:
        formatted_adjustment = adjustment.to_dict()
        formatted_adjustment["amount"] = money_to_ucp(adjustment.amount)
        adjustments.append(formatted_adjustment)

    return compact({
        "ucp": order.ucp,
        "id": order.id,
        "checkout_id": order.checkout_id,
        "currency": order.currency or DEFAULT_CURRENCY,
        "permalink_url": order.permalink_url,
        "line_items": line_items,
        "fulfillment": order.fulfillment_dict(),
        "adjustments": adjustments,
        "totals": format_totals(order.totals),
    })


__all__ = [
    "DEFAULT_RESPONSE_TTL",
    "format_line_item",
    "format_totals",
    "format_checkout_response",
    "format_cart_response",
    "format_order_response",
]
