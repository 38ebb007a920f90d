"""Inbound request normalization.

Callers send line items in three shapes:

- ``ucp``: UCP wire format, ``{"item": {"id", "title", "price"}, "quantity"}``
  with the price in integer minor units
- ``flat``: internal shape already carrying ``product_id``/``variant_id``
- ``variant_reference``: flat shape whose ``product_id`` is really a variant
  id (it embeds the ``ProductVariant`` type marker) and has no ``variant_id``

Everything is reduced to ``UCPLineItem`` before any capability sees it. Minor
unit prices are converted to decimal strings here, and only here.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from .exceptions import UCPValidationError
from .models.common import UCPAddress, UCPBuyer, UCPLineItem, UCPMoney
from .money import money_from_ucp

DEFAULT_REQUEST_CURRENCY = "USD"
VARIANT_MARKER = "ProductVariant"

RawLineItem = Union[Dict[str, Any], UCPLineItem]


class LineItemShape(str, Enum):
    UCP = "ucp"
    FLAT = "flat"
    VARIANT_REFERENCE = "variant_reference"


@dataclass(slots=True)
class NormalizedRequest:
    """A cart/checkout request body reduced to canonical types.

    ``line_items`` is None when the body did not mention line items at all,
    which update operations read as "leave line items untouched".
    """

    currency: str = DEFAULT_REQUEST_CURRENCY
    line_items: Optional[List[UCPLineItem]] = None
    buyer: Optional[UCPBuyer] = None
    fulfillment_destination: Optional[UCPAddress] = None
    billing_address: Optional[UCPAddress] = None
    cart_id: Optional[str] = None
    id: Optional[str] = None


def is_variant_reference(identifier: Optional[str]) -> bool:
    return bool(identifier) and VARIANT_MARKER in str(identifier)


def detect_shape(raw: RawLineItem) -> LineItemShape:
    """Classify an incoming line item."""
    if isinstance(raw, UCPLineItem):
        variant_id, product_id = raw.variant_id, raw.product_id
    else:
        if isinstance(raw.get("item"), dict):
            return LineItemShape.UCP
        variant_id, product_id = raw.get("variant_id"), raw.get("product_id")

    if not variant_id and is_variant_reference(product_id):
        return LineItemShape.VARIANT_REFERENCE
    return LineItemShape.FLAT


def _quantity(value: Any, index: int) -> int:
    if value is None:
        return 1
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise UCPValidationError(
            "Quantity must be a positive integer",
            field=f"line_items[{index}].quantity",
        )
    try:
        quantity = int(value)
    except ValueError:
        raise UCPValidationError(
            f"Quantity must be a positive integer, got {value!r}",
            field=f"line_items[{index}].quantity",
        ) from None
    if quantity <= 0:
        raise UCPValidationError(
            f"Quantity must be a positive integer, got {quantity}",
            field=f"line_items[{index}].quantity",
        )
    return quantity


def _decimal_price(price: Any, currency: str) -> Optional[UCPMoney]:
    """Price already expressed as a decimal amount (flat shapes)."""
    if price is None:
        return None
    if isinstance(price, UCPMoney):
        return price
    if isinstance(price, dict):
        return UCPMoney(
            amount=str(price.get("amount", "0")),
            currency_code=price.get("currency_code") or currency,
        )
    return UCPMoney(amount=str(price), currency_code=currency)


def _minor_units(price: Union[int, float, Decimal], index: int) -> int:
    """Wire prices are minor units; JSON may still decode them as floats."""
    try:
        return int(round(price))
    except (ValueError, OverflowError):
        raise UCPValidationError(
            f"Price must be a finite number of minor units, got {price!r}",
            field=f"line_items[{index}].item.price",
        ) from None


def _properties(value: Any) -> Optional[Dict[str, str]]:
    if not value:
        return None
    return {str(k): str(v) for k, v in dict(value).items()}


def normalize_line_item(
    raw: RawLineItem,
    currency: Optional[str] = None,
    index: int = 0,
) -> UCPLineItem:
    """
    Normalize one incoming line item to the canonical shape.

    Args:
        raw: Line item in any accepted shape
        currency: Request-level currency for minor unit prices (USD if unset)
        index: Position in the request, used in error field pointers

    Raises:
        UCPValidationError: If the quantity is not a positive integer, or a
            minor unit price is not finite
    """
    currency = (currency or DEFAULT_REQUEST_CURRENCY).upper()
    shape = detect_shape(raw)

    if isinstance(raw, UCPLineItem):
        variant_id = raw.product_id if shape is LineItemShape.VARIANT_REFERENCE else raw.variant_id
        return replace(raw, variant_id=variant_id, quantity=_quantity(raw.quantity, index))

    if shape is LineItemShape.UCP:
        item = raw["item"]
        price = item.get("price")
        if isinstance(price, (int, float, Decimal)) and not isinstance(price, bool):
            money = money_from_ucp(_minor_units(price, index), currency)
        else:
            money = _decimal_price(price, currency)
        return UCPLineItem(
            product_id=item.get("id") or "",
            variant_id=item.get("variant_id") or item.get("id") or "",
            quantity=_quantity(raw.get("quantity"), index),
            title=item.get("title"),
            sku=item.get("sku"),
            image_url=item.get("image_url"),
            price=money,
            properties=_properties(raw.get("properties")),
        )

    product_id = raw.get("product_id") or ""
    variant_id = raw.get("variant_id")
    if shape is LineItemShape.VARIANT_REFERENCE:
        variant_id = product_id

    return UCPLineItem(
        product_id=product_id,
        variant_id=variant_id,
        quantity=_quantity(raw.get("quantity"), index),
        title=raw.get("title"),
        sku=raw.get("sku"),
        image_url=raw.get("image_url"),
        price=_decimal_price(raw.get("price"), currency),
        properties=_properties(raw.get("properties")),
    )


def normalize_line_items(
    raw_items: Iterable[RawLineItem],
    currency: Optional[str] = None,
) -> List[UCPLineItem]:
    return [normalize_line_item(raw, currency, index) for index, raw in enumerate(raw_items)]


def _address(value: Any) -> Optional[UCPAddress]:
    if isinstance(value, UCPAddress):
        return value
    if isinstance(value, dict) and value:
        return UCPAddress.from_dict(value)
    return None


def normalize_request(body: Dict[str, Any]) -> NormalizedRequest:
    """
    Normalize a cart/checkout request body.

    Reads ``line_items``, ``currency``, ``buyer``, ``fulfillment.destination``,
    ``payment.billing_address``, ``cart_id`` and ``id``.

    Raises:
        UCPValidationError: If ``line_items`` is present but not a list, or an
            item has an invalid quantity
    """
    currency = (body.get("currency") or DEFAULT_REQUEST_CURRENCY).upper()

    line_items: Optional[List[UCPLineItem]] = None
    if "line_items" in body and body["line_items"] is not None:
        raw_items = body["line_items"]
        if not isinstance(raw_items, list):
            raise UCPValidationError("line_items must be a list", field="line_items")
        line_items = normalize_line_items(raw_items, currency)

    buyer_data = body.get("buyer")
    buyer = UCPBuyer.from_dict(buyer_data) if isinstance(buyer_data, dict) else None

    fulfillment = body.get("fulfillment") or {}
    payment = body.get("payment") or {}

    return NormalizedRequest(
        currency=currency,
        line_items=line_items,
        buyer=buyer,
        fulfillment_destination=_address(fulfillment.get("destination")),
        billing_address=_address(payment.get("billing_address")),
        cart_id=body.get("cart_id"),
        id=body.get("id"),
    )


__all__ = [
    "DEFAULT_REQUEST_CURRENCY",
    "VARIANT_MARKER",
    "LineItemShape",
    "NormalizedRequest",
    "is_variant_reference",
    "detect_shape",
    "normalize_line_item",
    "normalize_line_items",
    "normalize_request",
]
