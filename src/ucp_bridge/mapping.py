"""Transforms shared by the cart, checkout and order capabilities.

Backend records arrive as decoded GraphQL JSON. Any nested object may be
absent or null; absence is treated as "not present", never as an error.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from .models.common import (
    UCPAddress,
    UCPBuyer,
    UCPLineItem,
    UCPMoney,
    UCPTotal,
    UCPTotalType,
)

DEFAULT_CURRENCY = "USD"

# Backend money field carrying each total type
TOTAL_FIELDS: Dict[UCPTotalType, str] = {
    UCPTotalType.SUBTOTAL: "subtotalPriceSet",
    UCPTotalType.TAX: "totalTaxSet",
    UCPTotalType.SHIPPING: "totalShippingPriceSet",
    UCPTotalType.DISCOUNT: "totalDiscountsSet",
    UCPTotalType.TOTAL: "totalPriceSet",
}

CART_TOTAL_TYPES = (UCPTotalType.SUBTOTAL, UCPTotalType.TAX, UCPTotalType.TOTAL)
FULL_TOTAL_TYPES = (
    UCPTotalType.SUBTOTAL,
    UCPTotalType.TAX,
    UCPTotalType.SHIPPING,
    UCPTotalType.DISCOUNT,
    UCPTotalType.TOTAL,
)


def dig(data: Any, *path: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def nodes(connection: Any) -> List[Dict[str, Any]]:
    """Unwrap a GraphQL ``{edges: [{node}]}`` connection."""
    edges = dig(connection, "edges") or []
    return [edge["node"] for edge in edges if isinstance(edge, dict) and edge.get("node")]


def record_currency(record: Dict[str, Any], default: str = DEFAULT_CURRENCY) -> str:
    return dig(record, "totalPriceSet", "shopMoney", "currencyCode") or default


def money_from_set(money_set: Any, currency: str) -> UCPMoney:
    """Money from a ``{shopMoney: {amount}}`` set in the record currency."""
    amount = dig(money_set, "shopMoney", "amount")
    return UCPMoney(amount=str(amount) if amount is not None else "0", currency_code=currency)


def build_totals(
    record: Dict[str, Any],
    currency: str,
    types: Sequence[UCPTotalType] = FULL_TOTAL_TYPES,
) -> List[UCPTotal]:
    """Ordered totals for ``types``; absent values become zero."""
    return [
        UCPTotal(type=total_type, amount=money_from_set(record.get(TOTAL_FIELDS[total_type]), currency))
        for total_type in types
    ]


# ============ Line items ============


def line_item_from_backend(node: Dict[str, Any], default_currency: str = DEFAULT_CURRENCY) -> UCPLineItem:
    """Map a backend line item node to the canonical line item."""
    variant = node.get("variant") or {}
    unit_price = dig(node, "originalUnitPriceSet", "shopMoney") or {}
    return UCPLineItem(
        product_id=dig(variant, "product", "id") or "",
        variant_id=variant.get("id") or "",
        quantity=node.get("quantity") or 0,
        title=node.get("name"),
        sku=node.get("sku"),
        image_url=dig(variant, "product", "featuredImage", "url"),
        price=UCPMoney(
            amount=str(unit_price.get("amount") or "0"),
            currency_code=unit_price.get("currencyCode") or default_currency,
        ),
    )


def line_item_to_backend(item: UCPLineItem) -> Dict[str, Any]:
    """Backend ``DraftOrderLineItemInput`` for a canonical line item."""
    result: Dict[str, Any] = {
        "variantId": item.variant_id,
        "quantity": item.quantity,
    }
    if item.properties:
        result["customAttributes"] = [
            {"key": key, "value": value} for key, value in item.properties.items()
        ]
    return result


def line_items_to_backend(items: Iterable[UCPLineItem]) -> List[Dict[str, Any]]:
    return [line_item_to_backend(item) for item in items]


# ============ Addresses and buyers ============


def address_from_backend(address: Optional[Dict[str, Any]]) -> Optional[UCPAddress]:
    if not address:
        return None
    return UCPAddress(
        address1=address.get("address1"),
        address2=address.get("address2"),
        city=address.get("city"),
        province=address.get("province"),
        province_code=address.get("provinceCode"),
        country=address.get("country"),
        country_code=address.get("countryCodeV2"),
        zip=address.get("zip"),
        phone=address.get("phone"),
        first_name=address.get("firstName"),
        last_name=address.get("lastName"),
        company=address.get("company"),
    )


def address_to_backend(address: UCPAddress) -> Dict[str, Any]:
    """Backend ``MailingAddressInput``; unset fields are omitted."""
    fields = {
        "address1": address.address1,
        "address2": address.address2,
        "city": address.city,
        "province": address.province,
        "country": address.country,
        "zip": address.zip,
        "phone": address.phone,
        "firstName": address.first_name,
        "lastName": address.last_name,
        "company": address.company,
    }
    return {k: v for k, v in fields.items() if v is not None}


def buyer_from_backend(
    customer: Optional[Dict[str, Any]],
    addresses: Iterable[Optional[UCPAddress]] = (),
) -> Optional[UCPBuyer]:
    """Buyer from the record's customer; None when no customer identity exists."""
    if not customer:
        return None
    return UCPBuyer(
        email=customer.get("email"),
        first_name=customer.get("firstName"),
        last_name=customer.get("lastName"),
        phone=customer.get("phone"),
        addresses=[a for a in addresses if a is not None],
    )


__all__ = [
    "DEFAULT_CURRENCY",
    "TOTAL_FIELDS",
    "CART_TOTAL_TYPES",
    "FULL_TOTAL_TYPES",
    "dig",
    "nodes",
    "record_currency",
    "money_from_set",
    "build_totals",
    "line_item_from_backend",
    "line_item_to_backend",
    "line_items_to_backend",
    "address_from_backend",
    "address_to_backend",
    "buyer_from_backend",
]
