"""UCP capabilities (cart, checkout, order, product)."""

from .cart import UCPCartCapability, map_cart
from .checkout import (
    EscalationHook,
    UCPCheckoutCapability,
    compute_expires_at,
    derive_checkout_status,
    generate_checkout_messages,
    map_checkout,
)
from .order import UCPOrderCapability, map_order
from .product import UCPProductCapability, map_product

__all__ = [
    "UCPCartCapability",
    "map_cart",
    "EscalationHook",
    "UCPCheckoutCapability",
    "compute_expires_at",
    "derive_checkout_status",
    "generate_checkout_messages",
    "map_checkout",
    "UCPOrderCapability",
    "map_order",
    "UCPProductCapability",
    "map_product",
]
