"""UCP data models."""

from .common import (
    UCP_VERSION,
    UCPTotalType,
    UCPMessageType,
    UCPMessageSeverity,
    UCPMoney,
    UCPTotal,
    UCPLineItem,
    UCPAddress,
    UCPBuyer,
    UCPLink,
    UCPMessage,
)
from .cart import UCPCart
from .checkout import CheckoutStatus, UCPCheckout, UCPOrderReference
from .orders import (
    UCPFulfillmentStatus,
    UCPAdjustmentType,
    UCPFulfillmentEvent,
    UCPExpectation,
    UCPAdjustment,
    UCPOrderLineItem,
    UCPOrder,
)
from .products import UCPProduct, UCPProductImage, UCPProductVariant

__all__ = [
    # Common
    "UCP_VERSION",
    "UCPTotalType",
    "UCPMessageType",
    "UCPMessageSeverity",
    "UCPMoney",
    "UCPTotal",
    "UCPLineItem",
    "UCPAddress",
    "UCPBuyer",
    "UCPLink",
    "UCPMessage",
    # Cart
    "UCPCart",
    # Checkout
    "CheckoutStatus",
    "UCPCheckout",
    "UCPOrderReference",
    # Orders
    "UCPFulfillmentStatus",
    "UCPAdjustmentType",
    "UCPFulfillmentEvent",
    "UCPExpectation",
    "UCPAdjustment",
    "UCPOrderLineItem",
    "UCPOrder",
    # Products
    "UCPProduct",
    "UCPProductImage",
    "UCPProductVariant",
]
