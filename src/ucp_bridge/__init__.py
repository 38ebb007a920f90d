"""Universal Commerce Protocol (UCP) bridge for draft-order commerce backends.

Translates between UCP resources and a backend's draft orders and orders:
- Carts and checkouts backed by draft orders
- Checkout status derived from the backend record on every read
- Orders with fulfillment events and refund adjustments
- Money conversion between decimal strings and integer minor units

Typical request flow: normalize_request -> capability -> format_*_response.
"""

from .bridge import UCPBridge
from .capabilities import (
    UCPCartCapability,
    UCPCheckoutCapability,
    UCPOrderCapability,
    UCPProductCapability,
    derive_checkout_status,
)
from .config import UCPBridgeSettings, load_settings
from .exceptions import (
    UCPError,
    UCPValidationError,
    UCPNotFoundError,
    UCPPreconditionFailedError,
    UCPBackendError,
)
from .formatter import (
    format_cart_response,
    format_checkout_response,
    format_order_response,
)
from .models import (
    UCP_VERSION,
    CheckoutStatus,
    UCPCart,
    UCPCheckout,
    UCPOrder,
    UCPLineItem,
    UCPMoney,
)
from .money import from_minor_units, to_minor_units
from .normalizer import NormalizedRequest, normalize_line_items, normalize_request

__all__ = [
    # Bridge
    "UCPBridge",
    # Capabilities
    "UCPCartCapability",
    "UCPCheckoutCapability",
    "UCPOrderCapability",
    "UCPProductCapability",
    "derive_checkout_status",
    # Config
    "UCPBridgeSettings",
    "load_settings",
    # Errors
    "UCPError",
    "UCPValidationError",
    "UCPNotFoundError",
    "UCPPreconditionFailedError",
    "UCPBackendError",
    # Formatting
    "format_cart_response",
    "format_checkout_response",
    "format_order_response",
    # Models
    "UCP_VERSION",
    "CheckoutStatus",
    "UCPCart",
    "UCPCheckout",
    "UCPOrder",
    "UCPLineItem",
    "UCPMoney",
    # Money
    "from_minor_units",
    "to_minor_units",
    # Normalization
    "NormalizedRequest",
    "normalize_line_items",
    "normalize_request",
]
