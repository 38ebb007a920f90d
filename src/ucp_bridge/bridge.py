"""Wiring of the UCP capabilities around one backend handle."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .backend.base import CommerceBackend
from .backend.shopify import ShopifyAdminClient
from .capabilities.cart import UCPCartCapability
from .capabilities.checkout import EscalationHook, UCPCheckoutCapability
from .capabilities.order import UCPOrderCapability
from .capabilities.product import UCPProductCapability
from .config import UCPBridgeSettings, load_settings


@dataclass(slots=True)
class UCPBridge:
    """Cart, checkout, order and product capabilities sharing a backend.

    Build one per request (or per backend session); nothing is cached.
    """

    backend: CommerceBackend
    carts: UCPCartCapability
    checkouts: UCPCheckoutCapability
    orders: UCPOrderCapability
    products: UCPProductCapability

    @classmethod
    def create(
        cls,
        backend: CommerceBackend,
        settings: Optional[UCPBridgeSettings] = None,
        escalation_hook: Optional[EscalationHook] = None,
    ) -> "UCPBridge":
        settings = settings or UCPBridgeSettings()
        return cls(
            backend=backend,
            carts=UCPCartCapability(
                backend,
                default_currency=settings.default_currency,
                line_items_page_size=settings.line_items_page_size,
                default_list_limit=settings.default_list_limit,
            ),
            checkouts=UCPCheckoutCapability(
                backend,
                checkout_ttl_hours=settings.checkout_ttl_hours,
                default_currency=settings.default_currency,
                line_items_page_size=settings.line_items_page_size,
                escalation_hook=escalation_hook,
            ),
            orders=UCPOrderCapability(
                backend,
                default_currency=settings.default_currency,
                line_items_page_size=settings.line_items_page_size,
                default_list_limit=settings.default_list_limit,
            ),
            products=UCPProductCapability(backend, currency=settings.default_currency),
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[UCPBridgeSettings] = None,
        escalation_hook: Optional[EscalationHook] = None,
    ) -> "UCPBridge":
        """Build a bridge talking to the Shopify Admin API configured in settings."""
        settings = settings or load_settings()
        return cls.create(
            ShopifyAdminClient.from_settings(settings),
            settings=settings,
            escalation_hook=escalation_hook,
        )


__all__ = ["UCPBridge"]
