"""Commerce backend port and the Shopify Admin implementation."""

from .base import CommerceBackend, mutation_payload, raise_for_user_errors, response_data
from .shopify import ShopifyAdminClient

__all__ = [
    "CommerceBackend",
    "mutation_payload",
    "raise_for_user_errors",
    "response_data",
    "ShopifyAdminClient",
]
