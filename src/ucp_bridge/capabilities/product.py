"""UCP Product Capability (dev.ucp.shopping.product): product search."""

from __future__ import annotations

from typing import Any, Dict, List

from ..backend.base import CommerceBackend, response_data
from ..backend import documents
from ..mapping import DEFAULT_CURRENCY, dig, nodes
from ..models.common import UCPMoney
from ..models.products import UCPProduct, UCPProductImage, UCPProductVariant


def map_product(node: Dict[str, Any], currency: str = DEFAULT_CURRENCY) -> UCPProduct:
    """Map a backend product node. Variant prices carry no currency, so the shop currency is assumed."""
    return UCPProduct(
        id=node["id"],
        title=node.get("title") or "",
        description=node.get("description"),
        vendor=node.get("vendor"),
        product_type=node.get("productType"),
        tags=list(node.get("tags") or []),
        images=[
            UCPProductImage(
                url=image["url"],
                alt_text=image.get("altText"),
                width=image.get("width"),
                height=image.get("height"),
            )
            for image in nodes(node.get("images"))
            if image.get("url")
        ],
        variants=[
            UCPProductVariant(
                id=variant["id"],
                title=variant.get("title"),
                sku=variant.get("sku"),
                price=UCPMoney(amount=str(variant.get("price") or "0"), currency_code=currency),
                available_quantity=variant.get("inventoryQuantity"),
            )
            for variant in nodes(node.get("variants"))
        ],
        created_at=node.get("createdAt"),
        updated_at=node.get("updatedAt"),
    )


class UCPProductCapability:
    """Product search against the backend catalog."""

    def __init__(self, backend: CommerceBackend, currency: str = DEFAULT_CURRENCY) -> None:
        self._backend = backend
        self._currency = currency

    async def search_products(self, query: str, first: int = 5) -> List[UCPProduct]:
        response = await self._backend.execute(
            documents.PRODUCTS_SEARCH_QUERY,
            {"query": query, "first": first},
        )
        products = dig(response_data(response), "products")
        return [map_product(node, self._currency) for node in nodes(products)]


__all__ = ["map_product", "UCPProductCapability"]
