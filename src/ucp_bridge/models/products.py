"""UCP Product model (dev.ucp.shopping.product)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .common import UCPMoney, compact


@dataclass(slots=True)
class UCPProductImage:
    url: str
    alt_text: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            "url": self.url,
            "alt_text": self.alt_text,
            "width": self.width,
            "height": self.height,
        })


@dataclass(slots=True)
class UCPProductVariant:
    id: str
    price: UCPMoney
    title: Optional[str] = None
    sku: Optional[str] = None
    available_quantity: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            "id": self.id,
            "title": self.title,
            "sku": self.sku,
            "price": self.price.to_dict(),
            "available_quantity": self.available_quantity,
        })


@dataclass(slots=True)
class UCPProduct:
    """A product with its purchasable variants."""

    id: str
    title: str
    description: Optional[str] = None
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    images: List[UCPProductImage] = field(default_factory=list)
    variants: List[UCPProductVariant] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "vendor": self.vendor,
            "product_type": self.product_type,
            "tags": self.tags,
            "images": [i.to_dict() for i in self.images],
            "variants": [v.to_dict() for v in self.variants],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        })


__all__ = [
    "UCPProductImage",
    "UCPProductVariant",
    "UCPProduct",
]
