"""Shared UCP building blocks: money, totals, line items, buyers, messages.

Money here is the internal representation: decimal-string amounts in the
backend's native currency. Conversion to integer minor units happens only in
the response formatter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


UCP_VERSION = "2026-01-01"
UCP_SPEC_BASE_URL = "https://ucp.dev/specification"


def compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None, as JSON serialisers drop undefined."""
    return {k: v for k, v in data.items() if v is not None}


def ucp_metadata(capability: str) -> Dict[str, Any]:
    """Build the ``ucp`` block advertising a single shopping capability."""
    return {
        "version": UCP_VERSION,
        "capabilities": {
            f"dev.ucp.shopping.{capability}": [
                {
                    "version": UCP_VERSION,
                    "spec": f"{UCP_SPEC_BASE_URL}/{capability}",
                }
            ],
        },
    }


class UCPTotalType(str, Enum):
    """Kinds of monetary totals carried by carts, checkouts and orders."""

    SUBTOTAL = "subtotal"
    TAX = "tax"
    SHIPPING = "shipping"
    DISCOUNT = "discount"
    TOTAL = "total"
    DUE = "due"


class UCPMessageType(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class UCPMessageSeverity(str, Enum):
    RECOVERABLE = "recoverable"
    REQUIRES_BUYER_INPUT = "requires_buyer_input"
    REQUIRES_BUYER_REVIEW = "requires_buyer_review"


@dataclass(slots=True)
class UCPMoney:
    """An amount as a decimal string plus ISO-4217 currency code."""

    amount: str
    currency_code: str

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "currency_code": self.currency_code}


@dataclass(slots=True)
class UCPTotal:
    """A typed total line (subtotal, tax, ...)."""

    type: UCPTotalType
    amount: UCPMoney
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            "type": self.type.value,
            "amount": self.amount.to_dict(),
            "label": self.label,
        })


@dataclass(slots=True)
class UCPLineItem:
    """Canonical line item shared by carts, checkouts and orders."""

    product_id: str
    quantity: int = 1
    variant_id: Optional[str] = None
    price: Optional[UCPMoney] = None
    title: Optional[str] = None
    sku: Optional[str] = None
    image_url: Optional[str] = None
    properties: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            "product_id": self.product_id,
            "variant_id": self.variant_id,
            "quantity": self.quantity,
            "price": self.price.to_dict() if self.price else None,
            "title": self.title,
            "sku": self.sku,
            "image_url": self.image_url,
            "properties": self.properties,
        })


@dataclass(slots=True)
class UCPAddress:
    """Postal address in UCP field naming."""

    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    province_code: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    zip: Optional[str] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    id: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """Whether the address has enough data to ship to."""
        return bool(self.address1 and self.city)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UCPAddress":
        return cls(**{name: data.get(name) for name in cls.__dataclass_fields__})

    def to_dict(self) -> Dict[str, Any]:
        return compact({name: getattr(self, name) for name in self.__dataclass_fields__})


@dataclass(slots=True)
class UCPBuyer:
    """Buyer identity and known addresses."""

    email: Optional[str] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    addresses: List[UCPAddress] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UCPBuyer":
        return cls(
            email=data.get("email"),
            phone=data.get("phone"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            addresses=[UCPAddress.from_dict(a) for a in data.get("addresses") or [] if a],
        )

    def to_dict(self) -> Dict[str, Any]:
        result = compact({
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
        })
        if self.addresses:
            result["addresses"] = [a.to_dict() for a in self.addresses]
        return result


@dataclass(slots=True)
class UCPLink:
    rel: str
    href: str
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({"rel": self.rel, "href": self.href, "title": self.title})


@dataclass(slots=True)
class UCPMessage:
    """A diagnostic computed from current state. Never persisted."""

    type: UCPMessageType
    content: str
    code: Optional[str] = None
    severity: Optional[UCPMessageSeverity] = None
    field: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            "type": self.type.value,
            "code": self.code,
            "content": self.content,
            "severity": self.severity.value if self.severity else None,
            "field": self.field,
        })


__all__ = [
    "UCP_VERSION",
    "UCP_SPEC_BASE_URL",
    "compact",
    "ucp_metadata",
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
]
