"""UCP Order and Fulfillment models (dev.ucp.shopping.order).

Orders represent completed checkouts. Identity and totals never change after
creation; fulfillment events and adjustments are only ever appended.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .common import UCPAddress, UCPMoney, UCPTotal, compact, ucp_metadata


class UCPFulfillmentStatus(str, Enum):
    """Status of a fulfillment event."""

    PENDING = "pending"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    FAILED = "failed"


class UCPAdjustmentType(str, Enum):
    """Post-order monetary adjustments.

    Only REFUND has a backend source today.
    """

    REFUND = "refund"
    RETURN = "return"
    CREDIT = "credit"
    DISPUTE = "dispute"
    CANCELLATION = "cancellation"


@dataclass(slots=True)
class UCPFulfillmentEvent:
    """A shipment reported by the backend."""

    id: str
    status: UCPFulfillmentStatus
    created_at: Optional[str] = None
    line_item_ids: List[str] = field(default_factory=list)
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None
    carrier: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return compact({
            "id": self.id,
            "line_item_ids": self.line_item_ids,
            "status": self.status.value,
            "tracking_number": self.tracking_number,
            "tracking_url": self.tracking_url,
            "carrier": self.carrier,
            "created_at": self.created_at,
        })


@dataclass(slots=True)
class UCPExpectation:
    """Intended fulfillment grouping (destination + line items)."""

    id: str
    method: str
    line_item_ids: List[str] = field(default_factory=list)
    destination: Optional[UCPAddress] = None
    estimated_delivery: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            "id": self.id,
            "line_item_ids": self.line_item_ids,
            "method": self.method,
            "destination": self.destination.to_dict() if self.destination else None,
            "estimated_delivery": self.estimated_delivery,
        })


@dataclass(slots=True)
class UCPAdjustment:
    """A refund (or other adjustment) applied after the order was placed."""

    id: str
    type: UCPAdjustmentType
    amount: UCPMoney
    created_at: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            "id": self.id,
            "type": self.type.value,
            "amount": self.amount.to_dict(),
            "reason": self.reason,
            "created_at": self.created_at,
        })


@dataclass(slots=True)
class UCPOrderLineItem:
    """Order line item with fulfillment progress."""

    id: str
    product_id: str
    quantity: int
    variant_id: Optional[str] = None
    price: Optional[UCPMoney] = None
    title: Optional[str] = None
    sku: Optional[str] = None
    image_url: Optional[str] = None
    fulfilled_quantity: int = 0
    fulfillable_quantity: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            "id": self.id,
            "product_id": self.product_id,
            "variant_id": self.variant_id,
            "quantity": self.quantity,
            "price": self.price.to_dict() if self.price else None,
            "title": self.title,
            "sku": self.sku,
            "image_url": self.image_url,
            "fulfilled_quantity": self.fulfilled_quantity,
            "fulfillable_quantity": self.fulfillable_quantity,
        })


@dataclass(slots=True)
class UCPOrder:
    """A UCP order mapped from a finalized backend order."""

    id: str
    checkout_id: str
    currency: str
    permalink_url: Optional[str] = None
    line_items: List[UCPOrderLineItem] = field(default_factory=list)
    expectations: List[UCPExpectation] = field(default_factory=list)
    events: List[UCPFulfillmentEvent] = field(default_factory=list)
    adjustments: List[UCPAdjustment] = field(default_factory=list)
    totals: List[UCPTotal] = field(default_factory=list)
    ucp: Dict[str, Any] = field(default_factory=lambda: ucp_metadata("order"))

    def fulfillment_dict(self) -> Dict[str, Any]:
        return {
            "expectations": [e.to_dict() for e in self.expectations],
            "events": [e.to_dict() for e in self.events],
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (internal decimal-string money)."""
        return compact({
            "ucp": self.ucp,
            "id": self.id,
            "checkout_id": self.checkout_id,
            "currency": self.currency,
            "permalink_url": self.permalink_url,
            "line_items": [item.to_dict() for item in self.line_items],
            "fulfillment": self.fulfillment_dict(),
            "adjustments": [a.to_dict() for a in self.adjustments],
            "totals": [t.to_dict() for t in self.totals],
        })


__all__ = [
    "UCPFulfillmentStatus",
    "UCPAdjustmentType",
    "UCPFulfillmentEvent",
    "UCPExpectation",
    "UCPAdjustment",
    "UCPOrderLineItem",
    "UCPOrder",
]
