"""UCP Checkout model (dev.ucp.shopping.checkout)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .common import (
    UCPAddress,
    UCPBuyer,
    UCPLineItem,
    UCPLink,
    UCPMessage,
    UCPTotal,
    compact,
    ucp_metadata,
)


class CheckoutStatus(str, Enum):
    """Status of a checkout. Derived from the backend record on every read."""

    INCOMPLETE = "incomplete"
    REQUIRES_ESCALATION = "requires_escalation"
    READY_FOR_COMPLETE = "ready_for_complete"
    COMPLETE_IN_PROGRESS = "complete_in_progress"
    COMPLETED = "completed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (CheckoutStatus.COMPLETED, CheckoutStatus.CANCELED)


@dataclass(slots=True)
class UCPOrderReference:
    """Link from a completed checkout to the finalized order."""

    id: str
    number: Optional[str] = None
    permalink_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return compact({
            "id": self.id,
            "number": self.number,
            "permalink_url": self.permalink_url,
        })


@dataclass(slots=True)
class UCPCheckout:
    """A checkout mapped from a backend draft record (and linked order)."""

    id: str
    status: CheckoutStatus
    currency: str
    line_items: List[UCPLineItem] = field(default_factory=list)
    totals: List[UCPTotal] = field(default_factory=list)
    links: List[UCPLink] = field(default_factory=list)
    buyer: Optional[UCPBuyer] = None
    messages: List[UCPMessage] = field(default_factory=list)
    expires_at: Optional[str] = None
    continue_url: Optional[str] = None
    order: Optional[UCPOrderReference] = None
    fulfillment_destination: Optional[UCPAddress] = None
    ucp: Dict[str, Any] = field(default_factory=lambda: ucp_metadata("checkout"))

    @property
    def buyer_email(self) -> Optional[str]:
        return self.buyer.email if self.buyer else None

    def fulfillment_dict(self) -> Optional[Dict[str, Any]]:
        if self.fulfillment_destination is None:
            return None
        return {"destination": self.fulfillment_destination.to_dict()}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (internal decimal-string money)."""
        return compact({
            "ucp": self.ucp,
            "id": self.id,
            "status": self.status.value,
            "currency": self.currency,
            "line_items": [item.to_dict() for item in self.line_items],
            "totals": [t.to_dict() for t in self.totals],
            "links": [link.to_dict() for link in self.links],
            "buyer": self.buyer.to_dict() if self.buyer else None,
            "messages": [m.to_dict() for m in self.messages] or None,
            "expires_at": self.expires_at,
            "continue_url": self.continue_url,
            "order": self.order.to_dict() if self.order else None,
            "fulfillment": self.fulfillment_dict(),
        })


__all__ = [
    "CheckoutStatus",
    "UCPOrderReference",
    "UCPCheckout",
]
