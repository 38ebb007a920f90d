"""UCP Cart model (dev.ucp.shopping.cart).

A cart is a lightweight pre-checkout container. It has no status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .common import UCPBuyer, UCPLineItem, UCPTotal, compact, ucp_metadata


@dataclass(slots=True)
class UCPCart:
    """A cart mapped from a backend draft record."""

    id: str
    currency: str
    line_items: List[UCPLineItem] = field(default_factory=list)
    totals: List[UCPTotal] = field(default_factory=list)
    buyer: Optional[UCPBuyer] = None
    continue_url: Optional[str] = None
    expires_at: Optional[str] = None
    ucp: Dict[str, Any] = field(default_factory=lambda: ucp_metadata("cart"))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (internal decimal-string money)."""
        return compact({
            "ucp": self.ucp,
            "id": self.id,
            "currency": self.currency,
            "line_items": [item.to_dict() for item in self.line_items],
            "totals": [t.to_dict() for t in self.totals],
            "buyer": self.buyer.to_dict() if self.buyer else None,
            "continue_url": self.continue_url,
            "expires_at": self.expires_at,
        })


__all__ = ["UCPCart"]
