"""UCP Cart Capability (dev.ucp.shopping.cart).

Carts are backend draft orders viewed as plain line item containers: no
status, no fulfillment. Totals carry subtotal, tax and total only.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..backend.base import CommerceBackend, mutation_payload, response_data
from ..backend import documents
from ..exceptions import UCPNotFoundError, UCPValidationError
from ..mapping import (
    CART_TOTAL_TYPES,
    DEFAULT_CURRENCY,
    build_totals,
    buyer_from_backend,
    dig,
    line_item_from_backend,
    line_items_to_backend,
    nodes,
    record_currency,
)
from ..models.cart import UCPCart
from ..models.common import UCPBuyer, UCPLineItem

logger = logging.getLogger(__name__)


def map_cart(record: Dict[str, Any], default_currency: str = DEFAULT_CURRENCY) -> UCPCart:
    """Map a draft order record to a UCP Cart."""
    currency = record_currency(record, default_currency)
    return UCPCart(
        id=record["id"],
        currency=currency,
        line_items=[
            line_item_from_backend(node, currency) for node in nodes(record.get("lineItems"))
        ],
        totals=build_totals(record, currency, CART_TOTAL_TYPES),
        buyer=buyer_from_backend(record.get("customer")),
        continue_url=record.get("invoiceUrl"),
    )


class UCPCartCapability:
    """UCP Cart capability backed by draft orders."""

    def __init__(
        self,
        backend: CommerceBackend,
        default_currency: str = DEFAULT_CURRENCY,
        line_items_page_size: int = 50,
        default_list_limit: int = 20,
    ) -> None:
        self._backend = backend
        self._default_currency = default_currency
        self._page_size = line_items_page_size
        self._default_list_limit = default_list_limit

    def _draft_order_input(
        self,
        line_items: List[UCPLineItem],
        buyer: Optional[UCPBuyer],
    ) -> Dict[str, Any]:
        draft_input: Dict[str, Any] = {"lineItems": line_items_to_backend(line_items)}
        if buyer is not None and buyer.email:
            draft_input["email"] = buyer.email
        return draft_input

    async def create_cart(
        self,
        line_items: List[UCPLineItem],
        buyer: Optional[UCPBuyer] = None,
    ) -> UCPCart:
        """
        Create a cart.

        Raises:
            UCPValidationError: If line items are empty or the backend rejects the input
        """
        if not line_items:
            raise UCPValidationError(
                "line_items is required and must not be empty",
                field="line_items",
                code="invalid_line_items",
            )

        response = await self._backend.execute(
            documents.draft_order_create_mutation(documents.CART_FIELDS),
            {"input": self._draft_order_input(line_items, buyer), "lineItemsFirst": self._page_size},
        )
        payload = mutation_payload(response, "draftOrderCreate")
        cart = map_cart(payload["draftOrder"], self._default_currency)

        logger.info(f"Created cart: cart_id={cart.id}, items={len(cart.line_items)}")
        return cart

    async def get_cart(self, cart_id: str) -> Optional[UCPCart]:
        """Get a cart by ID, or None if it does not exist."""
        response = await self._backend.execute(
            documents.draft_order_query(documents.CART_FIELDS),
            {"id": cart_id, "lineItemsFirst": self._page_size},
        )
        record = response_data(response).get("draftOrder")
        if not record:
            return None
        return map_cart(record, self._default_currency)

    async def update_cart(
        self,
        cart_id: str,
        line_items: List[UCPLineItem],
        buyer: Optional[UCPBuyer] = None,
    ) -> UCPCart:
        """
        Replace a cart's line items (and optionally set the buyer email).

        Raises:
            UCPNotFoundError: If no draft order has this ID
            UCPValidationError: If the backend rejects the input
        """
        response = await self._backend.execute(
            documents.draft_order_update_mutation(documents.CART_FIELDS),
            {
                "id": cart_id,
                "input": self._draft_order_input(line_items, buyer),
                "lineItemsFirst": self._page_size,
            },
        )
        payload = mutation_payload(response, "draftOrderUpdate")
        record = payload.get("draftOrder")
        if not record:
            raise UCPNotFoundError("Cart", cart_id)

        cart = map_cart(record, self._default_currency)
        logger.info(f"Updated cart: cart_id={cart_id}, items={len(cart.line_items)}")
        return cart

    async def delete_cart(self, cart_id: str) -> bool:
        """Delete a cart. Returns True if the backend reports a deleted ID."""
        response = await self._backend.execute(
            documents.DRAFT_ORDER_DELETE_MUTATION,
            {"input": {"id": cart_id}},
        )
        deleted = bool(dig(response_data(response), "draftOrderDelete", "deletedId"))
        logger.info(f"Deleted cart: cart_id={cart_id}, deleted={deleted}")
        return deleted

    async def list_carts(self, limit: Optional[int] = None) -> List[UCPCart]:
        """List the most recently updated carts."""
        response = await self._backend.execute(
            documents.draft_orders_query(documents.CART_FIELDS),
            {"first": limit or self._default_list_limit, "lineItemsFirst": self._page_size},
        )
        return [
            map_cart(node, self._default_currency)
            for node in nodes(response_data(response).get("draftOrders"))
        ]

    async def count_carts(self) -> int:
        response = await self._backend.execute(documents.DRAFT_ORDERS_COUNT_QUERY)
        return dig(response_data(response), "draftOrdersCount", "count") or 0


__all__ = ["map_cart", "UCPCartCapability"]
