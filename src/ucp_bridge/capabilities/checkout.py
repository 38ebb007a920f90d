"""UCP Checkout Capability (dev.ucp.shopping.checkout).

Checkouts are backend draft orders driven through the invoice flow:
- create_checkout: Create a draft order from line items and buyer data
- update_checkout: Replace line items and/or set buyer, shipping, billing
- complete_checkout: Convert the draft order into a finalized order
- cancel_checkout: Delete the draft order

Nothing is stored locally. Status, messages and expiry are derived from the
backend record on every read.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from ..backend.base import (
    CommerceBackend,
    mutation_payload,
    raise_for_user_errors,
    response_data,
)
from ..backend import documents
from ..exceptions import UCPNotFoundError, UCPPreconditionFailedError, UCPValidationError
from ..mapping import (
    DEFAULT_CURRENCY,
    address_from_backend,
    address_to_backend,
    build_totals,
    buyer_from_backend,
    dig,
    line_item_from_backend,
    line_items_to_backend,
    nodes,
    record_currency,
)
from ..models.checkout import CheckoutStatus, UCPCheckout, UCPOrderReference
from ..models.common import (
    UCPAddress,
    UCPBuyer,
    UCPLineItem,
    UCPLink,
    UCPMessage,
    UCPMessageSeverity,
    UCPMessageType,
)

logger = logging.getLogger(__name__)

DEFAULT_CHECKOUT_TTL_HOURS = 24
DEFAULT_LINE_ITEMS_PAGE_SIZE = 50

# Backend draft order status once it has been converted into an order
BACKEND_COMPLETED_STATUS = "COMPLETED"

# Returns True when a non-terminal draft order needs buyer review elsewhere
EscalationHook = Callable[[Dict[str, Any]], bool]


# ============ Status derivation ============


def derive_checkout_status(
    record: Dict[str, Any],
    escalation_hook: Optional[EscalationHook] = None,
) -> CheckoutStatus:
    """
    Classify a draft order record into a checkout status.

    1. Linked order, or backend status COMPLETED -> completed
    2. Escalation hook fires -> requires_escalation
    3. Invoice URL, buyer email and shipping address present -> ready_for_complete
    4. Otherwise -> incomplete

    complete_in_progress is never derived; the backend completes synchronously.
    """
    if record.get("order") or record.get("status") == BACKEND_COMPLETED_STATUS:
        return CheckoutStatus.COMPLETED

    if escalation_hook is not None and escalation_hook(record):
        return CheckoutStatus.REQUIRES_ESCALATION

    if record.get("invoiceUrl") and dig(record, "customer", "email") and record.get("shippingAddress"):
        return CheckoutStatus.READY_FOR_COMPLETE

    return CheckoutStatus.INCOMPLETE


def generate_checkout_messages(record: Dict[str, Any], status: CheckoutStatus) -> List[UCPMessage]:
    """Diagnostics telling the caller what is missing. Computed, never stored."""
    messages: List[UCPMessage] = []

    if status is CheckoutStatus.INCOMPLETE:
        if not dig(record, "customer", "email"):
            messages.append(UCPMessage(
                type=UCPMessageType.ERROR,
                code="missing_buyer_email",
                content="Buyer email is required to proceed with checkout",
                severity=UCPMessageSeverity.REQUIRES_BUYER_INPUT,
                field="buyer.email",
            ))

        if not record.get("shippingAddress"):
            messages.append(UCPMessage(
                type=UCPMessageType.ERROR,
                code="missing_shipping_address",
                content="Shipping address is required for fulfillment",
                severity=UCPMessageSeverity.REQUIRES_BUYER_INPUT,
                field="fulfillment.destination",
            ))

        if not nodes(record.get("lineItems")):
            messages.append(UCPMessage(
                type=UCPMessageType.ERROR,
                code="empty_cart",
                content="At least one line item is required",
                severity=UCPMessageSeverity.RECOVERABLE,
                field="line_items",
            ))

    elif status is CheckoutStatus.REQUIRES_ESCALATION:
        messages.append(UCPMessage(
            type=UCPMessageType.WARNING,
            code="requires_buyer_input",
            content="This checkout requires buyer input. Redirect to continue_url to complete.",
            severity=UCPMessageSeverity.REQUIRES_BUYER_REVIEW,
        ))

    return messages


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable backend timestamp: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def compute_expires_at(
    record: Dict[str, Any],
    status: CheckoutStatus,
    ttl_hours: int = DEFAULT_CHECKOUT_TTL_HOURS,
) -> Optional[str]:
    """``createdAt + ttl`` for non-terminal checkouts, else None."""
    if status.is_terminal:
        return None
    created_at = _parse_timestamp(record.get("createdAt"))
    if created_at is None:
        return None
    return (created_at + timedelta(hours=ttl_hours)).astimezone(timezone.utc).isoformat()


def map_checkout(
    record: Dict[str, Any],
    ttl_hours: int = DEFAULT_CHECKOUT_TTL_HOURS,
    default_currency: str = DEFAULT_CURRENCY,
    escalation_hook: Optional[EscalationHook] = None,
) -> UCPCheckout:
    """Map a draft order record (with optional linked order) to a UCP Checkout."""
    checkout_id = record["id"]
    currency = record_currency(record, default_currency)
    status = derive_checkout_status(record, escalation_hook)
    invoice_url = record.get("invoiceUrl")

    links = [UCPLink(rel="self", href=f"/checkout-sessions/{checkout_id}")]
    if invoice_url:
        links.append(UCPLink(rel="checkout", href=invoice_url, title="Complete checkout"))

    shipping = address_from_backend(record.get("shippingAddress"))
    billing = address_from_backend(record.get("billingAddress"))

    linked_order = record.get("order")
    order = None
    if linked_order:
        order = UCPOrderReference(
            id=linked_order["id"],
            number=linked_order.get("name"),
            permalink_url=linked_order.get("statusPageUrl"),
        )

    return UCPCheckout(
        id=checkout_id,
        status=status,
        currency=currency,
        line_items=[
            line_item_from_backend(node, currency) for node in nodes(record.get("lineItems"))
        ],
        totals=build_totals(record, currency),
        links=links,
        buyer=buyer_from_backend(record.get("customer"), (shipping, billing)),
        messages=generate_checkout_messages(record, status),
        expires_at=compute_expires_at(record, status, ttl_hours),
        continue_url=invoice_url if status is CheckoutStatus.REQUIRES_ESCALATION else None,
        order=order,
        fulfillment_destination=shipping,
    )


def missing_completion_fields(checkout: UCPCheckout) -> List[str]:
    """Human-readable names of the data still required before completion."""
    missing = []
    if not checkout.buyer_email:
        missing.append("buyer email")
    destination = checkout.fulfillment_destination
    if destination is None or not destination.is_complete:
        missing.append("shipping address")
    return missing


# ============ Capability ============


class UCPCheckoutCapability:
    """
    UCP Checkout capability backed by draft orders.

    The backend handle is injected; no state is held between calls.
    """

    def __init__(
        self,
        backend: CommerceBackend,
        checkout_ttl_hours: int = DEFAULT_CHECKOUT_TTL_HOURS,
        default_currency: str = DEFAULT_CURRENCY,
        line_items_page_size: int = DEFAULT_LINE_ITEMS_PAGE_SIZE,
        escalation_hook: Optional[EscalationHook] = None,
    ) -> None:
        """
        Initialize the checkout capability.

        Args:
            backend: Backend query/mutation executor
            checkout_ttl_hours: Lifetime used to compute ``expires_at``
            default_currency: Currency assumed when a record names none
            line_items_page_size: Line items fetched per draft order
            escalation_hook: Optional predicate flagging records that need
                buyer review (status requires_escalation)
        """
        self._backend = backend
        self._ttl_hours = checkout_ttl_hours
        self._default_currency = default_currency
        self._page_size = line_items_page_size
        self._escalation_hook = escalation_hook

    def _map(self, record: Dict[str, Any]) -> UCPCheckout:
        return map_checkout(
            record,
            ttl_hours=self._ttl_hours,
            default_currency=self._default_currency,
            escalation_hook=self._escalation_hook,
        )

    def _draft_order_input(
        self,
        line_items: Optional[List[UCPLineItem]],
        buyer: Optional[UCPBuyer],
        fulfillment_destination: Optional[UCPAddress],
        billing_address: Optional[UCPAddress],
    ) -> Dict[str, Any]:
        """Backend input holding only the fields the caller supplied."""
        draft_input: Dict[str, Any] = {}
        if line_items is not None:
            draft_input["lineItems"] = line_items_to_backend(line_items)
        if buyer is not None and buyer.email:
            draft_input["email"] = buyer.email
        if fulfillment_destination is not None:
            draft_input["shippingAddress"] = address_to_backend(fulfillment_destination)
        if billing_address is not None:
            draft_input["billingAddress"] = address_to_backend(billing_address)
        return draft_input

    async def create_checkout(
        self,
        line_items: List[UCPLineItem],
        buyer: Optional[UCPBuyer] = None,
        fulfillment_destination: Optional[UCPAddress] = None,
        billing_address: Optional[UCPAddress] = None,
    ) -> UCPCheckout:
        """
        Create a new checkout.

        Args:
            line_items: Normalized line items (see ucp_bridge.normalizer)
            buyer: Buyer; only the email is sent to the backend
            fulfillment_destination: Shipping address
            billing_address: Billing address

        Returns:
            The mapped UCPCheckout

        Raises:
            UCPValidationError: If line items are empty or the backend rejects the input
            UCPBackendError: If the backend call fails
        """
        if not line_items:
            raise UCPValidationError(
                "line_items is required and must not be empty",
                field="line_items",
                code="invalid_line_items",
            )

        draft_input = self._draft_order_input(
            line_items, buyer, fulfillment_destination, billing_address
        )
        response = await self._backend.execute(
            documents.draft_order_create_mutation(documents.CHECKOUT_FIELDS),
            {"input": draft_input, "lineItemsFirst": self._page_size},
        )
        payload = mutation_payload(response, "draftOrderCreate")
        checkout = self._map(payload["draftOrder"])

        logger.info(
            f"Created checkout: checkout_id={checkout.id}, "
            f"items={len(checkout.line_items)}, status={checkout.status.value}"
        )
        return checkout

    async def get_checkout(self, checkout_id: str) -> UCPCheckout:
        """
        Get a checkout by ID.

        Raises:
            UCPNotFoundError: If no draft order has this ID
        """
        response = await self._backend.execute(
            documents.draft_order_query(documents.CHECKOUT_FIELDS),
            {"id": checkout_id, "lineItemsFirst": self._page_size},
        )
        record = response_data(response).get("draftOrder")
        if not record:
            raise UCPNotFoundError("Checkout", checkout_id)
        return self._map(record)

    async def update_checkout(
        self,
        checkout_id: str,
        line_items: Optional[List[UCPLineItem]] = None,
        buyer: Optional[UCPBuyer] = None,
        fulfillment_destination: Optional[UCPAddress] = None,
        billing_address: Optional[UCPAddress] = None,
    ) -> UCPCheckout:
        """
        Update a checkout.

        Line items are replaced, not merged. Only supplied fields are sent.
        With nothing to send the current checkout is returned unchanged.

        Raises:
            UCPNotFoundError: If no draft order has this ID
            UCPValidationError: If the backend rejects the input
        """
        draft_input = self._draft_order_input(
            line_items, buyer, fulfillment_destination, billing_address
        )
        if not draft_input:
            return await self.get_checkout(checkout_id)

        response = await self._backend.execute(
            documents.draft_order_update_mutation(documents.CHECKOUT_FIELDS),
            {"id": checkout_id, "input": draft_input, "lineItemsFirst": self._page_size},
        )
        payload = mutation_payload(response, "draftOrderUpdate")
        record = payload.get("draftOrder")
        if not record:
            raise UCPNotFoundError("Checkout", checkout_id)

        checkout = self._map(record)
        logger.info(
            f"Updated checkout: checkout_id={checkout_id}, "
            f"fields={sorted(draft_input)}, status={checkout.status.value}"
        )
        return checkout

    async def create_checkout_from_cart(
        self,
        cart_id: str,
        buyer: Optional[UCPBuyer] = None,
        fulfillment_destination: Optional[UCPAddress] = None,
        billing_address: Optional[UCPAddress] = None,
    ) -> UCPCheckout:
        """
        Promote a cart to a checkout.

        Carts and checkouts are the same draft order, so the checkout keeps
        the cart's ID and line items.
        """
        checkout = await self.update_checkout(
            cart_id,
            buyer=buyer,
            fulfillment_destination=fulfillment_destination,
            billing_address=billing_address,
        )
        logger.info(f"Checkout created from cart: checkout_id={checkout.id}")
        return checkout

    async def complete_checkout(self, checkout_id: str) -> UCPCheckout:
        """
        Complete a checkout, converting the draft order into an order.

        The current state is re-read and re-validated before the backend
        completion call because it may have changed since the caller's read.

        Raises:
            UCPNotFoundError: If no draft order has this ID
            UCPPreconditionFailedError: If buyer email or shipping address is missing
            UCPValidationError: If the backend rejects the completion
        """
        checkout = await self.get_checkout(checkout_id)

        if checkout.status is CheckoutStatus.COMPLETED:
            logger.info(f"Checkout already completed: checkout_id={checkout_id}")
            return checkout

        missing = missing_completion_fields(checkout)
        if missing:
            logger.warning(
                f"Checkout completion blocked: checkout_id={checkout_id}, missing={missing}"
            )
            raise UCPPreconditionFailedError(checkout_id, missing)

        response = await self._backend.execute(
            documents.DRAFT_ORDER_COMPLETE_MUTATION,
            {"id": checkout_id, "lineItemsFirst": self._page_size},
        )
        payload = mutation_payload(response, "draftOrderComplete")
        completed = self._map(payload["draftOrder"])

        logger.info(
            f"Checkout completed: checkout_id={checkout_id}, "
            f"order_id={completed.order.id if completed.order else None}, "
            f"status={completed.status.value}"
        )
        return completed

    async def cancel_checkout(self, checkout_id: str) -> UCPCheckout:
        """
        Cancel a checkout by deleting its draft order.

        Returns the last known state with status ``canceled``, whatever the
        deletion payload contains.

        Raises:
            UCPNotFoundError: If no draft order has this ID
            UCPValidationError: If the backend reports user errors
        """
        checkout = await self.get_checkout(checkout_id)

        response = await self._backend.execute(
            documents.DRAFT_ORDER_DELETE_MUTATION,
            {"input": {"id": checkout_id}},
        )
        payload = response_data(response).get("draftOrderDelete")
        if isinstance(payload, dict):
            raise_for_user_errors(payload, "draftOrderDelete")

        logger.info(f"Checkout cancelled: checkout_id={checkout_id}")
        return replace(
            checkout,
            status=CheckoutStatus.CANCELED,
            messages=[
                UCPMessage(
                    type=UCPMessageType.INFO,
                    code="checkout_canceled",
                    content="Checkout session has been canceled",
                )
            ],
        )

    async def send_invoice(self, checkout_id: str, email: Optional[str] = None) -> UCPCheckout:
        """Send the backend invoice (payment link) for a checkout."""
        variables: Dict[str, Any] = {"id": checkout_id, "lineItemsFirst": self._page_size}
        if email:
            variables["email"] = {"to": email}

        response = await self._backend.execute(
            documents.DRAFT_ORDER_INVOICE_SEND_MUTATION,
            variables,
        )
        payload = mutation_payload(response, "draftOrderInvoiceSend")
        record = payload.get("draftOrder")
        if not record:
            raise UCPNotFoundError("Checkout", checkout_id)

        logger.info(f"Invoice sent: checkout_id={checkout_id}")
        return self._map(record)


__all__ = [
    "DEFAULT_CHECKOUT_TTL_HOURS",
    "BACKEND_COMPLETED_STATUS",
    "EscalationHook",
    "derive_checkout_status",
    "generate_checkout_messages",
    "compute_expires_at",
    "map_checkout",
    "missing_completion_fields",
    "UCPCheckoutCapability",
]
