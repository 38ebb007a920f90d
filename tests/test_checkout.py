"""Tests for the checkout capability."""

import pytest

from conftest import draft_order, ready_draft_order

from ucp_bridge.capabilities.checkout import (
    UCPCheckoutCapability,
    compute_expires_at,
    derive_checkout_status,
    generate_checkout_messages,
    map_checkout,
)
from ucp_bridge.exceptions import (
    UCPBackendError,
    UCPNotFoundError,
    UCPPreconditionFailedError,
    UCPValidationError,
)
from ucp_bridge.models.checkout import CheckoutStatus
from ucp_bridge.models.common import UCPAddress, UCPBuyer, UCPLineItem, UCPTotalType

CHECKOUT_ID = "gid://shopify/DraftOrder/1"
VARIANT_GID = "gid://shopify/ProductVariant/11"
LINKED_ORDER = {
    "id": "gid://shopify/Order/5",
    "name": "#1001",
    "statusPageUrl": "https://shop.example.com/orders/5",
}


def _found(record):
    return {"data": {"draftOrder": record}}


def _payload(operation, record, user_errors=None):
    return {"data": {operation: {"draftOrder": record, "userErrors": user_errors or []}}}


@pytest.fixture
def checkouts(backend):
    return UCPCheckoutCapability(backend)


class TestStatusDerivation:
    """Tests for derive_checkout_status."""

    def test_missing_buyer_is_incomplete(self):
        assert derive_checkout_status(draft_order()) is CheckoutStatus.INCOMPLETE

    def test_all_fields_present_is_ready(self):
        assert derive_checkout_status(ready_draft_order()) is CheckoutStatus.READY_FOR_COMPLETE

    def test_missing_invoice_url_is_incomplete(self):
        assert derive_checkout_status(ready_draft_order(invoiceUrl=None)) is CheckoutStatus.INCOMPLETE

    def test_linked_order_is_completed(self):
        """A linked order wins over everything else, even missing buyer data."""
        assert derive_checkout_status(draft_order(order=LINKED_ORDER)) is CheckoutStatus.COMPLETED

    def test_completed_backend_status_is_completed(self):
        assert derive_checkout_status(draft_order(status="COMPLETED")) is CheckoutStatus.COMPLETED

    def test_escalation_hook(self):
        record = ready_draft_order()
        assert derive_checkout_status(record, lambda r: True) is CheckoutStatus.REQUIRES_ESCALATION
        assert derive_checkout_status(record, lambda r: False) is CheckoutStatus.READY_FOR_COMPLETE

    def test_escalation_hook_does_not_override_completion(self):
        record = draft_order(order=LINKED_ORDER)
        assert derive_checkout_status(record, lambda r: True) is CheckoutStatus.COMPLETED


class TestCheckoutMessages:
    """Tests for generate_checkout_messages."""

    def test_incomplete_lists_missing_fields(self):
        record = draft_order()
        messages = generate_checkout_messages(record, CheckoutStatus.INCOMPLETE)

        assert [m.code for m in messages] == ["missing_buyer_email", "missing_shipping_address"]
        assert messages[0].field == "buyer.email"
        assert messages[1].field == "fulfillment.destination"
        assert all(m.severity.value == "requires_buyer_input" for m in messages)

    def test_empty_cart_message(self):
        record = ready_draft_order(invoiceUrl=None, lineItems={"edges": []})
        messages = generate_checkout_messages(record, CheckoutStatus.INCOMPLETE)

        assert [m.code for m in messages] == ["empty_cart"]
        assert messages[0].severity.value == "recoverable"

    def test_ready_has_no_messages(self):
        assert generate_checkout_messages(ready_draft_order(), CheckoutStatus.READY_FOR_COMPLETE) == []

    def test_completed_has_no_messages(self):
        record = draft_order(order=LINKED_ORDER)
        assert generate_checkout_messages(record, CheckoutStatus.COMPLETED) == []

    def test_escalation_warning(self):
        messages = generate_checkout_messages(ready_draft_order(), CheckoutStatus.REQUIRES_ESCALATION)
        assert len(messages) == 1
        assert messages[0].type.value == "warning"
        assert messages[0].severity.value == "requires_buyer_review"


class TestExpiry:
    """Tests for compute_expires_at."""

    def test_creation_plus_ttl(self):
        expires = compute_expires_at(draft_order(), CheckoutStatus.INCOMPLETE, ttl_hours=24)
        assert expires == "2026-01-02T12:00:00+00:00"

    def test_custom_ttl(self):
        expires = compute_expires_at(draft_order(), CheckoutStatus.INCOMPLETE, ttl_hours=1)
        assert expires == "2026-01-01T13:00:00+00:00"

    @pytest.mark.parametrize("status", [CheckoutStatus.COMPLETED, CheckoutStatus.CANCELED])
    def test_terminal_has_no_expiry(self, status):
        assert compute_expires_at(draft_order(), status) is None

    def test_missing_creation_time(self):
        assert compute_expires_at(draft_order(createdAt=None), CheckoutStatus.INCOMPLETE) is None


class TestMapCheckout:
    """Tests for map_checkout."""

    def test_maps_ready_record(self):
        checkout = map_checkout(ready_draft_order())

        assert checkout.id == CHECKOUT_ID
        assert checkout.status is CheckoutStatus.READY_FOR_COMPLETE
        assert checkout.currency == "USD"
        assert checkout.buyer.email == "ada@example.com"
        assert checkout.buyer.addresses[0].city == "Springfield"
        assert checkout.fulfillment_destination.address1 == "1 Main St"
        assert checkout.continue_url is None
        assert checkout.order is None

    def test_line_items(self):
        item = map_checkout(draft_order()).line_items[0]

        assert item.variant_id == VARIANT_GID
        assert item.product_id == "gid://shopify/Product/1"
        assert item.quantity == 2
        assert item.price.amount == "25.00"
        assert item.image_url == "https://cdn.example.com/widget.png"

    def test_totals_are_ordered(self):
        totals = map_checkout(draft_order()).totals

        assert [t.type for t in totals] == [
            UCPTotalType.SUBTOTAL,
            UCPTotalType.TAX,
            UCPTotalType.SHIPPING,
            UCPTotalType.DISCOUNT,
            UCPTotalType.TOTAL,
        ]
        assert totals[-1].amount.amount == "54.00"

    def test_absent_totals_are_zero(self):
        record = draft_order()
        del record["totalShippingPriceSet"]
        shipping = map_checkout(record).totals[2]
        assert shipping.amount.amount == "0"

    def test_links(self):
        links = map_checkout(draft_order()).links
        assert links[0].rel == "self"
        assert links[0].href == f"/checkout-sessions/{CHECKOUT_ID}"
        assert links[1].rel == "checkout"
        assert links[1].href == "https://shop.example.com/invoices/abc"

    def test_order_reference(self):
        checkout = map_checkout(ready_draft_order(order=LINKED_ORDER))
        assert checkout.order.id == LINKED_ORDER["id"]
        assert checkout.order.number == "#1001"
        assert checkout.expires_at is None

    def test_escalated_checkout_carries_continue_url(self):
        checkout = map_checkout(ready_draft_order(), escalation_hook=lambda r: True)
        assert checkout.continue_url == "https://shop.example.com/invoices/abc"

    def test_currency_follows_record(self):
        checkout = map_checkout(draft_order(currency="EUR"))
        assert checkout.currency == "EUR"
        assert checkout.totals[0].amount.currency_code == "EUR"


class TestCreateCheckout:
    """Tests for create_checkout."""

    @pytest.mark.asyncio
    async def test_creates_draft_order(self, backend, checkouts):
        backend.respond("DraftOrderCreate", _payload("draftOrderCreate", ready_draft_order()))

        checkout = await checkouts.create_checkout(
            [UCPLineItem(product_id=VARIANT_GID, variant_id=VARIANT_GID, quantity=2)],
            buyer=UCPBuyer(email="ada@example.com"),
            fulfillment_destination=UCPAddress(address1="1 Main St", city="Springfield"),
        )

        assert checkout.status is CheckoutStatus.READY_FOR_COMPLETE
        variables = backend.variables_for("DraftOrderCreate")
        assert variables["input"] == {
            "lineItems": [{"variantId": VARIANT_GID, "quantity": 2}],
            "email": "ada@example.com",
            "shippingAddress": {"address1": "1 Main St", "city": "Springfield"},
        }
        assert variables["lineItemsFirst"] == 50

    @pytest.mark.asyncio
    async def test_rejects_empty_line_items(self, backend, checkouts):
        with pytest.raises(UCPValidationError) as exc_info:
            await checkouts.create_checkout([])

        assert exc_info.value.code == "invalid_line_items"
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_user_errors_raise_validation_error(self, backend, checkouts):
        backend.respond(
            "DraftOrderCreate",
            _payload("draftOrderCreate", None, [{"field": ["lineItems", "0", "variantId"], "message": "Variant is invalid"}]),
        )

        with pytest.raises(UCPValidationError) as exc_info:
            await checkouts.create_checkout([UCPLineItem(product_id=VARIANT_GID, variant_id=VARIANT_GID)])

        assert exc_info.value.message == "Variant is invalid"
        assert exc_info.value.field == "lineItems.0.variantId"

    @pytest.mark.asyncio
    async def test_missing_payload_is_backend_error(self, backend, checkouts):
        with pytest.raises(UCPBackendError):
            await checkouts.create_checkout([UCPLineItem(product_id=VARIANT_GID, variant_id=VARIANT_GID)])


class TestGetCheckout:
    """Tests for get_checkout."""

    @pytest.mark.asyncio
    async def test_returns_mapped_checkout(self, backend, checkouts):
        backend.respond("DraftOrder", _found(draft_order()))

        checkout = await checkouts.get_checkout(CHECKOUT_ID)

        assert checkout.status is CheckoutStatus.INCOMPLETE
        assert backend.variables_for("DraftOrder") == {"id": CHECKOUT_ID, "lineItemsFirst": 50}

    @pytest.mark.asyncio
    async def test_missing_checkout_raises(self, backend, checkouts):
        backend.respond("DraftOrder", _found(None))

        with pytest.raises(UCPNotFoundError) as exc_info:
            await checkouts.get_checkout("gid://shopify/DraftOrder/404")

        assert exc_info.value.http_status == 404

    @pytest.mark.asyncio
    async def test_reads_are_derived_each_time(self, backend, checkouts):
        """Status reflects the latest backend record, nothing is cached."""
        backend.respond("DraftOrder", _found(draft_order()))
        first = await checkouts.get_checkout(CHECKOUT_ID)

        backend.respond("DraftOrder", _found(ready_draft_order()))
        second = await checkouts.get_checkout(CHECKOUT_ID)

        assert first.status is CheckoutStatus.INCOMPLETE
        assert second.status is CheckoutStatus.READY_FOR_COMPLETE


class TestUpdateCheckout:
    """Tests for update_checkout."""

    @pytest.mark.asyncio
    async def test_sends_only_supplied_fields(self, backend, checkouts):
        backend.respond("DraftOrderUpdate", _payload("draftOrderUpdate", draft_order(customer={"email": "ada@example.com"})))

        await checkouts.update_checkout(CHECKOUT_ID, buyer=UCPBuyer(email="ada@example.com"))

        variables = backend.variables_for("DraftOrderUpdate")
        assert variables["id"] == CHECKOUT_ID
        assert variables["input"] == {"email": "ada@example.com"}

    @pytest.mark.asyncio
    async def test_replaces_line_items(self, backend, checkouts):
        backend.respond("DraftOrderUpdate", _payload("draftOrderUpdate", draft_order()))

        await checkouts.update_checkout(
            CHECKOUT_ID,
            line_items=[UCPLineItem(product_id=VARIANT_GID, variant_id=VARIANT_GID, quantity=5, properties={"gift": "yes"})],
        )

        assert backend.variables_for("DraftOrderUpdate")["input"] == {
            "lineItems": [{
                "variantId": VARIANT_GID,
                "quantity": 5,
                "customAttributes": [{"key": "gift", "value": "yes"}],
            }],
        }

    @pytest.mark.asyncio
    async def test_nothing_to_update_reads_current_state(self, backend, checkouts):
        backend.respond("DraftOrder", _found(draft_order()))

        checkout = await checkouts.update_checkout(CHECKOUT_ID)

        assert checkout.id == CHECKOUT_ID
        assert backend.operations() == ["DraftOrder"]

    @pytest.mark.asyncio
    async def test_missing_draft_order_raises(self, backend, checkouts):
        backend.respond("DraftOrderUpdate", _payload("draftOrderUpdate", None))

        with pytest.raises(UCPNotFoundError):
            await checkouts.update_checkout(CHECKOUT_ID, buyer=UCPBuyer(email="ada@example.com"))

    @pytest.mark.asyncio
    async def test_user_errors_raise(self, backend, checkouts):
        backend.respond(
            "DraftOrderUpdate",
            _payload("draftOrderUpdate", None, [{"field": ["email"], "message": "Email is invalid"}]),
        )

        with pytest.raises(UCPValidationError) as exc_info:
            await checkouts.update_checkout(CHECKOUT_ID, buyer=UCPBuyer(email="not-an-email"))

        assert exc_info.value.to_message()["field"] == "email"

    @pytest.mark.asyncio
    async def test_create_from_cart_keeps_cart_id(self, backend, checkouts):
        backend.respond("DraftOrderUpdate", _payload("draftOrderUpdate", ready_draft_order()))

        checkout = await checkouts.create_checkout_from_cart(
            CHECKOUT_ID,
            buyer=UCPBuyer(email="ada@example.com"),
            fulfillment_destination=UCPAddress(address1="1 Main St", city="Springfield"),
        )

        assert checkout.id == CHECKOUT_ID
        assert "lineItems" not in backend.variables_for("DraftOrderUpdate")["input"]


class TestCompleteCheckout:
    """Tests for complete_checkout."""

    @pytest.mark.asyncio
    async def test_completes_ready_checkout(self, backend, checkouts):
        backend.respond("DraftOrder", _found(ready_draft_order()))
        backend.respond(
            "DraftOrderComplete",
            _payload("draftOrderComplete", ready_draft_order(status="COMPLETED", order=LINKED_ORDER)),
        )

        checkout = await checkouts.complete_checkout(CHECKOUT_ID)

        assert checkout.status is CheckoutStatus.COMPLETED
        assert checkout.order.id == LINKED_ORDER["id"]
        assert backend.operations() == ["DraftOrder", "DraftOrderComplete"]

    @pytest.mark.asyncio
    async def test_missing_shipping_blocks_completion(self, backend, checkouts):
        backend.respond("DraftOrder", _found(ready_draft_order(shippingAddress=None)))

        with pytest.raises(UCPPreconditionFailedError) as exc_info:
            await checkouts.complete_checkout(CHECKOUT_ID)

        assert "shipping address" in exc_info.value.message
        assert exc_info.value.missing == ["shipping address"]
        assert "DraftOrderComplete" not in backend.operations()

    @pytest.mark.asyncio
    async def test_missing_everything_lists_both(self, backend, checkouts):
        backend.respond("DraftOrder", _found(draft_order()))

        with pytest.raises(UCPPreconditionFailedError) as exc_info:
            await checkouts.complete_checkout(CHECKOUT_ID)

        assert exc_info.value.missing == ["buyer email", "shipping address"]
        assert "buyer email and shipping address is missing" in exc_info.value.message
        assert exc_info.value.to_message()["severity"] == "requires_buyer_input"

    @pytest.mark.asyncio
    async def test_incomplete_street_address_blocks_completion(self, backend, checkouts):
        backend.respond("DraftOrder", _found(ready_draft_order(shippingAddress={"city": "Springfield"})))

        with pytest.raises(UCPPreconditionFailedError):
            await checkouts.complete_checkout(CHECKOUT_ID)

    @pytest.mark.asyncio
    async def test_already_completed_is_returned(self, backend, checkouts):
        backend.respond("DraftOrder", _found(ready_draft_order(order=LINKED_ORDER)))

        checkout = await checkouts.complete_checkout(CHECKOUT_ID)

        assert checkout.status is CheckoutStatus.COMPLETED
        assert backend.operations() == ["DraftOrder"]

    @pytest.mark.asyncio
    async def test_missing_checkout_raises(self, backend, checkouts):
        backend.respond("DraftOrder", _found(None))

        with pytest.raises(UCPNotFoundError):
            await checkouts.complete_checkout(CHECKOUT_ID)

    @pytest.mark.asyncio
    async def test_backend_rejection(self, backend, checkouts):
        backend.respond("DraftOrder", _found(ready_draft_order()))
        backend.respond(
            "DraftOrderComplete",
            _payload("draftOrderComplete", None, [{"field": None, "message": "Variant out of stock"}]),
        )

        with pytest.raises(UCPValidationError) as exc_info:
            await checkouts.complete_checkout(CHECKOUT_ID)

        assert exc_info.value.field is None


class TestCancelCheckout:
    """Tests for cancel_checkout."""

    @pytest.mark.asyncio
    async def test_returns_canceled_checkout(self, backend, checkouts):
        backend.respond("DraftOrder", _found(draft_order()))
        backend.respond(
            "DraftOrderDelete",
            {"data": {"draftOrderDelete": {"deletedId": CHECKOUT_ID, "userErrors": []}}},
        )

        checkout = await checkouts.cancel_checkout(CHECKOUT_ID)

        assert checkout.status is CheckoutStatus.CANCELED
        assert [m.code for m in checkout.messages] == ["checkout_canceled"]
        assert backend.variables_for("DraftOrderDelete") == {"input": {"id": CHECKOUT_ID}}

    @pytest.mark.asyncio
    async def test_canceled_even_without_deleted_id(self, backend, checkouts):
        backend.respond("DraftOrder", _found(draft_order()))
        backend.respond(
            "DraftOrderDelete",
            {"data": {"draftOrderDelete": {"deletedId": None, "userErrors": []}}},
        )

        checkout = await checkouts.cancel_checkout(CHECKOUT_ID)

        assert checkout.status is CheckoutStatus.CANCELED

    @pytest.mark.asyncio
    async def test_canceled_when_delete_payload_is_null(self, backend, checkouts):
        backend.respond("DraftOrder", _found(draft_order()))
        backend.respond("DraftOrderDelete", {"data": {"draftOrderDelete": None}})

        checkout = await checkouts.cancel_checkout(CHECKOUT_ID)

        assert checkout.status is CheckoutStatus.CANCELED

    @pytest.mark.asyncio
    async def test_canceled_when_delete_payload_is_absent(self, backend, checkouts):
        backend.respond("DraftOrder", _found(draft_order()))
        backend.respond("DraftOrderDelete", {"data": {}})

        checkout = await checkouts.cancel_checkout(CHECKOUT_ID)

        assert checkout.status is CheckoutStatus.CANCELED
        assert [m.code for m in checkout.messages] == ["checkout_canceled"]

    @pytest.mark.asyncio
    async def test_delete_user_errors_raise(self, backend, checkouts):
        backend.respond("DraftOrder", _found(draft_order()))
        backend.respond(
            "DraftOrderDelete",
            {"data": {"draftOrderDelete": {"deletedId": None, "userErrors": [{"field": ["id"], "message": "Draft order is locked"}]}}},
        )

        with pytest.raises(UCPValidationError) as exc_info:
            await checkouts.cancel_checkout(CHECKOUT_ID)

        assert exc_info.value.message == "Draft order is locked"

    @pytest.mark.asyncio
    async def test_missing_checkout_raises(self, backend, checkouts):
        backend.respond("DraftOrder", _found(None))

        with pytest.raises(UCPNotFoundError):
            await checkouts.cancel_checkout(CHECKOUT_ID)

        assert "DraftOrderDelete" not in backend.operations()


class TestSendInvoice:
    """Tests for send_invoice."""

    @pytest.mark.asyncio
    async def test_sends_to_explicit_address(self, backend, checkouts):
        backend.respond("DraftOrderInvoiceSend", _payload("draftOrderInvoiceSend", ready_draft_order()))

        checkout = await checkouts.send_invoice(CHECKOUT_ID, email="billing@example.com")

        assert checkout.id == CHECKOUT_ID
        assert backend.variables_for("DraftOrderInvoiceSend")["email"] == {"to": "billing@example.com"}

    @pytest.mark.asyncio
    async def test_defaults_to_customer_email(self, backend, checkouts):
        backend.respond("DraftOrderInvoiceSend", _payload("draftOrderInvoiceSend", ready_draft_order()))

        await checkouts.send_invoice(CHECKOUT_ID)

        assert "email" not in backend.variables_for("DraftOrderInvoiceSend")
