"""Shared fixtures: a scripted in-process backend and record factories."""
from __future__ import annotations

import copy
import re
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest

_OPERATION_RE = re.compile(r"(?:query|mutation)\s+(\w+)")

Response = Union[Dict[str, Any], Callable[[Dict[str, Any]], Dict[str, Any]], Exception]


class FakeBackend:
    """CommerceBackend double.

    Responses are scripted per GraphQL operation name (``DraftOrderCreate``,
    ``DraftOrder``...). Every call is recorded as ``(operation, variables)``.
    """

    def __init__(self) -> None:
        self.responses: Dict[str, Response] = {}
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def respond(self, operation: str, response: Response) -> None:
        self.responses[operation] = response

    def operations(self) -> List[str]:
        return [operation for operation, _ in self.calls]

    def variables_for(self, operation: str) -> Dict[str, Any]:
        for name, variables in self.calls:
            if name == operation:
                return variables
        raise AssertionError(f"{operation} was never called")

    async def execute(
        self,
        document: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        match = _OPERATION_RE.search(document)
        assert match, "document has no named operation"
        operation = match.group(1)
        self.calls.append((operation, copy.deepcopy(variables or {})))

        response = self.responses.get(operation)
        if response is None:
            return {"data": {}}
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(variables or {})
        return copy.deepcopy(response)


def money_set(amount: str, currency: str = "USD") -> Dict[str, Any]:
    return {"shopMoney": {"amount": amount, "currencyCode": currency}}


def line_item_node(
    node_id: str = "gid://shopify/DraftOrderLineItem/1",
    variant_id: str = "gid://shopify/ProductVariant/11",
    product_id: str = "gid://shopify/Product/1",
    quantity: int = 2,
    price: str = "25.00",
    currency: str = "USD",
    name: str = "Widget",
) -> Dict[str, Any]:
    return {
        "id": node_id,
        "name": name,
        "quantity": quantity,
        "sku": "WID-1",
        "variant": {
            "id": variant_id,
            "price": price,
            "product": {
                "id": product_id,
                "title": name,
                "featuredImage": {"url": "https://cdn.example.com/widget.png"},
            },
        },
        "originalUnitPriceSet": money_set(price, currency),
    }


SHIPPING_ADDRESS = {
    "address1": "1 Main St",
    "address2": None,
    "city": "Springfield",
    "province": "Illinois",
    "provinceCode": "IL",
    "country": "United States",
    "countryCodeV2": "US",
    "zip": "62701",
    "phone": None,
    "firstName": "Ada",
    "lastName": "Lovelace",
    "company": None,
}

CUSTOMER = {
    "id": "gid://shopify/Customer/7",
    "email": "ada@example.com",
    "firstName": "Ada",
    "lastName": "Lovelace",
    "phone": None,
}


def draft_order(
    draft_id: str = "gid://shopify/DraftOrder/1",
    currency: str = "USD",
    **overrides: Any,
) -> Dict[str, Any]:
    """A draft order with one line item, no buyer and no shipping address."""
    record = {
        "id": draft_id,
        "name": "#D1",
        "createdAt": "2026-01-01T12:00:00Z",
        "updatedAt": "2026-01-01T12:00:00Z",
        "invoiceUrl": "https://shop.example.com/invoices/abc",
        "status": "OPEN",
        "completedAt": None,
        "order": None,
        "totalPriceSet": money_set("54.00", currency),
        "subtotalPriceSet": money_set("50.00", currency),
        "totalTaxSet": money_set("4.00", currency),
        "totalShippingPriceSet": money_set("0.00", currency),
        "totalDiscountsSet": money_set("0.00", currency),
        "lineItems": {"edges": [{"node": line_item_node(currency=currency)}]},
        "customer": None,
        "shippingAddress": None,
        "billingAddress": None,
    }
    record.update(overrides)
    return record


def ready_draft_order(**overrides: Any) -> Dict[str, Any]:
    """A draft order with buyer email, shipping address and invoice URL."""
    fields = {"customer": dict(CUSTOMER), "shippingAddress": dict(SHIPPING_ADDRESS)}
    fields.update(overrides)
    return draft_order(**fields)


def order_record(**overrides: Any) -> Dict[str, Any]:
    """A paid, unfulfilled order with one line item and a shipping address."""
    node = line_item_node(node_id="gid://shopify/LineItem/1")
    node["fulfillableQuantity"] = 2
    node["fulfillmentStatus"] = "UNFULFILLED"
    record = {
        "id": "gid://shopify/Order/5",
        "name": "#1001",
        "createdAt": "2026-01-02T10:00:00Z",
        "updatedAt": "2026-01-02T10:00:00Z",
        "statusPageUrl": "https://shop.example.com/orders/5",
        "displayFinancialStatus": "PAID",
        "displayFulfillmentStatus": "UNFULFILLED",
        "cancelledAt": None,
        "totalPriceSet": money_set("54.00"),
        "subtotalPriceSet": money_set("50.00"),
        "totalTaxSet": money_set("4.00"),
        "totalShippingPriceSet": money_set("0.00"),
        "totalDiscountsSet": money_set("0.00"),
        "totalRefundedSet": money_set("0.00"),
        "lineItems": {"edges": [{"node": node}]},
        "customer": None,
        "shippingAddress": dict(SHIPPING_ADDRESS),
        "fulfillments": [],
        "refunds": [],
    }
    record.update(overrides)
    return record


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
