"""GraphQL documents for the Shopify Admin API.

Every document that selects line items takes a ``$lineItemsFirst`` variable
so the page size stays a caller decision.
"""
from __future__ import annotations


def _money(name: str) -> str:
    return f"""
  {name} {{
    shopMoney {{
      amount
      currencyCode
    }}
  }}"""


_ADDRESS_FIELDS = """
    address1
    address2
    city
    province
    provinceCode
    country
    countryCodeV2
    zip
    phone
    firstName
    lastName
    company
"""

_LINE_ITEM_NODE_FIELDS = f"""
        id
        name
        quantity
        sku
        variant {{
          id
          price
          product {{
            id
            title
            featuredImage {{
              url
            }}
          }}
        }}
        {_money("originalUnitPriceSet")}
"""

_CUSTOMER_FIELDS = """
  customer {
    id
    email
    firstName
    lastName
    phone
  }
"""

# ============ Draft orders (carts and checkouts) ============

CART_FIELDS = f"""
  id
  name
  createdAt
  updatedAt
  invoiceUrl
  status
  {_money("totalPriceSet")}
  {_money("subtotalPriceSet")}
  {_money("totalTaxSet")}
  lineItems(first: $lineItemsFirst) {{
    edges {{
      node {{
        {_LINE_ITEM_NODE_FIELDS}
      }}
    }}
  }}
  {_CUSTOMER_FIELDS}
"""

CHECKOUT_FIELDS = f"""
  id
  name
  createdAt
  updatedAt
  invoiceUrl
  status
  completedAt
  order {{
    id
    name
    statusPageUrl
  }}
  {_money("totalPriceSet")}
  {_money("subtotalPriceSet")}
  {_money("totalTaxSet")}
  {_money("totalShippingPriceSet")}
  {_money("totalDiscountsSet")}
  lineItems(first: $lineItemsFirst) {{
    edges {{
      node {{
        {_LINE_ITEM_NODE_FIELDS}
      }}
    }}
  }}
  {_CUSTOMER_FIELDS}
  shippingAddress {{
    {_ADDRESS_FIELDS}
  }}
  billingAddress {{
    {_ADDRESS_FIELDS}
  }}
"""


def draft_order_query(fields: str) -> str:
    return f"""
query DraftOrder($id: ID!, $lineItemsFirst: Int!) {{
  draftOrder(id: $id) {{
    {fields}
  }}
}}
"""


def draft_orders_query(fields: str) -> str:
    return f"""
query DraftOrders($first: Int!, $lineItemsFirst: Int!) {{
  draftOrders(first: $first, sortKey: UPDATED_AT, reverse: true) {{
    edges {{
      node {{
        {fields}
      }}
    }}
  }}
}}
"""


def draft_order_create_mutation(fields: str) -> str:
    return f"""
mutation DraftOrderCreate($input: DraftOrderInput!, $lineItemsFirst: Int!) {{
  draftOrderCreate(input: $input) {{
    draftOrder {{
      {fields}
    }}
    userErrors {{
      field
      message
    }}
  }}
}}
"""


def draft_order_update_mutation(fields: str) -> str:
    return f"""
mutation DraftOrderUpdate($id: ID!, $input: DraftOrderInput!, $lineItemsFirst: Int!) {{
  draftOrderUpdate(id: $id, input: $input) {{
    draftOrder {{
      {fields}
    }}
    userErrors {{
      field
      message
    }}
  }}
}}
"""


DRAFT_ORDER_COMPLETE_MUTATION = f"""
mutation DraftOrderComplete($id: ID!, $lineItemsFirst: Int!) {{
  draftOrderComplete(id: $id) {{
    draftOrder {{
      {CHECKOUT_FIELDS}
    }}
    userErrors {{
      field
      message
    }}
  }}
}}
"""

DRAFT_ORDER_INVOICE_SEND_MUTATION = f"""
mutation DraftOrderInvoiceSend($id: ID!, $email: EmailInput, $lineItemsFirst: Int!) {{
  draftOrderInvoiceSend(id: $id, email: $email) {{
    draftOrder {{
      {CHECKOUT_FIELDS}
    }}
    userErrors {{
      field
      message
    }}
  }}
}}
"""

DRAFT_ORDER_DELETE_MUTATION = """
mutation DraftOrderDelete($input: DraftOrderDeleteInput!) {
  draftOrderDelete(input: $input) {
    deletedId
    userErrors {
      field
      message
    }
  }
}
"""

DRAFT_ORDERS_COUNT_QUERY = """
query DraftOrdersCount {
  draftOrdersCount {
    count
  }
}
"""

# ============ Orders ============

ORDER_FIELDS = f"""
  id
  name
  createdAt
  updatedAt
  statusPageUrl
  displayFinancialStatus
  displayFulfillmentStatus
  cancelledAt
  {_money("totalPriceSet")}
  {_money("subtotalPriceSet")}
  {_money("totalTaxSet")}
  {_money("totalShippingPriceSet")}
  {_money("totalDiscountsSet")}
  {_money("totalRefundedSet")}
  lineItems(first: $lineItemsFirst) {{
    edges {{
      node {{
        {_LINE_ITEM_NODE_FIELDS}
        fulfillableQuantity
        fulfillmentStatus
      }}
    }}
  }}
  {_CUSTOMER_FIELDS}
  shippingAddress {{
    {_ADDRESS_FIELDS}
  }}
  fulfillments {{
    id
    createdAt
    status
    trackingInfo {{
      number
      url
      company
    }}
    fulfillmentLineItems(first: $lineItemsFirst) {{
      edges {{
        node {{
          id
          quantity
          lineItem {{
            id
          }}
        }}
      }}
    }}
  }}
  refunds {{
    id
    createdAt
    note
    {_money("totalRefundedSet")}
  }}
"""

ORDER_QUERY = f"""
query Order($id: ID!, $lineItemsFirst: Int!) {{
  order(id: $id) {{
    {ORDER_FIELDS}
  }}
}}
"""

ORDERS_QUERY = f"""
query Orders($first: Int!, $lineItemsFirst: Int!) {{
  orders(first: $first, sortKey: CREATED_AT, reverse: true) {{
    edges {{
      node {{
        {ORDER_FIELDS}
      }}
    }}
  }}
}}
"""

ORDERS_SEARCH_QUERY = f"""
query OrdersByQuery($first: Int!, $query: String!, $lineItemsFirst: Int!) {{
  orders(first: $first, query: $query) {{
    edges {{
      node {{
        {ORDER_FIELDS}
      }}
    }}
  }}
}}
"""

ORDERS_COUNT_QUERY = """
query OrdersCount {
  ordersCount {
    count
  }
}
"""

# ============ Products ============

PRODUCTS_SEARCH_QUERY = """
query SearchProducts($query: String!, $first: Int!) {
  products(first: $first, query: $query) {
    edges {
      node {
        id
        title
        description
        vendor
        productType
        createdAt
        updatedAt
        tags
        images(first: 5) {
          edges {
            node {
              url
              altText
              width
              height
            }
          }
        }
        variants(first: 20) {
          edges {
            node {
              id
              title
              sku
              price
              inventoryQuantity
            }
          }
        }
      }
    }
  }
}
"""
