"""Shopify Admin GraphQL client implementing CommerceBackend."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import UCPBridgeSettings
from ..exceptions import UCPBackendError

logger = logging.getLogger(__name__)


class ShopifyAdminClient:
    """Async client for the Shopify Admin GraphQL API.

    Errors are surfaced as UCPBackendError and never retried here; retry
    policy belongs to the caller.
    """

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = "2026-01",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.shop_domain = shop_domain
        self.api_version = api_version
        self.endpoint = f"/admin/api/{api_version}/graphql.json"
        self._client = httpx.AsyncClient(
            base_url=f"https://{shop_domain}",
            headers={
                "X-Shopify-Access-Token": access_token,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: UCPBridgeSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ShopifyAdminClient":
        return cls(
            shop_domain=settings.shop_domain,
            access_token=settings.admin_access_token,
            api_version=settings.api_version,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    async def execute(
        self,
        document: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Execute a GraphQL document and return the decoded body."""
        try:
            response = await self._client.post(
                self.endpoint,
                json={"query": document, "variables": variables or {}},
            )
        except httpx.HTTPError as e:
            logger.error(f"Shopify request failed: shop={self.shop_domain}, error={e}")
            raise UCPBackendError(f"Backend request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(
                f"Shopify returned HTTP {response.status_code}: shop={self.shop_domain}"
            )
            raise UCPBackendError(
                f"Backend returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UCPBackendError(
                "Backend returned a non-JSON response",
                status_code=response.status_code,
            ) from e

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            message = first.get("message") if isinstance(first, dict) else str(first)
            logger.error(f"Shopify GraphQL error: shop={self.shop_domain}, error={message}")
            raise UCPBackendError(
                f"Backend GraphQL error: {message}",
                status_code=response.status_code,
                details={"errors": errors},
            )

        return body

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ShopifyAdminClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["ShopifyAdminClient"]
