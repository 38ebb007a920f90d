"""Configuration surface for the UCP bridge."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class UCPBridgeSettings(BaseSettings):
    """Bridge configuration, read from ``UCP_BRIDGE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="UCP_BRIDGE_",
        env_file=".env",
        extra="ignore",
        validate_default=True,
    )

    # Environment
    environment: Literal["dev", "sandbox", "prod"] = "dev"

    # Backend (Shopify Admin GraphQL API)
    shop_domain: str = ""
    admin_access_token: str = ""
    api_version: str = "2026-01"
    request_timeout_seconds: float = 30.0

    # Mapping behaviour
    checkout_ttl_hours: int = 24
    default_currency: str = "USD"
    line_items_page_size: int = 50
    default_list_limit: int = 20

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("default_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 3:
            raise ValueError("default_currency must be a three-letter ISO-4217 code")
        return v

    @field_validator("shop_domain")
    @classmethod
    def validate_shop_domain(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if "://" in v:
            raise ValueError("shop_domain must be a bare host, e.g. example.myshopify.com")
        return v

    @field_validator("admin_access_token")
    @classmethod
    def validate_access_token(cls, v: str, info: ValidationInfo) -> str:
        env = info.data.get("environment", "dev")
        if env != "dev" and not v:
            raise ValueError("UCP_BRIDGE_ADMIN_ACCESS_TOKEN is required outside dev")
        return v

    @property
    def graphql_endpoint(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"


@lru_cache
def load_settings(env_file: str | None = None) -> UCPBridgeSettings:
    """Load UCPBridgeSettings once per process to keep services consistent."""
    env_path = Path(env_file) if env_file else None
    return UCPBridgeSettings(_env_file=env_path)


__all__ = ["UCPBridgeSettings", "load_settings"]
