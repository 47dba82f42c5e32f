"""Storefront Service Configuration"""

import os
from decimal import Decimal
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", "config", ".env"))


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file="config/.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Storefront"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8001
    cors_origins: list[str] = ["*"]

    # Identity
    session_header: str = "X-Session-Id"
    session_cookie: str = "session_id"
    # Bearer token -> user id, registered by the auth service at startup
    auth_tokens: dict[str, str] = {}
    admin_user_ids: list[str] = []

    # Storage
    storage_timeout_seconds: float = 5.0

    # Catalog
    catalog_base_url: Optional[str] = None
    catalog_timeout_seconds: float = 10.0

    # Pricing rules
    free_shipping_threshold: Decimal = Decimal("75.00")
    shipping_flat_rate: Decimal = Decimal("9.99")
    tax_rate: Decimal = Decimal("0.08")
    currency: str = "USD"

    @property
    def remote_catalog_configured(self) -> bool:
        """Check if an external catalog service is configured"""
        return bool(self.catalog_base_url)

    def is_admin(self, user_id: Optional[str]) -> bool:
        return user_id is not None and user_id in self.admin_user_ids


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
