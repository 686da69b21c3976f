"""
inventory_access.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (provider API key, JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    One settings object per client process, passed to the `AccessContext`
    composition root and from there to every consumer.
    """

    model_config = SettingsConfigDict(env_prefix="INV_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "inventory-access"
    log_level: str = "INFO"

    api_host: str = "127.0.0.1"
    api_port: int = 8080

    # Identity provider (GoTrue-style REST API)
    identity_base_url: str = "http://localhost:9999/auth/v1"
    identity_api_key: str = Field(default="dev-anon-key", repr=False)
    identity_timeout_seconds: float = 10.0

    # Access tokens issued by the identity provider
    jwt_alg: str = "HS256"
    jwt_issuer: str = "inventory-identity"
    jwt_audience: str = "authenticated"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./inventory.db"

    # Profile cache
    profile_cache_ttl_seconds: int = Field(default=300, ge=1)

    # Navigation
    login_route: str = "/auth/login"
    restricted_route: str = "/intruso"
    landing_route: str = "/dashboard"
    manager_route_prefixes: tuple[str, ...] = ("/admin", "/users", "/settings", "/importacao")
    public_route_prefixes: tuple[str, ...] = ("/auth",)

    # Notifications kept for the UI between polls
    notification_buffer_size: int = Field(default=50, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Route names mirror the navigation of the admin UI; change them together with
# the frontend router.
