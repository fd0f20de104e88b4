"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Gateway and dashboard settings loaded from environment variables."""

    backend_origin: str = "http://localhost:8069"
    backend_api_prefix: str = "/api"
    backend_auth_path: str = "/web/session/authenticate"
    gateway_prefix: str = "/api"
    frontend_origin: str = "http://localhost:5173"
    upstream_timeout_seconds: float | None = None
    gateway_url: str = "http://localhost:3000/api"
    erp_database: str = "db_odoo"
    record_resource: str = "contacts"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def normalize_prefix(raw: str | None) -> str:
    """Return a path prefix as either "" or "/segment" without a trailing slash."""
    if raw is None:
        return ""
    cleaned = raw.strip().strip("/")
    if not cleaned:
        return ""
    return f"/{cleaned}"


def normalize_origin(raw: str) -> str:
    """Strip trailing slashes from an origin or base URL."""
    return raw.strip().rstrip("/")
