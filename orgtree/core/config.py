"""Configuration settings using Pydantic Settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str
    sql_echo: bool = False
    slow_query_ms: float = 0

    # JWT Configuration (tokens are issued by the identity provider)
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 30

    environment: Literal["development", "production"] = "development"
    api_docs_enabled: bool | None = None
    log_level: str = "INFO"

    # CORS
    cors_allow_origins: list[str] = ["http://localhost:3000"]
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    cors_allow_headers: list[str] = [
        "Accept",
        "Authorization",
        "Content-Type",
        "X-Request-ID",
        "X-Metrics-Token",
    ]
    cors_allow_credentials: bool = True

    # Organization hierarchy
    hierarchy_max_depth: int = 100
    notifications_enabled: bool = True

    # Required in production to scrape /api/metrics
    metrics_token: str | None = None

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _parse_csv_lists(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("hierarchy_max_depth")
    @classmethod
    def _positive_depth(cls, v: int) -> int:
        if v < 1:
            raise ValueError("HIERARCHY_MAX_DEPTH must be at least 1")
        return v

    @model_validator(mode="after")
    def _validate_production_settings(self) -> Settings:
        if self.environment != "production":
            return self

        insecure_jwt_secrets = {
            "dev-secret-change-in-production",
            "your-secret-key-change-in-production",
            "change-me",
            "changeme",
        }
        if self.jwt_secret in insecure_jwt_secrets or len(self.jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be a strong secret in production")

        for field_name in ("cors_allow_origins", "cors_allow_methods", "cors_allow_headers"):
            if "*" in getattr(self, field_name):
                raise ValueError(f"{field_name.upper()} cannot contain '*' in production")

        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
