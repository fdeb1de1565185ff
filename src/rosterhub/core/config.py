from functools import lru_cache
from typing import Literal

from limits import parse as parse_rate_limit
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_JWT_SECRET = "change-this-to-a-secure-random-string"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "RosterHub"
    app_env: Literal["development", "testing", "production"] = "development"
    debug: bool = False

    # Request context
    log_user_emails: bool = False  # Keep False in production (GDPR)
    trusted_proxy_ips: list[str] = []
    cors_origins: list[str] = ["http://localhost:3000"]
    metrics_api_key: str | None = None  # If set, /metrics requires X-Metrics-Key
    shutdown_grace_period: int = 30

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_statement_cache_size: int = 100  # 0 behind pgbouncer transaction pooling

    # Bearer tokens are minted by the identity provider with this shared secret
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15

    # Password hashing for accounts created on invite acceptance
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Stripe
    stripe_secret_key: str | None = None  # Unset: cancellation reports FAILED
    stripe_webhook_secret: str | None = None  # Unset: webhook endpoint answers 503

    # Parent invites
    parent_invite_expire_days: int = Field(default=7, ge=1)
    invite_accept_rate_limit: str = "30/minute"

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_queue_prefix: str = "rosterhub"
    temporal_queue_shards: int = Field(default=1, ge=1, le=99)
    organization_deletion_schedule: str | None = "0 4 * * *"  # cron, UTC; None disables

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == PLACEHOLDER_JWT_SECRET:
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Credentials are allowed, so browsers refuse a wildcard origin."""
        if "*" in v:
            raise ValueError("CORS wildcard '*' is not allowed; list explicit origins")
        return v

    @field_validator("invite_accept_rate_limit")
    @classmethod
    def validate_rate_limit(cls, v: str) -> str:
        parse_rate_limit(v)
        return v

    @field_validator("organization_deletion_schedule")
    @classmethod
    def validate_deletion_schedule(cls, v: str | None) -> str | None:
        if not v:
            return None
        if len(v.split()) != 5:
            raise ValueError("ORGANIZATION_DELETION_SCHEDULE must be a 5-field cron expression")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
