"""Application settings and configuration.

This module defines all configuration options for the social network service.
Settings are loaded from environment variables (or a `.env` file) and handed to
`create_app` explicitly; nothing here is instantiated at import time.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    `SECRET_KEY` has no default: the process refuses to start without a signing
    secret supplied from the environment.
    """

    # Application metadata
    app_name: str = Field(default="Social Network", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8080, alias="APP_PORT")
    shutdown_grace_seconds: int = Field(default=30, ge=0, alias="SHUTDOWN_GRACE_SECONDS")

    # Security and authentication
    secret_key: str = Field(min_length=1, alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, alias="BCRYPT_ROUNDS")

    # Database configuration
    database_url: str = Field(default="sqlite:///./social_network.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    create_tables: bool = Field(default=True, alias="CREATE_TABLES")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, alias="LOG_FILE")

    # Rate limiting: the window and ceiling are fixed, only the table size is tunable
    rate_limit_max_visitors: int = Field(default=10_000, ge=1, alias="RATE_LIMIT_MAX_VISITORS")

    # Outbound email
    smtp_host: str | None = Field(default=None, alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_user: str | None = Field(default=None, alias="SMTP_USER")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    smtp_sender: str | None = Field(default=None, alias="SMTP_SENDER")
    smtp_start_tls: bool = Field(default=True, alias="SMTP_START_TLS")
    smtp_timeout_seconds: float = Field(default=30.0, alias="SMTP_TIMEOUT_SECONDS")
    broadcast_max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        alias="BROADCAST_MAX_UPLOAD_BYTES",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Reject secrets made only of whitespace."""
        if not v.strip():
            raise ValueError("SECRET_KEY must not be blank")
        return v

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Only symmetric HMAC algorithms are supported for token signing."""
        algorithm = v.upper()
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(
                f"JWT_ALGORITHM must be one of {sorted(HMAC_ALGORITHMS)}, got {v!r}"
            )
        return algorithm

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def smtp_configured(self) -> bool:
        """Return True when enough SMTP settings are present to dial out."""
        return bool(self.smtp_host)

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url


@lru_cache
def get_settings() -> Settings:
    """Build settings from the environment once per process."""
    return Settings()  # type: ignore[call-arg]
