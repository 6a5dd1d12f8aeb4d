"""
Centralized configuration management using pydantic-settings.
This module provides a single source of truth for all application configuration.
"""

import os

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from linkshelf.utils.logger import setup_logger

load_dotenv(override=False)


logger = setup_logger("core_config")

DEFAULT_SECRET_KEY = "change-this-secret-key-in-production"


class Settings(BaseSettings):
    """
    Application settings managed by pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        env_prefix="",
        populate_by_name=True,
    )

    # ===== Database Configuration =====
    database_url: str = Field(
        default="sqlite+aiosqlite:///./linkshelf.db",
        alias="LINKSHELF_DATABASE_URL",
        description="Application database URL (postgresql+asyncpg or sqlite+aiosqlite)",
    )

    database_echo: bool = Field(
        default=False,
        alias="LINKSHELF_DATABASE_ECHO",
        description="Log every SQL statement emitted by the engine",
    )

    # ===== Authentication Configuration =====
    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        alias="SECRET_KEY",
        description="Secret used to sign bearer tokens",
    )

    jwt_algorithm: str = Field(
        default="HS256",
        alias="JWT_ALGORITHM",
        description="Signing algorithm for bearer tokens",
    )

    access_token_expire_minutes: int = Field(
        default=1440,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
        description="Bearer token lifetime in minutes (24 hours default)",
    )

    # ===== Login Throttle Configuration =====
    login_max_attempts: int = Field(
        default=5,
        alias="LOGIN_MAX_ATTEMPTS",
        description="Failed login attempts allowed per (email, ip) within the decay window",
    )

    login_decay_seconds: int = Field(
        default=60,
        alias="LOGIN_DECAY_SECONDS",
        description="Length of the login throttle window in seconds",
    )

    # ===== Listing Configuration =====
    page_size: int = Field(
        default=20,
        alias="PAGE_SIZE",
        description="Items per page for public link and archive listings",
    )

    archive_links_limit: int = Field(
        default=10,
        alias="ARCHIVE_LINKS_LIMIT",
        description="Number of most recently added links returned for an archive",
    )

    # ===== Media Configuration =====
    media_root: str = Field(
        default="storage",
        alias="MEDIA_ROOT",
        description="Directory where uploaded avatars and banners are stored",
    )

    app_url: str = Field(
        default="http://localhost:8080",
        alias="APP_URL",
        description="Public base URL used to build media URLs",
    )

    max_image_kilobytes: int = Field(
        default=2048,
        alias="MAX_IMAGE_KILOBYTES",
        description="Maximum accepted size for uploaded images",
    )

    # ===== Server Configuration =====
    server_host: str = Field(
        default="0.0.0.0", alias="SERVER_HOST", description="Server host address"
    )

    server_port: int = Field(
        default=8080, alias="SERVER_PORT", description="Server port number"
    )

    server_workers: int = Field(
        default=1, alias="SERVER_WORKERS", description="Number of uvicorn workers"
    )

    # ===== CORS Configuration =====
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",  # Vite dev server default port
            "http://localhost:3000",
            "http://127.0.0.1:5173",
        ],
        alias="CORS_ALLOW_ORIGINS",
        description="CORS allowed origins",
    )

    cors_allow_credentials: bool = Field(
        default=True,
        alias="CORS_ALLOW_CREDENTIALS",
        description="Whether to allow credentials in CORS requests",
    )

    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_METHODS",
        description="CORS allowed methods",
    )

    cors_allow_headers: list[str] = Field(
        default_factory=lambda: ["*"],
        alias="CORS_ALLOW_HEADERS",
        description="CORS allowed headers",
    )

    # User-facing hint for database connection errors
    db_unavailable_hint: str = os.getenv(
        "DB_UNAVAILABLE_HINT",
        "Database connection failed. The server may be offline or network connectivity is down.",
    )

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Normalize the database URL and warn about unsafe defaults."""

        if self.database_url.startswith("postgresql://"):
            self.database_url = self.database_url.replace(
                "postgresql://", "postgresql+asyncpg://", 1
            )
        elif self.database_url.startswith("sqlite://"):
            self.database_url = self.database_url.replace(
                "sqlite://", "sqlite+aiosqlite://", 1
            )

        if self.secret_key == DEFAULT_SECRET_KEY:
            logger.warning("SECRET_KEY environment variable not set, using default.")

        logger.debug(f"Login throttle: {self.login_max_attempts} attempts per {self.login_decay_seconds}s")

        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# Global settings instance
settings = Settings()
