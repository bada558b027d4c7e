"""Application settings and configuration.

This module defines all configuration options for the Threadline application.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Threadline", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Session tokens are minted by the external auth provider; we only verify them.
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./threadline.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Rate limiting backend: "memory" is process-local, "redis" is shared.
    rate_limit_backend: Literal["memory", "redis"] = Field(
        default="memory",
        alias="RATE_LIMIT_BACKEND",
    )
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")
    rate_limit_memory_max_entries: int = Field(
        default=10_000,
        alias="RATE_LIMIT_MEMORY_MAX_ENTRIES",
    )

    # Per-action fixed windows
    rate_limit_thread_window_ms: int = Field(default=60_000, alias="RATE_LIMIT_THREAD_WINDOW_MS")
    rate_limit_thread_max: int = Field(default=3, alias="RATE_LIMIT_THREAD_MAX")
    rate_limit_post_window_ms: int = Field(default=60_000, alias="RATE_LIMIT_POST_WINDOW_MS")
    rate_limit_post_max: int = Field(default=10, alias="RATE_LIMIT_POST_MAX")
    rate_limit_reaction_window_ms: int = Field(
        default=60_000,
        alias="RATE_LIMIT_REACTION_WINDOW_MS",
    )
    rate_limit_reaction_max: int = Field(default=30, alias="RATE_LIMIT_REACTION_MAX")
    rate_limit_report_window_ms: int = Field(
        default=15 * 60_000,
        alias="RATE_LIMIT_REPORT_WINDOW_MS",
    )
    rate_limit_report_max: int = Field(default=5, alias="RATE_LIMIT_REPORT_MAX")

    # Pagination
    default_page_size: int = Field(default=20, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, alias="MAX_PAGE_SIZE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling such as Alembic."""
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def rate_limits(self) -> dict[str, tuple[int, int]]:
        """Return ``(window_ms, max_requests)`` per rate-limited action."""
        return {
            "create_thread": (self.rate_limit_thread_window_ms, self.rate_limit_thread_max),
            "create_post": (self.rate_limit_post_window_ms, self.rate_limit_post_max),
            "toggle_reaction": (
                self.rate_limit_reaction_window_ms,
                self.rate_limit_reaction_max,
            ),
            "create_report": (self.rate_limit_report_window_ms, self.rate_limit_report_max),
        }


settings = Settings()
