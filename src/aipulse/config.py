"""Application configuration using Pydantic Settings.

This module provides centralized configuration management with environment
variable validation, type coercion, and default values.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    CONSOLE = "console"


class Settings(BaseSettings):
    """Application settings with environment variable validation.

    All settings can be overridden via environment variables.
    Credentials (GITHUB_TOKEN, PRODUCTHUNT_DEVELOPER_TOKEN, GEMINI_API_KEY)
    should be provided via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Application
    # ========================================
    app_env: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    app_name: str = Field(
        default="AI Pulse",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.CONSOLE,
        description="Log output format (json for production, console for dev)",
    )

    # ========================================
    # Server
    # ========================================
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Server port",
    )

    # ========================================
    # Cache Database
    # ========================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./cache.db",
        description="Embedded database URL holding the api_cache table",
    )

    # ========================================
    # Upstream HTTP
    # ========================================
    http_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for outbound catalog requests",
    )
    user_agent: str = Field(
        default="AI-Pulse-App",
        description="User-Agent sent to upstream catalogs",
    )

    # ========================================
    # GitHub Catalog
    # ========================================
    github_token: SecretStr | None = Field(
        default=None,
        description="GitHub access token (optional, raises rate limits)",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL",
    )
    github_search_query: str = Field(
        default="ai tools",
        description="Repository search query",
    )
    github_page_size: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Repositories requested per page",
    )
    github_cache_ttl: int = Field(
        default=30 * 60,
        ge=0,
        description="Seconds before a cached GitHub page is considered stale",
    )

    # ========================================
    # Product Hunt Catalog
    # ========================================
    producthunt_developer_token: SecretStr | None = Field(
        default=None,
        description="Product Hunt developer token (required for live fetches)",
    )
    producthunt_api_url: str = Field(
        default="https://api.producthunt.com/v2/api/graphql",
        description="Product Hunt GraphQL endpoint",
    )
    producthunt_topic: str = Field(
        default="artificial-intelligence",
        description="Product Hunt topic slug to list",
    )
    producthunt_page_size: int = Field(
        default=20,
        ge=1,
        le=50,
        description="Posts requested per page",
    )
    producthunt_cache_ttl: int = Field(
        default=15 * 60,
        ge=0,
        description="Seconds before a cached Product Hunt page is considered stale",
    )

    # ========================================
    # Background Refresh
    # ========================================
    refresh_single_flight: bool = Field(
        default=False,
        description="Collapse concurrent stale refreshes of one key into one fetch",
    )

    # ========================================
    # Generative Text
    # ========================================
    gemini_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Gemini API key for description cleaning",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        description="OpenAI-compatible Gemini endpoint",
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash-exp",
        description="Gemini model to use",
    )
    gemini_timeout: int = Field(
        default=30,
        ge=1,
        description="Gemini request timeout in seconds",
    )

    # ========================================
    # Tool Storage
    # ========================================
    tool_storage_dir: str = Field(
        default="./data/tools",
        description="Directory holding persisted tool lists (one JSON blob per catalog)",
    )
    tool_storage_max_items: int = Field(
        default=5000,
        ge=1,
        description="Maximum tools kept per persisted list",
    )

    # ========================================
    # Derived Properties
    # ========================================
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == Environment.PRODUCTION

    @property
    def use_json_logs(self) -> bool:
        """Check if JSON logging should be used."""
        return self.log_format == LogFormat.JSON or self.is_production


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    This function is cached to avoid re-reading environment variables
    on every access. Use dependency injection in FastAPI routes.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
