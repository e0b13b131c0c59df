"""
Centralized configuration management using pydantic-settings.
This module provides a single source of truth for all application configuration.
"""


import os

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from histline.utils.logger import setup_logger

load_dotenv(override=False)


logger = setup_logger("core_config")


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

    # ===== Gemini Configuration =====
    gemini_api_key: str | None = Field(
        default=None, alias="GEMINI_API_KEY", description="Google Gemini API key"
    )

    default_gemini_model: str = Field(
        default="gemini-1.5-flash",
        alias="DEFAULT_GEMINI_MODEL",
        description="Gemini model used to turn extracts into timeline events",
    )

    # ===== OpenAI Configuration =====
    openai_api_key: str | None = Field(
        default=None,
        alias="OPENAI_API_KEY",
        description="OpenAI API key for accessing OpenAI-compatible services",
    )

    openai_base_url: str | None = Field(
        default=None,
        alias="OPENAI_BASE_URL",
        description="OpenAI API base URL, defaults to https://api.openai.com/v1",
    )

    default_openai_model: str = Field(
        default="gpt-4o-mini",
        alias="DEFAULT_OPENAI_MODEL",
        description="Default OpenAI model to use",
    )

    # ===== LLM Provider Configuration =====
    default_llm_provider: str = Field(
        default="gemini",
        alias="DEFAULT_LLM_PROVIDER",
        description="LLM provider used for event generation (gemini, openai)",
    )

    llm_event_generation_temperature: float = Field(
        default=0.2,
        alias="LLM_EVENT_GENERATION_TEMPERATURE",
        description="Sampling temperature for event generation",
    )

    llm_event_generation_max_tokens: int = Field(
        default=8192,
        alias="LLM_EVENT_GENERATION_MAX_TOKENS",
        description="Maximum output tokens for event generation",
    )

    # ===== Unsplash Configuration =====
    unsplash_access_key: str | None = Field(
        default=None,
        alias="UNSPLASH_ACCESS_KEY",
        description="Unsplash API access key (client_id)",
    )

    unsplash_api_url: str = Field(
        default="https://api.unsplash.com/search/photos",
        alias="UNSPLASH_API_URL",
        description="Unsplash photo search endpoint",
    )

    unsplash_per_page: int = Field(
        default=20,
        alias="UNSPLASH_PER_PAGE",
        ge=1,
        le=20,
        description="Number of images requested per search (hard cap 20)",
    )

    # ===== Wikipedia API Configuration =====
    wiki_api_url: str = Field(
        default="https://en.wikipedia.org/w/api.php",
        alias="WIKI_API_URL",
        description="MediaWiki API endpoint used for plain-text extracts",
    )

    wiki_api_timeout: tuple[float, float] = Field(
        default=(5.0, 60.0),
        alias="WIKI_API_TIMEOUT",
        description="HTTP timeout (connection, read) in seconds for provider calls",
    )

    wiki_api_user_agent: str = Field(
        default="HistlineProject/0.1 (Timeline search; contact: unavailable)",
        alias="WIKI_API_USER_AGENT",
        description="User-Agent string for Wikipedia API compliance",
    )

    # ===== Database Configuration =====
    app_database_url: str = Field(
        default="sqlite+aiosqlite:///./histline.db",
        alias="HISTLINE_DATABASE_URL",
        description="Database URL for the timeline cache",
    )

    timeline_store_backend: str = Field(
        default="database",
        alias="TIMELINE_STORE_BACKEND",
        description="Timeline cache backend (database, memory)",
    )

    # ===== Search Configuration =====
    default_range_start_year: int = Field(
        default=1900,
        alias="DEFAULT_RANGE_START_YEAR",
        description="Start year used when only an end year is supplied",
    )

    # ===== Server Configuration =====
    server_host: str = Field(
        default="0.0.0.0", alias="SERVER_HOST", description="Server host address"
    )

    server_port: int = Field(
        default=4000, alias="SERVER_PORT", description="Server port number"
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
        """Validate settings and log warnings for missing critical configurations."""

        if self.default_llm_provider == "gemini" and not self.gemini_api_key:
            logger.warning(
                "GEMINI_API_KEY environment variable not set. Event generation will be degraded."
            )

        if self.default_llm_provider == "openai" and not self.openai_api_key:
            logger.warning(
                "OPENAI_API_KEY environment variable not set. Event generation will be degraded."
            )

        if not self.unsplash_access_key:
            logger.warning(
                "UNSPLASH_ACCESS_KEY environment variable not set. Searches will return no images."
            )

        if self.timeline_store_backend not in ("database", "memory"):
            raise ValueError(
                f"Unsupported TIMELINE_STORE_BACKEND: {self.timeline_store_backend}"
            )

        logger.debug(f"Timeline store backend: {self.timeline_store_backend}")

        return self


# Global settings instance
settings = Settings()
