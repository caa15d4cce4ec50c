"""Application configuration with environment variable loading.

Pydantic-based settings for the completion gateway, the message store
and the chat page. Supports OpenAI and OpenAI-compatible APIs via a
custom base URL, and any SQLAlchemy async database URL.

Missing credentials are tolerated outside production: the service
wiring substitutes in-process fakes so local development is never
blocked. Production startup calls ``validate_for_production`` and
fails fast instead.
"""

import os
from enum import Enum

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from chatline.errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()


class Environment(str, Enum):
    """Deployment environments that change how missing config is handled."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_optional_int(name: str) -> int | None:
    value = os.getenv(name)
    return int(value) if value and value.strip() else None


class Settings(BaseModel):
    """Process-wide configuration.

    Attributes:
        environment: Deployment environment (development, test, production).
        openai_api_key: API key for the completion provider.
        base_url: API base URL (None for OpenAI default).
        model_name: Model identifier to request completions from.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in a completion (None for provider default).
        database_url: SQLAlchemy async URL of the message store.
        database_key: Store access key, injected as the URL password when set.
        create_schema: Create the messages table on startup if missing.
        api_base_url: Base URL the chat page uses to reach the chat endpoint.
            Defaults to localhost on the served PORT.
    """

    environment: Environment = Field(
        default_factory=lambda: Environment(os.getenv("APP_ENV", "development").lower()),
        description="Deployment environment",
    )
    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-3.5-turbo"),
        description="Model to use",
    )
    temperature: float = Field(
        default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.7")),
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int | None = Field(
        default_factory=lambda: _env_optional_int("LLM_MAX_TOKENS"),
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )
    database_url: str = Field(
        default_factory=lambda: os.getenv("DATABASE_URL", ""),
        description="SQLAlchemy async database URL",
    )
    database_key: str = Field(
        default_factory=lambda: os.getenv("DATABASE_KEY", ""),
        description="Store access key used as the database password",
    )
    create_schema: bool = Field(
        default_factory=lambda: _env_flag(
            "DB_CREATE_SCHEMA",
            os.getenv("APP_ENV", "development").lower() != Environment.PRODUCTION.value,
        ),
        description="Create the messages table on startup",
    )
    api_base_url: str = Field(
        default_factory=lambda: os.getenv(
            "API_BASE_URL", f"http://localhost:{os.getenv('PORT', '8000')}"
        ),
        description="Base URL of the chat endpoint as seen by the chat page",
    )

    @field_validator("openai_api_key", "database_url", "database_key")
    @classmethod
    def strip_secret(cls, v: str) -> str:
        """Strip surrounding whitespace so blank values count as missing."""
        return v.strip()

    @property
    def is_production(self) -> bool:
        return self.environment is Environment.PRODUCTION

    @property
    def has_llm_credentials(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def has_database(self) -> bool:
        return bool(self.database_url)

    def validate_for_production(self) -> None:
        """Fail fast when a production process is missing credentials.

        Raises:
            ConfigurationError: If the LLM key or the database URL is unset.
        """
        if not self.is_production:
            return

        missing = []
        if not self.has_llm_credentials:
            missing.append("LLM_API_KEY or OPENAI_API_KEY")
        if not self.has_database:
            missing.append("DATABASE_URL")
        if missing:
            raise ConfigurationError(
                f"Missing required configuration for production: {', '.join(missing)}"
            )


def get_settings() -> Settings:
    """Create settings from environment.

    Returns:
        Configured Settings instance.

    Raises:
        pydantic.ValidationError: If an environment value is out of range.
    """
    return Settings()
