"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env file (.env.local for development)
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.local",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

DEFAULT_CORS_ORIGINS = (
    "https://lavender-parrot-848521.hostingersite.com,"
    "https://gkedgemedia.com,"
    "http://localhost:3000"
)

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.local")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class LLMSettings(BaseSettings):
    """Generative-AI provider configuration.

    The default provider is Gemini, reached through its OpenAI-compatible
    endpoint so a single SDK covers both providers.
    """

    provider: str = Field(
        "gemini",
        description="LLM provider name (gemini or openai)",
    )
    model: str = Field(
        "gemini-2.5-flash",
        description="Model name (e.g., gemini-2.5-flash, gpt-4o-mini)",
    )
    api_key: str | None = Field(
        None,
        validation_alias=AliasChoices("LLM_API_KEY", "GEMINI_API_KEY"),
        description="API key for the provider; the chat relay is disabled without it",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint (defaults to the provider's endpoint)",
    )
    timeout_seconds: float = Field(
        45.0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
        populate_by_name=True,
    )


class SMTPSettings(BaseSettings):
    """Outbound mail transport configuration for the contact form."""

    host: str = Field("smtp.gmail.com", description="SMTP server hostname")
    port: int = Field(587, description="SMTP port; 465 means implicit TLS")
    user: str | None = Field(None, description="SMTP username, also the sender address")
    password: str | None = Field(
        None,
        validation_alias=AliasChoices("SMTP_PASSWORD", "SMTP_PASS"),
        description="SMTP password",
    )
    from_name: str = Field(
        "GK Edge Website",
        description="Display name used in the From header",
    )
    recipient: str = Field(
        "info@gkedgemedia.com",
        description="Fixed destination address for contact submissions",
    )
    timeout_seconds: float = Field(30.0, description="SMTP connection timeout")

    model_config = SettingsConfigDict(
        env_prefix="SMTP_",
        case_sensitive=False,
        populate_by_name=True,
    )

    @property
    def configured(self) -> bool:
        """Whether credentials are present to authenticate with the server."""
        return bool(self.user and self.password)


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    chat_rate_limit_requests: int = Field(
        10,
        description="Maximum chat requests per window (per client IP)",
        ge=1,
    )
    chat_rate_limit_window_seconds: int = Field(
        60,
        description="Chat rate limit window size in seconds",
        ge=1,
    )
    chat_rate_limit_message: str = Field(
        "Whoa, we see you're spamming a bit there! Take it easy, "
        "you'll be able to message Arky again in a minute.",
        description="Error message returned when the chat limit is exceeded",
    )
    contact_rate_limit_requests: int = Field(
        3,
        description="Maximum contact submissions per window (per client IP)",
        ge=1,
    )
    contact_rate_limit_window_seconds: int = Field(
        900,
        description="Contact rate limit window size in seconds",
        ge=1,
    )
    contact_rate_limit_message: str = Field(
        "Too many contact form submissions, please try again later.",
        description="Error message returned when the contact limit is exceeded",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include RateLimit-* and Retry-After headers",
    )
    trust_forwarded_for: bool = Field(
        False,
        description="Use the first X-Forwarded-For hop as client IP (behind a proxy)",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class CORSSettings(BaseSettings):
    """Cross-origin policy for the website frontends."""

    allowed_origins: str = Field(
        DEFAULT_CORS_ORIGINS,
        description="Comma-separated list of allowed origins",
    )
    allow_credentials: bool = Field(True, description="Allow cookies/credentials")

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        case_sensitive=False,
    )

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(10_485_760, description="Rotate file after this size (0 disables)")
    backup_count: int = Field(5, description="Number of rotated files to keep")
    request_id_header: str = Field("X-Request-ID", description="Correlation header name")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class ServerSettings(BaseSettings):
    """Listening address for the bundled uvicorn runner."""

    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(3001, description="Listening port")

    model_config = SettingsConfigDict(case_sensitive=False)


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env file for APP_ENV.
    Missing credentials never fail startup: the relays report them per request.
    """

    app_env: str = APP_ENV
    llm: LLMSettings = Field(default_factory=LLMSettings)
    smtp: SMTPSettings = Field(default_factory=SMTPSettings)
    app: AppSettings = Field(default_factory=AppSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
