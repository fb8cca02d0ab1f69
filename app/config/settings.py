"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for API runtime and conversion-engine access.

    Environment variable names map directly to field names in uppercase.
    Example: `conversion_engine_token` reads from `CONVERSION_ENGINE_TOKEN`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        conversion_engine_base_url: Base URL of the lead-conversion engine service.
        conversion_engine_token: Bearer token for conversion engine calls.
        conversion_engine_timeout_seconds: HTTP timeout for one engine call.
        conversion_max_batch_size: Maximum number of requests accepted in one batch.
        log_level: Minimum structlog level written to stderr.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    conversion_engine_base_url: str = Field(default="http://localhost:8081", min_length=1)
    conversion_engine_token: str = Field(min_length=1)
    conversion_engine_timeout_seconds: float = Field(default=30.0, gt=0)
    conversion_max_batch_size: int = Field(default=200, ge=1)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return normalized_value

    @field_validator("conversion_engine_base_url", "conversion_engine_token")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
