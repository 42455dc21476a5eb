"""Client configuration."""

import logging

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://realtime-api.trafiklab.se/v1"


class Settings(BaseSettings):
    """Settings read from the environment and an optional ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "trafiklab-realtime"
    DEBUG: bool = False

    # Trafiklab API
    TRAFIKLAB_BASE_URL: str = DEFAULT_BASE_URL
    TRAFIKLAB_API_KEY: str | None = Field(default=None, validation_alias="SECRET_TRAFIKLAB_API_KEY")
    REQUEST_TIMEOUT: float = 10.0  # Seconds, handed to the HTTP transport as-is

    # Logging
    LOG_LEVEL: str = "INFO"

    # OpenTelemetry
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "trafiklab-realtime"
    OTEL_ENVIRONMENT: str = "production"
    OTEL_EXPORTER_OTLP_TRACES_ENDPOINT: str | None = None
    OTEL_EXPORTER_OTLP_LOGS_ENDPOINT: str | None = None
    OTEL_EXPORTER_OTLP_HEADERS: str | None = Field(default=None, validation_alias="SECRET_OTEL_HEADERS")
    OTEL_LOG_LEVEL: str = "NOTSET"  # Minimum level exported over OTLP; NOTSET exports everything

    @field_validator("TRAFIKLAB_BASE_URL", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop a trailing slash so path templates can be appended directly."""
        return v.rstrip("/")

    @field_validator("REQUEST_TIMEOUT", mode="after")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        """Reject zero and negative timeouts."""
        if v <= 0:
            msg = f"REQUEST_TIMEOUT must be greater than zero, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("LOG_LEVEL", "OTEL_LOG_LEVEL", mode="after")
    @classmethod
    def validate_level_name(cls, v: str, info: ValidationInfo) -> str:
        """Upper-case a level name and check it against the logging module's levels."""
        normalized = v.upper()
        known = logging.getLevelNamesMapping()
        if normalized not in known:
            msg = f"Invalid {info.field_name} '{v}'. Must be one of: {', '.join(sorted(known))}"
            raise ValueError(msg)
        return normalized


settings = Settings()
