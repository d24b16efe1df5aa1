"""TaskETA configuration management."""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """TaskETA configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="TASKETA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # General
    env: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"
    debug: bool = False

    # Refresh loop
    refresh_interval_seconds: float = Field(
        default=1.0, description="Cadence of estimate refresh ticks"
    )

    # Report rendering
    end_time_format: str = Field(
        default="%c",
        description="strftime format for the estimated end time (locale date-time by default)",
    )

    # Input limits
    max_input_chars: int = Field(
        default=1_000_000, description="Largest pasted status document accepted by the API"
    )

    # CORS configuration (explicit allowlist)
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=False,
        description="Allow credentials in CORS requests"
    )
    cors_allowed_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        description="Allowed HTTP methods"
    )
    cors_allowed_headers: list[str] = Field(
        default=["Content-Type", "X-Request-ID"],
        description="Allowed request headers"
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 8080

    # Validators
    @field_validator("refresh_interval_seconds")
    @classmethod
    def validate_refresh_interval(cls, v: float) -> float:
        """Refresh cadence must be positive."""
        if v <= 0:
            raise ValueError(f"refresh_interval_seconds must be positive, got {v}")
        return v

    @field_validator("max_input_chars")
    @classmethod
    def validate_max_input_chars(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_input_chars must be at least 1, got {v}")
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        if v.upper() not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unknown log level: {v}")
        return v


settings = Settings()
