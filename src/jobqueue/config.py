"""Application configuration using Pydantic Settings.

This module provides centralized configuration management with environment
variable validation, type coercion, and default values.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field
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
    """Job queue settings with environment variable validation.

    All settings can be overridden via environment variables
    (e.g. ``DEFAULT_RETRIES=3``) or a ``.env`` file.
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
    app_name: str = Field(
        default="jobqueue",
        description="Service name attached to every log record",
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
    # Jobs
    # ========================================
    default_retries: int = Field(
        default=0,
        ge=0,
        description="Retry budget for jobs added without an explicit one",
    )
    settled_job_max_age_seconds: int = Field(
        default=86400,
        ge=0,
        description="Age after which settled jobs are purged by remove_settled_jobs",
    )

    # ========================================
    # Derived Properties
    # ========================================
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
    """Get cached settings.

    This function is cached to avoid re-reading environment variables
    on every access.

    Returns:
        Settings: Settings instance
    """
    return Settings()
