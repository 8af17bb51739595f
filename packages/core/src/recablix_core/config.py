"""Configuration for recablix-core.

Pydantic Settings-based configuration with environment variable support and
defaults for batch recategorization runs.

Usage:
    from recablix_core.config import RecablixConfig, configure_logging

    config = RecablixConfig()
    configure_logging(config)

    print(config.default_province_code)
"""

import logging

import pydantic
import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import ClientActivity
from .validation import PROVINCES


class RecablixConfig(BaseSettings):
    """Root configuration.

    Environment Variables:
        RECABLIX_ENV: Environment name (development, staging, production, test)
        RECABLIX_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        RECABLIX_DEFAULT_ACTIVITY: Activity used when a client profile has none
        RECABLIX_DEFAULT_PROVINCE_CODE: Province used when a client profile has none
        RECABLIX_CURRENCY_SYMBOL: Symbol used by the money formatters
    """

    model_config = SettingsConfigDict(
        env_prefix="RECABLIX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    default_activity: ClientActivity = Field(
        default=ClientActivity.SERVICES,
        description="Activity assumed for clients without recategorization data",
    )
    default_province_code: str = Field(
        default="901",
        description="Province assumed for clients without recategorization data",
    )
    currency_symbol: str = Field(
        default="$",
        description="Currency symbol for formatted amounts",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @field_validator("default_province_code")
    @classmethod
    def validate_province(cls, v: str) -> str:
        """Default province must be a known province code."""
        v = v.strip()
        if v not in PROVINCES:
            raise ValueError(f"Unknown province code: {v}")
        return v

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"


def load_config(**overrides) -> RecablixConfig:
    """Load the configuration from the environment.

    Raises:
        ConfigurationError: When a setting has an invalid value.
    """
    try:
        return RecablixConfig(**overrides)
    except pydantic.ValidationError as e:
        first = e.errors(include_url=False)[0]
        key = "RECABLIX_" + str(first["loc"][0]).upper() if first["loc"] else None
        raise ConfigurationError(
            f"Invalid configuration: {first['msg']}",
            config_key=key,
            actual=first.get("input"),
        ) from e


def configure_logging(config: RecablixConfig) -> None:
    """Configure structlog level and renderer from the configuration.

    Production emits JSON lines; every other environment uses the console
    renderer.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if config.is_production
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.log_level)
        ),
        cache_logger_on_first_use=False,
    )
