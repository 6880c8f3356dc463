"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import LedgerConstants, PricingConstants
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import BusyTimeoutMs, ConnectionTimeoutS


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/jukebox.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: BusyTimeoutMs = Field(
        default=5000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: ConnectionTimeoutS = Field(
        default=10,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class PricingSettings(BaseModel):
    """Quote list size and position curve."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    quoted_positions: int = Field(
        default=PricingConstants.DEFAULT_QUOTED_POSITIONS,
        ge=1,
        le=100,
        validation_alias=AliasChoices("quoted_positions", "positions"),
    )
    position_exponent: float = Field(
        default=1.0,
        gt=0.0,
        le=10.0,
        validation_alias=AliasChoices("position_exponent", "exponent"),
    )


class LedgerSettings(BaseModel):
    """Wallet defaults and ledger entry descriptions."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    initial_balance_cents: int = Field(
        default=LedgerConstants.INITIAL_BALANCE_CENTS,
        ge=0,
        validation_alias=AliasChoices("initial_balance_cents", "welcome_bonus_cents"),
    )
    initial_description: str = Field(default=LedgerConstants.INITIAL_DESCRIPTION, min_length=1)
    debit_description: str = Field(default=LedgerConstants.DEBIT_DESCRIPTION, min_length=1)
    refund_description: str = Field(default=LedgerConstants.REFUND_DESCRIPTION, min_length=1)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DATABASE__URL, DATABASE__BUSY_TIMEOUT_MS, ...
    - PRICING__QUOTED_POSITIONS, PRICING__POSITION_EXPONENT
    - LEDGER__INITIAL_BALANCE_CENTS, LEDGER__DEBIT_DESCRIPTION, ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(valid_levels))
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
