"""
Configuration Management for the Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every setting has a working default so the tracker starts with no
environment at all; variables only override.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path.home() / ".finance_tracker",
        description="Directory holding the persisted blobs"
    )

    # One blob per key
    transactions_key: str = Field(
        default="finance_transactions",
        description="Key of the transactions blob"
    )
    recurring_key: str = Field(
        default="finance_recurring",
        description="Key of the recurring payments blob"
    )
    currency_key: str = Field(
        default="finance_currency",
        description="Key of the currency preference blob"
    )

    # Write retries
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a blob write is attempted"
    )
    write_backoff_seconds: float = Field(
        default=0.1,
        ge=0.0,
        le=5.0,
        description="Base delay for exponential backoff between write attempts"
    )

    @field_validator("transactions_key", "recurring_key", "currency_key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so path separators are not allowed."""
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Invalid storage key: {v!r}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    default_currency: str = Field(
        default="₽",
        min_length=1,
        description="Currency used until the user picks one"
    )

    # Dashboard list sizes
    recent_limit: int = Field(
        default=5,
        ge=1,
        description="How many transactions recent_transactions returns"
    )
    top_expenses_limit: int = Field(
        default=5,
        ge=1,
        description="How many transactions top_expenses returns"
    )

    # Input validation thresholds
    max_reasonable_amount: float = Field(
        default=10_000_000.0,
        description="Amounts above this are flagged for review"
    )
    future_date_tolerance_days: int = Field(
        default=1,
        ge=0,
        description="How many days in the future a transaction date can be"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
