"""
Configuration Management for Debt Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here. Each area reads its own env prefix,
so a `.env` file can hold all of them side by side:

    DEBT_TRACKER_STORAGE_DATA_DIR=/var/lib/debt-tracker
    DEBT_TRACKER_LEDGER_CURRENCY_SYMBOL=$
    LOG_LEVEL=DEBUG
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Snapshot storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DEBT_TRACKER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".debt_tracker"),
        description="Directory holding one JSON snapshot file per user"
    )
    key_prefix: str = Field(
        default="debtTrackerData_",
        min_length=1,
        description="Prefix of the per-user storage key"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a snapshot write is attempted"
    )


class LedgerSettings(BaseSettings):
    """Ledger presentation and default values."""

    model_config = SettingsConfigDict(
        env_prefix="DEBT_TRACKER_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    currency_symbol: str = Field(
        default="₹",
        description="Symbol prefixed to formatted amounts"
    )
    recent_limit: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Number of transactions shown on the dashboard"
    )
    default_salary_day: int = Field(
        default=1,
        ge=1,
        le=31,
        description="Salary day used for a brand new ledger"
    )
    top_categories: int = Field(
        default=5,
        ge=1,
        le=20,
        description="How many expense categories a report breaks out"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Standard library log level name"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept level names the logging module knows."""
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level


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

    # Sub-settings are built on access so a broken section
    # only fails the code that needs it.

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    sections = {
        "storage": lambda: settings.storage,
        "ledger": lambda: settings.ledger,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
