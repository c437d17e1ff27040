"""
Configuration Management for Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Only the location of the data files and logging behaviour are configurable;
the record format itself is fixed.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from LEDGER_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path.home() / ".budget",
        description="Directory holding the *.data files"
    )
    default_currency: str = Field(
        default="USD",
        min_length=1,
        description="Currency used when an asset does not name one"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON instead of console lines"
    )

    @field_validator('data_dir')
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Expand ~ so the gateway always sees an absolute-ish path."""
        return v.expanduser()

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
