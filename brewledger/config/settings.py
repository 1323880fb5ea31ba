"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "brewledger.db"

    # Wait for a writer in another process, in ms
    busy_timeout: int = 30000

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class LedgerSettings(BaseSettings):
    """Inventory ledger thresholds and business constants."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    # Balances at or below this magnitude count as fully consumed
    stock_epsilon: Decimal = Decimal("0.01")
    # Finished beer is counted in whole pieces
    beer_stock_epsilon: int = 0

    expiry_warning_days: int = 30
    beer_expiry_warning_days: int = 90

    # The brewery's own finished-goods warehouse
    own_client: str = "ALVERESE"

    # When True, a positive beer movement on a key never seeded by initial
    # stock or packaging creates the entry instead of being dropped
    adopt_unseeded_beer_inbound: bool = False

    vat_rate: Decimal = Decimal("0.22")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "BrewLedger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
