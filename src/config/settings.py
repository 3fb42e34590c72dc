"""
Application settings.

Each section reads its own environment prefix (``STORAGE_``,
``NUMBERING_``, ``STOCK_``, ``API_``); top-level fields and the ``.env``
file apply to the whole process.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """SQLite location and pool tuning."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "ledgerline.db"
    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, ge=0, description="Lock wait in milliseconds")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class NumberingSettings(BaseSettings):
    """Document number format."""

    model_config = SettingsConfigDict(env_prefix="NUMBERING_")

    # "fiscal" -> "25-26" style labels, "calendar" -> "2025"
    period_policy: Literal["fiscal", "calendar"] = "fiscal"
    fiscal_year_start_month: int = Field(default=4, ge=1, le=12)
    sequence_width: int = Field(default=4, ge=1, le=12)
    default_prefix: str = "XX"

    @field_validator("default_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("default_prefix must not be blank")
        return v


class StockSettings(BaseSettings):
    """Stock synchronization."""

    model_config = SettingsConfigDict(env_prefix="STOCK_")

    # When false, multi-line stock effects fall back to sequential
    # application with compensating rollback.
    atomic_batches: bool = True


class APISettings(BaseSettings):
    """HTTP adapter."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]
    tenant_header: str = Field(default="X-Tenant-ID", min_length=1)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Ledgerline Accounting Core"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    numbering: NumberingSettings = Field(default_factory=NumberingSettings)
    stock: StockSettings = Field(default_factory=StockSettings)
    api: APISettings = Field(default_factory=APISettings)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, built from the environment on first call."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
