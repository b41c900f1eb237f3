# src/trcalc/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and an optional .env file.

This is process configuration (data directory, rate provider, logging).
The user-editable calculator preferences live in
trcalc.domain.models.UserSettings and are persisted by the settings service.

Files that USE this module:
- trcalc.app (loads settings for wiring and logging)
- trcalc.adapters.providers.openexchangerates (app id, URL, HTTP timeout)
- trcalc.adapters.persistence.file_store (data directory)

Files that this module USES:
- trcalc.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from trcalc.shared.validators import validate_api_key  # Validate app id format


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Persistence ---
    data_dir: Path = Field(default=Path("./data"), alias="TRCALC_DATA_DIR")

    # --- Rate Provider ---
    open_exchange_rates_app_id: str = Field(default="", alias="OPEN_EXCHANGE_RATES_APP_ID")
    rates_url: str = Field(
        default="https://openexchangerates.org/api/latest.json", alias="RATES_URL"
    )
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    rate_fallback_enabled: bool = Field(default=True, alias="RATE_FALLBACK_ENABLED")

    # --- Cache / History ---
    rate_cache_ttl_minutes: int = Field(default=60, alias="RATE_CACHE_TTL_MINUTES", ge=1, le=1440)
    history_limit: int = Field(default=50, alias="HISTORY_LIMIT", ge=1, le=500)

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="TRCALC_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def rate_cache_ttl_ms(self) -> int:
        """Rate cache TTL in epoch milliseconds."""
        return self.rate_cache_ttl_minutes * 60 * 1000

    @field_validator("open_exchange_rates_app_id")
    @classmethod
    def validate_app_id(cls, v: str) -> str:
        """Validate app id format (empty means 'use fallback rates')."""
        if v and not validate_api_key(v):
            raise ValueError("Invalid OPEN_EXCHANGE_RATES_APP_ID format")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        v = v.upper()
        if v not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return v


# Global settings instance
settings = Settings()
