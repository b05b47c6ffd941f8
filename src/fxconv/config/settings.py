# src/fxconv/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and a .env file with validation.

Files that USE this module:
- fxconv.app (loads settings for startup configuration)
- fxconv.adapters.providers.exchangerate_api (provider URL and HTTP timeout)
- fxconv.adapters.persistence.preferences_store (preference file path)
- fxconv.adapters.telegram.handlers (owner username)

Files that this module USES:
- fxconv.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from fxconv.shared.validators import (
    validate_bot_token,  # Validate Telegram bot token format
    validate_currency_code,  # Validate ISO currency code format
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )
    
    # --- Telegram ---
    bot_token: str = Field(default="", alias="BOT_TOKEN")
    owner_username: str = Field(default="", alias="OWNER_USERNAME")
    
    # --- Rate Provider ---
    # Seeds the stored credential when the preference file has none
    api_key: str = Field(default="", alias="FXCONV_API_KEY")
    provider_base_url: str = Field(
        default="https://v6.exchangerate-api.com/v6", alias="PROVIDER_BASE_URL"
    )
    reference_currency: str = Field(default="USD", alias="REFERENCE_CURRENCY")
    
    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    
    # --- Persistence ---
    preferences_file: Path = Field(
        default=Path("./currency_converter_config.json"), alias="PREFERENCES_FILE"
    )
    
    # --- Logging ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="FXCONV_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")
    
    @field_validator("bot_token")
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate bot token format (empty is allowed until the bot starts)."""
        if v and not validate_bot_token(v):
            raise ValueError("Invalid BOT_TOKEN format")
        return v
    
    @field_validator("reference_currency")
    @classmethod
    def validate_reference_currency(cls, v: str) -> str:
        """Validate and upper-case the reference currency."""
        if not validate_currency_code(v):
            raise ValueError("REFERENCE_CURRENCY must be a three-letter currency code")
        return v.upper()
    
    @field_validator("provider_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
    
    @field_validator("owner_username")
    @classmethod
    def strip_at_sign(cls, v: str) -> str:
        return v.strip().lstrip("@")


# Global settings instance
settings = Settings()


# ============================================================================
# Running
# ============================================================================
#
# 1. Put BOT_TOKEN and OWNER_USERNAME (and optionally FXCONV_API_KEY) in .env
#
# 2. Start the converter:
#    python -m fxconv
#
#    Without a stored API key and without FXCONV_API_KEY, the key is asked
#    for on the terminal before any rate is fetched.
#
# 3. Run in the background with logging:
#    LOG_DIR=./logs FXCONV_LOG_STDOUT=false nohup python -m fxconv &
#
# ============================================================================
