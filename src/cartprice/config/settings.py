"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables (and a .env file) with validation.

Files that USE this module:
- cartprice.application.discount_service (currency symbol, separator, card methods)
- cartprice.config.rules (rule file location)
- cartprice.shared.logging_conf callers (logging options)
- cartprice.adapters.formatting.formatter (display rounding)

Files that this module USES:
- cartprice.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import List, Optional  # Type hints for lists and optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from cartprice.shared.validators import (
    validate_currency_symbol,  # Validate display currency symbol
    validate_rule_key,  # Validate payment method identifiers
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Rules ---
    rules_file: Optional[Path] = Field(default=None, alias="CARTPRICE_RULES_FILE")

    # --- Pricing output ---
    currency_symbol: str = Field(default="₹", alias="CARTPRICE_CURRENCY_SYMBOL")
    narrative_separator: str = Field(default=" | ", alias="CARTPRICE_NARRATIVE_SEPARATOR")
    display_places: int = Field(default=2, alias="CARTPRICE_DISPLAY_PLACES", ge=0, le=4)

    # --- Bank offers ---
    # Payment methods that count as card payments for bank offers
    card_methods: List[str] = Field(default_factory=lambda: ["CARD"], alias="CARTPRICE_CARD_METHODS")

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="CARTPRICE_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @field_validator("currency_symbol")
    @classmethod
    def validate_currency_symbol(cls, v: str) -> str:
        """Validate currency symbol."""
        if not validate_currency_symbol(v):
            raise ValueError("CARTPRICE_CURRENCY_SYMBOL must be 1-3 non-space characters")
        return v

    @field_validator("narrative_separator")
    @classmethod
    def validate_separator(cls, v: str) -> str:
        if not v:
            raise ValueError("CARTPRICE_NARRATIVE_SEPARATOR must not be empty")
        return v

    @field_validator("card_methods")
    @classmethod
    def validate_card_methods(cls, v: List[str]) -> List[str]:
        """Validate payment method names."""
        if not v:
            raise ValueError("CARTPRICE_CARD_METHODS must name at least one method")
        for method in v:
            if not validate_rule_key(method):
                raise ValueError(f"Invalid payment method name: {method!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be DEBUG, INFO, WARNING, ERROR or CRITICAL")
        return level


# Global settings instance
settings = Settings()
