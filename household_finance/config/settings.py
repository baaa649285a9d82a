"""
Configuration Management for Household Finance

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here. The core engine and analytics read
none of it; only the services and the orchestrator do.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini configuration for receipt scanning."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=512,
        ge=64,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
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

    # Persistence
    state_file: str = Field(
        default="household_finance_state.json",
        description="Path of the JSON snapshot written on every change"
    )

    # Receipt scanning
    scan_max_image_mb: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum receipt image size in MB"
    )
    supported_image_formats: str = Field(
        default="image/jpeg,image/png,image/webp",
        description="Comma-separated list of accepted receipt MIME types"
    )

    # Validation thresholds
    max_transaction_amount: float = Field(
        default=1000000.0,
        gt=0,
        description="Maximum reasonable scanned amount (for sanity checking)"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a scanned receipt date can be"
    )

    # Audit
    audit_max_events: int = Field(
        default=1000,
        ge=1,
        description="Audit events kept in memory by a default session"
    )

    @field_validator("state_file")
    @classmethod
    def validate_state_file(cls, v: str) -> str:
        """The snapshot path must name a file; missing directories are created on save."""
        if Path(v).expanduser().is_dir():
            raise ValueError(f"state_file points to a directory: {v}")
        return v

    @property
    def supported_formats_list(self) -> list[str]:
        """Accepted receipt MIME types, lower-cased."""
        return [fmt.strip().lower() for fmt in self.supported_image_formats.split(",")]

    @property
    def scan_max_image_bytes(self) -> int:
        """Receipt size limit in bytes."""
        return self.scan_max_image_mb * 1024 * 1024


class Settings(BaseSettings):
    """
    Entry point for configuration.

    Sub-settings are built on access, so a missing GEMINI_API_KEY only
    fails once the scanner asks for it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """Cached Settings; get_settings.cache_clear() reloads the environment."""
    return Settings()


def validate_all_settings() -> dict[str, Optional[object]]:
    """
    Startup check of every settings section.

    Returns {section: True/False}, plus a `<section>_error` message for
    each section that failed to load.
    """
    settings = get_settings()
    results: dict[str, Optional[object]] = {}

    for section in ("gemini", "app"):
        try:
            getattr(settings, section)
        except Exception as e:
            results[section] = False
            results[f"{section}_error"] = str(e)
        else:
            results[section] = True

    return results
