"""
Configuration management for HospitalFlow.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

from typing import List, Optional

import json
import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.value_objects.fee_schedule import FeeSchedule


class HospitalSettings(BaseSettings):
    """Hospital fee schedule and presentation settings."""

    model_config = SettingsConfigDict(env_prefix="HOSPITAL_")

    name: str = Field(default="HospitalFlow General Hospital", description="Hospital display name")
    general_medicine_fee: int = Field(default=5000, description="General medicine consultation fee (Naira)")
    pediatrics_fee: int = Field(default=7500, description="Pediatrics consultation fee (Naira)")
    specialist_fee: int = Field(
        default=10000,
        description="Cardiology, orthopedics, obstetrics & gynecology and ophthalmology fee (Naira)",
    )
    staff_discount: int = Field(default=20, description="Staff discount percentage")
    consultation_fee: int = Field(default=5000, description="Legacy flat consultation fee (Naira)")
    currency_symbol: str = Field(default="₦", description="Currency symbol used in receipts and notes")

    @field_validator("general_medicine_fee", "pediatrics_fee", "specialist_fee", "consultation_fee")
    @classmethod
    def validate_fee(cls, v: int) -> int:
        """Fees cannot be negative."""
        if v < 0:
            raise ValueError("Fees cannot be negative")
        return v

    @field_validator("staff_discount")
    @classmethod
    def validate_staff_discount(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError("Staff discount must be between 0 and 100")
        return v

    def fee_schedule(self) -> FeeSchedule:
        """Domain view of the configured fees."""
        return FeeSchedule(
            general_medicine_fee=self.general_medicine_fee,
            pediatrics_fee=self.pediatrics_fee,
            specialist_fee=self.specialist_fee,
            staff_discount=self.staff_discount,
        )


class ClaimFeedSettings(BaseSettings):
    """HMO desk polling and claim refresh settings."""

    model_config = SettingsConfigDict(env_prefix="HMO_")

    poll_interval_seconds: float = Field(
        default=5.0, description="Long-poll window for the HMO desk change feed"
    )
    refresh_enabled: bool = Field(
        default=False, description="Run the periodic claim refresh worker"
    )
    refresh_interval_seconds: int = Field(
        default=60, description="Interval in seconds between claim refresh runs"
    )
    desk_name: str = Field(default="HMO Desk", description="Default approver name on processed claims")

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        if v <= 0 or v > 60:
            raise ValueError("Poll interval must be between 0 and 60 seconds")
        return v

    @field_validator("refresh_interval_seconds")
    @classmethod
    def validate_refresh_interval(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Refresh interval must be at least 1 second")
        return v


class StoreSettings(BaseSettings):
    """In-process store settings."""

    model_config = SettingsConfigDict(env_prefix="STORE_")

    seed_demo_data: bool = Field(
        default=True, description="Seed the default doctors and desk staff at startup"
    )
    change_history_size: int = Field(
        default=500, description="Change events kept per topic for version-stamped reads"
    )


class CORSSettings(BaseSettings):
    """CORS configuration settings."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    allowed_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins",
    )
    allowed_methods: List[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        description="Allowed HTTP methods",
    )
    allowed_headers: List[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )
    allow_credentials: bool = Field(
        default=True, description="Allow credentials in CORS"
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v):
        """Parse allowed origins from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string format
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    return [v.strip()]
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")
    file_path: Optional[str] = Field(default=None, description="Log file path")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="HospitalFlow", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")
    port: int = Field(default=8000, description="Application port")
    host: str = Field(default="0.0.0.0", description="Application host")

    # Sub-settings
    hospital: HospitalSettings = Field(default_factory=HospitalSettings)
    hmo: ClaimFeedSettings = Field(default_factory=ClaimFeedSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"


# Global settings instance
_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    This helps in environments where the working directory isn't the project
    root and pydantic's env_file doesn't get resolved as expected.
    """
    from dotenv import load_dotenv

    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            # Do not override already-set environment variables
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
