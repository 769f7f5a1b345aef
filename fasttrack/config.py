"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Secure defaults (data stays in a local directory)
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, cast
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from fasttrack.domain.models import plan_by_name

# Load environment variables from .env file
load_dotenv()


class TrackerConfig(BaseModel):
    """Session engine and tick loop configuration."""

    tick_interval_seconds: float = Field(
        default=1.0, gt=0.0, description="Interval between session ticks"
    )
    live_update_every_seconds: int = Field(
        default=30, gt=0, description="Elapsed-second period of live activity updates"
    )
    effect_timeout_seconds: float = Field(
        default=10.0, gt=0.0, description="Timeout for a single collaborator call"
    )
    calendar_timezone: str | None = Field(
        default=None, description="IANA timezone for streak days (None = system local)"
    )
    default_plan: str = Field(default="16:8", description="Plan used when none is chosen")

    @field_validator("calendar_timezone")
    def validate_timezone(cls, v):
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("default_plan")
    def validate_default_plan(cls, v):
        return plan_by_name(v).name

    def tzinfo(self) -> ZoneInfo | None:
        return ZoneInfo(self.calendar_timezone) if self.calendar_timezone else None


class StorageConfig(BaseModel):
    """Durable storage locations."""

    data_dir: str = Field(default="./data", description="Directory holding persisted state")
    session_file: str = Field(default="fasting_session.json", description="Session fields file")
    profile_file: str = Field(default="user_profile.json", description="Profile record file")

    @property
    def session_path(self) -> Path:
        return Path(self.data_dir) / self.session_file

    @property
    def profile_path(self) -> Path:
        return Path(self.data_dir) / self.profile_file


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component configs
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    # Detect environment
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    # Tracker config with environment overrides
    tracker_config = TrackerConfig(
        tick_interval_seconds=float(os.getenv("TICK_INTERVAL_SECONDS", "1.0")),
        live_update_every_seconds=int(os.getenv("LIVE_UPDATE_EVERY_SECONDS", "30")),
        effect_timeout_seconds=float(os.getenv("EFFECT_TIMEOUT_SECONDS", "10.0")),
        calendar_timezone=os.getenv("CALENDAR_TIMEZONE") or None,
        default_plan=os.getenv("DEFAULT_PLAN", "16:8"),
    )

    storage_config = StorageConfig(
        data_dir=os.getenv("DATA_DIR", "./data"),
    )

    # Logging config
    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    # Application config
    return AppConfig(
        environment=environment,
        debug=debug,
        tracker=tracker_config,
        storage=storage_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


# Configuration validation and helpers
def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"✅ Configuration loaded for {config.environment} environment")
        print(f"✅ Data directory: {config.storage.data_dir}")

    except Exception as e:
        print(f"❌ Configuration validation failed: {e}")
        raise


# Development helpers
def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\n🔧 CONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\n⏱️ TRACKER CONFIGURATION")
    print(f"Tick Interval: {config.tracker.tick_interval_seconds}s")
    print(f"Live Update Period: {config.tracker.live_update_every_seconds}s")
    print(f"Effect Timeout: {config.tracker.effect_timeout_seconds}s")
    print(f"Calendar Timezone: {config.tracker.calendar_timezone or 'system local'}")
    print(f"Default Plan: {config.tracker.default_plan}")

    print("\n💾 STORAGE CONFIGURATION")
    print(f"Session File: {config.storage.session_path}")
    print(f"Profile File: {config.storage.profile_path}")


if __name__ == "__main__":
    # Test configuration loading
    validate_config()
    print_config_summary()
