"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Every scheduler constant (buffer time, rush windows, slot search horizon,
slot-list shape) lives here so a canteen deployment can tune them without
code changes.

Usage:
    from canteen.core.config import get_settings

    settings = get_settings()
    print(settings.buffer_minutes)

Environment variables are matched case-insensitively, e.g.::

    BUFFER_MINUTES=3
    RUSH_WINDOWS='[{"start": 12, "end": 14, "intensity": 1.0}]'

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from canteen.schemas import RushWindow


DEFAULT_RUSH_WINDOWS = [
    RushWindow(start=9, end=10, intensity=0.9),     # Morning break
    RushWindow(start=12, end=13.5, intensity=1.0),  # Lunch rush
    RushWindow(start=15.5, end=17, intensity=0.7),  # Evening snacks
]


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with the in-memory order store
        PRODUCTION: Live environment, host supplies the order store
        STAGING: Pre-production testing
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging

        # Admission scheduling
        buffer_minutes: Safety margin between end of cooking and pickup
        rush_windows: Time-of-day windows with their rush intensity
        baseline_rush_intensity: Intensity outside every rush window
        rush_capacity_penalty: Share of capacity lost at intensity 1.0
        min_admission_threshold: Floor on the admission threshold

        # Slot search / slot list
        slot_search_attempts: Number of forward steps before falling back
        slot_horizon_hours: Hours covered by the browsable slot list

        # Host boundary
        admission_lock_dir: Directory holding per-canteen lock files
        admission_lock_timeout: Seconds to wait for a canteen lock
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Campus Canteen Kitchen Scheduler",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # ==========================================================================
    # ADMISSION CHECK
    # ==========================================================================

    buffer_minutes: int = Field(
        default=2,
        ge=0,
        description="Safety margin (minutes) between end of cooking and pickup"
    )
    default_prep_time_minutes: int = Field(
        default=10,
        ge=1,
        description="Prep time used for items that carry none"
    )
    default_kitchen_capacity: int = Field(
        default=5,
        description="Kitchen capacity used when the canteen record has none"
    )
    rush_capacity_penalty: float = Field(
        default=0.3,
        ge=0,
        le=1,
        description="Fraction of capacity lost at rush intensity 1.0"
    )
    min_admission_threshold: int = Field(
        default=2,
        description="The kitchen always admits at least this many concurrent items"
    )
    suggested_slot_minutes: int = Field(
        default=10,
        gt=0,
        description="Width of a suggested pickup slot"
    )

    # ==========================================================================
    # RUSH HOURS
    # ==========================================================================

    rush_windows: list[RushWindow] = Field(
        default_factory=lambda: list(DEFAULT_RUSH_WINDOWS),
        description="Rush windows in hour-of-day fractions, checked in order"
    )
    baseline_rush_intensity: float = Field(
        default=0.2,
        ge=0,
        le=1,
        description="Rush intensity outside every configured window"
    )

    # ==========================================================================
    # NEXT-SLOT SEARCH
    # ==========================================================================

    slot_search_step_minutes: int = Field(
        default=10,
        gt=0,
        description="Step between candidate pickup times"
    )
    slot_search_attempts: int = Field(
        default=12,
        ge=0,
        description="Candidates checked before falling back"
    )
    slot_lookback_minutes: int = Field(
        default=15,
        gt=0,
        description="Trailing window used to measure load at a candidate"
    )
    fallback_offset_minutes: int = Field(
        default=120,
        ge=0,
        description="Offset of the unconditional fallback slot"
    )

    # ==========================================================================
    # SLOT LIST
    # ==========================================================================

    slot_horizon_hours: int = Field(
        default=4,
        ge=0,
        description="Hours covered by the browsable slot list"
    )
    slot_interval_minutes: int = Field(
        default=10,
        gt=0,
        description="Width of each slot in the browsable list"
    )
    slot_min_prep_buffer_minutes: int = Field(
        default=15,
        ge=0,
        description="Minimum lead time before the first listed slot"
    )

    # ==========================================================================
    # HOST BOUNDARY
    # ==========================================================================

    admission_lock_dir: str = Field(
        default="data/locks",
        description="Directory for per-canteen admission lock files"
    )
    admission_lock_timeout: int = Field(
        default=10,
        description="Seconds to wait for a canteen admission lock"
    )

    # ==========================================================================
    # FILE STORAGE
    # ==========================================================================

    data_directory: str = Field(
        default="data",
        description="Directory for exported boards"
    )
    board_lock_timeout: int = Field(
        default=30,
        description="Seconds to wait for a board file lock"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    @field_validator("rush_windows")
    @classmethod
    def validate_rush_windows(cls, v: list[RushWindow]) -> list[RushWindow]:
        """Rush windows must not overlap."""
        ordered = sorted(v, key=lambda w: w.start)
        for earlier, later in zip(ordered, ordered[1:]):
            if later.start < earlier.end:
                raise ValueError(
                    f"Rush windows overlap: [{earlier.start}, {earlier.end}) "
                    f"and [{later.start}, {later.end})"
                )
        return v

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded only once; call ``get_settings.cache_clear()``
    after changing the environment.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> settings.buffer_minutes
        2
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured root logger
    """
    settings = get_settings()

    # Set level based on debug mode
    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("filelock").setLevel(logging.WARNING)

    return logging.getLogger("canteen")


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
