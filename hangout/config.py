"""
Hangout Agent — Centralized configuration.

Loads all settings from .env and validates them.
Every module that needs a time zone, day window or quota default reads it here.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator, model_validator

# Load .env from project root (one level up from hangout/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Time zone used for day windows and hour/weekday bucketing
    TIMEZONE: str = "UTC"

    # Schedulable window, [start, end) in local hours
    DAY_START_HOUR: int = 7
    DAY_END_HOUR: int = 22

    # Overlap finding
    MIN_OVERLAP_MINUTES: int = 60

    # Defaults for users without stored preferences
    DEFAULT_MAX_EVENTS_PER_WEEK: int = 3
    DEFAULT_BUFFER_MINUTES: int = 30

    # Calendar provider: "mock"
    CALENDAR_PROVIDER: str = "mock"

    LOG_LEVEL: str = "INFO"

    @field_validator("TIMEZONE")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {v!r}") from exc
        return v

    @field_validator("DAY_START_HOUR", "DAY_END_HOUR", mode="before")
    @classmethod
    def parse_hour(cls, v: str | int) -> int:
        hour = int(v)
        if not 0 <= hour <= 24:
            raise ValueError(f"Hour out of range: {hour}")
        return hour

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def check_window(self) -> Settings:
        if self.DAY_START_HOUR >= self.DAY_END_HOUR:
            raise ValueError("DAY_START_HOUR must be before DAY_END_HOUR")
        return self


def _load_settings() -> Settings:
    """Load settings from environment, validating every key."""
    try:
        return Settings(
            TIMEZONE=os.getenv("TIMEZONE", "UTC"),
            DAY_START_HOUR=os.getenv("DAY_START_HOUR", "7"),
            DAY_END_HOUR=os.getenv("DAY_END_HOUR", "22"),
            MIN_OVERLAP_MINUTES=os.getenv("MIN_OVERLAP_MINUTES", "60"),
            DEFAULT_MAX_EVENTS_PER_WEEK=os.getenv("DEFAULT_MAX_EVENTS_PER_WEEK", "3"),
            DEFAULT_BUFFER_MINUTES=os.getenv("DEFAULT_BUFFER_MINUTES", "30"),
            CALENDAR_PROVIDER=os.getenv("CALENDAR_PROVIDER", "mock"),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )
    except ValidationError as exc:
        print(f"ERROR: invalid configuration in .env:\n{exc}", file=sys.stderr)
        sys.exit(1)


def local_tz() -> ZoneInfo:
    """Return the configured scheduling time zone."""
    return ZoneInfo(settings.TIMEZONE)


# Singleton, imported by all other modules as:
#   from hangout.config import settings
settings = _load_settings()
