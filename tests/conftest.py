"""Shared test fixtures and configuration.

Sets environment variables before any hangout import so settings load a
fixed time zone, and provides a deterministic clock for negotiation logs.
"""

import os

# Patch env vars BEFORE any hangout imports
os.environ.setdefault("TIMEZONE", "America/New_York")
os.environ.setdefault("MIN_OVERLAP_MINUTES", "60")
os.environ.setdefault("DEFAULT_MAX_EVENTS_PER_WEEK", "3")
os.environ.setdefault("CALENDAR_PROVIDER", "mock")

import pytest


@pytest.fixture
def fixed_clock():
    """Clock returning increasing fake timestamps."""
    ticks = iter(range(10_000))

    def _clock() -> str:
        return f"2026-03-01T00:00:{next(ticks):05d}Z"

    return _clock


@pytest.fixture
def week_start():
    """Monday 2 March 2026, local midnight."""
    from hangout.core.availability import start_of_week
    from datetime import date

    return start_of_week(date(2026, 3, 2))
