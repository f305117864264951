"""
Hangout Agent — Input Contracts.

Shapes of the data handed to the engine by its collaborators: calendar sync,
onboarding settings, the social graph and the locations store. Validated once
at the boundary; the core treats them as read-only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

WEEKDAY_ABBREVIATIONS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


class CalendarEvent(BaseModel):
    """A single calendar entry for one user.

    Naive start/end times are read in the configured time zone.
    """

    id: str
    title: str = ""
    start_time: datetime
    end_time: datetime
    is_busy: bool = True
    is_all_day: bool = False
    source: Literal["mock", "google", "manual"] = "manual"


class Constraint(BaseModel):
    """A recurring time block that removes availability (nap, work, ...).

    JSON example:
    {
        "type": "nap",
        "days": ["mon", "wed", "fri"],
        "start_time": "13:00",
        "end_time": "14:30"
    }
    """

    type: Literal["sleep", "nap", "transit", "work", "custom"]
    days: list[str]
    start_time: str    # HH:MM
    end_time: str      # HH:MM, may be earlier than start_time (wraps midnight)

    @field_validator("days")
    @classmethod
    def normalize_days(cls, v: list[str]) -> list[str]:
        days = [d.strip().lower() for d in v]
        unknown = [d for d in days if d not in WEEKDAY_ABBREVIATIONS]
        if unknown:
            raise ValueError(f"Unknown day abbreviations: {unknown}")
        return days

    @field_validator("start_time", "end_time")
    @classmethod
    def check_hhmm(cls, v: str) -> str:
        parts = v.split(":")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError(f"Expected HH:MM, got {v!r}")
        hour, minute = int(parts[0]), int(parts[1])
        if not (0 <= hour <= 24 and 0 <= minute <= 59) or (hour == 24 and minute):
            raise ValueError(f"Hour/minute out of range: {v!r}")
        return v


class UserPrefs(BaseModel):
    """User-level scheduling preferences from onboarding."""

    max_events_per_week: int = 3
    preferred_types: list[str] = Field(default_factory=list)
    buffer_minutes: int = 30
    prefer_mornings: bool = False
    prefer_afternoons: bool = False
    prefer_evenings: bool = False
    prefer_weekends: bool = False
    weather_sensitive: bool = False

    @field_validator("max_events_per_week", "buffer_minutes")
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v


class Friendship(BaseModel):
    """An edge in the social graph. Looked up in either direction."""

    user_id: str
    friend_id: str
    priority: int = Field(default=5, ge=1, le=10)

    @model_validator(mode="after")
    def distinct_users(self) -> Friendship:
        if self.user_id == self.friend_id:
            raise ValueError("A user cannot befriend themselves")
        return self


class LocationEntry(BaseModel):
    """A saved place for a user, with travel time from the geocoder."""

    user_id: str
    location_name: str
    location_id: str
    travel_minutes: int = Field(ge=0)
