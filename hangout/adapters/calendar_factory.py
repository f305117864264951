"""Calendar adapter factory — creates the right adapter based on config."""

from __future__ import annotations

from datetime import datetime

from hangout.config import settings
from hangout.ports.calendar_port import CalendarPort


def create_calendar_adapter(week_start: datetime | None = None) -> CalendarPort:
    """Return the calendar adapter matching the CALENDAR_PROVIDER setting.

    Args:
        week_start: Week the adapter seeds events into, where it seeds any.
    """
    provider = settings.CALENDAR_PROVIDER.lower()

    if provider == "mock":
        from hangout.adapters.mock_calendar import MockCalendarAdapter

        return MockCalendarAdapter(week_start=week_start)

    raise ValueError(f"Unknown CALENDAR_PROVIDER: {provider!r}")
