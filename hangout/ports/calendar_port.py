"""Calendar port — abstract interface for the calendar-sync collaborator.

The service layer depends on this protocol, never on a specific provider.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from hangout.data.contracts import CalendarEvent


class CalendarError(Exception):
    """Raised when any calendar provider operation fails."""


class CalendarPort(Protocol):
    """Abstract calendar interface used by the negotiation service."""

    async def get_events(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[CalendarEvent]: ...

    async def create_event(
        self, user_id: str, event: CalendarEvent
    ) -> CalendarEvent: ...

    async def delete_event(self, user_id: str, event_id: str) -> None: ...

    async def sync_events(self, user_id: str) -> list[CalendarEvent]: ...
