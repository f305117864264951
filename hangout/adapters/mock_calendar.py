"""Mock calendar adapter — implements CalendarPort with an in-memory store.

Stands in for a real calendar sync during development and demos. Each
instance owns its own store; personas fill a user's week with a realistic
schedule.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta

from hangout.core.availability import start_of_week, to_local
from hangout.data.contracts import CalendarEvent
from hangout.ports.calendar_port import CalendarError

logger = logging.getLogger(__name__)

# (title, day offset from Monday, start HH:MM, end HH:MM)
_PersonaEntry = tuple[str, int, str, str]

_DEFAULT_WEEK: list[_PersonaEntry] = [
    ("Morning yoga", 0, "07:00", "08:00"),
    ("Team standup", 0, "09:30", "10:00"),
    ("Dentist appointment", 1, "10:00", "11:00"),
    ("Lunch with coworker", 1, "12:00", "13:00"),
    ("Kids swim class", 2, "15:30", "16:30"),
    ("Grocery shopping", 2, "17:00", "18:00"),
    ("Date night", 3, "19:00", "21:00"),
    ("Work presentation", 4, "14:00", "15:30"),
    ("Family brunch", 5, "10:00", "12:00"),
    ("Playground time", 5, "14:00", "16:00"),
    ("Soccer game", 6, "09:00", "10:30"),
    ("Meal prep", 6, "16:00", "17:30"),
]

PERSONAS: dict[str, list[_PersonaEntry]] = {
    # Parent of young kids, mornings around naps
    "alice": [
        ("Kids school dropoff", 0, "08:00", "08:30"),
        ("Pediatrician visit", 0, "10:00", "11:00"),
        ("Baby nap time", 0, "12:30", "14:30"),
        ("Music class (toddler)", 1, "09:30", "10:30"),
        ("Baby nap time", 1, "12:30", "14:30"),
        ("Grocery run", 1, "15:00", "16:00"),
        ("Kids school dropoff", 2, "08:00", "08:30"),
        ("Baby nap time", 2, "12:30", "14:30"),
        ("Swimming lessons", 2, "15:30", "16:30"),
        ("Kids school dropoff", 3, "08:00", "08:30"),
        ("Baby nap time", 3, "12:30", "14:30"),
        ("Play kitchen class", 3, "10:00", "11:30"),
        ("Family dinner prep", 4, "16:30", "18:00"),
        ("Saturday farmers market", 5, "08:30", "10:00"),
        ("Playground meetup", 5, "10:30", "12:00"),
    ],
    # Freelancer with a patchy week
    "bob": [
        ("Morning coffee ritual", 0, "07:00", "07:45"),
        ("Freelance client call", 0, "10:00", "11:00"),
        ("Coworking space", 1, "09:00", "17:00"),
        ("Coffee tasting event", 1, "18:00", "19:30"),
        ("Freelance client call", 2, "14:00", "15:00"),
        ("Gym", 2, "17:00", "18:30"),
        ("Podcast recording", 3, "10:00", "12:00"),
        ("Lunch meetup downtown", 3, "12:30", "13:30"),
        ("Freelance deadline", 4, "09:00", "17:00"),
        ("Weekend hike", 5, "07:00", "11:00"),
        ("Board game night", 5, "19:00", "22:00"),
        ("Brunch at Blue Bottle", 6, "10:00", "11:30"),
    ],
    # Office worker, free evenings and weekends
    "carol": [
        ("Morning commute", 0, "08:00", "09:00"),
        ("Work", 0, "09:00", "17:00"),
        ("Evening commute", 0, "17:00", "18:00"),
        ("Work", 1, "09:00", "17:00"),
        ("After-work drinks", 1, "18:00", "19:30"),
        ("Work", 2, "09:00", "17:00"),
        ("Pilates class", 2, "18:30", "19:30"),
        ("Work", 3, "09:00", "17:00"),
        ("Work", 4, "09:00", "17:00"),
        ("Date night", 4, "19:00", "21:30"),
        ("Sleep in + errands", 5, "10:00", "12:00"),
        ("Weekend brunch", 5, "12:30", "14:00"),
        ("Sunday meal prep", 6, "15:00", "17:00"),
    ],
    # Long work days, busy weekends
    "dave": [
        ("Work (remote)", 0, "09:00", "17:30"),
        ("Work (remote)", 1, "09:00", "17:30"),
        ("Work (office)", 2, "08:30", "18:00"),
        ("Work (remote)", 3, "09:00", "17:30"),
        ("Work (office)", 4, "08:30", "18:00"),
        ("Soccer league", 5, "08:00", "10:00"),
        ("Kids birthday party", 5, "14:00", "16:00"),
        ("Family outing", 6, "10:00", "15:00"),
    ],
}


def _build_events(entries: list[_PersonaEntry], week_start: datetime) -> list[CalendarEvent]:
    monday = start_of_week(week_start)
    events = []
    for title, day_offset, start, end in entries:
        day = monday + timedelta(days=day_offset)
        sh, sm = map(int, start.split(":"))
        eh, em = map(int, end.split(":"))
        events.append(CalendarEvent(
            id=str(uuid.uuid4()),
            title=title,
            start_time=day.replace(hour=sh, minute=sm),
            end_time=day.replace(hour=eh, minute=em),
            source="mock",
        ))
    return events


class MockCalendarAdapter:
    """In-memory implementation of CalendarPort."""

    def __init__(self, week_start: datetime | None = None) -> None:
        self._week_start = week_start
        self._store: dict[str, list[CalendarEvent]] = {}

    async def get_events(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[CalendarEvent]:
        start, end = to_local(start), to_local(end)
        return [
            ev for ev in self._store.get(user_id, [])
            if to_local(ev.start_time) < end and to_local(ev.end_time) > start
        ]

    async def create_event(self, user_id: str, event: CalendarEvent) -> CalendarEvent:
        created = event.model_copy(update={"id": str(uuid.uuid4()), "source": "mock"})
        self._store.setdefault(user_id, []).append(created)
        return created

    async def delete_event(self, user_id: str, event_id: str) -> None:
        events = self._store.get(user_id, [])
        remaining = [ev for ev in events if ev.id != event_id]
        if len(remaining) == len(events):
            raise CalendarError(f"Event {event_id!r} not found for user {user_id!r}")
        self._store[user_id] = remaining

    async def sync_events(self, user_id: str) -> list[CalendarEvent]:
        """Seed a generic week for users without events; return their events."""
        if user_id not in self._store:
            week_start = self._week_start or datetime.now()
            self._store[user_id] = _build_events(_DEFAULT_WEEK, week_start)
            logger.info("Seeded %d mock events for %s", len(self._store[user_id]), user_id)
        return list(self._store[user_id])

    def load_persona(
        self, user_id: str, persona: str, week_start: datetime | None = None
    ) -> list[CalendarEvent]:
        """Replace a user's events with a persona's week."""
        if persona not in PERSONAS:
            raise ValueError(f"Unknown persona: {persona!r}")
        week_start = week_start or self._week_start or datetime.now()
        events = _build_events(PERSONAS[persona], week_start)
        self._store[user_id] = events
        return list(events)

    def all_events(self, user_id: str) -> list[CalendarEvent]:
        return list(self._store.get(user_id, []))

    def clear(self) -> None:
        self._store.clear()
