"""
Hangout Agent — Entry Point.

`python main.py` runs a negotiation for the current week over four mock
personas and prints the proposals; the negotiation log goes to the logger.
"""

import asyncio
import logging

from hangout.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from datetime import datetime

from hangout.adapters.calendar_factory import create_calendar_adapter
from hangout.core.availability import start_of_week
from hangout.core.negotiation_service import run_negotiation
from hangout.data.contracts import Constraint, Friendship, LocationEntry, UserPrefs
from hangout.data.models import UserProfile

_WEEKDAYS = ["mon", "tue", "wed", "thu", "fri"]

DEMO_PROFILES = [
    UserProfile(
        user_id="user-jessica",
        display_name="Jessica",
        prefs=UserPrefs(
            max_events_per_week=5,
            preferred_types=["coffee", "playground", "playdate_home"],
            buffer_minutes=30,
            prefer_mornings=True,
            prefer_afternoons=True,
            prefer_weekends=True,
            weather_sensitive=True,
        ),
        constraints=[Constraint(type="nap", days=_WEEKDAYS, start_time="12:30", end_time="14:30")],
    ),
    UserProfile(
        user_id="user-sarah",
        display_name="Sarah",
        prefs=UserPrefs(
            max_events_per_week=3,
            preferred_types=["coffee", "walk"],
            buffer_minutes=15,
            prefer_afternoons=True,
            prefer_evenings=True,
            prefer_weekends=True,
        ),
    ),
    UserProfile(
        user_id="user-emma",
        display_name="Emma",
        prefs=UserPrefs(
            max_events_per_week=4,
            preferred_types=["playground", "park", "dinner"],
            buffer_minutes=30,
            prefer_afternoons=True,
            prefer_evenings=True,
            prefer_weekends=True,
            weather_sensitive=True,
        ),
        constraints=[Constraint(type="work", days=_WEEKDAYS, start_time="09:00", end_time="17:00")],
    ),
    UserProfile(
        user_id="user-rachel",
        display_name="Rachel",
        prefs=UserPrefs(
            max_events_per_week=3,
            preferred_types=["dinner", "coffee", "walk"],
            buffer_minutes=20,
            prefer_evenings=True,
            prefer_weekends=True,
        ),
        constraints=[Constraint(type="work", days=_WEEKDAYS, start_time="09:00", end_time="17:30")],
    ),
]

DEMO_PERSONAS = {
    "user-jessica": "alice",
    "user-sarah": "bob",
    "user-emma": "carol",
    "user-rachel": "dave",
}

DEMO_FRIENDSHIPS = [
    Friendship(user_id="user-jessica", friend_id="user-sarah", priority=9),
    Friendship(user_id="user-jessica", friend_id="user-emma", priority=8),
    Friendship(user_id="user-jessica", friend_id="user-rachel", priority=7),
    Friendship(user_id="user-sarah", friend_id="user-emma", priority=5),
]

DEMO_LOCATIONS = [
    LocationEntry(user_id="user-jessica", location_name="Blue Bottle Coffee", location_id="loc-1", travel_minutes=10),
    LocationEntry(user_id="user-jessica", location_name="Central Park Playground", location_id="loc-2", travel_minutes=15),
    LocationEntry(user_id="user-jessica", location_name="Home", location_id="loc-3", travel_minutes=0),
    LocationEntry(user_id="user-emma", location_name="Lucia's Kitchen", location_id="loc-4", travel_minutes=20),
]


async def _run_demo() -> None:
    week_start = start_of_week(datetime.now())
    calendar = create_calendar_adapter(week_start=week_start)
    for user_id, persona in DEMO_PERSONAS.items():
        calendar.load_persona(user_id, persona, week_start)

    result = await run_negotiation(
        calendar, DEMO_PROFILES, DEMO_FRIENDSHIPS, DEMO_LOCATIONS, week_start,
    )

    print(f"\n{len(result.proposals)} proposal(s) for week of {week_start.date()}:")
    for p in result.proposals:
        where = f" @ {p.location_name}" if p.location_name else ""
        print(
            f"  {p.slot.start:%a %H:%M}-{p.slot.end:%H:%M} ({p.slot.duration_minutes:.0f} min)  {p.title}{where}"
            f"  [score={p.slot.score:.3f}]"
        )


def main() -> None:
    asyncio.run(_run_demo())


if __name__ == "__main__":
    main()
