"""
Hangout Agent — Negotiation Service.

Feeds the pure engine from its collaborators: pulls each user's week from the
calendar port, fills in default preferences, computes availability and runs
the negotiator. Persisting the result is left to the caller.

This module is provider-agnostic: it depends on the CalendarPort protocol,
not on a specific calendar implementation.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from hangout.config import settings
from hangout.core.availability import compute_week_availability, start_of_week
from hangout.core.negotiator import negotiate
from hangout.data.contracts import Friendship, LocationEntry, UserPrefs
from hangout.data.models import (
    NegotiationParams,
    NegotiationResult,
    UserAvailability,
    UserProfile,
)
from hangout.ports.calendar_port import CalendarError

if TYPE_CHECKING:
    from hangout.ports.calendar_port import CalendarPort

logger = logging.getLogger(__name__)

DEFAULT_ENGAGEMENT_TYPES = [
    "coffee",
    "playground",
    "playdate_home",
    "dinner",
    "park",
    "walk",
]


def default_prefs() -> UserPrefs:
    """Preferences for a user who skipped that onboarding step."""
    return UserPrefs(
        max_events_per_week=settings.DEFAULT_MAX_EVENTS_PER_WEEK,
        preferred_types=["coffee", "walk"],
        buffer_minutes=settings.DEFAULT_BUFFER_MINUTES,
        prefer_afternoons=True,
        prefer_weekends=True,
    )


async def run_negotiation(
    calendar: CalendarPort,
    profiles: list[UserProfile],
    friendships: list[Friendship],
    locations: list[LocationEntry],
    week_start: datetime,
    engagement_types: list[str] | None = None,
    last_hangout_days: dict[tuple[str, str], float] | None = None,
) -> NegotiationResult:
    """Load everyone's week and negotiate proposals for it.

    Args:
        calendar: Calendar port for fetching events.
        profiles: Users taking part, with their stored prefs and constraints.
        friendships: Social graph edges; edges to absent users are dropped.
        locations: Saved locations for the participating users.
        week_start: Any moment in the target week (normalised to Monday).
        engagement_types: Types to consider; defaults to DEFAULT_ENGAGEMENT_TYPES.
        last_hangout_days: Days since each pair last met, keyed by pair_key.

    Returns:
        The negotiator's result. Users whose calendar could not be read are
        left out of the run.
    """
    monday = start_of_week(week_start)
    week_end = monday + timedelta(days=7)

    availabilities: list[UserAvailability] = []
    preferences: dict[str, UserPrefs] = {}
    display_names: dict[str, str] = {}

    for profile in profiles:
        try:
            events = await calendar.get_events(profile.user_id, monday, week_end)
        except CalendarError as exc:
            logger.error("Skipping %s: calendar fetch failed: %s", profile.user_id, exc)
            continue

        prefs = profile.prefs or default_prefs()
        preferences[profile.user_id] = prefs
        if profile.display_name:
            display_names[profile.user_id] = profile.display_name

        free_slots = compute_week_availability(
            events, profile.constraints, monday, prefs.buffer_minutes,
            owner_id=profile.user_id,
        )
        availabilities.append(UserAvailability(
            user_id=profile.user_id,
            free_slots=free_slots,
            constraints=list(profile.constraints),
        ))

    included = set(preferences)
    active_friendships = [
        f for f in friendships if f.user_id in included and f.friend_id in included
    ]
    active_locations = [loc for loc in locations if loc.user_id in included]

    logger.info(
        "Negotiating week of %s for %d/%d users",
        monday.date().isoformat(), len(availabilities), len(profiles),
    )

    return negotiate(NegotiationParams(
        users=availabilities,
        preferences=preferences,
        friendships=active_friendships,
        locations=active_locations,
        week_start=monday,
        engagement_types=list(engagement_types or DEFAULT_ENGAGEMENT_TYPES),
        last_hangout_days=last_hangout_days,
        display_names=display_names,
    ))
