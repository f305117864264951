"""
Hangout Agent — Data Models.

Entities computed during a single negotiation run. Nothing here is persisted:
every call to the engine builds these fresh from the caller's inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from hangout.data.contracts import Constraint, Friendship, LocationEntry, UserPrefs


@dataclass
class UserProfile:
    """What the settings store knows about a user taking part in a run."""

    user_id: str
    display_name: str = ""
    prefs: UserPrefs | None = None
    constraints: list[Constraint] = field(default_factory=list)


@dataclass
class FreeSlot:
    """A contiguous block of free time for a single user."""

    start: datetime
    end: datetime
    owner_id: str = ""

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


@dataclass
class UserAvailability:
    """All availability information for a single user in a given week."""

    user_id: str
    free_slots: list[FreeSlot]
    constraints: list[Constraint] = field(default_factory=list)


@dataclass
class OverlapSlot:
    """A window where two or more users are simultaneously free."""

    start: datetime
    end: datetime
    participant_ids: list[str]

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


@dataclass
class ScoredSlot(OverlapSlot):
    """An OverlapSlot run through the scorer.

    ``breakdown`` maps factor name to its weighted contribution; the values
    add up to ``score``.
    """

    score: float = 0.0
    breakdown: dict[str, float] = field(default_factory=dict)


@dataclass
class ScoringContext:
    """Per-engagement-type data fed into the scorer alongside slot and prefs."""

    proposed_type: str
    current_week_event_count: dict[str, int] = field(default_factory=dict)
    # Keyed by pair_key(a, b); missing pairs default to 14 days
    last_hangout_days: dict[tuple[str, str], float] = field(default_factory=dict)
    travel_minutes: dict[str, int] = field(default_factory=dict)
    weather: Callable[[OverlapSlot], float] | None = None


@dataclass
class ProposalCandidate:
    """A fully-formed proposal ready for persistence or presentation."""

    slot: ScoredSlot
    engagement_type: str
    title: str
    participants: list[str]
    location_name: str | None = None
    location_id: str | None = None


@dataclass
class LogEntry:
    """One line of the negotiation narration."""

    timestamp: str   # ISO-8601
    message: str


@dataclass
class NegotiationParams:
    """Inputs to a single negotiate() call."""

    users: list[UserAvailability]
    preferences: dict[str, UserPrefs]
    friendships: list[Friendship]
    locations: list[LocationEntry]
    week_start: datetime
    engagement_types: list[str]
    last_hangout_days: dict[tuple[str, str], float] | None = None
    display_names: dict[str, str] | None = None
    min_duration_minutes: int | None = None


@dataclass
class NegotiationResult:
    """Output of a negotiation run: selected proposals plus the narration."""

    proposals: list[ProposalCandidate] = field(default_factory=list)
    log: list[LogEntry] = field(default_factory=list)


def pair_key(user_a: str, user_b: str) -> tuple[str, str]:
    """Order-independent key for a pair of users."""
    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)
