"""
Hangout Agent — Slot Scorer.

Deterministic weighted scoring of candidate overlap slots. Seven factors each
produce a value in [0.0, 1.0]; the weighted values form the breakdown and
their sum is the score.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Callable

from hangout.config import settings
from hangout.core.availability import to_local
from hangout.data.contracts import Friendship, UserPrefs
from hangout.data.models import OverlapSlot, ScoredSlot, ScoringContext, pair_key

logger = logging.getLogger(__name__)

NEUTRAL = 0.5
DEFAULT_PRIORITY = 5
DEFAULT_HANGOUT_DAYS = 14
RECENCY_CAP_DAYS = 30
WEATHER_STUB_SCORE = 0.7

_NOT_PREFERRED_TIME = 0.3
_WEEKEND_BONUS = 0.3
_TYPE_LISTED = 1.0
_TYPE_NOT_LISTED = 0.2
_MAX_TRAVEL_MINUTES = 60

FactorFn = Callable[
    [OverlapSlot, dict[str, UserPrefs], list[Friendship], ScoringContext], float
]


def _average(values: list[float]) -> float:
    return sum(values) / len(values) if values else NEUTRAL


def _round(n: float) -> float:
    """Round to 4 decimal places to avoid floating-point noise."""
    return round(n, 4)


# ---------------------------------------------------------------------------
# Individual factors (each returns 0.0 - 1.0)
# ---------------------------------------------------------------------------


def score_time_preference(
    slot: OverlapSlot,
    prefs: dict[str, UserPrefs],
    friendships: list[Friendship],
    context: ScoringContext,
) -> float:
    """Does the slot's time of day suit each participant?

    Buckets: morning [7-12), afternoon [12-17), evening [17-22).
    Weekend bonus: +0.3 (capped at 1.0) for participants who prefer weekends.
    """
    local_start = to_local(slot.start)
    hour = local_start.hour
    is_weekend = local_start.weekday() >= 5

    values = []
    for uid in slot.participant_ids:
        p = prefs.get(uid)
        if p is None:
            values.append(NEUTRAL)
            continue

        base = _NOT_PREFERRED_TIME
        if 7 <= hour < 12 and p.prefer_mornings:
            base = 1.0
        elif 12 <= hour < 17 and p.prefer_afternoons:
            base = 1.0
        elif 17 <= hour < 22 and p.prefer_evenings:
            base = 1.0

        if is_weekend and p.prefer_weekends:
            base = min(1.0, base + _WEEKEND_BONUS)
        values.append(base)

    return _average(values)


def score_event_type_fit(
    slot: OverlapSlot,
    prefs: dict[str, UserPrefs],
    friendships: list[Friendship],
    context: ScoringContext,
) -> float:
    """How many participants list the proposed type among their favourites."""
    values = []
    for uid in slot.participant_ids:
        p = prefs.get(uid)
        if p is None or not p.preferred_types:
            values.append(NEUTRAL)
        elif context.proposed_type in p.preferred_types:
            values.append(_TYPE_LISTED)
        else:
            values.append(_TYPE_NOT_LISTED)
    return _average(values)


def score_location_convenience(
    slot: OverlapSlot,
    prefs: dict[str, UserPrefs],
    friendships: list[Friendship],
    context: ScoringContext,
) -> float:
    """Shorter travel is better: 0 min -> 1.0, 30 min -> 0.5, 60+ min -> 0.0."""
    if not context.travel_minutes:
        return NEUTRAL

    values = []
    for uid in slot.participant_ids:
        travel = context.travel_minutes.get(uid)
        if travel is None:
            values.append(NEUTRAL)
        else:
            values.append(max(0.0, 1.0 - travel / _MAX_TRAVEL_MINUTES))
    return _average(values)


def _friendship_priority(
    friendships: list[Friendship], user_a: str, user_b: str,
) -> int:
    for f in friendships:
        if {f.user_id, f.friend_id} == {user_a, user_b}:
            return f.priority
    return DEFAULT_PRIORITY


def score_priority_contact(
    slot: OverlapSlot,
    prefs: dict[str, UserPrefs],
    friendships: list[Friendship],
    context: ScoringContext,
) -> float:
    """Average friendship priority over all pairs, rescaled from 1-10."""
    priorities = [
        _friendship_priority(friendships, a, b)
        for a, b in combinations(slot.participant_ids, 2)
    ]
    if not priorities:
        return NEUTRAL
    return (sum(priorities) / len(priorities) - 1) / 9


def score_weather_suitability(
    slot: OverlapSlot,
    prefs: dict[str, UserPrefs],
    friendships: list[Friendship],
    context: ScoringContext,
) -> float:
    """Constant stub unless the context plugs in a weather source."""
    if context.weather is None:
        return WEATHER_STUB_SCORE
    return min(1.0, max(0.0, context.weather(slot)))


def score_recency(
    slot: OverlapSlot,
    prefs: dict[str, UserPrefs],
    friendships: list[Friendship],
    context: ScoringContext,
) -> float:
    """Longer since the group last met -> higher score, capped at 30 days."""
    days = [
        context.last_hangout_days.get(pair_key(a, b), DEFAULT_HANGOUT_DAYS)
        for a, b in combinations(slot.participant_ids, 2)
    ]
    if not days:
        return NEUTRAL
    return min(1.0, (sum(days) / len(days)) / RECENCY_CAP_DAYS)


def score_cap_distance(
    slot: OverlapSlot,
    prefs: dict[str, UserPrefs],
    friendships: list[Friendship],
    context: ScoringContext,
) -> float:
    """Prefer participants with room left in their weekly quota."""
    values = []
    for uid in slot.participant_ids:
        p = prefs.get(uid)
        max_events = p.max_events_per_week if p else settings.DEFAULT_MAX_EVENTS_PER_WEEK
        if max_events <= 0:
            values.append(0.0)
            continue
        current = context.current_week_event_count.get(uid, 0)
        remaining = max(0, max_events - current)
        values.append(min(1.0, remaining / max_events))
    return _average(values)


# Ordered (name, weight, compute) table; weights sum to 1.0
SCORING_FACTORS: list[tuple[str, float, FactorFn]] = [
    ("timePreference", 0.25, score_time_preference),
    ("eventTypeFit", 0.20, score_event_type_fit),
    ("locationConvenience", 0.15, score_location_convenience),
    ("priorityContact", 0.15, score_priority_contact),
    ("weatherSuitability", 0.10, score_weather_suitability),
    ("recency", 0.10, score_recency),
    ("capDistance", 0.05, score_cap_distance),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score_slot(
    slot: OverlapSlot,
    prefs: dict[str, UserPrefs],
    friendships: list[Friendship],
    context: ScoringContext,
) -> ScoredSlot:
    """Score one overlap slot with every factor in SCORING_FACTORS."""
    breakdown = {
        name: _round(compute(slot, prefs, friendships, context) * weight)
        for name, weight, compute in SCORING_FACTORS
    }
    return ScoredSlot(
        start=slot.start,
        end=slot.end,
        participant_ids=list(slot.participant_ids),
        score=_round(sum(breakdown.values())),
        breakdown=breakdown,
    )


def rank_slots(
    slots: list[OverlapSlot],
    prefs: dict[str, UserPrefs],
    friendships: list[Friendship],
    context: ScoringContext,
) -> list[ScoredSlot]:
    """Score every slot and return them best first (ties keep input order)."""
    scored = [score_slot(slot, prefs, friendships, context) for slot in slots]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored
