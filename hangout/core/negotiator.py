"""
Hangout Agent — Negotiator.

Top-level orchestration: find overlaps once, score them for every engagement
type, then greedily pick the best proposals that keep everyone under their
weekly cap, never double-book anyone, and never repeat the same activity with
the same group.

One deterministic pass, no backtracking. "Nothing fits" is reported through
the result and the log, never raised.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from hangout.config import settings
from hangout.core.overlap_finder import find_overlaps
from hangout.core.scorer import rank_slots
from hangout.data.contracts import LocationEntry, UserPrefs
from hangout.data.models import (
    LogEntry,
    NegotiationParams,
    NegotiationResult,
    ProposalCandidate,
    ScoredSlot,
    ScoringContext,
)

logger = logging.getLogger(__name__)

_ENGAGEMENT_LABELS = {
    "playground": "Playground meetup",
    "coffee": "Coffee",
    "playdate_home": "Playdate at home",
    "dinner": "Dinner",
    "park": "Park hangout",
    "class": "Class",
    "walk": "Walk",
    "other": "Hangout",
}


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class NegotiationLog:
    """Append-only narration of one negotiation run.

    Entries are also emitted through the module logger at INFO.
    """

    def __init__(self, clock: Callable[[], str] = _utc_now_iso) -> None:
        self._clock = clock
        self.entries: list[LogEntry] = []

    def add(self, message: str) -> None:
        self.entries.append(LogEntry(timestamp=self._clock(), message=message))
        logger.info("%s", message)


# ---------------------------------------------------------------------------
# Title helpers
# ---------------------------------------------------------------------------


def format_engagement_type(engagement_type: str) -> str:
    """Turn a type slug into a label: "playdate_home" -> "Playdate at home"."""
    label = _ENGAGEMENT_LABELS.get(engagement_type)
    if label is not None:
        return label
    return engagement_type[:1].upper() + engagement_type[1:]


def build_title(
    engagement_type: str,
    participant_ids: list[str],
    display_names: dict[str, str] | None = None,
) -> str:
    """Build a display title such as "Coffee with Bob" or
    "Playground meetup with Alice, Carol & Dan".

    Names come from `display_names`, falling back to the first 8 characters
    of the user id.
    """
    display_names = display_names or {}
    label = format_engagement_type(engagement_type)
    names = [display_names.get(uid, uid[:8]) for uid in participant_ids]

    if not names:
        return label
    if len(names) == 1:
        return f"{label} with {names[0]}"
    return f"{label} with {', '.join(names[:-1])} & {names[-1]}"


# ---------------------------------------------------------------------------
# Selection helpers
# ---------------------------------------------------------------------------


def _min_travel_minutes(locations: list[LocationEntry]) -> dict[str, int]:
    """Per-user shortest travel time across their saved locations."""
    travel: dict[str, int] = {}
    for loc in locations:
        existing = travel.get(loc.user_id)
        if existing is None or loc.travel_minutes < existing:
            travel[loc.user_id] = loc.travel_minutes
    return travel


def _weekly_cap(prefs: dict[str, UserPrefs], user_id: str) -> int:
    p = prefs.get(user_id)
    return p.max_events_per_week if p else settings.DEFAULT_MAX_EVENTS_PER_WEEK


def _pick_location(
    locations: list[LocationEntry], participant_ids: list[str],
) -> LocationEntry | None:
    for loc in locations:
        if loc.user_id in participant_ids:
            return loc
    return None


def _group_key(engagement_type: str, participant_ids: list[str]) -> tuple[str, tuple[str, ...]]:
    return engagement_type, tuple(sorted(participant_ids))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def negotiate(
    params: NegotiationParams,
    clock: Callable[[], str] = _utc_now_iso,
) -> NegotiationResult:
    """Run the full negotiation.

    1. Find all overlapping free slots across user pairs and groups.
    2. Score the overlaps once per engagement type.
    3. Walk every (type, slot) pair best-first and accept it when:
       - every participant is still under their weekly cap,
       - no participant already has an accepted proposal overlapping it,
       - the same type has not been proposed to the same group.
    4. Build proposal candidates with titles and a location.

    Args:
        params: Availability, preferences, friendships, locations, week start
            and the engagement types to consider.
        clock: Returns the ISO timestamp stamped on each log entry.

    Returns:
        NegotiationResult with the accepted proposals (in acceptance order)
        and the run's log.
    """
    log = NegotiationLog(clock)
    prefs = params.preferences

    log.add(f"Negotiation started for week of {params.week_start.isoformat()}")
    log.add(
        f"Participants: {', '.join(u.user_id for u in params.users)} | "
        f"Types: {', '.join(params.engagement_types)}"
    )

    # --- 1. Overlaps ---
    overlaps = find_overlaps(params.users, params.min_duration_minutes)
    log.add(f"Found {len(overlaps)} overlapping time slots")

    if not overlaps:
        log.add("No overlapping availability found. Negotiation complete.")
        return NegotiationResult(proposals=[], log=log.entries)

    # --- 2. Scoring per engagement type ---
    travel_minutes = _min_travel_minutes(params.locations)
    week_event_count = {u.user_id: 0 for u in params.users}

    candidates: list[tuple[str, ScoredSlot]] = []
    for engagement_type in params.engagement_types:
        context = ScoringContext(
            proposed_type=engagement_type,
            current_week_event_count=dict(week_event_count),
            last_hangout_days=dict(params.last_hangout_days or {}),
            travel_minutes=travel_minutes,
        )
        ranked = rank_slots(overlaps, prefs, params.friendships, context)
        top = f"{ranked[0].score:.3f}" if ranked else "N/A"
        log.add(f'Scored {len(ranked)} slots for type "{engagement_type}". Top score: {top}')
        candidates.extend((engagement_type, s) for s in ranked)

    # --- 3. Greedy selection, one global order across types ---
    candidates.sort(key=lambda c: c[1].score, reverse=True)

    proposal_count: dict[str, int] = {}
    booked: dict[str, list[tuple[datetime, datetime]]] = {}
    used_group_keys: set[tuple[str, tuple[str, ...]]] = set()
    proposals: list[ProposalCandidate] = []

    for engagement_type, slot in candidates:
        ids = slot.participant_ids

        if any(proposal_count.get(uid, 0) >= _weekly_cap(prefs, uid) for uid in ids):
            continue

        if any(
            slot.start < b_end and b_start < slot.end
            for uid in ids
            for b_start, b_end in booked.get(uid, [])
        ):
            continue

        key = _group_key(engagement_type, ids)
        if key in used_group_keys:
            continue

        location = _pick_location(params.locations, ids)
        # The first participant is the implicit initiator and is left out of the title
        title = build_title(engagement_type, ids[1:], params.display_names)

        proposals.append(ProposalCandidate(
            slot=slot,
            engagement_type=engagement_type,
            title=title,
            participants=list(ids),
            location_name=location.location_name if location else None,
            location_id=location.location_id if location else None,
        ))
        used_group_keys.add(key)
        for uid in ids:
            proposal_count[uid] = proposal_count.get(uid, 0) + 1
            booked.setdefault(uid, []).append((slot.start, slot.end))

        log.add(
            f'Selected: "{title}" ({engagement_type}) at {slot.start.isoformat()} '
            f"[score={slot.score:.3f}]"
        )

    log.add(f"Negotiation complete. Generated {len(proposals)} proposal(s).")
    return NegotiationResult(proposals=proposals, log=log.entries)
