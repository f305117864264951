"""
Hangout Agent — Overlap Finder.

Finds windows where two or more people are free at the same time.

Pairs are found exhaustively with a two-pointer sweep. Groups of three or more
are grown greedily from each pair overlap, so a group window is only found if
one of its pairs surfaced it first. That keeps the search polynomial.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from hangout.config import settings
from hangout.data.models import FreeSlot, OverlapSlot, UserAvailability

logger = logging.getLogger(__name__)


def _sweep_pair(
    user_a: str,
    slots_a: list[FreeSlot],
    user_b: str,
    slots_b: list[FreeSlot],
    min_duration: timedelta,
) -> list[OverlapSlot]:
    """Two-pointer sweep over two start-sorted slot lists."""
    overlaps: list[OverlapSlot] = []
    ai = bi = 0

    while ai < len(slots_a) and bi < len(slots_b):
        a = slots_a[ai]
        b = slots_b[bi]

        start = max(a.start, b.start)
        end = min(a.end, b.end)
        if end - start >= min_duration:
            overlaps.append(OverlapSlot(start=start, end=end, participant_ids=[user_a, user_b]))

        # Advance whichever slot ends first
        if a.end <= b.end:
            ai += 1
        else:
            bi += 1

    return overlaps


def _extend_to_group(
    overlap: OverlapSlot,
    user_slots: dict[str, list[FreeSlot]],
    min_duration: timedelta,
) -> OverlapSlot | None:
    """Grow a pair overlap with every other user free for long enough during it.

    Returns the narrowed group window, or None if nobody joined or the
    narrowed window falls below the minimum.
    """
    added: list[str] = []
    for uid, slots in user_slots.items():
        if uid in overlap.participant_ids:
            continue
        for s in slots:
            if min(s.end, overlap.end) - max(s.start, overlap.start) >= min_duration:
                added.append(uid)
                break

    if not added:
        return None

    narrow_start = overlap.start
    narrow_end = overlap.end
    for uid in added:
        best: tuple[datetime, datetime] | None = None
        for s in user_slots[uid]:
            int_start = max(s.start, narrow_start)
            int_end = min(s.end, narrow_end)
            if int_end <= int_start:
                continue
            if best is None or int_end - int_start > best[1] - best[0]:
                best = (int_start, int_end)
        if best is None:
            return None
        narrow_start, narrow_end = best

    if narrow_end - narrow_start < min_duration:
        return None

    return OverlapSlot(
        start=narrow_start,
        end=narrow_end,
        participant_ids=sorted(overlap.participant_ids + added),
    )


def find_overlaps(
    availabilities: list[UserAvailability],
    min_duration_minutes: int | None = None,
) -> list[OverlapSlot]:
    """Find time slots where two or more users are simultaneously free.

    Args:
        availabilities: Each user's free slots, in any order.
        min_duration_minutes: Shortest overlap worth keeping
            (defaults to MIN_OVERLAP_MINUTES, 60).

    Returns:
        Pair overlaps followed by deduplicated group overlaps, stable-sorted
        by start time.
    """
    if min_duration_minutes is None:
        min_duration_minutes = settings.MIN_OVERLAP_MINUTES
    min_duration = timedelta(minutes=min_duration_minutes)

    user_slots: dict[str, list[FreeSlot]] = {
        ua.user_id: sorted(ua.free_slots, key=lambda s: s.start)
        for ua in availabilities
    }
    user_ids = list(user_slots)

    overlaps: list[OverlapSlot] = []
    for i, uid_a in enumerate(user_ids):
        for uid_b in user_ids[i + 1:]:
            overlaps.extend(
                _sweep_pair(uid_a, user_slots[uid_a], uid_b, user_slots[uid_b], min_duration)
            )
    pair_count = len(overlaps)

    if len(user_ids) > 2:
        seen: set[tuple[datetime, datetime, tuple[str, ...]]] = set()
        groups: list[OverlapSlot] = []
        for overlap in overlaps:
            group = _extend_to_group(overlap, user_slots, min_duration)
            if group is None:
                continue
            key = (group.start, group.end, tuple(group.participant_ids))
            if key not in seen:
                seen.add(key)
                groups.append(group)
        overlaps.extend(groups)

    overlaps.sort(key=lambda o: o.start)
    logger.debug(
        "Found %d pair and %d group overlaps across %d users",
        pair_count, len(overlaps) - pair_count, len(user_ids),
    )
    return overlaps
