"""
Hangout Agent — Availability Calculator.

Turns one person's calendar events and recurring constraints into free-time
windows inside the daily schedulable window (07:00-22:00 local by default).

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable

from hangout.config import local_tz, settings
from hangout.data.contracts import WEEKDAY_ABBREVIATIONS, CalendarEvent, Constraint
from hangout.data.models import FreeSlot

logger = logging.getLogger(__name__)

Interval = tuple[datetime, datetime]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_hhmm(time_str: str) -> int:
    """Convert an "HH:MM" string to minutes from midnight.

    Raises ValueError on malformed input.
    """
    hour, minute = time_str.split(":")
    return int(hour) * 60 + int(minute)


def to_local(dt: datetime, tz: tzinfo | None = None) -> datetime:
    """Express a datetime in the scheduling time zone (naive = already local)."""
    tz = tz or local_tz()
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def _local_date(day: date | datetime, tz: tzinfo) -> date:
    if isinstance(day, datetime):
        return to_local(day, tz).date()
    return day


def _at_minutes(day: date, minutes: int, tz: tzinfo) -> datetime:
    """Wall-clock datetime `minutes` after local midnight of `day`."""
    return datetime.combine(day, time.min, tzinfo=tz) + timedelta(minutes=minutes)


def day_window(day: date | datetime, tz: tzinfo | None = None) -> Interval:
    """Return the schedulable [start, end) window for a day."""
    tz = tz or local_tz()
    d = _local_date(day, tz)
    return (
        _at_minutes(d, settings.DAY_START_HOUR * 60, tz),
        _at_minutes(d, settings.DAY_END_HOUR * 60, tz),
    )


def start_of_week(dt: date | datetime, tz: tzinfo | None = None) -> datetime:
    """Return local midnight of the Monday on or before `dt`."""
    tz = tz or local_tz()
    d = _local_date(dt, tz)
    monday = d - timedelta(days=d.weekday())
    return datetime.combine(monday, time.min, tzinfo=tz)


def merge_intervals(intervals: Iterable[Interval]) -> list[Interval]:
    """Sort by (start, end) and merge overlapping or touching intervals."""
    merged: list[list[datetime]] = []
    for start, end in sorted(intervals):
        if not merged or start > merged[-1][1]:
            merged.append([start, end])
        else:
            merged[-1][1] = max(merged[-1][1], end)
    return [(s, e) for s, e in merged]


def subtract_intervals(free: Interval, busy: list[Interval]) -> list[Interval]:
    """Remove sorted, merged busy intervals from one free interval.

    Returns the remaining pieces in order; zero-length pieces are dropped.
    """
    result: list[Interval] = []
    cur_start, cur_end = free

    for b_start, b_end in busy:
        if b_end <= cur_start:
            continue
        if b_start >= cur_end:
            break
        if b_start > cur_start:
            result.append((cur_start, b_start))
        cur_start = max(cur_start, b_end)

    if cur_start < cur_end:
        result.append((cur_start, cur_end))
    return result


def _clamp(start: datetime, end: datetime, window: Interval) -> Interval | None:
    clamped_start = max(start, window[0])
    clamped_end = min(end, window[1])
    if clamped_start < clamped_end:
        return clamped_start, clamped_end
    return None


def _event_busy_interval(
    event: CalendarEvent,
    window: Interval,
    buffer: timedelta,
    tz: tzinfo,
) -> Interval | None:
    if not event.is_busy:
        return None
    if event.is_all_day:
        start, end = window
    else:
        start = to_local(event.start_time, tz)
        end = to_local(event.end_time, tz)
    return _clamp(start - buffer, end + buffer, window)


def _constraint_busy_intervals(
    constraint: Constraint,
    day: date,
    window: Interval,
    tz: tzinfo,
) -> list[Interval]:
    if WEEKDAY_ABBREVIATIONS[day.weekday()] not in constraint.days:
        return []

    start_min = parse_hhmm(constraint.start_time)
    end_min = parse_hhmm(constraint.end_time)
    if end_min < start_min:
        # Wraps midnight, e.g. sleep 23:00-07:00
        pieces = [(start_min, 24 * 60), (0, end_min)]
    else:
        pieces = [(start_min, end_min)]

    intervals = []
    for piece_start, piece_end in pieces:
        clamped = _clamp(
            _at_minutes(day, piece_start, tz), _at_minutes(day, piece_end, tz), window,
        )
        if clamped is not None:
            intervals.append(clamped)
    return intervals


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compute_free_slots(
    events: list[CalendarEvent],
    constraints: list[Constraint],
    day: date | datetime,
    buffer_minutes: int,
    owner_id: str = "",
    tz: tzinfo | None = None,
) -> list[FreeSlot]:
    """Compute free slots for a single day.

    1. Start with the schedulable window.
    2. Collect busy intervals: busy calendar events widened by the buffer on
       both sides, plus constraints that apply to this weekday. Everything is
       clamped to the window.
    3. Merge the busy intervals and subtract them from the window.

    Args:
        events: Calendar events (only the part inside the window counts).
        constraints: Recurring constraints (e.g. nap 13:00-14:30 Mon/Wed/Fri).
        day: The day to compute; any time portion is ignored.
        buffer_minutes: Minutes added before AND after each busy event.
        owner_id: User id stamped on every returned slot.
        tz: Override for the configured time zone.

    Returns:
        Sorted, non-overlapping free slots; empty when the day is fully booked.
    """
    tz = tz or local_tz()
    d = _local_date(day, tz)
    window = day_window(d, tz)
    buffer = timedelta(minutes=max(0, buffer_minutes))

    busy: list[Interval] = []
    for event in events:
        interval = _event_busy_interval(event, window, buffer, tz)
        if interval is not None:
            busy.append(interval)

    for constraint in constraints:
        busy.extend(_constraint_busy_intervals(constraint, d, window, tz))

    free = subtract_intervals(window, merge_intervals(busy))
    return [FreeSlot(start=s, end=e, owner_id=owner_id) for s, e in free]


def compute_week_availability(
    events: list[CalendarEvent],
    constraints: list[Constraint],
    week_start: date | datetime,
    buffer_minutes: int,
    owner_id: str = "",
    tz: tzinfo | None = None,
) -> list[FreeSlot]:
    """Compute free slots for seven consecutive days starting at `week_start`.

    Each day only sees the events that overlap its own window.
    """
    tz = tz or local_tz()
    first_day = _local_date(week_start, tz)
    all_slots: list[FreeSlot] = []

    for offset in range(7):
        day = first_day + timedelta(days=offset)
        win_start, win_end = day_window(day, tz)
        day_events = [
            ev for ev in events
            if to_local(ev.start_time, tz) < win_end and to_local(ev.end_time, tz) > win_start
        ]
        all_slots.extend(
            compute_free_slots(day_events, constraints, day, buffer_minutes, owner_id, tz)
        )

    logger.debug(
        "Week of %s for %s: %d free slots", first_day, owner_id or "(unknown)", len(all_slots),
    )
    return all_slots
