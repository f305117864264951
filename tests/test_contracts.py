"""Tests for hangout.data — input contracts and computed models."""

from dataclasses import asdict
from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from hangout.data.contracts import CalendarEvent, Constraint, Friendship, LocationEntry, UserPrefs
from hangout.data.models import FreeSlot, ScoredSlot, pair_key


class TestConstraint:
    def test_days_normalized(self):
        c = Constraint(type="work", days=["Mon", " TUE "], start_time="09:00", end_time="17:00")
        assert c.days == ["mon", "tue"]

    def test_unknown_day_rejected(self):
        with pytest.raises(ValidationError):
            Constraint(type="work", days=["monday"], start_time="09:00", end_time="17:00")

    def test_bad_time_rejected(self):
        with pytest.raises(ValidationError):
            Constraint(type="nap", days=["mon"], start_time="1pm", end_time="14:00")

    def test_out_of_range_time_rejected(self):
        with pytest.raises(ValidationError):
            Constraint(type="nap", days=["mon"], start_time="13:00", end_time="25:00")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            Constraint(type="gym", days=["mon"], start_time="13:00", end_time="14:00")


class TestUserPrefs:
    def test_defaults(self):
        prefs = UserPrefs()
        assert prefs.max_events_per_week == 3
        assert prefs.preferred_types == []
        assert prefs.prefer_weekends is False

    def test_negative_cap_rejected(self):
        with pytest.raises(ValidationError):
            UserPrefs(max_events_per_week=-1)


class TestFriendship:
    def test_priority_bounds(self):
        with pytest.raises(ValidationError):
            Friendship(user_id="a", friend_id="b", priority=11)

    def test_self_friendship_rejected(self):
        with pytest.raises(ValidationError):
            Friendship(user_id="a", friend_id="a", priority=5)


class TestLocationEntry:
    def test_negative_travel_rejected(self):
        with pytest.raises(ValidationError):
            LocationEntry(user_id="a", location_name="x", location_id="1", travel_minutes=-5)


class TestCalendarEvent:
    def test_defaults(self):
        ev = CalendarEvent(id="1", start_time=datetime(2026, 3, 2, 9), end_time=datetime(2026, 3, 2, 10))
        assert ev.is_busy is True
        assert ev.is_all_day is False
        assert ev.source == "manual"


class TestModels:
    def test_pair_key_order_independent(self):
        assert pair_key("bob", "alice") == pair_key("alice", "bob") == ("alice", "bob")

    def test_free_slot_duration(self):
        start = datetime(2026, 3, 2, 9)
        assert FreeSlot(start, start + timedelta(minutes=90)).duration_minutes == 90

    def test_scored_slot_serializable(self):
        start = datetime(2026, 3, 2, 9)
        slot = ScoredSlot(start, start + timedelta(hours=1), ["a", "b"], score=0.5, breakdown={"recency": 0.5})
        d = asdict(slot)
        assert d["participant_ids"] == ["a", "b"]
        assert d["score"] == 0.5
