"""Tests for hangout.adapters — mock calendar and the adapter factory."""

from datetime import datetime, timedelta

import pytest
from unittest.mock import patch

from hangout.adapters.calendar_factory import create_calendar_adapter
from hangout.adapters.mock_calendar import PERSONAS, MockCalendarAdapter
from hangout.config import local_tz
from hangout.data.contracts import CalendarEvent
from hangout.ports.calendar_port import CalendarError

MONDAY = datetime(2026, 3, 2, tzinfo=local_tz())


def _event(day: int, start: int, end: int) -> CalendarEvent:
    return CalendarEvent(
        id="tmp",
        title="Lunch",
        start_time=MONDAY + timedelta(days=day, hours=start),
        end_time=MONDAY + timedelta(days=day, hours=end),
    )


class TestMockCalendarAdapter:
    def test_load_persona_builds_week(self):
        cal = MockCalendarAdapter()
        events = cal.load_persona("u1", "dave", week_start=MONDAY + timedelta(days=3))
        assert len(events) == len(PERSONAS["dave"])
        assert events[0].title == "Work (remote)"
        assert events[0].start_time == MONDAY.replace(hour=9)
        assert events[0].end_time == MONDAY.replace(hour=17, minute=30)
        assert all(ev.source == "mock" for ev in events)

    def test_unknown_persona_raises(self):
        with pytest.raises(ValueError, match="Unknown persona"):
            MockCalendarAdapter().load_persona("u1", "zed", MONDAY)

    @pytest.mark.asyncio
    async def test_get_events_filters_range(self):
        cal = MockCalendarAdapter()
        cal.load_persona("u1", "carol", MONDAY)
        events = await cal.get_events("u1", MONDAY, MONDAY + timedelta(days=1))
        assert [ev.title for ev in events] == ["Morning commute", "Work", "Evening commute"]

    @pytest.mark.asyncio
    async def test_get_events_unknown_user(self):
        assert await MockCalendarAdapter().get_events("nobody", MONDAY, MONDAY + timedelta(days=7)) == []

    @pytest.mark.asyncio
    async def test_get_events_includes_events_crossing_range(self):
        cal = MockCalendarAdapter()
        overnight = CalendarEvent(
            id="x", title="Overnight shift",
            start_time=MONDAY - timedelta(hours=2), end_time=MONDAY + timedelta(hours=6),
        )
        await cal.create_event("u1", overnight)
        events = await cal.get_events("u1", MONDAY, MONDAY + timedelta(days=7))
        assert [ev.title for ev in events] == ["Overnight shift"]

    @pytest.mark.asyncio
    async def test_get_events_excludes_event_ending_at_range_start(self):
        cal = MockCalendarAdapter()
        await cal.create_event("u1", CalendarEvent(
            id="x", start_time=MONDAY - timedelta(hours=2), end_time=MONDAY,
        ))
        assert await cal.get_events("u1", MONDAY, MONDAY + timedelta(days=7)) == []

    @pytest.mark.asyncio
    async def test_create_and_delete(self):
        cal = MockCalendarAdapter()
        created = await cal.create_event("u1", _event(0, 12, 13))
        assert created.id != "tmp"
        assert created.source == "mock"
        assert cal.all_events("u1") == [created]

        await cal.delete_event("u1", created.id)
        assert cal.all_events("u1") == []

    @pytest.mark.asyncio
    async def test_delete_missing_raises(self):
        with pytest.raises(CalendarError):
            await MockCalendarAdapter().delete_event("u1", "nope")

    @pytest.mark.asyncio
    async def test_sync_seeds_once(self):
        cal = MockCalendarAdapter(week_start=MONDAY)
        first = await cal.sync_events("u1")
        second = await cal.sync_events("u1")
        assert len(first) == 12
        assert [ev.id for ev in first] == [ev.id for ev in second]

    def test_instances_do_not_share_state(self):
        a = MockCalendarAdapter()
        b = MockCalendarAdapter()
        a.load_persona("u1", "alice", MONDAY)
        assert b.all_events("u1") == []

    def test_clear(self):
        cal = MockCalendarAdapter()
        cal.load_persona("u1", "bob", MONDAY)
        cal.clear()
        assert cal.all_events("u1") == []


class TestCreateCalendarAdapter:
    @patch("hangout.adapters.calendar_factory.settings")
    def test_returns_mock_adapter(self, mock_settings):
        mock_settings.CALENDAR_PROVIDER = "mock"
        assert isinstance(create_calendar_adapter(), MockCalendarAdapter)

    @patch("hangout.adapters.calendar_factory.settings")
    def test_case_insensitive(self, mock_settings):
        mock_settings.CALENDAR_PROVIDER = "Mock"
        assert isinstance(create_calendar_adapter(), MockCalendarAdapter)

    @patch("hangout.adapters.calendar_factory.settings")
    def test_unknown_provider_raises(self, mock_settings):
        mock_settings.CALENDAR_PROVIDER = "nonexistent"
        with pytest.raises(ValueError, match="Unknown CALENDAR_PROVIDER"):
            create_calendar_adapter()
