"""Tests for hangout.core.overlap_finder — pair sweep and group extension."""

from datetime import datetime, timedelta

from hangout.config import local_tz
from hangout.core.overlap_finder import find_overlaps
from hangout.data.models import FreeSlot, UserAvailability


def _at(day_offset: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, 2, hour, minute, tzinfo=local_tz()) + timedelta(days=day_offset)


def _user(user_id: str, *spans: tuple[int, float, float]) -> UserAvailability:
    """Build availability from (day_offset, start_hour, end_hour) spans."""
    slots = []
    for day, start, end in spans:
        slots.append(FreeSlot(
            start=_at(day, int(start), int(start % 1 * 60)),
            end=_at(day, int(end), int(end % 1 * 60)),
            owner_id=user_id,
        ))
    return UserAvailability(user_id=user_id, free_slots=slots)


def _assert_covered(overlap, users: list[UserAvailability]):
    by_id = {u.user_id: u for u in users}
    for uid in overlap.participant_ids:
        assert any(
            s.start <= overlap.start and s.end >= overlap.end
            for s in by_id[uid].free_slots
        ), f"{uid} not free for {overlap}"


# ---------------------------------------------------------------------------
# Pairs
# ---------------------------------------------------------------------------


class TestPairOverlaps:
    def test_simple_overlap(self):
        overlaps = find_overlaps([_user("a", (0, 9, 12)), _user("b", (0, 10, 14))])
        assert len(overlaps) == 1
        assert overlaps[0].start == _at(0, 10)
        assert overlaps[0].end == _at(0, 12)
        assert overlaps[0].participant_ids == ["a", "b"]

    def test_disjoint_windows(self):
        overlaps = find_overlaps([_user("a", (0, 7, 10)), _user("b", (0, 12, 15))])
        assert overlaps == []

    def test_short_overlap_discarded(self):
        overlaps = find_overlaps([_user("a", (0, 9, 10.5)), _user("b", (0, 10, 12))])
        assert overlaps == []

    def test_exactly_minimum_kept(self):
        overlaps = find_overlaps([_user("a", (0, 9, 11)), _user("b", (0, 10, 12))])
        assert len(overlaps) == 1

    def test_custom_minimum(self):
        users = [_user("a", (0, 9, 10.5)), _user("b", (0, 10, 12))]
        assert len(find_overlaps(users, min_duration_minutes=30)) == 1

    def test_multiple_slots_sweep(self):
        a = _user("a", (0, 7, 9), (0, 11, 15), (1, 8, 20))
        b = _user("b", (0, 8, 12), (0, 13, 22), (1, 7, 9), (1, 18, 22))
        overlaps = find_overlaps([a, b])
        spans = [(o.start, o.end) for o in overlaps]
        assert spans == [
            (_at(0, 8), _at(0, 9)),
            (_at(0, 11), _at(0, 12)),
            (_at(0, 13), _at(0, 15)),
            (_at(1, 8), _at(1, 9)),
            (_at(1, 18), _at(1, 20)),
        ]

    def test_unsorted_input_is_sorted_first(self):
        a = _user("a", (1, 9, 12), (0, 9, 12))
        b = _user("b", (0, 9, 12), (1, 9, 12))
        overlaps = find_overlaps([a, b])
        assert [o.start for o in overlaps] == [_at(0, 9), _at(1, 9)]

    def test_single_user_has_no_overlaps(self):
        assert find_overlaps([_user("a", (0, 7, 22))]) == []


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


class TestGroupOverlaps:
    def test_three_users_same_window(self):
        users = [_user(u, (0, 10, 14)) for u in ("a", "b", "c")]
        overlaps = find_overlaps(users)

        pairs = [o for o in overlaps if len(o.participant_ids) == 2]
        groups = [o for o in overlaps if len(o.participant_ids) == 3]
        assert sorted(tuple(o.participant_ids) for o in pairs) == [
            ("a", "b"), ("a", "c"), ("b", "c"),
        ]
        # Every pair grows into the same group; duplicates are dropped
        assert len(groups) == 1
        assert groups[0].participant_ids == ["a", "b", "c"]
        assert (groups[0].start, groups[0].end) == (_at(0, 10), _at(0, 14))

    def test_group_window_narrowed(self):
        users = [
            _user("a", (0, 9, 13)),
            _user("b", (0, 9, 13)),
            _user("c", (0, 11, 15)),
        ]
        groups = [o for o in find_overlaps(users) if len(o.participant_ids) == 3]
        assert len(groups) >= 1
        assert all((g.start, g.end) == (_at(0, 11), _at(0, 13)) for g in groups)

    def test_extension_discarded_when_narrowed_too_short(self):
        # c and d each overlap the a/b window by an hour, but at opposite ends
        users = [
            _user("a", (0, 9, 12)),
            _user("b", (0, 9, 12)),
            _user("c", (0, 9, 10)),
            _user("d", (0, 11, 12)),
        ]
        overlaps = find_overlaps(users)
        assert not any(
            set(o.participant_ids) >= {"a", "b", "c", "d"} for o in overlaps
        )

    def test_group_ids_sorted_and_unique(self):
        users = [_user(u, (0, 8, 12)) for u in ("zoe", "amy", "max")]
        overlaps = find_overlaps(users)
        groups = [o for o in overlaps if len(o.participant_ids) >= 3]
        assert groups
        for o in overlaps:
            assert len(set(o.participant_ids)) == len(o.participant_ids)
        for g in groups:
            assert g.participant_ids == sorted(g.participant_ids)

    def test_pair_ids_keep_input_order(self):
        users = [_user(u, (0, 8, 12)) for u in ("zoe", "amy")]
        assert [o.participant_ids for o in find_overlaps(users)] == [["zoe", "amy"]]

    def test_result_sorted_by_start(self):
        users = [
            _user("a", (0, 7, 22), (1, 7, 22)),
            _user("b", (1, 10, 12), (0, 15, 18)),
            _user("c", (0, 8, 10), (1, 9, 13)),
        ]
        overlaps = find_overlaps(users)
        starts = [o.start for o in overlaps]
        assert starts == sorted(starts)

    def test_every_overlap_is_long_enough_and_covered(self):
        users = [
            _user("a", (0, 7, 12), (0, 14, 22), (2, 9, 17)),
            _user("b", (0, 9, 15), (2, 7, 11), (2, 13, 20)),
            _user("c", (0, 10, 20), (2, 8, 14)),
            _user("d", (0, 7, 8.5), (2, 10, 22)),
        ]
        for o in find_overlaps(users):
            assert o.duration_minutes >= 60
            assert len(o.participant_ids) >= 2
            _assert_covered(o, users)
