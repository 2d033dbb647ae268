"""Tests for the scheduling engine (DaySchedule and overlap resolution).

Resolution must be deterministic: same blocks in, same blocks out.
"""

import random
from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from daydeck.engine.interval import duration
from daydeck.engine.scheduler import DaySchedule, MutationStatus
from daydeck.errors import DuplicateBlockError
from daydeck.models.time_block import TimeBlock


def _random_blocks(seed: int, count: int):
    rng = random.Random(seed)
    base = datetime(2024, 1, 15, 7, 0)
    blocks = []
    for i in range(count):
        start = base + timedelta(minutes=rng.randrange(0, 16 * 60, 5))
        blocks.append(TimeBlock(
            id=f"block-{i}",
            title=f"Block {i}",
            start_time=start,
            end_time=start + timedelta(minutes=rng.randrange(5, 180, 5)),
        ))
    return blocks


class TestResolveOverlaps:
    """Test resolve_overlaps() cascading behavior."""

    def test_cascading_shift(self, make_block):
        """09:00-10:00, 09:30-10:30, 10:00-11:00 collapse into a back-to-back run."""
        schedule = DaySchedule([
            make_block("09:00", "10:00", "b1"),
            make_block("09:30", "10:30", "b2"),
            make_block("10:00", "11:00", "b3"),
        ])

        dirty = schedule.resolve_overlaps()

        b1, b2, b3 = (schedule.get(i) for i in ("b1", "b2", "b3"))
        assert (b1.start_time.hour, b1.end_time.hour) == (9, 10)
        assert (b2.start_time.hour, b2.end_time.hour) == (10, 11)
        assert (b3.start_time.hour, b3.end_time.hour) == (11, 12)
        assert all(duration(b) == timedelta(minutes=60) for b in (b1, b2, b3))
        assert [b.id for b in dirty] == ["b2", "b3"]

    def test_nested_block_is_pushed_past_the_enclosing_block(self, make_block):
        """A 09:00-12:00, B 10:00-10:30, C 11:00-11:30: B and C both land after A."""
        schedule = DaySchedule([
            make_block("09:00", "12:00", "A"),
            make_block("10:00", "10:30", "B"),
            make_block("11:00", "11:30", "C"),
        ])

        dirty = schedule.resolve_overlaps()

        a, b, c = (schedule.get(i) for i in ("A", "B", "C"))
        assert (a.start_time, a.end_time) == (datetime(2024, 1, 15, 9, 0), datetime(2024, 1, 15, 12, 0))
        assert (b.start_time, b.end_time) == (datetime(2024, 1, 15, 12, 0), datetime(2024, 1, 15, 12, 30))
        assert (c.start_time, c.end_time) == (datetime(2024, 1, 15, 12, 30), datetime(2024, 1, 15, 13, 0))
        assert [blk.id for blk in dirty] == ["B", "C"]
        assert schedule.resolve_overlaps() == []

    def test_block_after_enclosing_block_keeps_its_place(self, make_block):
        """Only blocks starting before the latest end so far are moved."""
        schedule = DaySchedule([
            make_block("09:00", "12:00", "A"),
            make_block("10:00", "10:30", "B"),
            make_block("13:00", "14:00", "C"),
        ])

        dirty = schedule.resolve_overlaps()

        assert [blk.id for blk in dirty] == ["B"]
        assert schedule.get("C").start_time == datetime(2024, 1, 15, 13, 0)

    @pytest.mark.parametrize("seed", range(10))
    def test_output_is_sorted_by_start(self, seed):
        schedule = DaySchedule(_random_blocks(seed, 25))
        schedule.resolve_overlaps()
        starts = [b.start_time for b in schedule.blocks]
        assert starts == sorted(starts)

    def test_no_overlap_returns_nothing(self, make_block):
        schedule = DaySchedule([make_block("09:00", "10:00"), make_block("10:00", "11:00")])
        assert schedule.resolve_overlaps() == []

    def test_empty_and_single_block(self, make_block):
        assert DaySchedule().resolve_overlaps() == []
        assert DaySchedule([make_block("09:00", "10:00")]).resolve_overlaps() == []

    def test_sorts_by_start_time(self, make_block):
        schedule = DaySchedule([make_block("11:00", "12:00", "late"), make_block("08:00", "09:00", "early")])
        schedule.resolve_overlaps()
        assert [b.id for b in schedule.blocks] == ["early", "late"]

    def test_may_push_past_end_of_day(self, make_block):
        """No truncation at the day boundary."""
        schedule = DaySchedule([make_block("22:00", "23:30", "a"), make_block("23:00", "23:45", "b")])
        schedule.resolve_overlaps()
        b = schedule.get("b")
        assert b.start_time == datetime(2024, 1, 15, 23, 30)
        assert b.end_time == datetime(2024, 1, 16, 0, 15)

    @pytest.mark.parametrize("seed", range(10))
    def test_no_overlaps_after_resolution(self, seed):
        schedule = DaySchedule(_random_blocks(seed, 25))
        schedule.resolve_overlaps()
        ordered = sorted(schedule.blocks, key=lambda b: b.start_time)
        for a, b in zip(ordered, ordered[1:]):
            assert a.end_time <= b.start_time

    @pytest.mark.parametrize("seed", range(10))
    def test_preserves_durations(self, seed):
        blocks = _random_blocks(seed, 25)
        before = {b.id: duration(b) for b in blocks}
        schedule = DaySchedule(blocks)
        schedule.resolve_overlaps()
        assert {b.id: duration(b) for b in schedule.blocks} == before

    @pytest.mark.parametrize("seed", range(10))
    def test_idempotent(self, seed):
        schedule = DaySchedule(_random_blocks(seed, 25))
        schedule.resolve_overlaps()
        once = schedule.blocks
        assert schedule.resolve_overlaps() == []
        assert schedule.blocks == once


class TestScheduleEdits:
    """Test insert/update/delete/move on DaySchedule."""

    def test_insert_does_not_resolve(self, make_block):
        schedule = DaySchedule([make_block("09:00", "10:00", "a")])
        result = schedule.insert(make_block("09:30", "10:30", "b"))
        assert result.found
        assert schedule.get("b").start_time == datetime(2024, 1, 15, 9, 30)

    def test_insert_duplicate_id_raises(self, make_block):
        schedule = DaySchedule([make_block("09:00", "10:00", "a")])
        with pytest.raises(DuplicateBlockError):
            schedule.insert(make_block("11:00", "12:00", "a"))

    def test_block_requires_start_before_end(self, make_block):
        with pytest.raises(ValidationError):
            make_block("10:00", "10:00")

    def test_update_merges_fields(self, make_block):
        schedule = DaySchedule([make_block("09:00", "10:00", "a")])
        result = schedule.update("a", title="Renamed", color="#000000")
        assert result.status == MutationStatus.APPLIED
        assert schedule.get("a").title == "Renamed"
        assert schedule.get("a").start_time == datetime(2024, 1, 15, 9, 0)

    def test_update_rejects_inverted_interval(self, make_block):
        schedule = DaySchedule([make_block("09:00", "10:00", "a")])
        with pytest.raises(ValidationError):
            schedule.update("a", end_time=datetime(2024, 1, 15, 8, 0))
        assert schedule.get("a").end_time == datetime(2024, 1, 15, 10, 0)

    def test_missing_id_is_reported_not_raised(self, make_block):
        schedule = DaySchedule([make_block("09:00", "10:00", "a")])
        for result in (
            schedule.update("missing", title="x"),
            schedule.delete("missing"),
            schedule.move("missing", datetime(2024, 1, 15, 9, 0), datetime(2024, 1, 15, 10, 0)),
        ):
            assert result.status == MutationStatus.NOT_FOUND
            assert result.dirty == []
        assert len(schedule) == 1

    def test_delete_leaves_siblings(self, make_block):
        schedule = DaySchedule([make_block("09:00", "10:00", "a"), make_block("10:00", "11:00", "b")])
        schedule.delete("a")
        assert [b.id for b in schedule.blocks] == ["b"]
        assert schedule.get("b").start_time == datetime(2024, 1, 15, 10, 0)

    def test_move_reports_shifted_siblings(self, make_block):
        """Moving a onto b pushes b (and c behind it) forward; all three are dirty."""
        schedule = DaySchedule([
            make_block("08:00", "09:00", "a"),
            make_block("10:00", "11:00", "b"),
            make_block("11:00", "11:30", "c"),
        ])
        result = schedule.move("a", datetime(2024, 1, 15, 9, 30), datetime(2024, 1, 15, 10, 30))

        assert result.block.id == "a"
        assert [b.id for b in result.dirty] == ["a", "b", "c"]
        assert schedule.get("b").start_time == datetime(2024, 1, 15, 10, 30)
        assert schedule.get("c").start_time == datetime(2024, 1, 15, 11, 30)

    def test_clear_task_link(self, make_block):
        schedule = DaySchedule([make_block("09:00", "10:00", "a", task_id="t1"), make_block("10:00", "11:00", "b")])
        changed = schedule.clear_task_link("t1")
        assert [b.id for b in changed] == ["a"]
        assert schedule.get("a").task_id is None

    def test_blocks_on_filters_by_day(self, make_block):
        other_day = make_block("09:00", "10:00", "other",
                               start_time=datetime(2024, 1, 16, 9, 0), end_time=datetime(2024, 1, 16, 10, 0))
        schedule = DaySchedule([make_block("09:00", "10:00", "a"), other_day])
        assert [b.id for b in schedule.blocks_on(datetime(2024, 1, 15).date())] == ["a"]
