"""Tests for occupancy resolution on the board"""

import random

import pytest
from conftest import BOARD_DAY, make_booking

from salonboard.domain.scheduling.errors import DataInconsistencyWarning
from salonboard.domain.scheduling.grid import DAYTIME_GRID, EVENING_GRID, enumerate_slots, slot_offset
from salonboard.domain.scheduling.occupancy import (
    CellState,
    booking_span,
    find_conflicts,
    find_overlaps,
    is_covered,
    resolve_board,
    resolve_occupancy,
)

SLOTS = enumerate_slots(EVENING_GRID)


def states(cells):
    return {cell.slot.label: cell.state for cell in cells}


class TestBookingSpan:
    @pytest.mark.parametrize(
        "duration,interval,expected",
        [(30, 30, 1), (31, 30, 2), (90, 30, 3), (45, 15, 3), (50, 15, 4), (1, 30, 1)],
    )
    def test_span_rounds_up(self, duration, interval, expected):
        assert booking_span(duration, interval) == expected


class TestResolveOccupancy:
    def test_ninety_minute_booking_covers_two_following_slots(self):
        """Amal's board: one booking at 10:00 for 90 minutes"""
        cells = resolve_occupancy([make_booking(1, "10:00", 90)], SLOTS, EVENING_GRID)
        by_label = states(cells)

        assert by_label["10:00"] == CellState.START
        assert by_label["10:30"] == CellState.COVERED
        assert by_label["11:00"] == CellState.COVERED
        assert by_label["11:30"] == CellState.FREE
        assert cells[0].span == 3
        assert cells[1].appointment_id == 1

    def test_one_cell_per_slot(self):
        cells = resolve_occupancy([], SLOTS, EVENING_GRID)

        assert len(cells) == len(SLOTS)
        assert all(cell.state == CellState.FREE for cell in cells)

    def test_long_booking_is_found_from_far_earlier_slots(self):
        bookings = [make_booking(1, "12:00", 240), make_booking(2, "16:30", 30)]

        assert is_covered(bookings, SLOTS, 11, EVENING_GRID)  # 15:30
        assert not is_covered(bookings, SLOTS, 12, EVENING_GRID)  # 16:00
        assert not is_covered(bookings, SLOTS, 13, EVENING_GRID)  # 16:30 is a start

    def test_is_covered_stays_quiet_on_a_corrupted_column(self, caplog, recwarn):
        caplog.set_level("DEBUG")
        bookings = [make_booking(1, "10:00", 90), make_booking(2, "10:00", 30), make_booking(3, "10:10", 30)]

        assert is_covered(bookings, SLOTS, 1, EVENING_GRID)  # 10:30
        assert not is_covered(bookings, SLOTS, 3, EVENING_GRID)  # 11:30

        assert caplog.records == []
        assert len(recwarn) == 0

        # The full resolution still reports both problems
        with pytest.warns(DataInconsistencyWarning):
            resolve_occupancy(bookings, SLOTS, EVENING_GRID)

    def test_booking_across_midnight(self):
        cells = resolve_occupancy([make_booking(1, "23:30", 90)], SLOTS, EVENING_GRID)
        by_label = states(cells)

        assert by_label["23:30"] == CellState.START
        assert by_label["00:00"] == CellState.COVERED
        assert by_label["00:30"] == CellState.COVERED
        assert by_label["01:00"] == CellState.FREE

    def test_quarter_hour_grid(self):
        slots = enumerate_slots(DAYTIME_GRID)
        cells = resolve_occupancy([make_booking(1, "09:15", 50)], slots, DAYTIME_GRID)
        by_label = states(cells)

        assert by_label["09:15"] == CellState.START
        assert [by_label[t] for t in ("09:30", "09:45", "10:00")] == [CellState.COVERED] * 3
        assert by_label["10:15"] == CellState.FREE

    def test_same_start_duplicate_shows_first_and_warns(self):
        bookings = [make_booking(1, "14:00", 30), make_booking(2, "14:00", 60)]

        with pytest.warns(DataInconsistencyWarning):
            cells = resolve_occupancy(bookings, SLOTS, EVENING_GRID)

        start = next(c for c in cells if c.slot.label == "14:00")
        assert start.state == CellState.START
        assert start.appointment_id == 1

    def test_hidden_overlapping_booking_warns_without_crashing(self):
        bookings = [make_booking(1, "10:00", 90), make_booking(2, "10:30", 30)]

        with pytest.warns(DataInconsistencyWarning):
            cells = resolve_occupancy(bookings, SLOTS, EVENING_GRID)

        assert states(cells)["10:30"] == CellState.COVERED

    def test_off_grid_booking_is_reported(self):
        with pytest.warns(DataInconsistencyWarning):
            cells = resolve_occupancy([make_booking(1, "10:10", 30)], SLOTS, EVENING_GRID)

        assert all(cell.state == CellState.FREE for cell in cells)

    def test_start_cells_never_overlap(self):
        """For any consistent set of bookings, START cells partition the column"""
        rng = random.Random(7)
        for _ in range(50):
            bookings = []
            offset = 0
            while True:
                offset += rng.choice([0, 30, 60])
                duration = rng.choice([15, 30, 45, 60, 90, 120])
                span_minutes = booking_span(duration, 30) * 30
                if offset + span_minutes > EVENING_GRID.grid_minutes:
                    break
                label = SLOTS[offset // 30].label
                bookings.append(make_booking(len(bookings) + 1, label, duration))
                offset += span_minutes

            cells = resolve_occupancy(bookings, SLOTS, EVENING_GRID)
            intervals = [
                (c.slot.minutes_from_day_start, c.slot.minutes_from_day_start + c.span * 30)
                for c in cells
                if c.state == CellState.START
            ]
            assert len(intervals) == len(bookings)
            for (a_start, a_end), (b_start, _) in zip(intervals, intervals[1:]):
                assert a_end <= b_start

    def test_resolve_board_splits_by_staff(self):
        bookings = [make_booking(1, "10:00", 60, staff_id=1), make_booking(2, "10:00", 30, staff_id=2)]
        board = resolve_board(bookings, [1, 2, 3], SLOTS, EVENING_GRID)

        assert states(board[1])["10:30"] == CellState.COVERED
        assert states(board[2])["10:30"] == CellState.FREE
        assert all(cell.state == CellState.FREE for cell in board[3])


class TestConflicts:
    def test_find_conflicts_uses_whole_slots(self):
        bookings = [make_booking(1, "10:00", 45)]  # occupies 10:00 and 10:30

        blocking = find_conflicts(bookings, EVENING_GRID, slot_offset(EVENING_GRID, "10:30"), 30)

        assert [b.id for b in blocking] == [1]
        assert find_conflicts(bookings, EVENING_GRID, slot_offset(EVENING_GRID, "11:00"), 30) == []

    def test_find_conflicts_can_exclude_a_booking(self):
        bookings = [make_booking(1, "10:00", 60)]

        assert find_conflicts(bookings, EVENING_GRID, 0, 60, exclude_id=1) == []

    def test_find_overlaps_lists_inconsistent_pairs(self):
        bookings = [
            make_booking(1, "10:00", 90),
            make_booking(2, "11:00", 30),
            make_booking(3, "12:00", 30),
            make_booking(4, "11:00", 30, staff_id=2),
        ]

        pairs = find_overlaps(bookings, EVENING_GRID)

        assert [(a.id, b.id) for a, b in pairs] == [(1, 2)]

    def test_find_overlaps_ignores_other_days(self):
        bookings = [
            make_booking(1, "10:00", 90),
            make_booking(2, "10:00", 90, day=BOARD_DAY.replace(day=2)),
        ]

        assert find_overlaps(bookings, EVENING_GRID) == []
