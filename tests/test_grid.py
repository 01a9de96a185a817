"""Tests for the board grid model"""

import pytest

from salonboard.domain.scheduling.errors import GridConfigError
from salonboard.domain.scheduling.grid import (
    DAYTIME_GRID,
    EVENING_GRID,
    FULL_DAY_GRID,
    GridConfig,
    enumerate_slots,
    is_aligned,
    offset_to_label,
    parse_clock,
    slot_index,
    slot_offset,
)
from salonboard.shared.validators import validate_clock_time


class TestEnumerateSlots:
    def test_evening_board_runs_past_midnight(self):
        slots = enumerate_slots(EVENING_GRID)

        assert len(slots) == 32
        assert slots[0].label == "10:00"
        assert slots[-1].label == "01:30"
        assert slots[-1].minutes_from_day_start == 930

    def test_labels_wrap_modulo_24(self):
        labels = [s.label for s in enumerate_slots(EVENING_GRID)]

        assert labels[27:30] == ["23:30", "00:00", "00:30"]

    def test_daytime_board_uses_quarter_hours(self):
        slots = enumerate_slots(DAYTIME_GRID)

        assert len(slots) == 56
        assert [s.label for s in slots[:3]] == ["08:00", "08:15", "08:30"]
        assert slots[-1].label == "21:45"

    def test_full_day_board(self):
        slots = enumerate_slots(FULL_DAY_GRID)

        assert len(slots) == 48
        assert slots[0].label == "00:00"
        assert slots[-1].label == "23:30"

    @pytest.mark.parametrize(
        "config",
        [
            EVENING_GRID,
            DAYTIME_GRID,
            FULL_DAY_GRID,
            GridConfig(9, 17, 20),
            GridConfig(22, 30, 45),
            GridConfig(0, 1, 7),
        ],
    )
    def test_offsets_strictly_increase_by_interval(self, config):
        slots = enumerate_slots(config)
        offsets = [s.minutes_from_day_start for s in slots]

        assert offsets[0] == 0
        assert all(b - a == config.interval_minutes for a, b in zip(offsets, offsets[1:]))
        assert len(set(offsets)) == len(offsets)
        assert [s.index for s in slots] == list(range(len(slots)))
        assert offsets[-1] + config.interval_minutes <= config.window_minutes

    def test_partial_trailing_slot_is_dropped(self):
        slots = enumerate_slots(GridConfig(10, 11, 25))

        assert [s.label for s in slots] == ["10:00", "10:25"]

    def test_is_deterministic(self):
        assert enumerate_slots(GridConfig(10, 26, 30)) == enumerate_slots(EVENING_GRID)


class TestGridConfigValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"interval_minutes": 0},
            {"interval_minutes": -15},
            {"day_start_hour": 12, "day_end_hour": 12},
            {"day_start_hour": 12, "day_end_hour": 8},
            {"day_start_hour": 10, "day_end_hour": 35},
            {"day_start_hour": 24, "day_end_hour": 30},
            {"day_start_hour": 10, "day_end_hour": 11, "interval_minutes": 90},
        ],
    )
    def test_malformed_config_is_fatal(self, kwargs):
        with pytest.raises(GridConfigError):
            GridConfig(**kwargs)


class TestSlotArithmetic:
    def test_after_midnight_times_belong_to_the_same_work_day(self):
        assert slot_offset(EVENING_GRID, "10:00") == 0
        assert slot_offset(EVENING_GRID, "23:30") == 810
        assert slot_offset(EVENING_GRID, "01:30") == 930

    def test_offset_to_label_round_trips_on_grid(self):
        for slot in enumerate_slots(EVENING_GRID):
            assert offset_to_label(EVENING_GRID, slot.minutes_from_day_start) == slot.label

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("10:00", True),
            ("00:30", True),
            ("01:30", True),
            ("10:15", False),  # not on the 30-minute grid
            ("02:00", False),  # end of the window
            ("09:30", False),  # before opening
            ("25:00", False),
            ("garbage", False),
        ],
    )
    def test_is_aligned(self, label, expected):
        assert is_aligned(EVENING_GRID, label) is expected

    def test_quarter_hour_alignment(self):
        assert is_aligned(DAYTIME_GRID, "10:15")
        assert not is_aligned(DAYTIME_GRID, "10:10")

    def test_slot_index(self):
        assert slot_index(EVENING_GRID, "11:00") == 2
        with pytest.raises(ValueError):
            slot_index(EVENING_GRID, "11:10")

    def test_parse_clock_rejects_malformed_labels(self):
        with pytest.raises(ValueError):
            parse_clock("9h30")

    @pytest.mark.parametrize("label,minutes", [("00:00", 0), ("9:30", 570), ("23:59", 1439)])
    def test_validated_labels_parse(self, label, minutes):
        assert parse_clock(validate_clock_time(label)) == minutes

    @pytest.mark.parametrize("label", ["24:00", "12:60", "ab:cd", "7:5", ""])
    def test_request_validation_and_grid_reject_the_same_labels(self, label):
        with pytest.raises(ValueError):
            validate_clock_time(label)
        with pytest.raises(ValueError):
            parse_clock(label)
