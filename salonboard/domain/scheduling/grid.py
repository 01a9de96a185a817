"""
Grid model

Discrete slots for one business day. The window is given in hours from
midnight of the work day and may run past 24 (10 -> 26 is 10:00 to 02:00),
so every slot is addressed by its offset in minutes from the start of the
window. Labels are wall-clock HH:MM.
"""

from dataclasses import dataclass
from functools import lru_cache

from ...shared.validators import CLOCK_PATTERN
from .errors import GridConfigError

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class GridConfig:
    day_start_hour: int = 10
    day_end_hour: int = 26
    interval_minutes: int = 30

    def __post_init__(self):
        if not isinstance(self.interval_minutes, int) or self.interval_minutes <= 0:
            raise GridConfigError(f"interval_minutes must be a positive integer, got {self.interval_minutes!r}")
        if not 0 <= self.day_start_hour <= 23:
            raise GridConfigError(f"day_start_hour must be within 0-23, got {self.day_start_hour}")
        if self.day_end_hour <= self.day_start_hour:
            raise GridConfigError(
                f"day_end_hour ({self.day_end_hour}) must be after day_start_hour ({self.day_start_hour})"
            )
        if self.day_end_hour - self.day_start_hour > 24:
            raise GridConfigError("a work day window cannot be longer than 24 hours")
        if self.interval_minutes > self.window_minutes:
            raise GridConfigError(
                f"interval_minutes ({self.interval_minutes}) is longer than the day window"
            )

    @property
    def window_minutes(self) -> int:
        return (self.day_end_hour - self.day_start_hour) * 60

    @property
    def slot_count(self) -> int:
        # A trailing partial slot is dropped
        return self.window_minutes // self.interval_minutes

    @property
    def grid_minutes(self) -> int:
        return self.slot_count * self.interval_minutes


# Layouts used by the different boards of the salon
EVENING_GRID = GridConfig(day_start_hour=10, day_end_hour=26, interval_minutes=30)
DAYTIME_GRID = GridConfig(day_start_hour=8, day_end_hour=22, interval_minutes=15)
FULL_DAY_GRID = GridConfig(day_start_hour=0, day_end_hour=24, interval_minutes=30)


@dataclass(frozen=True)
class Slot:
    index: int
    minutes_from_day_start: int
    label: str


def parse_clock(label: str) -> int:
    """Minutes since midnight for an HH:MM label. Raises ValueError if malformed."""
    match = CLOCK_PATTERN.match(label or "")
    if not match:
        raise ValueError(f"Time must be in HH:MM format, got {label!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def offset_to_label(config: GridConfig, offset: int) -> str:
    total = config.day_start_hour * 60 + offset
    return f"{(total // 60) % 24:02d}:{total % 60:02d}"


def slot_offset(config: GridConfig, label: str) -> int:
    """
    Minutes from the start of the work day for a wall-clock label.

    Clock times earlier than the window start belong to the next clock-day
    of the window, so 01:30 on a 10:00-02:00 board is offset 930.
    """
    offset = parse_clock(label) - config.day_start_hour * 60
    if offset < 0:
        offset += MINUTES_PER_DAY
    return offset


def is_aligned(config: GridConfig, label: str) -> bool:
    """True if the label is a valid slot start on this grid"""
    try:
        offset = slot_offset(config, label)
    except ValueError:
        return False
    return offset < config.grid_minutes and offset % config.interval_minutes == 0


@lru_cache(maxsize=32)
def enumerate_slots(config: GridConfig) -> tuple[Slot, ...]:
    """Ordered slot starts for the configured window"""
    step = config.interval_minutes
    return tuple(
        Slot(index=i, minutes_from_day_start=i * step, label=offset_to_label(config, i * step))
        for i in range(config.slot_count)
    )


def slot_index(config: GridConfig, label: str) -> int:
    """Index of the slot starting at label. Raises ValueError if off-grid."""
    if not is_aligned(config, label):
        raise ValueError(f"{label!r} is not a slot start on this grid")
    return slot_offset(config, label) // config.interval_minutes
