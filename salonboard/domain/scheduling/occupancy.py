"""
Occupancy resolver

Classifies every (staff, slot) cell of the board as the start of a booking,
covered by a booking that started in an earlier slot, or free. All functions
are pure: they only read the snapshot they are given.
"""

import logging
import warnings
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Sequence

from .errors import DataInconsistencyWarning
from .grid import GridConfig, Slot, slot_offset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Booking:
    """What the engine needs to know about a stored appointment"""

    id: Optional[int]
    staff_id: int
    date: date
    start_time: str
    duration_minutes: int


class CellState(str, Enum):
    START = "start"
    COVERED = "covered"
    FREE = "free"


@dataclass(frozen=True)
class Cell:
    slot: Slot
    state: CellState
    appointment_id: Optional[int] = None
    span: int = 1


def booking_span(duration_minutes: int, interval_minutes: int) -> int:
    """Number of consecutive slots a duration occupies (ceil division)"""
    return max(1, -(-duration_minutes // interval_minutes))


def occupied_range(booking: Booking, config: GridConfig) -> tuple[int, int]:
    """[start, end) in minutes from day start, rounded up to whole slots"""
    start = slot_offset(config, booking.start_time)
    return start, start + booking_span(booking.duration_minutes, config.interval_minutes) * config.interval_minutes


def _starts_by_index(
    bookings: Iterable[Booking], slots: Sequence[Slot], config: GridConfig, report: bool = True
) -> dict[int, Booking]:
    """First booking found at each slot. Later duplicates are skipped, and reported if `report`."""
    index_by_offset = {slot.minutes_from_day_start: slot.index for slot in slots}
    starts: dict[int, Booking] = {}
    for booking in bookings:
        index = index_by_offset.get(slot_offset(config, booking.start_time))
        if index is None:
            if report:
                _report(f"appointment #{booking.id} starts off the grid at {booking.start_time}")
            continue
        if index in starts:
            if report:
                _report(
                    f"appointments #{starts[index].id} and #{booking.id} both start at "
                    f"{booking.start_time} for staff {booking.staff_id}"
                )
            continue
        starts[index] = booking
    return starts


def _covering_booking(
    starts: dict[int, Booking], index: int, config: GridConfig
) -> Optional[Booking]:
    # A long booking can span many slots, so every earlier slot is checked
    for earlier in range(index):
        booking = starts.get(earlier)
        if booking is None:
            continue
        if earlier + booking_span(booking.duration_minutes, config.interval_minutes) > index:
            return booking
    return None


def is_covered(bookings: Sequence[Booking], slots: Sequence[Slot], index: int, config: GridConfig) -> bool:
    """
    True if a booking starting in an earlier slot still spans slot `index`.

    Read-only: inconsistencies are left to resolve_occupancy to report.
    """
    starts = _starts_by_index(bookings, slots, config, report=False)
    return _covering_booking(starts, index, config) is not None


def resolve_occupancy(bookings: Sequence[Booking], slots: Sequence[Slot], config: GridConfig) -> list[Cell]:
    """
    Cell states for one staff member on one work day.

    A cell covered by an earlier booking is reported as covered even if a
    second (overlapping) booking claims to start there; that booking stays
    hidden and a DataInconsistencyWarning is issued.
    """
    starts = _starts_by_index(bookings, slots, config)
    cells = []
    for slot in slots:
        covering = _covering_booking(starts, slot.index, config)
        if covering is not None:
            hidden = starts.get(slot.index)
            if hidden is not None:
                _report(
                    f"appointment #{hidden.id} at {hidden.start_time} is hidden under "
                    f"appointment #{covering.id} at {covering.start_time}"
                )
            cells.append(Cell(slot=slot, state=CellState.COVERED, appointment_id=covering.id))
            continue

        booking = starts.get(slot.index)
        if booking is not None:
            span = booking_span(booking.duration_minutes, config.interval_minutes)
            cells.append(Cell(slot=slot, state=CellState.START, appointment_id=booking.id, span=span))
        else:
            cells.append(Cell(slot=slot, state=CellState.FREE))
    return cells


def resolve_board(
    bookings: Sequence[Booking], staff_ids: Sequence[int], slots: Sequence[Slot], config: GridConfig
) -> dict[int, list[Cell]]:
    """resolve_occupancy for every staff column of a day"""
    return {
        staff_id: resolve_occupancy([b for b in bookings if b.staff_id == staff_id], slots, config)
        for staff_id in staff_ids
    }


def find_conflicts(
    bookings: Iterable[Booking],
    config: GridConfig,
    start_offset: int,
    duration_minutes: int,
    exclude_id: Optional[int] = None,
) -> list[Booking]:
    """Bookings whose occupied range intersects the candidate range, earliest first"""
    end_offset = start_offset + booking_span(duration_minutes, config.interval_minutes) * config.interval_minutes
    blocking = []
    for booking in bookings:
        if exclude_id is not None and booking.id == exclude_id:
            continue
        other_start, other_end = occupied_range(booking, config)
        if other_start < end_offset and start_offset < other_end:
            blocking.append(booking)
    return sorted(blocking, key=lambda b: slot_offset(config, b.start_time))


def find_overlaps(bookings: Sequence[Booking], config: GridConfig) -> list[tuple[Booking, Booking]]:
    """Pairs of stored bookings that share a staff member, a day and some minutes"""
    ordered = sorted(bookings, key=lambda b: (b.staff_id, b.date, slot_offset(config, b.start_time)))
    pairs = []
    for i, first in enumerate(ordered):
        _, first_end = occupied_range(first, config)
        for second in ordered[i + 1:]:
            if (second.staff_id, second.date) != (first.staff_id, first.date):
                break
            second_start, _ = occupied_range(second, config)
            if second_start >= first_end:
                break
            pairs.append((first, second))
    return pairs


def _report(message: str) -> None:
    logger.warning(f"⚠️ Data inconsistency: {message}")
    warnings.warn(message, DataInconsistencyWarning, stacklevel=3)
