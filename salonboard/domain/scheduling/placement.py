"""
Placement & move validator

Decides whether a booking may be created in a cell of the board, dragged
to another one, or given a different set of services in place. Decisions
are made against the snapshot passed in; the store re-runs them inside its
write transaction before committing anything.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Mapping, Optional, Sequence

from .composer import Cart
from .errors import ConflictError, InvalidSlotError, Outcome
from .grid import GridConfig, is_aligned, slot_offset
from .inventory import ProductStock, additional_demand, check_and_reserve, linked_demand
from .occupancy import Booking, booking_span, find_conflicts


@dataclass(frozen=True)
class PlacementRequest:
    staff_id: int
    date: date
    start_time: str
    cart: Cart


@dataclass(frozen=True)
class Placement:
    """An accepted booking that has not been written yet"""

    booking: Booking
    cart: Cart
    stock_after: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class MoveTarget:
    staff_id: int
    start_time: str


def validate_slot(config: GridConfig, start_time: str, duration_minutes: int) -> Optional[InvalidSlotError]:
    """None if a booking of this length may start at start_time"""
    if duration_minutes <= 0:
        return InvalidSlotError(start_time, "booking has no duration")
    if not is_aligned(config, start_time):
        return InvalidSlotError(
            start_time, f"not a {config.interval_minutes}-minute slot inside the day window"
        )
    span = booking_span(duration_minutes, config.interval_minutes)
    if slot_offset(config, start_time) + span * config.interval_minutes > config.grid_minutes:
        return InvalidSlotError(start_time, f"a {duration_minutes}-minute booking runs past the end of the day")
    return None


def _conflict(
    config: GridConfig, staff_id: int, day: date, start_time: str, duration: int,
    bookings: Sequence[Booking], exclude_id: Optional[int] = None,
) -> Optional[ConflictError]:
    same_column = [b for b in bookings if b.staff_id == staff_id and b.date == day]
    blocking = find_conflicts(same_column, config, slot_offset(config, start_time), duration, exclude_id)
    if not blocking:
        return None
    first = blocking[0]
    return ConflictError(staff_id, start_time, first.id, first.start_time)


def place(
    request: PlacementRequest,
    bookings: Sequence[Booking],
    config: GridConfig,
    products: Optional[Mapping[int, ProductStock]] = None,
) -> Outcome[Placement]:
    """
    Validate a new booking.

    Checks, in order: the cart is not empty, the start is a slot on the grid
    and the booking fits before the end of the day, no existing booking of
    the same staff member and day intersects it, and every linked product
    can cover the whole cart.
    """
    cart = request.cart
    if cart.is_empty:
        return Outcome.failure(InvalidSlotError(request.start_time, "no services selected"))

    error = validate_slot(config, request.start_time, cart.total_duration)
    if error is not None:
        return Outcome.failure(error)

    conflict = _conflict(
        config, request.staff_id, request.date, request.start_time, cart.total_duration, bookings
    )
    if conflict is not None:
        return Outcome.failure(conflict)

    stock_after: dict[int, int] = {}
    demand = linked_demand(cart)
    if demand:
        reserved = check_and_reserve(demand, products or {})
        if not reserved.ok:
            return Outcome.failure(reserved.error)
        stock_after = reserved.value

    booking = Booking(
        id=None,
        staff_id=request.staff_id,
        date=request.date,
        start_time=request.start_time,
        duration_minutes=cart.total_duration,
    )
    return Outcome.success(Placement(booking=booking, cart=cart, stock_after=stock_after))


def move(
    booking: Booking, target: MoveTarget, bookings: Sequence[Booking], config: GridConfig
) -> Outcome[Booking]:
    """
    Validate dragging a booking to another cell of the same day.

    The moved booking is left out of the occupancy check so it never collides
    with itself. Inventory is not touched.
    """
    if target.staff_id == booking.staff_id and target.start_time == booking.start_time:
        return Outcome.success(booking)

    error = validate_slot(config, target.start_time, booking.duration_minutes)
    if error is not None:
        return Outcome.failure(error)

    conflict = _conflict(
        config, target.staff_id, booking.date, target.start_time, booking.duration_minutes,
        bookings, exclude_id=booking.id,
    )
    if conflict is not None:
        return Outcome.failure(conflict)

    return Outcome.success(replace(booking, staff_id=target.staff_id, start_time=target.start_time))


def edit(
    booking: Booking,
    previous: Cart,
    cart: Cart,
    bookings: Sequence[Booking],
    config: GridConfig,
    products: Optional[Mapping[int, ProductStock]] = None,
) -> Outcome[Placement]:
    """
    Validate replacing the services of a stored booking.

    The booking keeps its cell. Its new length must still fit the day and
    must not reach into another booking of the same column. Only linked
    units beyond what `previous` already consumed are checked; units of
    removed lines are not given back.
    """
    if cart.is_empty:
        return Outcome.failure(InvalidSlotError(booking.start_time, "no services selected"))

    error = validate_slot(config, booking.start_time, cart.total_duration)
    if error is not None:
        return Outcome.failure(error)

    conflict = _conflict(
        config, booking.staff_id, booking.date, booking.start_time, cart.total_duration,
        bookings, exclude_id=booking.id,
    )
    if conflict is not None:
        return Outcome.failure(conflict)

    stock_after: dict[int, int] = {}
    extra = additional_demand(linked_demand(previous), linked_demand(cart))
    if extra:
        reserved = check_and_reserve(extra, products or {})
        if not reserved.ok:
            return Outcome.failure(reserved.error)
        stock_after = reserved.value

    edited = replace(booking, duration_minutes=cart.total_duration)
    return Outcome.success(Placement(booking=edited, cart=cart, stock_after=stock_after))
