"""
Scheduling Domain

Appointment scheduling engine for the booking board:
- Grid model (grid.py)
- Occupancy resolution (occupancy.py)
- Cart composition (composer.py)
- Placement, drag-and-drop moves and edits (placement.py)
- Linked inventory (inventory.py)
- Work-day boundary (workday.py)

These modules are pure and only exchange plain data. The store side lives in
repository.py / service.py and the HTTP routes in router.py.
"""

from .composer import AddService, Cart, CartLine, RemoveService, add_service, cart_of, compose_services, remove_service
from .errors import (
    ConflictError,
    DataInconsistencyWarning,
    GridConfigError,
    InsufficientStockError,
    InvalidSlotError,
    Outcome,
    SchedulingError,
)
from .grid import DAYTIME_GRID, EVENING_GRID, FULL_DAY_GRID, GridConfig, Slot, enumerate_slots, is_aligned, slot_offset
from .inventory import (
    ProductStock,
    additional_demand,
    check_and_reserve,
    check_and_reserve_product,
    is_low_stock,
    linked_demand,
)
from .occupancy import Booking, Cell, CellState, booking_span, find_conflicts, find_overlaps, is_covered, resolve_board, resolve_occupancy
from .placement import MoveTarget, Placement, PlacementRequest, edit, move, place
from .workday import is_viewing_today, work_day_of

__all__ = [
    "AddService",
    "Booking",
    "Cart",
    "CartLine",
    "Cell",
    "CellState",
    "ConflictError",
    "DAYTIME_GRID",
    "DataInconsistencyWarning",
    "EVENING_GRID",
    "FULL_DAY_GRID",
    "GridConfig",
    "GridConfigError",
    "InsufficientStockError",
    "InvalidSlotError",
    "MoveTarget",
    "Outcome",
    "Placement",
    "PlacementRequest",
    "ProductStock",
    "RemoveService",
    "SchedulingError",
    "Slot",
    "add_service",
    "additional_demand",
    "booking_span",
    "cart_of",
    "check_and_reserve",
    "check_and_reserve_product",
    "compose_services",
    "edit",
    "enumerate_slots",
    "find_conflicts",
    "find_overlaps",
    "is_aligned",
    "is_covered",
    "is_low_stock",
    "is_viewing_today",
    "linked_demand",
    "move",
    "place",
    "remove_service",
    "resolve_board",
    "resolve_occupancy",
    "slot_offset",
    "work_day_of",
]
