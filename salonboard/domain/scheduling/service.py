"""Scheduling service - Business logic for the booking board"""

import logging
from datetime import date, datetime
from typing import Callable, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import WORKDAY_CUTOFF_HOUR, get_grid_config
from ...database import begin_write
from ...models import Appointment, Staff
from ...utils.sanitization import sanitize_name, sanitize_string
from .composer import AddService, Cart, CartLine, compose_services
from .errors import ConflictError, InsufficientStockError, InvalidSlotError, SchedulingError
from .grid import GridConfig, Slot, enumerate_slots
from .inventory import ProductStock, is_low_stock, linked_demand
from .occupancy import Booking, Cell, find_overlaps, resolve_board
from .placement import MoveTarget, PlacementRequest, edit, move, place
from .repository import SchedulingRepository
from .schemas import AppointmentCreate, AppointmentMove, AppointmentUpdate
from .workday import is_viewing_today, work_day_of

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ConflictError: 409,
    InsufficientStockError: 409,
    InvalidSlotError: 422,
}


def to_booking(appointment: Appointment) -> Booking:
    return Booking(
        id=appointment.id,
        staff_id=appointment.staff_id,
        date=appointment.date,
        start_time=appointment.start_time,
        duration_minutes=appointment.duration_minutes,
    )


def to_cart(appointment: Appointment) -> Cart:
    """The cart an appointment was booked with, rebuilt from its stored lines"""
    return Cart(
        tuple(
            CartLine(
                name=line.name,
                price=line.price,
                duration_minutes=line.duration_minutes,
                service_id=line.service_id,
                linked_product_id=line.linked_product_id,
                loyalty_points_multiplier=line.loyalty_points_multiplier or 1,
            )
            for line in appointment.lines
        )
    )


class SchedulingService:
    """
    Service layer for the booking board.

    Every write re-reads the (staff, date) snapshot and the linked product
    rows under lock, re-runs the engine on that fresh data, and commits the
    appointment together with its stock decrements. A client that validated
    against a stale board loses here with a 409.
    """

    def __init__(
        self,
        db: Session,
        config: Optional[GridConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.db = db
        self.repo = SchedulingRepository()
        self.config = config or get_grid_config()
        self.clock = clock or datetime.now

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_slots(self) -> tuple[Slot, ...]:
        return enumerate_slots(self.config)

    def current_work_day(self) -> date:
        """The one place the work-day cutoff is applied"""
        return work_day_of(self.clock(), WORKDAY_CUTOFF_HOUR)

    def is_today(self, day: date) -> bool:
        return is_viewing_today(day, self.clock(), WORKDAY_CUTOFF_HOUR)

    def list_appointments(self, day: date) -> list[Appointment]:
        return self.repo.get_appointments_for_day(self.db, day)

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            self.db.rollback()
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def build_cart(self, service_ids: list[int]) -> Cart:
        """Cart for the given service ids, in the order they were picked"""
        services = self.repo.get_services(self.db, service_ids)
        missing = [sid for sid in service_ids if sid not in services]
        if missing:
            self.db.rollback()
            raise HTTPException(status_code=404, detail=f"Service not found: {missing[0]}")

        cart = Cart()
        for service_id in service_ids:
            cart = compose_services(cart, AddService(services[service_id]))
        return cart

    def get_board(self, day: date) -> dict:
        """Cell states per staff column for one work day"""
        appointments = self.repo.get_appointments_for_day(self.db, day)
        staff = self.repo.get_board_staff(self.db)

        # Removed staff keep a column while they still hold bookings that day
        shown = {s.id for s in staff}
        for appointment in appointments:
            if appointment.staff_id not in shown and appointment.staff is not None:
                staff.append(appointment.staff)
                shown.add(appointment.staff_id)

        bookings = [to_booking(a) for a in appointments]
        columns: dict[int, list[Cell]] = resolve_board(
            bookings, [s.id for s in staff], self.get_slots(), self.config
        )

        overlaps = find_overlaps(bookings, self.config)
        if overlaps:
            logger.warning(f"⚠️ {len(overlaps)} overlapping appointment pair(s) on {day}")

        return {
            "date": day,
            "is_today": self.is_today(day),
            "staff": staff,
            "columns": columns,
            "appointments": appointments,
            "overlaps": overlaps,
        }

    # ------------------------------------------------------------------
    # Write side
    #
    # Each write opens its transaction with begin_write() before any read,
    # and leaves it committed or rolled back before returning or raising.
    # ------------------------------------------------------------------

    def place_appointment(self, data: AppointmentCreate) -> Appointment:
        """Create an appointment in a free cell and consume its linked stock"""
        logger.info(f"📥 Placing appointment for staff {data.staffId} on {data.date} at {data.startTime}")

        client_name = self._clean_name(data.client)
        begin_write(self.db)
        cart = self.build_cart(data.serviceIds)

        staff = self._lock_board_staff(data.staffId)
        if data.clientId is not None:
            self._require_client(data.clientId)

        products = self.repo.lock_products(self.db, linked_demand(cart).keys())
        snapshot = [to_booking(a) for a in self.repo.get_appointments_for_day(self.db, data.date, staff.id)]

        outcome = place(
            PlacementRequest(staff_id=staff.id, date=data.date, start_time=data.startTime, cart=cart),
            snapshot,
            self.config,
            {pid: ProductStock.from_product(p) for pid, p in products.items()},
        )
        if not outcome.ok:
            self._reject("Placement", outcome.error)

        placement = outcome.value
        appointment = self.repo.add_appointment(
            self.db,
            cart,
            staff_id=staff.id,
            day=data.date,
            start_time=data.startTime,
            client=client_name,
            client_id=data.clientId,
            paid=data.paid,
            created_by=sanitize_string(data.createdBy),
        )
        self.repo.set_quantities(products, placement.stock_after)
        if data.paid:
            self._record_visit(appointment)

        self.db.commit()
        self.db.refresh(appointment)
        logger.info(
            f"✅ Appointment #{appointment.id} placed: {staff.name} {data.date} {data.startTime} "
            f"({cart.total_duration} min, {cart.service_summary})"
        )
        self._warn_low_stock(products.values())
        return appointment

    def move_appointment(self, appointment_id: int, data: AppointmentMove) -> Appointment:
        """Drag-and-drop an appointment to another staff/time cell of the same day"""
        begin_write(self.db)
        appointment = self.get_appointment(appointment_id)
        if appointment.staff_id == data.staffId and appointment.start_time == data.startTime:
            self.db.rollback()
            return appointment

        logger.info(
            f"📥 Moving appointment #{appointment_id} to staff {data.staffId} at {data.startTime}"
        )
        staff = self._lock_board_staff(data.staffId)
        appointment = self.repo.get_appointment(self.db, appointment_id, for_update=True)
        snapshot = [
            to_booking(a) for a in self.repo.get_appointments_for_day(self.db, appointment.date, staff.id)
        ]

        outcome = move(
            to_booking(appointment),
            MoveTarget(staff_id=staff.id, start_time=data.startTime),
            snapshot,
            self.config,
        )
        if not outcome.ok:
            self._reject("Move", outcome.error)

        appointment.staff_id = outcome.value.staff_id
        appointment.start_time = outcome.value.start_time
        self.db.commit()
        self.db.refresh(appointment)
        logger.info(f"✅ Appointment #{appointment.id} moved to {staff.name} @ {appointment.start_time}")
        return appointment

    def edit_appointment(self, appointment_id: int, data: AppointmentUpdate) -> Appointment:
        """
        Change the services or client of an appointment. It keeps its cell.

        A new service list is re-checked against the column (the booking may
        now be longer) and takes only the linked units it did not already
        consume. Loyalty already credited for a paid appointment is not
        recomputed.
        """
        logger.info(f"📥 Editing appointment #{appointment_id}")

        client_name = self._clean_name(data.client) if data.client is not None else None
        begin_write(self.db)
        appointment = self.get_appointment(appointment_id)
        self.repo.lock_staff(self.db, appointment.staff_id)
        appointment = self.repo.get_appointment(self.db, appointment_id, for_update=True)
        if data.clientId is not None:
            self._require_client(data.clientId)

        products = {}
        if data.serviceIds is not None:
            cart = self.build_cart(data.serviceIds)
            products = self.repo.lock_products(self.db, linked_demand(cart).keys())
            snapshot = [
                to_booking(a)
                for a in self.repo.get_appointments_for_day(self.db, appointment.date, appointment.staff_id)
            ]

            outcome = edit(
                to_booking(appointment),
                to_cart(appointment),
                cart,
                snapshot,
                self.config,
                {pid: ProductStock.from_product(p) for pid, p in products.items()},
            )
            if not outcome.ok:
                self._reject("Edit", outcome.error)

            self.repo.replace_lines(appointment, cart)
            self.repo.set_quantities(products, outcome.value.stock_after)

        if client_name is not None:
            appointment.client = client_name
        if data.clientId is not None:
            appointment.client_id = data.clientId

        self.db.commit()
        self.db.refresh(appointment)
        logger.info(f"✅ Appointment #{appointment.id} updated ({appointment.service_summary})")
        self._warn_low_stock(products.values())
        return appointment

    def set_paid(self, appointment_id: int, paid: bool) -> Appointment:
        begin_write(self.db)
        appointment = self.repo.get_appointment(self.db, appointment_id, for_update=True)
        if not appointment:
            self.db.rollback()
            raise HTTPException(status_code=404, detail="Appointment not found")

        if paid and not appointment.paid:
            self._record_visit(appointment)
        appointment.paid = paid
        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def delete_appointment(self, appointment_id: int) -> dict:
        """Delete an appointment. Consumed stock is not returned."""
        begin_write(self.db)
        appointment = self.get_appointment(appointment_id)
        self.repo.delete_appointment(self.db, appointment)
        self.db.commit()
        logger.info(f"🗑️ Appointment #{appointment_id} deleted")
        return {"message": "Appointment deleted"}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_board_staff(self, staff_id: int) -> Staff:
        staff = self.repo.lock_staff(self.db, staff_id)
        if not staff:
            self.db.rollback()
            raise HTTPException(status_code=404, detail="Staff member not found")
        if not staff.active:
            self.db.rollback()
            raise HTTPException(status_code=422, detail="Staff member is no longer on the board")
        return staff

    def _require_client(self, client_id: int) -> None:
        if not self.repo.get_client(self.db, client_id):
            self.db.rollback()
            raise HTTPException(status_code=404, detail="Client not found")

    def _record_visit(self, appointment: Appointment) -> None:
        """Credit the linked client when an appointment becomes paid"""
        if appointment.client_id is None:
            return
        client = self.repo.get_client(self.db, appointment.client_id)
        if not client:
            logger.warning(f"⚠️ Appointment #{appointment.id} references missing client {appointment.client_id}")
            return

        points = sum(int(line.price) * (line.loyalty_points_multiplier or 1) for line in appointment.lines)
        client.loyalty_points = (client.loyalty_points or 0) + points
        client.total_visits = (client.total_visits or 0) + 1
        client.total_spent = (client.total_spent or 0) + appointment.price_total
        appointment.loyalty_points_earned = points

    def _reject(self, action: str, error: SchedulingError) -> None:
        self.db.rollback()
        logger.warning(f"⚠️ {action} rejected: {error.message}")
        raise HTTPException(status_code=ERROR_STATUS.get(type(error), 400), detail=error.to_dict())

    @staticmethod
    def _warn_low_stock(products) -> None:
        for product in products:
            if is_low_stock(ProductStock.from_product(product)):
                logger.warning(f"⚠️ Low stock: {product.name} ({product.quantity} left)")

    @staticmethod
    def _clean_name(value: str) -> str:
        try:
            return sanitize_name(value)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from None
