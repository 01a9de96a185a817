"""Scheduling repository - Database operations for the booking board"""

from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session, selectinload

from ...models import Appointment, AppointmentLine, Client, Product, Service, Staff
from .composer import Cart


class SchedulingRepository:
    """
    Repository for appointment database operations.

    Write methods only add/flush; the service decides when to commit so that
    an appointment and its stock decrements land in one transaction.
    """

    @staticmethod
    def get_appointments_for_day(db: Session, day: date, staff_id: Optional[int] = None) -> list[Appointment]:
        """Appointments on a work day, optionally for one staff column"""
        query = (
            db.query(Appointment)
            .options(selectinload(Appointment.lines), selectinload(Appointment.staff))
            .filter(Appointment.date == day)
        )
        if staff_id is not None:
            query = query.filter(Appointment.staff_id == staff_id)
        return query.order_by(Appointment.staff_id, Appointment.id).all()

    @staticmethod
    def get_appointment(db: Session, appointment_id: int, for_update: bool = False) -> Optional[Appointment]:
        query = db.query(Appointment).filter(Appointment.id == appointment_id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.first()

    @staticmethod
    def get_board_staff(db: Session) -> list[Staff]:
        """Active staff, in board column order"""
        return db.query(Staff).filter(Staff.active.is_(True)).order_by(Staff.id).all()

    @staticmethod
    def lock_staff(db: Session, staff_id: int) -> Optional[Staff]:
        """
        Fetch a staff row with a row lock.

        Every place/move/edit in a column takes this lock first, which
        serializes writers of the same (staff, date) region on databases with
        row locks. SQLite ignores it; there the transaction already holds the
        database write lock (see database.begin_write).
        """
        return db.query(Staff).filter(Staff.id == staff_id).with_for_update().first()

    @staticmethod
    def get_services(db: Session, service_ids: Iterable[int]) -> dict[int, Service]:
        ids = set(service_ids)
        if not ids:
            return {}
        return {s.id: s for s in db.query(Service).filter(Service.id.in_(ids)).all()}

    @staticmethod
    def lock_products(db: Session, product_ids: Iterable[int]) -> dict[int, Product]:
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        products = (
            db.query(Product).filter(Product.id.in_(ids)).order_by(Product.id).with_for_update().all()
        )
        return {p.id: p for p in products}

    @staticmethod
    def get_client(db: Session, client_id: int) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def add_appointment(
        db: Session,
        cart: Cart,
        staff_id: int,
        day: date,
        start_time: str,
        client: str,
        client_id: Optional[int] = None,
        paid: bool = False,
        created_by: Optional[str] = None,
    ) -> Appointment:
        """Stage an appointment and its lines (no commit)"""
        appointment = Appointment(
            date=day,
            start_time=start_time,
            duration_minutes=cart.total_duration,
            client=client,
            client_id=client_id,
            staff_id=staff_id,
            price_total=cart.total_price,
            paid=paid,
            created_by=created_by,
        )
        appointment.lines.extend(_lines_for(cart))
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def replace_lines(appointment: Appointment, cart: Cart) -> None:
        """Swap the appointment's lines for the cart's (no commit)"""
        appointment.lines.clear()
        appointment.lines.extend(_lines_for(cart))
        appointment.duration_minutes = cart.total_duration
        appointment.price_total = cart.total_price

    @staticmethod
    def set_quantities(products: dict[int, Product], quantities: dict[int, int]) -> None:
        for product_id, quantity in quantities.items():
            products[product_id].quantity = quantity

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)


def _lines_for(cart: Cart) -> list[AppointmentLine]:
    return [
        AppointmentLine(
            position=position,
            service_id=line.service_id,
            linked_product_id=line.linked_product_id,
            name=line.name,
            price=line.price,
            duration_minutes=line.duration_minutes,
            loyalty_points_multiplier=line.loyalty_points_multiplier,
        )
        for position, line in enumerate(cart.lines)
    ]
