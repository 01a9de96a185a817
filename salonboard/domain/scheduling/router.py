"""Scheduling router - FastAPI endpoints for the booking board"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...models import Appointment
from .composer import Cart
from .schemas import (
    AppointmentCreate,
    AppointmentMove,
    AppointmentResponse,
    AppointmentUpdate,
    BoardResponse,
    CartLineResponse,
    CartPreviewRequest,
    CartResponse,
    CellResponse,
    GridResponse,
    InconsistencyResponse,
    PaidUpdate,
    SlotResponse,
    StaffColumnResponse,
    WorkDayResponse,
)
from .service import SchedulingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduling", tags=["Scheduling"])


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


def to_appointment_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        date=appointment.date,
        startTime=appointment.start_time,
        durationMinutes=appointment.duration_minutes,
        client=appointment.client,
        clientId=appointment.client_id,
        staffId=appointment.staff_id,
        staff=appointment.staff_name,
        serviceSummary=appointment.service_summary,
        lines=[
            CartLineResponse(
                serviceId=line.service_id,
                name=line.name,
                price=line.price,
                durationMinutes=line.duration_minutes,
            )
            for line in appointment.lines
        ],
        priceTotal=appointment.price_total,
        paid=appointment.paid,
        loyaltyPointsEarned=appointment.loyalty_points_earned or 0,
        createdBy=appointment.created_by,
    )


def to_cart_response(cart: Cart) -> CartResponse:
    return CartResponse(
        lines=[
            CartLineResponse(
                serviceId=line.service_id,
                name=line.name,
                price=line.price,
                durationMinutes=line.duration_minutes,
            )
            for line in cart.lines
        ],
        totalDuration=cart.total_duration,
        totalPrice=cart.total_price,
        serviceSummary=cart.service_summary,
    )


# ============================================================================
# BOARD
# ============================================================================


@router.get("/grid", response_model=GridResponse)
async def get_grid(service: SchedulingService = Depends(get_scheduling_service)):
    """Slot layout of the board"""
    config = service.config
    return GridResponse(
        dayStartHour=config.day_start_hour,
        dayEndHour=config.day_end_hour,
        intervalMinutes=config.interval_minutes,
        slots=[
            SlotResponse(index=s.index, minutesFromDayStart=s.minutes_from_day_start, label=s.label)
            for s in service.get_slots()
        ],
    )


@router.get("/workday", response_model=WorkDayResponse)
async def get_work_day(
    date: Optional[date] = Query(None),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Current work day, and whether `date` is it"""
    return WorkDayResponse(
        now=service.clock(),
        workDay=service.current_work_day(),
        isToday=service.is_today(date) if date is not None else None,
    )


@router.get("/board", response_model=BoardResponse)
async def get_board(
    date: Optional[date] = Query(None),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Per-staff cell states for a work day (defaults to the current one)"""
    board = service.get_board(date or service.current_work_day())
    return BoardResponse(
        date=board["date"],
        isToday=board["is_today"],
        columns=[
            StaffColumnResponse(
                staffId=s.id,
                name=s.name,
                color=s.color,
                cells=[
                    CellResponse(
                        label=cell.slot.label,
                        state=cell.state.value,
                        appointmentId=cell.appointment_id,
                        span=cell.span,
                    )
                    for cell in board["columns"][s.id]
                ],
            )
            for s in board["staff"]
        ],
        appointments=[to_appointment_response(a) for a in board["appointments"]],
        inconsistencies=[
            InconsistencyResponse(
                staffId=first.staff_id,
                firstAppointmentId=first.id,
                secondAppointmentId=second.id,
            )
            for first, second in board["overlaps"]
        ],
    )


# ============================================================================
# APPOINTMENTS
# ============================================================================


@router.get("/appointments", response_model=list[AppointmentResponse])
async def list_appointments(
    date: Optional[date] = Query(None),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Appointments for a work day (defaults to the current one)"""
    appointments = service.list_appointments(date or service.current_work_day())
    return [to_appointment_response(a) for a in appointments]


@router.post("/cart", response_model=CartResponse)
async def preview_cart(
    data: CartPreviewRequest,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Totals and summary for a cart of services, without booking anything"""
    return to_cart_response(service.build_cart(data.serviceIds))


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return to_appointment_response(service.get_appointment(appointment_id))


@router.post("/appointments", response_model=AppointmentResponse, status_code=201)
async def place_appointment(
    data: AppointmentCreate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Place a new appointment (click-to-create or quick-book)"""
    return to_appointment_response(service.place_appointment(data))


@router.post("/appointments/{appointment_id}/move", response_model=AppointmentResponse)
async def move_appointment(
    appointment_id: int,
    data: AppointmentMove,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Drag-and-drop an appointment to another cell"""
    return to_appointment_response(service.move_appointment(appointment_id, data))


@router.put("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def edit_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Change the services or client of an appointment"""
    return to_appointment_response(service.edit_appointment(appointment_id, data))


@router.patch("/appointments/{appointment_id}/paid", response_model=AppointmentResponse)
async def set_paid(
    appointment_id: int,
    data: PaidUpdate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    return to_appointment_response(service.set_paid(appointment_id, data.paid))


@router.delete("/appointments/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Delete an appointment"""
    return service.delete_appointment(appointment_id)
