"""Scheduling domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_clock_time


class AppointmentCreate(BaseModel):
    """Schema for placing a new appointment on the board"""

    staffId: int
    date: dt.date
    startTime: str
    serviceIds: list[int] = Field(min_length=1)
    client: str
    clientId: Optional[int] = None
    paid: bool = False
    createdBy: Optional[str] = None

    @field_validator("startTime")
    @classmethod
    def validate_start_time(cls, v):
        return validate_clock_time(v)

    @field_validator("client")
    @classmethod
    def validate_client(cls, v):
        if not v or not v.strip():
            raise ValueError("Client name is required")
        return v


class AppointmentMove(BaseModel):
    """Schema for a drag-and-drop move to another staff/time cell"""

    staffId: int
    startTime: str

    @field_validator("startTime")
    @classmethod
    def validate_start_time(cls, v):
        return validate_clock_time(v)


class AppointmentUpdate(BaseModel):
    """Schema for editing an appointment in place (omitted fields are unchanged)"""

    serviceIds: Optional[list[int]] = Field(default=None, min_length=1)
    client: Optional[str] = None
    clientId: Optional[int] = None

    @field_validator("client")
    @classmethod
    def validate_client(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Client name cannot be blank")
        return v


class PaidUpdate(BaseModel):
    paid: bool


class CartPreviewRequest(BaseModel):
    serviceIds: list[int] = Field(min_length=1)


class CartLineResponse(BaseModel):
    serviceId: Optional[int]
    name: str
    price: float
    durationMinutes: int


class CartResponse(BaseModel):
    lines: list[CartLineResponse]
    totalDuration: int
    totalPrice: float
    serviceSummary: str


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""

    id: int
    date: dt.date
    startTime: str
    durationMinutes: int
    client: str
    clientId: Optional[int] = None
    staffId: int
    staff: str
    serviceSummary: str
    lines: list[CartLineResponse]
    priceTotal: float
    paid: bool
    loyaltyPointsEarned: int = 0
    createdBy: Optional[str] = None


class SlotResponse(BaseModel):
    index: int
    minutesFromDayStart: int
    label: str


class GridResponse(BaseModel):
    dayStartHour: int
    dayEndHour: int
    intervalMinutes: int
    slots: list[SlotResponse]


class CellResponse(BaseModel):
    label: str
    state: str  # start, covered, free
    appointmentId: Optional[int] = None
    span: int = 1


class StaffColumnResponse(BaseModel):
    staffId: int
    name: str
    color: str
    cells: list[CellResponse]


class InconsistencyResponse(BaseModel):
    """Two stored appointments that overlap each other"""

    staffId: int
    firstAppointmentId: int
    secondAppointmentId: int


class BoardResponse(BaseModel):
    date: dt.date
    isToday: bool
    columns: list[StaffColumnResponse]
    appointments: list[AppointmentResponse]
    inconsistencies: list[InconsistencyResponse]


class WorkDayResponse(BaseModel):
    now: dt.datetime
    workDay: dt.date
    isToday: Optional[bool] = None
