"""Scheduling errors and the Outcome result type returned by the validators"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class SchedulingError(Exception):
    """Base class for booking failures that block an action"""

    code = "scheduling_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ConflictError(SchedulingError):
    """The target cell (or a cell the booking would span) is already occupied"""

    code = "slot_conflict"

    def __init__(
        self,
        staff_id: int,
        start_time: str,
        blocking_appointment_id: Optional[int] = None,
        blocking_start_time: Optional[str] = None,
    ):
        if blocking_appointment_id is not None:
            message = (
                f"Slot {start_time} for staff {staff_id} overlaps appointment "
                f"#{blocking_appointment_id} starting at {blocking_start_time}"
            )
        else:
            message = f"Slot {start_time} for staff {staff_id} is already occupied"
        super().__init__(message)
        self.staff_id = staff_id
        self.start_time = start_time
        self.blocking_appointment_id = blocking_appointment_id
        self.blocking_start_time = blocking_start_time

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update(
            {
                "staffId": self.staff_id,
                "startTime": self.start_time,
                "blockingAppointmentId": self.blocking_appointment_id,
                "blockingStartTime": self.blocking_start_time,
            }
        )
        return payload


class InsufficientStockError(SchedulingError):
    """A linked product cannot cover the demand of a booking"""

    code = "insufficient_stock"

    def __init__(self, product_id: int, product_name: Optional[str], requested: int, available: int):
        label = product_name or f"product #{product_id}"
        super().__init__(f"Not enough stock for {label}: need {requested}, have {available}")
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update(
            {
                "productId": self.product_id,
                "productName": self.product_name,
                "requested": self.requested,
                "available": self.available,
            }
        )
        return payload


class InvalidSlotError(SchedulingError):
    """Start time is not grid-aligned, or the booking does not fit the day window"""

    code = "invalid_slot"

    def __init__(self, start_time: str, reason: str):
        super().__init__(f"Invalid slot {start_time!r}: {reason}")
        self.start_time = start_time
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update({"startTime": self.start_time, "reason": self.reason})
        return payload


class GridConfigError(ValueError):
    """Malformed grid configuration. Fatal, never returned inside an Outcome."""


class DataInconsistencyWarning(UserWarning):
    """Stored appointments overlap each other or sit off the grid"""


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the error that blocked the action"""

    value: Optional[T] = None
    error: Optional[SchedulingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: SchedulingError) -> "Outcome[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value or raise the carried error"""
        if self.error is not None:
            raise self.error
        return self.value
