from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    color = Column(String(7), nullable=False)  # #RRGGBB
    active = Column(Boolean, default=True, nullable=False)  # False once removed from the board
    created_at = Column(DateTime, server_default=func.now())

    appointments = relationship("Appointment", back_populates="staff")


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    quantity = Column(Integer, default=0, nullable=False)
    low_stock_threshold = Column(Integer, default=5, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    category = Column(String(100), nullable=True)
    linked_product_id = Column(Integer, ForeignKey("products.id"), nullable=True)  # one unit per booking
    loyalty_points_multiplier = Column(Integer, default=1, nullable=False)

    linked_product = relationship("Product")


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    loyalty_points = Column(Integer, default=0, nullable=False)
    total_visits = Column(Integer, default=0, nullable=False)
    total_spent = Column(Float, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    appointments = relationship("Appointment", back_populates="client_record")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (Index("ix_appointments_staff_date", "staff_id", "date"),)

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True)  # work day the booking is on
    start_time = Column(String(5), nullable=False)  # HH:MM, slot-aligned
    duration_minutes = Column(Integer, nullable=False)
    client = Column(String(255), nullable=False)  # display name as typed on the board
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    price_total = Column(Float, nullable=False)
    paid = Column(Boolean, default=False, nullable=False)
    loyalty_points_earned = Column(Integer, default=0, nullable=False)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    staff = relationship("Staff", back_populates="appointments")
    client_record = relationship("Client", back_populates="appointments")
    lines = relationship(
        "AppointmentLine",
        back_populates="appointment",
        order_by="AppointmentLine.position",
        cascade="all, delete-orphan",
    )

    @property
    def staff_name(self) -> str:
        return self.staff.name if self.staff else ""

    @property
    def service_summary(self) -> str:
        return ", ".join(line.name for line in self.lines)


class AppointmentLine(Base):
    __tablename__ = "appointment_lines"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False)  # order the service was added to the cart
    service_id = Column(Integer, ForeignKey("services.id"), nullable=True)
    linked_product_id = Column(Integer, ForeignKey("products.id"), nullable=True)  # unit consumed by this line
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    loyalty_points_multiplier = Column(Integer, default=1, nullable=False)

    appointment = relationship("Appointment", back_populates="lines")
