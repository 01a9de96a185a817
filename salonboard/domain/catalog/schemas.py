"""Catalog domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_hex_color, validate_phone


class StaffCreate(BaseModel):
    """Schema for adding a staff column to the board"""

    name: str = Field(min_length=1)
    color: str

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        return validate_hex_color(v)


class StaffUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        if v is not None:
            return validate_hex_color(v)
        return v


class StaffResponse(BaseModel):
    id: int
    name: str
    color: str
    active: bool

    class Config:
        from_attributes = True


class ServiceCreate(BaseModel):
    """Schema for creating a bookable service"""

    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    durationMinutes: int = Field(gt=0)
    category: Optional[str] = None
    linkedProductId: Optional[int] = None
    loyaltyPointsMultiplier: int = Field(default=1, ge=0)


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    durationMinutes: Optional[int] = Field(default=None, gt=0)
    category: Optional[str] = None
    linkedProductId: Optional[int] = None
    loyaltyPointsMultiplier: Optional[int] = Field(default=None, ge=0)


class ServiceResponse(BaseModel):
    id: int
    name: str
    price: float
    durationMinutes: int
    category: Optional[str]
    linkedProductId: Optional[int]
    loyaltyPointsMultiplier: int


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    quantity: int = Field(default=0, ge=0)
    lowStockThreshold: int = Field(default=5, ge=0)


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    lowStockThreshold: Optional[int] = Field(default=None, ge=0)


class ProductResponse(BaseModel):
    id: int
    name: str
    quantity: int
    lowStockThreshold: int
    isLowStock: bool


class ClientCreate(BaseModel):
    """Schema for creating a loyalty client"""

    name: str = Field(min_length=1)
    phone: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_phone(v)
        return v


class ClientUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_phone(v)
        return v


class ClientResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str]
    loyaltyPoints: int
    totalVisits: int
    totalSpent: float
