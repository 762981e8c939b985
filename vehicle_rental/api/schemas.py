"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, EmailStr, Field

from vehicle_rental.domain.enums import (
    AvailabilityStatus,
    BookingStatus,
    Role,
    VehicleType,
)

T = TypeVar("T")


# ── Envelope ──────────────────────────────────────────────────────────


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"


# ── Requests ──────────────────────────────────────────────────────────
# Required fields are Optional here on purpose: presence and values are checked
# by the services so a missing field is reported as ``missing_field``.


class SignUpRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    role: Optional[str] = None


class SignInRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    role: Optional[str] = None
    password: Optional[str] = None


class VehicleCreateRequest(BaseModel):
    vehicle_name: Optional[str] = Field(None, max_length=100)
    type: Optional[VehicleType] = None
    registration_number: Optional[str] = Field(None, max_length=50)
    daily_rent_price: Optional[Decimal] = Field(None, gt=0, decimal_places=2)


class VehicleUpdateRequest(VehicleCreateRequest):
    """Partial update; ``availability_status`` is not client-writable."""


class BookingCreateRequest(BaseModel):
    customer_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    rent_start_date: Optional[date] = None
    rent_end_date: Optional[date] = None


class BookingStatusRequest(BaseModel):
    status: Optional[str] = None


# ── Responses ─────────────────────────────────────────────────────────


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: Role
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SignInResponse(BaseModel):
    token: str
    user: UserResponse


class VehicleResponse(BaseModel):
    id: int
    vehicle_name: str
    type: VehicleType
    registration_number: str
    daily_rent_price: float
    availability_status: AvailabilityStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CustomerSummary(BaseModel):
    name: str
    email: str


class VehicleSummary(BaseModel):
    vehicle_name: Optional[str] = None
    registration_number: Optional[str] = None
    type: Optional[VehicleType] = None
    daily_rent_price: Optional[float] = None
    availability_status: Optional[AvailabilityStatus] = None


class BookingResponse(BaseModel):
    id: int
    customer_id: int
    vehicle_id: int
    rent_start_date: date
    rent_end_date: date
    total_price: float
    status: BookingStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    customer: Optional[CustomerSummary] = None
    vehicle: Optional[VehicleSummary] = None

    model_config = {"from_attributes": True}
