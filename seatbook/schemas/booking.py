from __future__ import annotations

from typing import Annotated, Optional, List
from pydantic import BaseModel, EmailStr, Field, UUID4, field_validator
from decimal import Decimal
from datetime import datetime

from seatbook.schemas.user import UserSummary

PassengerName = Annotated[str, Field(min_length=1, max_length=100)]


# One requested seat with its passenger
class SeatSelection(BaseModel):
    seat_row_id: UUID4
    seat_number: Annotated[int, Field(ge=0)]
    first_name: PassengerName
    last_name: PassengerName

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("passenger first and last names are required")
        return v


# Booking: Create (POST /bookings)
class BookingCreate(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=255)]
    email: EmailStr
    phone: Optional[str] = None
    seats: Annotated[List[SeatSelection], Field(min_length=1)]

    @field_validator("phone", mode="before")
    @classmethod
    def parse_empty_str_to_none(cls, v):
        if v == "":
            return None
        return v


class BookingSeatResponse(BaseModel):
    seat_row_id: Optional[UUID4] = None
    row_name: str
    row_type: Optional[str] = None
    seat_number: int
    first_name: str
    last_name: str


# Booking: Full response (GET /admin/bookings/{id})
class Booking(BaseModel):
    id: UUID4
    user: UserSummary
    seats: List[BookingSeatResponse] = []
    total_seats: int
    total_price: Decimal
    is_paid: bool
    receipt_url: Optional[str] = None
    created_at: datetime


# Booking: create response; warnings are non-blocking (e.g. receipt upload failed)
class BookingCreated(BaseModel):
    booking: Booking
    receipt_uploaded: bool
    warnings: List[str] = []


class PaymentStatusUpdate(BaseModel):
    is_paid: bool


class PaymentStatusResponse(BaseModel):
    booking_id: UUID4
    is_paid: bool
    notification_queued: bool


class ReceiptUpdateResponse(BaseModel):
    booking_id: UUID4
    receipt_url: str
    updated_at: datetime


class BookingDeleteResponse(BaseModel):
    booking_id: UUID4
    released_seats: int
