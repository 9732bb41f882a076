from typing import Annotated, Optional, List
from pydantic import BaseModel, Field, UUID4, field_validator
from datetime import datetime

from seatbook.models.seat_row import SeatRowType

SeatNumber = Annotated[int, Field(ge=0)]


# Seat row: create (POST /admin/seat-rows)
class SeatRowCreate(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=50)]
    type: SeatRowType = SeatRowType.Ground
    seats: List[SeatNumber] = []
    visible: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("seats")
    @classmethod
    def unique_seats(cls, v: List[int]) -> List[int]:
        if len(set(v)) != len(v):
            raise ValueError("seat numbers must be unique")
        return sorted(v)


class SeatRowUpdate(BaseModel):
    visible: bool


class AddSeatRequest(BaseModel):
    seat_number: SeatNumber


# Seat row: full response; `seats` is the available set, ascending
class SeatRow(BaseModel):
    id: UUID4
    name: str
    type: SeatRowType
    seats: List[int]
    visible: bool
    created_at: Optional[datetime] = None


# Seat row: add-seat response (PATCH /admin/seat-rows/{id}/add-seat)
class AddSeatResponse(BaseModel):
    row: SeatRow
    added_seat: int
    total_seats: int


# Seat row: availability breakdown (GET /seat-rows/{id}/available-seats)
class SeatAvailabilityResponse(BaseModel):
    id: UUID4
    name: str
    total_seats: List[int]
    available_seats: List[int]
    booked_seats: List[int]
    created_at: Optional[datetime] = None


class SeatRowDeleteResponse(BaseModel):
    id: UUID4
    deleted: bool
