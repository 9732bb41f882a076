from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from seatbook.api.deps import get_current_admin, get_inventory
from seatbook.core.exceptions import SeatbookError
from seatbook.db.session import get_db
from seatbook.schemas.seat_row import (
    AddSeatRequest,
    AddSeatResponse,
    SeatRow as SeatRowSchema,
    SeatRowCreate,
    SeatRowDeleteResponse,
    SeatRowUpdate,
)
from seatbook.services.inventory import SeatRowInventory, serialize_row

router = APIRouter(
    prefix="/admin/seat-rows",
    tags=["Admin - Seat Rows"],
    dependencies=[Depends(get_current_admin)],
)


@router.post("/", response_model=SeatRowSchema, status_code=status.HTTP_201_CREATED)
def create_seat_row(
    data: SeatRowCreate,
    inventory: SeatRowInventory = Depends(get_inventory),
):
    return serialize_row(inventory.create_row(data))


@router.patch("/{row_id}", response_model=SeatRowSchema)
def update_seat_row(
    row_id: UUID,
    data: SeatRowUpdate,
    inventory: SeatRowInventory = Depends(get_inventory),
):
    """Show or hide a row on the customer seat map."""
    return serialize_row(inventory.set_visibility(row_id, data.visible))


@router.patch("/{row_id}/add-seat", response_model=AddSeatResponse)
def add_seat(
    row_id: UUID,
    body: AddSeatRequest,
    db: Session = Depends(get_db),
    inventory: SeatRowInventory = Depends(get_inventory),
):
    try:
        row = inventory.add_seat(row_id, body.seat_number)
        db.commit()
    except SeatbookError:
        db.rollback()
        raise
    db.refresh(row)
    out = serialize_row(row)
    return AddSeatResponse(row=out, added_seat=body.seat_number, total_seats=len(out.seats))


@router.delete("/{row_id}", response_model=SeatRowDeleteResponse)
def delete_seat_row(
    row_id: UUID,
    inventory: SeatRowInventory = Depends(get_inventory),
):
    inventory.delete_row(row_id)
    return SeatRowDeleteResponse(id=row_id, deleted=True)
