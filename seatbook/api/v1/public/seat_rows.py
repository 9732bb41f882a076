from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from seatbook.api.deps import get_inventory, get_settings_store
from seatbook.models.seat_row import SeatRowType
from seatbook.schemas.seat_row import SeatRow as SeatRowSchema, SeatAvailabilityResponse
from seatbook.services.inventory import SeatRowInventory, serialize_row
from seatbook.services.settings_store import SettingsStore

router = APIRouter(prefix="/seat-rows", tags=["Seat Rows"])


@router.get("/", response_model=List[SeatRowSchema])
def list_seat_rows(
    type: Optional[SeatRowType] = Query(None, description="Filter by row type (Ground or Balcony)"),
    include_hidden: bool = Query(False, description="Include hidden rows (admin view)"),
    inventory: SeatRowInventory = Depends(get_inventory),
    store: SettingsStore = Depends(get_settings_store),
):
    """Seat rows ordered by name, each with its currently available seat numbers."""
    rows = inventory.list_rows(
        row_type=type,
        include_hidden=include_hidden,
        balcony_visible=store.balcony_visible(),
    )
    return [serialize_row(r) for r in rows]


@router.get("/{row_id}", response_model=SeatRowSchema)
def get_seat_row(row_id: UUID, inventory: SeatRowInventory = Depends(get_inventory)):
    return serialize_row(inventory.get_row(row_id))


@router.get("/{row_id}/available-seats", response_model=SeatAvailabilityResponse)
def get_available_seats(row_id: UUID, inventory: SeatRowInventory = Depends(get_inventory)):
    """All, available, and booked seat numbers of one row."""
    return inventory.seat_summary(row_id)
