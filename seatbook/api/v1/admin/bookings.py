from uuid import UUID
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from seatbook.api.deps import get_booking_transaction, get_current_admin
from seatbook.schemas.booking import (
    Booking as BookingSchema,
    BookingDeleteResponse,
    PaymentStatusResponse,
    PaymentStatusUpdate,
)
from seatbook.schemas.common import PaginatedResponse
from seatbook.services.booking import BookingTransaction, serialize_booking

router = APIRouter(
    prefix="/admin/bookings",
    tags=["Admin - Bookings"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("/", response_model=PaginatedResponse[BookingSchema])
def list_bookings(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100, description="Page size (defaults to BOOKINGS_PAGE_SIZE)"),
    transaction: BookingTransaction = Depends(get_booking_transaction),
):
    """All bookings, unpaid first, then newest first."""
    return transaction.list_bookings(page=page, limit=limit)


@router.get("/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: UUID,
    transaction: BookingTransaction = Depends(get_booking_transaction),
):
    return serialize_booking(transaction.get_booking(booking_id))


@router.patch("/{booking_id}/payment", response_model=PaymentStatusResponse)
def update_payment_status(
    booking_id: UUID,
    body: PaymentStatusUpdate,
    background_tasks: BackgroundTasks,
    transaction: BookingTransaction = Depends(get_booking_transaction),
):
    """
    Confirm (or revoke) payment. Marking a booking paid queues a confirmation
    email; email failures never undo the status change.
    """
    booking, queued = transaction.set_paid(booking_id, body.is_paid, background_tasks)
    return PaymentStatusResponse(
        booking_id=booking.id,
        is_paid=booking.is_paid,
        notification_queued=queued,
    )


@router.delete("/{booking_id}", response_model=BookingDeleteResponse)
def delete_booking(
    booking_id: UUID,
    transaction: BookingTransaction = Depends(get_booking_transaction),
):
    """Delete a booking and return its seats to the available pool."""
    released = transaction.delete_booking(booking_id)
    return BookingDeleteResponse(booking_id=booking_id, released_seats=released)
