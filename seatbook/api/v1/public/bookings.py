import json
from uuid import UUID
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from seatbook.api.deps import get_booking_transaction
from seatbook.core.exceptions import ValidationError
from seatbook.schemas.booking import BookingCreate, BookingCreated, ReceiptUpdateResponse
from seatbook.services.booking import BookingTransaction, serialize_booking
from seatbook.services.storage import ReceiptFile

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _validation_message(exc: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )


def _read_receipt(upload: Optional[UploadFile]) -> Optional[ReceiptFile]:
    if upload is None or not upload.filename:
        return None
    return ReceiptFile(
        data=upload.file.read(),
        content_type=upload.content_type or "application/octet-stream",
        filename=upload.filename,
    )


# ---------------------------------------------------------------------------
# POST /bookings: reserve seats
# ---------------------------------------------------------------------------


@router.post("/", response_model=BookingCreated, status_code=status.HTTP_201_CREATED)
def create_booking(
    name: str = Form(...),
    email: str = Form(...),
    phone: Optional[str] = Form(None),
    seats: str = Form(..., description="JSON array of {seat_row_id, seat_number, first_name, last_name}"),
    receipt: Optional[UploadFile] = File(None),
    transaction: BookingTransaction = Depends(get_booking_transaction),
):
    """
    Reserve one or more seats for a customer.

    - Seats are sent as a JSON string (multipart form).
    - Every requested seat must still be available; otherwise nothing is
      reserved and the error lists each seat that was taken.
    - A failed receipt upload does not fail the booking: the response has
      `receipt_uploaded=false` and a warning.
    """
    try:
        seat_list = json.loads(seats)
    except json.JSONDecodeError:
        raise ValidationError("Invalid seats JSON format")

    try:
        data = BookingCreate.model_validate(
            {"name": name, "email": email, "phone": phone, "seats": seat_list}
        )
    except PydanticValidationError as exc:
        raise ValidationError(_validation_message(exc))

    outcome = transaction.create_booking(data, _read_receipt(receipt))
    return BookingCreated(
        booking=serialize_booking(outcome.booking),
        receipt_uploaded=outcome.receipt_uploaded,
        warnings=outcome.warnings,
    )


# ---------------------------------------------------------------------------
# PATCH /bookings/{id}/receipt: attach or replace proof of payment
# ---------------------------------------------------------------------------


@router.patch("/{booking_id}/receipt", response_model=ReceiptUpdateResponse)
def update_receipt(
    booking_id: UUID,
    receipt: UploadFile = File(...),
    transaction: BookingTransaction = Depends(get_booking_transaction),
):
    receipt_file = _read_receipt(receipt)
    if receipt_file is None:
        raise ValidationError("Receipt file is required")

    booking = transaction.update_receipt(booking_id, receipt_file)
    return ReceiptUpdateResponse(
        booking_id=booking.id,
        receipt_url=booking.receipt_url,
        updated_at=booking.updated_at,
    )
