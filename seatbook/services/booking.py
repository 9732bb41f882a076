import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session, joinedload, selectinload

from seatbook.core.config import Settings, settings as default_settings
from seatbook.core.exceptions import (
    ConflictError,
    CreationFailedError,
    InvalidStateError,
    NotFoundError,
    SeatbookError,
    SeatUnavailableError,
    ValidationError,
)
from seatbook.models.booking import Booking, SeatAssignment
from seatbook.models.seat_row import SeatRow
from seatbook.models.user import User
from seatbook.schemas.booking import (
    Booking as BookingSchema,
    BookingCreate,
    BookingSeatResponse,
    SeatSelection,
)
from seatbook.schemas.common import PaginatedResponse
from seatbook.schemas.user import UserSummary
from seatbook.services.inventory import SeatRowInventory
from seatbook.services.notifications import ConfirmationJob, ConfirmationSeat, NotificationQueue
from seatbook.services.storage import ReceiptFile, ReceiptStorage

logger = logging.getLogger(__name__)

RECEIPT_UPLOAD_WARNING = (
    "Receipt upload failed; the booking was created without a receipt. "
    "You can attach the receipt later."
)


@dataclass
class BookingOutcome:
    booking: Booking
    receipt_uploaded: bool
    warnings: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize_booking(booking: Booking) -> BookingSchema:
    """Convert a Booking ORM object to its schema representation."""
    seats_out = [
        BookingSeatResponse(
            seat_row_id=a.seat_row_id,
            row_name=a.row_name,
            row_type=a.seat_row.type.value if a.seat_row else None,
            seat_number=a.seat_number,
            first_name=a.first_name,
            last_name=a.last_name,
        )
        for a in booking.seats
    ]
    return BookingSchema(
        id=booking.id,
        user=UserSummary.model_validate(booking.user),
        seats=seats_out,
        total_seats=len(seats_out),
        total_price=booking.total_price,
        is_paid=booking.is_paid,
        receipt_url=booking.receipt_url,
        created_at=booking.created_at,
    )


class BookingTransaction:
    """
    Creates, pays, and deletes bookings while keeping seat inventory consistent.

    Seat availability is pre-checked for a friendly error, but the decision
    that counts is the conditional removal inside the commit unit: if any seat
    was taken in the meantime, every removal in that unit is rolled back.
    """

    def __init__(
        self,
        db: Session,
        storage: Optional[ReceiptStorage] = None,
        notifications: Optional[NotificationQueue] = None,
        settings: Settings = default_settings,
    ):
        self.db = db
        self.settings = settings
        self.inventory = SeatRowInventory(db)
        self.storage = storage or ReceiptStorage(settings)
        self.notifications = notifications or NotificationQueue(settings=settings)

    # -----------------------------------------------------------------------
    # Create
    # -----------------------------------------------------------------------

    def create_booking(self, data: BookingCreate, receipt: Optional[ReceiptFile] = None) -> BookingOutcome:
        self._validate(data.seats)

        receipt_url = None
        warnings: List[str] = []
        try:
            rows = self._precheck(data.seats)
            user = self._find_or_create_user(data)

            if receipt is not None:
                upload = self.storage.upload(receipt, user.id, fatal=False)
                if upload.ok:
                    receipt_url = upload.value
                else:
                    warnings.append(RECEIPT_UPLOAD_WARNING)

            # Authoritative check: each removal only succeeds if the seat is still available
            conflicts: List[Tuple[str, int]] = []
            for seat in data.seats:
                try:
                    self.inventory.remove_seat(seat.seat_row_id, seat.seat_number)
                except (InvalidStateError, NotFoundError):
                    conflicts.append((rows[seat.seat_row_id].name, seat.seat_number))
            if conflicts:
                raise SeatUnavailableError(conflicts)

            booking = Booking(
                user=user,
                total_price=Decimal(self.settings.PRICE_PER_SEAT) * len(data.seats),
                is_paid=False,
                receipt_url=receipt_url,
                seats=[
                    SeatAssignment(
                        seat_row_id=seat.seat_row_id,
                        row_name=rows[seat.seat_row_id].name,
                        seat_number=seat.seat_number,
                        first_name=seat.first_name.strip(),
                        last_name=seat.last_name.strip(),
                        position=index,
                    )
                    for index, seat in enumerate(data.seats)
                ],
            )
            self.db.add(booking)
            self.db.commit()
        except SeatbookError:
            self.db.rollback()
            self._log_orphaned_receipt(receipt_url, data.email)
            raise
        except Exception as exc:
            self.db.rollback()
            logger.exception("Booking creation failed for %s", data.email)
            self._log_orphaned_receipt(receipt_url, data.email)
            raise CreationFailedError() from exc

        logger.info(
            "Booking %s created for %s with %d seat(s)", booking.id, data.email, len(data.seats)
        )
        return BookingOutcome(
            booking=self._load_booking(booking.id),
            receipt_uploaded=receipt_url is not None,
            warnings=warnings,
        )

    @staticmethod
    def _log_orphaned_receipt(receipt_url: Optional[str], email: str) -> None:
        if receipt_url:
            logger.warning(
                "Booking for %s failed after its receipt was stored; orphaned object at %s",
                email, receipt_url,
            )

    def _validate(self, seats: List[SeatSelection]) -> None:
        if not seats:
            raise ValidationError("At least one seat must be selected")
        if len(seats) > self.settings.MAX_SEATS_PER_BOOKING:
            raise ValidationError(
                f"Cannot book more than {self.settings.MAX_SEATS_PER_BOOKING} seats at once"
            )
        seen = set()
        for seat in seats:
            if not seat.first_name.strip() or not seat.last_name.strip():
                raise ValidationError("Passenger first and last names are required for every seat")
            key = (seat.seat_row_id, seat.seat_number)
            if key in seen:
                raise ValidationError(f"Seat {seat.seat_number} was selected more than once")
            seen.add(key)

    def _precheck(self, seats: List[SeatSelection]) -> Dict[UUID, SeatRow]:
        rows: Dict[UUID, SeatRow] = {}
        for seat in seats:
            if seat.seat_row_id not in rows:
                rows[seat.seat_row_id] = self.inventory.get_row(seat.seat_row_id)

        unavailable = [
            (rows[seat.seat_row_id].name, seat.seat_number)
            for seat in seats
            if not self.inventory.is_available(seat.seat_row_id, seat.seat_number)
        ]
        if unavailable:
            raise SeatUnavailableError(unavailable)
        return rows

    def _find_or_create_user(self, data: BookingCreate) -> User:
        email = str(data.email).lower()
        user = self.db.query(User).filter(User.email == email).first()
        if user is None:
            # id assigned up front so the receipt can be named before the flush
            user = User(id=uuid.uuid4(), name=data.name.strip(), email=email, phone=data.phone)
            self.db.add(user)
            return user

        if not self.settings.ALLOW_MULTIPLE_BOOKINGS_PER_EMAIL:
            has_booking = self.db.query(Booking.id).filter(Booking.user_id == user.id).first()
            if has_booking:
                raise ConflictError(f"A booking already exists for {email}")
        return user

    # -----------------------------------------------------------------------
    # Read
    # -----------------------------------------------------------------------

    def _load_booking(self, booking_id: UUID) -> Optional[Booking]:
        return (
            self.db.query(Booking)
            .options(
                joinedload(Booking.user),
                selectinload(Booking.seats).joinedload(SeatAssignment.seat_row),
            )
            .filter(Booking.id == booking_id)
            .first()
        )

    def get_booking(self, booking_id: UUID) -> Booking:
        booking = self._load_booking(booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def list_bookings(self, page: int = 1, limit: Optional[int] = None) -> PaginatedResponse[BookingSchema]:
        """Unpaid bookings first, newest first within each group; id breaks ties so pages stay stable."""
        limit = limit or self.settings.BOOKINGS_PAGE_SIZE
        query = self.db.query(Booking).options(
            joinedload(Booking.user),
            selectinload(Booking.seats).joinedload(SeatAssignment.seat_row),
        )
        total = query.count()
        bookings = (
            query.order_by(Booking.is_paid.asc(), Booking.created_at.desc(), Booking.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return PaginatedResponse[BookingSchema].build(
            data=[serialize_booking(b) for b in bookings],
            total=total,
            page=page,
            limit=limit,
        )

    # -----------------------------------------------------------------------
    # Payment & receipt
    # -----------------------------------------------------------------------

    def set_paid(
        self,
        booking_id: UUID,
        is_paid: bool,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> Tuple[Booking, bool]:
        """
        Flip the paid flag. Seats are untouched: they were consumed at creation.
        Returns the booking and whether a confirmation email was queued.
        """
        booking = self.get_booking(booking_id)
        was_paid = booking.is_paid
        booking.is_paid = is_paid
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Booking %s marked %s", booking_id, "paid" if is_paid else "unpaid")

        queued = False
        if is_paid and not was_paid:
            booking = self.get_booking(booking_id)
            queued = self.notifications.enqueue_confirmation(
                self._confirmation_job(booking), background_tasks
            )
        return booking, queued

    def _confirmation_job(self, booking: Booking) -> ConfirmationJob:
        return ConfirmationJob(
            user_email=booking.user.email,
            user_name=booking.user.name,
            seats=[
                ConfirmationSeat(
                    row_name=a.row_name,
                    row_type=a.seat_row.type.value if a.seat_row else "Ground",
                    seat_number=a.seat_number,
                    first_name=a.first_name,
                    last_name=a.last_name,
                )
                for a in booking.seats
            ],
        )

    def update_receipt(self, booking_id: UUID, receipt: ReceiptFile) -> Booking:
        booking = self.get_booking(booking_id)
        upload = self.storage.upload(receipt, booking.user_id, fatal=True)
        booking.receipt_url = upload.value
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Receipt for booking %s replaced", booking_id)
        return self.get_booking(booking_id)

    # -----------------------------------------------------------------------
    # Delete
    # -----------------------------------------------------------------------

    def delete_booking(self, booking_id: UUID) -> int:
        """Delete the booking and return its seats to their rows; returns the number released."""
        booking = self.get_booking(booking_id)
        assignments = [(a.seat_row_id, a.row_name, a.seat_number) for a in booking.seats]

        try:
            self.db.delete(booking)
            self.db.flush()

            released = 0
            for row_id, row_name, seat_number in assignments:
                if row_id is None:
                    logger.warning(
                        "Row %s no longer exists; seat %d of booking %s not returned",
                        row_name, seat_number, booking_id,
                    )
                    continue
                try:
                    self.inventory.release_seat(row_id, seat_number)
                except NotFoundError:
                    logger.warning(
                        "Row %s no longer exists; seat %d of booking %s not returned",
                        row_name, seat_number, booking_id,
                    )
                    continue
                except ConflictError:
                    logger.warning(
                        "Seat %d in row %s was already available when booking %s was deleted",
                        seat_number, row_name, booking_id,
                    )
                    continue
                released += 1

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Booking %s deleted; %d seat(s) returned to the pool", booking_id, released)
        return released
