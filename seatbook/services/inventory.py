import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from seatbook.core.exceptions import ConflictError, InvalidStateError, NotFoundError
from seatbook.models.booking import SeatAssignment
from seatbook.models.seat_row import RowSeat, SeatRow, SeatRowType, SeatStatus
from seatbook.schemas.seat_row import (
    SeatAvailabilityResponse,
    SeatRow as SeatRowSchema,
    SeatRowCreate,
)

logger = logging.getLogger(__name__)

AVAILABLE = SeatStatus.available.value
BOOKED = SeatStatus.booked.value


def serialize_row(row: SeatRow) -> SeatRowSchema:
    return SeatRowSchema(
        id=row.id,
        name=row.name,
        type=row.type,
        seats=row.available_seats,
        visible=row.visible,
        created_at=row.created_at,
    )


class SeatRowInventory:
    """
    Available-seat sets per row.

    `remove_seat`, `release_seat` and `add_seat` only flush: they take part in
    the caller's unit of work, and the caller commits or rolls back. Removal
    and release are conditional updates on the seat's status, so the check and
    the change happen in the same statement and concurrent writers cannot both
    win the same seat. `add_seat` only ever inserts new seat numbers; a seat
    held by a booking comes back solely through `release_seat`.
    """

    def __init__(self, db: Session):
        self.db = db

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def get_row(self, row_id: UUID) -> SeatRow:
        row = self.db.query(SeatRow).filter(SeatRow.id == row_id).first()
        if not row:
            raise NotFoundError("Seat row not found")
        return row

    def list_available(self, row_id: UUID) -> List[int]:
        self.get_row(row_id)
        rows = (
            self.db.query(RowSeat.seat_number)
            .filter(RowSeat.seat_row_id == row_id, RowSeat.status == AVAILABLE)
            .order_by(RowSeat.seat_number)
            .all()
        )
        return [number for (number,) in rows]

    def is_available(self, row_id: UUID, seat_number: int) -> bool:
        return (
            self.db.query(RowSeat.id)
            .filter(
                RowSeat.seat_row_id == row_id,
                RowSeat.seat_number == seat_number,
                RowSeat.status == AVAILABLE,
            )
            .first()
            is not None
        )

    def list_rows(
        self,
        row_type: Optional[SeatRowType] = None,
        include_hidden: bool = False,
        balcony_visible: bool = True,
    ) -> List[SeatRow]:
        query = self.db.query(SeatRow).options(selectinload(SeatRow.seats))
        if row_type:
            query = query.filter(SeatRow.type == row_type)
        # Customers only see visible rows; admins ask for everything
        if not include_hidden:
            query = query.filter(SeatRow.visible == True)
            if not balcony_visible:
                query = query.filter(SeatRow.type != SeatRowType.Balcony)
        return query.order_by(SeatRow.name.asc()).all()

    def seat_summary(self, row_id: UUID) -> SeatAvailabilityResponse:
        row = self.get_row(row_id)
        return SeatAvailabilityResponse(
            id=row.id,
            name=row.name,
            total_seats=[s.seat_number for s in row.seats],
            available_seats=[s.seat_number for s in row.seats if s.status == AVAILABLE],
            booked_seats=[s.seat_number for s in row.seats if s.status == BOOKED],
            created_at=row.created_at,
        )

    # -----------------------------------------------------------------------
    # Seat primitives
    # -----------------------------------------------------------------------

    def remove_seat(self, row_id: UUID, seat_number: int) -> SeatRow:
        """Take `seat_number` out of the row's available set."""
        row = self.get_row(row_id)
        count = (
            self.db.query(RowSeat)
            .filter(
                RowSeat.seat_row_id == row_id,
                RowSeat.seat_number == seat_number,
                RowSeat.status == AVAILABLE,
            )
            .update({"status": BOOKED}, synchronize_session="fetch")
        )
        if count != 1:
            raise InvalidStateError(f"Seat {seat_number} is not available in row {row.name}")
        return row

    def add_seat(self, row_id: UUID, seat_number: int) -> SeatRow:
        """Add a new seat number to the row. Existing seats, booked or not, are rejected."""
        row = self.get_row(row_id)
        exists = (
            self.db.query(RowSeat.id)
            .filter(RowSeat.seat_row_id == row_id, RowSeat.seat_number == seat_number)
            .first()
        )
        if exists is not None:
            raise ConflictError(f"Seat {seat_number} already exists in row {row.name}")

        row.seats.append(RowSeat(seat_number=seat_number, status=AVAILABLE))
        try:
            self.db.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Seat {seat_number} already exists in row {row.name}") from exc
        return row

    def release_seat(self, row_id: UUID, seat_number: int) -> SeatRow:
        """Put a consumed seat back into the row's available set."""
        row = self.get_row(row_id)
        count = (
            self.db.query(RowSeat)
            .filter(
                RowSeat.seat_row_id == row_id,
                RowSeat.seat_number == seat_number,
                RowSeat.status == BOOKED,
            )
            .update({"status": AVAILABLE}, synchronize_session="fetch")
        )
        if count != 1:
            raise ConflictError(f"Seat {seat_number} is not booked in row {row.name}")
        return row

    # -----------------------------------------------------------------------
    # Row management (commits)
    # -----------------------------------------------------------------------

    def create_row(self, data: SeatRowCreate) -> SeatRow:
        if self.db.query(SeatRow.id).filter(SeatRow.name == data.name).first():
            raise ConflictError(f"Seat row with name '{data.name}' already exists")

        row = SeatRow(
            name=data.name,
            type=data.type,
            visible=data.visible,
            seats=[RowSeat(seat_number=n, status=AVAILABLE) for n in data.seats],
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent create of the same name
            self.db.rollback()
            raise ConflictError(f"Seat row with name '{data.name}' already exists") from exc
        self.db.refresh(row)
        logger.info("Created seat row %s with %d seats", row.name, len(data.seats))
        return row

    def set_visibility(self, row_id: UUID, visible: bool) -> SeatRow:
        row = self.get_row(row_id)
        row.visible = visible
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete_row(self, row_id: UUID) -> None:
        row = self.get_row(row_id)
        name = row.name
        # Bookings keep their denormalized row name; the link itself goes
        self.db.query(SeatAssignment).filter(
            SeatAssignment.seat_row_id == row.id
        ).update({"seat_row_id": None}, synchronize_session="fetch")
        self.db.delete(row)
        self.db.commit()
        logger.info("Deleted seat row %s", name)
