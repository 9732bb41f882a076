import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, Integer, DateTime, Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from seatbook.db.session import Base


def _utcnow():
    return datetime.now(timezone.utc)


class SeatRowType(str, enum.Enum):
    Ground = "Ground"
    Balcony = "Balcony"


class SeatStatus(str, enum.Enum):
    available = "available"
    booked = "booked"


class SeatRow(Base):
    __tablename__ = "seat_rows"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(50), unique=True, nullable=False, index=True)
    type = Column(Enum(SeatRowType, name="seat_row_type"), nullable=False, default=SeatRowType.Ground, index=True)
    visible = Column(Boolean, nullable=False, default=True) # display only, not a booking gate
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    seats = relationship(
        "RowSeat",
        back_populates="row",
        cascade="all, delete-orphan",
        order_by="RowSeat.seat_number",
    )

    @property
    def available_seats(self):
        return sorted(s.seat_number for s in self.seats if s.status == SeatStatus.available.value)


class RowSeat(Base):
    """One seat number in a row. The row's available set is every seat whose status is 'available'."""
    __tablename__ = "row_seats"
    __table_args__ = (
        UniqueConstraint("seat_row_id", "seat_number", name="uq_row_seats_row_number"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    seat_row_id = Column(Uuid(as_uuid=True), ForeignKey("seat_rows.id", ondelete="CASCADE"), nullable=False, index=True)
    seat_number = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=SeatStatus.available.value, index=True) # available, booked

    row = relationship("SeatRow", back_populates="seats")
