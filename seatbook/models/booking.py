import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, DateTime, DECIMAL, Integer, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
from seatbook.db.session import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    total_price = Column(DECIMAL(10, 2), nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False, index=True)
    receipt_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    # Relationships
    user = relationship("User", back_populates="bookings")
    seats = relationship(
        "SeatAssignment",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="SeatAssignment.position",
    )

class SeatAssignment(Base):
    __tablename__ = "seat_assignments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid(as_uuid=True), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    # Non-owning; cleared if the row is deleted while the booking lives
    seat_row_id = Column(Uuid(as_uuid=True), ForeignKey("seat_rows.id", ondelete="SET NULL"), nullable=True, index=True)
    row_name = Column(String(50), nullable=False)
    seat_number = Column(Integer, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    position = Column(Integer, nullable=False, default=0) # order within the request

    booking = relationship("Booking", back_populates="seats")
    seat_row = relationship("SeatRow")
