from seatbook.schemas.common import PaginatedResponse, ErrorResponse
from seatbook.schemas.user import UserSummary, Token, AdminProfile
from seatbook.schemas.seat_row import (
    SeatRow, SeatRowCreate, SeatRowUpdate, AddSeatRequest, AddSeatResponse,
    SeatAvailabilityResponse, SeatRowDeleteResponse,
)
from seatbook.schemas.booking import (
    Booking, BookingCreate, BookingCreated, SeatSelection, BookingSeatResponse,
    PaymentStatusUpdate, PaymentStatusResponse, ReceiptUpdateResponse,
    BookingDeleteResponse,
)
from seatbook.schemas.setting import BalconyVisibility
