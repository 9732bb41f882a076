from seatbook.db.session import Base
from seatbook.models.user import User
from seatbook.models.seat_row import SeatRow, RowSeat
from seatbook.models.booking import Booking, SeatAssignment
from seatbook.models.setting import Setting
