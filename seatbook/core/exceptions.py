from typing import Iterable, Tuple

from fastapi import status


class SeatbookError(Exception):
    """Base class for errors that are safe to show to the caller."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(SeatbookError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(SeatbookError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(SeatbookError):
    status_code = status.HTTP_409_CONFLICT


class InvalidStateError(ConflictError):
    """A seat is not in the state the operation requires (e.g. already booked)."""


class SeatUnavailableError(ConflictError):
    """One or more requested seats were taken; lists every conflicting seat."""

    def __init__(self, seats: Iterable[Tuple[str, int]]):
        self.seats = list(seats)
        details = "; ".join(
            f"Row {row_name}, Seat {seat_number} is already booked"
            for row_name, seat_number in self.seats
        )
        super().__init__(f"Booking failed: {details}")


class UploadError(SeatbookError):
    status_code = status.HTTP_400_BAD_REQUEST


class CreationFailedError(SeatbookError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Failed to create booking. Please try again."):
        super().__init__(message)
