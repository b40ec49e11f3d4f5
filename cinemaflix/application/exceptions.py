from __future__ import annotations

from typing import Iterable


class BookingError(RuntimeError):
    """Base for collaborator failures the workflow translates into user notices."""

    user_message = "Something went wrong, please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class TransientError(BookingError):
    """Raised on network errors, timeouts, 5xx or generic rejections. Retryable."""

    user_message = "We couldn't reach the booking service. Please try again."

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ServiceContractError(TransientError):
    """Raised when a collaborator answers with a payload of the wrong shape."""


class AuthError(BookingError):
    """Raised when the booking service rejects the session (401)."""

    user_message = "Please login to complete booking"


class SeatConflictError(BookingError):
    """Raised when requested seats were taken by someone else first."""

    user_message = "Some of your seats are no longer available. Please choose again."

    def __init__(self, seat_ids: Iterable[str] = (), message: str | None = None) -> None:
        super().__init__(message)
        self.seat_ids = tuple(seat_ids)


class ShowtimeNotFoundError(BookingError):
    """Raised when the catalog has no such showtime (404)."""

    user_message = "Showtime not found"

    def __init__(self, showtime_id: str) -> None:
        super().__init__(f"Showtime not found: {showtime_id}")
        self.showtime_id = showtime_id
