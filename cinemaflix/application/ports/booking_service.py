from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from cinemaflix.domain.entities.booking_record import BookingRecord


class BookingServicePort(ABC):
    @abstractmethod
    async def create_booking(self, showtime_id: str, seat_ids: list[str], user_id: str) -> BookingRecord:
        """
        Book the seats atomically for the user.
        Raises AuthError (401), SeatConflictError (seats taken) or TransientError.
        """
        raise NotImplementedError

    @abstractmethod
    async def confirm_payment(
        self,
        booking_id: str,
        payment_method: str,
        paid_amount: Decimal,
        transaction_id: str,
        user_id: str,
    ) -> BookingRecord:
        """
        Mark a pending booking as paid and return the booking as the service now holds it.
        `booking_id` is `BookingRecord.lookup_id`.
        Raises AuthError (401) or TransientError.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_booking(self, booking_id: str, user_id: str) -> BookingRecord | None:
        """Return a booking by id on behalf of the user, or None if the service does not know it."""
        raise NotImplementedError
