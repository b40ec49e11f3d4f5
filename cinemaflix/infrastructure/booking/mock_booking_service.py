from __future__ import annotations

from decimal import Decimal

from cinemaflix.application.exceptions import AuthError
from cinemaflix.application.ports.booking_service import BookingServicePort
from cinemaflix.domain.entities.booking_record import BookingRecord
from cinemaflix.infrastructure.inventory.seat_inventory import InMemorySeatInventory


class MockBookingService(BookingServicePort):
    """Booking service over the in-memory inventory. Calls without a user id fail like a 401."""

    def __init__(self, inventory: InMemorySeatInventory) -> None:
        self._inventory = inventory

    async def create_booking(self, showtime_id: str, seat_ids: list[str], user_id: str) -> BookingRecord:
        if not user_id:
            raise AuthError()
        return await self._inventory.book(showtime_id, seat_ids, user_id)

    async def confirm_payment(
        self,
        booking_id: str,
        payment_method: str,
        paid_amount: Decimal,
        transaction_id: str,
        user_id: str,
    ) -> BookingRecord:
        if not user_id:
            raise AuthError()
        return await self._inventory.confirm_payment(booking_id, payment_method, paid_amount, transaction_id)

    async def get_booking(self, booking_id: str, user_id: str) -> BookingRecord | None:
        if not user_id:
            raise AuthError()
        return self._inventory.get_booking(booking_id)
