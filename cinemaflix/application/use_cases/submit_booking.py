from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from cinemaflix.application.ports.booking_service import BookingServicePort
from cinemaflix.domain.entities.booking_record import BookingRecord
from cinemaflix.domain.entities.user_session import UserSession
from cinemaflix.domain.entities.workflow_step import PaymentMethod
from cinemaflix.domain.selection_set import SelectionSet


class BookingSubmission:
    def __init__(self, booking_service: BookingServicePort) -> None:
        self._booking_service = booking_service
        self._logger = logging.getLogger(__name__)

    async def submit(self, selection: SelectionSet, showtime_id: str, session: UserSession | None) -> BookingRecord:
        """
        Send the selected seats to the booking service and return its record.
        The selection itself is never modified here.

        Raises:
            ValueError: no session or empty selection.
            AuthError, SeatConflictError, TransientError: from the booking service.
        """
        if session is None:
            raise ValueError("Cannot submit a booking without a session")
        if selection.is_empty():
            raise ValueError("Cannot submit a booking without seats")

        seat_ids = selection.seat_ids
        self._logger.info(
            "Submitting booking",
            extra={"showtime_id": showtime_id, "seat_count": len(seat_ids)},
        )
        record = await self._booking_service.create_booking(
            showtime_id=showtime_id,
            seat_ids=seat_ids,
            user_id=session.user_id,
        )
        self._logger.info("Booking created", extra={"booking_id": record.booking_id, "showtime_id": showtime_id})
        return record

    async def pay(
        self,
        booking: BookingRecord,
        method: PaymentMethod,
        amount: Decimal,
        session: UserSession | None,
    ) -> BookingRecord:
        """Confirm payment for a pending booking. Already paid bookings are returned as they are."""
        if session is None:
            raise ValueError("Cannot pay for a booking without a session")
        if booking.is_paid:
            return booking

        transaction_id = f"TXN{uuid.uuid4().hex[:12].upper()}"
        self._logger.info(
            "Confirming payment",
            extra={"booking_id": booking.booking_id, "action": method.value},
        )
        return await self._booking_service.confirm_payment(
            booking_id=booking.lookup_id,
            payment_method=method.value,
            paid_amount=amount,
            transaction_id=transaction_id,
            user_id=session.user_id,
        )
