from __future__ import annotations

import logging
from decimal import Decimal

from pydantic import ValidationError

from cinemaflix.application.dto.booking_payload import (
    BookingResponseDTO,
    ConfirmPaymentRequest,
    CreateBookingRequest,
    UserRef,
)
from cinemaflix.application.exceptions import ServiceContractError, TransientError
from cinemaflix.application.ports.booking_service import BookingServicePort
from cinemaflix.domain.entities.booking_record import BookingRecord
from cinemaflix.infrastructure.http.api_client import ApiClient


class HttpBookingService(BookingServicePort):
    """Booking endpoints of the cinema backend. Every call carries the user's googleId in the body."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    async def create_booking(self, showtime_id: str, seat_ids: list[str], user_id: str) -> BookingRecord:
        request = CreateBookingRequest(showtime_id=showtime_id, seat_ids=seat_ids, google_id=user_id)
        data = await self._client.request("POST", "/api/bookings", json=request.model_dump(by_alias=True))
        return self._parse(data)

    async def confirm_payment(
        self,
        booking_id: str,
        payment_method: str,
        paid_amount: Decimal,
        transaction_id: str,
        user_id: str,
    ) -> BookingRecord:
        request = ConfirmPaymentRequest(
            google_id=user_id,
            transaction_id=transaction_id,
            payment_method=payment_method,
            paid_amount=float(paid_amount),
        )
        await self._client.request("PUT", f"/api/bookings/{booking_id}/payment", json=request.model_dump(by_alias=True))

        # The payment endpoint only acknowledges; the updated booking is read back.
        record = await self.get_booking(booking_id, user_id)
        if record is None:
            self._logger.error("Paid booking not found on read back", extra={"booking_id": booking_id})
            raise ServiceContractError()
        return record

    async def get_booking(self, booking_id: str, user_id: str) -> BookingRecord | None:
        body = UserRef(google_id=user_id).model_dump(by_alias=True)
        try:
            data = await self._client.request("GET", f"/api/bookings/{booking_id}", json=body)
        except TransientError as e:
            if e.status_code == 404:
                return None
            raise
        return self._parse(data)

    def _parse(self, data: object) -> BookingRecord:
        try:
            return BookingResponseDTO.model_validate(data).to_domain()
        except ValidationError as e:
            self._logger.error("Malformed booking payload", extra={"error": str(e)})
            raise ServiceContractError() from e
