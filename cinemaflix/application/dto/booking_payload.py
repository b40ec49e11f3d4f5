from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from cinemaflix.domain.entities.booking_record import BookedSeat, BookingRecord


class UserRef(BaseModel):
    """Identity the backend's auth middleware reads from every booking request body."""

    model_config = ConfigDict(populate_by_name=True)

    google_id: str = Field(alias="googleId", min_length=1)


class CreateBookingRequest(UserRef):
    showtime_id: str
    seat_ids: list[str] = Field(min_length=1)


class ConfirmPaymentRequest(UserRef):
    transaction_id: str
    payment_method: str
    # the backend decodes a JSON number
    paid_amount: float = Field(ge=0)


class BookedSeatPayload(BaseModel):
    seat_id: str
    row_id: str | None = None
    seat_number: int | None = None
    seat_type: str | None = None
    price: Decimal | None = None


class BookingPricingPayload(BaseModel):
    total_amount: Decimal | None = None
    paid_amount: Decimal | None = None


class BookingPayload(BaseModel):
    id: str | None = None
    booking_id: str
    show_time: datetime | None = None
    seats: list[BookedSeatPayload] = Field(default_factory=list)
    user_name: str | None = None
    user_email: str | None = None
    booking_status: str | None = None
    payment_status: str | None = None
    payment_method: str | None = None
    transaction_id: str | None = None
    pricing: BookingPricingPayload | None = None


class BookingTheaterPayload(BaseModel):
    name: str | None = None


class BookingResponseDTO(BaseModel):
    booking: BookingPayload
    theater: BookingTheaterPayload | None = None

    def to_domain(self) -> BookingRecord:
        b = self.booking
        return BookingRecord(
            booking_id=b.booking_id,
            seats=tuple(
                BookedSeat(
                    seat_id=s.seat_id,
                    row_id=s.row_id,
                    seat_number=s.seat_number,
                    seat_type=s.seat_type,
                    price=s.price,
                )
                for s in b.seats
            ),
            show_time=b.show_time,
            theater_name=self.theater.name if self.theater else None,
            customer_name=b.user_name,
            customer_email=b.user_email,
            booking_status=b.booking_status,
            payment_status=b.payment_status,
            total_amount=b.pricing.total_amount if b.pricing else None,
            payment_method=b.payment_method or None,
            transaction_id=b.transaction_id or None,
            paid_amount=b.pricing.paid_amount if b.pricing and b.pricing.paid_amount else None,
            record_id=b.id or None,
        )
