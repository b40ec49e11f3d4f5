from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class BookedSeat:
    seat_id: str
    row_id: str | None = None
    seat_number: int | None = None
    seat_type: str | None = None
    price: Decimal | None = None


@dataclass(frozen=True)
class BookingRecord:
    """Server-issued booking. Never built or altered locally."""

    booking_id: str
    seats: tuple[BookedSeat, ...]
    show_time: datetime | None
    theater_name: str | None
    customer_name: str | None
    customer_email: str | None
    booking_status: str | None = None  # confirmed, cancelled, expired
    payment_status: str | None = None  # pending, completed, failed, refunded
    total_amount: Decimal | None = None
    payment_method: str | None = None
    transaction_id: str | None = None
    paid_amount: Decimal | None = None
    record_id: str | None = None  # backend document id, used in /api/bookings/{id}

    @property
    def seat_ids(self) -> tuple[str, ...]:
        return tuple(seat.seat_id for seat in self.seats)

    @property
    def lookup_id(self) -> str:
        return self.record_id or self.booking_id

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "completed"
