from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from cinemaflix.application.exceptions import SeatConflictError, ShowtimeNotFoundError, TransientError
from cinemaflix.domain.entities.booking_record import BookedSeat, BookingRecord
from cinemaflix.domain.entities.seat import Seat, SeatStatus
from cinemaflix.domain.entities.showtime import ShowtimeDetails, Theater
from cinemaflix.domain.pricing import compute_pricing

DEMO_SHOWTIME_ID = "demo-showtime"


@dataclass
class _Showtime:
    details: ShowtimeDetails
    bookings: list[str] = field(default_factory=list)


class InMemorySeatInventory:
    """
    Seat inventory shared by the mock catalog and mock booking service.
    Booking is all-or-nothing: one unavailable seat fails the whole request.
    """

    def __init__(self) -> None:
        self._showtimes: dict[str, _Showtime] = {}
        self._bookings: dict[str, BookingRecord] = {}
        self._users: dict[str, tuple[str | None, str | None]] = {}
        self._lock = asyncio.Lock()
        self._logger = logging.getLogger(__name__)

    def add_showtime(self, details: ShowtimeDetails) -> None:
        self._showtimes[details.showtime_id] = _Showtime(details=details)

    def register_user(self, user_id: str, name: str | None = None, email: str | None = None) -> None:
        self._users[user_id] = (name, email)

    def get_showtime(self, showtime_id: str) -> ShowtimeDetails:
        entry = self._showtimes.get(showtime_id)
        if entry is None:
            raise ShowtimeNotFoundError(showtime_id)
        return entry.details

    def get_booking(self, booking_id: str) -> BookingRecord | None:
        return self._bookings.get(booking_id)

    def set_seat_status(self, showtime_id: str, seat_ids: list[str], status: SeatStatus) -> None:
        entry = self._showtimes.get(showtime_id)
        if entry is None:
            raise ShowtimeNotFoundError(showtime_id)
        entry.details = entry.details.with_status(seat_ids, status)

    async def book(self, showtime_id: str, seat_ids: list[str], user_id: str) -> BookingRecord:
        async with self._lock:
            entry = self._showtimes.get(showtime_id)
            if entry is None:
                raise ShowtimeNotFoundError(showtime_id)

            seats: list[Seat] = []
            unavailable: list[str] = []
            for seat_id in seat_ids:
                seat = entry.details.get_seat(seat_id)
                if seat is None or not seat.is_available:
                    unavailable.append(seat_id)
                else:
                    seats.append(seat)
            if unavailable:
                raise SeatConflictError(unavailable)

            entry.details = entry.details.with_status(seat_ids, SeatStatus.BOOKED)
            name, email = self._users.get(user_id, (None, None))
            record = BookingRecord(
                booking_id=_booking_id(),
                seats=tuple(
                    BookedSeat(
                        seat_id=s.seat_id,
                        row_id=s.row_id,
                        seat_number=s.seat_number,
                        seat_type=s.seat_type,
                        price=s.price,
                    )
                    for s in seats
                ),
                show_time=entry.details.show_time,
                theater_name=entry.details.theater.name,
                customer_name=name,
                customer_email=email,
                booking_status="confirmed",
                payment_status="pending",
                total_amount=compute_pricing(seats).rounded().total,
            )
            entry.bookings.append(record.booking_id)
            self._bookings[record.booking_id] = record
            self._logger.info(
                "Seats booked",
                extra={"showtime_id": showtime_id, "booking_id": record.booking_id, "seat_count": len(seats)},
            )
            return record

    async def confirm_payment(
        self,
        booking_id: str,
        payment_method: str,
        paid_amount: Decimal,
        transaction_id: str,
    ) -> BookingRecord:
        """Settle a pending booking. Unknown or already paid bookings answer like a 404."""
        async with self._lock:
            record = self._bookings.get(booking_id)
            if record is None or record.payment_status != "pending":
                raise TransientError(status_code=404)

            paid = replace(
                record,
                payment_status="completed",
                payment_method=payment_method,
                transaction_id=transaction_id,
                paid_amount=paid_amount,
            )
            self._bookings[booking_id] = paid
            self._logger.info(
                "Payment confirmed",
                extra={"booking_id": booking_id, "status": paid.payment_status},
            )
            return paid


def _booking_id() -> str:
    return f"BK{uuid.uuid4().hex[:10].upper()}"


def build_demo_showtime(showtime_id: str = DEMO_SHOWTIME_ID) -> ShowtimeDetails:
    """Two premium rows and six regular rows of twelve seats, ids like A1..H12."""
    layout = [("A", "premium"), ("B", "premium")] + [(row, "regular") for row in "CDEFGH"]
    prices = {"premium": Decimal("350"), "regular": Decimal("200")}
    rows: dict[str, tuple[Seat, ...]] = {}
    for row_id, seat_type in layout:
        rows[row_id] = tuple(
            Seat(
                seat_id=f"{row_id}{n}",
                seat_number=n,
                price=prices[seat_type],
                row_id=row_id,
                seat_type=seat_type,
            )
            for n in range(1, 13)
        )
    details = ShowtimeDetails(
        showtime_id=showtime_id,
        theater=Theater(name="CinemaFlix Downtown", address="12 Market Street", theater_id="demo-theater"),
        show_time=datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0) + timedelta(days=1),
        rows=rows,
    )
    return details.with_status(["E6", "E7"], SeatStatus.BOOKED).with_status(["H1"], SeatStatus.MAINTENANCE)


def build_demo_inventory() -> InMemorySeatInventory:
    inventory = InMemorySeatInventory()
    inventory.add_showtime(build_demo_showtime())
    return inventory
