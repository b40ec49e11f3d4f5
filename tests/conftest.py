"""Shared fixtures and in-memory collaborators for the booking tests."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from cinemaflix.application.ports.booking_service import BookingServicePort
from cinemaflix.application.ports.catalog import CatalogPort
from cinemaflix.application.use_cases.auth_gate import AuthGate
from cinemaflix.application.use_cases.booking_workflow import BookingWorkflow
from cinemaflix.application.use_cases.submit_booking import BookingSubmission
from cinemaflix.domain.entities.booking_record import BookedSeat, BookingRecord
from cinemaflix.domain.entities.seat import Seat, SeatStatus
from cinemaflix.domain.entities.showtime import ShowtimeDetails
from cinemaflix.domain.entities.user_session import UserSession
from cinemaflix.infrastructure.booking.mock_booking_service import MockBookingService
from cinemaflix.infrastructure.catalog.mock_catalog import MockCatalog
from cinemaflix.infrastructure.identity.static_identity import StaticIdentity
from cinemaflix.infrastructure.inventory.seat_inventory import (
    DEMO_SHOWTIME_ID,
    InMemorySeatInventory,
    build_demo_inventory,
)


def make_seat(seat_id: str, price: str = "10", status: SeatStatus = SeatStatus.AVAILABLE) -> Seat:
    return Seat(
        seat_id=seat_id,
        seat_number=int(seat_id[1:]),
        price=Decimal(price),
        status=status,
        row_id=seat_id[0],
    )


def make_record(booking_id: str = "BK123", seat_ids: tuple[str, ...] = ("A1",)) -> BookingRecord:
    return BookingRecord(
        booking_id=booking_id,
        seats=tuple(BookedSeat(seat_id=s) for s in seat_ids),
        show_time=datetime(2030, 5, 1, 19, 30, tzinfo=timezone.utc),
        theater_name="CinemaFlix Downtown",
        customer_name="Ada Lovelace",
        customer_email="ada@example.com",
        payment_status="pending",
    )


class ScriptedBookingService(BookingServicePort):
    """
    Booking service that raises queued errors, then returns `record`. Optionally waits on `gate`.
    Payments raise queued `payment_errors`, then return `record` marked paid (kept as `paid`).
    """

    def __init__(
        self,
        record: BookingRecord | None = None,
        errors: list[Exception] | None = None,
        payment_errors: list[Exception] | None = None,
    ) -> None:
        self.record = record or make_record()
        self.errors = list(errors or [])
        self.payment_errors = list(payment_errors or [])
        self.gate: asyncio.Event | None = None
        self.calls: list[tuple[str, list[str], str]] = []
        self.payments: list[tuple[str, str, Decimal, str]] = []
        self.paid: BookingRecord | None = None

    async def create_booking(self, showtime_id: str, seat_ids: list[str], user_id: str) -> BookingRecord:
        self.calls.append((showtime_id, list(seat_ids), user_id))
        if self.gate is not None:
            await self.gate.wait()
        if self.errors:
            raise self.errors.pop(0)
        return self.record

    async def confirm_payment(
        self,
        booking_id: str,
        payment_method: str,
        paid_amount: Decimal,
        transaction_id: str,
        user_id: str,
    ) -> BookingRecord:
        self.payments.append((booking_id, payment_method, paid_amount, user_id))
        if self.payment_errors:
            raise self.payment_errors.pop(0)
        self.paid = replace(
            self.record,
            payment_status="completed",
            payment_method=payment_method,
            transaction_id=transaction_id,
            paid_amount=paid_amount,
        )
        return self.paid

    async def get_booking(self, booking_id: str, user_id: str) -> BookingRecord | None:
        return self.record if booking_id == self.record.booking_id else None


class GatedCatalog(CatalogPort):
    """Catalog that holds every lookup until `gate` is set."""

    def __init__(self, inner: CatalogPort) -> None:
        self._inner = inner
        self.gate = asyncio.Event()

    async def get_showtime_details(self, showtime_id: str) -> ShowtimeDetails:
        await self.gate.wait()
        return await self._inner.get_showtime_details(showtime_id)


@pytest.fixture
def inventory() -> InMemorySeatInventory:
    return build_demo_inventory()


@pytest.fixture
def user() -> UserSession:
    return UserSession(user_id="google-123", name="Ada Lovelace", email="ada@example.com")


@pytest.fixture
def identity(user: UserSession) -> StaticIdentity:
    return StaticIdentity(session=user)


@pytest.fixture
def build_workflow(inventory: InMemorySeatInventory, identity: StaticIdentity):
    def _build(
        booking_service: BookingServicePort | None = None,
        catalog: CatalogPort | None = None,
        showtime_id: str = DEMO_SHOWTIME_ID,
    ) -> BookingWorkflow:
        return BookingWorkflow(
            showtime_id=showtime_id,
            catalog=catalog or MockCatalog(inventory),
            submission=BookingSubmission(booking_service or MockBookingService(inventory)),
            auth_gate=AuthGate(identity),
        )

    return _build
