#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP, no identity provider).

Usage:
  python3 scripts/book_local.py [--signed-out]

What it does:
- Loads the demo showtime from the in-memory seat inventory
- Feeds your commands through the same BookingWorkflow the API uses
- Prints the seat map, selection, pricing and any notice after each step
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cinemaflix.application.use_cases.auth_gate import AuthGate
from cinemaflix.application.use_cases.booking_workflow import BookingWorkflow, WorkflowResult
from cinemaflix.application.use_cases.submit_booking import BookingSubmission
from cinemaflix.domain.entities.user_session import UserSession
from cinemaflix.domain.entities.workflow_step import PaymentMethod
from cinemaflix.domain.seat_view import SeatRenderState
from cinemaflix.infrastructure.booking.mock_booking_service import MockBookingService
from cinemaflix.infrastructure.catalog.mock_catalog import MockCatalog
from cinemaflix.infrastructure.identity.static_identity import StaticIdentity
from cinemaflix.infrastructure.inventory.seat_inventory import DEMO_SHOWTIME_ID, build_demo_inventory

SYMBOLS = {
    SeatRenderState.AVAILABLE: ".",
    SeatRenderState.SELECTED: "*",
    SeatRenderState.BOOKED: "x",
    SeatRenderState.BLOCKED: "b",
    SeatRenderState.MAINTENANCE: "m",
}

LOCAL_USER = UserSession(user_id="local-user", name="Local User", email="local@example.com")


def _print_help() -> None:
    print("Commands: <seat id> (toggle), /next, /back, /pay, /method <card|wallet|upi|netbanking>,")
    print("          /login, /map, /help, /quit")


def _print_map(workflow: BookingWorkflow) -> None:
    view = workflow.view()
    print("-" * 60)
    for row, cells in view.seat_map.items():
        print(f"{row:>2} " + " ".join(SYMBOLS[cell.state] for cell in cells))
    print("   . available  * selected  x booked  b blocked  m maintenance")


def _print_status(workflow: BookingWorkflow, result: WorkflowResult) -> None:
    view = workflow.view()
    pricing = view.pricing.rounded()
    print(f"[{result.action}] step={view.step.value} payment={view.payment_method.value}")
    if result.notice:
        print(f"  notice: {result.notice}")
    if result.login_url:
        print(f"  login: {result.login_url}  (type /login to simulate the redirect back)")
    print(f"  seats: {', '.join(s.seat_id for s in view.selected_seats) or '-'}")
    print(
        f"  base {pricing.base_price}  fee {pricing.convenience_fee}  tax {pricing.tax}  total {pricing.total}"
    )
    if view.booking:
        b = view.booking
        print(f"  booking {b.booking_id}: {', '.join(b.seat_ids)} at {b.theater_name} ({b.show_time})")
        print(f"  payment {b.payment_status} via {b.payment_method} ({b.transaction_id})")


async def run(signed_in: bool) -> None:
    inventory = build_demo_inventory()
    inventory.register_user(LOCAL_USER.user_id, LOCAL_USER.name, LOCAL_USER.email)
    identity = StaticIdentity(session=LOCAL_USER if signed_in else None)
    workflow = BookingWorkflow(
        showtime_id=DEMO_SHOWTIME_ID,
        catalog=MockCatalog(inventory),
        submission=BookingSubmission(MockBookingService(inventory)),
        auth_gate=AuthGate(identity),
    )

    print("\nLocal Booking Harness")
    _print_help()
    result = await workflow.load()
    _print_map(workflow)
    _print_status(workflow, result)

    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line:
            continue

        command, _, arg = line.partition(" ")
        if command == "/quit":
            break
        if command == "/help":
            _print_help()
            continue
        if command == "/map":
            _print_map(workflow)
            continue
        if command == "/login":
            identity.session = LOCAL_USER
            print("  signed in as", LOCAL_USER.name)
            continue

        if command == "/next":
            result = workflow.advance()
        elif command == "/back":
            result = workflow.back()
        elif command == "/pay":
            result = await workflow.submit_payment()
        elif command == "/method":
            try:
                result = workflow.select_payment_method(PaymentMethod(arg.strip()))
            except ValueError:
                print("  unknown payment method")
                continue
        else:
            result = workflow.toggle_seat(command.upper())
            _print_map(workflow)

        _print_status(workflow, result)

    workflow.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Drive a booking workflow against in-memory services.")
    parser.add_argument("--signed-out", action="store_true", help="start without a session")
    args = parser.parse_args()
    asyncio.run(run(signed_in=not args.signed_out))


if __name__ == "__main__":
    main()
