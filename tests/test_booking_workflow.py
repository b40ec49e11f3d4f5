"""
Tests for the seat selection -> payment -> confirmation workflow.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal

from cinemaflix.application.exceptions import AuthError, SeatConflictError, TransientError
from cinemaflix.domain.entities.seat import SeatStatus
from cinemaflix.domain.entities.workflow_step import PaymentMethod, WorkflowStep
from cinemaflix.domain.seat_view import SeatRenderState
from cinemaflix.infrastructure.catalog.mock_catalog import MockCatalog
from conftest import GatedCatalog, ScriptedBookingService, make_record


async def _loaded(workflow, *seat_ids: str):
    result = await workflow.load()
    assert result.action == "loaded"
    for seat_id in seat_ids:
        assert workflow.toggle_seat(seat_id).action == "seat_added"
    return workflow


async def _paying(workflow, *seat_ids: str):
    await _loaded(workflow, *seat_ids)
    assert workflow.advance().action == "advanced"
    return workflow


def test_workflow_starts_selecting_seats(build_workflow):
    workflow = build_workflow()
    assert workflow.step is WorkflowStep.SELECTING_SEATS
    assert workflow.toggle_seat("A1").action == "not_loaded"


def test_toggle_unknown_or_booked_seat_is_ignored(build_workflow):
    async def scenario():
        workflow = await _loaded(build_workflow())
        assert workflow.toggle_seat("Z99").action == "seat_ignored"
        assert workflow.toggle_seat("E6").action == "seat_ignored"
        assert workflow.selection.is_empty()

    asyncio.run(scenario())


def test_capacity_notice_on_eleventh_seat(build_workflow):
    async def scenario():
        workflow = await _loaded(build_workflow(), *[f"C{n}" for n in range(1, 11)])
        result = workflow.toggle_seat("D1")
        assert result.action == "capacity_exceeded"
        assert result.notice == "You can select maximum 10 seats"
        assert len(workflow.selection) == 10

    asyncio.run(scenario())


def test_advance_with_empty_selection_is_refused(build_workflow):
    async def scenario():
        workflow = await _loaded(build_workflow())
        result = workflow.advance()
        assert result.action == "selection_required"
        assert result.notice == "Please select at least one seat"
        assert workflow.step is WorkflowStep.SELECTING_SEATS

    asyncio.run(scenario())


def test_advance_without_session_requests_login_once(build_workflow, identity):
    """Signed-out advance keeps the step and asks for exactly one redirect."""
    identity.session = None

    async def scenario():
        workflow = await _loaded(build_workflow(), "A1")
        result = workflow.advance()
        assert result.action == "login_required"
        assert result.login_url == "http://localhost:8080/auth/google/login"
        assert workflow.step is WorkflowStep.SELECTING_SEATS
        assert identity.login_requests == 1
        assert workflow.selection.seat_ids == ["A1"]

    asyncio.run(scenario())


def test_session_after_redirect_lets_workflow_advance(build_workflow, identity, user):
    identity.session = None

    async def scenario():
        workflow = await _loaded(build_workflow(), "A1")
        assert workflow.advance().action == "login_required"
        identity.session = user
        assert workflow.advance().action == "advanced"
        assert workflow.step is WorkflowStep.PAYING

    asyncio.run(scenario())


def test_back_returns_to_seat_selection_once(build_workflow):
    async def scenario():
        workflow = await _paying(build_workflow(), "A1")
        assert workflow.toggle_seat("A2").action == "invalid_step"

        assert workflow.back().action == "went_back"
        assert workflow.step is WorkflowStep.SELECTING_SEATS
        assert workflow.back().action == "invalid_step"
        assert workflow.selection.seat_ids == ["A1"]

    asyncio.run(scenario())


def test_payment_method_only_while_paying(build_workflow):
    async def scenario():
        workflow = await _loaded(build_workflow(), "A1")
        assert workflow.select_payment_method(PaymentMethod.UPI).action == "invalid_step"
        workflow.advance()
        assert workflow.select_payment_method(PaymentMethod.UPI).action == "payment_method_selected"
        assert workflow.view().payment_method is PaymentMethod.UPI

    asyncio.run(scenario())


def test_successful_payment_confirms_with_service_record(build_workflow, user):
    """The confirmation holds the record exactly as the booking service returned it."""
    service = ScriptedBookingService(record=make_record("BK42", ("A1", "A2")))

    async def scenario():
        workflow = await _paying(build_workflow(booking_service=service), "A1", "A2")
        expected_total = workflow.view().pricing

        result = await workflow.submit_payment()

        assert result.action == "booked"
        assert workflow.step is WorkflowStep.CONFIRMED
        assert workflow.booking is service.paid
        assert workflow.booking.booking_id == "BK42"
        assert workflow.booking.payment_status == "completed"
        assert service.calls == [("demo-showtime", ["A1", "A2"], user.user_id)]
        assert service.payments == [("BK42", "card", Decimal("842.52"), user.user_id)]
        assert workflow.selection.is_empty()
        assert workflow.view().pricing == expected_total
        assert workflow.advance().action == "invalid_step"
        assert workflow.back().action == "invalid_step"

    asyncio.run(scenario())


def test_booking_against_inventory_marks_seats_booked(build_workflow, inventory):
    async def scenario():
        workflow = await _paying(build_workflow(), "B3")
        result = await workflow.submit_payment()
        assert result.action == "booked"
        assert inventory.get_showtime("demo-showtime").get_seat("B3").status is SeatStatus.BOOKED
        assert inventory.get_booking(workflow.booking.booking_id) is workflow.booking
        assert workflow.booking.payment_status == "completed"
        assert workflow.booking.paid_amount == Decimal("421.26")

    asyncio.run(scenario())


def test_seat_conflict_drops_lost_seats_and_returns_to_selection(build_workflow, inventory):
    """A seat taken by another booker is removed locally and shown as booked."""

    async def scenario():
        workflow = await _paying(build_workflow(), "A1", "A2")
        await inventory.book("demo-showtime", ["A2"], "someone-else")

        result = await workflow.submit_payment()

        assert result.action == "seat_conflict"
        assert result.conflicting_seat_ids == ("A2",)
        assert workflow.step is WorkflowStep.SELECTING_SEATS
        assert workflow.booking is None
        assert workflow.selection.seat_ids == ["A1"]
        cells = {cell.seat.seat_id: cell for cell in workflow.view().seat_map["A"]}
        assert cells["A2"].state is SeatRenderState.BOOKED
        assert workflow.toggle_seat("A2").action == "seat_ignored"

    asyncio.run(scenario())


def test_unnamed_seat_conflict_clears_selection(build_workflow):
    service = ScriptedBookingService(errors=[SeatConflictError()])

    async def scenario():
        workflow = await _paying(build_workflow(booking_service=service), "A1", "A2")
        result = await workflow.submit_payment()
        assert result.action == "seat_conflict"
        assert workflow.step is WorkflowStep.SELECTING_SEATS
        assert workflow.selection.is_empty()

    asyncio.run(scenario())


def test_auth_error_keeps_payment_step_and_selection(build_workflow, identity):
    service = ScriptedBookingService(errors=[AuthError()])

    async def scenario():
        workflow = await _paying(build_workflow(booking_service=service), "A1")
        result = await workflow.submit_payment()

        assert result.action == "auth_failed"
        assert result.notice == "Please login to complete booking"
        assert result.login_url is not None
        assert workflow.step is WorkflowStep.PAYING
        assert workflow.selection.seat_ids == ["A1"]
        assert workflow.booking is None
        assert not workflow.processing

    asyncio.run(scenario())


def test_transient_error_can_be_retried(build_workflow):
    service = ScriptedBookingService(errors=[TransientError()])

    async def scenario():
        workflow = await _paying(build_workflow(booking_service=service), "A1")

        failed = await workflow.submit_payment()
        assert failed.action == "submission_failed"
        assert workflow.step is WorkflowStep.PAYING
        assert workflow.selection.seat_ids == ["A1"]

        retried = await workflow.submit_payment()
        assert retried.action == "booked"
        assert len(service.calls) == 2

    asyncio.run(scenario())


def test_unexpected_error_is_reported_not_raised(build_workflow):
    service = ScriptedBookingService(errors=[KeyError("booking")])

    async def scenario():
        workflow = await _paying(build_workflow(booking_service=service), "A1")
        result = await workflow.submit_payment()
        assert result.action == "submission_failed"
        assert result.notice == TransientError.user_message
        assert workflow.step is WorkflowStep.PAYING

    asyncio.run(scenario())


def test_payment_without_session_never_reaches_service(build_workflow, identity):
    service = ScriptedBookingService()

    async def scenario():
        workflow = await _paying(build_workflow(booking_service=service), "A1")
        identity.session = None

        result = await workflow.submit_payment()

        assert result.action == "login_required"
        assert service.calls == []
        assert workflow.step is WorkflowStep.PAYING

    asyncio.run(scenario())


def test_second_submission_while_processing_is_refused(build_workflow):
    service = ScriptedBookingService()

    async def scenario():
        service.gate = asyncio.Event()
        workflow = await _paying(build_workflow(booking_service=service), "A1")

        first = asyncio.create_task(workflow.submit_payment())
        await asyncio.sleep(0)
        assert workflow.processing

        second = await workflow.submit_payment()
        assert second.action == "busy"
        assert workflow.back().action == "busy"

        service.gate.set()
        assert (await first).action == "booked"
        assert len(service.calls) == 1
        assert not workflow.processing

    asyncio.run(scenario())


def test_closed_workflow_discards_in_flight_submission(build_workflow):
    service = ScriptedBookingService()

    async def scenario():
        service.gate = asyncio.Event()
        workflow = await _paying(build_workflow(booking_service=service), "A1")

        pending = asyncio.create_task(workflow.submit_payment())
        await asyncio.sleep(0)
        workflow.close()
        service.gate.set()

        result = await pending
        assert result.action == "discarded"
        assert workflow.step is WorkflowStep.PAYING
        assert workflow.booking is None
        assert workflow.selection.seat_ids == ["A1"]

    asyncio.run(scenario())


def test_closed_workflow_discards_in_flight_load(build_workflow, inventory):
    async def scenario():
        catalog = GatedCatalog(MockCatalog(inventory))
        workflow = build_workflow(catalog=catalog)

        pending = asyncio.create_task(workflow.load())
        await asyncio.sleep(0)
        workflow.close()
        catalog.gate.set()

        assert (await pending).action == "discarded"
        assert workflow.view().showtime is None

    asyncio.run(scenario())


def test_missing_showtime_reports_load_failure(build_workflow):
    async def scenario():
        workflow = build_workflow(showtime_id="nope")
        result = await workflow.load()
        assert result.action == "load_failed"
        assert "Showtime not found" in result.notice
        assert not workflow.processing

    asyncio.run(scenario())


def test_changing_showtime_clears_selection(build_workflow, inventory):
    from cinemaflix.infrastructure.inventory.seat_inventory import build_demo_showtime

    inventory.add_showtime(build_demo_showtime("late-show"))

    async def scenario():
        workflow = await _loaded(build_workflow(), "A1")
        result = await workflow.change_showtime("late-show")
        assert result.action == "loaded"
        assert workflow.showtime_id == "late-show"
        assert workflow.selection.is_empty()

    asyncio.run(scenario())


def test_never_paying_with_empty_selection(build_workflow):
    """Deselecting everything and advancing again stays in seat selection."""

    async def scenario():
        workflow = await _paying(build_workflow(), "A1")
        workflow.back()
        assert workflow.toggle_seat("A1").action == "seat_removed"
        assert workflow.advance().action == "selection_required"
        assert workflow.step is WorkflowStep.SELECTING_SEATS

    asyncio.run(scenario())


def test_chosen_payment_method_is_sent_with_rounded_total(build_workflow, user):
    service = ScriptedBookingService()

    async def scenario():
        workflow = await _paying(build_workflow(booking_service=service), "C1")
        workflow.select_payment_method(PaymentMethod.NETBANKING)

        assert (await workflow.submit_payment()).action == "booked"
        # 200 + 4.00 fee + 36.72 tax
        assert service.payments == [("BK123", "netbanking", Decimal("240.72"), user.user_id)]
        assert workflow.booking.payment_method == "netbanking"
        assert workflow.booking.transaction_id.startswith("TXN")

    asyncio.run(scenario())


def test_failed_payment_keeps_booking_and_retries_payment_only(build_workflow):
    """Seats stay booked after a failed payment; a retry pays for the same booking."""
    service = ScriptedBookingService(payment_errors=[TransientError()])

    async def scenario():
        workflow = await _paying(build_workflow(booking_service=service), "A1")

        failed = await workflow.submit_payment()
        assert failed.action == "submission_failed"
        assert workflow.step is WorkflowStep.PAYING
        assert workflow.booking is service.record
        assert workflow.selection.seat_ids == ["A1"]
        assert workflow.back().action == "payment_pending"

        assert (await workflow.submit_payment()).action == "booked"
        assert len(service.calls) == 1
        assert len(service.payments) == 2
        assert workflow.booking is service.paid

    asyncio.run(scenario())


def test_payment_auth_error_asks_to_login_again(build_workflow):
    service = ScriptedBookingService(payment_errors=[AuthError()])

    async def scenario():
        workflow = await _paying(build_workflow(booking_service=service), "A1")
        result = await workflow.submit_payment()
        assert result.action == "auth_failed"
        assert result.login_url is not None
        assert workflow.booking is service.record

    asyncio.run(scenario())


def test_seat_taken_between_load_and_payment_is_a_conflict(build_workflow, inventory):
    """The inventory is authoritative: a seat blocked after the map was loaded fails the booking."""

    async def scenario():
        workflow = await _paying(build_workflow(), "D4", "D5")
        inventory.set_seat_status("demo-showtime", ["D5"], SeatStatus.BLOCKED)

        result = await workflow.submit_payment()

        assert result.action == "seat_conflict"
        assert result.conflicting_seat_ids == ("D5",)
        assert workflow.selection.seat_ids == ["D4"]
        assert inventory.get_showtime("demo-showtime").get_seat("D4").is_available

    asyncio.run(scenario())
