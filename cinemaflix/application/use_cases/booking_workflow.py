from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from cinemaflix.application.exceptions import AuthError, BookingError, SeatConflictError, TransientError
from cinemaflix.application.ports.catalog import CatalogPort
from cinemaflix.application.use_cases.auth_gate import AuthGate
from cinemaflix.application.use_cases.submit_booking import BookingSubmission
from cinemaflix.domain.entities.booking_record import BookingRecord
from cinemaflix.domain.entities.seat import Seat, SeatStatus
from cinemaflix.domain.entities.showtime import ShowtimeDetails
from cinemaflix.domain.entities.workflow_step import PaymentMethod, WorkflowStep
from cinemaflix.domain.pricing import PricingBreakdown, compute_pricing
from cinemaflix.domain.seat_view import SeatCell, render_seat_map
from cinemaflix.domain.selection_set import SelectionSet, ToggleOutcome

SELECT_SEAT_NOTICE = "Please select at least one seat"
LOGIN_NOTICE = "Please login to continue booking"
BUSY_NOTICE = "Your request is still being processed"
NOT_LOADED_NOTICE = "Seat layout is not loaded yet"
PAYMENT_PENDING_NOTICE = "Your seats are reserved. Complete the payment to confirm them"

_TOGGLE_ACTIONS = {
    ToggleOutcome.ADDED: "seat_added",
    ToggleOutcome.REMOVED: "seat_removed",
    ToggleOutcome.IGNORED: "seat_ignored",
    ToggleOutcome.CAPACITY_EXCEEDED: "capacity_exceeded",
}


@dataclass(frozen=True)
class WorkflowResult:
    action: str
    step: WorkflowStep
    notice: str | None = None
    login_url: str | None = None
    conflicting_seat_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class WorkflowView:
    workflow_id: str
    showtime_id: str
    step: WorkflowStep
    showtime: ShowtimeDetails | None
    seat_map: dict[str, list[SeatCell]]
    selected_seats: tuple[Seat, ...]
    max_seats: int
    pricing: PricingBreakdown
    payment_method: PaymentMethod
    processing: bool
    booking: BookingRecord | None


class BookingWorkflow:
    """
    Seat pick -> payment -> confirmation for one showtime in one browser.

    Every operation returns a WorkflowResult; user-facing problems are
    reported as notices, never raised. Once `close()` is called, results of
    requests still in flight are dropped without touching the workflow.
    """

    def __init__(
        self,
        showtime_id: str,
        catalog: CatalogPort,
        submission: BookingSubmission,
        auth_gate: AuthGate,
        workflow_id: str | None = None,
        browser_id: str | None = None,
    ) -> None:
        self.workflow_id = workflow_id or uuid.uuid4().hex
        self.browser_id = browser_id
        self._showtime_id = showtime_id
        self._catalog = catalog
        self._submission = submission
        self._auth = auth_gate
        self._selection = SelectionSet()
        self._step = WorkflowStep.SELECTING_SEATS
        self._details: ShowtimeDetails | None = None
        self._booking: BookingRecord | None = None
        self._paid_pricing: PricingBreakdown | None = None
        self._payment_method = PaymentMethod.CARD
        self._processing = False
        self._closed = False
        self._logger = logging.getLogger(__name__)

    @property
    def step(self) -> WorkflowStep:
        return self._step

    @property
    def showtime_id(self) -> str:
        return self._showtime_id

    @property
    def selection(self) -> SelectionSet:
        return self._selection

    @property
    def booking(self) -> BookingRecord | None:
        return self._booking

    @property
    def processing(self) -> bool:
        return self._processing

    @property
    def closed(self) -> bool:
        return self._closed

    async def load(self) -> WorkflowResult:
        """Fetch the seat snapshot for the current showtime."""
        if self._closed:
            return self._discarded("load")
        if self._processing:
            return self._result("busy", notice=BUSY_NOTICE)

        self._processing = True
        try:
            details = await self._catalog.get_showtime_details(self._showtime_id)
        except BookingError as e:
            if self._closed:
                return self._discarded("load")
            self._logger.error(
                "Failed to load seat layout",
                extra={"workflow_id": self.workflow_id, "showtime_id": self._showtime_id, "error": str(e)},
            )
            return self._result("load_failed", notice=str(e))
        except Exception as e:
            if self._closed:
                return self._discarded("load")
            self._logger.exception(
                "Unexpected error loading seat layout",
                extra={"workflow_id": self.workflow_id, "error": str(e)},
            )
            return self._result("load_failed", notice=TransientError.user_message)
        finally:
            if not self._closed:
                self._processing = False

        if self._closed:
            return self._discarded("load")
        self._details = details
        self._logger.info(
            "Seat layout loaded",
            extra={"workflow_id": self.workflow_id, "showtime_id": self._showtime_id},
        )
        return self._result("loaded")

    async def change_showtime(self, showtime_id: str) -> WorkflowResult:
        if self._closed:
            return self._discarded("change_showtime")
        if self._step is not WorkflowStep.SELECTING_SEATS:
            return self._invalid_step("change showtime")
        if self._processing:
            return self._result("busy", notice=BUSY_NOTICE)

        self._showtime_id = showtime_id
        self._selection.clear()
        self._details = None
        return await self.load()

    def toggle_seat(self, seat_id: str) -> WorkflowResult:
        if self._closed:
            return self._discarded("toggle_seat")
        if self._step is not WorkflowStep.SELECTING_SEATS:
            return self._invalid_step("change seats")
        if self._details is None:
            return self._result("not_loaded", notice=NOT_LOADED_NOTICE)

        seat = self._details.get_seat(seat_id)
        if seat is None:
            return self._result("seat_ignored")

        toggled = self._selection.toggle(seat)
        notice = None
        if toggled.outcome is ToggleOutcome.CAPACITY_EXCEEDED:
            notice = f"You can select maximum {self._selection.max_size} seats"
        return self._result(_TOGGLE_ACTIONS[toggled.outcome], notice=notice)

    def advance(self) -> WorkflowResult:
        if self._closed:
            return self._discarded("advance")
        if self._step is not WorkflowStep.SELECTING_SEATS:
            return self._invalid_step("advance")
        if self._selection.is_empty():
            return self._result("selection_required", notice=SELECT_SEAT_NOTICE)
        if not self._auth.is_authenticated():
            redirect = self._auth.request_login()
            return self._result("login_required", notice=LOGIN_NOTICE, login_url=redirect.url)

        self._step = WorkflowStep.PAYING
        self._logger.info(
            "Moved to payment",
            extra={"workflow_id": self.workflow_id, "seat_count": len(self._selection)},
        )
        return self._result("advanced")

    def back(self) -> WorkflowResult:
        if self._closed:
            return self._discarded("back")
        if self._step is not WorkflowStep.PAYING:
            return self._invalid_step("go back")
        if self._processing:
            return self._result("busy", notice=BUSY_NOTICE)
        if self._booking is not None:
            return self._result("payment_pending", notice=PAYMENT_PENDING_NOTICE)

        self._step = WorkflowStep.SELECTING_SEATS
        return self._result("went_back")

    def select_payment_method(self, method: PaymentMethod) -> WorkflowResult:
        if self._closed:
            return self._discarded("select_payment_method")
        if self._step is not WorkflowStep.PAYING:
            return self._invalid_step("choose a payment method")
        if self._processing:
            return self._result("busy", notice=BUSY_NOTICE)

        self._payment_method = PaymentMethod(method)
        return self._result("payment_method_selected")

    async def submit_payment(self) -> WorkflowResult:
        """
        Book the selected seats, then pay for them with the chosen method.

        A booking created by an earlier attempt whose payment failed is
        reused, so a retry only repeats the payment.
        """
        if self._closed:
            return self._discarded("submit_payment")
        if self._step is not WorkflowStep.PAYING:
            return self._invalid_step("pay")
        if self._processing:
            return self._result("busy", notice=BUSY_NOTICE)

        session = self._auth.current_session()
        if session is None:
            redirect = self._auth.request_login()
            return self._result("login_required", notice=AuthError.user_message, login_url=redirect.url)

        pricing = compute_pricing(self._selection)
        self._processing = True
        try:
            if self._booking is None:
                pending = await self._submission.submit(self._selection, self._showtime_id, session)
                if self._closed:
                    return self._discarded("submit_payment")
                self._booking = pending
            record = await self._submission.pay(
                self._booking,
                self._payment_method,
                pricing.rounded().total,
                session,
            )
        except BookingError as e:
            if self._closed:
                return self._discarded("submit_payment")
            return self._submission_failed(e)
        except Exception as e:
            if self._closed:
                return self._discarded("submit_payment")
            self._logger.exception(
                "Unexpected error creating booking",
                extra={"workflow_id": self.workflow_id, "error": str(e)},
            )
            return self._result("submission_failed", notice=TransientError.user_message)
        finally:
            if not self._closed:
                self._processing = False

        if self._closed:
            return self._discarded("submit_payment")
        self._booking = record
        self._paid_pricing = pricing
        self._selection.clear()
        self._step = WorkflowStep.CONFIRMED
        self._logger.info(
            "Booking confirmed",
            extra={"workflow_id": self.workflow_id, "booking_id": record.booking_id, "status": record.payment_status},
        )
        return self._result("booked")

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._logger.info("Workflow closed", extra={"workflow_id": self.workflow_id})

    def view(self) -> WorkflowView:
        seat_map = render_seat_map(self._details, self._selection) if self._details else {}
        pricing = self._paid_pricing if self._step is WorkflowStep.CONFIRMED else None
        return WorkflowView(
            workflow_id=self.workflow_id,
            showtime_id=self._showtime_id,
            step=self._step,
            showtime=self._details,
            seat_map=seat_map,
            selected_seats=self._selection.seats,
            max_seats=self._selection.max_size,
            pricing=pricing or compute_pricing(self._selection),
            payment_method=self._payment_method,
            processing=self._processing,
            booking=self._booking,
        )

    def _submission_failed(self, error: BookingError) -> WorkflowResult:
        extra = {"workflow_id": self.workflow_id, "showtime_id": self._showtime_id, "error": str(error)}

        if isinstance(error, SeatConflictError):
            self._logger.warning("Seats lost to another booking", extra=extra)
            if error.seat_ids:
                self._selection.discard(error.seat_ids)
                if self._details is not None:
                    self._details = self._details.with_status(error.seat_ids, SeatStatus.BOOKED)
            else:
                self._selection.clear()
            self._step = WorkflowStep.SELECTING_SEATS
            return self._result("seat_conflict", notice=str(error), conflicting_seat_ids=error.seat_ids)

        if isinstance(error, AuthError):
            self._logger.warning("Booking rejected, session not accepted", extra=extra)
            redirect = self._auth.request_login()
            return self._result("auth_failed", notice=str(error), login_url=redirect.url)

        self._logger.error("Booking submission failed", extra=extra)
        return self._result("submission_failed", notice=str(error))

    def _invalid_step(self, what: str) -> WorkflowResult:
        return self._result("invalid_step", notice=f"Cannot {what} while {self._step.value.replace('_', ' ')}")

    def _discarded(self, operation: str) -> WorkflowResult:
        self._logger.debug(
            "Dropped result for closed workflow",
            extra={"workflow_id": self.workflow_id, "action": operation},
        )
        return WorkflowResult(action="discarded", step=self._step)

    def _result(self, action: str, **kwargs) -> WorkflowResult:
        return WorkflowResult(action=action, step=self._step, **kwargs)
