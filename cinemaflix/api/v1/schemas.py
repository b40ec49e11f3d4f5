from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from cinemaflix.application.use_cases.booking_workflow import WorkflowResult, WorkflowView
from cinemaflix.domain.entities.booking_record import BookingRecord
from cinemaflix.domain.entities.workflow_step import PaymentMethod, WorkflowStep
from cinemaflix.domain.pricing import PricingBreakdown
from cinemaflix.domain.seat_view import SEAT_LEGEND, SeatRenderState


class CreateWorkflowRequestSchema(BaseModel):
    showtime_id: str = Field(min_length=1)


class ChangeShowtimeRequestSchema(BaseModel):
    showtime_id: str = Field(min_length=1)


class PaymentMethodRequestSchema(BaseModel):
    payment_method: PaymentMethod


class SeatSchema(BaseModel):
    seat_id: str
    seat_number: int
    price: Decimal
    seat_type: str | None = None
    state: SeatRenderState
    selectable: bool


class TheaterSchema(BaseModel):
    name: str
    address: str | None = None


class PricingSchema(BaseModel):
    base_price: Decimal
    convenience_fee: Decimal
    tax: Decimal
    total: Decimal

    @classmethod
    def from_domain(cls, pricing: PricingBreakdown) -> "PricingSchema":
        rounded = pricing.rounded()
        return cls(
            base_price=rounded.base_price,
            convenience_fee=rounded.convenience_fee,
            tax=rounded.tax,
            total=rounded.total,
        )


class BookingSchema(BaseModel):
    booking_id: str
    lookup_id: str
    seat_ids: list[str]
    show_time: datetime | None = None
    theater_name: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    booking_status: str | None = None
    payment_status: str | None = None
    total_amount: Decimal | None = None
    payment_method: str | None = None
    transaction_id: str | None = None
    paid_amount: Decimal | None = None

    @classmethod
    def from_domain(cls, record: BookingRecord) -> "BookingSchema":
        return cls(
            booking_id=record.booking_id,
            lookup_id=record.lookup_id,
            seat_ids=list(record.seat_ids),
            show_time=record.show_time,
            theater_name=record.theater_name,
            customer_name=record.customer_name,
            customer_email=record.customer_email,
            booking_status=record.booking_status,
            payment_status=record.payment_status,
            total_amount=record.total_amount,
            payment_method=record.payment_method,
            transaction_id=record.transaction_id,
            paid_amount=record.paid_amount,
        )


class WorkflowViewSchema(BaseModel):
    workflow_id: str
    showtime_id: str
    step: WorkflowStep
    theater: TheaterSchema | None = None
    show_time: datetime | None = None
    rows: dict[str, list[SeatSchema]] = Field(default_factory=dict)
    legend: dict[str, str] = Field(default_factory=dict)
    selected_seat_ids: list[str] = Field(default_factory=list)
    max_seats: int
    pricing: PricingSchema
    payment_method: PaymentMethod
    processing: bool
    booking: BookingSchema | None = None

    @classmethod
    def from_domain(cls, view: WorkflowView) -> "WorkflowViewSchema":
        rows = {
            row: [
                SeatSchema(
                    seat_id=cell.seat.seat_id,
                    seat_number=cell.seat.seat_number,
                    price=cell.seat.price,
                    seat_type=cell.seat.seat_type,
                    state=cell.state,
                    selectable=cell.selectable,
                )
                for cell in cells
            ]
            for row, cells in view.seat_map.items()
        }
        return cls(
            workflow_id=view.workflow_id,
            showtime_id=view.showtime_id,
            step=view.step,
            theater=TheaterSchema(name=view.showtime.theater.name, address=view.showtime.theater.address)
            if view.showtime
            else None,
            show_time=view.showtime.show_time if view.showtime else None,
            rows=rows,
            legend={state.value: label for state, label in SEAT_LEGEND.items()},
            selected_seat_ids=[seat.seat_id for seat in view.selected_seats],
            max_seats=view.max_seats,
            pricing=PricingSchema.from_domain(view.pricing),
            payment_method=view.payment_method,
            processing=view.processing,
            booking=BookingSchema.from_domain(view.booking) if view.booking else None,
        )


class WorkflowResponseSchema(BaseModel):
    action: str
    notice: str | None = None
    login_url: str | None = None
    conflicting_seat_ids: list[str] = Field(default_factory=list)
    workflow: WorkflowViewSchema

    @classmethod
    def build(cls, result: WorkflowResult, view: WorkflowView) -> "WorkflowResponseSchema":
        return cls(
            action=result.action,
            notice=result.notice,
            login_url=result.login_url,
            conflicting_seat_ids=list(result.conflicting_seat_ids),
            workflow=WorkflowViewSchema.from_domain(view),
        )
