from __future__ import annotations

import logging
import uuid
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from cinemaflix.api.v1.schemas import (
    BookingSchema,
    ChangeShowtimeRequestSchema,
    CreateWorkflowRequestSchema,
    PaymentMethodRequestSchema,
    WorkflowResponseSchema,
    WorkflowViewSchema,
)
from cinemaflix.application.exceptions import AuthError, BookingError
from cinemaflix.application.ports.booking_service import BookingServicePort
from cinemaflix.application.ports.workflow_store import WorkflowStorePort
from cinemaflix.application.use_cases.booking_workflow import BookingWorkflow, WorkflowResult
from cinemaflix.core.config import settings
from cinemaflix.wiring.dependencies import get_booking_service, get_workflow_factory, get_workflow_store

router = APIRouter()
logger = logging.getLogger(__name__)

WorkflowFactory = Callable[[str, str], BookingWorkflow]


def browser_id_for(request: Request, response: Response) -> str:
    browser_id = request.cookies.get(settings.BROWSER_COOKIE_NAME)
    if not browser_id:
        browser_id = uuid.uuid4().hex
        response.set_cookie(settings.BROWSER_COOKIE_NAME, browser_id, httponly=True, samesite="lax")
    return browser_id


def _get_workflow(workflow_id: str, request: Request, store: WorkflowStorePort) -> BookingWorkflow:
    """Workflow owned by the calling browser. Other browsers get the same 404 as for an unknown id."""
    workflow = store.get_workflow(workflow_id)
    browser_id = request.cookies.get(settings.BROWSER_COOKIE_NAME)
    if workflow is None or not browser_id or workflow.browser_id != browser_id:
        raise HTTPException(status_code=404, detail="Workflow not found")
    return workflow


def _respond(result: WorkflowResult, workflow: BookingWorkflow) -> WorkflowResponseSchema:
    logger.info(
        "Workflow action",
        extra={"workflow_id": workflow.workflow_id, "action": result.action, "status": result.step.value},
    )
    return WorkflowResponseSchema.build(result, workflow.view())


@router.post("/workflows", response_model=WorkflowResponseSchema)
async def create_workflow(
    req: CreateWorkflowRequestSchema,
    request: Request,
    response: Response,
    store: WorkflowStorePort = Depends(get_workflow_store),
    factory: WorkflowFactory = Depends(get_workflow_factory),
):
    browser_id = browser_id_for(request, response)
    workflow = factory(req.showtime_id, browser_id)
    store.add_workflow(workflow)
    result = await workflow.load()
    return _respond(result, workflow)


@router.get("/workflows/{workflow_id}", response_model=WorkflowViewSchema)
async def get_workflow(workflow_id: str, request: Request, store: WorkflowStorePort = Depends(get_workflow_store)):
    return WorkflowViewSchema.from_domain(_get_workflow(workflow_id, request, store).view())


@router.delete("/workflows/{workflow_id}", status_code=204)
async def close_workflow(
    workflow_id: str,
    request: Request,
    store: WorkflowStorePort = Depends(get_workflow_store),
) -> Response:
    workflow = _get_workflow(workflow_id, request, store)
    store.remove_workflow(workflow.workflow_id)
    workflow.close()
    return Response(status_code=204)


@router.post("/workflows/{workflow_id}/seats/{seat_id}/toggle", response_model=WorkflowResponseSchema)
async def toggle_seat(
    workflow_id: str,
    seat_id: str,
    request: Request,
    store: WorkflowStorePort = Depends(get_workflow_store),
):
    workflow = _get_workflow(workflow_id, request, store)
    return _respond(workflow.toggle_seat(seat_id), workflow)


@router.post("/workflows/{workflow_id}/showtime", response_model=WorkflowResponseSchema)
async def change_showtime(
    workflow_id: str,
    req: ChangeShowtimeRequestSchema,
    request: Request,
    store: WorkflowStorePort = Depends(get_workflow_store),
):
    workflow = _get_workflow(workflow_id, request, store)
    result = await workflow.change_showtime(req.showtime_id)
    return _respond(result, workflow)


@router.post("/workflows/{workflow_id}/advance", response_model=WorkflowResponseSchema)
async def advance(workflow_id: str, request: Request, store: WorkflowStorePort = Depends(get_workflow_store)):
    workflow = _get_workflow(workflow_id, request, store)
    return _respond(workflow.advance(), workflow)


@router.post("/workflows/{workflow_id}/back", response_model=WorkflowResponseSchema)
async def back(workflow_id: str, request: Request, store: WorkflowStorePort = Depends(get_workflow_store)):
    workflow = _get_workflow(workflow_id, request, store)
    return _respond(workflow.back(), workflow)


@router.post("/workflows/{workflow_id}/payment-method", response_model=WorkflowResponseSchema)
async def select_payment_method(
    workflow_id: str,
    req: PaymentMethodRequestSchema,
    request: Request,
    store: WorkflowStorePort = Depends(get_workflow_store),
):
    workflow = _get_workflow(workflow_id, request, store)
    return _respond(workflow.select_payment_method(req.payment_method), workflow)


@router.post("/workflows/{workflow_id}/payment", response_model=WorkflowResponseSchema)
async def submit_payment(workflow_id: str, request: Request, store: WorkflowStorePort = Depends(get_workflow_store)):
    workflow = _get_workflow(workflow_id, request, store)
    result = await workflow.submit_payment()
    return _respond(result, workflow)


@router.get("/bookings/{booking_id}", response_model=BookingSchema)
async def get_booking(
    booking_id: str,
    request: Request,
    store: WorkflowStorePort = Depends(get_workflow_store),
    booking_service: BookingServicePort = Depends(get_booking_service),
):
    browser_id = request.cookies.get(settings.BROWSER_COOKIE_NAME)
    session = store.get_session(browser_id) if browser_id else None
    if session is None:
        raise HTTPException(status_code=401, detail=AuthError.user_message)

    try:
        record = await booking_service.get_booking(booking_id, session.user_id)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except BookingError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if record is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return BookingSchema.from_domain(record)
