from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from cinemaflix.api.v1.seat_selection import browser_id_for
from cinemaflix.application.dto.user_payload import parse_callback_user
from cinemaflix.application.ports.user_directory import UserDirectoryPort
from cinemaflix.application.ports.workflow_store import WorkflowStorePort
from cinemaflix.core.config import settings
from cinemaflix.wiring.dependencies import get_user_directory, get_workflow_store


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/auth/callback")
async def auth_callback(
    request: Request,
    response: Response,
    user: str | None = Query(None),
    error: str | None = Query(None),
    store: WorkflowStorePort = Depends(get_workflow_store),
    directory: UserDirectoryPort | None = Depends(get_user_directory),
) -> dict[str, object]:
    if error:
        logger.warning("Identity provider returned an error", extra={"error": error})
        raise HTTPException(status_code=401, detail=error)
    if not user:
        raise HTTPException(status_code=400, detail="no_user_data")

    try:
        session = parse_callback_user(user)
    except ValueError as e:
        logger.warning("Unreadable user payload on auth callback", extra={"error": str(e)})
        raise HTTPException(status_code=400, detail="parse_error")

    # The session lives server side, keyed by the opaque browser cookie.
    browser_id = browser_id_for(request, response)
    store.set_session(browser_id, session)
    if directory is not None:
        directory.register(session)
    logger.info("Signed in", extra={"action": "login"})
    return {"authenticated": True, "name": session.name, "email": session.email}


@router.post("/auth/logout")
async def logout(
    request: Request,
    store: WorkflowStorePort = Depends(get_workflow_store),
) -> dict[str, bool]:
    browser_id = request.cookies.get(settings.BROWSER_COOKIE_NAME)
    if browser_id:
        store.clear_session(browser_id)
    return {"authenticated": False}
