from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from cinemaflix.application.exceptions import (
    AuthError,
    SeatConflictError,
    ServiceContractError,
    TransientError,
)

# The booking backend reports seat problems as plain 400 messages.
_SEAT_ERROR_RE = re.compile(r"seat (\S+) (?:is not available|not found)", re.IGNORECASE)


class ApiClient:
    """
    Thin async client for the cinema REST backend.

    The backend wraps every payload as {"success": bool, "data": ..., "error": str}.
    `request` returns `data` and turns every failure into the booking error taxonomy.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, method: str, path: str, json: dict[str, Any] | None = None) -> Any:
        try:
            resp = await self._client.request(method, path, json=json)
        except httpx.TransportError as e:
            self._logger.error(
                "Backend unreachable",
                extra={"action": f"{method} {path}", "error": str(e)},
            )
            raise TransientError() from e

        body = _json_or_none(resp)
        error_message = body.get("error") if isinstance(body, dict) else None

        if resp.status_code >= 400:
            self._logger.error(
                "Backend request failed",
                extra={"action": f"{method} {path}", "status": resp.status_code, "error": error_message},
            )
            raise _error_for_status(resp.status_code, error_message, body)

        if not isinstance(body, dict):
            self._logger.error("Backend answered without a JSON object", extra={"action": f"{method} {path}"})
            raise ServiceContractError()
        if not body.get("success"):
            self._logger.error(
                "Backend rejected request",
                extra={"action": f"{method} {path}", "status": resp.status_code, "error": error_message},
            )
            raise TransientError()
        return body.get("data")


def _json_or_none(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _error_for_status(status: int, error_message: str | None, body: Any) -> Exception:
    if status == 401:
        return AuthError()

    if status == 409:
        seat_ids = body.get("seat_ids") if isinstance(body, dict) else None
        if not isinstance(seat_ids, list):
            seat_ids = _seat_ids_from_message(error_message)
        return SeatConflictError([str(s) for s in seat_ids])

    if status == 400 and error_message:
        seat_ids = _seat_ids_from_message(error_message)
        if seat_ids:
            return SeatConflictError(seat_ids)

    # Backend error text is logged by the caller, never shown to the user.
    return TransientError(status_code=status)


def _seat_ids_from_message(message: str | None) -> list[str]:
    if not message:
        return []
    return _SEAT_ERROR_RE.findall(message)
