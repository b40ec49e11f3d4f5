from __future__ import annotations

import logging

from pydantic import ValidationError

from cinemaflix.application.dto.showtime_payload import ShowtimeDetailsDTO
from cinemaflix.application.exceptions import ServiceContractError, ShowtimeNotFoundError, TransientError
from cinemaflix.application.ports.catalog import CatalogPort
from cinemaflix.domain.entities.showtime import ShowtimeDetails
from cinemaflix.infrastructure.http.api_client import ApiClient


class HttpCatalog(CatalogPort):
    def __init__(self, client: ApiClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    async def get_showtime_details(self, showtime_id: str) -> ShowtimeDetails:
        try:
            data = await self._client.request("GET", f"/api/showtimes/{showtime_id}")
        except TransientError as e:
            if e.status_code == 404:
                raise ShowtimeNotFoundError(showtime_id) from e
            raise

        try:
            return ShowtimeDetailsDTO.model_validate(data).to_domain(showtime_id)
        except ValidationError as e:
            self._logger.error("Malformed showtime payload", extra={"showtime_id": showtime_id, "error": str(e)})
            raise ServiceContractError() from e
