from __future__ import annotations

from abc import ABC, abstractmethod

from cinemaflix.domain.entities.showtime import ShowtimeDetails


class CatalogPort(ABC):
    @abstractmethod
    async def get_showtime_details(self, showtime_id: str) -> ShowtimeDetails:
        """
        Fetch theater, show time and seat layout for a showtime.
        Raises ShowtimeNotFoundError or TransientError.
        """
        raise NotImplementedError
