from __future__ import annotations

from cinemaflix.application.ports.catalog import CatalogPort
from cinemaflix.domain.entities.showtime import ShowtimeDetails
from cinemaflix.infrastructure.inventory.seat_inventory import InMemorySeatInventory


class MockCatalog(CatalogPort):
    def __init__(self, inventory: InMemorySeatInventory) -> None:
        self._inventory = inventory

    async def get_showtime_details(self, showtime_id: str) -> ShowtimeDetails:
        return self._inventory.get_showtime(showtime_id)
