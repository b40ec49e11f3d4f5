from __future__ import annotations

from cinemaflix.application.ports.user_directory import UserDirectoryPort
from cinemaflix.domain.entities.user_session import UserSession
from cinemaflix.infrastructure.inventory.seat_inventory import InMemorySeatInventory


class InventoryUserDirectory(UserDirectoryPort):
    """
    Registers signed-in users with the in-memory inventory.
    The real backend stores users in its own OAuth callback, so only mock mode needs this.
    """

    def __init__(self, inventory: InMemorySeatInventory) -> None:
        self._inventory = inventory

    def register(self, session: UserSession) -> None:
        self._inventory.register_user(session.user_id, session.name, session.email)
