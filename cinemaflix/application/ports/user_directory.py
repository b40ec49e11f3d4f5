from __future__ import annotations

from abc import ABC, abstractmethod

from cinemaflix.domain.entities.user_session import UserSession


class UserDirectoryPort(ABC):
    @abstractmethod
    def register(self, session: UserSession) -> None:
        """Make the signed-in user known to the booking backend (name and email on bookings)."""
        raise NotImplementedError
