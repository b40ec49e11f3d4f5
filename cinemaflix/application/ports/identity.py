from __future__ import annotations

from abc import ABC, abstractmethod

from cinemaflix.domain.entities.user_session import UserSession


class IdentityPort(ABC):
    @abstractmethod
    def current_session(self) -> UserSession | None:
        """Session for the current browser, or None when signed out."""
        raise NotImplementedError

    @abstractmethod
    def request_login(self) -> str:
        """Start the provider sign-in. Returns the URL the browser must navigate to."""
        raise NotImplementedError
