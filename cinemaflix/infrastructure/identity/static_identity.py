from __future__ import annotations

from cinemaflix.application.ports.identity import IdentityPort
from cinemaflix.domain.entities.user_session import UserSession


class StaticIdentity(IdentityPort):
    """Fixed session for local runs and tests. Counts login redirects."""

    def __init__(self, session: UserSession | None = None, login_url: str = "http://localhost:8080/auth/google/login") -> None:
        self.session = session
        self.login_requests = 0
        self._login_url = login_url

    def current_session(self) -> UserSession | None:
        return self.session

    def request_login(self) -> str:
        self.login_requests += 1
        return self._login_url
