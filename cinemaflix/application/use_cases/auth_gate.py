from __future__ import annotations

import logging
from dataclasses import dataclass

from cinemaflix.application.ports.identity import IdentityPort
from cinemaflix.domain.entities.user_session import UserSession


@dataclass(frozen=True)
class LoginRedirect:
    """Signal for the presentation layer: send the browser to `url`."""

    url: str


class AuthGate:
    """Read-only view over the session owned by the identity provider."""

    def __init__(self, identity: IdentityPort) -> None:
        self._identity = identity
        self._logger = logging.getLogger(__name__)

    def is_authenticated(self) -> bool:
        return self._identity.current_session() is not None

    def current_session(self) -> UserSession | None:
        return self._identity.current_session()

    def request_login(self) -> LoginRedirect:
        url = self._identity.request_login()
        self._logger.info("Login redirect requested", extra={"action": "login_redirect"})
        return LoginRedirect(url=url)
