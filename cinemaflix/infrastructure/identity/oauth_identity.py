from __future__ import annotations

import logging

from cinemaflix.application.ports.identity import IdentityPort
from cinemaflix.application.ports.workflow_store import WorkflowStorePort
from cinemaflix.domain.entities.user_session import UserSession


class OAuthIdentity(IdentityPort):
    """
    Session of one browser, as stored by the OAuth callback.

    Looked up on every call, so a session that appears after the
    redirect round trip is picked up by workflows created before it.
    """

    def __init__(self, store: WorkflowStorePort, browser_id: str, login_url: str) -> None:
        self._store = store
        self._browser_id = browser_id
        self._login_url = login_url
        self._logger = logging.getLogger(__name__)

    def current_session(self) -> UserSession | None:
        return self._store.get_session(self._browser_id)

    def request_login(self) -> str:
        self._logger.info("Redirecting to identity provider", extra={"action": "login"})
        return self._login_url
