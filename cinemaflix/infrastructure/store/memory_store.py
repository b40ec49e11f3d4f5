from __future__ import annotations

import logging
import time

from cinemaflix.application.ports.workflow_store import WorkflowStorePort
from cinemaflix.application.use_cases.booking_workflow import BookingWorkflow
from cinemaflix.domain.entities.user_session import UserSession
from cinemaflix.domain.entities.workflow_step import WorkflowStep


class MemoryWorkflowStore(WorkflowStorePort):
    """
    Workflows by id and sessions by browser id, held in process memory.

    Entries idle longer than their TTL are evicted whenever a workflow or a
    session is added. Confirmed workflows use the shorter `confirmed_ttl`.
    Evicted workflows are closed so in-flight requests drop their results.
    """

    def __init__(
        self,
        idle_ttl: float = 1800.0,
        confirmed_ttl: float = 300.0,
        session_ttl: float = 86400.0,
    ) -> None:
        self._workflows: dict[str, BookingWorkflow] = {}
        self._workflow_seen_at: dict[str, float] = {}
        self._sessions: dict[str, UserSession] = {}
        self._session_seen_at: dict[str, float] = {}
        self._idle_ttl = idle_ttl
        self._confirmed_ttl = confirmed_ttl
        self._session_ttl = session_ttl
        self._logger = logging.getLogger(__name__)

    def add_workflow(self, workflow: BookingWorkflow) -> None:
        self.evict_expired()
        self._workflows[workflow.workflow_id] = workflow
        self._workflow_seen_at[workflow.workflow_id] = time.time()

    def get_workflow(self, workflow_id: str) -> BookingWorkflow | None:
        workflow = self._workflows.get(workflow_id)
        if workflow is not None:
            self._workflow_seen_at[workflow_id] = time.time()
        return workflow

    def remove_workflow(self, workflow_id: str) -> BookingWorkflow | None:
        self._workflow_seen_at.pop(workflow_id, None)
        return self._workflows.pop(workflow_id, None)

    def get_session(self, browser_id: str) -> UserSession | None:
        session = self._sessions.get(browser_id)
        if session is not None:
            self._session_seen_at[browser_id] = time.time()
        return session

    def set_session(self, browser_id: str, session: UserSession) -> None:
        self.evict_expired()
        self._sessions[browser_id] = session
        self._session_seen_at[browser_id] = time.time()

    def clear_session(self, browser_id: str) -> None:
        self._sessions.pop(browser_id, None)
        self._session_seen_at.pop(browser_id, None)

    def evict_expired(self, now_ts: float | None = None) -> list[str]:
        """Drop idle workflows and sessions. Returns the evicted workflow ids."""
        now = now_ts if now_ts is not None else time.time()

        evicted = []
        for workflow_id, workflow in list(self._workflows.items()):
            ttl = self._confirmed_ttl if workflow.step is WorkflowStep.CONFIRMED else self._idle_ttl
            if now - self._workflow_seen_at.get(workflow_id, now) > ttl:
                self.remove_workflow(workflow_id)
                workflow.close()
                evicted.append(workflow_id)

        stale_sessions = [
            browser_id
            for browser_id, seen_at in self._session_seen_at.items()
            if now - seen_at > self._session_ttl
        ]
        for browser_id in stale_sessions:
            self.clear_session(browser_id)

        if evicted or stale_sessions:
            self._logger.info(
                "Evicted idle entries",
                extra={"action": "evict", "status": f"workflows={len(evicted)} sessions={len(stale_sessions)}"},
            )
        return evicted

    def __len__(self) -> int:
        return len(self._workflows)
