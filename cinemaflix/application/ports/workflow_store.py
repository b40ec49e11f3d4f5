from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from cinemaflix.domain.entities.user_session import UserSession

if TYPE_CHECKING:
    from cinemaflix.application.use_cases.booking_workflow import BookingWorkflow


class WorkflowStorePort(ABC):
    @abstractmethod
    def add_workflow(self, workflow: "BookingWorkflow") -> None:
        raise NotImplementedError

    @abstractmethod
    def get_workflow(self, workflow_id: str) -> "BookingWorkflow | None":
        raise NotImplementedError

    @abstractmethod
    def remove_workflow(self, workflow_id: str) -> "BookingWorkflow | None":
        raise NotImplementedError

    @abstractmethod
    def get_session(self, browser_id: str) -> UserSession | None:
        raise NotImplementedError

    @abstractmethod
    def set_session(self, browser_id: str, session: UserSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear_session(self, browser_id: str) -> None:
        raise NotImplementedError
