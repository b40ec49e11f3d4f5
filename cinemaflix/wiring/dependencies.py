from functools import lru_cache
import logging

from cinemaflix.core.config import settings
from cinemaflix.application.ports.booking_service import BookingServicePort
from cinemaflix.application.ports.catalog import CatalogPort
from cinemaflix.application.ports.user_directory import UserDirectoryPort
from cinemaflix.application.ports.workflow_store import WorkflowStorePort
from cinemaflix.application.use_cases.auth_gate import AuthGate
from cinemaflix.application.use_cases.booking_workflow import BookingWorkflow
from cinemaflix.application.use_cases.submit_booking import BookingSubmission
from cinemaflix.infrastructure.booking.booking_client import HttpBookingService
from cinemaflix.infrastructure.booking.mock_booking_service import MockBookingService
from cinemaflix.infrastructure.catalog.catalog_client import HttpCatalog
from cinemaflix.infrastructure.catalog.mock_catalog import MockCatalog
from cinemaflix.infrastructure.http.api_client import ApiClient
from cinemaflix.infrastructure.identity.inventory_user_directory import InventoryUserDirectory
from cinemaflix.infrastructure.identity.oauth_identity import OAuthIdentity
from cinemaflix.infrastructure.inventory.seat_inventory import InMemorySeatInventory, build_demo_inventory
from cinemaflix.infrastructure.store.memory_store import MemoryWorkflowStore


_workflow_store: MemoryWorkflowStore | None = None


def _use_mocks() -> bool:
    return not settings.SERVER_URL and settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_api_client() -> ApiClient:
    if not settings.SERVER_URL:
        raise ValueError("SERVER_URL is required outside dev/local.")
    return ApiClient(base_url=settings.SERVER_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)


@lru_cache
def get_seat_inventory() -> InMemorySeatInventory:
    return build_demo_inventory()


def get_workflow_store() -> WorkflowStorePort:
    global _workflow_store
    if _workflow_store is None:
        _workflow_store = MemoryWorkflowStore(
            idle_ttl=settings.WORKFLOW_IDLE_TTL_SECONDS,
            confirmed_ttl=settings.CONFIRMED_WORKFLOW_TTL_SECONDS,
            session_ttl=settings.SESSION_TTL_SECONDS,
        )
    return _workflow_store


def get_catalog() -> CatalogPort:
    if _use_mocks():
        return MockCatalog(get_seat_inventory())
    return HttpCatalog(get_api_client())


def get_booking_service() -> BookingServicePort:
    if _use_mocks():
        return MockBookingService(get_seat_inventory())
    return HttpBookingService(get_api_client())


def get_user_directory() -> UserDirectoryPort | None:
    if _use_mocks():
        return InventoryUserDirectory(get_seat_inventory())
    return None


def get_login_url() -> str:
    return settings.login_url


def build_workflow(showtime_id: str, browser_id: str) -> BookingWorkflow:
    logger = logging.getLogger(__name__)
    logger.info("Using %s collaborators (ENV=%s)", "mock" if _use_mocks() else "http", settings.ENV)
    store = get_workflow_store()
    return BookingWorkflow(
        showtime_id=showtime_id,
        catalog=get_catalog(),
        submission=BookingSubmission(booking_service=get_booking_service()),
        auth_gate=AuthGate(OAuthIdentity(store=store, browser_id=browser_id, login_url=get_login_url())),
        browser_id=browser_id,
    )


def get_workflow_factory():
    return build_workflow
