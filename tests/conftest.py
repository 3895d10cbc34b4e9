"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from skill_events_api.app.core.config import settings
from skill_events_api.app.core.store import MemoryStore
from skill_events_api.app.main import create_app
from skill_events_api.app.schemas.event import EventCreate
from skill_events_api.app.services.event_service import EventService
from skill_events_api.app.services.ledger_service import LedgerService
from skill_events_api.app.services.registration_service import RegistrationService
from skill_events_api.app.services.registry_service import RegistryService
from skill_events_api.app.services.submission_service import SubmissionService


@pytest.fixture(autouse=True)
def open_admin(monkeypatch):
    """Run every test with admin routes open unless a test sets a token."""
    monkeypatch.setattr(settings, "admin_token", "")


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore(lock_timeout=1.0)


@pytest.fixture
def ledger(store) -> LedgerService:
    return LedgerService(store)


@pytest.fixture
def events(store) -> EventService:
    return EventService(store)


@pytest.fixture
def registry(store, events) -> RegistryService:
    return RegistryService(store, events)


@pytest.fixture
def registration(store, ledger, registry) -> RegistrationService:
    return RegistrationService(store, ledger, registry)


@pytest.fixture
def submissions(store, events) -> SubmissionService:
    return SubmissionService(store, events)


@pytest.fixture
def make_event(events):
    """Factory creating events with sensible defaults."""

    async def _make(**fields):
        fields.setdefault("name", "Ball Skill - Demo Event")
        return await events.create_event(EventCreate(**fields))

    return _make


@pytest.fixture
def client(store):
    app = create_app(store)
    with TestClient(app) as test_client:
        yield test_client
