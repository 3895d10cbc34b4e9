"""
FastAPI dependency providers for services.

Every request builds its services around the ``MemoryStore`` attached
to ``app.state`` by ``create_app``.  Services are cheap wrappers; all
state lives in the store.
"""

from fastapi import Depends, Request

from skill_events_api.app.core.store import MemoryStore
from skill_events_api.app.services.event_service import EventService
from skill_events_api.app.services.ledger_service import LedgerService
from skill_events_api.app.services.reconciliation_service import ReconciliationService
from skill_events_api.app.services.registration_service import RegistrationService
from skill_events_api.app.services.registry_service import RegistryService
from skill_events_api.app.services.submission_service import SubmissionService


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store


def get_ledger(store: MemoryStore = Depends(get_store)) -> LedgerService:
    return LedgerService(store)


def get_event_service(store: MemoryStore = Depends(get_store)) -> EventService:
    return EventService(store)


def get_registry(
    store: MemoryStore = Depends(get_store),
    events: EventService = Depends(get_event_service),
) -> RegistryService:
    return RegistryService(store, events)


def get_registration_service(
    store: MemoryStore = Depends(get_store),
    ledger: LedgerService = Depends(get_ledger),
    registry: RegistryService = Depends(get_registry),
) -> RegistrationService:
    return RegistrationService(store, ledger, registry)


def get_submission_service(
    store: MemoryStore = Depends(get_store),
    events: EventService = Depends(get_event_service),
) -> SubmissionService:
    return SubmissionService(store, events)


def get_reconciliation_service(store: MemoryStore = Depends(get_store)) -> ReconciliationService:
    return ReconciliationService(store)
