"""Tests for the debit/admission reconciliation report."""

from skill_events_api.app.services.reconciliation_service import ReconciliationService


async def test_clean_state_has_no_issues(store, ledger, registration, make_event):
    await ledger.apply_delta("a@x.com", 100)
    paid = await make_event(fee_credits=30)
    free = await make_event(fee_credits=0)
    await registration.join_event(paid.id, "a@x.com")
    await registration.join_event(free.id, "a@x.com")
    await registration.join_event(paid.id, "a@x.com", fee_override=5)

    assert await ReconciliationService(store).report() == []


async def test_debit_without_admission_is_reported(store, ledger, make_event):
    event = await make_event(fee_credits=30)
    await ledger.apply_delta("a@x.com", 100)
    # Simulates a crash between the debit and the admission.
    await ledger.apply_delta("a@x.com", -30, f"join:{event.id}")

    assert await ReconciliationService(store).report() == [
        {"event_id": event.id, "user_id": "a@x.com", "debited": 30, "charged": 0}
    ]


async def test_rolled_back_debit_is_not_reported(store, ledger, make_event):
    event = await make_event(fee_credits=30)
    await ledger.apply_delta("a@x.com", -30, f"join:{event.id}")
    await ledger.apply_delta("a@x.com", 30, f"join-rollback:{event.id}")

    assert await ReconciliationService(store).report() == []


async def test_admission_without_debit_is_reported(store, registry, make_event):
    event = await make_event(fee_credits=30)
    await registry.admit(event.id, "a@x.com", 30)

    assert await ReconciliationService(store).report() == [
        {"event_id": event.id, "user_id": "a@x.com", "debited": 0, "charged": 30}
    ]


async def test_deleted_events_are_ignored(store, ledger, events, make_event):
    event = await make_event(fee_credits=30)
    await ledger.apply_delta("a@x.com", -30, f"join:{event.id}")
    await events.delete_event(event.id)

    assert await ReconciliationService(store).report() == []
