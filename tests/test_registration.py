"""Tests for joining events with credits."""

import asyncio
import gc

import pytest

from skill_events_api.app.core.errors import CapacityExceeded, Conflict, InvalidTag, ValidationFailed
from skill_events_api.app.core.records import Registration
from skill_events_api.app.services.reconciliation_service import ReconciliationService
from skill_events_api.app.services.registration_service import FailureReason, JoinStatus


async def test_join_scenario(ledger, registration, registry, make_event):
    await ledger.apply_delta("a@x.com", 100, "grant")
    event = await make_event(name="evt1", fee_credits=30, capacity=1)

    first = await registration.join_event(event.id, "a@x.com")
    assert first.status is JoinStatus.JOINED
    assert first.credits_charged == 30
    assert first.balance == 70

    second = await registration.join_event(event.id, "a@x.com")
    assert second.status is JoinStatus.ALREADY_JOINED
    assert second.balance == 70
    assert await ledger.get_balance("a@x.com") == 70

    # b cannot pay either, but capacity is checked first.
    other = await registration.join_event(event.id, "b@x.com")
    assert other.status is JoinStatus.FAILED
    assert other.reason is FailureReason.EVENT_FULL
    assert await registry.is_admitted(event.id, "b@x.com") is False


async def test_join_writes_one_ledger_entry(ledger, registration, make_event):
    await ledger.apply_delta("a@x.com", 50)
    event = await make_event(fee_credits=20)
    await registration.join_event(event.id, "a@x.com")
    await registration.join_event(event.id, "a@x.com")
    history = await ledger.get_history("a@x.com")
    assert [(e.delta, e.note) for e in history] == [(-20, f"join:{event.id}"), (50, None)]
    assert history[0].balance_after == 30


async def test_unknown_event(registration, ledger):
    result = await registration.join_event("missing", "a@x.com")
    assert result.status is JoinStatus.FAILED
    assert result.reason is FailureReason.EVENT_NOT_FOUND
    assert await ledger.get_history("a@x.com") == []


async def test_insufficient_credits_changes_nothing(ledger, registration, registry, make_event):
    await ledger.apply_delta("a@x.com", 10)
    event = await make_event(fee_credits=30, capacity=5)

    result = await registration.join_event(event.id, "a@x.com")

    assert result.status is JoinStatus.FAILED
    assert result.reason is FailureReason.INSUFFICIENT_CREDITS
    assert result.balance == 10
    assert result.required == 30
    assert await ledger.get_balance("a@x.com") == 10
    assert len(await ledger.get_history("a@x.com")) == 1
    assert await registry.is_admitted(event.id, "a@x.com") is False
    assert await registry.admitted_count(event.id) == 0


async def test_free_event_needs_no_credits(ledger, registration, registry, make_event):
    event = await make_event(fee_credits=0)
    result = await registration.join_event(event.id, "a@x.com")
    assert result.status is JoinStatus.JOINED
    assert result.credits_charged == 0
    assert result.balance == 0
    assert await ledger.get_history("a@x.com") == []
    assert await registry.is_admitted(event.id, "a@x.com")


async def test_capacity_admits_exactly_n_users(ledger, registration, make_event):
    event = await make_event(fee_credits=5, capacity=3)
    users = [f"u{i}@x.com" for i in range(5)]
    for user in users:
        await ledger.apply_delta(user, 5)

    results = [await registration.join_event(event.id, user) for user in reversed(users)]

    assert [r.status for r in results[:3]] == [JoinStatus.JOINED] * 3
    assert all(r.reason is FailureReason.EVENT_FULL for r in results[3:])
    assert [await ledger.get_balance(u) for u in users] == [5, 5, 0, 0, 0]


async def test_concurrent_joins_for_same_pair_charge_once(ledger, registration, registry, make_event):
    await ledger.apply_delta("a@x.com", 100)
    event = await make_event(fee_credits=30, capacity=10)

    results = await asyncio.gather(*(registration.join_event(event.id, "a@x.com") for _ in range(10)))

    statuses = [r.status for r in results]
    assert statuses.count(JoinStatus.JOINED) == 1
    assert statuses.count(JoinStatus.ALREADY_JOINED) == 9
    assert await ledger.get_balance("a@x.com") == 70
    assert await registry.admitted_count(event.id) == 1


async def test_concurrent_joins_never_exceed_capacity(ledger, registration, registry, make_event):
    event = await make_event(fee_credits=1, capacity=4)
    users = [f"u{i}@x.com" for i in range(12)]
    for user in users:
        await ledger.apply_delta(user, 1)

    results = await asyncio.gather(*(registration.join_event(event.id, u) for u in users))

    assert sum(r.status is JoinStatus.JOINED for r in results) == 4
    assert await registry.admitted_count(event.id) == 4
    total = sum([await ledger.get_balance(u) for u in users])
    assert total == len(users) - 4


async def test_profile_tag_feeds_mix(registration, registry, make_event):
    event = await make_event(capacity=4)
    await registration.join_event(event.id, "a@x.com", profile_tag="youth")
    await registration.join_event(event.id, "b@x.com")
    assert await registry.type_mix(event.id) == {"youth": 0.5, "adult": 0.5}


async def test_unknown_tag_rejected_before_any_change(ledger, registration, registry, make_event):
    await ledger.apply_delta("a@x.com", 100)
    event = await make_event(fee_credits=10)
    with pytest.raises(InvalidTag):
        await registration.join_event(event.id, "a@x.com", profile_tag="legend")
    assert await ledger.get_balance("a@x.com") == 100
    assert await registry.is_admitted(event.id, "a@x.com") is False


async def test_fee_override(ledger, registration, make_event):
    await ledger.apply_delta("a@x.com", 100)
    event = await make_event(fee_credits=30)
    result = await registration.join_event(event.id, "a@x.com", fee_override=12)
    assert result.credits_charged == 12
    assert result.balance == 88


async def test_negative_fee_override_rejected(registration, make_event):
    event = await make_event(fee_credits=30)
    with pytest.raises(ValidationFailed):
        await registration.join_event(event.id, "a@x.com", fee_override=-1)


async def test_failed_admission_reverses_debit(ledger, registration, registry, make_event, monkeypatch):
    await ledger.apply_delta("a@x.com", 100)
    event = await make_event(fee_credits=30)

    def broken_admit(*args, **kwargs) -> Registration:
        raise RuntimeError("registry unavailable")

    monkeypatch.setattr(registry, "admit_locked", broken_admit)
    with pytest.raises(RuntimeError):
        await registration.join_event(event.id, "a@x.com")

    assert await ledger.get_balance("a@x.com") == 100
    notes = [e.note for e in await ledger.get_history("a@x.com")]
    assert notes[:2] == [f"join-rollback:{event.id}", f"join:{event.id}"]
    assert await registry.is_admitted(event.id, "a@x.com") is False


async def test_admission_conflict_reports_already_joined(store, ledger, registration, registry, make_event, monkeypatch):
    await ledger.apply_delta("a@x.com", 100)
    event = await make_event(fee_credits=30)

    def lost_race(event, user_id, credits_charged, tag) -> Registration:
        raise Conflict(f"{user_id} is already admitted to event {event.id}")

    monkeypatch.setattr(registry, "admit_locked", lost_race)
    result = await registration.join_event(event.id, "a@x.com")

    assert result.status is JoinStatus.ALREADY_JOINED
    assert result.balance == 100
    assert await ledger.get_balance("a@x.com") == 100
    assert await ReconciliationService(store).report() == []


async def test_admission_over_capacity_reports_event_full(store, ledger, registration, registry, make_event, monkeypatch):
    await ledger.apply_delta("a@x.com", 100)
    event = await make_event(fee_credits=30)

    def filled_up(event, user_id, credits_charged, tag) -> Registration:
        raise CapacityExceeded(f"event {event.id} is full")

    monkeypatch.setattr(registry, "admit_locked", filled_up)
    result = await registration.join_event(event.id, "a@x.com")

    assert result.status is JoinStatus.FAILED
    assert result.reason is FailureReason.EVENT_FULL
    assert result.balance == 100
    assert [e.note for e in await ledger.get_history("a@x.com")][:2] == [
        f"join-rollback:{event.id}",
        f"join:{event.id}",
    ]
    assert await ReconciliationService(store).report() == []


async def test_joins_for_unknown_events_leave_no_state(store, registration):
    for i in range(200):
        result = await registration.join_event(f"nope{i}", f"u{i}@x.com")
        assert result.reason is FailureReason.EVENT_NOT_FOUND
    gc.collect()
    assert len(store._locks) == 0
    assert store.wallets == {}
