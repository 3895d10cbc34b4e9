"""Tests for the event catalog service."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from skill_events_api.app.core.errors import NotFound, ValidationFailed
from skill_events_api.app.schemas.event import EventCreate


async def test_create_applies_defaults(make_event):
    event = await make_event(name="  Qualifier  ")
    assert event.name == "Qualifier"
    assert len(event.id) == 12
    assert event.fee_credits == 0
    assert event.capacity == 100
    assert event.location_type == "in_person"
    assert event.drills_enabled == frozenset({"3PT", "FT", "2PT", "LAYUP"})
    assert event.prize_pool_credits == 0
    assert event.schedule.tzinfo is not None


async def test_create_and_get_round_trip(events, make_event):
    event = await make_event(fee_credits=30, capacity=4, location_type="online", drills_enabled=["3pt", "ft"])
    fetched = await events.get_event(event.id)
    assert fetched == event
    assert fetched.drills_enabled == frozenset({"3PT", "FT"})


def test_schema_rejects_negative_fee_and_zero_capacity():
    with pytest.raises(ValidationError):
        EventCreate(name="x", fee_credits=-1)
    with pytest.raises(ValidationError):
        EventCreate(name="x", capacity=0)
    with pytest.raises(ValidationError):
        EventCreate(name="")


async def test_blank_name_rejected(make_event):
    with pytest.raises(ValidationFailed):
        await make_event(name="   ")


async def test_list_is_newest_schedule_first(events, make_event):
    now = datetime.now(timezone.utc)
    old = await make_event(name="old", schedule=now - timedelta(days=2))
    new = await make_event(name="new", schedule=now + timedelta(days=2))
    mid = await make_event(name="mid", schedule=now)
    assert [e.id for e in await events.list_events()] == [new.id, mid.id, old.id]


async def test_update_patches_only_given_fields(events, make_event):
    event = await make_event(fee_credits=10, capacity=5)
    updated = await events.update_event(event.id, {"fee_credits": 25, "name": "Renamed"})
    assert updated.fee_credits == 25
    assert updated.name == "Renamed"
    assert updated.capacity == 5
    assert (await events.get_event(event.id)).fee_credits == 25


async def test_update_validates_fields(events, make_event):
    event = await make_event()
    with pytest.raises(ValidationFailed):
        await events.update_event(event.id, {"capacity": 0})
    with pytest.raises(ValidationFailed):
        await events.update_event(event.id, {"id": "other"})
    assert (await events.get_event(event.id)).capacity == 100


async def test_unknown_id_raises_not_found(events):
    with pytest.raises(NotFound):
        await events.get_event("missing")
    with pytest.raises(NotFound):
        await events.update_event("missing", {"name": "x"})
    with pytest.raises(NotFound):
        await events.delete_event("missing")


async def test_delete_removes_event_and_admissions(events, registry, store, make_event):
    event = await make_event(capacity=2)
    await registry.admit(event.id, "a@x.com", 0, "teen")
    await events.delete_event(event.id)
    assert event.id not in store.events
    assert event.id not in store.registrations
    assert await registry.is_admitted(event.id, "a@x.com") is False
    assert await events.list_events() == []
