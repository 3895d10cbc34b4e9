"""Tests for event admissions and the player-type mix."""

import pytest

from skill_events_api.app.core.errors import CapacityExceeded, Conflict, InvalidTag, NotFound
from skill_events_api.app.services.registry_service import resolve_tag


def test_resolve_tag_defaults_and_normalizes():
    assert resolve_tag(None) == "adult"
    assert resolve_tag("  ") == "adult"
    assert resolve_tag("ELITE") == "elite"
    with pytest.raises(InvalidTag):
        resolve_tag("veteran")


async def test_admit_records_registration(registry, make_event):
    event = await make_event(capacity=3)
    reg = await registry.admit(event.id, "A@x.com", 30, "pro")
    assert reg.user_id == "a@x.com"
    assert reg.credits_charged == 30
    assert reg.tag == "pro"
    assert await registry.is_admitted(event.id, "a@x.com")
    assert await registry.admitted_count(event.id) == 1


async def test_admit_twice_is_conflict(registry, make_event):
    event = await make_event(capacity=3)
    await registry.admit(event.id, "a@x.com", 0)
    with pytest.raises(Conflict):
        await registry.admit(event.id, "a@x.com", 0)
    assert await registry.admitted_count(event.id) == 1


async def test_admit_beyond_capacity(registry, make_event):
    event = await make_event(capacity=1)
    await registry.admit(event.id, "a@x.com", 0)
    with pytest.raises(CapacityExceeded):
        await registry.admit(event.id, "b@x.com", 0)


async def test_admit_unknown_event(registry):
    with pytest.raises(NotFound):
        await registry.admit("missing", "a@x.com", 0)


async def test_is_admitted_for_unknown_event_is_false(registry):
    assert await registry.is_admitted("missing", "a@x.com") is False
    assert await registry.admitted_count("missing") == 0


async def test_type_mix_empty_without_admissions(registry, make_event):
    event = await make_event()
    assert await registry.type_mix(event.id) == {}


async def test_type_mix_tracks_admissions(registry, make_event):
    event = await make_event(capacity=10)
    await registry.admit(event.id, "a@x.com", 0, "teen")
    assert await registry.type_mix(event.id) == {"teen": 1.0}

    await registry.admit(event.id, "b@x.com", 0, "teen")
    await registry.admit(event.id, "c@x.com", 0, "pro")
    await registry.admit(event.id, "d@x.com", 0, "elite")
    mix = await registry.type_mix(event.id)
    assert mix == {"teen": 0.5, "pro": 0.25, "elite": 0.25}
    assert sum(mix.values()) == pytest.approx(1.0)


async def test_cached_mix_cannot_be_mutated_by_callers(registry, make_event):
    event = await make_event(capacity=10)
    await registry.admit(event.id, "a@x.com", 0, "youth")
    mix = await registry.type_mix(event.id)
    mix["youth"] = 0.0
    assert await registry.type_mix(event.id) == {"youth": 1.0}


async def test_list_registrations_in_admission_order(registry, make_event):
    event = await make_event(capacity=10)
    for email in ("c@x.com", "a@x.com", "b@x.com"):
        await registry.admit(event.id, email, 0)
    assert [r.user_id for r in await registry.list_registrations(event.id)] == ["c@x.com", "a@x.com", "b@x.com"]
