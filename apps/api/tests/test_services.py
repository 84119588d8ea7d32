from __future__ import annotations

import pytest
from bson import ObjectId

from devevent import main
from devevent.core.exceptions import ConflictError, NotFoundError, ReferentialIntegrityError
from devevent.registry import get_models
from devevent.services import (
    create_booking,
    create_event,
    delete_event,
    get_event,
    list_bookings_for_email,
    list_event_bookings,
    list_events,
    update_event,
)


def test_services_connect_lazily(mongo_connection, event_payload):
    assert not mongo_connection.connected

    event = create_event(event_payload())

    assert mongo_connection.connected
    assert get_event("react-summit-2024").id == event.id


def test_event_lifecycle(mongo_connection, event_payload):
    first = create_event(event_payload(title="PyCon US 2024", mode="offline"))
    second = create_event(event_payload(title="JSConf Asia 2024", mode="online"))

    assert [event.slug for event in list_events()] == ["jsconf-asia-2024", "pycon-us-2024"]
    assert [event.slug for event in list_events(limit=1, skip=1)] == ["pycon-us-2024"]

    updated = update_event(first.id, {"title": "PyCon US 2025", "date": "May 14, 2025"})
    assert updated.slug == "pycon-us-2025"
    assert updated.date == "2025-05-14"
    assert get_event("PyCon-US-2025").id == first.id

    with pytest.raises(NotFoundError) as exc_info:
        get_event("pycon-us-2024")
    assert exc_info.value.code == "EVENT_NOT_FOUND"
    assert exc_info.value.field == "slug"

    assert get_event("jsconf-asia-2024").id == second.id


def test_booking_flow(mongo_connection, event_payload):
    event = create_event(event_payload())

    booking = create_booking({"eventId": event.id, "email": "Ada@Example.com"})
    create_booking({"eventId": event.id, "email": "grace@example.com"})

    assert booking.email == "ada@example.com"
    assert [b.email for b in list_event_bookings(event.id)] == ["grace@example.com", "ada@example.com"]
    assert len(list_event_bookings(event.id, limit=1)) == 1
    assert [b.id for b in list_bookings_for_email("ADA@example.com")] == [booking.id]

    with pytest.raises(ReferentialIntegrityError):
        create_booking({"eventId": str(ObjectId()), "email": "ada@example.com"})


def test_delete_event_with_bookings_is_blocked(mongo_connection, event_payload):
    event = create_event(event_payload())
    create_booking({"eventId": event.id, "email": "ada@example.com"})

    with pytest.raises(ConflictError) as exc_info:
        delete_event(event.id)

    assert exc_info.value.code == "EVENT_HAS_BOOKINGS"
    assert get_event(event.slug).id == event.id


def test_delete_event(mongo_connection, event_payload):
    event = create_event(event_payload())

    delete_event(event.id)

    assert list_events() == []
    with pytest.raises(NotFoundError):
        delete_event(event.id)
    with pytest.raises(NotFoundError):
        delete_event("not-an-id")


def test_booking_racing_a_delete_is_rolled_back(models, event_payload, monkeypatch):
    event = create_event(event_payload(), models=models)
    original_exists = models.events.exists
    deleted = []

    def exists_then_delete(event_id):
        found = original_exists(event_id)
        if found and not deleted:
            # another request deletes the event right after the check passes
            deleted.append(event_id)
            delete_event(event.id, models=models)
        return found

    monkeypatch.setattr(models.events, "exists", exists_then_delete)

    with pytest.raises(ReferentialIntegrityError) as exc_info:
        create_booking({"eventId": event.id, "email": "ada@example.com"}, models=models)

    assert exc_info.value.code == "EVENT_NOT_FOUND"
    assert deleted
    assert models.events.get(event.id) is None
    assert models.bookings.collection.count_documents({}) == 0


def test_delete_racing_a_booking_restores_the_event(models, event_payload, monkeypatch):
    event = create_event(event_payload(), models=models)
    original_count = models.bookings.count_for_event
    calls = []

    def count_then_book(event_id):
        count = original_count(event_id)
        if not calls:
            # a booking whose existence check already passed lands now
            models.bookings.collection.insert_one(
                {"eventId": ObjectId(event.id), "email": "ada@example.com"}
            )
        calls.append(count)
        return count

    monkeypatch.setattr(models.bookings, "count_for_event", count_then_book)

    with pytest.raises(ConflictError) as exc_info:
        delete_event(event.id, models=models)

    assert exc_info.value.code == "EVENT_HAS_BOOKINGS"
    assert calls == [0, 1]
    restored = get_event(event.slug, models=models)
    assert restored.id == event.id
    assert restored.title == event.title
    assert models.bookings.count_for_event(event.id) == 1


def test_models_are_cached_per_connection(mongo_connection):
    first = get_models()
    assert get_models() is first

    mongo_connection.disconnect()
    second = get_models()

    assert second is not first
    assert second.database.name == "devevent_test"


def test_explicit_models_skip_the_global_connection(mongo_connection, models, event_payload):
    event = create_event(event_payload(), models=models)

    assert get_event(event.slug, models=models).id == event.id
    assert not mongo_connection.connected


def test_lifecycle_hooks(mongo_connection):
    assert main.health()["database"] == "disconnected"

    models = main.startup()

    assert models.database.name == "devevent_test"
    assert main.health() == {"status": "ok", "env": "test", "database": "connected"}

    main.shutdown()
    assert main.health()["database"] == "disconnected"
