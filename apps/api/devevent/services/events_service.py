from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from devevent.core.error_codes import ErrorCode
from devevent.core.exceptions import ConflictError, NotFoundError
from devevent.models import Event
from devevent.registry import ModelRegistry, get_models

logger = structlog.get_logger()


def create_event(payload: Mapping[str, Any], *, models: ModelRegistry | None = None) -> Event:
    models = models or get_models()
    event = models.events.create(payload)
    logger.info("event_created", event_id=event.id, slug=event.slug)
    return event


def get_event(slug: str, *, models: ModelRegistry | None = None) -> Event:
    models = models or get_models()
    event = models.events.get_by_slug(slug)
    if not event:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, f"event '{slug}' not found", "slug")
    return event


def list_events(
    *,
    limit: int | None = None,
    skip: int = 0,
    models: ModelRegistry | None = None,
) -> list[Event]:
    models = models or get_models()
    return models.events.list_events(limit=limit, skip=skip)


def update_event(
    event_id: Any,
    patch: Mapping[str, Any],
    *,
    models: ModelRegistry | None = None,
) -> Event:
    models = models or get_models()
    event = models.events.update(event_id, patch)
    logger.info("event_updated", event_id=event.id, slug=event.slug, fields=sorted(patch))
    return event


def delete_event(event_id: Any, *, models: ModelRegistry | None = None) -> None:
    """Delete an event that nobody has booked.

    Events with bookings are kept; deleting them would leave the bookings
    pointing at nothing.
    """
    models = models or get_models()
    if not models.events.exists(event_id):
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, f"event {event_id} not found", "id")

    booking_count = models.bookings.count_for_event(event_id)
    if booking_count:
        raise _has_bookings(event_id, booking_count)

    removed = models.events.remove(event_id)
    if removed is None:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, f"event {event_id} not found", "id")

    # A booking inserted after the count would now point at nothing.
    booking_count = models.bookings.count_for_event(event_id)
    if booking_count:
        models.events.restore(removed)
        logger.info("event_delete_reverted", event_id=str(event_id), bookings=booking_count)
        raise _has_bookings(event_id, booking_count)

    logger.info("event_deleted", event_id=str(event_id))


def _has_bookings(event_id: Any, booking_count: int) -> ConflictError:
    return ConflictError(
        ErrorCode.EVENT_HAS_BOOKINGS.value,
        f"event {event_id} has {booking_count} booking(s) and cannot be deleted",
        "id",
    )
