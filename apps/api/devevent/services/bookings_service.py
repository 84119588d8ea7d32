from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from devevent.models import Booking
from devevent.registry import ModelRegistry, get_models

logger = structlog.get_logger()


def create_booking(payload: Mapping[str, Any], *, models: ModelRegistry | None = None) -> Booking:
    models = models or get_models()
    booking = models.bookings.create(payload)
    logger.info("booking_created", booking_id=booking.id, event_id=booking.event_id)
    return booking


def list_event_bookings(
    event_id: Any,
    *,
    limit: int | None = None,
    models: ModelRegistry | None = None,
) -> list[Booking]:
    models = models or get_models()
    return models.bookings.list_for_event(event_id, limit=limit)


def list_bookings_for_email(email: str, *, models: ModelRegistry | None = None) -> list[Booking]:
    models = models or get_models()
    return models.bookings.list_for_email(email)
