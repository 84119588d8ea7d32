from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from devevent.core.error_codes import ErrorCode
from devevent.core.exceptions import ReferentialIntegrityError
from devevent.models.base import (
    to_object_id,
    utcnow,
    validation_error_from_pydantic,
    without_system_fields,
)
from devevent.models.booking import Booking, BookingFields
from devevent.stores.base import driver_errors
from devevent.stores.events import EventStore

logger = structlog.get_logger()

EVENT_INDEX = "eventId_1"
EMAIL_INDEX = "email_1"
RECENT_BY_EVENT_INDEX = "eventId_1_createdAt_-1"


class BookingStore:
    collection_name = "bookings"

    def __init__(self, database: Database, events: EventStore) -> None:
        self.collection: Collection = database[self.collection_name]
        self.events = events

    def ensure_indexes(self) -> None:
        with driver_errors("creating booking indexes"):
            self.collection.create_index([("eventId", ASCENDING)], name=EVENT_INDEX)
            self.collection.create_index([("email", ASCENDING)], name=EMAIL_INDEX)
            self.collection.create_index(
                [("eventId", ASCENDING), ("createdAt", DESCENDING)],
                name=RECENT_BY_EVENT_INDEX,
            )

    def validate_and_link(
        self,
        data: Mapping[str, Any],
        previous: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Validate ``data`` and check that its event exists.

        The event lookup only runs when ``eventId`` is new or differs from
        ``previous``. Driver failures during the lookup surface as
        ``DatabaseError``, never as a missing event.
        """
        try:
            fields = BookingFields.model_validate(without_system_fields(data))
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        doc = fields.to_document()
        if previous is None or previous.get("eventId") != doc["eventId"]:
            self.check_event_exists(doc["eventId"])
        return doc

    def check_event_exists(self, event_id: Any) -> None:
        if not self.events.exists(event_id):
            raise self._missing_event(event_id)

    def _missing_event(self, event_id: Any) -> ReferentialIntegrityError:
        return ReferentialIntegrityError(
            ErrorCode.EVENT_NOT_FOUND.value,
            f"Event with ID {event_id} does not exist",
            "eventId",
        )

    def create(self, data: Mapping[str, Any]) -> Booking:
        doc = self.validate_and_link(data)
        now = utcnow()
        doc["createdAt"] = now
        doc["updatedAt"] = now

        with driver_errors("inserting booking"):
            result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        # The event may have been deleted between the check and the insert.
        if not self.events.exists(doc["eventId"]):
            with driver_errors("removing orphaned booking"):
                self.collection.delete_one({"_id": doc["_id"]})
            logger.info("booking_orphan_removed", event_id=str(doc["eventId"]))
            raise self._missing_event(doc["eventId"])

        return Booking.from_document(doc)

    def get(self, booking_id: Any) -> Booking | None:
        oid = to_object_id(booking_id)
        if oid is None:
            return None
        with driver_errors("loading booking"):
            doc = self.collection.find_one({"_id": oid})
        return Booking.from_document(doc) if doc else None

    def list_for_event(self, event_id: Any, limit: int | None = None) -> list[Booking]:
        oid = to_object_id(event_id)
        if oid is None:
            return []
        with driver_errors("listing bookings"):
            cursor = self.collection.find({"eventId": oid}).sort(
                [("createdAt", DESCENDING), ("_id", DESCENDING)]
            )
            if limit:
                cursor = cursor.limit(limit)
            return [Booking.from_document(doc) for doc in cursor]

    def list_for_email(self, email: str) -> list[Booking]:
        with driver_errors("listing bookings"):
            cursor = self.collection.find({"email": email.strip().lower()}).sort(
                [("createdAt", DESCENDING), ("_id", DESCENDING)]
            )
            return [Booking.from_document(doc) for doc in cursor]

    def count_for_event(self, event_id: Any) -> int:
        oid = to_object_id(event_id)
        if oid is None:
            return 0
        with driver_errors("counting bookings"):
            return self.collection.count_documents({"eventId": oid})
