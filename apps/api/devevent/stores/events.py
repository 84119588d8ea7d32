from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from devevent.core.error_codes import ErrorCode
from devevent.core.exceptions import NotFoundError, UniquenessConflictError, ValidationError
from devevent.models.base import (
    to_object_id,
    utcnow,
    validation_error_from_pydantic,
    without_system_fields,
)
from devevent.models.event import Event, EventFields
from devevent.models.fields import (
    InvalidDateError,
    InvalidTimeError,
    generate_slug,
    normalize_date,
    normalize_time,
)
from devevent.stores.base import driver_errors

logger = structlog.get_logger()

SLUG_INDEX = "slug_1"


class EventStore:
    collection_name = "events"

    def __init__(self, database: Database) -> None:
        self.collection: Collection = database[self.collection_name]

    def ensure_indexes(self) -> None:
        with driver_errors("creating event indexes"):
            self.collection.create_index([("slug", ASCENDING)], name=SLUG_INDEX, unique=True)

    def validate_and_normalize(
        self,
        data: Mapping[str, Any],
        previous: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Validate ``data`` and return the document to persist.

        ``previous`` is the stored document on update. Slug, date and time are
        only recomputed when their source field differs from it.
        """
        source = without_system_fields(data)
        source.pop("slug", None)

        try:
            fields = EventFields.model_validate(source)
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        doc = fields.to_document()
        if previous is None:
            changed = set(doc)
        else:
            changed = {key for key, value in doc.items() if previous.get(key) != value}

        stored_slug = previous.get("slug") if previous is not None else None
        if "title" in changed or not stored_slug:
            slug = generate_slug(doc["title"])
            if not slug:
                raise ValidationError(
                    ErrorCode.INVALID_SLUG.value,
                    "Title must contain at least one letter or number",
                    "title",
                )
            doc["slug"] = slug
        else:
            doc["slug"] = stored_slug

        if "date" in changed:
            try:
                doc["date"] = normalize_date(doc["date"])
            except InvalidDateError as exc:
                raise ValidationError(ErrorCode.INVALID_DATE.value, str(exc), "date") from exc

        if "time" in changed:
            try:
                doc["time"] = normalize_time(doc["time"])
            except InvalidTimeError as exc:
                raise ValidationError(ErrorCode.INVALID_TIME.value, str(exc), "time") from exc

        return doc

    def create(self, data: Mapping[str, Any]) -> Event:
        doc = self.validate_and_normalize(data)
        now = utcnow()
        doc["createdAt"] = now
        doc["updatedAt"] = now

        with driver_errors("inserting event"):
            try:
                result = self.collection.insert_one(doc)
            except DuplicateKeyError as exc:
                raise self._slug_taken(doc["slug"]) from exc

        doc["_id"] = result.inserted_id
        return Event.from_document(doc)

    def update(self, event_id: Any, changes: Mapping[str, Any]) -> Event:
        previous = self._require(event_id)
        merged = {**previous, **without_system_fields(changes)}
        doc = self.validate_and_normalize(merged, previous=previous)
        doc["updatedAt"] = utcnow()

        with driver_errors("updating event"):
            try:
                self.collection.update_one({"_id": previous["_id"]}, {"$set": doc})
            except DuplicateKeyError as exc:
                raise self._slug_taken(doc["slug"]) from exc

        return Event.from_document({**previous, **doc})

    def get(self, event_id: Any) -> Event | None:
        doc = self._find(event_id)
        return Event.from_document(doc) if doc else None

    def get_by_slug(self, slug: str) -> Event | None:
        with driver_errors("loading event"):
            doc = self.collection.find_one({"slug": slug.strip().lower()})
        return Event.from_document(doc) if doc else None

    def list_events(self, limit: int | None = None, skip: int = 0) -> list[Event]:
        with driver_errors("listing events"):
            cursor = self.collection.find().sort(
                [("createdAt", DESCENDING), ("_id", DESCENDING)]
            )
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            return [Event.from_document(doc) for doc in cursor]

    def exists(self, event_id: Any) -> bool:
        oid = to_object_id(event_id)
        if oid is None:
            return False
        with driver_errors("looking up event"):
            return self.collection.find_one({"_id": oid}, {"_id": 1}) is not None

    def delete(self, event_id: Any) -> bool:
        oid = to_object_id(event_id)
        if oid is None:
            return False
        with driver_errors("deleting event"):
            return self.collection.delete_one({"_id": oid}).deleted_count == 1

    def remove(self, event_id: Any) -> dict[str, Any] | None:
        """Delete an event and return the stored document, if there was one."""
        oid = to_object_id(event_id)
        if oid is None:
            return None
        with driver_errors("deleting event"):
            return self.collection.find_one_and_delete({"_id": oid})

    def restore(self, doc: Mapping[str, Any]) -> None:
        """Put back a document returned by :meth:`remove`."""
        with driver_errors("restoring event"):
            try:
                self.collection.insert_one(dict(doc))
            except DuplicateKeyError as exc:
                raise self._slug_taken(doc["slug"]) from exc

    def _find(self, event_id: Any) -> dict[str, Any] | None:
        oid = to_object_id(event_id)
        if oid is None:
            return None
        with driver_errors("loading event"):
            return self.collection.find_one({"_id": oid})

    def _require(self, event_id: Any) -> dict[str, Any]:
        doc = self._find(event_id)
        if doc is None:
            raise NotFoundError(
                ErrorCode.EVENT_NOT_FOUND.value, f"event {event_id} not found", "id"
            )
        return doc

    def _slug_taken(self, slug: str) -> UniquenessConflictError:
        logger.info("event_slug_conflict", slug=slug)
        return UniquenessConflictError(
            ErrorCode.SLUG_TAKEN.value,
            f"an event with slug '{slug}' already exists",
            "slug",
        )
