from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bson import ObjectId
from pydantic import field_validator
from pydantic_core import PydanticCustomError

from devevent.models.base import DocumentSchema, TimestampMixin
from devevent.models.fields import is_valid_email


class BookingFields(DocumentSchema):
    event_id: str
    email: str

    @field_validator("event_id", mode="before")
    @classmethod
    def _check_event_id(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("field_required", "Event ID is required")
        if isinstance(value, ObjectId):
            return str(value)
        if isinstance(value, str) and ObjectId.is_valid(value.strip()):
            return value.strip()
        raise PydanticCustomError("invalid_event_id", "Event ID is invalid")

    @field_validator("email", mode="before")
    @classmethod
    def _canonical_email(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        email = value.strip().lower()
        if not email:
            raise PydanticCustomError("field_empty", "Email cannot be empty")
        if not is_valid_email(email):
            raise PydanticCustomError("invalid_email", "Please provide a valid email address")
        return email

    def to_document(self) -> dict[str, Any]:
        doc = super().to_document()
        doc["eventId"] = ObjectId(self.event_id)
        return doc


class Booking(BookingFields, TimestampMixin):
    id: str

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> Booking:
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)
