"""
Event document schema for the ``events`` collection.

Stored fields use camelCase names. ``slug`` is derived from ``title`` and
``date``/``time`` are stored normalized (``YYYY-MM-DD`` and ``HH:MM``).

Indexes:
- slug (unique)
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from devevent.models.base import (
    DocumentSchema,
    TimestampMixin,
    field_label,
    required_text,
    required_value,
)

TEXT_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "audience",
    "organizer",
)


class EventMode(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"


class EventFields(DocumentSchema):
    """Caller-settable Event fields. ``slug`` is derived and never accepted."""

    title: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: EventMode
    audience: str
    agenda: list[str]
    organizer: str
    tags: list[str]

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def _strip_required(cls, value: Any, info: ValidationInfo) -> Any:
        return required_text(value, info.field_name)

    @field_validator("mode", mode="before")
    @classmethod
    def _check_mode(cls, value: Any) -> Any:
        value = required_value(value, "mode")
        allowed = [mode.value for mode in EventMode]
        if isinstance(value, EventMode):
            return value
        if value not in allowed:
            raise PydanticCustomError(
                "invalid_mode",
                "Mode must be one of: {allowed}",
                {"allowed": ", ".join(allowed)},
            )
        return value

    @field_validator("agenda", "tags", mode="before")
    @classmethod
    def _required_list(cls, value: Any, info: ValidationInfo) -> Any:
        return required_value(value, info.field_name)

    @field_validator("agenda", "tags", mode="after")
    @classmethod
    def _non_empty_list(cls, value: list[str], info: ValidationInfo) -> list[str]:
        items = [item.strip() for item in value if item.strip()]
        if not items:
            raise PydanticCustomError(
                "empty_list",
                "{label} must contain at least one item",
                {"label": field_label(info.field_name)},
            )
        return items


class Event(EventFields, TimestampMixin):
    id: str
    slug: str

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> Event:
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)
