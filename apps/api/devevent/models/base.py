from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from devevent.core.error_codes import ErrorCode
from devevent.core.exceptions import ValidationError

SYSTEM_FIELDS = frozenset({"_id", "id", "createdAt", "updatedAt", "created_at", "updated_at"})

# Human labels used in error messages, keyed by persisted field name.
FIELD_LABELS = {
    "eventId": "Event ID",
    "event_id": "Event ID",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: Any) -> ObjectId | None:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def field_label(name: str) -> str:
    return FIELD_LABELS.get(name, name[:1].upper() + name[1:])


def required_value(value: Any, name: str) -> Any:
    """Reject an explicit null the same way as a missing key."""
    if value is None:
        raise PydanticCustomError(
            "field_required",
            "{label} is required",
            {"label": field_label(name)},
        )
    return value


def required_text(value: Any, name: str) -> Any:
    """Trim a text value and reject it when nothing is left."""
    value = required_value(value, name)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise PydanticCustomError(
                "field_empty",
                "{label} cannot be empty",
                {"label": field_label(name)},
            )
    return value


class DocumentSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class TimestampMixin(BaseModel):
    created_at: datetime | None = None
    updated_at: datetime | None = None


def without_system_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key not in SYSTEM_FIELDS}


def validation_error_from_pydantic(exc: PydanticValidationError) -> ValidationError:
    """Report the first failing field, in schema order."""
    error = exc.errors()[0]
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else None
    label = field_label(field) if field else "Document"
    kind = error["type"]

    if kind == "missing":
        return ValidationError(ErrorCode.FIELD_REQUIRED.value, f"{label} is required", field)

    code = kind.upper()
    if code in ErrorCode.__members__:
        return ValidationError(code, error["msg"], field)

    return ValidationError(ErrorCode.INVALID_FIELD.value, f"{label} is invalid", field)
