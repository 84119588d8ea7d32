from enum import Enum


class ErrorCode(str, Enum):
    # validation
    FIELD_REQUIRED = "FIELD_REQUIRED"
    FIELD_EMPTY = "FIELD_EMPTY"
    INVALID_FIELD = "INVALID_FIELD"
    INVALID_MODE = "INVALID_MODE"
    EMPTY_LIST = "EMPTY_LIST"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_DATE = "INVALID_DATE"
    INVALID_TIME = "INVALID_TIME"
    INVALID_SLUG = "INVALID_SLUG"

    # conflicts / lookups
    SLUG_TAKEN = "SLUG_TAKEN"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    EVENT_HAS_BOOKINGS = "EVENT_HAS_BOOKINGS"

    # database
    DATABASE_ERROR = "DATABASE_ERROR"
    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"
