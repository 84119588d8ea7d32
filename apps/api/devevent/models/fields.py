"""Pure helpers for the derived and canonicalized document fields."""

from __future__ import annotations

import re
from datetime import datetime, timezone

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_SLUG_STRIP = re.compile(r"[^A-Za-z0-9_\s-]")
_SLUG_COLLAPSE = re.compile(r"[\s_-]+")

# Tried in order after ISO 8601.
DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%A, %B %d, %Y",
)

TIME_ANCHOR_DATE = "2000-01-01"
_TIME_PATTERN = re.compile(
    r"^(\d{1,2}):(\d{2})(?::(\d{2}))?(?:\s*(AM|PM))?$",
    re.IGNORECASE,
)


class InvalidDateError(ValueError):
    def __init__(self, value: str) -> None:
        super().__init__(f"invalid date format: {value}")
        self.value = value


class InvalidTimeError(ValueError):
    def __init__(self, value: str) -> None:
        super().__init__(f"invalid time format: {value}")
        self.value = value


def generate_slug(text: str) -> str:
    slug = _SLUG_STRIP.sub("", text.lower().strip())
    slug = _SLUG_COLLAPSE.sub("-", slug)
    return slug.strip("-")


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.match(value) is not None


def parse_date(value: str) -> datetime:
    text = value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    raise InvalidDateError(value)


def normalize_date(value: str) -> str:
    """Return the ``YYYY-MM-DD`` form of a date string.

    Aware date-times are moved to UTC first; naive ones keep their calendar
    date. Raises :class:`InvalidDateError` when no accepted format matches.
    """
    parsed = parse_date(value)
    if parsed.tzinfo is not None and parsed.utcoffset() is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def normalize_time(value: str) -> str:
    """Return the zero-padded 24-hour ``HH:MM`` form of a time string.

    Accepts anything ``datetime.fromisoformat`` understands as the time part
    of a date-time, then ``H:MM[:SS][ AM|PM]``. Raises
    :class:`InvalidTimeError` otherwise.
    """
    text = value.strip()
    try:
        anchored = datetime.fromisoformat(f"{TIME_ANCHOR_DATE}T{text}")
    except ValueError:
        anchored = None
    if anchored is not None:
        return f"{anchored.hour:02d}:{anchored.minute:02d}"

    match = _TIME_PATTERN.match(text)
    if not match:
        raise InvalidTimeError(value)

    hours = int(match.group(1))
    minutes = int(match.group(2))
    seconds = int(match.group(3) or 0)
    period = (match.group(4) or "").upper()

    if minutes > 59 or seconds > 59:
        raise InvalidTimeError(value)

    if period:
        if not 1 <= hours <= 12:
            raise InvalidTimeError(value)
        if period == "PM" and hours != 12:
            hours += 12
        elif period == "AM" and hours == 12:
            hours = 0
    elif hours > 23:
        raise InvalidTimeError(value)

    return f"{hours:02d}:{minutes:02d}"
