from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from pymongo.errors import ConnectionFailure, PyMongoError

from devevent.core.error_codes import ErrorCode
from devevent.core.exceptions import DatabaseConnectionError, DatabaseError


@contextmanager
def driver_errors(action: str) -> Iterator[None]:
    """Translate driver failures into service errors."""
    try:
        yield
    except ConnectionFailure as exc:
        raise DatabaseConnectionError(
            ErrorCode.DATABASE_UNAVAILABLE.value, f"{action} failed: database unavailable"
        ) from exc
    except PyMongoError as exc:
        raise DatabaseError(ErrorCode.DATABASE_ERROR.value, f"{action} failed: {exc}") from exc
