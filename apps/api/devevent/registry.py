"""Single access point for the Event and Booking stores.

Registries are cached per database and client so indexes are created once,
and the cache is kept when this module is reloaded.
"""

from __future__ import annotations

import threading

from pymongo.database import Database

from devevent.db import get_database
from devevent.stores.bookings import BookingStore
from devevent.stores.events import EventStore


class ModelRegistry:
    def __init__(self, database: Database) -> None:
        self.database = database
        self.events = EventStore(database)
        self.bookings = BookingStore(database, self.events)
        self._indexed = False
        self._lock = threading.Lock()

    def ensure_indexes(self) -> None:
        with self._lock:
            if self._indexed:
                return
            self.events.ensure_indexes()
            self.bookings.ensure_indexes()
            self._indexed = True


_registries: dict[str, ModelRegistry] = globals().get("_registries", {})
_registries_lock: threading.Lock = globals().get("_registries_lock") or threading.Lock()


def get_models(database: Database | None = None) -> ModelRegistry:
    if database is None:
        database = get_database()

    with _registries_lock:
        registry = _registries.get(database.name)
        if registry is None or registry.database.client is not database.client:
            registry = ModelRegistry(database)
            _registries[database.name] = registry

    registry.ensure_indexes()
    return registry


def clear_models() -> None:
    with _registries_lock:
        _registries.clear()
