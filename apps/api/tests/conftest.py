from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import mongomock
import pytest

# Ensure config is set before devevent import
os.environ.setdefault("ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/devevent_test")

from devevent.core.config import Settings  # noqa: E402
from devevent.db import connection_manager  # noqa: E402
from devevent.registry import ModelRegistry, clear_models  # noqa: E402

TEST_MONGODB_URI = "mongodb://localhost:27017/devevent_test"


@pytest.fixture
def database():
    client = mongomock.MongoClient()
    try:
        yield client["devevent_test"]
    finally:
        client.close()


@pytest.fixture
def models(database) -> ModelRegistry:
    registry = ModelRegistry(database)
    registry.ensure_indexes()
    return registry


@pytest.fixture
def event_payload() -> Callable[..., dict[str, Any]]:
    def _payload(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": "React Summit 2024",
            "description": "The biggest React conference worldwide.",
            "overview": "Two days of talks, workshops and networking.",
            "image": "/images/event1.png",
            "venue": "Kromhouthal",
            "location": "Amsterdam, Netherlands",
            "date": "June 20, 2024",
            "time": "9:00 AM",
            "mode": "hybrid",
            "audience": "Frontend developers",
            "agenda": ["Keynote", "Talks", "Workshops"],
            "organizer": "GitNation",
            "tags": ["react", "frontend"],
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def mongo_connection(monkeypatch):
    """Point the process-wide connection manager at an in-memory server."""
    monkeypatch.setattr(connection_manager, "settings", Settings(mongodb_uri=TEST_MONGODB_URI))
    monkeypatch.setattr(
        connection_manager,
        "client_factory",
        lambda uri, **options: mongomock.MongoClient(uri),
    )
    return connection_manager


@pytest.fixture(autouse=True)
def reset_connection():
    yield
    connection_manager.disconnect()
    clear_models()
