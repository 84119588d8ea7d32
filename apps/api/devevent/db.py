"""Process-wide MongoDB connection.

One :class:`ConnectionManager` lives for the whole process. The first
``ensure_connection()`` call starts a single connection attempt; callers that
arrive while it is in flight wait on the same attempt instead of dialing again.
The manager instance is kept across ``importlib.reload`` of this module so a
hot reload reuses the open client.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

import structlog
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from devevent.core.config import Settings, settings as default_settings
from devevent.core.error_codes import ErrorCode
from devevent.core.exceptions import DatabaseConnectionError

logger = structlog.get_logger()

ClientFactory = Callable[..., MongoClient]


class ConnectionManager:
    def __init__(
        self,
        settings: Settings | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.client_factory: ClientFactory = client_factory or MongoClient
        self._lock = threading.Lock()
        self._client: MongoClient | None = None
        self._attempt: Future[MongoClient] | None = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def ensure_connection(self) -> MongoClient:
        with self._lock:
            if self._client is not None:
                return self._client
            attempt = self._attempt
            owner = attempt is None
            if owner:
                attempt = self._attempt = Future()

        if not owner:
            return attempt.result()

        try:
            client = self._connect()
        except BaseException as exc:
            with self._lock:
                if self._attempt is attempt:
                    self._attempt = None
            attempt.set_exception(exc)
            raise

        with self._lock:
            superseded = self._attempt is not attempt
            if not superseded:
                self._client = client
                self._attempt = None

        if superseded:
            # disconnect() ran while we were dialing
            client.close()
            exc = DatabaseConnectionError(
                ErrorCode.DATABASE_UNAVAILABLE.value,
                "connection closed while connecting",
            )
            attempt.set_exception(exc)
            raise exc

        attempt.set_result(client)
        return client

    def _connect(self) -> MongoClient:
        uri = self.settings.mongodb_uri
        logger.info("mongo_connecting")
        client: MongoClient | None = None
        try:
            client = self.client_factory(uri, **self.settings.mongo_client_options())
            client.admin.command("ping")
        except PyMongoError as exc:
            if client is not None:
                client.close()
            logger.warning("mongo_connect_failed", error=str(exc))
            raise DatabaseConnectionError(
                ErrorCode.DATABASE_UNAVAILABLE.value,
                f"could not connect to MongoDB: {exc}",
            ) from exc

        logger.info("mongo_connected")
        return client

    def get_database(self) -> Database[dict[str, Any]]:
        client = self.ensure_connection()
        return client.get_default_database(default=self.settings.mongodb_db_name)

    def disconnect(self) -> None:
        with self._lock:
            client = self._client
            self._client = None
            self._attempt = None

        if client is not None:
            client.close()
            logger.info("mongo_disconnected")


# Reuse the existing manager when the module is reloaded.
connection_manager: ConnectionManager = globals().get("connection_manager") or ConnectionManager()


def ensure_connection() -> MongoClient:
    return connection_manager.ensure_connection()


def get_database() -> Database[dict[str, Any]]:
    return connection_manager.get_database()


def disconnect() -> None:
    connection_manager.disconnect()
