from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.server_api import ServerApi

# Always go through devevents.config so python-dotenv is applied
from devevents import config

logger = logging.getLogger(__name__)

# collection -> list of (keys, options)
INDEXES = {
    config.EVENTS_COLLECTION: [
        ([("slug", ASCENDING)], {"unique": True, "name": "slug_unique"}),
        ([("createdAt", DESCENDING)], {"name": "created_at"}),
        ([("tags", ASCENDING)], {"name": "tags"}),
    ],
    config.BOOKINGS_COLLECTION: [
        ([("eventId", ASCENDING)], {"name": "event_id"}),
        # one booking per (event, email); a violation means "already booked"
        ([("eventId", ASCENDING), ("email", ASCENDING)], {"unique": True, "name": "event_email_unique"}),
    ],
}


def ensure_indexes(db) -> None:
    """
    Safe to call repeatedly; creates the indexes above if they don't exist.
    """
    for coll, specs in INDEXES.items():
        for keys, opts in specs:
            try:
                db[coll].create_index(keys, **opts)
            except Exception as e:
                logger.warning("index create failed for %s (%s): %s", coll, opts.get("name"), e)


class ConnectionManager:
    """
    Lazily opens one MongoClient and shares it for the life of the process.

    The first get_client() connects (and pings when ``verify`` is set); later
    calls return the cached client. A failed connect leaves nothing cached so
    the next call retries, and the original error reaches the caller.
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        client_factory: Callable[..., Any] = MongoClient,
        verify: bool = True,
        timeout_ms: int = 5000,
    ):
        if not uri:
            raise RuntimeError("MONGODB_URI is not set")
        self.uri = uri
        self.db_name = db_name
        self._client_factory = client_factory
        self._verify = verify
        self._timeout_ms = timeout_ms
        self._client: Optional[Any] = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls) -> "ConnectionManager":
        return cls(
            uri=config.MONGODB_URI or "",
            db_name=config.MONGO_DB,
            timeout_ms=config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        )

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _connect(self):
        kwargs = {"serverSelectionTimeoutMS": self._timeout_ms}
        if self._client_factory is MongoClient:
            kwargs["server_api"] = ServerApi("1")
        client = self._client_factory(self.uri, **kwargs)
        try:
            if self._verify:
                client.admin.command("ping")
            ensure_indexes(client[self.db_name])
        except Exception:
            client.close()
            raise
        return client

    def get_client(self):
        client = self._client
        if client is not None:
            return client
        with self._lock:
            if self._client is None:
                try:
                    self._client = self._connect()
                except Exception as e:
                    logger.error("Mongo connect failed: %s", e)
                    self._client = None
                    raise
                logger.info("Connected to MongoDB database %s", self.db_name)
            return self._client

    def get_db(self):
        return self.get_client()[self.db_name]

    def get_collection(self, name: str):
        return self.get_db()[name]

    def ping(self) -> bool:
        try:
            self.get_client().admin.command("ping")
            return True
        except Exception as e:
            logger.error("Mongo ping failed: %s", e)
            return False

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None


_MANAGER: Optional[ConnectionManager] = None
_MANAGER_LOCK = threading.Lock()


def use_connection(manager: Optional[ConnectionManager]) -> None:
    """Install the process-wide connection manager (None clears it)."""
    global _MANAGER
    with _MANAGER_LOCK:
        _MANAGER = manager


def get_connection() -> ConnectionManager:
    global _MANAGER
    manager = _MANAGER
    if manager is not None:
        return manager
    with _MANAGER_LOCK:
        if _MANAGER is None:
            _MANAGER = ConnectionManager.from_config()
        return _MANAGER


def get_client():
    return get_connection().get_client()


def get_db():
    return get_connection().get_db()


def get_collection(name: str):
    return get_connection().get_collection(name)


def ping() -> bool:
    try:
        manager = get_connection()
    except RuntimeError as e:
        logger.error("Mongo ping failed: %s", e)
        return False
    return manager.ping()
