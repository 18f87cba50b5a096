from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Callable, Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.server_api import ServerApi

# Always go through eventhub.config so python-dotenv is applied
from eventhub import config
from eventhub.errors import ConfigError, DatabaseConnectionError

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., MongoClient]


class MongoProvider:
    """
    Lazily connects to MongoDB once per process and hands out the shared client.

    Concurrent first callers wait on the same in-flight attempt instead of each
    opening a client. A failed attempt is forgotten so the next call retries.
    """

    def __init__(
        self,
        uri: Optional[str],
        db_name: str = "eventhub",
        server_selection_timeout_ms: int = 5000,
        client_factory: ClientFactory = MongoClient,
    ):
        if not uri:
            raise ConfigError(
                "MONGODB_URI is not set. Define it in the environment or in .env"
            )
        self.uri = uri
        self.db_name = db_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._pending: Optional[Future] = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, client_factory: ClientFactory = MongoClient) -> "MongoProvider":
        return cls(
            config.MONGODB_URI,
            db_name=config.MONGO_DB,
            server_selection_timeout_ms=config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
            client_factory=client_factory,
        )

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _open(self) -> MongoClient:
        try:
            client = self._client_factory(
                self.uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                server_api=ServerApi("1"),
            )
        except Exception as e:
            raise DatabaseConnectionError(f"Failed to connect to MongoDB: {e}") from e

        try:
            client.admin.command("ping")
        except Exception as e:
            client.close()
            raise DatabaseConnectionError(
                "MongoDB connection established but not in connected state"
            ) from e
        return client

    def connect(self) -> MongoClient:
        client = self._client
        if client is not None:
            return client

        with self._lock:
            if self._client is not None:
                return self._client
            pending = self._pending
            owner = pending is None
            if owner:
                pending = self._pending = Future()

        if not owner:
            return pending.result()

        try:
            client = self._open()
        except BaseException as e:
            with self._lock:
                self._pending = None
            pending.set_exception(e)
            logger.error("Mongo connect failed: %s", e)
            raise

        with self._lock:
            self._client = client
            self._pending = None
        pending.set_result(client)
        logger.info("Connected to MongoDB database %s", self.db_name)
        return client

    def get_db(self) -> Database:
        return self.connect()[self.db_name]

    def get_collection(self, name: str):
        return self.get_db()[name]

    def ping(self) -> bool:
        try:
            self.connect().admin.command("ping")
            return True
        except Exception as e:
            logger.error("Mongo ping failed: %s", e)
            return False

    def close(self) -> None:
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()


def ensure_indexes(db: Database, logger: Optional[logging.Logger] = None) -> None:
    """
    Safe to call on startup; creates the event/booking indexes if they don't exist.
    """
    idx = {
        config.EVENTS_COLLECTION: [
            ([("slug", ASCENDING)], {"unique": True}),
            ([("tags", ASCENDING)], {}),
        ],
        config.BOOKINGS_COLLECTION: [
            ([("event_id", ASCENDING)], {}),
        ],
    }
    for coll, specs in idx.items():
        for keys, opts in specs:
            try:
                db[coll].create_index(keys, **opts)
            except Exception as e:
                (logger or logging).warning("index create failed for %s: %s", coll, e)
