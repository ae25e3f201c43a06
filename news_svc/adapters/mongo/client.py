"""MongoDB connection lifecycle."""

from __future__ import annotations

import logging
from urllib.parse import quote_plus

from pymongo import MongoClient
from pymongo.database import Database

logger = logging.getLogger(__name__)


def build_mongo_uri(user: str, password: str, host: str, port: int) -> str:
    if not user:
        return f"mongodb://{host}:{port}/"
    return (
        f"mongodb://{quote_plus(user)}:{quote_plus(password)}@{host}:{port}/?authSource=admin"
    )


class MongoDatabase:
    """Owns one MongoClient and the database handle the repos use."""

    def __init__(self, client: MongoClient, name: str) -> None:
        self._client: MongoClient | None = client
        self._db = client[name]

    @classmethod
    def connect(cls, uri: str, name: str, timeout_seconds: float = 10.0) -> MongoDatabase:
        """Create the client and verify the server answers a ping within the timeout."""
        timeout_ms = int(timeout_seconds * 1000)
        client: MongoClient = MongoClient(
            uri,
            connectTimeoutMS=timeout_ms,
            serverSelectionTimeoutMS=timeout_ms,
            tz_aware=True,
        )
        database = cls(client, name)
        try:
            database.ping()
        except Exception:
            client.close()
            raise
        logger.info("connected to MongoDB db=%s", name)
        return database

    def instance(self) -> Database:
        return self._db

    def ping(self) -> None:
        self._db.command("ping")

    def close(self) -> None:
        if self._client is None:
            raise RuntimeError("mongo client already disconnected")
        self._client.close()
        self._client = None
