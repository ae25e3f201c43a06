import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any

import pymongo
from pymongo import DESCENDING, TEXT, IndexModel
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import OperationFailure, PyMongoError

from news_svc.adapters.clock import SystemClock
from news_svc.adapters.mongo.codec import as_utc, decode_post, encode_post, parse_object_id
from news_svc.domain.entities import COLLECTION_NAME, Post
from news_svc.domain.errors import PersistenceError, PostNotFoundError
from news_svc.ports.clock import ClockPort

logger = logging.getLogger(__name__)

TEXT_INDEX_NAME = "title_content_text"
CREATED_AT_INDEX_NAME = "created_at_desc"

# IndexOptionsConflict, IndexKeySpecsConflict
_INDEX_EXISTS_CODES = frozenset({85, 86})

_NEWEST_FIRST = [("created_at", DESCENDING)]

# Largest integer BSON can carry in a command.
BSON_INT64_MAX = 2**63 - 1

# Stored datetimes carry millisecond precision.
_BSON_TICK = timedelta(milliseconds=1)


def page_skip(page: int, limit: int) -> int:
    return min(max((page - 1) * limit, 0), BSON_INT64_MAX)


def _advance(now: datetime, previous: datetime | None) -> datetime:
    """Truncate to stored precision and keep strictly after the previous stamp."""
    now = now.replace(microsecond=now.microsecond // 1000 * 1000)
    previous = as_utc(previous)
    if previous is not None and now <= previous:
        return previous + _BSON_TICK
    return now


def search_filter(query: str) -> dict[str, Any]:
    """Title OR content contains the query, case-insensitively."""
    pattern = re.escape(query)
    return {
        "$or": [
            {"title": {"$regex": pattern, "$options": "i"}},
            {"content": {"$regex": pattern, "$options": "i"}},
        ]
    }


class MongoPostRepo:
    def __init__(
        self,
        db: Database,
        clock: ClockPort | None = None,
        operation_timeout: float | None = None,
    ):
        self.db = db
        self.clock = clock or SystemClock()
        self.operation_timeout = operation_timeout

    @property
    def _coll(self) -> Collection:
        return self.db[COLLECTION_NAME]

    @contextmanager
    def _op(self, name: str) -> Iterator[None]:
        """Run one storage call under the deadline, wrapping driver failures."""
        try:
            with pymongo.timeout(self.operation_timeout):
                yield
        except (PyMongoError, OverflowError) as e:
            raise PersistenceError(f"{name} failed: {e}") from e

    def _find_page(
        self, filter_: dict[str, Any], page: int, limit: int
    ) -> tuple[list[Post], int]:
        total = self._coll.count_documents(filter_)
        cursor = (
            self._coll.find(filter_)
            .sort(_NEWEST_FIRST)
            .skip(page_skip(page, limit))
            .limit(limit)
        )
        return [decode_post(doc) for doc in cursor], total

    def create(self, post: Post) -> str:
        now = self.clock.now_utc()
        post.created_at = now
        post.updated_at = now

        doc = encode_post(post)
        with self._op("create"):
            result = self._coll.insert_one(doc)

        post.id = str(result.inserted_id)
        return post.id

    def get_all(self, page: int, limit: int) -> tuple[list[Post], int]:
        with self._op("get_all"):
            return self._find_page({}, page, limit)

    def get_by_id(self, post_id: str) -> Post:
        oid = parse_object_id(post_id)
        with self._op("get_by_id"):
            doc = self._coll.find_one({"_id": oid})
        if doc is None:
            raise PostNotFoundError(post_id)
        return decode_post(doc)

    def update(self, post: Post) -> None:
        oid = parse_object_id(post.id)

        with self._op("update"):
            stored = self._coll.find_one({"_id": oid}, {"created_at": 1, "updated_at": 1})
        if stored is None:
            raise PostNotFoundError(post.id)
        now = _advance(self.clock.now_utc(), stored.get("updated_at") or stored.get("created_at"))

        update = {
            "$set": {
                "title": post.title,
                "content": post.content,
                "updated_at": now,
            }
        }
        with self._op("update"):
            result = self._coll.update_one({"_id": oid}, update)

        if result.matched_count == 0:
            raise PostNotFoundError(post.id)
        post.updated_at = now

    def delete(self, post_id: str) -> None:
        oid = parse_object_id(post_id)
        with self._op("delete"):
            result = self._coll.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise PostNotFoundError(post_id)

    def search(self, query: str, page: int, limit: int) -> tuple[list[Post], int]:
        with self._op("search"):
            return self._find_page(search_filter(query), page, limit)

    def get_recent(self, limit: int) -> list[Post]:
        with self._op("get_recent"):
            cursor = self._coll.find({}).sort(_NEWEST_FIRST).limit(limit)
            return [decode_post(doc) for doc in cursor]

    def ensure_indexes(self) -> None:
        """Create the text and created_at indexes. Safe to call repeatedly."""
        indexes = [
            IndexModel([("title", TEXT), ("content", TEXT)], name=TEXT_INDEX_NAME),
            IndexModel([("created_at", DESCENDING)], name=CREATED_AT_INDEX_NAME),
        ]
        try:
            with pymongo.timeout(self.operation_timeout):
                self._coll.create_indexes(indexes)
        except OperationFailure as e:
            if e.code not in _INDEX_EXISTS_CODES:
                raise PersistenceError(f"ensure_indexes failed: {e}") from e
            logger.warning("posts indexes already exist with other options: %s", e)
        except PyMongoError as e:
            raise PersistenceError(f"ensure_indexes failed: {e}") from e
