"""
BSON mapping for posts.

The id is omitted from the encoded document when a post has none, so the
server generates it on insert. On the way out the ObjectId is rendered as
its 24-character hex form. BSON datetimes carry millisecond precision and
come back naive; they are normalized to aware UTC here.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from news_svc.domain.entities import Post
from news_svc.domain.errors import InvalidIdentifierError


def parse_object_id(post_id: str | None) -> ObjectId:
    """Decode an external id into an ObjectId."""
    if not post_id:
        raise InvalidIdentifierError(post_id)
    try:
        return ObjectId(post_id)
    except (InvalidId, TypeError) as e:
        raise InvalidIdentifierError(post_id) from e


def as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def encode_post(post: Post) -> dict[str, Any]:
    doc: dict[str, Any] = {}
    if post.id:
        doc["_id"] = parse_object_id(post.id)
    doc["title"] = post.title
    doc["content"] = post.content
    doc["created_at"] = post.created_at
    doc["updated_at"] = post.updated_at
    return doc


def decode_post(doc: dict[str, Any]) -> Post:
    oid = doc.get("_id")
    return Post(
        id=str(oid) if oid is not None else None,
        title=doc.get("title", ""),
        content=doc.get("content", ""),
        created_at=as_utc(doc.get("created_at")),
        updated_at=as_utc(doc.get("updated_at")),
    )
