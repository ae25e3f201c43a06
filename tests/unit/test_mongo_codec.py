from datetime import UTC, datetime, timedelta

import bson
import pytest
from bson import ObjectId

from news_svc.adapters.mongo.codec import decode_post, encode_post, parse_object_id
from news_svc.domain.entities import Post
from news_svc.domain.errors import InvalidIdentifierError


@pytest.fixture
def post() -> Post:
    now = datetime(2024, 6, 15, 12, 0, 0, 123456, tzinfo=UTC)
    return Post(title="Hello", content="World", created_at=now, updated_at=now)


def test_encode_without_id_omits_id_field(post):
    doc = encode_post(post)
    assert "_id" not in doc

    decoded = bson.decode(bson.encode(doc))
    assert "_id" not in decoded


def test_encode_decode_with_id_preserves_fields(post):
    post.id = str(ObjectId())

    raw = bson.encode(encode_post(post))
    back = decode_post(bson.decode(raw))

    assert back.id == post.id
    assert back.title == post.title
    assert back.content == post.content
    # BSON datetimes keep milliseconds only
    assert abs(back.created_at - post.created_at) < timedelta(milliseconds=1)
    assert abs(back.updated_at - post.updated_at) < timedelta(milliseconds=1)
    assert back.created_at.tzinfo is not None


def test_encode_with_malformed_id_raises(post):
    post.id = "invalid-hex"
    with pytest.raises(InvalidIdentifierError):
        encode_post(post)


@pytest.mark.parametrize("value", ["", None, "123", "zz" * 12, 42])
def test_parse_object_id_rejects_malformed(value):
    with pytest.raises(InvalidIdentifierError):
        parse_object_id(value)


def test_parse_object_id_accepts_hex():
    oid = ObjectId()
    assert parse_object_id(str(oid)) == oid


def test_decode_renders_object_id_as_hex():
    oid = ObjectId()
    post = decode_post({"_id": oid, "title": "T", "content": "C"})
    assert post.id == str(oid)
    assert len(post.id) == 24
    assert post.created_at is None
