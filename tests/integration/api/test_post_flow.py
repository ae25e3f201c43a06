"""End-to-end HTTP flow over the real service, repo and templates on mongomock."""

import re
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from news_svc.adapters.mongo.repos import MongoPostRepo
from news_svc.adapters.render.jinja_renderer import JinjaRenderer
from news_svc.api.main import create_app
from news_svc.app_shell.config import Settings
from news_svc.app_shell.context import AppContext
from news_svc.services.posts import PostService

HX = {"HX-Request": "true"}


@pytest.fixture
def client(post_repo, post_service) -> TestClient:
    ctx = AppContext(
        settings=Settings(env={}),
        post_service=post_service,
        renderer=JinjaRenderer(),
        post_repo=post_repo,
    )
    return TestClient(create_app(ctx))


def test_full_page_lists_three_newest(client, seeded_ids):
    resp = client.get("/posts")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "<!DOCTYPE html>" in resp.text
    assert "Kubernetes" in resp.text
    assert "Page 1 of 2 (5 posts)" in resp.text
    assert 'id="post-list"' in resp.text


def test_fragment_search(client, seeded_ids):
    resp = client.get("/posts", params={"q": "api"}, headers=HX)

    assert resp.status_code == 200
    assert "<html" not in resp.text
    assert "GraphQL API" in resp.text
    assert "RESTful API" in resp.text
    assert "Docker basics" not in resp.text
    assert "Page 1 of 1 (2 posts)" in resp.text


def test_create_then_list(client):
    resp = client.post("/posts", data={"title": "Fresh", "content": "Just written"}, headers=HX)

    assert resp.status_code == 200
    assert resp.headers["HX-Trigger"] == "postCreated"
    match = re.search(r'id="post-([0-9a-f]{24})"', resp.text)
    assert match is not None

    listing = client.get("/posts", headers=HX)
    assert "Fresh" in listing.text
    assert client.get(f"/posts/{match.group(1)}").status_code == 200


def test_create_blank_title_shows_error(client):
    resp = client.post("/posts", data={"title": "  ", "content": "body"}, headers=HX)

    assert resp.status_code == 200
    assert "post title cannot be empty" in resp.text
    assert "HX-Trigger" not in resp.headers
    assert client.get("/posts", headers=HX).text.count('class="post"') == 0


def test_show_absent_and_malformed(client):
    assert client.get(f"/posts/{ObjectId()}").status_code == 404
    assert client.get("/posts/not-an-id").status_code == 404


def test_show_fragment_and_full(client, seeded_ids):
    fragment = client.get(f"/posts/{seeded_ids[0]}", headers=HX)
    full = client.get(f"/posts/{seeded_ids[0]}")

    assert "post-detail" in fragment.text
    assert "<html" not in fragment.text
    assert "<!DOCTYPE html>" in full.text
    assert "Intro to Python" in full.text
    assert "Kubernetes" in full.text
    assert "Page 1 of" not in full.text


def test_edit_and_update(client, seeded_ids):
    form = client.get(f"/posts/{seeded_ids[0]}/edit")
    assert f'hx-patch="/posts/{seeded_ids[0]}"' in form.text

    resp = client.patch(
        f"/posts/{seeded_ids[0]}", data={"title": "Intro to Go", "content": "Goroutines"}
    )
    assert resp.status_code == 200
    assert "Intro to Go" in resp.text

    failed = client.patch(f"/posts/{seeded_ids[0]}", data={"title": "T", "content": ""})
    assert failed.status_code == 200
    assert "post content cannot be empty" in failed.text


def test_update_absent_renders_form_error(client):
    resp = client.patch(f"/posts/{ObjectId()}", data={"title": "T", "content": "C"})
    assert resp.status_code == 200
    assert "post not found" in resp.text


def test_delete(client, seeded_ids):
    assert client.delete(f"/posts/{seeded_ids[4]}").status_code == 200
    assert client.delete(f"/posts/{seeded_ids[4]}").status_code == 422
    assert client.get(f"/posts/{seeded_ids[4]}").status_code == 404


def test_oversized_page_is_a_server_error_not_a_crash():
    db = MagicMock()
    coll = db.__getitem__.return_value
    coll.count_documents.return_value = 0
    cursor = coll.find.return_value.sort.return_value.skip.return_value.limit.return_value
    cursor.__iter__.side_effect = OverflowError("MongoDB can only handle up to 8-byte ints")
    repo = MongoPostRepo(db, operation_timeout=1.0)
    ctx = AppContext(
        settings=Settings(env={}),
        post_service=PostService(repo),
        renderer=JinjaRenderer(),
        post_repo=repo,
    )
    client = TestClient(create_app(ctx))

    resp = client.get("/posts", params={"page": "1000000000000000000", "limit": "10"})

    assert resp.status_code == 422
    assert resp.text == "server error"
