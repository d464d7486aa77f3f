"""Resource routes — status codes and payloads for every verb.

Tests cover:
    - GET/POST/PUT/PATCH/DELETE status codes for lists, singletons and unknowns
    - Query string mapping: filters, repeats, pagination, embedding, dependents
    - Error envelopes for not-found, validation and persistence failures
"""

import pytest
from httpx import ASGITransport, AsyncClient

from docstore.config import Settings
from docstore.infrastructure.adapters import MemoryAdapter
from docstore.infrastructure.database import Database
from docstore.main import create_app
from tests.conftest import COMMENT_1, POST_1, POST_2, POST_3, make_data


@pytest.mark.parametrize(
    "method, url, status_code",
    [
        ("GET", "/", 200),
        ("GET", "/posts", 200),
        ("GET", "/posts?_embed=comments", 200),
        ("GET", "/posts/1", 200),
        ("GET", "/posts/-1", 404),
        ("GET", "/posts/1?_embed=comments", 200),
        ("GET", "/comments", 200),
        ("GET", "/comments?postId=1", 200),
        ("GET", "/object", 200),
        ("GET", "/object/1", 404),
        ("GET", "/not-found", 404),
        ("POST", "/posts", 201),
        ("POST", "/object", 404),
        ("POST", "/not-found", 404),
        ("PUT", "/posts/1", 200),
        ("PUT", "/object", 200),
        ("PUT", "/posts", 404),
        ("PUT", "/posts/-1", 404),
        ("PATCH", "/posts/1", 200),
        ("PATCH", "/object", 200),
        ("PATCH", "/posts/-1", 404),
        ("DELETE", "/posts/1", 200),
        ("DELETE", "/posts/-1", 404),
    ],
)
@pytest.mark.asyncio
async def test_status_codes(client, method, url, status_code):
    res = await client.request(method, url)
    assert res.status_code == status_code, f"{method} {url}"


@pytest.mark.asyncio
async def test_index_lists_endpoints(client):
    res = await client.get("/")
    endpoints = res.json()["endpoints"]
    assert [e["name"] for e in endpoints] == ["posts", "comments", "object"]
    assert endpoints[0] == {"name": "posts", "url": "http://test/posts", "kind": "list"}
    assert endpoints[2]["kind"] == "object"


@pytest.mark.asyncio
async def test_cors_preflight(client):
    res = await client.options(
        "/posts",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == "http://localhost:5173"


# ─── reads ───────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_with_filter(client):
    res = await client.get("/posts", params={"views_lt": "300"})
    assert res.json() == [POST_1, POST_2]


@pytest.mark.asyncio
async def test_list_with_repeated_key(client):
    res = await client.get("/posts?id=1&id=3")
    assert res.json() == [POST_1, POST_3]


@pytest.mark.asyncio
async def test_list_paginated(client):
    res = await client.get("/posts?_page=1&_per_page=2")
    assert res.json() == {
        "first": 1, "prev": None, "next": 2, "last": 2, "pages": 2,
        "items": 3, "data": [POST_1, POST_2],
    }


@pytest.mark.asyncio
async def test_unparseable_integer_params_are_ignored(client):
    res = await client.get("/posts?_limit=abc")
    assert res.json() == [POST_1, POST_2, POST_3]


@pytest.mark.asyncio
async def test_get_with_embed(client):
    res = await client.get("/posts/1?_embed=comments")
    assert res.json() == {**POST_1, "comments": [COMMENT_1]}
    res = await client.get("/comments/1?_embed=post")
    assert res.json() == {**COMMENT_1, "post": POST_1}


@pytest.mark.asyncio
async def test_get_with_embed_uncountable_collection(client, db):
    db.data["news"] = [{"id": "n1", "postId": "1"}]
    res = await client.get("/posts/1?_embed=news")
    assert res.json() == {**POST_1, "news": [{"id": "n1", "postId": "1"}]}


@pytest.mark.asyncio
async def test_not_found_envelope(client):
    res = await client.get("/posts/-1")
    error = res.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["category"] == "resource_not_found"
    assert error["context"]["collection"] == "posts"
    assert error["context"]["item_id"] == "-1"
    assert error["context"]["path"] == "/posts/-1"


# ─── writes ──────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_returns_record_with_new_id(client, adapter):
    res = await client.post("/posts", json={"id": "1", "title": "new"})
    assert res.status_code == 201
    body = res.json()
    assert body["title"] == "new"
    assert body["id"] != "1"
    assert adapter.data["posts"][-1] == body


@pytest.mark.asyncio
async def test_create_rejects_non_object_body(client):
    res = await client.post("/posts", json=[1, 2])
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["category"] == "validation"
    assert error["context"]["path"] == "/posts"
    assert error["details"]


@pytest.mark.asyncio
async def test_put_and_patch_singleton(client):
    res = await client.put("/object", json={"f2": "bar"})
    assert res.json() == {"f2": "bar"}
    res = await client.patch("/object", json={"f3": "baz"})
    assert res.json() == {"f2": "bar", "f3": "baz"}


@pytest.mark.asyncio
async def test_update_by_id_keeps_id(client):
    res = await client.put("/posts/1", json={"id": "other", "title": "y"})
    assert res.json()["id"] == "1"
    assert res.json()["title"] == "y"
    res = await client.patch("/posts/1", json={"views": 5})
    assert res.json()["title"] == "y"
    assert res.json()["views"] == 5


@pytest.mark.asyncio
async def test_delete_nullifies_then_cascades(client, db):
    res = await client.delete("/posts/1")
    assert res.json() == POST_1
    assert db.data["comments"] == [{**COMMENT_1, "postId": None}]

    res = await client.delete("/posts/2?_dependent=comments")
    assert res.status_code == 200
    assert db.data["comments"] == []


# ─── persistence failure ─────────────────────────────────────────

class _FailingAdapter(MemoryAdapter):
    async def write(self, data):
        raise OSError("read-only file system")


@pytest.mark.asyncio
async def test_persistence_failure_returns_503():
    db = Database(_FailingAdapter(), make_data())
    app = create_app(db, Settings(static_dirs=[]))
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        res = await c.post("/posts", json={"title": "x"})
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "PERSISTENCE_ERROR"
    assert db.data["posts"][-1]["title"] == "x"


class _BrokenAdapter(MemoryAdapter):
    async def write(self, data):
        raise RuntimeError("secret internal state")


@pytest.mark.asyncio
async def test_unexpected_failure_returns_internal_envelope():
    db = Database(_BrokenAdapter(), make_data())
    app = create_app(db, Settings(static_dirs=[]))
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        res = await c.post("/posts", json={"title": "x"})
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert error["category"] == "internal"
    assert "secret" not in error["message"]
