"""Root conftest — shared test configuration and store fixtures."""

import copy
import os

# docstore.main builds a module-level app from settings at import time
os.environ.setdefault("DATA_FILE", "test-db.json")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest

from docstore.infrastructure.adapters import MemoryAdapter
from docstore.infrastructure.database import Database
from docstore.services.store_service import StoreService

POST_1 = {
    "id": "1", "title": "a", "views": 100, "published": True,
    "author": {"name": "foo"}, "tags": ["foo", "bar"],
}
POST_2 = {
    "id": "2", "title": "b", "views": 200, "published": False,
    "author": {"name": "bar"}, "tags": ["bar"],
}
POST_3 = {
    "id": "3", "title": "c", "views": 300, "published": False,
    "author": {"name": "baz"}, "tags": ["foo"],
}
COMMENT_1 = {"id": "1", "title": "a", "postId": "1"}
OBJECT = {"f1": "foo"}


def make_data() -> dict:
    """Fresh copy of the standard posts/comments/object store."""
    return copy.deepcopy({
        "posts": [POST_1, POST_2, POST_3],
        "comments": [COMMENT_1],
        "object": OBJECT,
    })


@pytest.fixture
def adapter():
    return MemoryAdapter()


@pytest.fixture
def db(adapter):
    return Database(adapter, make_data())


@pytest.fixture
def service(db):
    return StoreService(db)
