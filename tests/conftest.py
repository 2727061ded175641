"""
pytest configuration and fixtures for the user directory tests

- File store in a temp directory
- Mongo store over an in-memory collection implementing the Motor calls the store makes
- TestClient with the store dependency overridden
"""

import asyncio
import copy
import re
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import ReturnDocument
from pymongo.errors import ServerSelectionTimeoutError

from app.db.file_store import JsonFileUserStore
from app.db.mongo import MongoUserStore
from app.db.store import get_optional_user_store, get_user_store
from app.main import app


def _matches(doc, query):
    for key, condition in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in condition):
                return False
        elif isinstance(condition, dict) and "$regex" in condition:
            flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
            if not re.search(condition["$regex"], str(doc.get(key, "")), flags):
                return False
        elif doc.get(key) != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, keys):
        for field, direction in reversed(keys):
            self._docs.sort(key=lambda d: d.get(field), reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return [copy.deepcopy(d) for d in self._docs[:length]]


class FakeCollection:
    """In-memory stand-in for the Motor collection calls MongoUserStore makes."""

    def __init__(self):
        self.docs = []
        self.indexes = {"_id_": {"key": [("_id", 1)]}}

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, query=None):
        return FakeCursor([d for d in self.docs if _matches(d, query or {})])

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                doc.update(update.get("$set", {}))
                return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before
        return None

    async def find_one_and_delete(self, query):
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                return self.docs.pop(index)
        return None

    async def create_index(self, keys, name=None, **kwargs):
        self.indexes[name] = {"key": keys}
        return name

    async def index_information(self):
        return dict(self.indexes)

    async def drop_indexes(self):
        self.indexes = {"_id_": self.indexes["_id_"]}

    async def count_documents(self, query):
        return len([d for d in self.docs if _matches(d, query)])


class UnavailableCollection(FakeCollection):
    """Every call fails the way pymongo does when no server is reachable."""

    def _fail(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("No servers found yet")

    async def _afail(self, *args, **kwargs):
        self._fail()

    find = _fail
    insert_one = _afail
    find_one_and_update = _afail
    find_one_and_delete = _afail


class HangingCollection(FakeCollection):
    """Every write blocks far longer than any test timeout."""

    async def _hang(self, *args, **kwargs):
        await asyncio.sleep(60)

    insert_one = _hang
    find_one_and_update = _hang
    find_one_and_delete = _hang


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "users.json"


@pytest.fixture
def file_store(data_file):
    return JsonFileUserStore(data_file, timeout=5)


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def mongo_store(fake_collection):
    return MongoUserStore(
        "mongodb://localhost:27017",
        "user_directory_test",
        timeout=5,
        collection=fake_collection,
    )


@pytest.fixture(params=["file", "mongo"])
def store(request, file_store, mongo_store):
    """Runs a test once per backend."""
    return file_store if request.param == "file" else mongo_store


def make_client(user_store):
    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_optional_user_store] = lambda: user_store
    return TestClient(app)


@pytest.fixture
def client(file_store):
    yield make_client(file_store)
    app.dependency_overrides.clear()


@pytest.fixture
def unavailable_client():
    user_store = MongoUserStore(
        "mongodb://localhost:27017",
        "user_directory_test",
        timeout=5,
        collection=UnavailableCollection(),
    )
    yield make_client(user_store)
    app.dependency_overrides.clear()
