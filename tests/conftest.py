"""
Shared pytest fixtures.

The services only touch a handful of motor collection methods, so the tests
run against ``FakeCollection``, an in-memory stand-in that implements those
methods with MongoDB matching rules for the filters this codebase issues.
"""

import copy
import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo import ReturnDocument

os.environ["LOG_LEVEL"] = "WARNING"

from app.database.connections import build_services  # noqa: E402


def _matches_value(stored, expected):
    if isinstance(expected, dict) and "$in" in expected:
        return any(_matches_value(stored, option) for option in expected["$in"])
    if isinstance(stored, list) and not isinstance(expected, list):
        return expected in stored
    return stored == expected


def matches(document, query):
    for key, expected in query.items():
        if key == "$or":
            if not any(matches(document, clause) for clause in expected):
                return False
        elif not _matches_value(document.get(key), expected):
            return False
    return True


def project(document, projection):
    if not projection:
        return copy.deepcopy(document)
    if all(not flag for flag in projection.values()):
        return {k: copy.deepcopy(v) for k, v in document.items() if k not in projection}
    keep = {"_id", *(k for k, flag in projection.items() if flag)}
    return {k: copy.deepcopy(v) for k, v in document.items() if k in keep}


class FakeCursor:
    def __init__(self, documents):
        self.documents = documents

    def sort(self, key, direction=1):
        self.documents.sort(key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return self.documents if length is None else self.documents[:length]


class FakeCollection:
    def __init__(self):
        self.documents = []

    async def insert_one(self, document):
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def find_one(self, query, projection=None):
        for document in self.documents:
            if matches(document, query):
                return project(document, projection)
        return None

    def find(self, query, projection=None):
        return FakeCursor([project(doc, projection) for doc in self.documents if matches(doc, query)])

    async def find_one_and_update(self, query, update, projection=None, return_document=ReturnDocument.BEFORE):
        for document in self.documents:
            if matches(document, query):
                before = project(document, projection)
                self._apply(document, update)
                return project(document, projection) if return_document == ReturnDocument.AFTER else before
        return None

    async def find_one_and_delete(self, query):
        for index, document in enumerate(self.documents):
            if matches(document, query):
                return self.documents.pop(index)
        return None

    async def update_many(self, query, update):
        matched = [doc for doc in self.documents if matches(doc, query)]
        for document in matched:
            self._apply(document, update)
        return SimpleNamespace(matched_count=len(matched), modified_count=len(matched))

    @staticmethod
    def _apply(document, update):
        for key, value in update.get("$set", {}).items():
            document[key] = copy.deepcopy(value)
        for key, value in update.get("$addToSet", {}).items():
            values = document.setdefault(key, [])
            if value not in values:
                values.append(value)
        for key, value in update.get("$pull", {}).items():
            document[key] = [item for item in document.get(key, []) if item != value]


@pytest.fixture
def collections():
    return {
        "users": FakeCollection(),
        "packets": FakeCollection(),
        "messages": FakeCollection(),
    }


@pytest.fixture
def services(collections):
    return build_services(collections)


@pytest.fixture
def add_user(collections):
    """Insert a user document directly, skipping password hashing."""

    async def _add_user(name="Ana", available=True, **extra):
        document = {
            "name": name,
            "email": f"{name.lower()}-{ObjectId()}@example.com",
            "password": "not-a-real-hash",
            "phone": "",
            "available": available,
            "packets": [],
            "createdAt": datetime.now(timezone.utc),
            **extra,
        }
        await collections["users"].insert_one(document)
        return document

    return _add_user


@pytest.fixture
def add_message(collections):
    """Insert a message with an explicit age, for ordering checks."""

    async def _add_message(sender, receiver, content, minutes_ago=0):
        document = {
            "content": content,
            "sender": sender["_id"],
            "receiver": receiver["_id"],
            "read": False,
            "createdAt": datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
        }
        await collections["messages"].insert_one(document)
        return document

    return _add_message


@pytest_asyncio.fixture
async def test_client(services):
    """HTTPX client bound to the app, with services on fake collections.

    ASGITransport does not run the lifespan, so no MongoDB is contacted.
    """
    from main import app

    app.state.user_service = services["users"]
    app.state.packet_service = services["packets"]
    app.state.message_service = services["messages"]
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
