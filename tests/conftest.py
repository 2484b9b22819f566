import os
import tempfile
from itertools import count
from types import SimpleNamespace

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

os.environ.setdefault("UPLOADS_DIR", os.path.join(tempfile.gettempdir(), "where2tattoo-test-uploads"))

import main
from main import app
from app.core.auth import get_current_user
from app.db import mongodb


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeUpdateResult:
    def __init__(self, matched_count):
        self.matched_count = matched_count
        self.modified_count = matched_count


class FakeDeleteResult:
    def __init__(self, deleted_count):
        self.deleted_count = deleted_count


OPERATORS = {
    "$ne": lambda value, arg: value != arg,
    "$in": lambda value, arg: value in arg,
    "$gte": lambda value, arg: value is not None and value >= arg,
    "$lte": lambda value, arg: value is not None and value <= arg,
}


def matches(document, query):
    for key, condition in query.items():
        value = document.get(key)
        if isinstance(condition, dict) and condition and all(op.startswith("$") for op in condition):
            if not all(OPERATORS[op](value, arg) for op, arg in condition.items()):
                return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    """Sortable, sliceable result set that can be awaited with to_list or iterated with async for."""

    def __init__(self, documents):
        self.documents = [dict(d) for d in documents]
        self._skip = 0
        self._limit = 0

    def sort(self, key_or_list, direction=1):
        keys = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction)]
        for key, direction in reversed(keys):
            self.documents.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def skip(self, count):
        self._skip = count
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _results(self):
        results = self.documents[self._skip:]
        return results[:self._limit] if self._limit else results

    async def to_list(self, length=None):
        results = self._results()
        return results[:length] if length else results

    async def _iterate(self):
        for document in self._results():
            yield document

    def __aiter__(self):
        return self._iterate()


def _field(document, expression):
    if isinstance(expression, str) and expression.startswith("$"):
        return document.get(expression[1:])
    return expression


def _group(documents, spec):
    groups = {}
    for document in documents:
        groups.setdefault(_field(document, spec["_id"]), []).append(document)

    rows = []
    for key, members in groups.items():
        row = {"_id": key}
        for name, accumulator in spec.items():
            if name == "_id":
                continue
            (op, expression), = accumulator.items()
            values = [_field(m, expression) for m in members]
            row[name] = sum(values) if op == "$sum" else sum(values) / len(values)
        rows.append(row)
    return rows


class FakeCollection:
    """Just enough of a motor collection for the service code under test."""

    def __init__(self):
        self.documents = {}

    def add(self, **document):
        document.setdefault("_id", ObjectId())
        self.documents[document["_id"]] = document
        return document

    async def insert_one(self, document):
        document = dict(document)
        document.setdefault("_id", ObjectId())
        self.documents[document["_id"]] = document
        return FakeInsertResult(document["_id"])

    async def find_one(self, query, projection=None):
        for document in self.documents.values():
            if matches(document, query):
                return dict(document)
        return None

    def find(self, query=None, projection=None):
        return FakeCursor(d for d in self.documents.values() if matches(d, query or {}))

    async def distinct(self, key, query=None):
        values = []
        for document in self.find(query).documents:
            if document.get(key) not in values:
                values.append(document.get(key))
        return values

    def aggregate(self, pipeline):
        documents = list(self.documents.values())
        for stage in pipeline:
            (name, spec), = stage.items()
            if name == "$match":
                documents = [d for d in documents if matches(d, spec)]
            elif name == "$group":
                documents = _group(documents, spec)
            elif name == "$project":
                documents = [
                    {key: _field(d, expr) for key, expr in spec.items() if expr != 0}
                    for d in documents
                ]
            elif name == "$sort":
                documents = FakeCursor(documents).sort(list(spec.items())).documents
        return FakeCursor(documents)

    async def update_one(self, query, update):
        document = await self.find_one(query)
        if document is None:
            return FakeUpdateResult(0)
        self.documents[document["_id"]].update(update.get("$set", {}))
        return FakeUpdateResult(1)

    async def delete_one(self, query):
        document = await self.find_one(query)
        if document is None:
            return FakeDeleteResult(0)
        del self.documents[document["_id"]]
        return FakeDeleteResult(1)


@pytest.fixture
def fake_db(monkeypatch):
    fake = SimpleNamespace(
        users=FakeCollection(),
        studios=FakeCollection(),
        bookings=FakeCollection(),
        reviews=FakeCollection(),
        conversations=FakeCollection(),
        messages=FakeCollection(),
        contact_requests=FakeCollection(),
    )
    monkeypatch.setattr(mongodb.db, "db", fake)
    return fake


_ids = count(1)


def make_user(role="customer", **extra):
    oid = ObjectId()
    user = {
        "_id": oid,
        "id": str(oid),
        "email": f"user{next(_ids)}@where2tattoo.app",
        "fullName": "Test User",
        "role": role,
        "createdAt": "2025-01-01T00:00:00",
    }
    user.update(extra)
    return user


def make_studio(owner_id=None, **extra):
    oid = ObjectId()
    studio = {
        "_id": oid,
        "id": str(oid),
        "ownerId": owner_id or str(ObjectId()),
        "name": "Black Lotus Tattoo",
        "slug": "black-lotus-tattoo-portland",
        "location": "Portland, OR",
        "city": "Portland",
        "description": "",
        "styles": ["Japanese", "Fine Line"],
        "images": [],
        "priceRange": {"min": 0, "max": 100},
        "verified": True,
        "rating": 4.5,
        "reviewCount": 2,
        "openingHours": None,
        "createdAt": "2025-01-01T00:00:00",
    }
    studio.update(extra)
    return studio


@pytest.fixture
def customer():
    return make_user("customer", fullName="Casey Customer")


@pytest.fixture
def owner():
    return make_user("studio_owner", fullName="Olive Owner")


@pytest.fixture
def login():
    """Act as the given user for the rest of the test."""
    def _login(user):
        app.dependency_overrides[get_current_user] = lambda: user
        return user
    yield _login
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def socket_client(monkeypatch):
    """Synchronous client sharing one event loop across requests and sockets."""
    async def no_database():
        return None

    monkeypatch.setattr(main, "connect_to_mongo", no_database)
    monkeypatch.setattr(main, "close_mongo_connection", no_database)
    with TestClient(app) as test_client:
        yield test_client
