"""
Shared fixtures.

MongoDB and SMTP are replaced by small in-memory doubles so the gateway
can be exercised end to end without external services.
"""
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from passlib.context import CryptContext
from pymongo.errors import DuplicateKeyError

from app.auth.errors import DependencyError
from app.auth.gateway import build_gateway
from app.config import Settings
from app.main import create_app


class FakeCollection:
    """Just enough of motor's collection API for the credential store."""

    def __init__(self):
        self.docs = []
        self.unique_keys = set()

    async def create_index(self, key, unique=False):
        if unique:
            self.unique_keys.add(key)
        return f"{key}_1"

    @staticmethod
    def _matches(doc, query):
        # equality filters only
        return all(doc.get(key) == expected for key, expected in query.items())

    async def find_one(self, query):
        for doc in self.docs:
            if self._matches(doc, query):
                return dict(doc)
        return None

    async def insert_one(self, doc):
        for key in self.unique_keys:
            if any(existing.get(key) == doc.get(key) for existing in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error: {key}")
        doc.setdefault("_id", ObjectId())
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query, update):
        for doc in self.docs:
            if self._matches(doc, query):
                doc.update(update.get("$set", {}))
                for name in update.get("$unset", {}):
                    doc.pop(name, None)
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query):
        for index, doc in enumerate(self.docs):
            if self._matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


class RecordingMailer:
    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, to, subject, body):
        if self.fail:
            raise DependencyError("Mail delivery failed: connection refused")
        self.sent.append(SimpleNamespace(to=to, subject=subject, body=body))


class FakeClock:
    def __init__(self, start=datetime(2026, 1, 15, 12, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


_pwd = CryptContext(schemes=["bcrypt"], bcrypt__rounds=4)


def hash_password(password):
    return _pwd.hash(password)


def verify_password(password, hashed):
    return _pwd.verify(password, hashed)


@pytest.fixture
def settings():
    return Settings(jwt_secret="test-secret", environment="test", bcrypt_rounds=4)


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway(settings, db, mailer, clock):
    return build_gateway(settings, db, mailer=mailer, clock=clock)


@pytest.fixture
def seed(db):
    """Insert principals directly, bypassing registration."""

    def _user(email, password, name="Test User", role="customer", **extra):
        doc = {"_id": ObjectId(), "name": name, "email": email,
               "passwordHash": hash_password(password), "role": role, **extra}
        db["users"].docs.append(doc)
        return doc

    def _delivery(email, password, name="Rider"):
        doc = {"_id": ObjectId(), "name": name, "email": email,
               "passwordHash": hash_password(password), "phone": None, "isAvailable": False}
        db["deliveries"].docs.append(doc)
        return doc

    def _seller(email, restaurant_name="Spice Car", station="Colombo Fort", **extra):
        doc = {"_id": ObjectId(), "email": email, "restaurantName": restaurant_name,
               "station": station, "isActive": True, "isApproved": False, **extra}
        db["sellers"].docs.append(doc)
        return doc

    return SimpleNamespace(user=_user, delivery=_delivery, seller=_seller)


@pytest.fixture
def client(settings, db, mailer, clock):
    app = create_app(settings, db=db, mailer=mailer, clock=clock)
    with TestClient(app) as test_client:
        yield test_client
