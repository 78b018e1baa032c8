from __future__ import annotations

import os
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import importlib

fastapi_app = importlib.import_module("app.main").app
from app.core.config import settings
from app.db.base import Base
from app.db.session import get_db
from app.services.object_storage import (
    ObjectListing,
    StorageObjectNotFound,
    StoredObject,
    get_object_storage,
)

# Ensure all models are registered with SQLAlchemy metadata
import app.models  # noqa: F401


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, _connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture(scope="function")
def db_session(engine):
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _legacy_header_auth(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")


@pytest.fixture(scope="function")
def client(engine, db_session):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    with TestClient(fastapi_app) as test_client:
        yield test_client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"X-User-Email": "it@lma.example.com"}


class FakeObjectStorage:
    """In-memory stand-in for the R2 bucket."""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str | None]] = {}

    def put_object(self, key, data, content_type=None):
        self.objects[key] = (data, content_type)

    def get_object(self, key):
        if key not in self.objects:
            raise StorageObjectNotFound(key)
        data, content_type = self.objects[key]
        return StoredObject(
            key=key,
            body=iter([data]),
            content_type=content_type,
            content_length=len(data),
        )

    def delete_object(self, key):
        self.objects.pop(key, None)

    def list_prefix(self, prefix=""):
        listing = ObjectListing(prefix=prefix)
        for key, (data, _) in sorted(self.objects.items()):
            if not key.startswith(prefix) or key == prefix:
                continue
            rest = key[len(prefix):]
            if "/" in rest:
                folder = prefix + rest.split("/", 1)[0] + "/"
                if folder not in listing.folders:
                    listing.folders.append(folder)
            else:
                listing.files.append({"key": key, "size": len(data), "last_modified": None})
        return listing

    def presigned_get_url(self, key, expires_in=None):
        return f"https://r2.test/{key}?X-Amz-Expires={expires_in or 3600}"

    def public_url(self, key):
        return f"https://pub.r2.test/{key}"


@pytest.fixture
def fake_storage():
    storage = FakeObjectStorage()
    fastapi_app.dependency_overrides[get_object_storage] = lambda: storage
    yield storage
    fastapi_app.dependency_overrides.pop(get_object_storage, None)
