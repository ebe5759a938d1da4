"""Shared pytest fixtures: in-memory database, API client and auth helpers."""

import os
import tempfile

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DEBUG"] = "false"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="blog-uploads-")

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401 - registers models on Base.metadata
from app.api.deps import get_db
from app.config import settings
from app.database import Base
from app.main import app

# Smallest payloads that pass the magic-bytes check
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def stored_path(url: str) -> Path:
    """Map a public upload URL back to the file on disk."""
    return Path(settings.UPLOAD_DIR) / url.split("/uploads/", 1)[1]


def register(client, name="Jane Doe", email="jane@example.com", password="secret123"):
    return client.post(
        "/api/users/register",
        json={
            "name": name,
            "email": email,
            "password": password,
            "confirmPassword": password,
        },
    )


def login(client, email="jane@example.com", password="secret123"):
    return client.post("/api/users/login", json={"email": email, "password": password})


def auth_headers(client, name="Jane Doe", email="jane@example.com", password="secret123"):
    """Register (if needed) and log in, returning (user_id, headers)."""
    register(client, name=name, email=email, password=password)
    body = login(client, email=email, password=password).json()
    return body["id"], {"Authorization": f"Bearer {body['token']}"}


def create_post(client, headers, title="Harvest report", category="Agriculture", thumbnail=PNG_BYTES):
    return client.post(
        "/api/posts",
        data={
            "title": title,
            "description": "<p>Rain came early this year.</p>",
            "category": category,
        },
        files={"thumbnail": ("thumb.png", thumbnail, "image/png")},
        headers=headers,
    )


@pytest.fixture()
def author(client):
    return auth_headers(client)


@pytest.fixture()
def other_user(client):
    return auth_headers(client, name="John Roe", email="john@example.com")
