from __future__ import annotations

import os

# Settings are read at import time, so the environment must be prepared
# before anything from bazaar_api is imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from bazaar_api.app.core.config import settings
from bazaar_api.app.core.db import init_db
from bazaar_api.app.main import app


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point the app at a fresh SQLite file for every test."""
    path = tmp_path / "test.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    init_db()
    return path


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def signup(c: TestClient, username: str, email: str | None = None, password: str = "secret123") -> dict:
    resp = c.post(
        "/api/auth/signup",
        json={"username": username, "email": email or f"{username}@example.com", "password": password},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
