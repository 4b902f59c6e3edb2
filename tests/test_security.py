from __future__ import annotations

import pytest

from bazaar_api.app.core.config import Settings
from bazaar_api.app.core.db import MIGRATIONS, get_connection, init_db
from bazaar_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


# ── Passwords ────────────────────────────────────────────────────────────


def test_hash_password_uses_requested_cost_factor():
    hashed = hash_password("secret123", rounds=10)
    assert hashed.startswith("$2b$10$")
    assert verify_password("secret123", hashed)


def test_hash_password_is_salted():
    assert hash_password("secret123") != hash_password("secret123")


def test_verify_password_rejects_wrong_password():
    assert not verify_password("wrong", hash_password("secret123"))


def test_verify_password_rejects_malformed_hash():
    assert not verify_password("secret123", "not-a-bcrypt-hash")


# ── Tokens ───────────────────────────────────────────────────────────────


def test_token_round_trip_carries_id_and_username():
    payload = decode_access_token(create_access_token({"id": 7, "username": "aina"}))
    assert payload["id"] == 7
    assert payload["username"] == "aina"
    assert "exp" in payload


@pytest.mark.parametrize("token", ["", "a.b", "a.b.c", "x" * 40])
def test_decode_rejects_malformed_tokens(token):
    assert decode_access_token(token) is None


def test_decode_rejects_token_signed_with_other_secret(monkeypatch):
    from bazaar_api.app.core.config import settings

    token = create_access_token({"id": 1, "username": "aina"})
    monkeypatch.setattr(settings, "secret_key", "another-secret")
    assert decode_access_token(token) is None


# ── Configuration ────────────────────────────────────────────────────────


def test_settings_without_secret_fail_fast():
    with pytest.raises(RuntimeError):
        Settings(secret_key="").validate()


def test_settings_with_secret_validate():
    Settings(secret_key="configured").validate()


# ── Schema ───────────────────────────────────────────────────────────────


def test_init_db_is_idempotent():
    init_db()
    init_db()
    conn = get_connection()
    try:
        versions = [row["version"] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
        tables = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
    finally:
        conn.close()
    assert versions == [version for version, _ in MIGRATIONS]
    assert {"users", "reviews", "votes", "subscriptions", "notifications"} <= tables


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_long_password_hashes_and_verifies():
    password = "p" * 80
    hashed = hash_password(password)
    assert verify_password(password, hashed)
    assert not verify_password("q" * 80, hashed)


def test_multibyte_password_cut_mid_character_still_verifies():
    # 73 UTF-8 bytes: the 72-byte cut falls inside the last character
    password = "a" * 71 + "é"
    assert verify_password(password, hash_password(password))


def test_app_startup_creates_schema_in_fresh_database(tmp_path, monkeypatch):
    from fastapi.testclient import TestClient

    from bazaar_api.app.core.config import settings
    from bazaar_api.app.main import app

    fresh = tmp_path / "fresh.db"
    monkeypatch.setattr(settings, "database_url", str(fresh))
    assert not fresh.exists()
    with TestClient(app) as c:
        assert c.get("/api/votes/Anywhere").json() == {"up": 0, "down": 0}
    conn = get_connection()
    try:
        tables = {row["name"] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    finally:
        conn.close()
    assert "votes" in tables


# ── Logging ──────────────────────────────────────────────────────────────


def test_relative_log_file_is_kept_beside_the_database(tmp_path):
    from pathlib import Path

    from bazaar_api.app.core.logging_config import resolve_log_path

    package_dir = Path(__file__).resolve().parent.parent / "bazaar_api"
    assert resolve_log_path("logs/api.log") == (package_dir / "logs" / "api.log").resolve()
    absolute = tmp_path / "api.log"
    assert resolve_log_path(str(absolute)) == absolute.resolve()
