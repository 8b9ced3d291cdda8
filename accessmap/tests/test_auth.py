from __future__ import annotations

import bcrypt
import pytest
from fastapi.testclient import TestClient

from accessmap.app import app, get_store
from accessmap.auth.moderators import (
    ModeratorLockedError,
    authenticate,
    last_login,
    seed_moderators,
)
from accessmap.config import AppConfig
from accessmap.places.store import InMemoryPlaceStore

client = TestClient(app)


def _login_moderator(c):
    c.post("/auth/login", json={"username": "admin", "password": "admin123"})


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success_moderator():
    resp = client.post("/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["user"] == {"username": "admin", "role": "admin"}


def test_login_wrong_password():
    resp = client.post("/auth/login", json={"username": "admin", "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = client.post("/auth/login", json={"username": "nobody", "password": "x"})
    assert resp.status_code == 401


def test_login_validation_rejects_empty_password():
    resp = client.post("/auth/login", json={"username": "admin", "password": ""})
    assert resp.status_code == 422


def test_auth_me_not_logged_in():
    c = TestClient(app)  # fresh client, no session
    resp = c.get("/auth/me")
    assert resp.status_code == 401


def test_logout():
    _login_moderator(client)
    assert client.get("/auth/me").status_code == 200
    resp = client.post("/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["status"] == "logged_out"
    resp = client.get("/auth/me")
    assert resp.status_code == 401


# ── Moderator accounts ───────────────────────────────────────────────────


@pytest.fixture
def reseed():
    yield seed_moderators
    seed_moderators()


def test_login_with_prehashed_password(reseed):
    hashed = bcrypt.hashpw(b"s3cret", bcrypt.gensalt()).decode()
    reseed(AppConfig(moderator_username="mod", moderator_password_hash=hashed))
    assert authenticate("mod", "s3cret") == {"username": "mod", "role": "admin"}
    assert authenticate("mod", "admin123") is None
    assert authenticate("admin", "admin123") is None


def test_malformed_password_hash_never_matches(reseed):
    reseed(AppConfig(moderator_password_hash="not-a-bcrypt-hash"))
    assert authenticate("admin", "not-a-bcrypt-hash") is None


def test_successful_login_records_time(reseed):
    reseed()
    assert last_login("admin") is None
    authenticate("admin", "admin123")
    assert last_login("admin") is not None
    assert last_login("nobody") is None


def test_repeated_failures_lock_account(reseed):
    reseed(AppConfig(max_login_failures=2, lockout_seconds=60))
    assert authenticate("admin", "wrong") is None
    assert authenticate("admin", "wrong") is None
    with pytest.raises(ModeratorLockedError) as info:
        authenticate("admin", "admin123")
    assert 0 < info.value.retry_after <= 61


def test_success_resets_failure_count(reseed):
    reseed(AppConfig(max_login_failures=2))
    assert authenticate("admin", "wrong") is None
    assert authenticate("admin", "admin123") is not None
    assert authenticate("admin", "wrong") is None
    assert authenticate("admin", "admin123") is not None


def test_locked_login_returns_429(reseed):
    reseed(AppConfig(max_login_failures=1, lockout_seconds=30))
    c = TestClient(app)
    assert c.post("/auth/login", json={"username": "admin", "password": "wrong"}).status_code == 401
    resp = c.post("/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 429
    assert int(resp.headers["retry-after"]) > 0
    assert c.get("/auth/me").status_code == 401


# ── Route protection ─────────────────────────────────────────────────────


def test_analytics_requires_moderator():
    c = TestClient(app)
    resp = c.get("/analytics")
    assert resp.status_code == 401


def test_moderation_requires_moderator():
    c = TestClient(app)
    resp = c.get("/moderation/reports")
    assert resp.status_code == 401


def test_moderation_lists_reported_places():
    store = InMemoryPlaceStore({
        "a": {"placeName": "Alpha", "reports": 1, "createdAt": 1},
        "b": {"placeName": "Beta", "reports": 0, "createdAt": 2},
        "c": {"placeName": "Gamma", "reports": 4, "createdAt": 3},
    })
    app.dependency_overrides[get_store] = lambda: store
    try:
        c = TestClient(app)
        _login_moderator(c)
        resp = c.get("/moderation/reports")
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert [p["id"] for p in body["places"]] == ["c", "a"]


# ── Visitor endpoints stay public ────────────────────────────────────────


def test_health_is_public():
    c = TestClient(app)
    assert c.get("/health").status_code == 200


def test_metadata_is_public():
    c = TestClient(app)
    assert c.get("/metadata").status_code == 200
