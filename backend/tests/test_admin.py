"""Tests for /api/admin and the admin seed task"""
import pytest

from backend.app.core.config import settings
from backend.app.core.errors import ValidationError
from backend.app.models.admin import Admin
from backend.app.tasks.seed_admin import seed_admin

ADMIN = {"email": "root@example.com", "password": "rootpw", "fullName": "Root"}


@pytest.fixture
def bootstrap_token(monkeypatch):
    monkeypatch.setattr(settings, "admin_bootstrap_token", "let-me-in")
    return "let-me-in"


def test_admin_health(client):
    assert client.get("/api/admin/health").json() == {"status": "ok"}


def test_root_health(client):
    data = client.get("/health").json()
    assert data["status"] == "ok"
    assert "time" in data


def test_bootstrap_forbidden_without_configured_token(client, monkeypatch):
    monkeypatch.setattr(settings, "admin_bootstrap_token", "")
    r = client.post("/api/admin/bootstrap", json=ADMIN, headers={"x-bootstrap-token": ""})
    assert r.status_code == 403
    assert r.json() == {"error": "Forbidden"}


def test_bootstrap_wrong_token(client, bootstrap_token):
    r = client.post("/api/admin/bootstrap", json=ADMIN, headers={"x-bootstrap-token": "guess"})
    assert r.status_code == 403


def test_bootstrap_creates_admin(client, bootstrap_token, db_session):
    r = client.post("/api/admin/bootstrap", json=ADMIN, headers={"x-bootstrap-token": bootstrap_token})
    assert r.status_code == 201
    admin = r.json()["admin"]
    assert admin["email"] == ADMIN["email"]
    assert admin["role"] == "admin"
    assert admin["profile"]["fullName"] == "Root"

    r = client.post("/api/admin/bootstrap", json=ADMIN, params={"token": bootstrap_token})
    assert r.status_code == 409
    assert r.json() == {"error": "Admin already exists"}


def test_bootstrap_requires_credentials(client, bootstrap_token):
    r = client.post("/api/admin/bootstrap", json={"email": "a@example.com"}, params={"token": bootstrap_token})
    assert r.status_code == 400
    assert r.json() == {"error": "email and password are required"}


def test_admin_signin(client, bootstrap_token):
    client.post("/api/admin/bootstrap", json=ADMIN, params={"token": bootstrap_token})
    r = client.post("/api/admin/signin", json={"email": ADMIN["email"], "password": ADMIN["password"]})
    assert r.status_code == 200
    assert r.json()["token"]

    r = client.post("/api/admin/signin", json={"email": ADMIN["email"], "password": "bad"})
    assert r.status_code == 401
    r = client.post("/api/admin/signin", json={"email": ADMIN["email"]})
    assert r.status_code == 400


def test_admin_token_can_patch_any_profile(client, bootstrap_token, freelancer):
    client.post("/api/admin/bootstrap", json=ADMIN, params={"token": bootstrap_token})
    token = client.post(
        "/api/admin/signin", json={"email": ADMIN["email"], "password": ADMIN["password"]}
    ).json()["token"]
    r = client.patch(
        f"/api/auth/profile/{freelancer.id}",
        json={"title": "Set by admin"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 200


def test_seed_admin_task(db_session, monkeypatch):
    monkeypatch.setattr(settings, "admin_email", "seed@example.com")
    monkeypatch.setattr(settings, "admin_password", "seedpw")
    monkeypatch.setattr(settings, "admin_name", "")

    assert seed_admin(db_session) == {"created": True, "email": "seed@example.com"}
    assert seed_admin(db_session) == {"created": False, "email": "seed@example.com"}
    admin = db_session.query(Admin).one()
    assert admin.full_name == "Admin"


def test_seed_admin_requires_settings(db_session, monkeypatch):
    monkeypatch.setattr(settings, "admin_email", "")
    with pytest.raises(ValidationError):
        seed_admin(db_session)
