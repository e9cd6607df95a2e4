"""Tests for /api/auth - signup, signin, password reset, profile patch"""
import logging
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

from backend.app.core.errors import ConflictError
from backend.app.core.security import issue_token, verify_password
from backend.app.models.employer import Employer
from backend.app.models.user import User
from backend.app.schemas.user import SignUpRequest
from backend.app.services.auth_service import AuthService


def _signup(client, **overrides):
    body = {
        "email": "new@example.com",
        "password": "pw123456",
        "fullName": "New Person",
        "role": "freelancer",
        **overrides,
    }
    return client.post("/api/auth/signup", json=body)


def test_signup_returns_user_and_token(client):
    r = _signup(client)
    assert r.status_code == 201
    data = r.json()
    assert data["token"]
    user = data["user"]
    assert user["email"] == "new@example.com"
    assert user["role"] == "freelancer"
    assert user["profile"]["fullName"] == "New Person"
    assert user["profile"]["totalRating"] == 0.0
    assert "hashed_password" not in user and "password" not in user


def test_signup_hashes_password(client, db_session):
    _signup(client)
    user = db_session.query(User).filter(User.email == "new@example.com").first()
    assert user.hashed_password != "pw123456"
    assert verify_password("pw123456", user.hashed_password)


def test_signup_duplicate_email(client):
    _signup(client)
    r = _signup(client)
    assert r.status_code == 400
    assert r.json() == {"error": "User already exists"}


def test_signup_requires_role(client):
    r = client.post(
        "/api/auth/signup",
        json={"email": "x@example.com", "password": "pw", "fullName": "X"},
    )
    assert r.status_code == 400
    assert "error" in r.json()


def test_employer_signup_creates_employer_record(client, db_session):
    r = _signup(client, email="hire@example.com", role="employer", title="Founder")
    assert r.status_code == 201
    employer = db_session.query(Employer).filter(Employer.email == "hire@example.com").first()
    assert employer is not None
    assert employer.full_name == "New Person"
    assert employer.title == "Founder"
    assert employer.active_jobs == 0


def test_signin_success_and_failure(client, freelancer):
    r = client.post("/api/auth/signin", json={"email": freelancer.email, "password": "secret123"})
    assert r.status_code == 200
    assert r.json()["user"]["id"] == str(freelancer.id)

    r = client.post("/api/auth/signin", json={"email": freelancer.email, "password": "wrong"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid credentials"}

    r = client.post("/api/auth/signin", json={"email": "ghost@example.com", "password": "x"})
    assert r.status_code == 401


def test_signin_upgrades_legacy_plaintext_password(client, db_session):
    user = User(email="old@example.com", hashed_password="plainpass", role="freelancer", full_name="Old")
    db_session.add(user)
    db_session.commit()

    r = client.post("/api/auth/signin", json={"email": "old@example.com", "password": "plainpass"})
    assert r.status_code == 200

    db_session.expire_all()
    stored = db_session.query(User).filter(User.email == "old@example.com").first()
    assert stored.hashed_password != "plainpass"
    assert verify_password("plainpass", stored.hashed_password)


def test_employer_signin_refreshes_mirror(client, db_session, employer_user):
    db_session.query(Employer).filter(Employer.email == employer_user.email).delete()
    db_session.commit()

    r = client.post("/api/auth/signin", json={"email": employer_user.email, "password": "secret123"})
    assert r.status_code == 200
    db_session.expire_all()
    assert db_session.query(Employer).filter(Employer.email == employer_user.email).count() == 1


def test_signout(client):
    assert client.post("/api/auth/signout").json() == {"success": True}


def test_forgot_unknown_email_still_succeeds(client):
    with patch("backend.app.services.mail_service.send_mail") as send:
        r = client.post("/api/auth/forgot", json={"email": "nobody@example.com"})
    assert r.status_code == 200
    assert r.json() == {"success": True}
    send.assert_not_called()


def test_forgot_requires_email(client):
    r = client.post("/api/auth/forgot", json={})
    assert r.status_code == 400
    assert r.json() == {"error": "Email is required"}


def test_forgot_survives_mail_failure(client, freelancer):
    with patch("backend.app.services.mail_service.send_mail", side_effect=OSError("smtp down")):
        r = client.post("/api/auth/forgot", json={"email": freelancer.email})
    assert r.status_code == 200


def test_otp_reset_flow(client, db_session, freelancer):
    """Correct OTP resets the password and is cleared; reusing it fails."""
    with patch("backend.app.services.mail_service.send_mail") as send:
        r = client.post("/api/auth/forgot", json={"email": freelancer.email})
    assert r.status_code == 200
    send.assert_called_once()

    db_session.expire_all()
    user = db_session.get(User, freelancer.id)
    otp = user.reset_otp
    assert otp and len(otp) == 6 and otp.isdigit()
    assert otp in send.call_args[0][2]
    assert user.reset_otp_expires > datetime.utcnow()

    body = {"email": freelancer.email, "otp": otp, "newPassword": "brand-new"}
    r = client.post("/api/auth/reset", json=body)
    assert r.status_code == 200
    assert r.json() == {"success": True}

    db_session.expire_all()
    user = db_session.get(User, freelancer.id)
    assert user.reset_otp is None
    assert user.reset_otp_expires is None

    r = client.post("/api/auth/reset", json=body)
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid or expired code"}

    r = client.post("/api/auth/signin", json={"email": freelancer.email, "password": "brand-new"})
    assert r.status_code == 200


def test_reset_wrong_and_expired_code(client, db_session, freelancer):
    freelancer.reset_otp = "123456"
    freelancer.reset_otp_expires = datetime.utcnow() + timedelta(minutes=5)
    db_session.commit()

    r = client.post("/api/auth/reset", json={"email": freelancer.email, "otp": "654321", "newPassword": "x"})
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid code"}

    freelancer.reset_otp_expires = datetime.utcnow() - timedelta(minutes=1)
    db_session.commit()
    r = client.post("/api/auth/reset", json={"email": freelancer.email, "otp": 123456, "newPassword": "x"})
    assert r.status_code == 400
    assert r.json() == {"error": "Code expired"}


def test_reset_requires_all_fields(client):
    r = client.post("/api/auth/reset", json={"email": "a@example.com"})
    assert r.status_code == 400
    assert r.json() == {"error": "Email, OTP and newPassword are required"}


def test_reset_syncs_employer_password(client, db_session, employer_user):
    employer_user.reset_otp = "111111"
    employer_user.reset_otp_expires = datetime.utcnow() + timedelta(minutes=5)
    db_session.commit()

    r = client.post(
        "/api/auth/reset",
        json={"email": employer_user.email, "otp": "111111", "newPassword": "employer-new"},
    )
    assert r.status_code == 200
    db_session.expire_all()
    employer = db_session.query(Employer).filter(Employer.email == employer_user.email).first()
    assert verify_password("employer-new", employer.hashed_password)


def test_patch_profile_requires_token(client, freelancer):
    r = client.patch(f"/api/auth/profile/{freelancer.id}", json={"title": "x"})
    assert r.status_code == 401


def test_patch_profile_forbidden_for_other_user(client, freelancer, second_freelancer, auth_headers):
    r = client.patch(f"/api/auth/profile/{second_freelancer.id}", json={"title": "x"}, headers=auth_headers)
    assert r.status_code == 403
    assert r.json() == {"error": "Forbidden"}


def test_patch_profile_self_and_admin(client, freelancer, auth_headers, admin_headers):
    r = client.patch(
        f"/api/auth/profile/{freelancer.id}",
        json={"title": "Staff Engineer", "hourlyRate": 90, "ignored": "x"},
        headers=auth_headers,
    )
    assert r.status_code == 200
    assert r.json()["title"] == "Staff Engineer"
    assert r.json()["hourlyRate"] == 90

    r = client.patch(f"/api/auth/profile/{freelancer.id}", json={"bio": "hi"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["bio"] == "hi"


def test_patch_profile_bad_token(client, freelancer):
    headers = {"Authorization": "Bearer not-a-jwt"}
    r = client.patch(f"/api/auth/profile/{freelancer.id}", json={}, headers=headers)
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid or expired token"}


def test_token_carries_subject_and_role(freelancer):
    from backend.app.core.security import decode_access_token

    payload = decode_access_token(issue_token(freelancer.id, "freelancer"))
    assert payload["sub"] == str(freelancer.id)
    assert payload["role"] == "freelancer"
    assert "exp" in payload


def test_signup_losing_unique_email_race_is_conflict(db_session, freelancer):
    """Pre-check passes but the insert hits the unique email index."""
    data = SignUpRequest(email=freelancer.email, password="pw123456", fullName="Twin", role="freelancer")
    precheck = MagicMock()
    precheck.filter.return_value.first.return_value = None
    with patch.object(db_session, "query", return_value=precheck):
        with pytest.raises(ConflictError):
            AuthService.signup(db_session, data)


def test_signup_conflict_maps_to_409(client):
    with patch.object(AuthService, "signup", side_effect=ConflictError("User already exists")):
        r = _signup(client)
    assert r.status_code == 409
    assert r.json() == {"error": "User already exists"}


def test_employer_signup_survives_mirror_failure(client, db_session, caplog):
    with patch("backend.app.services.sync_service.find_employer_mirror", side_effect=RuntimeError("db gone")), \
         caplog.at_level(logging.WARNING, logger="backend.services.sync"):
        r = _signup(client, email="hire@example.com", role="employer")

    assert r.status_code == 201
    assert "Failed to sync Employer on signup" in caplog.text
    db_session.expire_all()
    assert db_session.query(User).filter(User.email == "hire@example.com").count() == 1
    assert db_session.query(Employer).count() == 0


def test_employer_signin_survives_mirror_failure(client, employer_user, caplog):
    with patch("backend.app.services.sync_service.find_employer_mirror", side_effect=RuntimeError("db gone")), \
         caplog.at_level(logging.WARNING, logger="backend.services.sync"):
        r = client.post("/api/auth/signin", json={"email": employer_user.email, "password": "secret123"})

    assert r.status_code == 200
    assert r.json()["user"]["id"] == employer_user.id
    assert "Failed to sync Employer on signin" in caplog.text


def test_patch_profile_rejects_mistyped_values(client, db_session, freelancer, auth_headers):
    r = client.patch(f"/api/auth/profile/{freelancer.id}", json={"hourlyRate": "abc"}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json() == {"error": "hourlyRate must be a number"}

    r = client.patch(f"/api/auth/profile/{freelancer.id}", json={"skills": "python"}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json() == {"error": "skills must be an array of strings"}

    r = client.patch(f"/api/auth/profile/{freelancer.id}", json={"fullName": None}, headers=auth_headers)
    assert r.status_code == 400

    db_session.expire_all()
    stored = db_session.get(User, freelancer.id)
    assert stored.hourly_rate is None
    assert stored.skills == []


def test_patch_profile_skills_list_reaches_directory(client, freelancer, auth_headers):
    r = client.patch(f"/api/auth/profile/{freelancer.id}", json={"skills": ["python", "sql"]}, headers=auth_headers)
    assert r.status_code == 200
    items = client.get("/api/users", params={"role": "freelancer"}).json()
    assert items[0]["skills"] == ["python", "sql"]
