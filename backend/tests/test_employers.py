"""Tests for /api/employers - accounts, directory, metrics, reconcile, dashboard"""
from unittest.mock import AsyncMock, MagicMock, patch

from backend.app.models.employer import Employer


def test_employer_signup_and_signin(client, db_session):
    body = {"fullName": "Acme HR", "email": "hr@acme.example.com", "password": "pw", "title": "Recruiter"}
    r = client.post("/api/employers/signup", json=body)
    assert r.status_code == 201
    data = r.json()
    assert data["token"]
    assert data["employer"]["email"] == "hr@acme.example.com"
    assert data["employer"]["profile"]["title"] == "Recruiter"
    assert data["employer"]["profile"]["activeJobs"] == 0

    r = client.post("/api/employers/signup", json=body)
    assert r.status_code == 400
    assert r.json() == {"error": "Employer already exists"}

    r = client.post("/api/employers/signin", json={"email": "hr@acme.example.com", "password": "pw"})
    assert r.status_code == 200
    r = client.post("/api/employers/signin", json={"email": "hr@acme.example.com", "password": "nope"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid credentials"}


def test_employer_signup_requires_fields(client, db_session):
    r = client.post("/api/employers/signup", json={"email": "x@example.com"})
    assert r.status_code == 400
    assert r.json() == {"error": "fullName, email and password are required"}


def test_list_and_get_employers(client, employer_user, db_session, missing_id):
    employer = db_session.query(Employer).one()
    r = client.get("/api/employers")
    assert r.status_code == 200
    assert [e["email"] for e in r.json()] == [employer_user.email]

    r = client.get(f"/api/employers/{employer.id}")
    assert r.json()["profile"]["fullName"] == "Erin Boss"
    assert client.get(f"/api/employers/{missing_id}").status_code == 404
    assert client.get("/api/employers/abc").status_code == 400


def test_update_employer_profile(client, employer_user, db_session):
    employer = db_session.query(Employer).one()
    r = client.put(f"/api/employers/{employer.id}", json={"location": " Berlin ", "bio": "We hire"})
    assert r.status_code == 200
    assert r.json()["profile"]["location"] == "Berlin"
    assert r.json()["profile"]["bio"] == "We hire"


def test_patch_metrics_allow_list(client, employer_user, db_session):
    employer = db_session.query(Employer).one()
    r = client.patch(
        f"/api/employers/{employer.id}/metrics",
        json={"activeJobs": 3, "draftJobs": 1, "email": "hijack@example.com"},
    )
    assert r.status_code == 200
    assert r.json() == {"activeJobs": 3, "totalApplications": 0, "activeProjects": 0, "draftJobs": 1}

    db_session.expire_all()
    assert db_session.get(Employer, employer.id).email == employer_user.email
    assert client.get(f"/api/employers/{employer.id}/metrics").json()["activeJobs"] == 3


def test_patch_metrics_rejects_non_numbers(client, employer_user, db_session):
    employer = db_session.query(Employer).one()
    r = client.patch(f"/api/employers/{employer.id}/metrics", json={"activeJobs": "many"})
    assert r.status_code == 400
    assert r.json() == {"error": "activeJobs must be a number"}


def test_reconcile_metrics_from_jobs(client, create_job, apply, employer_user, freelancer, second_freelancer, db_session):
    employer = db_session.query(Employer).one()
    open_job = create_job(title="Open")
    accepted_job = create_job(title="Accepted")
    create_job(title="Draft", status="paused")
    apply(open_job["id"], freelancer.id)
    app = apply(accepted_job["id"], second_freelancer.id).json()["application"]
    client.put(f"/api/applications/{app['id']}/accept")

    r = client.post(f"/api/employers/{employer.id}/metrics/reconcile")
    assert r.status_code == 200
    expected = {"activeJobs": 1, "totalApplications": 2, "activeProjects": 1, "draftJobs": 1}
    assert r.json() == expected
    # Idempotent
    assert client.post(f"/api/employers/{employer.id}/metrics/reconcile").json() == expected
    assert client.get(f"/api/employers/{employer.id}/metrics").json() == expected


def test_dashboard_computed_on_read(client, create_job, apply, employer_user, freelancer, second_freelancer):
    open_job = create_job(title="Open")
    done_job = create_job(title="Done")
    apply(open_job["id"], freelancer.id)
    app = apply(done_job["id"], second_freelancer.id).json()["application"]
    client.put(f"/api/applications/{app['id']}/accept")
    client.patch(f"/api/jobs/{done_job['id']}", json={"status": "completed"})

    r = client.get(f"/api/employers/{employer_user.id}/dashboard")
    assert r.status_code == 200
    data = r.json()
    assert data["employerId"] == str(employer_user.id)
    assert data["totalJobs"] == 2
    assert data["totalApplications"] == 2
    assert data["pendingApplications"] == 1
    assert data["activeProjects"] == 0
    assert data["completedProjects"] == 1
    assert [j["title"] for j in data["recentJobs"]] == ["Done", "Open"]


def test_dashboard_unknown_employer_is_empty(client, db_session):
    data = client.get("/api/employers/nobody/dashboard").json()
    assert data["totalJobs"] == 0
    assert data["recentJobs"] == []


def test_dashboard_second_call_uses_cache(client, create_job, employer_user):
    """Cache hit skips the DB build entirely."""
    from backend.app.api.v1.employers import routes as employer_routes

    create_job()
    build_mock = MagicMock(wraps=employer_routes.metrics_service.build_employer_dashboard)

    with patch.object(employer_routes.metrics_service, "build_employer_dashboard", build_mock), \
         patch("backend.app.utils.cache.get", new_callable=AsyncMock) as mock_get, \
         patch("backend.app.utils.cache.set", new_callable=AsyncMock) as mock_set:
        mock_get.return_value = None
        r1 = client.get(f"/api/employers/{employer_user.id}/dashboard")
        assert r1.status_code == 200
        first_data = r1.json()
        mock_set.assert_awaited_once()

        mock_get.return_value = first_data
        r2 = client.get(f"/api/employers/{employer_user.id}/dashboard")
        assert r2.status_code == 200
        assert r2.json() == first_data

    assert build_mock.call_count == 1


def test_reconcile_counts_only_own_jobs(client, create_job, freelancer, employer_user, second_employer_user, db_session):
    create_job(title="Posted by Erin")
    erin = db_session.query(Employer).filter(Employer.user_id == employer_user.id).one()
    oscar = db_session.query(Employer).filter(Employer.user_id == second_employer_user.id).one()

    assert client.post(f"/api/employers/{oscar.id}/metrics/reconcile").json()["activeJobs"] == 0
    assert client.post(f"/api/employers/{erin.id}/metrics/reconcile").json()["activeJobs"] == 1


def test_employer_ids_never_match_user_ids(client, db_session, freelancer, employer_user, second_employer_user):
    from backend.app.models.user import User

    user_ids = {u.id for u in db_session.query(User).all()}
    employer_ids = {e.id for e in db_session.query(Employer).all()}
    assert len(employer_ids) == 2
    assert not user_ids & employer_ids


def test_standalone_employer_token_cannot_patch_user_profile(client, freelancer):
    body = {"fullName": "Acme HR", "email": "hr@acme.example.com", "password": "pw"}
    token = client.post("/api/employers/signup", json=body).json()["token"]

    r = client.patch(
        f"/api/auth/profile/{freelancer.id}",
        json={"title": "Changed by someone else"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 403
    assert r.json() == {"error": "Forbidden"}


def test_patch_metrics_rejects_non_finite(client, employer_user, db_session):
    employer = db_session.query(Employer).one()
    r = client.patch(
        f"/api/employers/{employer.id}/metrics",
        content='{"activeJobs": Infinity}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "activeJobs must be a number"}


def test_dashboard_limit(client, create_job, employer_user):
    create_job(title="First")
    create_job(title="Second")

    r = client.get(f"/api/employers/{employer_user.id}/dashboard", params={"limit": -1})
    assert r.status_code == 400

    data = client.get(f"/api/employers/{employer_user.id}/dashboard", params={"limit": 1}).json()
    assert data["totalJobs"] == 2
    assert [j["title"] for j in data["recentJobs"]] == ["Second"]
