"""Tests for the reconcile task and the metrics helpers it drives"""
from backend.app.models.employer import Employer
from backend.app.models.job import Job
from backend.app.models.user import User
from backend.app.services import metrics_service
from backend.app.services.sync_service import compute_average_rating
from backend.app.tasks.reconcile import reconcile_all


def test_compute_average_rating():
    assert compute_average_rating([]) == 0.0
    assert compute_average_rating([4, 5]) == 4.5


def test_reconcile_repairs_drifted_counters(client, create_job, apply, db_session, employer_user, freelancer):
    job = create_job()
    apply(job["id"], freelancer.id)

    # Simulate drift left behind by an interrupted write
    db_session.expire_all()
    stored = db_session.get(Job, int(job["id"]))
    stored.applications_count = 7
    db_session.commit()

    result = reconcile_all(db_session)
    assert result == {"jobsFixed": 1, "employers": 1, "freelancers": 1}

    db_session.expire_all()
    assert db_session.get(Job, int(job["id"])).applications_count == 1
    employer = db_session.query(Employer).one()
    assert employer.active_jobs == 1
    assert employer.total_applications == 1
    assert db_session.get(User, freelancer.id).pending_applications == 1


def test_reconcile_is_idempotent(client, create_job, apply, db_session, employer_user, freelancer):
    job = create_job()
    apply(job["id"], freelancer.id)
    reconcile_all(db_session)
    second = reconcile_all(db_session)
    assert second["jobsFixed"] == 0


def test_employer_refs_include_user_id(db_session, employer_user):
    employer = db_session.query(Employer).one()
    refs = metrics_service.employer_refs(db_session, employer)
    assert str(employer.id) in refs
    assert str(employer_user.id) in refs
    assert len(refs) == len(set(refs))
