"""
Derived metrics - computed from jobs/applications/reviews on demand.

The stored counters (employers.*, users.* metrics, jobs.applications_count)
are caches; the reconcile_* functions rewrite them from the source rows and
are safe to run any number of times.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from backend.app.core.logging_config import get_logger
from backend.app.models.employer import Employer
from backend.app.models.job import Job, JobApplication
from backend.app.models.review import Review
from backend.app.models.user import User
from backend.app.services.sync_service import compute_average_rating

logger = get_logger("services.metrics")

ACTIVE_JOB_STATUSES = frozenset({"open", "pending"})
DRAFT_JOB_STATUSES = frozenset({"paused"})


def _has_accepted(job: Job) -> bool:
    return any((a.status or "").lower() == "accepted" for a in job.applications)


def employer_refs(db: Session, employer: Employer) -> list[str]:
    """Ids a job's employerId may carry for this employer: the Employer id and the employer User id."""
    refs = [str(employer.id)]
    user_id = employer.user_id
    if user_id is None:
        row = db.query(User.id).filter(User.email == employer.email, User.role == "employer").first()
        user_id = row.id if row is not None else None
    if user_id is not None and str(user_id) not in refs:
        refs.append(str(user_id))
    return refs


def jobs_for_employer(db: Session, refs: list[str]) -> list[Job]:
    return (
        db.query(Job)
        .options(selectinload(Job.applications))
        .filter(Job.employer_id.in_(refs))
        .order_by(Job.updated_at.desc(), Job.id.desc())
        .all()
    )


def compute_employer_metrics(jobs: list[Job]) -> dict:
    """activeJobs/totalApplications/activeProjects/draftJobs for a set of jobs."""
    return {
        "activeJobs": sum(1 for j in jobs if j.status in ACTIVE_JOB_STATUSES),
        "totalApplications": sum(len(j.applications) for j in jobs),
        "activeProjects": sum(1 for j in jobs if _has_accepted(j) and j.status != "completed"),
        "draftJobs": sum(1 for j in jobs if j.status in DRAFT_JOB_STATUSES),
    }


def reconcile_employer_metrics(db: Session, employer: Employer) -> dict:
    metrics = compute_employer_metrics(jobs_for_employer(db, employer_refs(db, employer)))
    employer.active_jobs = metrics["activeJobs"]
    employer.total_applications = metrics["totalApplications"]
    employer.active_projects = metrics["activeProjects"]
    employer.draft_jobs = metrics["draftJobs"]
    db.commit()
    logger.info("Employer metrics reconciled employer_id=%s metrics=%s", employer.id, metrics)
    return metrics


def compute_freelancer_metrics(db: Session, user: User) -> dict:
    """Counts over the freelancer's applications, plus mean review rating."""
    rows = (
        db.query(JobApplication.status, Job.status)
        .join(Job, JobApplication.job_id == Job.id)
        .filter(JobApplication.freelancer_id == str(user.id))
        .all()
    )
    ratings = [r[0] for r in db.query(Review.rating).filter(Review.freelancer_id == user.id).all()]
    return {
        "activeProjects": sum(1 for app_status, job_status in rows if app_status == "accepted" and job_status != "completed"),
        "pendingApplications": sum(1 for app_status, _ in rows if app_status == "applied"),
        "completedProjects": sum(1 for app_status, job_status in rows if app_status == "accepted" and job_status == "completed"),
        "totalRating": compute_average_rating(ratings),
    }


def reconcile_user_metrics(db: Session, user: User) -> dict:
    metrics = compute_freelancer_metrics(db, user)
    user.active_projects = metrics["activeProjects"]
    user.pending_applications = metrics["pendingApplications"]
    user.completed_projects = metrics["completedProjects"]
    user.total_rating = metrics["totalRating"]
    db.commit()
    logger.info("User metrics reconciled user_id=%s metrics=%s", user.id, metrics)
    return metrics


def reconcile_applications_counts(db: Session) -> int:
    """Rewrite jobs.applications_count from the rows. Returns how many jobs were off."""
    counts = dict(
        db.query(JobApplication.job_id, func.count(JobApplication.id))
        .group_by(JobApplication.job_id)
        .all()
    )
    fixed = 0
    for job in db.query(Job).all():
        actual = counts.get(job.id, 0)
        if job.applications_count != actual:
            job.applications_count = actual
            fixed += 1
    db.commit()
    return fixed


def build_employer_dashboard(db: Session, employer_ref: str, recent_limit: int) -> dict:
    """Dashboard numbers for jobs posted under employerId == employer_ref."""
    jobs = jobs_for_employer(db, [employer_ref])
    accepted = [j for j in jobs if _has_accepted(j)]
    return {
        "employerId": employer_ref,
        "totalJobs": len(jobs),
        "openJobs": sum(1 for j in jobs if j.status == "open"),
        "totalApplications": sum(len(j.applications) for j in jobs),
        "pendingApplications": sum(1 for j in jobs for a in j.applications if a.status == "applied"),
        "activeProjects": sum(1 for j in accepted if j.status != "completed"),
        "completedProjects": sum(1 for j in accepted if j.status == "completed"),
        "recentJobs": [
            {
                "id": str(j.id),
                "title": j.title,
                "status": j.status,
                "applicationsCount": len(j.applications),
                "updatedAt": j.updated_at.isoformat() if j.updated_at else None,
            }
            for j in jobs[:recent_limit]
        ],
    }
