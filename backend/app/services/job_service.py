"""
Job aggregate service - jobs plus the applications and submissions they own.

Every read and write of a job's applications/submissions goes through here so
that applicationsCount and the job status stay in step with the rows.
"""
from datetime import datetime
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from backend.app.core.config import settings
from backend.app.core.errors import ConflictError, NotFoundError, ValidationError
from backend.app.core.logging_config import get_logger
from backend.app.models.job import Job, JobApplication, JobSubmission
from backend.app.models.user import User
from backend.app.schemas.job import ApplicationCreate, JobCreate, JobUpdate, SubmissionIn, job_payload_to_columns
from backend.app.utils.ids import parse_id, parse_principal_id

logger = get_logger("services.jobs")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def parse_budget_range(raw: str) -> tuple[float, float]:
    """'1000-5000' -> (1000.0, 5000.0)."""
    parts = str(raw).split("-")
    if len(parts) != 2:
        raise ValidationError("budgetRange must look like min-max")
    try:
        return float(parts[0]), float(parts[1])
    except ValueError:
        raise ValidationError("budgetRange must look like min-max")


def _optional_text(value: Any) -> str | None:
    return str(value) if value else None


def _optional_number(value: Any, field: str) -> float | None:
    if value is None or value == "" or value is False:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")


def _with_children(query):
    return query.options(selectinload(Job.applications), selectinload(Job.submissions))


def freelancer_directory(db: Session, jobs: list[Job]) -> dict[str, dict]:
    """One batched users query for every applicant on the given jobs.

    Returns {freelancerId: {"fullName", "title"}}; ids that are not well-formed
    user ids are skipped.
    """
    ids = set()
    for job in jobs:
        for app in job.applications:
            uid = parse_principal_id(app.freelancer_id)
            if uid is not None:
                ids.add(uid)
    if not ids:
        return {}
    rows = db.query(User.id, User.full_name, User.title).filter(User.id.in_(ids)).all()
    return {str(r.id): {"fullName": r.full_name, "title": r.title} for r in rows}


class JobService:
    """Queries and mutations of the job aggregate"""

    @staticmethod
    def list_jobs(
        db: Session,
        search: str | None = None,
        experience_level: str | None = None,
        employer_id: str | None = None,
        applied_by: str | None = None,
        budget_range: str | None = None,
    ) -> list[Job]:
        """All jobs matching every filter given, most recently updated first."""
        query = _with_children(db.query(Job))
        if experience_level:
            query = query.filter(Job.experience_level == experience_level)
        if employer_id:
            query = query.filter(Job.employer_id == str(employer_id))
        if applied_by:
            query = query.filter(Job.applications.any(JobApplication.freelancer_id == str(applied_by)))
        if search:
            pattern = f"%{_escape_like(search)}%"
            query = query.filter(
                or_(
                    Job.title.ilike(pattern, escape="\\"),
                    Job.description.ilike(pattern, escape="\\"),
                )
            )
        if budget_range:
            low, high = parse_budget_range(budget_range)
            query = query.filter(Job.budget_min >= low, Job.budget_max <= high)
        return query.order_by(Job.updated_at.desc(), Job.id.desc()).all()

    @staticmethod
    def get_job(db: Session, job_id: Any) -> Job:
        jid = parse_id(job_id)
        if jid is None:
            raise ValidationError("Invalid job id")
        job = _with_children(db.query(Job)).filter(Job.id == jid).first()
        if not job:
            raise NotFoundError("Job not found")
        return job

    @staticmethod
    def create_job(db: Session, payload: JobCreate) -> Job:
        job = Job(**job_payload_to_columns(payload.model_dump()))
        job.applications_count = 0
        db.add(job)
        db.commit()
        db.refresh(job)
        logger.info("Job created job_id=%s employer_id=%s", job.id, job.employer_id)
        return job

    @staticmethod
    def patch_job(db: Session, job_id: Any, payload: JobUpdate) -> tuple[Job, str]:
        """Apply the set fields. Returns the job and the employerId it had before the patch."""
        job = JobService.get_job(db, job_id)
        previous_employer_id = job.employer_id
        for column, value in job_payload_to_columns(payload.model_dump(exclude_unset=True)).items():
            setattr(job, column, value)
        job.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(job)
        return job, previous_employer_id

    @staticmethod
    def delete_job(db: Session, job_id: Any) -> str:
        """Hard delete; the job's applications and submissions go with it. Returns employerId."""
        job = JobService.get_job(db, job_id)
        employer_id = job.employer_id
        db.delete(job)
        db.commit()
        logger.info("Job deleted job_id=%s", job_id)
        return employer_id

    # --- Applications ---
    @staticmethod
    def find_application(db: Session, job_id: int, freelancer_id: str) -> JobApplication | None:
        return (
            db.query(JobApplication)
            .filter(JobApplication.job_id == job_id, JobApplication.freelancer_id == freelancer_id)
            .first()
        )

    @staticmethod
    def apply(db: Session, body: ApplicationCreate) -> tuple[Job, JobApplication]:
        """Append an application, bump applicationsCount and move the job to pending."""
        jid = parse_id(body.jobId)
        if jid is None:
            raise ValidationError("Invalid jobId")
        if body.freelancerId in (None, "", False):
            raise ValidationError("freelancerId is required")
        if not isinstance(body.coverLetter, str) or not body.coverLetter.strip():
            raise ValidationError("coverLetter is required")

        freelancer_id = str(body.freelancerId)
        job = db.get(Job, jid)
        if not job:
            raise NotFoundError("Job not found")
        if JobService.find_application(db, jid, freelancer_id):
            raise ConflictError("You have already applied to this job")

        application = JobApplication(
            job_id=jid,
            freelancer_id=freelancer_id,
            cover_letter=body.coverLetter.strip(),
            experience=_optional_text(body.experience),
            approach=_optional_text(body.approach),
            proposed_rate=_optional_number(body.proposedRate, "proposedRate"),
            estimated_duration=_optional_number(body.estimatedDuration, "estimatedDuration"),
            status="applied",
        )
        db.add(application)
        # Increment in SQL so concurrent appliers do not lose counts
        job.applications_count = Job.applications_count + 1
        job.status = "pending"
        job.updated_at = datetime.utcnow()
        try:
            db.commit()
        except IntegrityError:
            # Lost the race against a concurrent application by the same freelancer
            db.rollback()
            raise ConflictError("You have already applied to this job")
        db.refresh(job)
        db.refresh(application)
        logger.info(
            "Application created application_id=%s job_id=%s freelancer_id=%s",
            application.id, jid, freelancer_id,
        )
        return job, application

    @staticmethod
    def decide_application(db: Session, application_id: Any, decision: str) -> tuple[Job, JobApplication]:
        """Set one application's status and mirror it onto the parent job.

        Other applications keep their status unless auto_decline_on_accept is on,
        in which case accepting declines every application still "applied".
        """
        if decision not in ("accepted", "declined"):
            raise ValidationError("Invalid decision")
        aid = parse_id(application_id)
        application = db.get(JobApplication, aid) if aid is not None else None
        if not application:
            raise NotFoundError("Application not found")

        now = datetime.utcnow()
        job = application.job
        application.status = decision
        application.updated_at = now
        job.status = decision
        job.updated_at = now
        if decision == "accepted" and settings.auto_decline_on_accept:
            for other in job.applications:
                if other.id != application.id and other.status == "applied":
                    other.status = "declined"
                    other.updated_at = now
        db.commit()
        db.refresh(job)
        logger.info("Application %s application_id=%s job_id=%s", decision, application.id, job.id)
        return job, application

    # --- Submissions ---
    @staticmethod
    def _submission_target(db: Session, job_id: Any, body: SubmissionIn) -> tuple[Job, str]:
        jid = parse_id(job_id)
        if jid is None:
            raise ValidationError("Invalid job id")
        if body.freelancerId in (None, "", False):
            raise ValidationError("freelancerId is required")
        job = db.get(Job, jid)
        if not job:
            raise NotFoundError("Job not found")
        return job, str(body.freelancerId)

    @staticmethod
    def _append_submission(db: Session, job: Job, freelancer_id: str, body: SubmissionIn) -> JobSubmission:
        submission = JobSubmission(
            job_id=job.id,
            freelancer_id=freelancer_id,
            deploy_link=_optional_text(body.deployLink),
            github_link=_optional_text(body.githubLink),
            description=_optional_text(body.description),
        )
        db.add(submission)
        job.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(submission)
        return submission

    @staticmethod
    def create_submission(db: Session, job_id: Any, body: SubmissionIn) -> tuple[Job, JobSubmission]:
        """Always appends, even when the freelancer already submitted."""
        job, freelancer_id = JobService._submission_target(db, job_id, body)
        submission = JobService._append_submission(db, job, freelancer_id, body)
        logger.info("Submission created submission_id=%s job_id=%s", submission.id, job.id)
        return job, submission

    @staticmethod
    def upsert_submission(db: Session, job_id: Any, body: SubmissionIn) -> tuple[Job, JobSubmission, bool]:
        """Update the freelancer's submission in place, or append one. Third item is True when created."""
        job, freelancer_id = JobService._submission_target(db, job_id, body)
        submission = (
            db.query(JobSubmission)
            .filter(JobSubmission.job_id == job.id, JobSubmission.freelancer_id == freelancer_id)
            .order_by(JobSubmission.id)
            .first()
        )
        if submission is None:
            submission = JobService._append_submission(db, job, freelancer_id, body)
            return job, submission, True

        now = datetime.utcnow()
        if isinstance(body.deployLink, str):
            submission.deploy_link = body.deployLink
        if isinstance(body.githubLink, str):
            submission.github_link = body.githubLink
        if isinstance(body.description, str):
            submission.description = body.description
        submission.updated_at = now
        job.updated_at = now
        db.commit()
        db.refresh(submission)
        return job, submission, False
