"""
Jobs API - job CRUD, filtered listing and project submissions
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_db
from backend.app.core.errors import DomainError, to_http
from backend.app.core.logging_config import get_logger
from backend.app.schemas.job import (
    JobCreate,
    JobOut,
    JobUpdate,
    SubmissionIn,
    SubmissionResponse,
    job_to_out,
    submission_to_out,
)
from backend.app.services.job_service import JobService, freelancer_directory
from backend.app.utils import cache

logger = get_logger("api.jobs")
router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=list[JobOut], response_model_exclude_none=True)
def list_jobs(
    search: str | None = None,
    experienceLevel: str | None = None,
    employerId: str | None = None,
    appliedBy: str | None = None,
    budgetRange: str | None = None,
    db: Session = Depends(get_db),
):
    """
    List jobs matching all given filters. Applications carry freelancerName/freelancerTitle.

    - **search**: case-insensitive substring of title or description
    - **budgetRange**: "min-max", keeps jobs with budgetMin >= min and budgetMax <= max
    """
    try:
        jobs = JobService.list_jobs(
            db,
            search=search,
            experience_level=experienceLevel,
            employer_id=employerId,
            applied_by=appliedBy,
            budget_range=budgetRange,
        )
        users = freelancer_directory(db, jobs)
        return [job_to_out(j, users) for j in jobs]
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        logger.exception("List jobs error error=%s", str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{job_id}", response_model=JobOut, response_model_exclude_none=True)
def get_job(job_id: str, db: Session = Depends(get_db)):
    """Get one job with enriched applications."""
    try:
        job = JobService.get_job(db, job_id)
        return job_to_out(job, freelancer_directory(db, [job]))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        logger.exception("Get job error job_id=%s error=%s", job_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=JobOut, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_job(payload: JobCreate, db: Session = Depends(get_db)):
    """Create a job posting. Starts with no applications and status open unless given."""
    try:
        job = JobService.create_job(db, payload)
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.warning("Create job rejected error=%s", str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await cache.invalidate_employer_dashboard(job.employer_id)
    return job_to_out(job)


@router.patch("/{job_id}", response_model=JobOut, response_model_exclude_none=True)
async def patch_job(job_id: str, payload: JobUpdate, db: Session = Depends(get_db)):
    """Partial update of job fields (status included; applications are not patchable)."""
    try:
        job, previous_employer_id = JobService.patch_job(db, job_id, payload)
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.warning("Patch job rejected job_id=%s error=%s", job_id, str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await cache.invalidate_employer_dashboard(job.employer_id)
    if previous_employer_id != job.employer_id:
        await cache.invalidate_employer_dashboard(previous_employer_id)
    return job_to_out(job)


@router.delete("/{job_id}")
async def delete_job(job_id: str, db: Session = Depends(get_db)) -> dict:
    """Hard delete a job with its applications and submissions."""
    try:
        employer_id = JobService.delete_job(db, job_id)
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        logger.exception("Delete job error job_id=%s error=%s", job_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    await cache.invalidate_employer_dashboard(employer_id)
    return {"success": True}


@router.post(
    "/{job_id}/submissions",
    response_model=SubmissionResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_submission(job_id: str, body: SubmissionIn, db: Session = Depends(get_db)):
    """Append a project submission for a freelancer."""
    try:
        job, submission = JobService.create_submission(db, job_id, body)
        return SubmissionResponse(submission=submission_to_out(submission), jobId=str(job.id))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.warning("Create submission rejected job_id=%s error=%s", job_id, str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.put("/{job_id}/submissions", response_model=SubmissionResponse, response_model_exclude_none=True)
def upsert_submission(job_id: str, body: SubmissionIn, response: Response, db: Session = Depends(get_db)):
    """Update the freelancer's submission in place; creates it (201) when none exists."""
    try:
        job, submission, created = JobService.upsert_submission(db, job_id, body)
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.warning("Upsert submission rejected job_id=%s error=%s", job_id, str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if created:
        response.status_code = status.HTTP_201_CREATED
    return SubmissionResponse(submission=submission_to_out(submission), jobId=str(job.id))
