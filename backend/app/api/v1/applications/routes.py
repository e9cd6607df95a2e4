"""
Applications API - apply to a job, accept or decline an application
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_db
from backend.app.core.errors import DomainError, to_http
from backend.app.core.logging_config import get_logger
from backend.app.schemas.job import (
    ApplicationCreate,
    ApplicationCreatedResponse,
    ApplicationDecisionResponse,
    application_to_out,
)
from backend.app.services.job_service import JobService
from backend.app.utils import cache

logger = get_logger("api.applications")
router = APIRouter(prefix="/applications", tags=["applications"])


@router.post(
    "",
    response_model=ApplicationCreatedResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_application(body: ApplicationCreate, db: Session = Depends(get_db)):
    """
    Apply to a job. The job moves to "pending" and applicationsCount goes up by one.

    - **jobId**, **freelancerId**, **coverLetter**: required
    - 409 when this freelancer already applied to the job
    """
    logger.info("Application attempt job_id=%s freelancer_id=%s", body.jobId, body.freelancerId)
    try:
        job, application = JobService.apply(db, body)
    except DomainError as e:
        logger.warning("Application rejected job_id=%s reason=%s", body.jobId, e.message)
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Application error job_id=%s error=%s", body.jobId, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    await cache.invalidate_employer_dashboard(job.employer_id)
    return ApplicationCreatedResponse(
        application=application_to_out(application),
        jobId=str(job.id),
        jobStatus=job.status,
    )


async def _decide(application_id: str, decision: str, db: Session) -> ApplicationDecisionResponse:
    try:
        job, _ = JobService.decide_application(db, application_id, decision)
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Application %s error application_id=%s error=%s", decision, application_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    await cache.invalidate_employer_dashboard(job.employer_id)
    return ApplicationDecisionResponse(
        message=f"Application {decision} successfully",
        jobId=str(job.id),
        jobStatus=job.status,
    )


@router.put("/{application_id}/accept", response_model=ApplicationDecisionResponse)
async def accept_application(application_id: str, db: Session = Depends(get_db)):
    """Accept an application; the job status becomes "accepted"."""
    return await _decide(application_id, "accepted", db)


@router.put("/{application_id}/decline", response_model=ApplicationDecisionResponse)
async def decline_application(application_id: str, db: Session = Depends(get_db)):
    """Decline an application; the job status becomes "declined"."""
    return await _decide(application_id, "declined", db)
