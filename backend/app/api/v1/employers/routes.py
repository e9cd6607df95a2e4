"""
Employers API - employer accounts, directory, stored metrics and the computed dashboard
"""
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.dependencies import get_db
from backend.app.core.errors import DomainError, to_http
from backend.app.core.logging_config import get_logger
from backend.app.schemas.employer import (
    CredentialsRequest,
    EmployerAuthResponse,
    EmployerDashboardOut,
    EmployerMetrics,
    EmployerOut,
    EmployerSignUpRequest,
    employer_to_metrics,
    employer_to_out,
    employer_to_profile,
)
from backend.app.schemas.user import ProfileUpdateRequest, ProfileUpdateResponse
from backend.app.services import metrics_service
from backend.app.services.employer_service import EmployerService
from backend.app.utils import cache

logger = get_logger("api.employers")
router = APIRouter(prefix="/employers", tags=["employers"])


@router.post("/signup", response_model=EmployerAuthResponse, status_code=status.HTTP_201_CREATED)
def employer_signup(data: EmployerSignUpRequest, db: Session = Depends(get_db)):
    """Create a standalone employer account."""
    try:
        employer, token = EmployerService.signup(db, data)
        logger.info("Employer signed up employer_id=%s", employer.id)
        return EmployerAuthResponse(employer=employer_to_out(employer), token=token)
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Employer signup error email=%s error=%s", data.email, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/signin", response_model=EmployerAuthResponse)
def employer_signin(data: CredentialsRequest, db: Session = Depends(get_db)):
    try:
        employer, token = EmployerService.signin(db, data)
        return EmployerAuthResponse(employer=employer_to_out(employer), token=token)
    except DomainError as e:
        logger.warning("Employer signin failed email=%s reason=%s", data.email, e.message)
        raise to_http(e)
    except Exception as e:
        logger.exception("Employer signin error email=%s error=%s", data.email, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("", response_model=list[EmployerOut])
def list_employers(db: Session = Depends(get_db)):
    try:
        return [employer_to_out(e) for e in EmployerService.list_employers(db)]
    except Exception as e:
        logger.exception("List employers error error=%s", str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{employer_id}", response_model=EmployerOut)
def get_employer(employer_id: str, db: Session = Depends(get_db)):
    try:
        return employer_to_out(EmployerService.get_employer(db, employer_id))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        logger.exception("Get employer error employer_id=%s error=%s", employer_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.put("/{employer_id}", response_model=ProfileUpdateResponse)
def update_employer(employer_id: str, body: ProfileUpdateRequest, db: Session = Depends(get_db)):
    """Update employer profile fields (same rules as PUT /users/:id/profile?type=employer)."""
    try:
        employer = EmployerService.update_profile(db, employer_id, body)
        return ProfileUpdateResponse(profile=employer_to_profile(employer).model_dump(), id=str(employer.id))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Update employer error employer_id=%s error=%s", employer_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{employer_id}/metrics", response_model=EmployerMetrics)
def get_employer_metrics(employer_id: str, db: Session = Depends(get_db)):
    """Stored metrics (may lag behind the jobs table until reconciled)."""
    try:
        return employer_to_metrics(EmployerService.get_employer(db, employer_id))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        logger.exception("Get employer metrics error employer_id=%s error=%s", employer_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.patch("/{employer_id}/metrics", response_model=EmployerMetrics)
def patch_employer_metrics(employer_id: str, updates: dict = Body(...), db: Session = Depends(get_db)):
    """Overwrite stored metrics. Keys: activeJobs, totalApplications, activeProjects, draftJobs."""
    try:
        return employer_to_metrics(EmployerService.patch_metrics(db, employer_id, updates))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Patch employer metrics error employer_id=%s error=%s", employer_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/{employer_id}/metrics/reconcile", response_model=EmployerMetrics)
def reconcile_employer_metrics(employer_id: str, db: Session = Depends(get_db)):
    """Recompute the stored metrics from the employer's jobs."""
    try:
        employer = EmployerService.get_employer(db, employer_id)
        return EmployerMetrics(**metrics_service.reconcile_employer_metrics(db, employer))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Reconcile employer metrics error employer_id=%s error=%s", employer_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{employer_ref}/dashboard", response_model=EmployerDashboardOut)
async def get_employer_dashboard(
    employer_ref: str,
    limit: int | None = Query(default=None, ge=0),
    db: Session = Depends(get_db),
):
    """
    Dashboard numbers computed from jobs whose employerId equals employer_ref.
    Cached per employer (ttl from config); job and application writes drop the entry.
    """
    limit_val = limit if limit is not None else settings.employer_dashboard_recent_limit
    cache_key = cache.employer_dashboard_key(employer_ref)
    if limit is None:
        cached = await cache.get(cache_key)
        if cached is not None:
            return cached

    try:
        result = metrics_service.build_employer_dashboard(db, employer_ref, limit_val)
    except Exception as e:
        logger.exception("Employer dashboard error employer_ref=%s error=%s", employer_ref, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if limit is None:
        await cache.set(cache_key, result, ttl=settings.employer_dashboard_cache_ttl)
    return result
