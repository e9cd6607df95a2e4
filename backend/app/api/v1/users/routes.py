"""
Users API - freelancer directory, profiles, skills, portfolio projects and reviews
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_db
from backend.app.core.errors import DomainError, to_http
from backend.app.core.logging_config import get_logger
from backend.app.schemas.employer import employer_to_out, employer_to_profile
from backend.app.schemas.project import (
    ProjectIn,
    ProjectListResponse,
    ProjectResponse,
    project_to_out,
)
from backend.app.schemas.user import (
    FreelancerListItem,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    ReviewCreatedResponse,
    ReviewRequest,
    SkillsRequest,
    UserMetricsOut,
    review_to_out,
    user_to_list_item,
    user_to_metrics,
    user_to_out,
    user_to_profile,
)
from backend.app.services import metrics_service
from backend.app.services.employer_service import EmployerService
from backend.app.services.project_service import ProjectService
from backend.app.services.user_service import UserService

logger = get_logger("api.users")
router = APIRouter(prefix="/users", tags=["users"])


def _server_error(action: str, user_id, e: Exception) -> HTTPException:
    logger.exception("%s error user_id=%s error=%s", action, user_id, str(e))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("", response_model=list[FreelancerListItem])
def list_users(role: str | None = None, db: Session = Depends(get_db)):
    """Freelancer directory. Only ?role=freelancer is supported."""
    if role != "freelancer":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unsupported query")
    try:
        return [user_to_list_item(u) for u in UserService.list_freelancers(db)]
    except Exception as e:
        raise _server_error("List freelancers", None, e)


@router.get("/{user_id}/metrics", response_model=UserMetricsOut)
def get_user_metrics(user_id: str, db: Session = Depends(get_db)):
    """Stored dashboard metrics of a user."""
    try:
        return user_to_metrics(UserService.get_user(db, user_id))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        raise _server_error("Get user metrics", user_id, e)


@router.post("/{user_id}/metrics/reconcile", response_model=UserMetricsOut)
def reconcile_user_metrics(user_id: str, db: Session = Depends(get_db)):
    """Recompute the stored metrics from applications and reviews."""
    try:
        user = UserService.get_user(db, user_id)
        return UserMetricsOut(**metrics_service.reconcile_user_metrics(db, user))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        raise _server_error("Reconcile user metrics", user_id, e)


@router.get("/{user_id}")
def get_user(user_id: str, type: str | None = None, db: Session = Depends(get_db)):
    """
    Full user profile (no password or reset code).

    With ?type=employer, returns the employer view, built from the User row
    when no Employer record exists yet.
    """
    try:
        if type == "employer":
            return employer_to_out(EmployerService.view_for_user_id(db, user_id))
        return user_to_out(UserService.get_user(db, user_id))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        raise _server_error("Get user", user_id, e)


@router.put("/{user_id}/profile", response_model=ProfileUpdateResponse)
def update_profile(
    user_id: str,
    body: ProfileUpdateRequest,
    type: str | None = None,
    db: Session = Depends(get_db),
):
    """Update core profile fields. ?type=employer writes the Employer record instead."""
    try:
        if type == "employer":
            employer = EmployerService.update_profile(db, user_id, body)
            return ProfileUpdateResponse(profile=employer_to_profile(employer).model_dump(), id=str(employer.id))
        user = UserService.update_profile(db, user_id, body)
        return ProfileUpdateResponse(profile=user_to_profile(user).model_dump(), id=str(user.id))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        raise _server_error("Update profile", user_id, e)


@router.put("/{user_id}/skills")
def update_skills(user_id: str, body: SkillsRequest, db: Session = Depends(get_db)) -> dict:
    """Replace the user's skills."""
    try:
        skills = UserService.set_skills(db, user_id, body.skills)
        return {"success": True, "skills": skills}
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        raise _server_error("Update skills", user_id, e)


@router.post("/{user_id}/projects", response_model=ProjectListResponse, status_code=status.HTTP_201_CREATED)
def create_project(user_id: str, body: ProjectIn, db: Session = Depends(get_db)):
    """Add a portfolio project. Returns all of the user's projects."""
    try:
        project = ProjectService.create(db, user_id, body)
        user = UserService.get_user(db, project.freelancer_id)
        return ProjectListResponse(projects=[project_to_out(p) for p in user.projects])
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        raise _server_error("Create project", user_id, e)


@router.put("/{user_id}/projects/{project_id}", response_model=ProjectResponse)
def update_project(user_id: str, project_id: str, body: ProjectIn, db: Session = Depends(get_db)):
    """Update one of the user's projects."""
    try:
        user = UserService.get_user(db, user_id)
        project = ProjectService.update(db, project_id, body, freelancer_id=user.id)
        return ProjectResponse(project=project_to_out(project))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        raise _server_error("Update project", user_id, e)


@router.delete("/{user_id}/projects/{project_id}")
def delete_project(user_id: str, project_id: str, db: Session = Depends(get_db)) -> dict:
    """Remove one of the user's projects."""
    try:
        user = UserService.get_user(db, user_id)
        ProjectService.delete(db, project_id, freelancer_id=user.id)
        return {"success": True}
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        raise _server_error("Delete project", user_id, e)


@router.post("/{user_id}/reviews", response_model=ReviewCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_review(user_id: str, body: ReviewRequest, db: Session = Depends(get_db)):
    """Add an employer review to a freelancer and refresh totalRating."""
    try:
        review = UserService.add_review(db, user_id, body)
        return ReviewCreatedResponse(review=review_to_out(review))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        raise _server_error("Create review", user_id, e)
