"""
Projects API - standalone access to portfolio projects
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_db
from backend.app.core.errors import DomainError, to_http
from backend.app.core.logging_config import get_logger
from backend.app.schemas.project import ProjectIn, ProjectOut, project_to_out
from backend.app.services.project_service import ProjectService

logger = get_logger("api.projects")
router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/freelancer/{freelancer_id}", response_model=list[ProjectOut])
def list_freelancer_projects(freelancer_id: str, db: Session = Depends(get_db)):
    """Public projects of a freelancer, most recently completed first."""
    try:
        return [project_to_out(p) for p in ProjectService.list_public_for_freelancer(db, freelancer_id)]
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        logger.exception("List projects error freelancer_id=%s error=%s", freelancer_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(body: ProjectIn, db: Session = Depends(get_db)):
    """Create a project for body.freelancerId."""
    try:
        return project_to_out(ProjectService.create(db, body.freelancerId, body))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Create project error error=%s", str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.put("/{project_id}", response_model=ProjectOut)
def update_project(project_id: str, body: ProjectIn, db: Session = Depends(get_db)):
    try:
        return project_to_out(ProjectService.update(db, project_id, body))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Update project error project_id=%s error=%s", project_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.delete("/{project_id}")
def delete_project(project_id: str, db: Session = Depends(get_db)) -> dict:
    try:
        ProjectService.delete(db, project_id)
        return {"success": True}
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Delete project error project_id=%s error=%s", project_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
