"""
Portfolio projects - the one store behind /projects and /users/:id/projects.
"""
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError, ValidationError
from backend.app.models.project import Project
from backend.app.models.user import User
from backend.app.schemas.project import ProjectIn
from backend.app.utils.ids import parse_id, parse_principal_id


def _parse_datetime(value: Any, field: str) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date")
    # Stored naive UTC like every other timestamp column
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _is_public(body: ProjectIn) -> bool | None:
    for value in (body.isPublic, body.public):
        if isinstance(value, bool):
            return value
    return None


def _apply_updates(project: Project, body: ProjectIn) -> None:
    """Partial update: only well-typed values are written."""
    if isinstance(body.title, str) and body.title.strip():
        project.title = body.title.strip()
    if isinstance(body.description, str) and body.description.strip():
        project.description = body.description
    if isinstance(body.technologies, list):
        project.technologies = [str(t) for t in body.technologies]
    if isinstance(body.images, list):
        project.images = [str(i) for i in body.images]
    if isinstance(body.duration, str):
        project.duration = body.duration
    if isinstance(body.budget, (int, float)) and not isinstance(body.budget, bool):
        project.budget = float(body.budget)
    if body.completedAt:
        project.completed_at = _parse_datetime(body.completedAt, "completedAt")
    if isinstance(body.projectUrl, str):
        project.project_url = body.projectUrl
    if isinstance(body.githubUrl, str):
        project.github_url = body.githubUrl
    if isinstance(body.clientName, str):
        project.client_name = body.clientName
    is_public = _is_public(body)
    if is_public is not None:
        project.is_public = is_public
    project.updated_at = datetime.utcnow()


class ProjectService:

    @staticmethod
    def list_public_for_freelancer(db: Session, freelancer_id: Any) -> list[Project]:
        """Public projects, most recently completed first (undated ones last)."""
        fid = parse_principal_id(freelancer_id)
        if fid is None:
            raise ValidationError("Invalid freelancer id")
        return (
            db.query(Project)
            .filter(Project.freelancer_id == fid, Project.is_public.is_(True))
            .order_by(
                Project.completed_at.is_(None),
                Project.completed_at.desc(),
                Project.created_at.desc(),
                Project.id.desc(),
            )
            .all()
        )

    @staticmethod
    def create(db: Session, freelancer_id: Any, body: ProjectIn) -> Project:
        fid = parse_principal_id(freelancer_id)
        if fid is None:
            raise ValidationError("Invalid user id")
        if not body.title or not body.description:
            raise ValidationError("title and description are required")
        if not db.get(User, fid):
            raise NotFoundError("User not found")

        budget = body.budget
        if budget in (None, "", False):
            budget = None
        else:
            try:
                budget = float(budget)
            except (TypeError, ValueError):
                raise ValidationError("budget must be a number")

        is_public = _is_public(body)
        project = Project(
            freelancer_id=fid,
            title=str(body.title).strip(),
            description=str(body.description).strip(),
            technologies=[str(t) for t in body.technologies] if isinstance(body.technologies, list) else [],
            images=[str(i) for i in body.images] if isinstance(body.images, list) else [],
            duration=str(body.duration) if body.duration else None,
            budget=budget,
            completed_at=_parse_datetime(body.completedAt, "completedAt") if body.completedAt else None,
            project_url=str(body.projectUrl) if body.projectUrl else None,
            github_url=str(body.githubUrl) if body.githubUrl else None,
            client_name=str(body.clientName) if body.clientName else None,
            is_public=True if is_public is None else is_public,
        )
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    @staticmethod
    def get(db: Session, project_id: Any, freelancer_id: str | None = None) -> Project:
        pid = parse_id(project_id)
        if pid is None:
            raise ValidationError("Invalid project id")
        project = db.get(Project, pid)
        if not project or (freelancer_id is not None and project.freelancer_id != freelancer_id):
            raise NotFoundError("Project not found")
        return project

    @staticmethod
    def update(db: Session, project_id: Any, body: ProjectIn, freelancer_id: str | None = None) -> Project:
        project = ProjectService.get(db, project_id, freelancer_id)
        _apply_updates(project, body)
        db.commit()
        db.refresh(project)
        return project

    @staticmethod
    def delete(db: Session, project_id: Any, freelancer_id: str | None = None) -> None:
        project = ProjectService.get(db, project_id, freelancer_id)
        db.delete(project)
        db.commit()
