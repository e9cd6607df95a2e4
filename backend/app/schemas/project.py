"""
Portfolio project schemas
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from backend.app.utils.ids import id_str


class ProjectIn(BaseModel):
    """Create/update body. `public` is accepted as an alias of isPublic."""
    freelancerId: Any = None
    title: Any = None
    description: Any = None
    technologies: Any = None
    duration: Any = None
    budget: Any = None
    completedAt: Any = None
    images: Any = None
    projectUrl: Any = None
    githubUrl: Any = None
    clientName: Any = None
    isPublic: Any = None
    public: Any = None


class ProjectOut(BaseModel):
    id: str
    freelancerId: str
    title: str
    description: str
    technologies: List[str] = Field(default_factory=list)
    duration: Optional[str] = None
    budget: Optional[float] = None
    completedAt: Optional[datetime] = None
    images: List[str] = Field(default_factory=list)
    projectUrl: Optional[str] = None
    githubUrl: Optional[str] = None
    clientName: Optional[str] = None
    isPublic: bool = True
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class ProjectListResponse(BaseModel):
    success: bool = True
    projects: List[ProjectOut]


class ProjectResponse(BaseModel):
    success: bool = True
    project: ProjectOut


def project_to_out(project) -> ProjectOut:
    return ProjectOut(
        id=id_str(project.id),
        freelancerId=id_str(project.freelancer_id),
        title=project.title,
        description=project.description,
        technologies=list(project.technologies or []),
        duration=project.duration,
        budget=project.budget,
        completedAt=project.completed_at,
        images=list(project.images or []),
        projectUrl=project.project_url,
        githubUrl=project.github_url,
        clientName=project.client_name,
        isPublic=bool(project.is_public) if project.is_public is not None else True,
        createdAt=project.created_at,
        updatedAt=project.updated_at,
    )
