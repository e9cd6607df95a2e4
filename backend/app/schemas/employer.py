"""
Employer and admin Pydantic schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from backend.app.utils.ids import id_str


class EmployerSignUpRequest(BaseModel):
    fullName: Optional[str] = None
    title: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class CredentialsRequest(BaseModel):
    """Email/password pair for employer and admin signin."""
    email: Optional[str] = None
    password: Optional[str] = None


class AdminBootstrapRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    fullName: Optional[str] = None


class EmployerMetrics(BaseModel):
    activeJobs: int = 0
    totalApplications: int = 0
    activeProjects: int = 0
    draftJobs: int = 0


class EmployerProfileOut(EmployerMetrics):
    fullName: str = ""
    title: str = ""
    avatarUrl: Optional[str] = None
    phone: str = ""
    location: str = ""
    website: str = ""
    linkedin: str = ""
    github: str = ""
    bio: str = ""


class EmployerOut(BaseModel):
    id: str
    email: str
    role: str = "employer"
    profile: EmployerProfileOut
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class EmployerAuthResponse(BaseModel):
    employer: EmployerOut
    token: str


class RecentJobOut(BaseModel):
    id: str
    title: str
    status: str
    applicationsCount: int = 0
    updatedAt: Optional[datetime] = None


class EmployerDashboardOut(BaseModel):
    """Employer dashboard numbers computed from the jobs table on read."""
    employerId: str
    totalJobs: int = 0
    openJobs: int = 0
    totalApplications: int = 0
    pendingApplications: int = 0
    activeProjects: int = 0
    completedProjects: int = 0
    recentJobs: List[RecentJobOut] = Field(default_factory=list)


class AdminProfileOut(BaseModel):
    fullName: str = ""
    avatarUrl: str = ""


class AdminOut(BaseModel):
    id: str
    email: str
    role: str = "admin"
    profile: AdminProfileOut
    createdAt: Optional[datetime] = None


class AdminResponse(BaseModel):
    admin: AdminOut


class AdminAuthResponse(BaseModel):
    admin: AdminOut
    token: str


def employer_to_metrics(employer) -> EmployerMetrics:
    return EmployerMetrics(
        activeJobs=employer.active_jobs or 0,
        totalApplications=employer.total_applications or 0,
        activeProjects=employer.active_projects or 0,
        draftJobs=employer.draft_jobs or 0,
    )


def employer_to_profile(employer) -> EmployerProfileOut:
    return EmployerProfileOut(
        fullName=employer.full_name or "",
        title=employer.title or "",
        avatarUrl=employer.avatar_url,
        phone=employer.phone or "",
        location=employer.location or "",
        website=employer.website or "",
        linkedin=employer.linkedin or "",
        github=employer.github or "",
        bio=employer.bio or "",
        **employer_to_metrics(employer).model_dump(),
    )


def employer_to_out(employer) -> EmployerOut:
    return EmployerOut(
        id=id_str(employer.id),
        email=employer.email,
        role=employer.role or "employer",
        profile=employer_to_profile(employer),
        createdAt=employer.created_at,
        updatedAt=employer.updated_at,
    )


def admin_to_out(admin) -> AdminOut:
    return AdminOut(
        id=id_str(admin.id),
        email=admin.email,
        role=admin.role or "admin",
        profile=AdminProfileOut(fullName=admin.full_name or "", avatarUrl=admin.avatar_url or ""),
        createdAt=admin.created_at,
    )


# camelCase metric key -> Employer column
EMPLOYER_METRIC_COLUMNS: dict[str, str] = {
    "activeJobs": "active_jobs",
    "totalApplications": "total_applications",
    "activeProjects": "active_projects",
    "draftJobs": "draft_jobs",
}
