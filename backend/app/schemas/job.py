"""
Job aggregate Pydantic schemas - jobs, embedded applications and submissions
"""
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from backend.app.utils.ids import id_str

JobStatus = Literal["open", "pending", "accepted", "declined", "completed", "paused", "cancelled"]
BudgetType = Literal["fixed", "hourly"]
ExperienceLevel = Literal["entry", "intermediate", "expert"]


class SkillTag(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return None if v is None else str(v)


# --- Requests ---
class JobCreate(BaseModel):
    """Body of POST /jobs. Unknown keys are dropped."""
    employerId: str
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    budgetType: BudgetType
    budgetMin: Optional[float] = None
    budgetMax: Optional[float] = None
    durationWeeks: Optional[float] = None
    status: JobStatus = "open"
    location: Optional[str] = None
    remoteAllowed: bool = True
    experienceLevel: Optional[ExperienceLevel] = None
    relevantExperience: Optional[str] = None
    proposedApproach: Optional[str] = None
    skills: List[SkillTag] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @field_validator("employerId", mode="before")
    @classmethod
    def _coerce_employer_id(cls, v):
        return v if v is None else str(v)


class JobUpdate(BaseModel):
    """Body of PATCH /jobs/:id. Only the keys sent are written.

    The embedded collections and applicationsCount are not patchable; they
    only change through the application/submission endpoints.
    """
    employerId: Optional[str] = None
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    budgetType: Optional[BudgetType] = None
    budgetMin: Optional[float] = None
    budgetMax: Optional[float] = None
    durationWeeks: Optional[float] = None
    status: Optional[JobStatus] = None
    location: Optional[str] = None
    remoteAllowed: Optional[bool] = None
    experienceLevel: Optional[ExperienceLevel] = None
    relevantExperience: Optional[str] = None
    proposedApproach: Optional[str] = None
    skills: Optional[List[SkillTag]] = None

    model_config = {"extra": "ignore"}

    @field_validator("employerId", mode="before")
    @classmethod
    def _coerce_employer_id(cls, v):
        return v if v is None else str(v)


class ApplicationCreate(BaseModel):
    """Body of POST /applications. Presence checks happen in the service for exact messages."""
    jobId: Any = None
    freelancerId: Any = None
    coverLetter: Any = None
    experience: Any = None
    approach: Any = None
    proposedRate: Any = None
    estimatedDuration: Any = None


class SubmissionIn(BaseModel):
    """Body of POST/PUT /jobs/:id/submissions."""
    freelancerId: Any = None
    deployLink: Any = None
    githubLink: Any = None
    description: Any = None


# --- Responses ---
class ApplicationOut(BaseModel):
    id: str
    freelancerId: str
    coverLetter: str
    experience: Optional[str] = None
    approach: Optional[str] = None
    proposedRate: Optional[float] = None
    estimatedDuration: Optional[float] = None
    status: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    freelancerName: Optional[str] = None
    freelancerTitle: Optional[str] = None


class SubmissionOut(BaseModel):
    id: str
    freelancerId: str
    deployLink: Optional[str] = None
    githubLink: Optional[str] = None
    description: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class JobOut(BaseModel):
    id: str
    employerId: str
    title: str
    description: str
    budgetType: str
    budgetMin: Optional[float] = None
    budgetMax: Optional[float] = None
    durationWeeks: Optional[float] = None
    status: str
    location: Optional[str] = None
    remoteAllowed: Optional[bool] = None
    experienceLevel: Optional[str] = None
    relevantExperience: Optional[str] = None
    proposedApproach: Optional[str] = None
    skills: List[SkillTag] = Field(default_factory=list)
    applicationsCount: int = 0
    applications: List[ApplicationOut] = Field(default_factory=list)
    submissions: List[SubmissionOut] = Field(default_factory=list)
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class ApplicationCreatedResponse(BaseModel):
    success: bool = True
    application: ApplicationOut
    jobId: str
    jobStatus: str


class ApplicationDecisionResponse(BaseModel):
    success: bool = True
    message: str
    jobId: str
    jobStatus: str


class SubmissionResponse(BaseModel):
    success: bool = True
    submission: SubmissionOut
    jobId: str


# --- Converters ---
def application_to_out(app, user_info: dict | None = None) -> ApplicationOut:
    """Convert JobApplication row; user_info adds freelancerName/freelancerTitle."""
    out = ApplicationOut(
        id=id_str(app.id),
        freelancerId=app.freelancer_id,
        coverLetter=app.cover_letter,
        experience=app.experience,
        approach=app.approach,
        proposedRate=app.proposed_rate,
        estimatedDuration=app.estimated_duration,
        status=app.status,
        createdAt=app.created_at,
        updatedAt=app.updated_at,
    )
    if user_info:
        out.freelancerName = user_info.get("fullName")
        out.freelancerTitle = user_info.get("title")
    return out


def submission_to_out(sub) -> SubmissionOut:
    return SubmissionOut(
        id=id_str(sub.id),
        freelancerId=sub.freelancer_id,
        deployLink=sub.deploy_link,
        githubLink=sub.github_link,
        description=sub.description,
        createdAt=sub.created_at,
        updatedAt=sub.updated_at,
    )


def job_to_out(job, user_map: dict[str, dict] | None = None) -> JobOut:
    """Convert Job row (with its applications/submissions) to JobOut."""
    user_map = user_map or {}
    return JobOut(
        id=id_str(job.id),
        employerId=job.employer_id,
        title=job.title,
        description=job.description,
        budgetType=job.budget_type,
        budgetMin=job.budget_min,
        budgetMax=job.budget_max,
        durationWeeks=job.duration_weeks,
        status=job.status,
        location=job.location,
        remoteAllowed=job.remote_allowed,
        experienceLevel=job.experience_level,
        relevantExperience=job.relevant_experience,
        proposedApproach=job.proposed_approach,
        skills=[SkillTag.model_validate(s) for s in (job.skills or []) if isinstance(s, dict)],
        applicationsCount=job.applications_count or 0,
        applications=[application_to_out(a, user_map.get(a.freelancer_id)) for a in job.applications],
        submissions=[submission_to_out(s) for s in job.submissions],
        createdAt=job.created_at,
        updatedAt=job.updated_at,
    )


# JobCreate/JobUpdate field -> Job column
JOB_FIELD_MAP: dict[str, str] = {
    "employerId": "employer_id",
    "title": "title",
    "description": "description",
    "budgetType": "budget_type",
    "budgetMin": "budget_min",
    "budgetMax": "budget_max",
    "durationWeeks": "duration_weeks",
    "status": "status",
    "location": "location",
    "remoteAllowed": "remote_allowed",
    "experienceLevel": "experience_level",
    "relevantExperience": "relevant_experience",
    "proposedApproach": "proposed_approach",
    "skills": "skills",
}


def job_payload_to_columns(data: dict) -> dict:
    """Map a dumped JobCreate/JobUpdate dict onto Job column kwargs."""
    return {JOB_FIELD_MAP[k]: v for k, v in data.items() if k in JOB_FIELD_MAP}
