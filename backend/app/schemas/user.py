"""
User Pydantic schemas for request/response validation
"""
from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from backend.app.schemas.project import ProjectOut, project_to_out
from backend.app.utils.ids import id_str


# --- Auth requests ---
class SignUpRequest(BaseModel):
    """Schema for user signup"""
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    fullName: str = Field(min_length=1)
    role: Literal["freelancer", "employer"]
    title: Optional[str] = None


class SignInRequest(BaseModel):
    """Schema for user signin"""
    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    email: Optional[str] = None
    otp: Optional[str] = None
    newPassword: Optional[str] = None

    @field_validator("otp", mode="before")
    @classmethod
    def _otp_as_text(cls, v):
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


# --- Profile requests ---
class ProfileUpdateRequest(BaseModel):
    """Body of PUT /users/:id/profile. Only string values are applied; hourlyRate=null clears it."""
    fullName: Any = None
    title: Any = None
    location: Any = None
    website: Any = None
    linkedin: Any = None
    github: Any = None
    bio: Any = None
    phone: Any = None
    email: Any = None
    avatarUrl: Any = None
    hourlyRate: Any = None


class SkillsRequest(BaseModel):
    skills: Any = None


class ReviewRequest(BaseModel):
    jobId: Any = None
    employerId: Any = None
    rating: Any = None
    comment: Any = None


# --- Responses ---
class ReviewOut(BaseModel):
    id: str
    jobId: str
    employerId: str
    rating: float
    comment: Optional[str] = None
    createdAt: Optional[datetime] = None


class UserProfileOut(BaseModel):
    email: str = ""
    phone: Optional[str] = None
    fullName: str = ""
    role: str
    avatarUrl: Optional[str] = None
    title: Optional[str] = None
    bio: Optional[str] = None
    hourlyRate: Optional[float] = None
    location: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    projects: List[ProjectOut] = Field(default_factory=list)
    reviews: List[ReviewOut] = Field(default_factory=list)
    activeProjects: int = 0
    pendingApplications: int = 0
    completedProjects: int = 0
    totalRating: float = 0.0


class UserOut(BaseModel):
    """User without password or reset-code fields."""
    id: str
    email: str
    role: str
    profile: UserProfileOut
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class AuthResponse(BaseModel):
    user: UserOut
    token: str


class UserMetricsOut(BaseModel):
    activeProjects: int = 0
    pendingApplications: int = 0
    completedProjects: int = 0
    totalRating: float = 0.0


class FreelancerListItem(BaseModel):
    id: str
    fullName: str = ""
    title: str = ""
    email: str = ""
    bio: str = ""
    location: str = ""
    hourlyRate: Optional[float] = None
    skills: List[str] = Field(default_factory=list)
    totalRating: float = 0.0
    reviewsCount: int = 0


class ProfileUpdateResponse(BaseModel):
    success: bool = True
    profile: dict
    id: str


class ReviewCreatedResponse(BaseModel):
    success: bool = True
    review: ReviewOut


# --- Converters ---
def review_to_out(review) -> ReviewOut:
    return ReviewOut(
        id=id_str(review.id),
        jobId=review.job_id,
        employerId=review.employer_id,
        rating=review.rating,
        comment=review.comment,
        createdAt=review.created_at,
    )


def user_to_profile(user) -> UserProfileOut:
    return UserProfileOut(
        email=user.profile_email or user.email or "",
        phone=user.phone,
        fullName=user.full_name or "",
        role=user.role,
        avatarUrl=user.avatar_url,
        title=user.title,
        bio=user.bio,
        hourlyRate=user.hourly_rate,
        location=user.location,
        website=user.website,
        linkedin=user.linkedin,
        github=user.github,
        skills=list(user.skills or []),
        projects=[project_to_out(p) for p in user.projects],
        reviews=[review_to_out(r) for r in user.reviews],
        activeProjects=user.active_projects or 0,
        pendingApplications=user.pending_applications or 0,
        completedProjects=user.completed_projects or 0,
        totalRating=user.total_rating or 0.0,
    )


def user_to_out(user) -> UserOut:
    return UserOut(
        id=id_str(user.id),
        email=user.email,
        role=user.role,
        profile=user_to_profile(user),
        createdAt=user.created_at,
        updatedAt=user.updated_at,
    )


def user_to_metrics(user) -> UserMetricsOut:
    return UserMetricsOut(
        activeProjects=user.active_projects or 0,
        pendingApplications=user.pending_applications or 0,
        completedProjects=user.completed_projects or 0,
        totalRating=user.total_rating or 0.0,
    )


def user_to_list_item(user) -> FreelancerListItem:
    return FreelancerListItem(
        id=id_str(user.id),
        fullName=user.full_name or "",
        title=user.title or "",
        email=user.email or user.profile_email or "",
        bio=user.bio or "",
        location=user.location or "",
        hourlyRate=user.hourly_rate,
        skills=list(user.skills or []),
        totalRating=user.total_rating or 0.0,
        reviewsCount=len(user.reviews),
    )


# camelCase profile key -> User column, for PATCH /auth/profile/:userId
PROFILE_FIELD_MAP: dict[str, str] = {
    "email": "profile_email",
    "phone": "phone",
    "fullName": "full_name",
    "avatarUrl": "avatar_url",
    "title": "title",
    "bio": "bio",
    "hourlyRate": "hourly_rate",
    "location": "location",
    "website": "website",
    "linkedin": "linkedin",
    "github": "github",
    "skills": "skills",
    "activeProjects": "active_projects",
    "pendingApplications": "pending_applications",
    "completedProjects": "completed_projects",
    "totalRating": "total_rating",
}
