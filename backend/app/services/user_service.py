"""
User profile service - freelancer directory, profile fields, skills and reviews
"""
import math
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from backend.app.core.errors import ConflictError, NotFoundError, ValidationError
from backend.app.core.logging_config import get_logger
from backend.app.models.review import Review
from backend.app.models.user import User
from backend.app.schemas.user import ProfileUpdateRequest, ReviewRequest
from backend.app.services import sync_service
from backend.app.utils.ids import parse_principal_id

logger = get_logger("services.users")

# ProfileUpdateRequest field -> User column; values are stripped except bio
_PROFILE_COLUMNS = {
    "fullName": "full_name",
    "title": "title",
    "location": "location",
    "website": "website",
    "linkedin": "linkedin",
    "github": "github",
    "bio": "bio",
    "phone": "phone",
    "avatarUrl": "avatar_url",
}


def _require_user_id(raw: Any) -> str:
    uid = parse_principal_id(raw)
    if uid is None:
        raise ValidationError("Invalid user id")
    return uid


class UserService:

    @staticmethod
    def list_freelancers(db: Session) -> list[User]:
        return (
            db.query(User)
            .options(selectinload(User.reviews))
            .filter(User.role == "freelancer")
            .order_by(User.created_at, User.id)
            .all()
        )

    @staticmethod
    def get_user(db: Session, user_id: Any) -> User:
        user = db.get(User, _require_user_id(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def update_profile(db: Session, user_id: Any, body: ProfileUpdateRequest) -> User:
        """Core profile fields only; skills and projects have their own endpoints."""
        user = UserService.get_user(db, user_id)
        data = body.model_dump()
        for key, column in _PROFILE_COLUMNS.items():
            value = data.get(key)
            if isinstance(value, str):
                setattr(user, column, value if key == "bio" else value.strip())

        if isinstance(body.email, str) and body.email.strip():
            user.email = body.email.strip()
            user.profile_email = body.email.strip()

        if "hourlyRate" in body.model_fields_set and body.hourlyRate is None:
            user.hourly_rate = None
        elif isinstance(body.hourlyRate, (int, float)) and not isinstance(body.hourlyRate, bool):
            user.hourly_rate = float(body.hourlyRate)

        user.updated_at = datetime.utcnow()
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Email already exists")
        db.refresh(user)
        return user

    @staticmethod
    def set_skills(db: Session, user_id: Any, skills: Any) -> list[str]:
        """Replace the skill list with trimmed, non-empty strings."""
        uid = _require_user_id(user_id)
        if not isinstance(skills, list):
            raise ValidationError("skills must be an array of strings")
        user = db.get(User, uid)
        if not user:
            raise NotFoundError("User not found")
        cleaned = [str(s).strip() for s in skills if s is not None and str(s).strip()]
        user.skills = cleaned
        user.updated_at = datetime.utcnow()
        db.commit()
        return cleaned

    @staticmethod
    def add_review(db: Session, freelancer_id: Any, body: ReviewRequest) -> Review:
        """Insert the review, then recompute totalRating in a second write."""
        uid = _require_user_id(freelancer_id)
        if not body.jobId or not body.employerId:
            raise ValidationError("jobId and employerId are required")
        rating = body.rating
        if isinstance(rating, bool) or not isinstance(rating, (int, float)) or not math.isfinite(rating) or not 1 <= rating <= 5:
            raise ValidationError("rating must be a number between 1 and 5")

        user = db.get(User, uid)
        if not user:
            raise NotFoundError("User not found")

        review = Review(
            freelancer_id=uid,
            job_id=str(body.jobId),
            employer_id=str(body.employerId),
            rating=float(rating),
            comment=str(body.comment) if body.comment else None,
        )
        db.add(review)
        user.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(review)
        logger.info("Review added review_id=%s freelancer_id=%s rating=%s", review.id, uid, rating)

        sync_service.recompute_total_rating(db, uid)
        return review
