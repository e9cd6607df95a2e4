"""
Employer directory, employer accounts and the stored hiring metrics.
"""
import math
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from backend.app.core.logging_config import get_logger
from backend.app.core.security import get_password_hash, issue_token, verify_password
from backend.app.models.employer import Employer
from backend.app.models.user import User
from backend.app.schemas.employer import (
    EMPLOYER_METRIC_COLUMNS,
    CredentialsRequest,
    EmployerSignUpRequest,
)
from backend.app.schemas.user import ProfileUpdateRequest
from backend.app.services import sync_service
from backend.app.utils.ids import parse_principal_id

logger = get_logger("services.employers")

# ProfileUpdateRequest field -> Employer column; values are stripped except bio
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


def _require_id(raw: Any, message: str = "Invalid id") -> str:
    eid = parse_principal_id(raw)
    if eid is None:
        raise ValidationError(message)
    return eid


def employer_from_user(user: User, keep_identity: bool = True) -> Employer:
    """Employer built from a User row. keep_identity copies id and timestamps (read-only view)."""
    employer = Employer(
        email=user.email,
        role="employer",
        full_name=user.full_name or "",
        title=user.title or "",
        phone=user.phone or "",
        location=user.location or "",
        website=user.website or "",
        linkedin=user.linkedin or "",
        github=user.github or "",
        bio=user.bio or "",
        avatar_url=user.avatar_url or "",
        active_jobs=0,
        total_applications=0,
        active_projects=0,
        draft_jobs=0,
    )
    if keep_identity:
        employer.id = user.id
        employer.created_at = user.created_at
        employer.updated_at = user.updated_at
    return employer


class EmployerService:

    @staticmethod
    def signup(db: Session, data: EmployerSignUpRequest) -> tuple[Employer, str]:
        if not data.fullName or not data.email or not data.password:
            raise ValidationError("fullName, email and password are required")
        if db.query(Employer).filter(Employer.email == data.email).first():
            raise ValidationError("Employer already exists")
        employer = Employer(
            email=data.email,
            hashed_password=get_password_hash(data.password),
            role="employer",
            full_name=data.fullName,
            title=data.title or "",
            active_jobs=0,
            total_applications=0,
            active_projects=0,
            draft_jobs=0,
        )
        db.add(employer)
        db.commit()
        db.refresh(employer)
        return employer, issue_token(employer.id, employer.role)

    @staticmethod
    def signin(db: Session, data: CredentialsRequest) -> tuple[Employer, str]:
        if not data.email or not data.password:
            raise ValidationError("email and password are required")
        employer = db.query(Employer).filter(Employer.email == data.email).first()
        if not employer:
            raise AuthError("Invalid credentials")
        ok = verify_password(data.password, employer.hashed_password)
        if not ok and employer.hashed_password and employer.hashed_password == data.password:
            employer.hashed_password = get_password_hash(data.password)
            db.commit()
            ok = True
        if not ok:
            raise AuthError("Invalid credentials")
        return employer, issue_token(employer.id, employer.role or "employer")

    @staticmethod
    def list_employers(db: Session) -> list[Employer]:
        return db.query(Employer).order_by(Employer.updated_at.desc(), Employer.id.desc()).all()

    @staticmethod
    def get_employer(db: Session, employer_id: Any) -> Employer:
        employer = db.get(Employer, _require_id(employer_id))
        if not employer:
            raise NotFoundError("Employer not found")
        return employer

    @staticmethod
    def patch_metrics(db: Session, employer_id: Any, updates: dict) -> Employer:
        """Write only the allow-listed metric keys; anything else is ignored."""
        employer = EmployerService.get_employer(db, employer_id)
        for key, value in (updates or {}).items():
            column = EMPLOYER_METRIC_COLUMNS.get(key)
            if column is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValidationError(f"{key} must be a number")
            setattr(employer, column, int(value))
        db.commit()
        db.refresh(employer)
        return employer

    @staticmethod
    def view_for_user_id(db: Session, user_id: Any) -> Employer:
        """Employer by id, else the mirror of the User with that id, else synthesized from the User."""
        uid = _require_id(user_id, "Invalid user id")
        employer = db.get(Employer, uid)
        if employer:
            return employer
        user = db.get(User, uid)
        if not user:
            raise NotFoundError("Employer not found")
        return sync_service.find_employer_mirror(db, user) or employer_from_user(user)

    @staticmethod
    def update_profile(db: Session, employer_id: Any, body: ProfileUpdateRequest) -> Employer:
        """Update an employer profile by Employer or User id; a User without a mirror gets one inserted."""
        eid = _require_id(employer_id, "Invalid user id")
        employer = db.get(Employer, eid)
        if employer is None:
            user = db.get(User, eid)
            if user is None:
                raise NotFoundError("Employer not found")
            employer = sync_service.find_employer_mirror(db, user)
            if employer is None:
                employer = employer_from_user(user, keep_identity=False)
                employer.user_id = user.id
                if isinstance(body.email, str) and body.email.strip():
                    employer.email = body.email.strip()
                db.add(employer)
                logger.info("Employer mirror inserted from profile update user_id=%s", user.id)
            elif employer.user_id is None:
                employer.user_id = user.id

        data = body.model_dump()
        for key, column in _PROFILE_COLUMNS.items():
            value = data.get(key)
            if isinstance(value, str):
                setattr(employer, column, value if key == "bio" else value.strip())
        employer.updated_at = datetime.utcnow()
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Email already exists for another employer")
        db.refresh(employer)
        return employer
