"""
Authentication service business logic
"""
import math
import secrets
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.errors import ConflictError, NotFoundError, ValidationError
from backend.app.core.logging_config import get_logger
from backend.app.core.security import get_password_hash, issue_token, verify_password
from backend.app.models.user import User
from backend.app.schemas.user import PROFILE_FIELD_MAP, SignInRequest, SignUpRequest
from backend.app.services import mail_service, sync_service

logger = get_logger("services.auth")


_STRING_FIELDS = frozenset(
    {"email", "phone", "fullName", "avatarUrl", "title", "bio", "location", "website", "linkedin", "github"}
)
_INT_FIELDS = frozenset({"activeProjects", "pendingApplications", "completedProjects"})
_NULLABLE_FIELDS = frozenset({"phone", "avatarUrl", "bio", "hourlyRate", "location", "website", "linkedin", "github"})


def _check_profile_value(key: str, value):
    """Value for a PROFILE_FIELD_MAP key, checked against its column type."""
    if value is None:
        if key in _NULLABLE_FIELDS:
            return None
        raise ValidationError(f"{key} cannot be null")
    if key == "skills":
        if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
            raise ValidationError("skills must be an array of strings")
        return value
    if key in _STRING_FIELDS:
        if not isinstance(value, str):
            raise ValidationError(f"{key} must be a string")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValidationError(f"{key} must be a number")
    return int(value) if key in _INT_FIELDS else float(value)


def generate_otp() -> str:
    """Six-digit numeric code, never starting with 0."""
    return str(100000 + secrets.randbelow(900000))


class AuthService:
    """Service for authentication operations"""

    @staticmethod
    def signup(db: Session, data: SignUpRequest):
        """Register a new user; employers also get an Employer mirror."""
        existing = db.query(User).filter(User.email == data.email).first()
        if existing:
            return {"success": False, "message": "User already exists"}

        hashed = get_password_hash(data.password)
        user = User(
            email=data.email,
            hashed_password=hashed,
            role=data.role,
            profile_email=data.email,
            full_name=data.fullName,
            title=data.title or "",
            skills=[],
            active_projects=0,
            pending_applications=0,
            completed_projects=0,
            total_rating=0.0,
        )
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError:
            # Lost the race with a concurrent signup for the same email
            db.rollback()
            raise ConflictError("User already exists")

        if user.role == "employer":
            sync_service.create_employer_mirror(db, user)

        return {
            "success": True,
            "user": user,
            "token": issue_token(user.id, user.role),
        }

    @staticmethod
    def signin(db: Session, data: SignInRequest):
        """Authenticate by email/password. Plaintext legacy passwords are re-hashed on success."""
        user = db.query(User).filter(User.email == data.email).first()
        if not user:
            return {"success": False, "message": "Invalid credentials"}

        ok = verify_password(data.password, user.hashed_password)
        if not ok and user.hashed_password == data.password:
            user.hashed_password = get_password_hash(data.password)
            db.commit()
            ok = True
            logger.info("Legacy plaintext password upgraded user_id=%s", user.id)
            if user.role == "employer":
                sync_service.sync_employer_password(db, user)
        if not ok:
            return {"success": False, "message": "Invalid credentials"}

        if user.role == "employer":
            sync_service.upsert_employer_mirror(db, user)

        return {
            "success": True,
            "user": user,
            "token": issue_token(user.id, user.role),
        }

    @staticmethod
    def request_password_reset(db: Session, email: str | None) -> None:
        """Store a fresh OTP and email it. Unknown emails are silently accepted."""
        if not email:
            raise ValidationError("Email is required")

        user = db.query(User).filter(User.email == email).first()
        if not user:
            logger.info("Password reset requested for unknown email")
            return

        otp = generate_otp()
        user.reset_otp = otp
        user.reset_otp_expires = datetime.utcnow() + timedelta(minutes=settings.otp_expire_minutes)
        db.commit()

        try:
            mail_service.send_mail(
                email,
                "Your password reset code",
                mail_service.password_reset_html(otp, settings.otp_expire_minutes),
            )
        except Exception as e:
            logger.warning("Failed to send reset email user_id=%s error=%s", user.id, e)

    @staticmethod
    def reset_password(db: Session, email: str | None, otp: str | None, new_password: str | None) -> None:
        """Consume a valid OTP and set the new password."""
        if not email or not otp or not new_password:
            raise ValidationError("Email, OTP and newPassword are required")

        user = db.query(User).filter(User.email == email).first()
        if not user or not user.reset_otp or not user.reset_otp_expires:
            raise ValidationError("Invalid or expired code")
        if user.reset_otp != otp:
            raise ValidationError("Invalid code")
        if user.reset_otp_expires < datetime.utcnow():
            raise ValidationError("Code expired")

        user.hashed_password = get_password_hash(new_password)
        user.reset_otp = None
        user.reset_otp_expires = None
        db.commit()
        logger.info("Password reset completed user_id=%s", user.id)

        if user.role == "employer":
            sync_service.sync_employer_password(db, user)

    @staticmethod
    def update_profile_fields(db: Session, user_id: str, updates: dict) -> User:
        """Set known profile keys (camelCase) on a user. Unknown keys are ignored."""
        user = db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        checked = {
            PROFILE_FIELD_MAP[key]: _check_profile_value(key, value)
            for key, value in (updates or {}).items()
            if key in PROFILE_FIELD_MAP
        }
        for column, value in checked.items():
            setattr(user, column, value)
        db.commit()
        db.refresh(user)
        return user
