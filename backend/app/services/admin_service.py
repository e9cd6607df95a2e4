"""
Admin accounts - bootstrap, signin and the seed task
"""
import secrets

from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.errors import AuthError, ConflictError, ValidationError
from backend.app.core.security import get_password_hash, issue_token, verify_password
from backend.app.models.admin import Admin


class BootstrapForbidden(Exception):
    """Bootstrap token missing, unset on the server, or wrong."""


def check_bootstrap_token(provided: str | None) -> None:
    expected = settings.admin_bootstrap_token
    if not expected or not provided or not secrets.compare_digest(str(provided), expected):
        raise BootstrapForbidden()


class AdminService:

    @staticmethod
    def create_admin(db: Session, email: str | None, password: str | None, full_name: str | None) -> Admin:
        if not email or not password:
            raise ValidationError("email and password are required")
        if db.query(Admin).filter(Admin.email == email).first():
            raise ConflictError("Admin already exists")
        admin = Admin(
            email=email,
            hashed_password=get_password_hash(password),
            role="admin",
            full_name=full_name or "",
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return admin

    @staticmethod
    def signin(db: Session, email: str | None, password: str | None) -> tuple[Admin, str]:
        if not email or not password:
            raise ValidationError("Email and password are required")
        admin = db.query(Admin).filter(Admin.email == email).first()
        if not admin or not verify_password(password, admin.hashed_password):
            raise AuthError("Invalid credentials")
        return admin, issue_token(admin.id, "admin")
