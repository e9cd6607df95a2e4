"""
Create the first admin from ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME.
Run: python -m backend.app.tasks.seed_admin
"""
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.errors import ConflictError, ValidationError
from backend.app.core.logging_config import get_logger, setup_logging
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.services.admin_service import AdminService

import backend.app.models  # noqa: F401

logger = get_logger("tasks.seed_admin")


def seed_admin(db: Session) -> dict:
    """Returns {"created": bool, "email": ...}. An existing admin with that email is left alone."""
    if not settings.admin_email or not settings.admin_password:
        raise ValidationError("ADMIN_EMAIL and ADMIN_PASSWORD must be set")
    try:
        admin = AdminService.create_admin(
            db, settings.admin_email, settings.admin_password, settings.admin_name or "Admin"
        )
    except ConflictError:
        logger.info("Admin already exists email=%s", settings.admin_email)
        return {"created": False, "email": settings.admin_email}
    logger.info("Admin created admin_id=%s email=%s", admin.id, admin.email)
    return {"created": True, "email": admin.email}


def run_seed_admin() -> dict:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        return seed_admin(db)
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    print(run_seed_admin())
