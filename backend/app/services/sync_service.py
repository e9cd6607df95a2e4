"""
Best-effort propagation between users, employers and reviews.

Each routine runs after the primary write has been committed. A failure is
rolled back and logged as a warning; it never reaches the caller.
"""
from datetime import datetime

from sqlalchemy.orm import Session

from backend.app.core.logging_config import get_logger
from backend.app.models.employer import Employer
from backend.app.models.review import Review
from backend.app.models.user import User

logger = get_logger("services.sync")


def _new_employer_from_user(user: User) -> Employer:
    return Employer(
        user_id=user.id,
        email=user.email,
        hashed_password=user.hashed_password,
        role="employer",
        full_name=user.full_name or "",
        title=user.title or "",
        active_jobs=0,
        total_applications=0,
        active_projects=0,
        draft_jobs=0,
    )


def find_employer_mirror(db: Session, user: User) -> Employer | None:
    """The Employer row linked to this User, else an unlinked one sharing its email."""
    employer = db.query(Employer).filter(Employer.user_id == user.id).first()
    if employer is None:
        employer = db.query(Employer).filter(Employer.email == user.email, Employer.user_id.is_(None)).first()
    return employer


def create_employer_mirror(db: Session, user: User) -> None:
    """On employer signup: create the Employer row if none exists for this user."""
    try:
        existing = find_employer_mirror(db, user)
        if existing:
            existing.user_id = user.id
            db.commit()
            return
        db.add(_new_employer_from_user(user))
        db.commit()
        logger.info("Employer mirror created email=%s", user.email)
    except Exception as e:
        db.rollback()
        logger.warning("Failed to sync Employer on signup email=%s error=%s", user.email, e)


def upsert_employer_mirror(db: Session, user: User) -> None:
    """On employer signin: refresh identity fields, seed metrics only when inserting."""
    try:
        employer = find_employer_mirror(db, user)
        if employer is None:
            db.add(_new_employer_from_user(user))
        else:
            employer.user_id = user.id
            employer.hashed_password = user.hashed_password
            employer.role = "employer"
            employer.full_name = user.full_name or ""
            employer.title = user.title or ""
        db.commit()
    except Exception as e:
        db.rollback()
        logger.warning("Failed to sync Employer on signin email=%s error=%s", user.email, e)


def sync_employer_password(db: Session, user: User) -> None:
    """Copy a changed password hash to the user's existing Employer row (no insert)."""
    try:
        employer = find_employer_mirror(db, user)
        if employer is None:
            return
        employer.hashed_password = user.hashed_password
        db.commit()
    except Exception as e:
        db.rollback()
        logger.warning("Failed to sync Employer password email=%s error=%s", user.email, e)


def compute_average_rating(ratings: list[float]) -> float:
    values = [float(r or 0) for r in ratings]
    return sum(values) / len(values) if values else 0.0


def recompute_total_rating(db: Session, user_id: str) -> float | None:
    """Set users.total_rating to the mean of the user's review ratings.

    Runs as its own transaction after the review insert. If it fails, the
    rating stays stale until the next review or reconciliation.
    """
    try:
        ratings = [row[0] for row in db.query(Review.rating).filter(Review.freelancer_id == user_id).all()]
        avg = compute_average_rating(ratings)
        user = db.get(User, user_id)
        if user is None:
            return None
        user.total_rating = avg
        user.updated_at = datetime.utcnow()
        db.commit()
        return avg
    except Exception as e:
        db.rollback()
        logger.warning("Failed to recompute totalRating user_id=%s error=%s", user_id, e)
        return None
