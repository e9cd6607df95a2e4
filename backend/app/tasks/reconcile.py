"""
Periodic reconcile: rewrite stored counters from the source rows.
Run via cron or: python -c "from backend.app.tasks.reconcile import run_reconcile; print(run_reconcile())"
"""
from sqlalchemy.orm import Session

from backend.app.core.logging_config import get_logger
from backend.app.db.session import SessionLocal
from backend.app.models.employer import Employer
from backend.app.models.user import User
from backend.app.services import metrics_service

logger = get_logger("tasks.reconcile")


def reconcile_all(db: Session) -> dict:
    """
    Recompute jobs.applications_count, every employer's metrics and every
    freelancer's metrics. Safe to re-run; a second pass changes nothing.
    """
    jobs_fixed = metrics_service.reconcile_applications_counts(db)
    employers = db.query(Employer).all()
    for employer in employers:
        metrics_service.reconcile_employer_metrics(db, employer)
    freelancers = db.query(User).filter(User.role == "freelancer").all()
    for user in freelancers:
        metrics_service.reconcile_user_metrics(db, user)
    return {
        "jobsFixed": jobs_fixed,
        "employers": len(employers),
        "freelancers": len(freelancers),
    }


def run_reconcile() -> dict:
    """Run reconcile using a new DB session."""
    db = SessionLocal()
    try:
        result = reconcile_all(db)
        logger.info("Reconcile finished result=%s", result)
        return result
    except Exception as e:
        db.rollback()
        logger.exception("Reconcile failed error=%s", e)
        return {"error": str(e), "jobsFixed": 0}
    finally:
        db.close()


if __name__ == "__main__":
    print(run_reconcile())
