"""
Admin API - health, one-time bootstrap and admin signin
"""
from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_db
from backend.app.core.errors import DomainError, to_http
from backend.app.core.logging_config import get_logger
from backend.app.schemas.employer import (
    AdminAuthResponse,
    AdminBootstrapRequest,
    AdminResponse,
    CredentialsRequest,
    admin_to_out,
)
from backend.app.services.admin_service import AdminService, BootstrapForbidden, check_bootstrap_token

logger = get_logger("api.admin")
router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health")
def admin_health() -> dict:
    return {"status": "ok"}


@router.post("/bootstrap", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
def bootstrap_admin(
    body: AdminBootstrapRequest,
    token: str | None = None,
    x_bootstrap_token: str | None = Header(default=None),
    db: Session = Depends(get_db),
):
    """Create an admin when the x-bootstrap-token header (or ?token=) matches ADMIN_BOOTSTRAP_TOKEN."""
    try:
        check_bootstrap_token(x_bootstrap_token or token)
    except BootstrapForbidden:
        logger.warning("Admin bootstrap refused: bad or missing token")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    try:
        admin = AdminService.create_admin(db, body.email, body.password, body.fullName)
        logger.info("Admin bootstrapped admin_id=%s", admin.id)
        return AdminResponse(admin=admin_to_out(admin))
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Admin bootstrap error error=%s", str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/signin", response_model=AdminAuthResponse)
def admin_signin(body: CredentialsRequest, db: Session = Depends(get_db)):
    try:
        admin, token = AdminService.signin(db, body.email, body.password)
        return AdminAuthResponse(admin=admin_to_out(admin), token=token)
    except DomainError as e:
        logger.warning("Admin signin failed email=%s reason=%s", body.email, e.message)
        raise to_http(e)
    except Exception as e:
        logger.exception("Admin signin error error=%s", str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
