"""
Authentication endpoints - signup, signin, signout, password reset and profile patch
"""
from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.dependencies import get_db, require_param_self_or_admin
from backend.app.core.errors import DomainError, to_http
from backend.app.core.logging_config import get_logger
from backend.app.schemas.user import (
    AuthResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    SignInRequest,
    SignUpRequest,
    UserProfileOut,
    user_to_out,
    user_to_profile,
)
from backend.app.services.auth_service import AuthService
from backend.app.utils.ids import parse_principal_id

logger = get_logger("api.auth")
router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(data: SignUpRequest, db: Session = Depends(get_db)):
    """
    Register a new user account. Returns the user and a bearer token.

    - **email**: must be unique
    - **role**: freelancer | employer (employers also get an Employer record)
    """
    logger.info("Signup attempt email=%s role=%s", data.email, data.role)
    try:
        result = AuthService.signup(db, data)
        if not result["success"]:
            logger.warning("Signup failed email=%s reason=%s", data.email, result["message"])
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result["message"])

        user = result["user"]
        logger.info("User signed up user_id=%s email=%s", user.id, user.email)
        return AuthResponse(user=user_to_out(user), token=result["token"])
    except HTTPException:
        raise
    except DomainError as e:
        logger.warning("Signup rejected email=%s reason=%s", data.email, e.message)
        raise to_http(e)
    except Exception as e:
        logger.exception("Signup error email=%s error=%s", data.email, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/signin", response_model=AuthResponse)
def signin(data: SignInRequest, db: Session = Depends(get_db)):
    """Sign in with email and password."""
    logger.info("Signin attempt email=%s", data.email)
    try:
        result = AuthService.signin(db, data)
        if not result["success"]:
            logger.warning("Signin failed email=%s reason=%s", data.email, result["message"])
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=result["message"],
                headers={"WWW-Authenticate": "Bearer"},
            )

        user = result["user"]
        logger.info("User signed in user_id=%s", user.id)
        return AuthResponse(user=user_to_out(user), token=result["token"])
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Signin error email=%s error=%s", data.email, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/signout")
def signout() -> dict:
    """Tokens are stateless; the client drops its copy."""
    return {"success": True}


@router.patch("/profile/{user_id}", response_model=UserProfileOut)
def patch_profile(
    user_id: str,
    updates: dict = Body(...),
    _auth: dict = Depends(require_param_self_or_admin("user_id")),
    db: Session = Depends(get_db),
):
    """Set profile fields on the caller's own user (or any user, for admins)."""
    uid = parse_principal_id(user_id)
    if uid is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid user id")
    try:
        user = AuthService.update_profile_fields(db, uid, updates)
        return user_to_profile(user)
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        db.rollback()
        logger.exception("Profile patch error user_id=%s error=%s", user_id, str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/forgot")
def forgot_password(data: ForgotPasswordRequest, db: Session = Depends(get_db)) -> dict:
    """Email a 6-digit reset code. Answers success for unknown emails too."""
    try:
        AuthService.request_password_reset(db, data.email)
        return {"success": True}
    except DomainError as e:
        raise to_http(e)
    except Exception as e:
        logger.exception("Forgot password error error=%s", str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/reset")
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)) -> dict:
    """Set a new password using email + OTP. The OTP is cleared on success."""
    try:
        AuthService.reset_password(db, data.email, data.otp, data.newPassword)
        return {"success": True}
    except DomainError as e:
        logger.warning("Password reset rejected reason=%s", e.message)
        raise to_http(e)
    except Exception as e:
        logger.exception("Reset password error error=%s", str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
