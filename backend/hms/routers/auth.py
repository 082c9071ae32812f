"""Authentication router."""
from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.orm import Session

from hms.config import get_settings
from hms.context import AuthContext
from hms.database import get_db
from hms.dependencies import authenticate, require_role_name
from hms.errors import ValidationError
from hms.models import ADMIN_ROLE_NAMES
from hms.schemas.auth import (
    ChangePasswordRequest, LoginRequest, ProfileUpdate, RefreshTokenRequest,
    RegisterCompleteRequest, RegisterRequest,
)
from hms.schemas.common import success_response
from hms.security import token_lifetime, TokenKind
from hms.services.auth import AuthService
from hms.services.registration import RegistrationService
from hms.services.users import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=refresh_token,
        max_age=int(token_lifetime(TokenKind.REFRESH, settings).total_seconds()),
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        path="/",
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Register a user, bootstrapping a company when none is given."""
    result = RegistrationService(db).register(payload)
    return success_response(result, "User registered successfully")


@router.post("/register-complete", status_code=status.HTTP_201_CREATED)
def register_complete(payload: RegisterCompleteRequest, db: Session = Depends(get_db)):
    """Onboard a company administrator in one step."""
    result = RegistrationService(db).register_complete(payload)
    return success_response(result, "Registration completed successfully")


@router.post("/register-user", status_code=status.HTTP_201_CREATED)
def register_user(
    payload: RegisterRequest,
    ctx: AuthContext = Depends(require_role_name(*ADMIN_ROLE_NAMES)),
    db: Session = Depends(get_db),
):
    """Register a user under the caller's company."""
    result = UserService(db, ctx).create_user(payload)
    return success_response(result, "User registered successfully under your company")


@router.post("/login")
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Login with email or username."""
    result = AuthService(db).login(payload.email, payload.password)
    set_refresh_cookie(response, result["refreshToken"])
    return success_response(result, "Login successful")


@router.post("/refresh-token")
def refresh_token(
    request: Request,
    response: Response,
    payload: RefreshTokenRequest | None = Body(default=None),
    db: Session = Depends(get_db),
):
    """Exchange a refresh token for a new token pair."""
    token = request.cookies.get(get_settings().refresh_cookie_name)
    if not token and payload is not None:
        token = payload.refreshToken
    if not token:
        raise ValidationError("Refresh token required", field="refreshToken")
    
    result = AuthService(db).refresh(token)
    set_refresh_cookie(response, result["refreshToken"])
    return success_response(result, "Token refreshed successfully")


@router.post("/logout")
def logout(response: Response, ctx: AuthContext = Depends(authenticate)):
    """Clear the refresh cookie. Tokens are not revoked server side."""
    response.delete_cookie(get_settings().refresh_cookie_name, path="/")
    return success_response(None, "Logged out successfully")


@router.get("/profile")
def get_profile(ctx: AuthContext = Depends(authenticate), db: Session = Depends(get_db)):
    """Get current user profile."""
    return success_response(AuthService(db).get_profile(ctx.user_id))


@router.patch("/profile")
def update_profile(
    payload: ProfileUpdate,
    ctx: AuthContext = Depends(authenticate),
    db: Session = Depends(get_db),
):
    """Update first name, last name and phone."""
    profile = AuthService(db).update_profile(ctx.user_id, payload)
    return success_response(profile, "Profile updated successfully")


@router.post("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    ctx: AuthContext = Depends(authenticate),
    db: Session = Depends(get_db),
):
    """Change the caller's password."""
    AuthService(db).change_password(ctx.user_id, payload.currentPassword, payload.newPassword)
    return success_response(None, "Password changed successfully")
