"""
Authentication routes: signup, login, refresh, logout, me, profile, password.

Tokens travel only as httpOnly cookies. Cookie flags depend on the
environment: production needs secure + SameSite=None because the frontend
lives on another subdomain.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import field_validator
from sqlalchemy.orm import Session

from app.api.deps import (
    get_db, get_current_user, get_current_user_allow_inactive, ACCESS_COOKIE, REFRESH_COOKIE,
)
from app.api.responses import created, success, success_message
from app.api.schemas import CamelModel, public_user
from app.application.sessions import (
    LoginUseCase, LogoutUseCase, RefreshSessionUseCase, SignupUseCase, TokenPair,
)
from app.application.users import ChangePasswordUseCase, UpdateProfileUseCase
from app.config import get_settings
from app.infrastructure.db.models import User
from app.utils.validation import validate_email, validate_name, validate_strong_password


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


# === Request models ===

class SignupRequest(CamelModel):
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return validate_name(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_strong_password(v)


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return validate_email(v)


class UpdateProfileRequest(CamelModel):
    name: str | None = None
    email: str | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str | None:
        return validate_name(v) if v is not None else v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        return validate_email(v) if v is not None else v


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_strong_password(v)


# === Cookies ===

def _cookie_options() -> dict:
    settings = get_settings()
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "lax",
        "path": "/",
    }


def set_auth_cookies(response: JSONResponse, tokens: TokenPair) -> None:
    settings = get_settings()
    options = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE, tokens.access_token,
        max_age=int(settings.access_token_lifetime.total_seconds()), **options,
    )
    response.set_cookie(
        REFRESH_COOKIE, tokens.refresh_token,
        max_age=int(settings.refresh_token_lifetime.total_seconds()), **options,
    )


def clear_auth_cookies(response: JSONResponse) -> None:
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)


# === Endpoints ===

@router.post("/signup")
def signup(req: SignupRequest, db: Session = Depends(get_db)):
    """Register; the account starts inactive"""
    user = SignupUseCase(db).execute(name=req.name, email=req.email, password=req.password)
    return created(
        {"id": user.id, "email": user.email, "name": user.name, "isActive": user.is_active},
        "User created successfully",
    )


@router.post("/login")
def login(req: LoginRequest, db: Session = Depends(get_db)):
    """Inactive users may log in; subscription is checked per route"""
    result = LoginUseCase(db).execute(email=req.email, password=req.password)
    response = success(public_user(result.user), "Login successful")
    set_auth_cookies(response, result.tokens)
    return response


@router.post("/refresh")
def refresh(request: Request, db: Session = Depends(get_db)):
    tokens = RefreshSessionUseCase(db).execute(request.cookies.get(REFRESH_COOKIE))
    response = success_message("Token refreshed successfully")
    set_auth_cookies(response, tokens)
    return response


@router.post("/logout")
def logout(request: Request, db: Session = Depends(get_db)):
    """Always succeeds and always clears the cookies"""
    LogoutUseCase(db).execute(request.cookies.get(REFRESH_COOKIE))
    response = success_message("Logged out successfully")
    clear_auth_cookies(response)
    return response


@router.get("/me")
def me(user: User = Depends(get_current_user_allow_inactive)):
    return success(public_user(user), "User profile retrieved successfully")


@router.put("/profile")
def update_profile(
    req: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = UpdateProfileUseCase(db).execute(user, name=req.name, email=req.email)
    return success(public_user(user), "Profile updated successfully")


@router.put("/password")
def change_password(
    req: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ChangePasswordUseCase(db).execute(user, req.current_password, req.new_password)
    return success_message("Password updated successfully")
