"""
User routes.

/users/profile, /users/settings, /users/change-password: the caller's own
account (strict authentication, no subscription gate).
Everything else is admin-only user management.
"""
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_admin
from app.api.responses import success, success_list, success_message
from app.api.schemas import CamelModel, SettingsResponse, public_user
from app.application.users import (
    ActivateUserUseCase, ChangePasswordUseCase, DeactivateUserUseCase, DeleteUserUseCase,
    UpdateProfileUseCase, UpdateSettingsUseCase, UpdateUserUseCase,
    get_user_or_404, list_users as query_users,
)
from app.infrastructure.db.models import User
from app.utils.validation import validate_country, validate_email, validate_name, validate_strong_password


router = APIRouter(prefix="/api/v1/users", tags=["users"])


# === Request models ===

class ProfileRequest(CamelModel):
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


class SettingsRequest(CamelModel):
    currency: str | None = None
    country: str | None = None
    date_format: Literal["MM/DD/YYYY", "DD/MM/YYYY", "YYYY-MM-DD"] | None = None
    theme: Literal["light", "dark", "auto"] | None = None

    @field_validator("country")
    @classmethod
    def check_country(cls, v: str | None) -> str | None:
        return validate_country(v) if v is not None else v


class AdminUpdateUserRequest(CamelModel):
    name: str | None = None
    email: str | None = None
    role: Literal["user", "admin"] | None = None
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str | None:
        return validate_name(v) if v is not None else v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        return validate_email(v) if v is not None else v


# ── Own account ──────────────────────────────────────────────────────────────

@router.get("/profile")
def get_profile(user: User = Depends(get_current_user)):
    return success(public_user(user), "Profile retrieved successfully")


@router.put("/profile")
def update_profile(
    req: ProfileRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = UpdateProfileUseCase(db).execute(user, name=req.name, email=req.email)
    return success(public_user(user), "Profile updated successfully")


@router.delete("/profile")
def delete_account(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteUserUseCase(db).execute(user.id)
    return success(None, "Account deleted successfully")


@router.put("/change-password")
def change_password(
    req: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ChangePasswordUseCase(db).execute(user, req.current_password, req.new_password)
    return success_message("Password changed successfully")


@router.get("/settings")
def get_user_settings(user: User = Depends(get_current_user)):
    return success(SettingsResponse.model_validate(user).to_json(), "Settings retrieved successfully")


@router.put("/settings")
def update_settings(
    req: SettingsRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = UpdateSettingsUseCase(db).execute(user, **req.model_dump(exclude_unset=True))
    return success(SettingsResponse.model_validate(user).to_json(), "Settings updated successfully")


# ── Admin ────────────────────────────────────────────────────────────────────

@router.get("")
def list_users(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return success_list([public_user(u) for u in query_users(db)], "Users retrieved successfully")


@router.get("/{user_id}")
def get_user(user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return success(public_user(get_user_or_404(db, user_id)), "User retrieved successfully")


@router.put("/{user_id}")
def update_user(
    user_id: int,
    req: AdminUpdateUserRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = UpdateUserUseCase(db).execute(user_id, **req.model_dump(exclude_unset=True))
    return success(public_user(user), "User updated successfully")


@router.delete("/{user_id}")
def delete_user(user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    DeleteUserUseCase(db).execute(user_id)
    return success(None, "User deleted successfully")


@router.post("/{user_id}/activate")
def activate_user(user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Activate for 30 days from now"""
    user = ActivateUserUseCase(db).execute(user_id)
    return success(public_user(user), "User activated successfully")


@router.post("/{user_id}/deactivate")
def deactivate_user(user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    user = DeactivateUserUseCase(db).execute(user_id)
    return success(public_user(user), "User deactivated successfully")
