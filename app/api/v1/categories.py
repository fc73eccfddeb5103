"""
Category API endpoints
"""
from fastapi import APIRouter, Depends
from pydantic import field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_subscription
from app.api.responses import created, success, success_list
from app.api.schemas import CamelModel, UtcDatetime
from app.application.categories import (
    CreateCategoryUseCase, DeleteCategoryUseCase, UpdateCategoryUseCase, list_categories as query_categories,
)
from app.infrastructure.db.models import User
from app.utils.validation import validate_description


router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


# === Request/Response models ===

def _check_name(v: str | None) -> str | None:
    if v is not None and not 2 <= len(v.strip()) <= 30:
        raise ValueError("Category name must be between 2 and 30 characters long")
    return v.strip() if v is not None else v


class CreateCategoryRequest(CamelModel):
    name: str
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return validate_description(v)


class UpdateCategoryRequest(CamelModel):
    name: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _check_name(v)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return validate_description(v)


class CategoryResponse(CamelModel):
    id: int
    name: str
    description: str | None = None
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None


def _dump(category) -> dict:
    return CategoryResponse.model_validate(category).to_json()


# === Endpoints ===

@router.get("")
def list_categories(user: User = Depends(require_subscription), db: Session = Depends(get_db)):
    items = [_dump(c) for c in query_categories(db, user.id)]
    return success_list(items, "Categories retrieved successfully")


@router.post("")
def create_category(
    req: CreateCategoryRequest,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    category = CreateCategoryUseCase(db).execute(user.id, req.name, req.description)
    return created(_dump(category), "Category created successfully")


@router.put("/{category_id}")
def update_category(
    category_id: int,
    req: UpdateCategoryRequest,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    category = UpdateCategoryUseCase(db).execute(
        user.id, category_id, **req.model_dump(exclude_unset=True)
    )
    return success(_dump(category), "Category updated successfully")


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    DeleteCategoryUseCase(db).execute(user.id, category_id)
    return success(None, "Category deleted successfully")
