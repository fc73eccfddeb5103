"""
Goal API endpoints
"""
from datetime import datetime
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_subscription
from app.api.responses import created, success, success_list
from app.api.schemas import CamelModel, Money, UtcDatetime
from app.application.goals import (
    AddContributionUseCase, CreateGoalUseCase, DeleteGoalUseCase, UpdateGoalUseCase,
    list_goals as query_goals,
)
from app.infrastructure.db.models import User
from app.utils.validation import validate_description, validate_money


router = APIRouter(prefix="/api/v1/goals", tags=["goals"])

GoalCategory = Literal["emergency", "vacation", "house", "car", "retirement", "education", "other"]
GoalPriority = Literal["low", "medium", "high"]


# === Request/Response models ===

class CreateGoalRequest(CamelModel):
    name: str
    description: str | None = None
    target_amount: Money
    current_amount: Money = Decimal("0")
    target_date: datetime | None = None
    category: GoalCategory = "other"
    priority: GoalPriority = "medium"

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if not 2 <= len(v.strip()) <= 100:
            raise ValueError("Goal name must be between 2 and 100 characters long")
        return v.strip()

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return validate_description(v)

    @field_validator("target_amount", mode="before")
    @classmethod
    def check_target(cls, v):
        return validate_money(v)

    @field_validator("current_amount", mode="before")
    @classmethod
    def check_current(cls, v):
        return validate_money(v, allow_zero=True)


class UpdateGoalRequest(CamelModel):
    name: str | None = None
    description: str | None = None
    target_amount: Money | None = None
    current_amount: Money | None = None
    target_date: datetime | None = None
    category: GoalCategory | None = None
    priority: GoalPriority | None = None
    is_completed: bool | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str | None:
        if v is not None and not 2 <= len(v.strip()) <= 100:
            raise ValueError("Goal name must be between 2 and 100 characters long")
        return v.strip() if v is not None else v

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return validate_description(v)

    @field_validator("target_amount", mode="before")
    @classmethod
    def check_target(cls, v):
        return validate_money(v) if v is not None else v

    @field_validator("current_amount", mode="before")
    @classmethod
    def check_current(cls, v):
        return validate_money(v, allow_zero=True) if v is not None else v


class ContributionRequest(CamelModel):
    amount: Money
    description: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v):
        return validate_money(v)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return validate_description(v)


class GoalResponse(CamelModel):
    id: int
    name: str
    description: str | None = None
    target_amount: Money
    current_amount: Money
    target_date: UtcDatetime | None = None
    category: str
    priority: str
    is_completed: bool
    completed_at: UtcDatetime | None = None
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None


def _dump(goal) -> dict:
    return GoalResponse.model_validate(goal).to_json()


# === Endpoints ===

@router.get("")
def list_goals(user: User = Depends(require_subscription), db: Session = Depends(get_db)):
    return success_list([_dump(g) for g in query_goals(db, user.id)], "Goals retrieved successfully")


@router.post("")
def create_goal(
    req: CreateGoalRequest,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    goal = CreateGoalUseCase(db).execute(user_id=user.id, **req.model_dump())
    return created(_dump(goal), "Goal created successfully")


@router.put("/{goal_id}")
def update_goal(
    goal_id: int,
    req: UpdateGoalRequest,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    goal = UpdateGoalUseCase(db).execute(user.id, goal_id, **req.model_dump(exclude_unset=True))
    return success(_dump(goal), "Goal updated successfully")


@router.delete("/{goal_id}")
def delete_goal(
    goal_id: int,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    DeleteGoalUseCase(db).execute(user.id, goal_id)
    return success(None, "Goal deleted successfully")


@router.post("/{goal_id}/contribute")
def contribute(
    goal_id: int,
    req: ContributionRequest,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    goal = AddContributionUseCase(db).execute(user.id, goal_id, req.amount, req.description)
    return success(_dump(goal), "Contribution added successfully")
