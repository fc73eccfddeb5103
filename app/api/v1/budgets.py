"""
Budget API endpoints (GET/POST /api/v1/budgets)
"""
from fastapi import APIRouter, Depends
from pydantic import Field, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_subscription
from app.api.responses import success
from app.api.schemas import CamelModel, Money, UtcDatetime
from app.application.budgets import BudgetView, CategoryLimit, UpsertBudgetUseCase, get_budget as query_budget
from app.infrastructure.db.models import User
from app.utils.validation import is_valid_month, validate_money


router = APIRouter(prefix="/api/v1/budgets", tags=["budgets"])


# === Request/Response models ===

class CategoryBudgetItem(CamelModel):
    category: int
    amount: Money

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v):
        return validate_money(v, allow_zero=True)


class UpsertBudgetRequest(CamelModel):
    month: str
    total_budget: Money
    category_budgets: list[CategoryBudgetItem] = Field(default_factory=list)

    @field_validator("month")
    @classmethod
    def check_month(cls, v: str) -> str:
        if not is_valid_month(v):
            raise ValueError("Month must be in YYYY-MM format")
        return v

    @field_validator("total_budget", mode="before")
    @classmethod
    def check_total(cls, v):
        return validate_money(v, allow_zero=True)


class CategoryBudgetResponse(CamelModel):
    category: int
    category_name: str | None = None
    amount: Money


class BudgetResponse(CamelModel):
    id: int
    month: str
    total_budget: Money
    category_budgets: list[CategoryBudgetResponse]
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None


def _dump(view: BudgetView | None) -> dict | None:
    if view is None:
        return None
    budget = view.budget
    return BudgetResponse(
        id=budget.id,
        month=budget.month,
        total_budget=budget.total_budget,
        category_budgets=[
            CategoryBudgetResponse(
                category=line.category_id,
                category_name=view.category_names.get(line.category_id),
                amount=line.amount,
            )
            for line in view.lines
        ],
        created_at=budget.created_at,
        updated_at=budget.updated_at,
    ).to_json()


# === Endpoints ===

@router.get("")
def get_budget(
    month: str | None = None,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    """Budget of a month; data is null when none is configured"""
    return success(_dump(query_budget(db, user.id, month)), "Budget retrieved successfully")


@router.post("")
def upsert_budget(
    req: UpsertBudgetRequest,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    view = UpsertBudgetUseCase(db).execute(
        user_id=user.id,
        month=req.month,
        total_budget=req.total_budget,
        category_budgets=[CategoryLimit(category_id=cb.category, amount=cb.amount) for cb in req.category_budgets],
    )
    return success(_dump(view), "Budget updated successfully")
