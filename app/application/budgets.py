"""
Budget use cases and query helpers.

One budget per (user, YYYY-MM): a total limit plus per-category limits.
The evaluator in app.application.budget_alerts reads these; nothing here
computes spending.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from app.application.errors import ValidationError
from app.infrastructure.db.models import Budget, CategoryBudget, Category
from app.utils.validation import is_valid_month


class BudgetValidationError(ValidationError):
    pass


@dataclass
class CategoryLimit:
    category_id: int
    amount: Decimal


@dataclass
class BudgetView:
    budget: Budget
    lines: List[CategoryBudget]
    category_names: dict


def _require_month(month: str | None) -> str:
    if not month:
        raise BudgetValidationError("month required (YYYY-MM)")
    if not is_valid_month(month):
        raise BudgetValidationError("Month must be in YYYY-MM format")
    return month


def get_budget(db: Session, user_id: int, month: str | None) -> BudgetView | None:
    """Budget with its category lines, or None when the month has no budget"""
    month = _require_month(month)
    budget = db.query(Budget).filter(
        Budget.user_id == user_id,
        Budget.month == month,
    ).first()
    if not budget:
        return None
    return _load_view(db, budget)


def _load_view(db: Session, budget: Budget) -> BudgetView:
    lines = db.query(CategoryBudget).filter(
        CategoryBudget.budget_id == budget.id,
    ).order_by(CategoryBudget.position.asc(), CategoryBudget.id.asc()).all()

    ids = [line.category_id for line in lines]
    names = {}
    if ids:
        names = {
            c.id: c.name
            for c in db.query(Category).filter(Category.id.in_(ids)).all()
        }
    return BudgetView(budget=budget, lines=lines, category_names=names)


class UpsertBudgetUseCase:
    """
    Use case: create or replace the budget of a month

    The category limit list is replaced wholesale on every call.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        month: str,
        total_budget: Decimal,
        category_budgets: List[CategoryLimit] | None = None,
    ) -> BudgetView:
        month = _require_month(month)
        if total_budget < 0:
            raise BudgetValidationError("Total budget must be zero or positive")

        category_budgets = category_budgets or []
        if category_budgets:
            wanted = {cb.category_id for cb in category_budgets}
            owned = {
                row.id for row in self.db.query(Category.id).filter(
                    Category.user_id == user_id,
                    Category.id.in_(wanted),
                ).all()
            }
            missing = wanted - owned
            if missing:
                raise BudgetValidationError(f"Unknown category: {sorted(missing)[0]}")
            for cb in category_budgets:
                if cb.amount < 0:
                    raise BudgetValidationError("Category budget amount must be zero or positive")

        budget = self.db.query(Budget).filter(
            Budget.user_id == user_id,
            Budget.month == month,
        ).first()
        if budget is None:
            budget = Budget(user_id=user_id, month=month, total_budget=total_budget)
            self.db.add(budget)
            self.db.flush()
        else:
            budget.total_budget = total_budget
            self.db.query(CategoryBudget).filter(
                CategoryBudget.budget_id == budget.id,
            ).delete(synchronize_session=False)

        for position, cb in enumerate(category_budgets):
            self.db.add(CategoryBudget(
                budget_id=budget.id,
                category_id=cb.category_id,
                amount=cb.amount,
                position=position,
            ))

        self.db.commit()
        self.db.refresh(budget)
        return _load_view(self.db, budget)
