"""
Budget threshold evaluation, run after every transaction create/update.

Observational only: compares the month's expense totals with the stored
budget and logs a warning at 90% and at 100%. Nothing is persisted, nothing
is deduplicated, and the transaction write is never blocked or changed.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.infrastructure.db.models import (
    Budget, Category, CategoryBudget, Transaction, TRANSACTION_TYPE_EXPENSE,
)
from app.utils.dates import month_key, month_bounds


logger = logging.getLogger(__name__)

APPROACHING_RATIO = Decimal("0.9")
APPROACHING_PERCENTAGE = 90

LEVEL_APPROACHING = "approaching"
LEVEL_EXCEEDED = "exceeded"

SCOPE_TOTAL = "total"
SCOPE_CATEGORY = "category"


@dataclass(frozen=True)
class BudgetAlert:
    scope: str  # total / category
    level: str  # approaching / exceeded
    user_id: int
    month: str
    spent: Decimal
    limit: Decimal
    category_id: int | None = None
    category_name: str | None = None


def classify(spent: Decimal, limit: Decimal) -> str | None:
    """
    Threshold policy for one scope

    A limit of zero means "not set" and never alerts.

    Example:
        >>> classify(Decimal("95"), Decimal("100"))
        "approaching"
        >>> classify(Decimal("105"), Decimal("100"))
        "exceeded"
        >>> classify(Decimal("50"), Decimal("0"))
        None
    """
    if limit is None or limit <= 0:
        return None
    if spent >= limit:
        return LEVEL_EXCEEDED
    if spent >= limit * APPROACHING_RATIO:
        return LEVEL_APPROACHING
    return None


class BudgetThresholdEvaluator:

    def __init__(self, db: Session):
        self.db = db

    def evaluate(self, user_id: int, transaction: Transaction) -> List[BudgetAlert]:
        """
        Evaluate thresholds for the month of the given transaction

        Errors propagate; use evaluate_safely() from write paths.

        Returns:
            Alerts that were logged (empty when nothing qualifies)
        """
        if transaction.type != TRANSACTION_TYPE_EXPENSE:
            return []

        month = month_key(transaction.date)
        budget = self.db.query(Budget).filter(
            Budget.user_id == user_id,
            Budget.month == month,
        ).first()
        if not budget:
            return []

        start, end = month_bounds(month)
        alerts: List[BudgetAlert] = []

        total_spent = self._expense_sum(user_id, start, end)
        level = classify(total_spent, Decimal(budget.total_budget))
        if level:
            alerts.append(BudgetAlert(
                scope=SCOPE_TOTAL, level=level, user_id=user_id, month=month,
                spent=total_spent, limit=Decimal(budget.total_budget),
            ))

        if transaction.category_id is not None:
            line = self.db.query(CategoryBudget).filter(
                CategoryBudget.budget_id == budget.id,
                CategoryBudget.category_id == transaction.category_id,
            ).order_by(CategoryBudget.position.asc(), CategoryBudget.id.asc()).first()
            if line is not None:
                category_spent = self._expense_sum(user_id, start, end, transaction.category_id)
                level = classify(category_spent, Decimal(line.amount))
                if level:
                    category = self.db.query(Category).filter(Category.id == line.category_id).first()
                    alerts.append(BudgetAlert(
                        scope=SCOPE_CATEGORY, level=level, user_id=user_id, month=month,
                        spent=category_spent, limit=Decimal(line.amount),
                        category_id=line.category_id,
                        category_name=category.name if category else None,
                    ))

        for alert in alerts:
            _log_alert(alert)
        return alerts

    def evaluate_safely(self, user_id: int, transaction: Transaction) -> List[BudgetAlert]:
        """Same as evaluate(), but any failure is logged, rolled back and swallowed"""
        try:
            return self.evaluate(user_id, transaction)
        except Exception:
            logger.exception(f"Budget check failed for user id={user_id}")
            self.db.rollback()
            return []

    def _expense_sum(self, user_id: int, start, end, category_id: int | None = None) -> Decimal:
        query = self.db.query(func.coalesce(func.sum(Transaction.amount), 0)).filter(
            Transaction.user_id == user_id,
            Transaction.type == TRANSACTION_TYPE_EXPENSE,
            Transaction.date >= start,
            Transaction.date < end,
        )
        if category_id is not None:
            query = query.filter(Transaction.category_id == category_id)
        return Decimal(str(query.scalar() or 0))


def _log_alert(alert: BudgetAlert) -> None:
    extra = {
        "user_id": alert.user_id,
        "month": alert.month,
        "spent": float(alert.spent),
        "limit": float(alert.limit),
        "alert_scope": alert.scope,
        "alert_level": alert.level,
    }
    if alert.level == LEVEL_APPROACHING:
        extra["percentage"] = APPROACHING_PERCENTAGE

    if alert.scope == SCOPE_TOTAL:
        label = "Budget"
    else:
        label = "Category budget"
        extra["category"] = alert.category_name
        extra["category_id"] = alert.category_id

    if alert.level == LEVEL_EXCEEDED:
        message = f"{label} exceeded"
    else:
        message = f"{label} approaching limit"

    logger.warning(
        f"{message}: user={alert.user_id} month={alert.month} spent={alert.spent} limit={alert.limit}",
        extra=extra,
    )
