"""
Transaction use cases.

Every create/update hands the stored row to the budget evaluator afterwards.
The evaluation is best effort: its failures are logged and never reach the
caller, and the transaction stays committed either way.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from app.application.budget_alerts import BudgetAlert, BudgetThresholdEvaluator
from app.application.categories import get_owned_category
from app.application.errors import NotFoundError, ValidationError
from app.infrastructure.db.models import Transaction, TRANSACTION_TYPES
from app.utils.dates import as_utc, utcnow


DEFAULT_PAGE_SIZE = 50


class TransactionValidationError(ValidationError):
    pass


@dataclass
class TransactionWriteResult:
    transaction: Transaction
    alerts: List[BudgetAlert] = field(default_factory=list)


@dataclass
class TransactionPage:
    items: List[Transaction]
    total: int
    page: int
    limit: int


def get_owned_transaction(db: Session, user_id: int, transaction_id: int) -> Transaction:
    tx = db.query(Transaction).filter(
        Transaction.id == transaction_id,
        Transaction.user_id == user_id,
    ).first()
    if not tx:
        raise NotFoundError("Transaction not found")
    return tx


def list_transactions(
    db: Session,
    user_id: int,
    start: datetime | None = None,
    end: datetime | None = None,
    type: str | None = None,
    category_id: int | None = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> TransactionPage:
    """Newest first, filtered and paginated"""
    if start and end and as_utc(start) > as_utc(end):
        raise TransactionValidationError("Start date must be before end date")

    query = db.query(Transaction).filter(Transaction.user_id == user_id)
    if start:
        query = query.filter(Transaction.date >= as_utc(start))
    if end:
        query = query.filter(Transaction.date <= as_utc(end))
    if type:
        query = query.filter(Transaction.type == type)
    if category_id is not None:
        query = query.filter(Transaction.category_id == category_id)

    total = query.count()
    items = query.order_by(
        Transaction.date.desc(), Transaction.id.desc()
    ).offset((page - 1) * limit).limit(limit).all()
    return TransactionPage(items=items, total=total, page=page, limit=limit)


def _check_type(value: str) -> str:
    if value not in TRANSACTION_TYPES:
        raise TransactionValidationError('Type must be either "income" or "expense"')
    return value


class CreateTransactionUseCase:
    """Use case: record income or expense, then evaluate budgets"""

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        amount: Decimal,
        type: str,
        category_id: int | None = None,
        date: datetime | None = None,
        description: str | None = None,
    ) -> TransactionWriteResult:
        """
        Args:
            user_id: owner
            amount: positive amount
            type: income / expense
            category_id: optional category owned by the same user
            date: when it happened (default: now)
            description: free text

        Raises:
            TransactionValidationError: bad type or amount
            NotFoundError: category belongs to nobody / someone else
        """
        _check_type(type)
        if amount <= 0:
            raise TransactionValidationError("Amount must be a positive number")
        if category_id is not None:
            get_owned_category(self.db, user_id, category_id)

        tx = Transaction(
            user_id=user_id,
            amount=amount,
            type=type,
            category_id=category_id,
            date=as_utc(date) or utcnow(),
            description=description,
        )
        self.db.add(tx)
        self.db.commit()
        self.db.refresh(tx)

        alerts = BudgetThresholdEvaluator(self.db).evaluate_safely(user_id, tx)
        return TransactionWriteResult(transaction=tx, alerts=alerts)


class UpdateTransactionUseCase:
    """Use case: partial update, then evaluate budgets"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, transaction_id: int, **changes) -> TransactionWriteResult:
        tx = get_owned_transaction(self.db, user_id, transaction_id)

        if changes.get("amount") is not None:
            if changes["amount"] <= 0:
                raise TransactionValidationError("Amount must be a positive number")
            tx.amount = changes["amount"]
        if changes.get("type") is not None:
            tx.type = _check_type(changes["type"])
        if "category_id" in changes:
            if changes["category_id"] is not None:
                get_owned_category(self.db, user_id, changes["category_id"])
            tx.category_id = changes["category_id"]
        if changes.get("date") is not None:
            tx.date = as_utc(changes["date"])
        if "description" in changes:
            tx.description = changes["description"]

        self.db.commit()
        self.db.refresh(tx)

        alerts = BudgetThresholdEvaluator(self.db).evaluate_safely(user_id, tx)
        return TransactionWriteResult(transaction=tx, alerts=alerts)


class DeleteTransactionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, transaction_id: int) -> None:
        tx = get_owned_transaction(self.db, user_id, transaction_id)
        self.db.delete(tx)
        self.db.commit()
