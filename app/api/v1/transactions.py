"""
Transaction API endpoints
"""
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query
from pydantic import field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_subscription
from app.api.responses import created, success, success_list
from app.api.schemas import CamelModel, Money, UtcDatetime
from app.application.transactions import (
    CreateTransactionUseCase, DeleteTransactionUseCase, UpdateTransactionUseCase,
    get_owned_transaction, list_transactions as query_transactions,
)
from app.infrastructure.db.models import User
from app.utils.validation import validate_description, validate_money


router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


# === Request/Response models ===

class CreateTransactionRequest(CamelModel):
    amount: Money
    type: Literal["income", "expense"]
    category_id: int | None = None
    date: datetime | None = None
    description: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v):
        return validate_money(v)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return validate_description(v)


class UpdateTransactionRequest(CreateTransactionRequest):
    amount: Money | None = None
    type: Literal["income", "expense"] | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, v):
        return validate_money(v) if v is not None else v


class TransactionResponse(CamelModel):
    id: int
    amount: Money
    type: str
    category_id: int | None = None
    date: UtcDatetime
    description: str | None = None
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None


def _dump(tx) -> dict:
    return TransactionResponse.model_validate(tx).to_json()


# === Endpoints ===

@router.get("")
def list_transactions(
    start: datetime | None = None,
    end: datetime | None = None,
    type: Literal["income", "expense"] | None = None,
    category: int | None = None,
    page: int = Query(1, ge=1, le=1000),
    limit: int = Query(50, ge=1, le=100),
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    """Newest first"""
    result = query_transactions(
        db, user.id, start=start, end=end, type=type, category_id=category,
        page=page, limit=limit,
    )
    return success_list(
        [_dump(tx) for tx in result.items],
        "Transactions retrieved successfully",
        meta={"page": result.page, "limit": result.limit, "total": result.total},
    )


@router.post("")
def create_transaction(
    req: CreateTransactionRequest,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    result = CreateTransactionUseCase(db).execute(
        user_id=user.id,
        amount=req.amount,
        type=req.type,
        category_id=req.category_id,
        date=req.date,
        description=req.description,
    )
    return created(_dump(result.transaction), "Transaction created successfully")


@router.get("/{transaction_id}")
def get_transaction(
    transaction_id: int,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    tx = get_owned_transaction(db, user.id, transaction_id)
    return success(_dump(tx), "Transaction retrieved successfully")


@router.put("/{transaction_id}")
def update_transaction(
    transaction_id: int,
    req: UpdateTransactionRequest,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    changes = req.model_dump(exclude_unset=True)
    result = UpdateTransactionUseCase(db).execute(user.id, transaction_id, **changes)
    return success(_dump(result.transaction), "Transaction updated successfully")


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: int,
    user: User = Depends(require_subscription),
    db: Session = Depends(get_db),
):
    DeleteTransactionUseCase(db).execute(user.id, transaction_id)
    return success(None, "Transaction deleted successfully")
