"""
SQLAlchemy ORM models
"""
from decimal import Decimal
from datetime import datetime
from sqlalchemy import String, DateTime, Integer, SmallInteger, Text, TIMESTAMP, func, Boolean, Numeric, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.db.session import Base


ROLE_USER = "user"
ROLE_ADMIN = "admin"

TRANSACTION_TYPE_INCOME = "income"
TRANSACTION_TYPE_EXPENSE = "expense"
TRANSACTION_TYPES = (TRANSACTION_TYPE_INCOME, TRANSACTION_TYPE_EXPENSE)

GOAL_CATEGORIES = ("emergency", "vacation", "house", "car", "retirement", "education", "other")
GOAL_PRIORITIES = ("low", "medium", "high")

RECURRING_FREQUENCIES = ("daily", "weekly", "monthly", "quarterly", "yearly")


class User(Base):
    """
    User: identity, credentials, session and subscription state
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_USER, server_default=ROLE_USER)

    # Subscription window (independent from authentication)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    activated_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True, index=True)

    # Last issued refresh token only, not a history
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Preferences
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD", server_default="USD")
    country: Mapped[str] = mapped_column(String(2), nullable=False, default="US", server_default="US")
    date_format: Mapped[str] = mapped_column(String(10), nullable=False, default="MM/DD/YYYY", server_default="MM/DD/YYYY")
    theme: Mapped[str] = mapped_column(String(10), nullable=False, default="light", server_default="light")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class Category(Base):
    """
    User-defined transaction category
    """
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # -> users

    name: Mapped[str] = mapped_column(String(30), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint('user_id', 'name', name='uq_category_user_name'),
    )


class Transaction(Base):
    """
    Income or expense record owned by one user
    """
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # -> users

    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)  # income / expense
    category_id: Mapped[int | None] = mapped_column(Integer, nullable=True)  # -> categories
    date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        Index('ix_transactions_user_date', 'user_id', 'date'),
        Index('ix_transactions_user_type_date', 'user_id', 'type', 'date'),
        Index('ix_transactions_user_category_date', 'user_id', 'category_id', 'date'),
    )


# ============================================================================
# Budgets
# ============================================================================


class Budget(Base):
    """Monthly budget header, one per (user, YYYY-MM)"""
    __tablename__ = "budgets"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # -> users
    month: Mapped[str] = mapped_column(String(7), nullable=False)  # YYYY-MM
    total_budget: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2), nullable=False, default=Decimal("0"), server_default="0"
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint('user_id', 'month', name='uq_budget_user_month'),
    )


class CategoryBudget(Base):
    """Per-category limit inside a monthly budget"""
    __tablename__ = "category_budgets"

    id: Mapped[int] = mapped_column(primary_key=True)
    budget_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # -> budgets
    category_id: Mapped[int] = mapped_column(Integer, nullable=False)  # -> categories
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2), nullable=False, default=Decimal("0"), server_default="0"
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")


# ============================================================================
# Goals & recurring transactions
# ============================================================================


class Goal(Base):
    """Savings goal"""
    __tablename__ = "goals"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # -> users

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    target_amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    current_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2), nullable=False, default=Decimal("0"), server_default="0"
    )
    target_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    category: Mapped[str] = mapped_column(String(20), nullable=False, default="other", server_default="other")
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="medium", server_default="medium")
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    completed_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        Index('ix_goals_user_completed', 'user_id', 'is_completed'),
    )


class RecurringTransaction(Base):
    """
    Recurring income/expense definition.

    Stored only; no worker materializes these into transactions.
    """
    __tablename__ = "recurring_transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # -> users

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    category_id: Mapped[int | None] = mapped_column(Integer, nullable=True)  # -> categories
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    frequency: Mapped[str] = mapped_column(String(10), nullable=False)  # daily..yearly
    start_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    day_of_week: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)  # 0 = Sunday
    day_of_month: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    last_processed: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    next_due: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index('ix_recurring_next_due_active', 'next_due', 'is_active'),
    )
