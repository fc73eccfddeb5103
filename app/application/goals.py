"""
Goal use cases - savings goals and contributions
"""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import case
from sqlalchemy.orm import Session

from app.application.errors import NotFoundError, ValidationError
from app.infrastructure.db.models import (
    Goal, Transaction, GOAL_CATEGORIES, GOAL_PRIORITIES, TRANSACTION_TYPE_EXPENSE,
)
from app.utils.dates import as_utc, utcnow


class GoalValidationError(ValidationError):
    """Goal validation error"""
    pass


_PRIORITY_RANK = case(
    (Goal.priority == "high", 0),
    (Goal.priority == "medium", 1),
    else_=2,
)


def get_owned_goal(db: Session, user_id: int, goal_id: int) -> Goal:
    goal = db.query(Goal).filter(
        Goal.id == goal_id,
        Goal.user_id == user_id,
    ).first()
    if not goal:
        raise NotFoundError("Goal not found")
    return goal


def list_goals(db: Session, user_id: int) -> list[Goal]:
    """High priority first, then the nearest target date"""
    return db.query(Goal).filter(
        Goal.user_id == user_id,
    ).order_by(_PRIORITY_RANK, Goal.target_date.asc(), Goal.id.asc()).all()


def _mark_completed_if_reached(goal: Goal) -> None:
    if Decimal(goal.current_amount) >= Decimal(goal.target_amount) and not goal.is_completed:
        goal.is_completed = True
        goal.completed_at = utcnow()


def _check_choices(category: str | None, priority: str | None) -> None:
    if category is not None and category not in GOAL_CATEGORIES:
        raise GoalValidationError(f"Category must be one of: {', '.join(GOAL_CATEGORIES)}")
    if priority is not None and priority not in GOAL_PRIORITIES:
        raise GoalValidationError(f"Priority must be one of: {', '.join(GOAL_PRIORITIES)}")


class CreateGoalUseCase:
    """Use case: create a savings goal"""

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        name: str,
        target_amount: Decimal,
        description: str | None = None,
        current_amount: Decimal = Decimal("0"),
        target_date: datetime | None = None,
        category: str = "other",
        priority: str = "medium",
    ) -> Goal:
        name = name.strip()
        if not name:
            raise GoalValidationError("Goal name is required")
        _check_choices(category, priority)

        goal = Goal(
            user_id=user_id,
            name=name,
            description=description,
            target_amount=target_amount,
            current_amount=current_amount,
            target_date=as_utc(target_date),
            category=category,
            priority=priority,
            is_completed=False,
        )
        _mark_completed_if_reached(goal)
        self.db.add(goal)
        self.db.commit()
        self.db.refresh(goal)
        return goal


class UpdateGoalUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, goal_id: int, **changes) -> Goal:
        goal = get_owned_goal(self.db, user_id, goal_id)
        _check_choices(changes.get("category"), changes.get("priority"))

        for attr in ("name", "target_amount", "current_amount", "category", "priority"):
            if changes.get(attr) is not None:
                setattr(goal, attr, changes[attr])
        if "description" in changes:
            goal.description = changes["description"]
        if "target_date" in changes:
            goal.target_date = as_utc(changes["target_date"])
        if changes.get("is_completed") is not None:
            goal.is_completed = changes["is_completed"]
            goal.completed_at = utcnow() if goal.is_completed else None

        _mark_completed_if_reached(goal)
        self.db.commit()
        self.db.refresh(goal)
        return goal


class DeleteGoalUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, goal_id: int) -> None:
        goal = get_owned_goal(self.db, user_id, goal_id)
        self.db.delete(goal)
        self.db.commit()


class AddContributionUseCase:
    """
    Use case: put money towards a goal

    Also records the contribution as an uncategorized expense dated now.
    Budget thresholds are not evaluated for this write.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        goal_id: int,
        amount: Decimal,
        description: str | None = None,
    ) -> Goal:
        if amount <= 0:
            raise GoalValidationError("Amount must be a positive number")

        goal = get_owned_goal(self.db, user_id, goal_id)
        goal.current_amount = Decimal(goal.current_amount) + amount
        _mark_completed_if_reached(goal)

        self.db.add(Transaction(
            user_id=user_id,
            amount=amount,
            type=TRANSACTION_TYPE_EXPENSE,
            description=description or f"Contribution to {goal.name}",
            date=utcnow(),
        ))
        self.db.commit()
        self.db.refresh(goal)
        return goal
