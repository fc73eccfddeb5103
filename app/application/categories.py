"""
Category use cases - user-defined categories for transactions and budgets
"""
from sqlalchemy.orm import Session

from app.application.errors import NotFoundError, ValidationError
from app.infrastructure.db.models import Category, CategoryBudget, Budget, Transaction


class CategoryValidationError(ValidationError):
    pass


def get_owned_category(db: Session, user_id: int, category_id: int) -> Category:
    """
    Raises:
        NotFoundError: no such category for this user
    """
    category = db.query(Category).filter(
        Category.id == category_id,
        Category.user_id == user_id,
    ).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def list_categories(db: Session, user_id: int) -> list[Category]:
    return db.query(Category).filter(
        Category.user_id == user_id,
    ).order_by(Category.name.asc()).all()


class CreateCategoryUseCase:
    """Use case: create a category (name unique per user)"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, name: str, description: str | None = None) -> Category:
        name = name.strip()
        if not name:
            raise CategoryValidationError("Category name is required")

        existing = self.db.query(Category).filter(
            Category.user_id == user_id,
            Category.name == name,
        ).first()
        if existing:
            raise CategoryValidationError("Category already exists")

        category = Category(user_id=user_id, name=name, description=description)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category


class UpdateCategoryUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, category_id: int, **changes) -> Category:
        category = get_owned_category(self.db, user_id, category_id)

        if changes.get("name") is not None:
            name = changes["name"].strip()
            if not name:
                raise CategoryValidationError("Category name is required")
            clash = self.db.query(Category).filter(
                Category.user_id == user_id,
                Category.name == name,
                Category.id != category_id,
            ).first()
            if clash:
                raise CategoryValidationError("Category already exists")
            category.name = name
        if "description" in changes:
            category.description = changes["description"]

        self.db.commit()
        self.db.refresh(category)
        return category


class DeleteCategoryUseCase:
    """
    Use case: delete a category

    Detaches the user's transactions from it and drops its budget lines, so
    nothing keeps pointing at a missing row.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, category_id: int) -> None:
        category = get_owned_category(self.db, user_id, category_id)

        self.db.query(Transaction).filter(
            Transaction.user_id == user_id,
            Transaction.category_id == category.id,
        ).update({Transaction.category_id: None}, synchronize_session=False)

        budget_ids = [
            row.id for row in self.db.query(Budget.id).filter(Budget.user_id == user_id).all()
        ]
        if budget_ids:
            self.db.query(CategoryBudget).filter(
                CategoryBudget.budget_id.in_(budget_ids),
                CategoryBudget.category_id == category.id,
            ).delete(synchronize_session=False)

        self.db.delete(category)
        self.db.commit()
