"""
User management: admin operations, subscription activation, and the
self-service profile/settings/password actions.
"""
import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from app.auth import hash_password, verify_password, get_user_by_id, normalize_email
from app.application.errors import DuplicateEmailError, NotFoundError, ValidationError
from app.infrastructure.db.models import (
    User, Budget, CategoryBudget, Category, Goal, RecurringTransaction, Transaction,
    ROLE_ADMIN, ROLE_USER,
)
from app.utils.dates import utcnow


logger = logging.getLogger(__name__)

SUBSCRIPTION_PERIOD = timedelta(days=30)

SUPPORTED_CURRENCIES = ("USD", "EUR", "GBP", "INR", "JPY", "CAD", "AUD", "RUB")


def get_user_or_404(db: Session, user_id: int) -> User:
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def _ensure_email_free(db: Session, email: str, user_id: int) -> str:
    email = normalize_email(email)
    clash = db.query(User).filter(User.email == email, User.id != user_id).first()
    if clash:
        raise DuplicateEmailError()
    return email


# ============================================================================
# Admin
# ============================================================================


class UpdateUserUseCase:
    """Admin use case: edit name, email, role, is_active"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, **changes) -> User:
        logger.info(f"User update initiated: id={user_id} fields={sorted(changes)}")
        user = get_user_or_404(self.db, user_id)

        if changes.get("name") is not None:
            user.name = changes["name"].strip()
        if changes.get("email") is not None:
            user.email = _ensure_email_free(self.db, changes["email"], user.id)
        if changes.get("role") is not None:
            if changes["role"] not in (ROLE_USER, ROLE_ADMIN):
                raise ValidationError('Role must be either "user" or "admin"')
            user.role = changes["role"]
        if changes.get("is_active") is not None:
            user.is_active = changes["is_active"]

        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User updated successfully: id={user.id} email={user.email}")
        return user


class ActivateUserUseCase:
    """Admin use case: open a 30-day subscription window starting now"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int) -> User:
        user = get_user_or_404(self.db, user_id)
        now = utcnow()
        user.is_active = True
        user.activated_at = now
        user.expires_at = now + SUBSCRIPTION_PERIOD
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User activated: id={user.id} until {user.expires_at}")
        return user


class DeactivateUserUseCase:
    """Admin use case: close the subscription (expires_at is kept for history)"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int) -> User:
        user = get_user_or_404(self.db, user_id)
        user.is_active = False
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User deactivated: id={user.id}")
        return user


class DeleteUserUseCase:
    """Delete a user together with everything they own"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int) -> None:
        logger.info(f"User deletion initiated: id={user_id}")
        user = get_user_or_404(self.db, user_id)

        budget_ids = [row.id for row in self.db.query(Budget.id).filter(Budget.user_id == user.id).all()]
        if budget_ids:
            self.db.query(CategoryBudget).filter(
                CategoryBudget.budget_id.in_(budget_ids),
            ).delete(synchronize_session=False)
        for model in (Budget, Transaction, Category, Goal, RecurringTransaction):
            self.db.query(model).filter(model.user_id == user.id).delete(synchronize_session=False)

        email = user.email
        self.db.delete(user)
        self.db.commit()
        logger.info(f"User deleted successfully: id={user_id} email={email}")


# ============================================================================
# Self-service
# ============================================================================


class UpdateProfileUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user: User, name: str | None = None, email: str | None = None) -> User:
        if name is not None:
            user.name = name.strip()
        if email is not None and normalize_email(email) != user.email:
            user.email = _ensure_email_free(self.db, email, user.id)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Profile updated for user: {user.email}")
        return user


class ChangePasswordUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user: User, current_password: str, new_password: str) -> None:
        """
        Raises:
            ValidationError: current password does not match
        """
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")
        user.password_hash = hash_password(new_password)
        self.db.commit()
        logger.info(f"Password changed for user: {user.email}")


class UpdateSettingsUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user: User, **changes) -> User:
        currency = changes.get("currency")
        if currency is not None:
            currency = currency.upper()
            if currency not in SUPPORTED_CURRENCIES:
                raise ValidationError(f"Currency must be one of: {', '.join(SUPPORTED_CURRENCIES)}")
            user.currency = currency
        for attr in ("country", "date_format", "theme"):
            if changes.get(attr) is not None:
                setattr(user, attr, changes[attr])
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Settings updated for user id={user.id}")
        return user
