"""
Request gates: authentication and subscription authorization.

Two independent checks. authenticate() answers "who is calling";
authorize_subscription() answers "may they use paid features". Routes such
as GET /auth/me apply only the first, so a blocked user can still see why.
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.auth import get_user_by_id
from app.application.errors import (
    AccessTokenRequiredError, AccountInactiveError, AuthError, SubscriptionRequiredError,
)
from app.application.tokens import verify_access, subject_id
from app.infrastructure.db.models import User
from app.utils.dates import as_utc, utcnow


logger = logging.getLogger(__name__)


def authenticate(db: Session, access_token: str | None, allow_inactive: bool = False) -> User:
    """
    Resolve the user behind an access token

    Args:
        db: session
        access_token: raw JWT from the accessToken cookie or Bearer header
        allow_inactive: skip the is_active check (profile and gated routes)

    Raises:
        AccessTokenRequiredError: no token
        InvalidTokenError: signature/expiry failure
        AuthError: token valid but user no longer exists
        AccountInactiveError: user inactive and allow_inactive is False
    """
    if not access_token:
        raise AccessTokenRequiredError()

    payload = verify_access(access_token)
    user = get_user_by_id(db, subject_id(payload))
    if not user:
        logger.warning(f"User not found for token: {payload.get('sub')}")
        raise AuthError("User not found")

    if not allow_inactive and not user.is_active:
        raise AccountInactiveError()

    return user


def authorize_subscription(user: User, now: datetime | None = None) -> User:
    """
    Subscription gate for paid routes. Admins always pass.

    Raises:
        SubscriptionRequiredError: inactive, or expires_at is in the past
    """
    if user.is_admin:
        return user

    if not user.is_active:
        raise SubscriptionRequiredError("Account inactive. Subscription required.")

    now = as_utc(now) or utcnow()
    expires_at = as_utc(user.expires_at)
    if expires_at is not None and expires_at < now:
        raise SubscriptionRequiredError("Subscription expired. Please renew.")

    return user
