"""
FastAPI dependencies (DB session, authentication, subscription, admin)
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.infrastructure.db.session import get_db as _get_db
from app.infrastructure.db.models import User
from app.application.access import authenticate, authorize_subscription
from app.application.errors import ForbiddenError


# Re-export get_db so routers import everything from deps
get_db = _get_db

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def read_access_token(request: Request) -> str | None:
    """accessToken cookie first, then Authorization: Bearer <token>"""
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Strict authentication: inactive accounts get 401

    Usage:
        @router.get("/profile")
        def get_profile(user: User = Depends(get_current_user)):
            ...
    """
    user = authenticate(db, read_access_token(request))
    request.state.user = user
    return user


def get_current_user_allow_inactive(request: Request, db: Session = Depends(get_db)) -> User:
    """Authentication only; lets inactive users through (GET /auth/me)"""
    user = authenticate(db, read_access_token(request), allow_inactive=True)
    request.state.user = user
    return user


def require_subscription(user: User = Depends(get_current_user_allow_inactive)) -> User:
    """
    Authentication + subscription gate

    Inactive or expired non-admins get 403 SUBSCRIPTION_REQUIRED rather than
    a 401, so the frontend can send them to the subscription page.
    """
    return authorize_subscription(user)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise ForbiddenError()
    return user
