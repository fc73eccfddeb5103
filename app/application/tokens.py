"""
JWT helpers: sign and verify access/refresh tokens.

Access and refresh tokens are signed with different secrets, so one can
never be replayed as the other. Every token carries a random jti: two tokens
minted for the same user within one second must still differ, otherwise
rotation would hand back the token it just revoked.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from app.config import Settings, get_settings
from app.application.errors import InvalidTokenError


TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"


def _encode(claims: Dict[str, Any], secret: str, lifetime, algorithm: str) -> str:
    now = datetime.now(timezone.utc)
    payload = dict(claims)
    payload.update({
        "jti": uuid.uuid4().hex,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    })
    return jwt.encode(payload, secret, algorithm=algorithm)


def _decode(token: str, secret: str, expected_type: str, algorithm: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as e:
        raise InvalidTokenError() from e

    if payload.get("type") != expected_type or not payload.get("sub"):
        raise InvalidTokenError("Invalid or expired token")
    return payload


def sign_access(user_id: int, role: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    return _encode(
        {"sub": str(user_id), "role": role, "type": TOKEN_TYPE_ACCESS},
        settings.JWT_ACCESS_SECRET,
        settings.access_token_lifetime,
        settings.JWT_ALGORITHM,
    )


def sign_refresh(user_id: int, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    return _encode(
        {"sub": str(user_id), "type": TOKEN_TYPE_REFRESH},
        settings.JWT_REFRESH_SECRET,
        settings.refresh_token_lifetime,
        settings.JWT_ALGORITHM,
    )


def verify_access(token: str, settings: Settings | None = None) -> Dict[str, Any]:
    """
    Verify an access token

    Raises:
        InvalidTokenError: bad signature, expired, or not an access token
    """
    settings = settings or get_settings()
    return _decode(token, settings.JWT_ACCESS_SECRET, TOKEN_TYPE_ACCESS, settings.JWT_ALGORITHM)


def verify_refresh(token: str, settings: Settings | None = None) -> Dict[str, Any]:
    """
    Verify a refresh token

    Raises:
        InvalidTokenError: bad signature, expired, or not a refresh token
    """
    settings = settings or get_settings()
    return _decode(token, settings.JWT_REFRESH_SECRET, TOKEN_TYPE_REFRESH, settings.JWT_ALGORITHM)


def subject_id(payload: Dict[str, Any]) -> int:
    """User id from the sub claim"""
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError("Invalid or expired token") from e
