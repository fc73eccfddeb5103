"""
Credential & session use cases: signup, login, refresh-token rotation, logout.

Works directly with the ORM. Each user holds a single refresh token; issuing
a new one overwrites the stored value, which is what revokes the previous
token. Concurrent refreshes from one client are last-writer-wins.
"""
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.auth import hash_password, verify_password, get_user_by_email, get_user_by_id, normalize_email
from app.application.errors import (
    DuplicateEmailError, InvalidCredentialsError, InvalidTokenError,
    MissingTokenError, TokenMismatchError,
)
from app.application.tokens import sign_access, sign_refresh, verify_refresh, subject_id
from app.infrastructure.db.models import User, ROLE_USER


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class LoginResult:
    user: User
    tokens: TokenPair


def issue_tokens(db: Session, user: User) -> TokenPair:
    """Mint a new access/refresh pair and store the refresh token on the user"""
    pair = TokenPair(
        access_token=sign_access(user.id, user.role),
        refresh_token=sign_refresh(user.id),
    )
    user.refresh_token = pair.refresh_token
    db.commit()
    return pair


class SignupUseCase:
    """Use case: register a new (inactive) user"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, name: str, email: str, password: str) -> User:
        """
        Create a user

        New users always start with is_active=False; an admin activates the
        subscription separately.

        Raises:
            DuplicateEmailError: email already registered
        """
        email = normalize_email(email)
        if get_user_by_email(self.db, email):
            raise DuplicateEmailError()

        user = User(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
            role=ROLE_USER,
            is_active=False,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User registered: {user.email} (id={user.id})")
        return user


class LoginUseCase:
    """Use case: check credentials and open a session"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, email: str, password: str) -> LoginResult:
        """
        Raises:
            InvalidCredentialsError: unknown email or wrong password (same error)
        """
        user = get_user_by_email(self.db, email)
        if not user:
            logger.warning(f"Failed login attempt: unknown email {email!r}")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt: invalid password for user id={user.id}")
            raise InvalidCredentialsError()

        tokens = issue_tokens(self.db, user)
        logger.info(f"Successful login: {user.email} (role={user.role}, active={user.is_active})")
        return LoginResult(user=user, tokens=tokens)


class RefreshSessionUseCase:
    """Use case: exchange the current refresh token for a new pair"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, refresh_token: str | None) -> TokenPair:
        """
        Raises:
            MissingTokenError: no refresh cookie
            InvalidTokenError: bad signature, expired, or user gone
            TokenMismatchError: token was superseded by a later rotation
        """
        if not refresh_token:
            raise MissingTokenError()

        payload = verify_refresh(refresh_token)
        user = get_user_by_id(self.db, subject_id(payload))
        if not user:
            raise InvalidTokenError()

        if user.refresh_token != refresh_token:
            logger.warning(f"Refresh token reuse detected for user id={user.id}")
            raise TokenMismatchError()

        tokens = issue_tokens(self.db, user)
        logger.info(f"Token refreshed for user: {user.email}")
        return tokens


class LogoutUseCase:
    """Use case: forget the stored refresh token (best effort, never raises)"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, refresh_token: str | None) -> User | None:
        if not refresh_token:
            return None

        try:
            payload = verify_refresh(refresh_token)
            user = get_user_by_id(self.db, subject_id(payload))
        except InvalidTokenError:
            logger.warning("Invalid refresh token during logout")
            return None

        if user:
            user.refresh_token = None
            self.db.commit()
            logger.info(f"User logged out: {user.email}")
        return user
