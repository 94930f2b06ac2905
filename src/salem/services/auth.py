"""Registration and login against argon2 password hashes."""

from __future__ import annotations

from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlmodel import Session, select

from ..errors import ValidationError
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.user import USERNAME_MAX_LENGTH, User, normalize_username

logger = get_logger(__name__)

_hasher = PasswordHasher()
MIN_PASSWORD_LENGTH = 6


def _credential_errors(username: str, password: str) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    if not username:
        errors["username"] = ["Username is required."]
    elif len(username) > USERNAME_MAX_LENGTH:
        errors["username"] = [f"Username must be at most {USERNAME_MAX_LENGTH} characters."]
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors["password"] = [f"Password must be at least {MIN_PASSWORD_LENGTH} characters."]
    return errors


def _find_by_username(session: Session, username: str) -> Optional[User]:
    return session.exec(select(User).where(User.username == username)).first()


def _detached(session: Session, user: Optional[User]) -> Optional[User]:
    if user is not None:
        session.expunge(user)
    return user


def get_user(user_id: int, session_factory: SessionFactory) -> Optional[User]:
    with session_factory() as session:
        return _detached(session, session.get(User, user_id))


def create_user(
    *,
    username: str,
    password: str,
    session_factory: SessionFactory,
) -> User:
    """Register a user.

    Raises:
        ValidationError: bad credentials or a taken username
    """
    username = normalize_username(username)
    errors = _credential_errors(username, password)
    if errors:
        raise ValidationError(errors)

    with session_factory() as session:
        if _find_by_username(session, username) is not None:
            raise ValidationError({"username": ["Username already exists."]})
        user = User(username=username, password_hash=_hasher.hash(password))
        session.add(user)
        session.commit()
        session.refresh(user)
        _detached(session, user)

    logger.info("User created", extra={"user_id": user.id})
    return user


def authenticate(
    *,
    username: str,
    password: str,
    session_factory: SessionFactory,
) -> Optional[User]:
    """Return the user for a correct username/password pair, else ``None``.

    Hashes made with outdated argon2 parameters are upgraded on the way.
    """
    username = normalize_username(username)
    if not username:
        return None
    with session_factory() as session:
        user = _find_by_username(session, username)
        if user is None:
            return None
        try:
            _hasher.verify(user.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            logger.info("Login rejected", extra={"username": username})
            return None

        rehashed = _hasher.hash(password) if _hasher.check_needs_rehash(user.password_hash) else None
        user.record_login(rehashed)
        session.add(user)
        session.commit()
        session.refresh(user)
        return _detached(session, user)
