"""Repository handling user data persistence and retrieval."""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from db_utils import transactional_session
from enums import UserRole
from extensions import db
from models import User
from pagination import Cursor

from .base import ConflictError, fetch_window

_UPDATABLE_FIELDS = {"name", "password_hash", "role"}


def create_user(
    email: str,
    password_hash: str,
    name: str,
    role: UserRole = UserRole.ROLE_USER,
) -> User:
    """Insert a new user row, raising ConflictError when the email is taken."""
    user = User(email=email, password_hash=password_hash, name=name, role=role)
    try:
        with transactional_session() as session:
            session.add(user)
            session.flush()
    except IntegrityError:
        raise ConflictError(f"email {email} already registered")
    return user


def email_exists(email: str) -> bool:
    stmt = select(func.count()).select_from(User).where(User.email == email)
    return bool(db.session.execute(stmt).scalar_one())


def get_user_by_email(email: str) -> Optional[User]:
    """Fetch a user by email, returning None when absent."""
    return db.session.execute(select(User).where(User.email == email)).scalar_one_or_none()


def get_user_by_id(user_id: int) -> Optional[User]:
    """Fetch a user by id, returning None when absent."""
    return db.session.get(User, user_id)


def update_user(user_id: int, updates: Dict[str, Any]) -> Optional[User]:
    """Apply whitelisted field updates and return the refreshed user."""
    unknown = set(updates) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unsupported user fields: {', '.join(sorted(unknown))}")

    with transactional_session() as session:
        user = session.get(User, user_id)
        if user is None:
            return None
        for key, value in updates.items():
            setattr(user, key, value)
    return user


def delete_user(user_id: int) -> int:
    """Delete a user and everything it owns; returns the affected row count."""
    with transactional_session() as session:
        user = session.get(User, user_id)
        if user is None:
            return 0
        session.delete(user)
    return 1


def list_users(cursor: Optional[Cursor], size: int) -> List[User]:
    """List users newest first, fetching one row past the page."""
    return fetch_window(select(User), User.id, User.created_at, cursor, size)
