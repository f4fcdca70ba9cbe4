"""Shared repository errors and keyset pagination helpers."""

from typing import Any, List, Optional, Type, TypeVar

from sqlalchemy import Select, and_, or_, select

from extensions import db
from pagination import Cursor

ModelT = TypeVar("ModelT")


class RepositoryError(Exception):
    """Base repository error."""


class NotFoundError(RepositoryError):
    """Raised when an entity is not found."""


class ConflictError(RepositoryError):
    """Raised when an action conflicts with current state."""


def apply_cursor(stmt: Select, id_column: Any, ts_column: Any, cursor: Optional[Cursor]) -> Select:
    """Order newest first and resume strictly after ``cursor`` when given."""
    stmt = stmt.order_by(ts_column.desc(), id_column.desc())
    if cursor is None:
        return stmt
    return stmt.where(
        or_(
            ts_column < cursor.last_timestamp,
            and_(ts_column == cursor.last_timestamp, id_column < cursor.last_id),
        )
    )


def fetch_window(
    stmt: Select, id_column: Any, ts_column: Any, cursor: Optional[Cursor], size: int
) -> List[Any]:
    """Fetch ``size + 1`` rows so the page builder can tell if more exist."""
    stmt = apply_cursor(stmt, id_column, ts_column, cursor).limit(size + 1)
    return list(db.session.execute(stmt).scalars().all())


def get_owned(model: Type[ModelT], object_id: int, user_id: int) -> Optional[ModelT]:
    stmt = select(model).where(model.id == object_id, model.user_id == user_id)
    return db.session.execute(stmt).scalar_one_or_none()


def require_owned(model: Type[ModelT], object_id: int, user_id: int) -> ModelT:
    instance = get_owned(model, object_id, user_id)
    if instance is None:
        raise NotFoundError(f"{model.__name__} {object_id} not found")
    return instance
