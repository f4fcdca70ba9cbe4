"""Repository managing memoir persistence."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from db_utils import transactional_session
from extensions import db
from models import Memoir
from pagination import Cursor

from .base import NotFoundError, fetch_window, require_owned

_UPDATABLE_FIELDS = {"satisfaction", "concentration", "achievement", "improvement", "memo"}


def create_memoir(user_id: int, fields: Dict[str, Any]) -> Memoir:
    memoir = Memoir(user_id=user_id, **fields)
    with transactional_session() as session:
        session.add(memoir)
    return memoir


def get_memoir(memoir_id: int, user_id: int) -> Memoir:
    return require_owned(Memoir, memoir_id, user_id)


def update_memoir(memoir_id: int, user_id: int, updates: Dict[str, Any]) -> Memoir:
    unknown = set(updates) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unsupported memoir fields: {', '.join(sorted(unknown))}")

    with transactional_session():
        memoir = require_owned(Memoir, memoir_id, user_id)
        for key, value in updates.items():
            setattr(memoir, key, value)
    return memoir


def delete_memoir(memoir_id: int, user_id: int) -> None:
    with transactional_session() as session:
        session.delete(require_owned(Memoir, memoir_id, user_id))


def list_memoirs(user_id: int, cursor: Optional[Cursor], size: int) -> List[Memoir]:
    stmt = select(Memoir).where(Memoir.user_id == user_id)
    return fetch_window(stmt, Memoir.id, Memoir.created_at, cursor, size)


def list_created_between(user_id: int, start: datetime, end: datetime) -> List[Memoir]:
    stmt = (
        select(Memoir)
        .where(
            Memoir.user_id == user_id,
            Memoir.created_at >= start,
            Memoir.created_at < end,
        )
        .order_by(Memoir.created_at.asc(), Memoir.id.asc())
    )
    return list(db.session.execute(stmt).scalars().all())
