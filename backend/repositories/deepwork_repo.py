"""Repository managing deep-work session persistence."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select

from db_utils import transactional_session
from extensions import db
from models import DeepWorkSession
from pagination import Cursor

from .base import ConflictError, NotFoundError, fetch_window, require_owned


def get_open_session(user_id: int) -> Optional[DeepWorkSession]:
    """Return the session the user has not ended yet, if any."""
    stmt = (
        select(DeepWorkSession)
        .where(DeepWorkSession.user_id == user_id, DeepWorkSession.end_time.is_(None))
        .order_by(DeepWorkSession.start_time.desc())
        .limit(1)
    )
    return db.session.execute(stmt).scalar_one_or_none()


def create_session(user_id: int, start_time: datetime) -> DeepWorkSession:
    """Open a new session; ConflictError when one is already running."""
    if get_open_session(user_id) is not None:
        raise ConflictError("A deep work session is already in progress")
    session_row = DeepWorkSession(user_id=user_id, start_time=start_time)
    with transactional_session() as session:
        session.add(session_row)
    return session_row


def get_session(session_id: int, user_id: int) -> DeepWorkSession:
    return require_owned(DeepWorkSession, session_id, user_id)


def end_session(session_id: int, user_id: int, end_time: datetime) -> DeepWorkSession:
    """Close an open session; ConflictError when it already ended."""
    with transactional_session():
        session_row = require_owned(DeepWorkSession, session_id, user_id)
        if session_row.end_time is not None:
            raise ConflictError("Deep work session already ended")
        session_row.end_time = end_time
    return session_row


def record_distraction(session_id: int, user_id: int, *, overridden: bool) -> DeepWorkSession:
    """Count a blocked launch, and the override when the user forced it through."""
    with transactional_session():
        session_row = require_owned(DeepWorkSession, session_id, user_id)
        if session_row.end_time is not None:
            raise ConflictError("Deep work session already ended")
        session_row.distraction_count += 1
        if overridden:
            session_row.distraction_override_count += 1
    return session_row


def delete_session(session_id: int, user_id: int) -> None:
    with transactional_session() as session:
        session.delete(require_owned(DeepWorkSession, session_id, user_id))


def list_sessions(user_id: int, cursor: Optional[Cursor], size: int) -> List[DeepWorkSession]:
    stmt = select(DeepWorkSession).where(DeepWorkSession.user_id == user_id)
    return fetch_window(stmt, DeepWorkSession.id, DeepWorkSession.start_time, cursor, size)


def list_completed_between(user_id: int, start: datetime, end: datetime) -> List[DeepWorkSession]:
    """Ended sessions whose start falls in ``[start, end)``."""
    stmt = (
        select(DeepWorkSession)
        .where(
            DeepWorkSession.user_id == user_id,
            DeepWorkSession.end_time.is_not(None),
            DeepWorkSession.start_time >= start,
            DeepWorkSession.start_time < end,
        )
        .order_by(DeepWorkSession.start_time.asc(), DeepWorkSession.id.asc())
    )
    return list(db.session.execute(stmt).scalars().all())
