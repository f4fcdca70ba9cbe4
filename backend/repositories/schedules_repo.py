"""Repository managing schedule persistence and range queries."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from db_utils import transactional_session
from enums import ScheduleCategory, ScheduleStatus
from extensions import db
from models import Schedule
from pagination import Cursor

from .base import NotFoundError, fetch_window, require_owned

_UPDATABLE_FIELDS = {"title", "start_at", "end_at", "notify_minutes", "category", "status", "memo"}


def create_schedule(user_id: int, fields: Dict[str, Any]) -> Schedule:
    schedule = Schedule(user_id=user_id, **fields)
    with transactional_session() as session:
        session.add(schedule)
    return schedule


def get_schedule(schedule_id: int, user_id: int) -> Schedule:
    return require_owned(Schedule, schedule_id, user_id)


def update_schedule(schedule_id: int, user_id: int, updates: Dict[str, Any]) -> Schedule:
    """Apply whitelisted updates to an owned schedule."""
    unknown = set(updates) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unsupported schedule fields: {', '.join(sorted(unknown))}")

    with transactional_session():
        schedule = require_owned(Schedule, schedule_id, user_id)
        for key, value in updates.items():
            setattr(schedule, key, value)
    return schedule


def delete_schedule(schedule_id: int, user_id: int) -> None:
    with transactional_session() as session:
        session.delete(require_owned(Schedule, schedule_id, user_id))


def list_schedules(
    user_id: int,
    cursor: Optional[Cursor],
    size: int,
    *,
    start_from: Optional[datetime] = None,
    start_to: Optional[datetime] = None,
    status: Optional[ScheduleStatus] = None,
    category: Optional[ScheduleCategory] = None,
) -> List[Schedule]:
    """List schedules by start time, newest first, with optional filters."""
    stmt = select(Schedule).where(Schedule.user_id == user_id)
    if start_from is not None:
        stmt = stmt.where(Schedule.start_at >= start_from)
    if start_to is not None:
        stmt = stmt.where(Schedule.start_at < start_to)
    if status is not None:
        stmt = stmt.where(Schedule.status == status)
    if category is not None:
        stmt = stmt.where(Schedule.category == category)
    return fetch_window(stmt, Schedule.id, Schedule.start_at, cursor, size)


def list_starting_between(user_id: int, start: datetime, end: datetime) -> List[Schedule]:
    """Schedules whose ``start_at`` falls in ``[start, end)``."""
    stmt = (
        select(Schedule)
        .where(
            Schedule.user_id == user_id,
            Schedule.start_at >= start,
            Schedule.start_at < end,
        )
        .order_by(Schedule.start_at.asc(), Schedule.id.asc())
    )
    return list(db.session.execute(stmt).scalars().all())
