"""Repository managing user notifications."""

from typing import List, Optional

from sqlalchemy import func, select, update

from db_utils import transactional_session
from enums import NotificationCategory
from extensions import db
from models import Notification
from pagination import Cursor

from .base import NotFoundError, fetch_window, require_owned


def create_notification(
    user_id: int, category: NotificationCategory, content: Optional[str]
) -> Notification:
    notification = Notification(user_id=user_id, category=category, content=content)
    with transactional_session() as session:
        session.add(notification)
    return notification


def list_notifications(
    user_id: int, cursor: Optional[Cursor], size: int, *, unread_only: bool = False
) -> List[Notification]:
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_check.is_(False))
    return fetch_window(stmt, Notification.id, Notification.created_at, cursor, size)


def count_unread(user_id: int) -> int:
    stmt = (
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.is_check.is_(False))
    )
    return int(db.session.execute(stmt).scalar_one())


def mark_checked(notification_id: int, user_id: int) -> Notification:
    with transactional_session():
        notification = require_owned(Notification, notification_id, user_id)
        notification.is_check = True
    return notification


def mark_all_checked(user_id: int) -> int:
    """Mark every unread notification as read; returns how many changed."""
    stmt = (
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_check.is_(False))
        .values(is_check=True)
        .execution_options(synchronize_session=False)
    )
    with transactional_session() as session:
        result = session.execute(stmt)
    return int(result.rowcount or 0)


def delete_notification(notification_id: int, user_id: int) -> None:
    with transactional_session() as session:
        session.delete(require_owned(Notification, notification_id, user_id))
