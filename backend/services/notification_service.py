"""Notification service."""

from typing import Any, Dict, Optional, Tuple

from audit import log_event
from enums import ErrorCode
from models import Notification
from pagination import Cursor, build_page
from repositories import notifications_repo
from schemas import NotificationCreatePayload
from security import BusinessError, validate_payload


def _cursor_of(row: Notification) -> Cursor:
    return Cursor(row.id, row.created_at)


def create_notification(user_id: int, payload: Dict[str, Any]) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(NotificationCreatePayload, payload)
    row = notifications_repo.create_notification(user_id, data.category, data.content)
    return row.to_dict(), 201


def list_notifications(
    user_id: int, cursor: Optional[Cursor], size: int, *, unread_only: bool = False
) -> Dict[str, Any]:
    rows = notifications_repo.list_notifications(user_id, cursor, size, unread_only=unread_only)
    return build_page(rows, size, _cursor_of).to_dict(Notification.to_dict)


def unread_count(user_id: int) -> Dict[str, Any]:
    return {"unreadCount": notifications_repo.count_unread(user_id)}


def check(user_id: int, notification_id: int) -> Tuple[Dict[str, Any], int]:
    try:
        row = notifications_repo.mark_checked(notification_id, user_id)
    except notifications_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)
    return row.to_dict(), 200


def check_all(user_id: int) -> Tuple[Dict[str, Any], int]:
    updated = notifications_repo.mark_all_checked(user_id)
    if updated:
        log_event(
            "notification.check_all",
            "Notifications marked as read",
            user_id=user_id,
            context={"updated": updated},
        )
    return {"updated": updated}, 200


def delete_notification(user_id: int, notification_id: int) -> Tuple[Dict[str, Any], int]:
    try:
        notifications_repo.delete_notification(notification_id, user_id)
    except notifications_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)
    return {"message": "Notification deleted"}, 200
