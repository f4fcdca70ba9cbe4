"""
Admin service.

Read-only views over all users and the audit trail. Authorization is enforced
by the controller's ``require_admin`` decorator.
"""

from typing import Any, Dict, Optional

from enums import ErrorCode, UserRole
from models import AuditLog, User
from pagination import Cursor, build_page
from repositories import admin_repo, users_repo
from security import BusinessError


def list_users(cursor: Optional[Cursor], size: int) -> Dict[str, Any]:
    rows = users_repo.list_users(cursor, size)
    return build_page(rows, size, lambda row: Cursor(row.id, row.created_at)).to_dict(
        User.to_dict
    )


def list_audit_logs(
    cursor: Optional[Cursor],
    size: int,
    *,
    user_id: Optional[int] = None,
    event_type: Optional[str] = None,
) -> Dict[str, Any]:
    rows = admin_repo.list_audit_logs(cursor, size, user_id=user_id, event_type=event_type)
    return build_page(rows, size, lambda row: Cursor(row.id, row.timestamp)).to_dict(
        AuditLog.to_dict
    )


def set_role(email: str, role: UserRole) -> Dict[str, Any]:
    """Change a user's role; used by the management CLI."""
    user = users_repo.get_user_by_email(email.strip().lower())
    if user is None:
        raise BusinessError(ErrorCode.USER_NOT_FOUND)
    user = users_repo.update_user(user.id, {"role": role})
    return user.to_dict()
