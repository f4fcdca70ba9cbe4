"""Repository for administrative read queries.

User listing lives in users_repo; audit trail queries live here.
"""

from typing import List, Optional

from sqlalchemy import select

from models import AuditLog
from pagination import Cursor

from .base import fetch_window


def list_audit_logs(
    cursor: Optional[Cursor],
    size: int,
    *,
    user_id: Optional[int] = None,
    event_type: Optional[str] = None,
) -> List[AuditLog]:
    """List audit log rows newest first, optionally filtered."""
    stmt = select(AuditLog)
    if user_id is not None:
        stmt = stmt.where(AuditLog.user_id == user_id)
    if event_type:
        stmt = stmt.where(AuditLog.event_type == event_type)
    return fetch_window(stmt, AuditLog.id, AuditLog.timestamp, cursor, size)
