from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import AuditLog

audit_logger = structlog.get_logger("momentum.audit")


def _normalize_level(level: str) -> str:
    return (level or "info").strip().lower() or "info"


def _safe_context(context: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not context:
        return {}
    safe: Dict[str, Any] = {}
    for key, value in context.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            safe[key] = value
        elif isinstance(value, dict):
            safe[key] = _safe_context(value)
        else:
            safe[key] = str(value)
    return safe


def _persist_log(
    *,
    timestamp: datetime,
    user_id: Optional[int],
    event_type: str,
    message: str,
    level: str,
    context: Dict[str, Any],
) -> None:
    # Callers log after their own transaction has committed.
    session = db.session
    try:
        session.add(
            AuditLog(
                timestamp=timestamp,
                user_id=user_id,
                event_type=event_type,
                message=message,
                context=context,
                level=level,
            )
        )
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        audit_logger.error(
            "audit_log.persist_failed",
            event_type=event_type,
            user_id=user_id,
            error=str(exc),
        )


def log_event(
    event_type: str,
    message: str,
    *,
    user_id: Optional[int] = None,
    level: str = "info",
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """Persist the event and mirror it to structlog."""
    normalized_level = _normalize_level(level)
    normalized_context = _safe_context(context)
    timestamp = datetime.now(timezone.utc).replace(tzinfo=None)

    log_method = getattr(audit_logger, normalized_level, audit_logger.info)
    log_method(
        "audit_event",
        event_type=event_type,
        user_id=user_id,
        message=message,
        context=normalized_context,
    )

    _persist_log(
        timestamp=timestamp,
        user_id=user_id,
        event_type=event_type,
        message=message,
        level=normalized_level,
        context=normalized_context,
    )
