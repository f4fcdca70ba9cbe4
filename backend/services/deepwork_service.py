"""
Deep work service.

Starts, ends and tracks focus sessions. A user has at most one open session
at a time; distractions can only be recorded while a session is running.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from audit import log_event
from enums import ErrorCode
from models import DeepWorkSession
from pagination import Cursor, build_page
from repositories import deepwork_repo
from schemas import DeepWorkEndPayload, DeepWorkStartPayload, DistractionPayload
from security import BusinessError, ValidationError, validate_payload


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _cursor_of(row: DeepWorkSession) -> Cursor:
    return Cursor(row.id, row.start_time)


def start_session(user_id: int, payload: Optional[Dict[str, Any]]) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(DeepWorkStartPayload, payload or {})
    start_time = data.start_time or _now()

    try:
        row = deepwork_repo.create_session(user_id, start_time)
    except deepwork_repo.ConflictError as exc:
        raise BusinessError(ErrorCode.RESOURCE_ALREADY_EXISTS, str(exc))

    log_event(
        "deep_work.start",
        "Deep work session started",
        user_id=user_id,
        context={"session_id": row.id},
    )
    return row.to_dict(), 201


def end_session(
    user_id: int, session_id: int, payload: Optional[Dict[str, Any]]
) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(DeepWorkEndPayload, payload or {})
    end_time = data.end_time or _now()

    try:
        current = deepwork_repo.get_session(session_id, user_id)
    except deepwork_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)
    if end_time < current.start_time:
        raise ValidationError("endTime must not be before startTime", details={"field": "endTime"})

    try:
        row = deepwork_repo.end_session(session_id, user_id, end_time)
    except deepwork_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)
    except deepwork_repo.ConflictError as exc:
        raise ValidationError(str(exc))

    log_event(
        "deep_work.end",
        "Deep work session ended",
        user_id=user_id,
        context={"session_id": row.id, "minutes": row.duration_minutes},
    )
    return row.to_dict(), 200


def record_distraction(
    user_id: int, session_id: int, payload: Optional[Dict[str, Any]]
) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(DistractionPayload, payload or {})
    try:
        row = deepwork_repo.record_distraction(session_id, user_id, overridden=data.overridden)
    except deepwork_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)
    except deepwork_repo.ConflictError as exc:
        raise ValidationError(str(exc))
    return row.to_dict(), 200


def get_session(user_id: int, session_id: int) -> Dict[str, Any]:
    try:
        return deepwork_repo.get_session(session_id, user_id).to_dict()
    except deepwork_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)


def delete_session(user_id: int, session_id: int) -> Tuple[Dict[str, Any], int]:
    try:
        deepwork_repo.delete_session(session_id, user_id)
    except deepwork_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)
    log_event(
        "deep_work.delete",
        "Deep work session deleted",
        user_id=user_id,
        context={"session_id": session_id},
    )
    return {"message": "Deep work session deleted"}, 200


def list_sessions(user_id: int, cursor: Optional[Cursor], size: int) -> Dict[str, Any]:
    rows = deepwork_repo.list_sessions(user_id, cursor, size)
    return build_page(rows, size, _cursor_of).to_dict(DeepWorkSession.to_dict)
