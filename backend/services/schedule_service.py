"""
Schedule service.

Calendar-like planned blocks. Keeps the start/end ordering valid across
partial updates and exposes the derived notification time.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from audit import log_event
from enums import ErrorCode, ScheduleCategory, ScheduleStatus
from models import Schedule
from pagination import Cursor, build_page
from repositories import schedules_repo
from schemas import ScheduleCreatePayload, ScheduleStatusPayload, ScheduleUpdatePayload
from security import BusinessError, ValidationError, validate_payload


def _cursor_of(row: Schedule) -> Cursor:
    return Cursor(row.id, row.start_at)


def _get_owned(user_id: int, schedule_id: int) -> Schedule:
    try:
        return schedules_repo.get_schedule(schedule_id, user_id)
    except schedules_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)


def create_schedule(user_id: int, payload: Dict[str, Any]) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(ScheduleCreatePayload, payload)
    row = schedules_repo.create_schedule(user_id, data.model_dump())
    log_event(
        "schedule.create",
        "Schedule created",
        user_id=user_id,
        context={"schedule_id": row.id, "category": row.category.value},
    )
    return row.to_dict(), 201


def get_schedule(user_id: int, schedule_id: int) -> Dict[str, Any]:
    return _get_owned(user_id, schedule_id).to_dict()


def update_schedule(
    user_id: int, schedule_id: int, payload: Dict[str, Any]
) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(ScheduleUpdatePayload, payload)
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationError("No fields to update")
    for field in ("title", "start_at", "end_at", "notify_minutes", "category"):
        if field in updates and updates[field] is None:
            raise ValidationError(f"{field} must not be null", details={"field": field})

    current = _get_owned(user_id, schedule_id)
    start_at = updates.get("start_at", current.start_at)
    end_at = updates.get("end_at", current.end_at)
    if end_at <= start_at:
        raise ValidationError("endAt must be after startAt", details={"field": "endAt"})

    try:
        row = schedules_repo.update_schedule(schedule_id, user_id, updates)
    except schedules_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)

    log_event(
        "schedule.update",
        "Schedule updated",
        user_id=user_id,
        context={"schedule_id": schedule_id, "fields": ",".join(sorted(updates))},
    )
    return row.to_dict(), 200


def change_status(
    user_id: int, schedule_id: int, payload: Dict[str, Any]
) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(ScheduleStatusPayload, payload)
    try:
        row = schedules_repo.update_schedule(schedule_id, user_id, {"status": data.status})
    except schedules_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)
    log_event(
        "schedule.status",
        "Schedule status changed",
        user_id=user_id,
        context={"schedule_id": schedule_id, "status": data.status.value},
    )
    return row.to_dict(), 200


def delete_schedule(user_id: int, schedule_id: int) -> Tuple[Dict[str, Any], int]:
    try:
        schedules_repo.delete_schedule(schedule_id, user_id)
    except schedules_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)
    log_event(
        "schedule.delete",
        "Schedule deleted",
        user_id=user_id,
        context={"schedule_id": schedule_id},
    )
    return {"message": "Schedule deleted"}, 200


def list_schedules(
    user_id: int,
    cursor: Optional[Cursor],
    size: int,
    *,
    start_from: Optional[datetime] = None,
    start_to: Optional[datetime] = None,
    status: Optional[ScheduleStatus] = None,
    category: Optional[ScheduleCategory] = None,
) -> Dict[str, Any]:
    if start_from is not None and start_to is not None and start_to <= start_from:
        raise ValidationError("'to' must be after 'from'", details={"field": "to"})
    rows = schedules_repo.list_schedules(
        user_id,
        cursor,
        size,
        start_from=start_from,
        start_to=start_to,
        status=status,
        category=category,
    )
    return build_page(rows, size, _cursor_of).to_dict(Schedule.to_dict)
