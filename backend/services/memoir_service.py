"""Memoir service: short daily reflections scored for satisfaction and focus."""

from typing import Any, Dict, Optional, Tuple

from audit import log_event
from enums import ErrorCode
from models import Memoir
from pagination import Cursor, build_page
from repositories import memoirs_repo
from schemas import MemoirCreatePayload, MemoirUpdatePayload
from security import BusinessError, ValidationError, validate_payload


def _cursor_of(row: Memoir) -> Cursor:
    return Cursor(row.id, row.created_at)


def create_memoir(user_id: int, payload: Dict[str, Any]) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(MemoirCreatePayload, payload)
    row = memoirs_repo.create_memoir(user_id, data.model_dump())
    log_event("memoir.create", "Memoir created", user_id=user_id, context={"memoir_id": row.id})
    return row.to_dict(), 201


def get_memoir(user_id: int, memoir_id: int) -> Dict[str, Any]:
    try:
        return memoirs_repo.get_memoir(memoir_id, user_id).to_dict()
    except memoirs_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)


def update_memoir(
    user_id: int, memoir_id: int, payload: Dict[str, Any]
) -> Tuple[Dict[str, Any], int]:
    data = validate_payload(MemoirUpdatePayload, payload)
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationError("No fields to update")
    for field in ("satisfaction", "concentration"):
        if field in updates and updates[field] is None:
            raise ValidationError(f"{field} must not be null", details={"field": field})

    try:
        row = memoirs_repo.update_memoir(memoir_id, user_id, updates)
    except memoirs_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)
    log_event(
        "memoir.update",
        "Memoir updated",
        user_id=user_id,
        context={"memoir_id": memoir_id, "fields": ",".join(sorted(updates))},
    )
    return row.to_dict(), 200


def delete_memoir(user_id: int, memoir_id: int) -> Tuple[Dict[str, Any], int]:
    try:
        memoirs_repo.delete_memoir(memoir_id, user_id)
    except memoirs_repo.NotFoundError:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND)
    log_event("memoir.delete", "Memoir deleted", user_id=user_id, context={"memoir_id": memoir_id})
    return {"message": "Memoir deleted"}, 200


def list_memoirs(user_id: int, cursor: Optional[Cursor], size: int) -> Dict[str, Any]:
    rows = memoirs_repo.list_memoirs(user_id, cursor, size)
    return build_page(rows, size, _cursor_of).to_dict(Memoir.to_dict)
