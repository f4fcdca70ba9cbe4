from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional, Tuple, Type, TypeVar

from flask import current_app, g, request

from infra.token_provider import TokenProvider
from pagination import Cursor, parse_page_size
from security import ValidationError

EnumT = TypeVar("EnumT", bound=Enum)


def get_token_provider() -> TokenProvider:
    """Build the provider from current config so tests can swap the secret."""
    return TokenProvider.from_config(current_app.config)


def current_user_id() -> Optional[int]:
    user = getattr(g, "current_user", None)
    return user["id"] if user else None


def json_body() -> Any:
    """Decoded JSON body, or None when the body is missing or malformed."""
    return request.get_json(silent=True)


def parse_cursor_params() -> Tuple[Optional[Cursor], int]:
    """Read ``cursor`` and ``size``; a malformed cursor restarts from the top."""
    cursor = Cursor.decode(request.args.get("cursor"))
    size = parse_page_size(request.args.get("size"))
    return cursor, size


def query_flag(name: str) -> bool:
    value = request.args.get(name)
    if value is None:
        return False
    return value.strip().lower() in ("1", "true", "yes")


def parse_date_arg(name: str, *, required: bool = True) -> Optional[date]:
    raw = request.args.get(name)
    if not raw:
        if required:
            raise ValidationError(f"{name} is required", details={"field": name})
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{name} must be in YYYY-MM-DD format", details={"field": name})


def parse_datetime_arg(name: str) -> Optional[datetime]:
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an ISO-8601 date-time", details={"field": name})
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_int_arg(name: str) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        raise ValidationError(f"{name} is required", details={"field": name})
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer", details={"field": name})


def parse_enum_arg(name: str, enum_cls: Type[EnumT]) -> Optional[EnumT]:
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return enum_cls(raw.strip().upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"{name} must be one of: {allowed}", details={"field": name})
