from functools import wraps
from typing import Any, Dict, Optional, Type, TypeVar

from flask import g, jsonify
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from enums import ErrorCode, UserRole

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class BusinessError(Exception):
    """Recognised domain failure tagged with an :class:`ErrorCode`."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message or error_code.message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.error_code.code

    @property
    def status(self) -> int:
        return self.error_code.http_status


class ValidationError(BusinessError):
    def __init__(
        self,
        message: Optional[str] = None,
        *,
        error_code: ErrorCode = ErrorCode.INVALID_INPUT,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(error_code, message, details=details)


def error_response(
    error_code: ErrorCode,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
):
    payload = {
        "code": error_code.code,
        "message": message or error_code.message,
        "details": details or {},
    }
    return jsonify(payload), error_code.http_status


def business_error_response(error: BusinessError):
    return error_response(error.error_code, error.message, error.details)


def require_admin(fn):
    @wraps(fn)
    def wrapped(*args, **kwargs):
        user_obj = getattr(g, "current_user", None)
        if not user_obj:
            return error_response(ErrorCode.UNAUTHORIZED)
        if UserRole.ROLE_ADMIN.value not in user_obj.get("authorities", []):
            return error_response(ErrorCode.FORBIDDEN, "Admin privileges required")
        return fn(*args, **kwargs)

    return wrapped


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapped(*args, **kwargs):
            if not getattr(g, "current_user", None):
                return error_response(ErrorCode.UNAUTHORIZED)
            return fn(*args, **kwargs)

        return wrapped

    return decorator


def _location(err: Dict[str, Any]) -> str:
    return ".".join(str(part) for part in err.get("loc", []) if part != "__root__")


def _raise_for_pydantic(exc: PydanticValidationError) -> None:
    errors = exc.errors()
    missing_fields = [_location(err) for err in errors if err.get("type") == "missing"]
    if missing_fields:
        raise ValidationError(
            f"Missing required field(s): {', '.join(missing_fields)}",
            error_code=ErrorCode.MISSING_REQUIRED_FIELD,
            details={"fields": missing_fields},
        )
    if errors:
        first = errors[0]
        message = first.get("msg") or ""
        if message.startswith("Value error, "):
            message = message.split(", ", 1)[1]
        field = _location(first)
        details = {"field": field} if field else {}
        raise ValidationError(message or str(exc), details=details)
    raise ValidationError(str(exc))


def validate_payload(model: Type[PayloadT], payload: Any) -> PayloadT:
    """Validate a decoded JSON body against ``model`` or raise ValidationError."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        _raise_for_pydantic(exc)
        raise
