import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from enums import (
    Concentration,
    NotificationCategory,
    Satisfaction,
    ScheduleCategory,
    ScheduleNotifyMinutes,
    ScheduleStatus,
)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
NAME_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 200
TEXT_MAX_LENGTH = 2000


def _strip_optional(value: Optional[str], field: str, max_length: int) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if len(value) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")
    return value or None


def _require_text(value: str, field: str, max_length: int) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{field} must not be empty")
    if len(value) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")
    return value


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store every timestamp as naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _normalize_email(value: str) -> str:
    value = (value or "").strip().lower()
    if not EMAIL_RE.match(value):
        raise ValueError("email must be a valid email address")
    if len(value) > 255:
        raise ValueError("email must be at most 255 characters")
    return value


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class SignupPayload(_Payload):
    email: str
    password: str
    name: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value or "") < PASSWORD_MIN_LENGTH:
            raise ValueError(f"password must be at least {PASSWORD_MIN_LENGTH} characters")
        if len(value) > PASSWORD_MAX_LENGTH:
            raise ValueError(f"password must be at most {PASSWORD_MAX_LENGTH} characters")
        return value

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _require_text(value, "name", NAME_MAX_LENGTH)


class LoginPayload(_Payload):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = (value or "").strip().lower()
        if not value:
            raise ValueError("email must not be empty")
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError("password must not be empty")
        return value


class UserUpdatePayload(_Payload):
    name: Optional[str] = None
    password: Optional[str] = None
    current_password: Optional[str] = Field(default=None, alias="currentPassword")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _require_text(value, "name", NAME_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"password must be at least {PASSWORD_MIN_LENGTH} characters")
        if len(value) > PASSWORD_MAX_LENGTH:
            raise ValueError(f"password must be at most {PASSWORD_MAX_LENGTH} characters")
        return value

    @model_validator(mode="after")
    def check_fields(self) -> "UserUpdatePayload":
        if self.name is None and self.password is None:
            raise ValueError("Provide name or password to update")
        if self.password is not None and not self.current_password:
            raise ValueError("currentPassword is required to change the password")
        return self


class DeepWorkStartPayload(_Payload):
    start_time: Optional[datetime] = Field(default=None, alias="startTime")

    @field_validator("start_time")
    @classmethod
    def normalize_start(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(value)


class DeepWorkEndPayload(_Payload):
    end_time: Optional[datetime] = Field(default=None, alias="endTime")

    @field_validator("end_time")
    @classmethod
    def normalize_end(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(value)


class DistractionPayload(_Payload):
    overridden: bool = False


class ScheduleCreatePayload(_Payload):
    title: str
    start_at: datetime = Field(alias="startAt")
    end_at: datetime = Field(alias="endAt")
    notify_minutes: ScheduleNotifyMinutes = Field(
        default=ScheduleNotifyMinutes.NONE, alias="notifyMinutes"
    )
    category: ScheduleCategory = ScheduleCategory.OTHER
    memo: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _require_text(value, "title", TITLE_MAX_LENGTH)

    @field_validator("memo")
    @classmethod
    def validate_memo(cls, value: Optional[str]) -> Optional[str]:
        return _strip_optional(value, "memo", TEXT_MAX_LENGTH)

    @field_validator("start_at", "end_at")
    @classmethod
    def normalize_times(cls, value: datetime) -> datetime:
        return _naive_utc(value)

    @model_validator(mode="after")
    def check_range(self) -> "ScheduleCreatePayload":
        if self.end_at <= self.start_at:
            raise ValueError("endAt must be after startAt")
        return self


class ScheduleUpdatePayload(_Payload):
    title: Optional[str] = None
    start_at: Optional[datetime] = Field(default=None, alias="startAt")
    end_at: Optional[datetime] = Field(default=None, alias="endAt")
    notify_minutes: Optional[ScheduleNotifyMinutes] = Field(default=None, alias="notifyMinutes")
    category: Optional[ScheduleCategory] = None
    memo: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _require_text(value, "title", TITLE_MAX_LENGTH)

    @field_validator("memo")
    @classmethod
    def validate_memo(cls, value: Optional[str]) -> Optional[str]:
        return _strip_optional(value, "memo", TEXT_MAX_LENGTH)

    @field_validator("start_at", "end_at")
    @classmethod
    def normalize_times(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(value)


class ScheduleStatusPayload(_Payload):
    status: ScheduleStatus


class MemoirCreatePayload(_Payload):
    satisfaction: Satisfaction
    concentration: Concentration
    achievement: Optional[str] = None
    improvement: Optional[str] = None
    memo: Optional[str] = None

    @field_validator("achievement", "improvement", "memo")
    @classmethod
    def validate_text(cls, value: Optional[str], info) -> Optional[str]:
        return _strip_optional(value, info.field_name, TEXT_MAX_LENGTH)


class MemoirUpdatePayload(_Payload):
    satisfaction: Optional[Satisfaction] = None
    concentration: Optional[Concentration] = None
    achievement: Optional[str] = None
    improvement: Optional[str] = None
    memo: Optional[str] = None

    @field_validator("achievement", "improvement", "memo")
    @classmethod
    def validate_text(cls, value: Optional[str], info) -> Optional[str]:
        return _strip_optional(value, info.field_name, TEXT_MAX_LENGTH)


class NotificationCreatePayload(_Payload):
    category: NotificationCategory
    content: Optional[str] = None

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: Optional[str]) -> Optional[str]:
        return _strip_optional(value, "content", TEXT_MAX_LENGTH)
