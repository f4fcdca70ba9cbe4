"""Closed enumerations shared by models, schemas and services."""

from datetime import timedelta
from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    # Authentication
    INVALID_TOKEN = ("A001", "Invalid access token", 401)
    EXPIRED_TOKEN = ("A002", "Access token expired", 401)
    UNAUTHORIZED = ("A003", "Authentication required", 401)
    FORBIDDEN = ("A004", "Access denied", 403)
    INVALID_CREDENTIALS = ("A005", "Invalid email or password", 401)

    # Users
    USER_NOT_FOUND = ("U001", "User not found", 404)
    DUPLICATE_EMAIL = ("U002", "Email already registered", 409)
    INVALID_PASSWORD = ("U003", "Password does not match", 400)

    # Validation
    INVALID_INPUT = ("V001", "Invalid input", 400)
    MISSING_REQUIRED_FIELD = ("V002", "Missing required field", 400)
    INVALID_CURSOR_CONTENT_SIZE = ("V003", "Page content exceeds requested size", 500)

    # Resources
    RESOURCE_NOT_FOUND = ("R001", "Resource not found", 404)
    RESOURCE_ALREADY_EXISTS = ("R002", "Resource already exists", 409)
    METHOD_NOT_ALLOWED = ("R003", "Method not allowed", 405)

    # Server
    INTERNAL_SERVER_ERROR = ("E999", "An unexpected error occurred", 500)
    DATABASE_ERROR = ("E998", "Database error", 500)
    EXTERNAL_API_ERROR = ("E997", "Upstream service error", 502)

    def __init__(self, code: str, message: str, http_status: int):
        self.code = code
        self.message = message
        self.http_status = http_status

    @classmethod
    def for_status(cls, status: int) -> "ErrorCode":
        """Pick the code used for a bare HTTP status raised by the framework."""
        by_status = {
            401: cls.UNAUTHORIZED,
            403: cls.FORBIDDEN,
            404: cls.RESOURCE_NOT_FOUND,
            405: cls.METHOD_NOT_ALLOWED,
            409: cls.RESOURCE_ALREADY_EXISTS,
            502: cls.EXTERNAL_API_ERROR,
        }
        if status in by_status:
            return by_status[status]
        if status >= 500:
            return cls.INTERNAL_SERVER_ERROR
        return cls.INVALID_INPUT


class UserRole(str, Enum):
    ROLE_USER = "ROLE_USER"
    ROLE_ADMIN = "ROLE_ADMIN"


class ScheduleCategory(str, Enum):
    WORK = "WORK"
    PERSONAL = "PERSONAL"
    HEALTH = "HEALTH"
    STUDY = "STUDY"
    OTHER = "OTHER"


class ScheduleStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


_NOTIFY_OFFSETS = {
    "NONE": None,
    "MINUTES_5": timedelta(minutes=5),
    "MINUTES_10": timedelta(minutes=10),
    "MINUTES_30": timedelta(minutes=30),
    "HOURS_1": timedelta(hours=1),
    "HOURS_2": timedelta(hours=2),
    "HOURS_6": timedelta(hours=6),
    "HOURS_12": timedelta(hours=12),
    "DAYS_1": timedelta(days=1),
}


class ScheduleNotifyMinutes(str, Enum):
    NONE = "NONE"
    MINUTES_5 = "MINUTES_5"
    MINUTES_10 = "MINUTES_10"
    MINUTES_30 = "MINUTES_30"
    HOURS_1 = "HOURS_1"
    HOURS_2 = "HOURS_2"
    HOURS_6 = "HOURS_6"
    HOURS_12 = "HOURS_12"
    DAYS_1 = "DAYS_1"

    @property
    def offset(self) -> Optional[timedelta]:
        return _NOTIFY_OFFSETS[self.value]


class Satisfaction(str, Enum):
    VERY_SATISFIED = "VERY_SATISFIED"
    SATISFIED = "SATISFIED"
    NEUTRAL = "NEUTRAL"
    DISSATISFIED = "DISSATISFIED"
    VERY_DISSATISFIED = "VERY_DISSATISFIED"


class Concentration(str, Enum):
    VERY_HIGH = "VERY_HIGH"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    VERY_LOW = "VERY_LOW"


class NotificationCategory(str, Enum):
    EVENT = "EVENT"
    SYSTEM = "SYSTEM"


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        """Map ``date.weekday()`` (Monday == 0) to the enum member."""
        return list(cls)[weekday]
