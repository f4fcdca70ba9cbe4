from __future__ import annotations

from datetime import date as date_cls, datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Mapped, mapped_column, relationship

from enums import (
    Concentration,
    DayOfWeek,
    NotificationCategory,
    Satisfaction,
    ScheduleCategory,
    ScheduleNotifyMinutes,
    ScheduleStatus,
    UserRole,
)
from extensions import db


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value: Optional[datetime | date_cls]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _enum_column(enum_cls, length: int = 32):
    return db.Enum(enum_cls, native_enum=False, length=length, validate_strings=True)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        db.DateTime, nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow
    )


class User(TimestampMixin, db.Model):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    name: Mapped[str] = mapped_column(db.String(100), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        _enum_column(UserRole), nullable=False, default=UserRole.ROLE_USER
    )

    deep_work_sessions: Mapped[List["DeepWorkSession"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    schedules: Mapped[List["Schedule"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    memoirs: Mapped[List["Memoir"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    notifications: Mapped[List["Notification"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    daily_summaries: Mapped[List["DailySummary"]] = relationship(
        cascade="all, delete-orphan"
    )
    weekly_summaries: Mapped[List["WeeklySummary"]] = relationship(
        cascade="all, delete-orphan"
    )
    monthly_summaries: Mapped[List["MonthlySummary"]] = relationship(
        cascade="all, delete-orphan"
    )

    @property
    def authorities(self) -> List[str]:
        return [self.role.value]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "createdAt": _iso(self.created_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - convenience
        return f"<User {self.email}>"


class DeepWorkSession(TimestampMixin, db.Model):
    __tablename__ = "deep_work_session"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_time: Mapped[datetime] = mapped_column(db.DateTime, nullable=False)
    end_time: Mapped[Optional[datetime]] = mapped_column(db.DateTime, nullable=True)
    # blocked app launches, and launches the user forced through anyway
    distraction_count: Mapped[int] = mapped_column(db.BigInteger, nullable=False, default=0)
    distraction_override_count: Mapped[int] = mapped_column(
        db.BigInteger, nullable=False, default=0
    )

    user: Mapped["User"] = relationship(back_populates="deep_work_sessions")

    @property
    def duration_minutes(self) -> Optional[int]:
        if self.end_time is None:
            return None
        return max(int((self.end_time - self.start_time).total_seconds() // 60), 0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "startTime": _iso(self.start_time),
            "endTime": _iso(self.end_time),
            "durationMinutes": self.duration_minutes,
            "distractionCount": self.distraction_count,
            "distractionOverrideCount": self.distraction_override_count,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - convenience
        state = "open" if self.end_time is None else f"{self.duration_minutes}m"
        return f"<DeepWorkSession {self.id} ({state})>"


class Schedule(TimestampMixin, db.Model):
    __tablename__ = "schedule"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(db.String(200), nullable=False)
    start_at: Mapped[datetime] = mapped_column(db.DateTime, nullable=False, index=True)
    end_at: Mapped[datetime] = mapped_column(db.DateTime, nullable=False)
    notify_minutes: Mapped[ScheduleNotifyMinutes] = mapped_column(
        _enum_column(ScheduleNotifyMinutes),
        nullable=False,
        default=ScheduleNotifyMinutes.NONE,
    )
    category: Mapped[ScheduleCategory] = mapped_column(
        _enum_column(ScheduleCategory), nullable=False, default=ScheduleCategory.OTHER
    )
    status: Mapped[ScheduleStatus] = mapped_column(
        _enum_column(ScheduleStatus), nullable=False, default=ScheduleStatus.PENDING
    )
    memo: Mapped[Optional[str]] = mapped_column(db.Text, nullable=True)

    user: Mapped["User"] = relationship(back_populates="schedules")

    @property
    def planned_minutes(self) -> int:
        return max(int((self.end_at - self.start_at).total_seconds() // 60), 0)

    @property
    def notify_at(self) -> Optional[datetime]:
        offset = self.notify_minutes.offset
        return self.start_at - offset if offset is not None else None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "startAt": _iso(self.start_at),
            "endAt": _iso(self.end_at),
            "notifyMinutes": self.notify_minutes.value,
            "notifyAt": _iso(self.notify_at),
            "category": self.category.value,
            "status": self.status.value,
            "memo": self.memo,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - convenience
        return f"<Schedule {self.title} ({self.status.value})>"


class Memoir(TimestampMixin, db.Model):
    __tablename__ = "memoir"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    satisfaction: Mapped[Satisfaction] = mapped_column(
        _enum_column(Satisfaction), nullable=False
    )
    concentration: Mapped[Concentration] = mapped_column(
        _enum_column(Concentration), nullable=False
    )
    achievement: Mapped[Optional[str]] = mapped_column(db.Text, nullable=True)
    improvement: Mapped[Optional[str]] = mapped_column(db.Text, nullable=True)
    memo: Mapped[Optional[str]] = mapped_column(db.Text, nullable=True)

    user: Mapped["User"] = relationship(back_populates="memoirs")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "satisfaction": self.satisfaction.value,
            "concentration": self.concentration.value,
            "achievement": self.achievement,
            "improvement": self.improvement,
            "memo": self.memo,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Notification(TimestampMixin, db.Model):
    __tablename__ = "notification"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category: Mapped[NotificationCategory] = mapped_column(
        _enum_column(NotificationCategory), nullable=False
    )
    content: Mapped[Optional[str]] = mapped_column(db.Text, nullable=True)
    is_check: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)

    user: Mapped["User"] = relationship(back_populates="notifications")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category.value,
            "content": self.content,
            "isCheck": bool(self.is_check),
            "createdAt": _iso(self.created_at),
        }


class SummaryTotalsMixin:
    total_deepwork_time: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    total_planned_time: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    total_schedule_count: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    complete_schedule_count: Mapped[int] = mapped_column(
        db.Integer, nullable=False, default=0
    )
    deepwork_session_count: Mapped[int] = mapped_column(
        db.Integer, nullable=False, default=0
    )
    avg_deepwork_session: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)

    def _totals_dict(self) -> dict:
        return {
            "totalDeepworkTime": self.total_deepwork_time,
            "totalPlannedTime": self.total_planned_time,
            "totalScheduleCount": self.total_schedule_count,
            "completeScheduleCount": self.complete_schedule_count,
            "deepworkSessionCount": self.deepwork_session_count,
            "avgDeepworkSession": self.avg_deepwork_session,
        }


class PeriodSummaryMixin(SummaryTotalsMixin):
    memoir_count: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    active_days: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    streak_days: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    most_productive_day: Mapped[DayOfWeek] = mapped_column(
        _enum_column(DayOfWeek, length=10), nullable=False
    )
    most_completed_category: Mapped[ScheduleCategory] = mapped_column(
        _enum_column(ScheduleCategory, length=50), nullable=False
    )
    least_completed_category: Mapped[ScheduleCategory] = mapped_column(
        _enum_column(ScheduleCategory, length=50), nullable=False
    )
    growth_rate: Mapped[Decimal] = mapped_column(
        db.Numeric(5, 2), nullable=False, default=Decimal("0.00")
    )

    def _period_dict(self) -> dict:
        payload = self._totals_dict()
        payload.update(
            {
                "memoirCount": self.memoir_count,
                "activeDays": self.active_days,
                "streakDays": self.streak_days,
                "mostProductiveDay": self.most_productive_day.value,
                "mostCompletedCategory": self.most_completed_category.value,
                "leastCompletedCategory": self.least_completed_category.value,
                "growthRate": float(self.growth_rate or 0),
            }
        )
        return payload


class DailySummary(SummaryTotalsMixin, TimestampMixin, db.Model):
    __tablename__ = "daily_summary"
    __table_args__ = (
        db.UniqueConstraint("user_id", "date", name="uq_daily_summary_user_date"),
        db.Index("idx_user_date", "user_id", "date"),
    )

    id: Mapped[int] = mapped_column("d_summary_id", primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[date_cls] = mapped_column(db.Date, nullable=False)
    is_memoir: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)
    is_streak: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)

    def to_dict(self) -> dict:
        payload = {"id": self.id, "date": _iso(self.date)}
        payload.update(self._totals_dict())
        payload.update({"isMemoir": bool(self.is_memoir), "isStreak": bool(self.is_streak)})
        return payload


class WeeklySummary(PeriodSummaryMixin, TimestampMixin, db.Model):
    __tablename__ = "weekly_summary"
    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "week_start_date", name="uq_weekly_summary_user_week"
        ),
        db.Index("idx_user_week", "user_id", "week_start_date"),
    )

    id: Mapped[int] = mapped_column("w_summary_id", primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    week_start_date: Mapped[date_cls] = mapped_column(db.Date, nullable=False)
    week_end_date: Mapped[date_cls] = mapped_column(db.Date, nullable=False)
    prev_week_deepwork_time: Mapped[int] = mapped_column(
        db.Integer, nullable=False, default=0
    )

    def to_dict(self) -> dict:
        payload = {
            "id": self.id,
            "weekStartDate": _iso(self.week_start_date),
            "weekEndDate": _iso(self.week_end_date),
        }
        payload.update(self._period_dict())
        payload["prevWeekDeepworkTime"] = self.prev_week_deepwork_time
        return payload


class MonthlySummary(PeriodSummaryMixin, TimestampMixin, db.Model):
    __tablename__ = "monthly_summary"
    __table_args__ = (
        db.UniqueConstraint("user_id", "year", "month", name="uq_monthly_summary_user_month"),
        db.Index("idx_user_year_month", "user_id", "year", "month"),
    )

    id: Mapped[int] = mapped_column("m_summary_id", primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    year: Mapped[int] = mapped_column(db.Integer, nullable=False)
    month: Mapped[int] = mapped_column(db.Integer, nullable=False)
    prev_month_deepwork_time: Mapped[int] = mapped_column(
        db.Integer, nullable=False, default=0
    )

    def to_dict(self) -> dict:
        payload = {"id": self.id, "year": self.year, "month": self.month}
        payload.update(self._period_dict())
        payload["prevMonthDeepworkTime"] = self.prev_month_deepwork_time
        return payload


class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(
        db.DateTime, nullable=False, default=_utcnow, index=True
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    event_type: Mapped[str] = mapped_column(db.String(64), nullable=False, index=True)
    message: Mapped[str] = mapped_column(db.Text, nullable=False)
    context: Mapped[Optional[Dict[str, object]]] = mapped_column(db.JSON, nullable=True)
    level: Mapped[str] = mapped_column(db.String(20), nullable=False, default="info", index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": _iso(self.timestamp),
            "userId": self.user_id,
            "eventType": self.event_type,
            "message": self.message,
            "context": self.context or {},
            "level": self.level,
        }

    def __repr__(self) -> str:  # pragma: no cover - convenience
        return f"<AuditLog {self.event_type} ({self.level})>"
