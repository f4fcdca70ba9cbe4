"""
Summary service.

Aggregates raw deep-work sessions, schedules and memoirs into daily, weekly
and monthly summaries. The ``compute_*`` functions are pure and operate on
already-loaded rows; the ``rebuild_*`` functions load a period, compute it
and upsert the stored row.

Attribution rules:
    - a session counts toward the day it started, and only once ended
    - a schedule counts toward the day of its ``start_at``
    - a memoir counts toward the day it was created
"""

import calendar
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from audit import log_event
from enums import DayOfWeek, ErrorCode, ScheduleCategory, ScheduleStatus
from repositories import deepwork_repo, memoirs_repo, schedules_repo, summaries_repo
from security import BusinessError, ValidationError

GROWTH_RATE_LIMIT = Decimal("999.99")
_TWO_PLACES = Decimal("0.01")


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _range_end(last_day: date) -> datetime:
    """Exclusive upper bound for rows attributed to ``last_day`` or earlier."""
    if last_day == date.max:
        return datetime.max
    return _day_start(last_day + timedelta(days=1))


def _shift(day: date, days: int) -> Optional[date]:
    """``day`` moved by ``days``, or None when that leaves the calendar."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return None


def _session_minutes(session) -> int:
    return session.duration_minutes or 0


def compute_growth_rate(current: int, previous: int) -> Decimal:
    """Percentage change from ``previous`` to ``current``, clamped to +/-999.99."""
    if previous == 0:
        return Decimal("0.00")
    rate = (Decimal(current - previous) * 100 / Decimal(previous)).quantize(
        _TWO_PLACES, rounding=ROUND_HALF_UP
    )
    return max(-GROWTH_RATE_LIMIT, min(GROWTH_RATE_LIMIT, rate))


def longest_streak(active_days: Iterable[date]) -> int:
    ordered = sorted(set(active_days))
    best = run = 0
    previous = None
    for day in ordered:
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        best = max(best, run)
        previous = day
    return best


def most_productive_day(minutes_by_day: Dict[date, int]) -> DayOfWeek:
    """Weekday with the most deep-work minutes; ties go to the earlier weekday."""
    by_weekday = [0] * 7
    for day, minutes in minutes_by_day.items():
        by_weekday[day.weekday()] += minutes
    best = max(by_weekday)
    if best <= 0:
        return DayOfWeek.MONDAY
    return DayOfWeek.from_weekday(by_weekday.index(best))


def completed_category_extremes(schedules: Sequence) -> Tuple[ScheduleCategory, ScheduleCategory]:
    """(most, least) completed categories among those that had any schedule."""
    present = {row.category for row in schedules}
    if not present:
        return ScheduleCategory.OTHER, ScheduleCategory.OTHER

    completed: Dict[ScheduleCategory, int] = defaultdict(int)
    for row in schedules:
        if row.status == ScheduleStatus.COMPLETED:
            completed[row.category] += 1

    candidates = [category for category in ScheduleCategory if category in present]
    most = max(candidates, key=lambda category: completed[category])
    least = min(candidates, key=lambda category: completed[category])
    return most, least


def _totals(sessions: Sequence, schedules: Sequence) -> Dict[str, int]:
    total_deepwork = sum(_session_minutes(row) for row in sessions)
    session_count = len(sessions)
    return {
        "total_deepwork_time": total_deepwork,
        "total_planned_time": sum(row.planned_minutes for row in schedules),
        "total_schedule_count": len(schedules),
        "complete_schedule_count": sum(
            1 for row in schedules if row.status == ScheduleStatus.COMPLETED
        ),
        "deepwork_session_count": session_count,
        "avg_deepwork_session": total_deepwork // session_count if session_count else 0,
    }


def compute_daily(sessions: Sequence, schedules: Sequence, memoirs: Sequence) -> Dict[str, Any]:
    values: Dict[str, Any] = _totals(sessions, schedules)
    values["is_memoir"] = bool(memoirs)
    values["is_streak"] = bool(sessions)
    return values


def compute_period(
    sessions: Sequence,
    schedules: Sequence,
    memoirs: Sequence,
    previous_deepwork_time: int,
) -> Dict[str, Any]:
    """Aggregate a week or month; the caller names the previous-period column."""
    values: Dict[str, Any] = _totals(sessions, schedules)

    minutes_by_day: Dict[date, int] = defaultdict(int)
    for row in sessions:
        minutes_by_day[row.start_time.date()] += _session_minutes(row)
    active = [day for day, minutes in minutes_by_day.items() if minutes > 0]

    most, least = completed_category_extremes(schedules)
    values.update(
        {
            "memoir_count": len(memoirs),
            "active_days": len(active),
            "streak_days": longest_streak(active),
            "most_productive_day": most_productive_day(minutes_by_day),
            "most_completed_category": most,
            "least_completed_category": least,
            "growth_rate": compute_growth_rate(
                values["total_deepwork_time"], previous_deepwork_time
            ),
        }
    )
    return values


def _load(user_id: int, first_day: date, last_day: date) -> Tuple[List, List, List]:
    """Rows attributed to the inclusive range ``first_day``..``last_day``."""
    start = _day_start(first_day)
    end = _range_end(last_day)
    return (
        deepwork_repo.list_completed_between(user_id, start, end),
        schedules_repo.list_starting_between(user_id, start, end),
        memoirs_repo.list_created_between(user_id, start, end),
    )


def _deepwork_minutes(user_id: int, first_day: date, last_day: date) -> int:
    sessions = deepwork_repo.list_completed_between(
        user_id, _day_start(first_day), _range_end(last_day)
    )
    return sum(_session_minutes(row) for row in sessions)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12", details={"field": "month"})
    if not 1 <= year <= 9999:
        raise ValidationError("year is out of range", details={"field": "year"})
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def _previous_month(year: int, month: int) -> Tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def _require_monday(week_start: date) -> None:
    if week_start.weekday() != 0:
        raise ValidationError("weekStart must be a Monday", details={"field": "weekStart"})


def rebuild_daily(user_id: int, day: date):
    sessions, schedules, memoirs = _load(user_id, day, day)
    return summaries_repo.upsert_daily(user_id, day, compute_daily(sessions, schedules, memoirs))


def rebuild_weekly(user_id: int, week_start: date):
    _require_monday(week_start)
    week_end = _shift(week_start, 6) or date.max
    previous_start = _shift(week_start, -7)
    if previous_start is None:
        previous = 0
    else:
        previous = _deepwork_minutes(user_id, previous_start, week_start - timedelta(days=1))
    sessions, schedules, memoirs = _load(user_id, week_start, week_end)
    values = compute_period(sessions, schedules, memoirs, previous)
    values["week_end_date"] = week_end
    values["prev_week_deepwork_time"] = previous
    return summaries_repo.upsert_weekly(user_id, week_start, values)


def rebuild_monthly(user_id: int, year: int, month: int):
    first_day, last_day = month_bounds(year, month)
    if (year, month) == (1, 1):
        previous = 0
    else:
        prev_first, prev_last = month_bounds(*_previous_month(year, month))
        previous = _deepwork_minutes(user_id, prev_first, prev_last)
    sessions, schedules, memoirs = _load(user_id, first_day, last_day)
    values = compute_period(sessions, schedules, memoirs, previous)
    values["prev_month_deepwork_time"] = previous
    return summaries_repo.upsert_monthly(user_id, year, month, values)


def rebuild_for_date(user_id: int, day: date) -> Dict[str, Any]:
    """Recompute the day plus the week and month that contain it."""
    week_start = day - timedelta(days=day.weekday())
    daily = rebuild_daily(user_id, day)
    weekly = rebuild_weekly(user_id, week_start)
    monthly = rebuild_monthly(user_id, day.year, day.month)
    log_event(
        "summary.rebuild",
        "Summaries rebuilt",
        user_id=user_id,
        context={"date": day.isoformat(), "total_deepwork_time": daily.total_deepwork_time},
    )
    return {"daily": daily.to_dict(), "weekly": weekly.to_dict(), "monthly": monthly.to_dict()}


def get_daily(user_id: int, day: date) -> Dict[str, Any]:
    row = summaries_repo.get_daily(user_id, day)
    if row is None:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND, "Daily summary not found")
    return row.to_dict()


def get_weekly(user_id: int, week_start: date) -> Dict[str, Any]:
    _require_monday(week_start)
    row = summaries_repo.get_weekly(user_id, week_start)
    if row is None:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND, "Weekly summary not found")
    return row.to_dict()


def get_monthly(user_id: int, year: int, month: int) -> Dict[str, Any]:
    month_bounds(year, month)
    row = summaries_repo.get_monthly(user_id, year, month)
    if row is None:
        raise BusinessError(ErrorCode.RESOURCE_NOT_FOUND, "Monthly summary not found")
    return row.to_dict()
