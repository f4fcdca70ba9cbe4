"""Repository storing computed daily, weekly and monthly summaries."""

from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy import select

from db_utils import transactional_session
from extensions import db
from models import DailySummary, MonthlySummary, WeeklySummary


def get_daily(user_id: int, day: date) -> Optional[DailySummary]:
    stmt = select(DailySummary).where(DailySummary.user_id == user_id, DailySummary.date == day)
    return db.session.execute(stmt).scalar_one_or_none()


def get_weekly(user_id: int, week_start: date) -> Optional[WeeklySummary]:
    stmt = select(WeeklySummary).where(
        WeeklySummary.user_id == user_id, WeeklySummary.week_start_date == week_start
    )
    return db.session.execute(stmt).scalar_one_or_none()


def get_monthly(user_id: int, year: int, month: int) -> Optional[MonthlySummary]:
    stmt = select(MonthlySummary).where(
        MonthlySummary.user_id == user_id,
        MonthlySummary.year == year,
        MonthlySummary.month == month,
    )
    return db.session.execute(stmt).scalar_one_or_none()


def _upsert(existing, factory, values: Dict[str, Any]):
    with transactional_session() as session:
        row = existing if existing is not None else factory()
        for key, value in values.items():
            setattr(row, key, value)
        if existing is None:
            session.add(row)
    return row


def upsert_daily(user_id: int, day: date, values: Dict[str, Any]) -> DailySummary:
    """Insert or overwrite the summary for ``(user_id, day)``."""
    return _upsert(
        get_daily(user_id, day),
        lambda: DailySummary(user_id=user_id, date=day),
        values,
    )


def upsert_weekly(user_id: int, week_start: date, values: Dict[str, Any]) -> WeeklySummary:
    """Insert or overwrite the summary for the week beginning ``week_start``."""
    return _upsert(
        get_weekly(user_id, week_start),
        lambda: WeeklySummary(user_id=user_id, week_start_date=week_start),
        values,
    )


def upsert_monthly(user_id: int, year: int, month: int, values: Dict[str, Any]) -> MonthlySummary:
    """Insert or overwrite the summary for ``year``/``month``."""
    return _upsert(
        get_monthly(user_id, year, month),
        lambda: MonthlySummary(user_id=user_id, year=year, month=month),
        values,
    )
