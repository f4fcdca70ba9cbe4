"""Repository helpers for health checks."""

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from extensions import db


def ping_database() -> bool:
    """Run ``SELECT 1`` on the session's connection; False when it fails."""
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        db.session.rollback()
        return False
    return True
