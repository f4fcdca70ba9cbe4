from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from extensions import db


@contextmanager
def transactional_session() -> Iterator[Session]:
    """Yield the request session and commit on success, rolling back on error."""
    session = db.session
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    else:
        session.commit()
