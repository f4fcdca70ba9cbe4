"""Repository package exposing all repository modules."""

from . import (
    admin_repo,
    deepwork_repo,
    health_repo,
    memoirs_repo,
    notifications_repo,
    schedules_repo,
    summaries_repo,
    users_repo,
)

__all__ = [
    "users_repo",
    "deepwork_repo",
    "schedules_repo",
    "memoirs_repo",
    "notifications_repo",
    "summaries_repo",
    "admin_repo",
    "health_repo",
]
