"""
Service layer package.

Each module encapsulates domain logic independent of Flask or HTTP concerns.
"""

# Export convenience imports for service modules
__all__ = [
    "auth_service",
    "deepwork_service",
    "schedule_service",
    "memoir_service",
    "notification_service",
    "summary_service",
    "admin_service",
]
