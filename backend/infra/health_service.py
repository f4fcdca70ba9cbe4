import time
from typing import Dict, Tuple

import structlog

from repositories import health_repo

logger = structlog.get_logger("momentum.backend")


def check_db_connection() -> bool:
    ok = health_repo.ping_database()
    if not ok:
        logger.warning("health.db_check_failed")
    return ok


def current_uptime_seconds(server_start_time: float) -> float:
    return max(0.0, time.time() - server_start_time)


def build_health_summary(server_start_time: float) -> Tuple[Dict[str, object], bool]:
    db_ok = check_db_connection()
    summary = {
        "status": "ok" if db_ok else "degraded",
        "db": "up" if db_ok else "down",
        "uptimeSeconds": round(current_uptime_seconds(server_start_time), 2),
    }
    return summary, db_ok
