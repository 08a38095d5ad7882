import time
from typing import Any, Dict

import structlog
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger()

# Tables the service cannot work without.
REQUIRED_TABLES = ("products",)


def _probe_database(alias: str = "default") -> Dict[str, Any]:
    started = time.monotonic()
    conn = connections[alias]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()
        tables = set(conn.introspection.table_names(cursor))
    missing = [table for table in REQUIRED_TABLES if table not in tables]
    return {
        "status": "down" if missing else "up",
        "response_time_ms": round((time.monotonic() - started) * 1000, 2),
        **({"missing_tables": missing} if missing else {}),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """Report whether the database is reachable and migrated.

    200 with ``"healthy"`` when it is, 503 with ``"unhealthy"`` otherwise.
    """
    try:
        database = _probe_database()
    except DatabaseError as exc:
        database = {"status": "down"}
        logger.error("health_check_db_failure", error=str(exc))

    healthy = database["status"] == "up"
    if database.get("missing_tables"):
        logger.error("health_check_schema_missing", tables=database["missing_tables"])
    logger.info("health_check_completed", status="healthy" if healthy else "unhealthy")

    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": {"database": database},
        },
        status=200 if healthy else 503,
    )
