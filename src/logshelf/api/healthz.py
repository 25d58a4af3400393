"""
Health check endpoints.

- /health: Liveness probe (always 200 if service alive)
- /readyz: Readiness probe (200 only if the store is writable and has room)
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Request, Response, status

from ..models.log_file import HealthResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=200,
    summary="Liveness probe",
)
async def liveness_check() -> HealthResponse:
    """
    Liveness probe - always returns 200 if service is alive.
    """
    return HealthResponse(status="OK", timestamp=_now())


@router.get(
    "/readyz",
    summary="Readiness probe",
    description="""
    Readiness probe endpoint.

    Returns 200 only if:
    - The storage directory exists and is writable
    - Free space under the quota is at least the ingest threshold

    Returns 503 Service Unavailable otherwise.
    """,
)
async def readiness_check(request: Request, response: Response) -> Dict[str, Any]:
    accountant = getattr(request.app.state, "accountant", None)
    ingest_handler = getattr(request.app.state, "ingest_handler", None)

    if accountant is None or ingest_handler is None:
        logger.warning("Storage not initialized")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "not_ready",
            "reason": "storage_not_initialized",
            "timestamp": _now(),
        }

    try:
        root = accountant.store.root
        writable = root.is_dir() and os.access(root, os.W_OK)
        usage = await accountant.usage()
    except Exception as e:
        logger.error(
            "Readiness check failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "not_ready",
            "reason": "health_check_error",
            "error": str(e),
            "timestamp": _now(),
        }

    checks = {
        "storage_writable": writable,
        "free_space": usage.free_bytes >= ingest_handler.min_free_bytes,
    }
    failed_checks = [name for name, ok in checks.items() if not ok]

    if failed_checks:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "not_ready",
            "timestamp": _now(),
            "checks": checks,
            "failed_checks": failed_checks,
        }

    return {
        "status": "ready",
        "timestamp": _now(),
        "checks": checks,
    }
