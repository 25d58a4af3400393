"""
Storage quota endpoint.

GET /api/storage reports used and free space against the quota in MB.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends

from ..core.accountant import StorageAccountant
from ..core.metrics import MetricsCollector
from ..models.log_file import StorageResponse
from .dependencies import get_accountant, get_metrics

logger = structlog.get_logger(__name__)

router = APIRouter()

BYTES_PER_MB = 1024 * 1024


def to_megabytes(size_bytes: int) -> float:
    return round(size_bytes / BYTES_PER_MB, 2)


@router.get(
    "/storage",
    response_model=StorageResponse,
    summary="Storage usage",
    description="""
    Free and used space of the log store against its quota.

    Recomputed from a full directory scan on every call.
    """,
)
async def get_storage(
    accountant: StorageAccountant = Depends(get_accountant),
    metrics: Optional[MetricsCollector] = Depends(get_metrics),
) -> StorageResponse:
    usage = await accountant.usage()
    if metrics:
        metrics.update_storage_metrics(usage)

    logger.debug(
        "Storage usage computed",
        used_bytes=usage.used_bytes,
        free_bytes=usage.free_bytes,
        file_count=usage.file_count,
    )

    return StorageResponse(
        free_space=to_megabytes(usage.free_bytes),
        total_size=to_megabytes(usage.used_bytes),
        max_size=to_megabytes(usage.quota_bytes),
        file_count=usage.file_count,
    )
