"""
Log API endpoints.

- POST   /api/logs             - Store a client log payload
- GET    /api/logs             - List stored logs, newest first
- GET    /api/logs/{filename}  - Fetch one log's content
- DELETE /api/logs?count=N     - Delete the N oldest logs
- DELETE /api/logs/all         - Delete every log
"""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Body, Depends, Query

from ..core.eviction import EvictionHandler
from ..core.exceptions import ValidationError
from ..core.ingest import LogIngestHandler
from ..core.query import LogQueryHandler
from ..models.log_file import (
    DeleteResponse,
    ErrorResponse,
    IngestResponse,
    LogContentResponse,
    LogFileEntry,
    LogListResponse,
)
from .dependencies import get_eviction_handler, get_ingest_handler, get_query_handler

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/logs",
    response_model=IngestResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Failed to save log"},
        507: {"model": ErrorResponse, "description": "Storage quota exceeded"},
    },
    summary="Store a client log",
    description="""
    Store an arbitrary JSON payload as a new log file.

    The payload is written as pretty-printed JSON to
    `log-v<loggerVersion>-<timestamp>.txt` (or `log-<timestamp>.txt` when the
    payload has no `loggerVersion`). Rejected with 507 when less than the
    configured minimum free space remains under the storage quota.
    """,
)
async def ingest_log(
    payload: Any = Body(..., description="Free-form JSON log payload"),
    handler: LogIngestHandler = Depends(get_ingest_handler),
) -> IngestResponse:
    filename = await handler.ingest(payload)
    return IngestResponse(message="Log saved successfully", file_name=filename)


@router.get(
    "/logs",
    response_model=LogListResponse,
    summary="List stored logs",
)
async def list_logs(
    handler: LogQueryHandler = Depends(get_query_handler),
) -> LogListResponse:
    """List log files with creation time and size, newest first."""
    logs = await handler.list_logs()
    return LogListResponse(
        count=len(logs),
        logs=[
            LogFileEntry(filename=info.filename, created=info.created, size=info.size)
            for info in logs
        ],
    )


@router.delete(
    "/logs/all",
    response_model=DeleteResponse,
    summary="Delete every log",
)
async def delete_all_logs(
    handler: EvictionHandler = Depends(get_eviction_handler),
) -> DeleteResponse:
    deleted = await handler.delete_all()
    return DeleteResponse(
        message=f"Deleted {deleted} log file(s)",
        deleted_count=deleted,
    )


@router.get(
    "/logs/{filename}",
    response_model=LogContentResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid filename"},
        404: {"model": ErrorResponse, "description": "Log file not found"},
    },
    summary="Fetch one log",
)
async def get_log(
    filename: str,
    handler: LogQueryHandler = Depends(get_query_handler),
) -> LogContentResponse:
    content = await handler.get_log(filename)
    return LogContentResponse(filename=filename, content=content)


@router.delete(
    "/logs",
    response_model=DeleteResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid count"},
    },
    summary="Delete the oldest logs",
)
async def delete_oldest_logs(
    count: Optional[int] = Query(default=None, description="Number of oldest logs to delete"),
    handler: EvictionHandler = Depends(get_eviction_handler),
) -> DeleteResponse:
    """
    Delete the `count` oldest logs by creation time.

    Deletes fewer when the store holds less; an empty store deletes nothing.
    """
    if count is None:
        raise ValidationError("Query parameter 'count' is required")

    deleted = await handler.delete_oldest(count)
    return DeleteResponse(
        message=f"Deleted {deleted} oldest log file(s)",
        deleted_count=deleted,
    )
