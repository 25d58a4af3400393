"""
Pydantic data models package.

Contains the API response models for log files, eviction and storage.
"""

from .log_file import (
    ApiResponse,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    IngestResponse,
    LogContentResponse,
    LogFileEntry,
    LogListResponse,
    StorageResponse,
)

__all__ = [
    "ApiResponse",
    "DeleteResponse",
    "ErrorResponse",
    "HealthResponse",
    "IngestResponse",
    "LogContentResponse",
    "LogFileEntry",
    "LogListResponse",
    "StorageResponse",
]
