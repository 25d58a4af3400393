"""
API response models for log files and storage.

Field aliases match the camelCase keys browser clients expect
(fileName, deletedCount, freeSpace, ...).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiResponse(BaseModel):
    """Every response carries a success flag."""

    success: bool = Field(default=True, description="Whether the operation succeeded")

    model_config = ConfigDict(populate_by_name=True)


class IngestResponse(ApiResponse):
    """Response from log ingestion endpoint."""

    message: str = Field(default="Log saved successfully", description="Response message")
    file_name: str = Field(alias="fileName", description="Name of the created log file")


class LogFileEntry(BaseModel):
    """Metadata for one stored log file."""

    filename: str = Field(description="Log file name")
    created: datetime = Field(description="File creation time (UTC)")
    size: int = Field(description="Size in bytes")


class LogListResponse(ApiResponse):
    """Stored logs, newest first."""

    count: int = Field(description="Number of log files")
    logs: List[LogFileEntry] = Field(default_factory=list)


class LogContentResponse(ApiResponse):
    """Full content of one log file."""

    filename: str = Field(description="Log file name")
    content: str = Field(description="Stored pretty-printed JSON text")


class DeleteResponse(ApiResponse):
    """Result of an eviction request."""

    message: str = Field(description="Response message")
    deleted_count: int = Field(alias="deletedCount", description="Number of files removed")


class StorageResponse(ApiResponse):
    """Storage usage against the quota, in megabytes."""

    free_space: float = Field(alias="freeSpace", description="Free space under the quota")
    total_size: float = Field(alias="totalSize", description="Space used by stored logs")
    max_size: float = Field(alias="maxSize", description="Storage quota")
    file_count: int = Field(alias="fileCount", description="Number of stored files")
    unit: str = Field(default="MB", description="Unit of the size fields")


class HealthResponse(BaseModel):
    """Liveness probe response."""

    status: str = Field(default="OK")
    timestamp: str = Field(description="Current server time (ISO-8601)")


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    success: bool = Field(default=False)
    error: str = Field(description="Error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Additional error details"
    )
