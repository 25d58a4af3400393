"""
Custom exceptions for LogShelf service.

Provides structured error handling with appropriate HTTP status codes
and error details for API responses.
"""

from typing import Any, Dict, Optional


class LogShelfException(Exception):
    """Base exception for LogShelf service."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class ValidationError(LogShelfException):
    """Raised when request validation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="validation_error",
            details=details,
        )


class InvalidLogNameError(LogShelfException):
    """Raised when a filename would escape the storage directory."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            message="Invalid log filename",
            status_code=400,
            error_code="invalid_filename",
            details={"filename": filename},
        )


class LogNotFoundError(LogShelfException):
    """Raised when a requested log file does not exist."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            message="Log file not found",
            status_code=404,
            error_code="not_found",
            details={"filename": filename},
        )


class LogAlreadyExistsError(LogShelfException):
    """Raised when an exclusive write hits an existing file."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            message="Log file already exists",
            status_code=409,
            error_code="already_exists",
            details={"filename": filename},
        )


class QuotaExceededError(LogShelfException):
    """Raised when the storage quota leaves too little room for a new log."""

    def __init__(
        self,
        free_bytes: int,
        message: str = "Storage quota exceeded, delete old logs to free space",
    ) -> None:
        super().__init__(
            message=message,
            status_code=507,
            error_code="quota_exceeded",
            details={
                "free_bytes": free_bytes,
                "free_mb": round(free_bytes / (1024 * 1024), 2),
            },
        )


class StorageError(LogShelfException):
    """Raised when filesystem operations fail."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            status_code=500,
            error_code="storage_error",
            details=details,
        )
