"""
Log ingestion.

Checks the free quota, derives a timestamped filename and writes the
payload as pretty-printed JSON.
"""

import asyncio
import json
import re
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Tuple

import structlog

from .accountant import StorageAccountant
from .exceptions import LogAlreadyExistsError, QuotaExceededError, ValidationError
from .file_store import FileStore
from .metrics import MetricsCollector

logger = structlog.get_logger(__name__)

VERSION_FIELD = "loggerVersion"
MAX_VERSION_LENGTH = 32
MAX_NAME_ATTEMPTS = 100

_UNSAFE_VERSION_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """
    ISO-8601 UTC timestamp with millisecond precision, made filename safe.

    2025-01-02T03:04:05.678Z -> 2025-01-02T03-04-05-678Z
    """
    iso = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    iso = iso.replace("+00:00", "Z")
    return re.sub(r"[:.]", "-", iso)


def sanitize_version(version: Any) -> Optional[str]:
    """Reduce a client supplied version to filename safe characters."""
    if version is None:
        return None
    cleaned = _UNSAFE_VERSION_CHARS.sub("-", str(version).strip())[:MAX_VERSION_LENGTH]
    # a version made only of dots would read as a relative path segment
    if not cleaned.strip("."):
        return None
    return cleaned


def build_log_filename(
    moment: datetime,
    version: Optional[str] = None,
    extension: str = ".txt",
    attempt: int = 0,
) -> str:
    """log-v<version>-<timestamp>.txt, or log-<timestamp>.txt without a version."""
    prefix = f"log-v{version}" if version else "log"
    suffix = f"-{attempt}" if attempt else ""
    return f"{prefix}-{format_timestamp(moment)}{suffix}{extension}"


def serialize_payload(payload: Any) -> str:
    """Pretty-print the payload the way it is stored on disk."""
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ValidationError("Payload is not JSON serializable", details={"error": str(e)}) from e


class LogIngestHandler:
    """
    Persists one payload per call as a new log file.

    The free-space check and the write happen under one lock, so
    concurrent ingests in this process cannot both pass the check before
    either write lands.
    """

    def __init__(
        self,
        store: FileStore,
        accountant: StorageAccountant,
        min_free_bytes: int,
        extension: str = ".txt",
        clock: Callable[[], datetime] = _utcnow,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.store = store
        self.accountant = accountant
        self.min_free_bytes = min_free_bytes
        self.extension = extension
        self.clock = clock
        self.metrics = metrics
        self._lock = asyncio.Lock()

    async def ingest(self, payload: Any) -> str:
        """Write payload to a new log file and return its filename."""
        version = None
        if isinstance(payload, dict):
            version = sanitize_version(payload.get(VERSION_FIELD))
        content = serialize_payload(payload)

        async with self._lock:
            free_bytes = await self.accountant.free_bytes()
            if free_bytes < self.min_free_bytes:
                logger.warning(
                    "Log rejected, storage quota exceeded",
                    free_bytes=free_bytes,
                    min_free_bytes=self.min_free_bytes,
                )
                if self.metrics:
                    self.metrics.record_rejection("quota_exceeded")
                raise QuotaExceededError(free_bytes=free_bytes)

            filename, size = await self._write_new(content, version)

        logger.info("Log saved", filename=filename, size_bytes=size)
        if self.metrics:
            self.metrics.record_ingestion(size)
        return filename

    async def _write_new(self, content: str, version: Optional[str]) -> Tuple[str, int]:
        moment = self.clock()
        for attempt in range(MAX_NAME_ATTEMPTS):
            filename = build_log_filename(moment, version, self.extension, attempt)
            try:
                size = await self.store.write_text(filename, content)
            except LogAlreadyExistsError:
                logger.debug("Log filename taken, retrying with suffix", filename=filename)
                continue
            return filename, size

        raise LogAlreadyExistsError(build_log_filename(moment, version, self.extension))
