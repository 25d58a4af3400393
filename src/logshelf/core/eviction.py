"""
Log eviction: delete the N oldest logs, or every log.
"""

import asyncio
from typing import Any, List, Optional

import structlog

from .exceptions import LogNotFoundError, ValidationError
from .metrics import MetricsCollector
from .query import LogFileInfo, LogQueryHandler

logger = structlog.get_logger(__name__)


class EvictionHandler:
    """
    Deletes log files oldest-first or all at once.

    Files already gone when their delete runs are not counted, so
    repeating a call never fails.
    """

    def __init__(self, query: LogQueryHandler, metrics: Optional[MetricsCollector] = None):
        self.query = query
        self.store = query.store
        self.metrics = metrics

    async def delete_oldest(self, count: Any) -> int:
        """Remove the `count` oldest logs and return how many were removed."""
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise ValidationError(
                "Count must be a positive integer",
                details={"count": count},
            )

        logs = await self.query.list_logs()
        oldest = list(reversed(logs))[:count]
        deleted = await self._delete(oldest)

        logger.info("Deleted oldest logs", requested=count, deleted_count=deleted)
        if self.metrics:
            self.metrics.record_eviction("oldest", deleted)
        return deleted

    async def delete_all(self) -> int:
        """Remove every log file and return how many were removed."""
        logs = await self.query.list_logs()
        deleted = await self._delete(logs)

        logger.info("Deleted all logs", deleted_count=deleted)
        if self.metrics:
            self.metrics.record_eviction("all", deleted)
        return deleted

    async def _delete(self, logs: List[LogFileInfo]) -> int:
        results = await asyncio.gather(
            *(self.store.delete(info.filename) for info in logs),
            return_exceptions=True,
        )

        deleted = 0
        for info, result in zip(logs, results):
            if isinstance(result, LogNotFoundError):
                logger.debug("Log already removed", filename=info.filename)
                continue
            if isinstance(result, BaseException):
                raise result
            deleted += 1
        return deleted
