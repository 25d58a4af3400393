"""
Storage quota accounting.

Usage is never persisted: every call rescans the store directory.
"""

import asyncio
from dataclasses import dataclass
from typing import List

import structlog

from .exceptions import LogNotFoundError
from .file_store import FileStat, FileStore

logger = structlog.get_logger(__name__)


@dataclass
class StorageUsage:
    """Snapshot of the store against its quota."""
    used_bytes: int
    free_bytes: int
    quota_bytes: int
    file_count: int


def is_log_file(name: str, extension: str) -> bool:
    return name.endswith(extension) and len(name) > len(extension)


async def gather_stats(store: FileStore, names: List[str]) -> List[FileStat]:
    """
    Stat every name concurrently.

    Files removed between the listing and the stat are dropped from the
    result; any other failure propagates.
    """
    results = await asyncio.gather(
        *(store.stat(name) for name in names),
        return_exceptions=True,
    )

    stats: List[FileStat] = []
    for name, result in zip(names, results):
        if isinstance(result, LogNotFoundError):
            logger.debug("File vanished during scan", filename=name)
            continue
        if isinstance(result, BaseException):
            raise result
        stats.append(result)
    return stats


class StorageAccountant:
    """
    Sums log file sizes and derives free space against a fixed quota.

    Only files with the log extension count, so the quota tracks exactly
    what eviction can remove.
    """

    def __init__(self, store: FileStore, quota_bytes: int, extension: str = ".txt"):
        if quota_bytes <= 0:
            raise ValueError("quota_bytes must be positive")
        self.store = store
        self.quota_bytes = quota_bytes
        self.extension = extension

    async def _scan(self) -> List[FileStat]:
        names = [
            name for name in await self.store.list_names()
            if is_log_file(name, self.extension)
        ]
        return await gather_stats(self.store, names)

    async def used_bytes(self) -> int:
        stats = await self._scan()
        return sum(stat.size for stat in stats)

    async def free_bytes(self) -> int:
        return max(0, self.quota_bytes - await self.used_bytes())

    async def usage(self) -> StorageUsage:
        """Used, free and file count from a single directory scan."""
        stats = await self._scan()
        used = sum(stat.size for stat in stats)
        return StorageUsage(
            used_bytes=used,
            free_bytes=max(0, self.quota_bytes - used),
            quota_bytes=self.quota_bytes,
            file_count=len(stats),
        )
