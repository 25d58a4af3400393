"""
Log listing and retrieval.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePath
from typing import List

import structlog

from .accountant import gather_stats, is_log_file
from .exceptions import LogNotFoundError
from .file_store import FileStore

logger = structlog.get_logger(__name__)


@dataclass
class LogFileInfo:
    """Metadata for one stored log file."""
    filename: str
    created_ns: int
    size: int

    @property
    def created_at(self) -> float:
        return self.created_ns / 1_000_000_000

    @property
    def created(self) -> datetime:
        return datetime.fromtimestamp(self.created_at, tz=timezone.utc)


def _age_key(info: LogFileInfo):
    # Equal creation times: "log-<ts>" sorts before its "log-<ts>-1" retry
    return (info.created_ns, PurePath(info.filename).stem)


class LogQueryHandler:
    """Lists log metadata and fetches single log contents."""

    def __init__(self, store: FileStore, extension: str = ".txt"):
        self.store = store
        self.extension = extension

    def is_log_file(self, name: str) -> bool:
        return is_log_file(name, self.extension)

    async def list_logs(self) -> List[LogFileInfo]:
        """All log files, newest first."""
        names = [name for name in await self.store.list_names() if self.is_log_file(name)]
        stats = await gather_stats(self.store, names)

        logs = [
            LogFileInfo(filename=stat.name, created_ns=stat.created_ns, size=stat.size)
            for stat in stats
        ]
        logs.sort(key=_age_key, reverse=True)
        return logs

    async def get_log(self, filename: str) -> str:
        """
        Full text content of one log file.

        Raises InvalidLogNameError for names that would leave the store and
        LogNotFoundError for anything that is not an existing log file.
        """
        self.store.resolve(filename)
        if not self.is_log_file(filename):
            raise LogNotFoundError(filename)

        content = await self.store.read_text(filename)
        logger.debug("Log read", filename=filename, size_chars=len(content))
        return content
