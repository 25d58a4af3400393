"""
Flat-directory file store.

All log files live side by side in one directory; the directory is the
only source of truth.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

import aiofiles
import aiofiles.os
import structlog

from .exceptions import (
    InvalidLogNameError,
    LogAlreadyExistsError,
    LogNotFoundError,
    StorageError,
)

logger = structlog.get_logger(__name__)


@dataclass
class FileStat:
    """Size and creation time of a stored file."""
    name: str
    size: int
    created_ns: int

    @property
    def created_at(self) -> float:
        return self.created_ns / 1_000_000_000


class FileStore:
    """
    Async accessor for one flat storage directory.

    Missing files surface as LogNotFoundError, every other OSError as
    StorageError. Nothing is retried.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def ensure_root(self) -> None:
        """Create the storage directory if it doesn't exist."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Error creating storage directory", root=str(self.root), error=str(e))
            raise StorageError(
                "Error creating storage directory",
                details={"root": str(self.root)},
            ) from e

    def resolve(self, name: str) -> Path:
        """Map a bare filename to its path, refusing anything outside the root."""
        if (
            not name
            or name in (".", "..")
            or "/" in name
            or "\\" in name
            or "\x00" in name
            or os.sep in name
        ):
            raise InvalidLogNameError(name)

        path = self.root / name
        if path.resolve().parent != self.root.resolve():
            raise InvalidLogNameError(name)
        return path

    async def list_names(self) -> List[str]:
        """
        Names of the regular files in the store.

        Symlinks and names that would resolve outside the root are left out.
        """
        try:
            entries = await aiofiles.os.listdir(self.root)
        except OSError as e:
            raise StorageError("Failed to list storage directory", details={"error": str(e)}) from e

        names = []
        for entry in entries:
            path = self.root / entry
            if await aiofiles.os.path.islink(path):
                logger.warning("Skipping symlink in storage directory", filename=entry)
                continue
            try:
                self.resolve(entry)
            except InvalidLogNameError:
                logger.warning("Skipping unsafe name in storage directory", filename=entry)
                continue
            if await aiofiles.os.path.isfile(path):
                names.append(entry)
        return names

    async def stat(self, name: str) -> FileStat:
        """Size and creation time for one file."""
        path = self.resolve(name)
        try:
            st = await aiofiles.os.stat(path)
        except FileNotFoundError as e:
            raise LogNotFoundError(name) from e
        except OSError as e:
            raise StorageError("Failed to stat log file", details={"filename": name}) from e

        # st_birthtime where the platform records it, inode change time otherwise
        created_ns = getattr(st, "st_birthtime_ns", None) or st.st_ctime_ns
        return FileStat(name=name, size=st.st_size, created_ns=created_ns)

    async def read_text(self, name: str) -> str:
        path = self.resolve(name)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise LogNotFoundError(name) from e
        except UnicodeDecodeError as e:
            logger.error("Log file is not valid UTF-8", filename=name, error=str(e))
            raise StorageError("Log file is not valid UTF-8", details={"filename": name}) from e
        except OSError as e:
            raise StorageError("Failed to read log file", details={"filename": name}) from e

    async def write_text(self, name: str, content: str) -> int:
        """
        Create a new file holding content.

        Opens in exclusive mode so an existing file is never overwritten.
        Returns the number of bytes written.
        """
        path = self.resolve(name)
        data = content.encode("utf-8")
        try:
            async with aiofiles.open(path, "xb") as f:
                await f.write(data)
        except FileExistsError as e:
            raise LogAlreadyExistsError(name) from e
        except OSError as e:
            logger.error("Error writing log file", filename=name, error=str(e))
            raise StorageError("Failed to save log", details={"filename": name}) from e
        return len(data)

    async def delete(self, name: str) -> None:
        path = self.resolve(name)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise LogNotFoundError(name) from e
        except OSError as e:
            logger.error("Error deleting log file", filename=name, error=str(e))
            raise StorageError("Failed to delete log file", details={"filename": name}) from e
