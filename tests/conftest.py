"""
Pytest configuration and shared fixtures.

Contains common test fixtures and setup for all test modules.
"""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from src.logshelf.config import Settings, StorageSettings
from src.logshelf.core.accountant import StorageAccountant
from src.logshelf.core.exceptions import (
    InvalidLogNameError,
    LogAlreadyExistsError,
    LogNotFoundError,
)
from src.logshelf.core.file_store import FileStat, FileStore
from src.logshelf.main import create_app

MIB = 1024 * 1024


class InMemoryFileStore:
    """
    Dict-backed stand-in for FileStore.

    Creation times come from a counter (or are set explicitly) so ordering
    tests do not depend on filesystem timestamp resolution.
    """

    def __init__(self) -> None:
        self.root = Path("/in-memory")
        self.files: Dict[str, Dict[str, Any]] = {}
        self._clock = 1_700_000_000.0

    def add(self, name: str, content: str = "{}", created_at: Optional[float] = None) -> None:
        if created_at is None:
            self._clock += 1
            created_at = self._clock
        self.files[name] = {"content": content, "created_at": created_at}

    def resolve(self, name: str) -> Path:
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise InvalidLogNameError(name)
        return self.root / name

    async def list_names(self) -> List[str]:
        return list(self.files)

    async def stat(self, name: str) -> FileStat:
        self.resolve(name)
        if name not in self.files:
            raise LogNotFoundError(name)
        entry = self.files[name]
        return FileStat(
            name=name,
            size=len(entry["content"].encode("utf-8")),
            created_ns=int(entry["created_at"] * 1_000_000_000),
        )

    async def read_text(self, name: str) -> str:
        self.resolve(name)
        if name not in self.files:
            raise LogNotFoundError(name)
        return self.files[name]["content"]

    async def write_text(self, name: str, content: str) -> int:
        self.resolve(name)
        if name in self.files:
            raise LogAlreadyExistsError(name)
        self.add(name, content)
        return len(content.encode("utf-8"))

    async def delete(self, name: str) -> None:
        self.resolve(name)
        if name not in self.files:
            raise LogNotFoundError(name)
        del self.files[name]


@pytest.fixture
def temp_storage_dir() -> Generator[Path, None, None]:
    """Create temporary storage directory for testing."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir) / "client-logs"


@pytest.fixture
def file_store(temp_storage_dir: Path) -> FileStore:
    store = FileStore(temp_storage_dir)
    store.ensure_root()
    return store


@pytest.fixture
def memory_store() -> InMemoryFileStore:
    return InMemoryFileStore()


@pytest.fixture
def memory_accountant(memory_store: InMemoryFileStore) -> StorageAccountant:
    return StorageAccountant(memory_store, quota_bytes=500 * MIB)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always reports 2025-01-02T03:04:05.678Z."""
    moment = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def ticking_clock() -> Callable[[], datetime]:
    """Clock that advances one second per call."""
    state = {"now": datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)}

    def tick() -> datetime:
        state["now"] += timedelta(seconds=1)
        return state["now"]

    return tick


@pytest.fixture
def storage_settings(temp_storage_dir: Path) -> StorageSettings:
    return StorageSettings(
        root_path=temp_storage_dir,
        quota_bytes=500 * MIB,
        min_free_bytes=10 * MIB,
    )


@pytest.fixture
def test_settings(storage_settings: StorageSettings) -> Settings:
    """Test configuration pointing storage at a temp directory."""
    return Settings(
        host="127.0.0.1",
        port=3000,
        debug=True,
        log_level="DEBUG",
        storage=storage_settings,
    )


@pytest.fixture
def test_client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """FastAPI test client with test configuration."""
    with TestClient(create_app(test_settings)) as client:
        yield client


@pytest.fixture
def sample_log_payload() -> Dict[str, Any]:
    """Typical payload sent by the browser logger."""
    return {
        "loggerVersion": "1.2.0",
        "sessionId": "a1b2c3",
        "userAgent": "Mozilla/5.0",
        "entries": [
            {"level": "info", "message": "App started", "ts": "2025-01-02T03:04:05.000Z"},
            {"level": "error", "message": "Failed to fetch /api/data", "ts": "2025-01-02T03:04:06.000Z"},
        ],
    }
