"""
FastAPI dependencies resolving core components from app state.
"""

from typing import Optional

from fastapi import Request

from ..core.accountant import StorageAccountant
from ..core.eviction import EvictionHandler
from ..core.exceptions import StorageError
from ..core.ingest import LogIngestHandler
from ..core.metrics import MetricsCollector
from ..core.query import LogQueryHandler


def _from_state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise StorageError("Storage is not initialized", details={"component": name})
    return component


async def get_ingest_handler(request: Request) -> LogIngestHandler:
    return _from_state(request, "ingest_handler")


async def get_query_handler(request: Request) -> LogQueryHandler:
    return _from_state(request, "query_handler")


async def get_eviction_handler(request: Request) -> EvictionHandler:
    return _from_state(request, "eviction_handler")


async def get_accountant(request: Request) -> StorageAccountant:
    return _from_state(request, "accountant")


async def get_metrics(request: Request) -> Optional[MetricsCollector]:
    """Metrics collector, if the app has one."""
    return getattr(request.app.state, "metrics", None)
