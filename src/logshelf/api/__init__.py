"""
API endpoints package.

Contains FastAPI routers for all service endpoints:
- /api/logs - Log ingestion, listing, retrieval and eviction
- /api/storage - Storage quota usage
- /health, /readyz - Health checks
- /metrics - Prometheus metrics
"""
from .healthz import router as healthz_router
from .logs import router as logs_router
from .metrics import router as metrics_router
from .storage import router as storage_router

__all__ = ["healthz_router", "logs_router", "metrics_router", "storage_router"]
