"""
Prometheus metrics collection.

In-memory counters and gauges, Prometheus handles storage.
"""

from typing import Optional

import structlog
from prometheus_client import CollectorRegistry, Counter, Gauge, Info

from .accountant import StorageUsage

logger = structlog.get_logger(__name__)


class MetricsCollector:
    """
    Centralized metrics collection for LogShelf.

    Each collector owns its registry so several app instances (tests)
    can coexist in one process.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()

        # Service info
        self.service_info = Info(
            "logshelf_service",
            "LogShelf service information",
            registry=self.registry,
        )
        self.service_info.info({
            "version": "0.1.0",
            "service": "logshelf",
        })

        # Ingestion metrics
        self.logs_ingested_total = Counter(
            "logs_ingested_total",
            "Total number of log files written",
            registry=self.registry,
        )

        self.logs_ingest_bytes_total = Counter(
            "logs_ingest_bytes_total",
            "Total bytes written to log files",
            registry=self.registry,
        )

        self.logs_rejected_total = Counter(
            "logs_rejected_total",
            "Total number of ingest requests rejected",
            ["reason"],
            registry=self.registry,
        )

        # Eviction metrics
        self.logs_evicted_total = Counter(
            "logs_evicted_total",
            "Total number of log files deleted",
            ["mode"],
            registry=self.registry,
        )

        # Storage metrics
        self.storage_used_bytes = Gauge(
            "storage_used_bytes",
            "Bytes used by stored logs at last scan",
            registry=self.registry,
        )

        self.storage_free_bytes = Gauge(
            "storage_free_bytes",
            "Bytes left under the quota at last scan",
            registry=self.registry,
        )

        self.storage_log_files = Gauge(
            "storage_log_files",
            "Number of stored files at last scan",
            registry=self.registry,
        )

    def record_ingestion(self, size_bytes: int) -> None:
        """Record one successfully written log file."""
        self.logs_ingested_total.inc()
        self.logs_ingest_bytes_total.inc(size_bytes)

    def record_rejection(self, reason: str) -> None:
        self.logs_rejected_total.labels(reason=reason).inc()

    def record_eviction(self, mode: str, deleted_count: int) -> None:
        if deleted_count > 0:
            self.logs_evicted_total.labels(mode=mode).inc(deleted_count)

    def update_storage_metrics(self, usage: StorageUsage) -> None:
        """Update storage gauges from a usage snapshot."""
        self.storage_used_bytes.set(usage.used_bytes)
        self.storage_free_bytes.set(usage.free_bytes)
        self.storage_log_files.set(usage.file_count)
