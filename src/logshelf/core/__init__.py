"""
Core business logic components.

This package contains the storage bookkeeping behind the API:
- Flat-directory file store
- Storage quota accounting
- Log ingestion, querying and eviction
- Metrics collection
"""
