"""
LogShelf - client log collection service

A FastAPI-based service that stores client-submitted log payloads as
timestamped files and offers listing, retrieval, eviction and
storage-quota introspection.
"""

__version__ = "0.1.0"

from .main import app

__all__ = ["app"]
