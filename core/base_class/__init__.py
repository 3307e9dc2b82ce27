"""
Core base classes for connectors.

Provides:
- Base connector abstractions
- Storage event observers
"""
from __future__ import annotations

from .base_connectors import (
    BaseConnector,
    FileStorageConnector,
    ObjectStream,
)
from .observer import (
    EventObserver,
    EventPublisher,
    EventType,
    LoggingObserver,
    MetricsObserver,
    StorageEvent,
)

__all__ = [
    "BaseConnector",
    "FileStorageConnector",
    "ObjectStream",
    "EventObserver",
    "EventPublisher",
    "EventType",
    "LoggingObserver",
    "MetricsObserver",
    "StorageEvent",
]
