"""
Observer pattern implementation for storage operation events.

Interfaces publish an event when an operation starts, completes or fails;
observers turn them into log lines and timing metrics.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional


class EventType(str, Enum):
    """Types of storage events"""
    OPERATION_STARTED = "operation_started"
    OPERATION_COMPLETED = "operation_completed"
    OPERATION_FAILED = "operation_failed"


@dataclass
class StorageEvent:
    """Event emitted by a storage interface"""

    event_type: EventType
    connector_name: str
    operation_name: str
    object_key: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    duration_ms: Optional[float] = None
    success: bool = True
    error: Optional[str] = None


class EventObserver(ABC):
    """Base class for event observers"""

    @abstractmethod
    async def on_event(self, event: StorageEvent) -> None:
        """Handle storage event"""


class EventPublisher:
    """Fan-out of storage events to subscribed observers"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._observers: List[EventObserver] = []
        self._logger = logger or logging.getLogger(__name__)

    def subscribe(self, observer: EventObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: EventObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    async def publish(self, event: StorageEvent) -> None:
        """Publish event to all observers; a failing observer never fails the request"""
        for observer in self._observers:
            try:
                await observer.on_event(event)
            except Exception as e:
                self._logger.warning(
                    "Observer %s failed on %s: %s",
                    type(observer).__name__, event.operation_name, e,
                )


class LoggingObserver(EventObserver):
    """Logs every event; started events only at DEBUG"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    async def on_event(self, event: StorageEvent) -> None:
        if not event.success:
            level = logging.ERROR
        elif event.event_type == EventType.OPERATION_STARTED:
            level = logging.DEBUG
        else:
            level = logging.INFO

        message = f"[{event.event_type.value}] {event.connector_name}::{event.operation_name}"
        if event.object_key:
            message += f" '{event.object_key}'"

        if not event.success:
            message += " - FAILED"
        elif event.event_type == EventType.OPERATION_COMPLETED:
            message += " - OK"

        if event.duration_ms is not None:
            message += f" ({event.duration_ms:.2f}ms)"

        if event.error:
            message += f" - {event.error}"

        self.logger.log(level, message)


@dataclass
class OperationStats:
    """Running aggregate for one connector operation"""

    count: int = 0
    failures: int = 0
    total_ms: float = 0.0
    min_ms: float = float("inf")
    max_ms: float = 0.0

    def add(self, duration_ms: float, failed: bool) -> None:
        self.count += 1
        if failed:
            self.failures += 1
        self.total_ms += duration_ms
        self.min_ms = min(self.min_ms, duration_ms)
        self.max_ms = max(self.max_ms, duration_ms)


class MetricsObserver(EventObserver):
    """Collects per-operation timings and failure counts in constant space"""

    def __init__(self):
        self._stats: Dict[str, OperationStats] = {}

    async def on_event(self, event: StorageEvent) -> None:
        if event.duration_ms is None:
            return
        key = f"{event.connector_name}.{event.operation_name}"
        stats = self._stats.setdefault(key, OperationStats())
        stats.add(event.duration_ms, event.event_type == EventType.OPERATION_FAILED)

    def get_metrics(self) -> Dict[str, Dict[str, float]]:
        return {
            key: {
                "count": stats.count,
                "failures": stats.failures,
                "avg_ms": stats.total_ms / stats.count,
                "min_ms": stats.min_ms,
                "max_ms": stats.max_ms,
            }
            for key, stats in self._stats.items()
        }

    def reset(self) -> None:
        self._stats.clear()
