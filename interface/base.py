"""
Base interface class implementing the Strategy pattern.

Interfaces wrap a worker (connector) so the implementation can be switched
transparently, and publish an event around every operation.
"""
from __future__ import annotations

import time
from abc import ABC
from typing import Any, Awaitable, Callable, Optional

from core.base_class.base_connectors import BaseConnector
from core.base_class.observer import EventPublisher, EventType, StorageEvent


class BaseInterface(ABC):

    def __init__(
        self,
        worker: BaseConnector,
        name: Optional[str] = None,
        event_publisher: Optional[EventPublisher] = None,
    ):
        """
        Args:
            worker: Connector instance (worker) to use
            name: Interface name (defaults to worker name)
            event_publisher: Optional event publisher for observability
        """
        self._worker = worker
        self._name = name or worker.name
        self._event_publisher = event_publisher

    @property
    def name(self) -> str:
        return self._name

    @property
    def worker(self) -> BaseConnector:
        return self._worker

    def switch_worker(self, new_worker: BaseConnector) -> None:
        """Swap the underlying connector (Strategy pattern)"""
        self._worker = new_worker

    async def _publish_event(
        self,
        event_type: EventType,
        operation_name: str,
        object_key: Optional[str] = None,
        success: bool = True,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None,
    ) -> None:
        if not self._event_publisher:
            return

        await self._event_publisher.publish(
            StorageEvent(
                event_type=event_type,
                connector_name=self._worker.name,
                operation_name=operation_name,
                object_key=object_key,
                success=success,
                error=error,
                duration_ms=duration_ms,
            )
        )

    async def _execute_with_tracking(
        self,
        operation_name: str,
        operation: Callable[..., Awaitable[Any]],
        *args: Any,
        object_key: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Execute operation with event tracking.

        Args:
            operation_name: Name of operation for logging
            operation: Async callable to execute
            object_key: Key the operation targets, if any
        """
        start_time = time.perf_counter()
        await self._publish_event(EventType.OPERATION_STARTED, operation_name, object_key)

        try:
            result = await operation(*args, **kwargs)
        except Exception as e:
            await self._publish_event(
                EventType.OPERATION_FAILED,
                operation_name,
                object_key,
                success=False,
                error=str(e),
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )
            raise

        await self._publish_event(
            EventType.OPERATION_COMPLETED,
            operation_name,
            object_key,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        return result

    # Lifecycle methods (delegated to worker)

    async def initialize(self) -> None:
        await self._execute_with_tracking("initialize", self._worker.initialize)

    async def shutdown(self) -> None:
        await self._execute_with_tracking("shutdown", self._worker.shutdown)

    async def health_check(self) -> bool:
        try:
            return await self._execute_with_tracking("health_check", self._worker.health_check)
        except Exception:
            return False

    def is_healthy(self) -> bool:
        return self._worker.is_healthy()
