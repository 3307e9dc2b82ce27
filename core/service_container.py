"""
Service Container - owns the store handle for the process lifetime.

The container:
- Builds the configured storage connector once (shared executor included)
- Wraps it in a StorageInterface wired to the event observers
- Handles lifecycle (initialization and shutdown)
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional

import connectors  # noqa: F401  registers the storage backends
from config.config import Settings, get_settings
from core.base_class.observer import EventPublisher, LoggingObserver, MetricsObserver
from core.registry import get_connector_class
from interface.storage import StorageInterface
from utils.logging import get_logger_from_config


class ServiceContainer:

    def __init__(
        self,
        config: Optional[Settings] = None,
        enable_logging: bool = True,
        enable_metrics: bool = True,
    ) -> None:
        """
        Args:
            config: Optional settings instance (uses get_settings() if None)
            enable_logging: Enable logging observer
            enable_metrics: Enable metrics observer
        """
        self.config: Settings = config or get_settings()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._logger = get_logger_from_config(self.config)

        self._event_publisher = EventPublisher(self._logger)
        if enable_logging:
            self._event_publisher.subscribe(LoggingObserver(self._logger))

        self._metrics_observer: Optional[MetricsObserver] = None
        if enable_metrics:
            self._metrics_observer = MetricsObserver()
            self._event_publisher.subscribe(self._metrics_observer)

        self._storage: Optional[StorageInterface] = None

    @classmethod
    async def from_config(
        cls,
        config: Optional[Settings] = None,
        auto_initialize: bool = True,
        enable_logging: bool = True,
        enable_metrics: bool = True,
    ) -> "ServiceContainer":
        """Create and optionally initialize container from settings."""
        instance = cls(
            config=config,
            enable_logging=enable_logging,
            enable_metrics=enable_metrics,
        )
        instance.register_all()

        if auto_initialize:
            await instance.initialize_all()

        return instance

    @property
    def logger(self):
        return self._logger

    @property
    def metrics(self) -> Optional[MetricsObserver]:
        return self._metrics_observer

    def register_all(self) -> None:
        """Create the storage connector and interface; does not initialize them"""
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.executor_max_workers,
            thread_name_prefix="objgate-store",
        )

        connector_cls = get_connector_class(self.config.storage_backend)
        storage_config = self.config.storage
        self._logger.debug("Storage config: %s", storage_config.to_dict())
        connector = connector_cls(
            config=storage_config,
            get_logger=lambda: self._logger,
            executor=self._executor,
        )
        self._storage = StorageInterface(
            connector,
            name="storage",
            event_publisher=self._event_publisher,
        )
        self._logger.info(
            "Registered storage backend %s (bucket '%s')",
            self.config.storage_backend,
            self.config.oss_bucket_name,
        )

    async def initialize_all(self) -> Dict[str, bool]:
        results: Dict[str, bool] = {}
        if self._storage is None:
            return results

        try:
            await self._storage.initialize()
            results[self._storage.name] = True
        except Exception as e:
            results[self._storage.name] = False
            self._logger.error("Failed to initialize interface %s: %s", self._storage.name, e)
        return results

    async def shutdown_all(self) -> None:
        """Shutdown the interface and release the executor"""
        if self._storage is not None:
            try:
                await self._storage.shutdown()
                self._logger.info("Shutdown interface: %s", self._storage.name)
            except Exception as e:
                self._logger.error("Error shutting down interface %s: %s", self._storage.name, e)

        if self._executor:
            self._executor.shutdown(wait=True)
            self._executor = None

    def get_storage(self) -> StorageInterface:
        if self._storage is None:
            raise KeyError("Storage interface not registered; call register_all() first")
        return self._storage
