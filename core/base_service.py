"""
Base Service - common lifecycle for long-running services.

Provides container management, logging, configuration handling and a
shutdown event; subclasses implement `_startup_impl` / `_shutdown_impl`.
"""

import asyncio
import logging
from abc import ABC
from typing import Optional

from config.config import Settings, get_settings
from core.service_container import ServiceContainer


class BaseService(ABC):

    def __init__(self, name: str, config: Optional[Settings] = None):
        """
        Args:
            name: The name of the service
            config: Optional configuration object, will use default if not provided
        """
        self._name = name
        self._config = config or get_settings()
        self._container: Optional[ServiceContainer] = None
        self._shutdown_event = asyncio.Event()
        self._logger = logging.getLogger(f"objgate.{self.__class__.__name__}")
        self._is_running_flag = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> Settings:
        return self._config

    @property
    def container(self) -> Optional[ServiceContainer]:
        return self._container

    def is_running(self) -> bool:
        return self._is_running_flag

    def _set_running(self, running: bool) -> None:
        self._is_running_flag = running

    async def initialize_container(self, auto_initialize: bool = True) -> None:
        self._container = await ServiceContainer.from_config(
            config=self._config,
            auto_initialize=auto_initialize,
        )
        self._logger = self._container.logger

    async def start(self) -> None:
        """Start the service; returns once it stops serving"""
        self._set_running(True)

        try:
            if self._container is None:
                await self.initialize_container()

            self._logger.info(f"Starting service: {self.name}")
            await self._startup_impl()

        except Exception as e:
            self._logger.error(f"Error starting service {self.name}: {e}", exc_info=True)
            raise
        finally:
            self._set_running(False)

    async def stop(self) -> None:
        """Signal shutdown, run service cleanup, release the container"""
        self._logger.info(f"Stopping service: {self.name}")
        self._shutdown_event.set()

        try:
            await self._shutdown_impl()

            if self._container:
                await self._container.shutdown_all()
                self._container = None

        except Exception as e:
            self._logger.error(f"Error stopping service {self.name}: {e}", exc_info=True)
            raise
        finally:
            self._set_running(False)

    async def _startup_impl(self) -> None:
        """Service-specific startup logic"""

    async def _shutdown_impl(self) -> None:
        """Service-specific shutdown logic"""

    def get_shutdown_event(self) -> asyncio.Event:
        return self._shutdown_event
