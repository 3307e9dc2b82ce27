"""
Gateway Service - runs the HTTP gateway under uvicorn.

Architecture:
1. Container builds the store handle once at startup
2. The FastAPI app receives it by injection (create_app)
3. uvicorn serves requests until a signal or stop() ends the loop
"""

import asyncio
from typing import Optional

import uvicorn

from config.config import Settings
from core.base_service import BaseService
from services.gateway import create_app
from utils.logging import get_level_from_config


class GatewayService(BaseService):
    """Object storage HTTP gateway"""

    def __init__(self, config: Optional[Settings] = None):
        super().__init__(name="GatewayService", config=config)
        self._http_server: Optional[uvicorn.Server] = None

    def build_server(self) -> uvicorn.Server:
        storage = self.container.get_storage()
        app = create_app(
            storage,
            logger=self._logger,
            metrics=self.container.metrics,
            list_page_size=self.config.oss_list_page_size,
        )
        config = uvicorn.Config(
            app=app,
            host=self.config.http_host,
            port=self.config.http_port,
            log_level=get_level_from_config(self.config),
            access_log=True,
        )
        return uvicorn.Server(config)

    async def _startup_impl(self) -> None:
        if self.config.is_placeholder_config() and self.config.storage_backend.lower() == "oss":
            self._logger.warning(
                "OSS credentials still hold placeholder values; "
                "edit .env before expecting store calls to succeed"
            )

        self._http_server = self.build_server()
        http_task = asyncio.create_task(self._http_server.serve())
        shutdown_task = asyncio.create_task(self.get_shutdown_event().wait())
        self._logger.info(f"Gateway listening on {self.config.http_host}:{self.config.http_port}")

        done, pending = await asyncio.wait(
            [http_task, shutdown_task],
            return_when=asyncio.FIRST_COMPLETED,
        )

        if shutdown_task in done and not http_task.done():
            self._http_server.should_exit = True
            await http_task

        for task in pending:
            if not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

        if http_task.done() and not http_task.cancelled() and http_task.exception():
            raise http_task.exception()

    async def _shutdown_impl(self) -> None:
        if self._http_server is not None:
            self._http_server.should_exit = True
            self._logger.info("HTTP server shutdown initiated")
