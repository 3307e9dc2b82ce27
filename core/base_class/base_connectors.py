"""
Base connector abstractions.

These classes define a minimal, consistent lifecycle and health-check API
plus the object-store capabilities the gateway relies on. Concrete
implementations live in `connectors/` and subclass `FileStorageConnector`.

Every store method raises only `core.errors` exceptions.
"""

from __future__ import annotations

import abc
from typing import AsyncIterator, BinaryIO, Optional

from models.storage_model import ListingPage, ObjectInfo


class BaseConnector(abc.ABC):
    """Common lifecycle and health-check contract for all connectors."""

    def __init__(self, name: str):
        self._name = name
        self._healthy: bool = False

    @property
    def name(self) -> str:
        return self._name

    @abc.abstractmethod
    async def initialize(self) -> None:
        """Allocate resources (clients, handles, etc.)."""

    @abc.abstractmethod
    async def shutdown(self) -> None:
        """Cleanly release all resources."""

    @abc.abstractmethod
    async def health_check(self) -> bool:
        """Perform a real remote-health check if possible."""

    def is_healthy(self) -> bool:
        """Fast, cached health indicator."""
        return self._healthy

    def _set_health(self, value: bool) -> None:
        self._healthy = value


class ObjectStream(abc.ABC):
    """
    Content stream of a single object.

    Use as an async context manager; `close()` is idempotent so it can also
    be attached to a response background task.
    """

    @abc.abstractmethod
    def iter_chunks(self) -> AsyncIterator[bytes]:
        """Yield the object's bytes in order."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""

    async def read_all(self) -> bytes:
        return b"".join([chunk async for chunk in self.iter_chunks()])

    async def __aenter__(self) -> ObjectStream:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class FileStorageConnector(BaseConnector, abc.ABC):
    """Base abstraction for bucket-scoped blob storage."""

    @abc.abstractmethod
    async def stat(self, object_name: str) -> ObjectInfo:
        """Fetch object metadata. Raises ObjectNotFound for absent keys."""

    @abc.abstractmethod
    async def open(self, object_name: str) -> ObjectStream:
        """Open the object's content stream."""

    @abc.abstractmethod
    async def upload(
        self,
        object_name: str,
        data: BinaryIO,
        length: int,
        *,
        content_type: Optional[str] = None,
    ) -> None:
        """Store `length` bytes read from `data` under `object_name`."""

    @abc.abstractmethod
    async def delete(self, object_name: str) -> None:
        """Delete the object. Deleting an absent key is not an error."""

    @abc.abstractmethod
    async def list_page(
        self,
        marker: str = "",
        max_keys: Optional[int] = None,
    ) -> ListingPage:
        """Return keys strictly after `marker`, at most `max_keys` of them."""
