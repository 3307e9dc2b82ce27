"""
Storage Interface - Strategy pattern over object store connectors.

Allows switching between storage providers (OSS, MinIO, in-memory, ...)
while the gateway keeps the same API.
"""
from typing import BinaryIO, List, Optional

from core.base_class.base_connectors import FileStorageConnector, ObjectStream
from core.base_class.observer import EventPublisher
from core.errors import ObjectNotFound, StoreError
from interface.base import BaseInterface
from models.storage_model import ListingPage, ObjectInfo


class StorageInterface(BaseInterface):
    """High-level interface for the five gateway store capabilities"""

    def __init__(
        self,
        worker: FileStorageConnector,
        name: Optional[str] = None,
        event_publisher: Optional[EventPublisher] = None,
    ):
        super().__init__(worker, name, event_publisher)

    @property
    def worker(self) -> FileStorageConnector:
        return self._worker

    async def exists(self, object_name: str) -> bool:
        """
        Check object existence through its metadata.

        A missing key is a normal answer, not an error; any other store or
        transport failure propagates.
        """
        try:
            await self.stat(object_name)
        except ObjectNotFound:
            return False
        return True

    async def stat(self, object_name: str) -> ObjectInfo:
        return await self._execute_with_tracking(
            "stat", self._worker.stat, object_name, object_key=object_name
        )

    async def open(self, object_name: str) -> ObjectStream:
        """Open the content stream; caller owns closing it"""
        return await self._execute_with_tracking(
            "open", self._worker.open, object_name, object_key=object_name
        )

    async def upload(
        self,
        object_name: str,
        data: BinaryIO,
        length: int,
        *,
        content_type: Optional[str] = None,
    ) -> None:
        await self._execute_with_tracking(
            "upload",
            self._worker.upload,
            object_name,
            data,
            length,
            content_type=content_type,
            object_key=object_name,
        )

    async def delete(self, object_name: str) -> None:
        await self._execute_with_tracking(
            "delete", self._worker.delete, object_name, object_key=object_name
        )

    async def list_page(self, marker: str = "", max_keys: Optional[int] = None) -> ListingPage:
        return await self._execute_with_tracking(
            "list_page", self._worker.list_page, marker, max_keys
        )

    async def list_all(self, page_size: Optional[int] = None) -> List[str]:
        """
        Follow continuation markers until the store reports no truncation.

        Keys are accumulated in store order. A failure on any page propagates;
        nothing partial is returned.
        """
        keys: List[str] = []
        marker = ""
        while True:
            page = await self.list_page(marker, page_size)
            keys.extend(page.keys)
            if not page.is_truncated:
                return keys
            next_marker = page.next_marker or (page.keys[-1] if page.keys else "")
            if not next_marker or next_marker == marker:
                raise StoreError(
                    "InvalidMarker",
                    f"Listing did not advance past marker '{marker}'",
                )
            marker = next_marker
