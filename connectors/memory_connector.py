"""
In-process object store.

Keeps objects in a dict guarded by a lock. Listing returns keys in
lexicographic order, like S3-compatible stores do. Handy for local runs
(`STORAGE_BACKEND=Memory`) and for exercising the gateway in tests.
"""
import asyncio
import hashlib
from datetime import datetime, timezone
from threading import Lock
from typing import AsyncIterator, BinaryIO, Callable, Dict, Optional, Tuple

from core.base_class.base_connectors import FileStorageConnector, ObjectStream
from core.connector_configs import StorageConnectorConfig
from core.errors import ObjectNotFound, TransportError
from core.registry import register_connector
from models.storage_model import DEFAULT_CONTENT_TYPE, ListingPage, ObjectInfo


class MemoryObjectStream(ObjectStream):

    def __init__(self, data: bytes, chunk_size: int):
        self._data = data
        self._chunk_size = chunk_size
        self.closed = False

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        for offset in range(0, len(self._data), self._chunk_size):
            if self.closed:
                raise TransportError("stream closed")
            yield self._data[offset:offset + self._chunk_size]
            await asyncio.sleep(0)

    async def close(self) -> None:
        self.closed = True


@register_connector("Memory")
class MemoryConnector(FileStorageConnector):

    def __init__(
        self,
        config: Optional[StorageConnectorConfig] = None,
        get_logger: Optional[Callable] = None,
        executor=None,
    ):
        super().__init__(name="memory")
        self.config = config or StorageConnectorConfig(bucket="memory")
        self.logger = get_logger() if get_logger else None
        self._objects: Dict[str, Tuple[bytes, ObjectInfo]] = {}
        self._lock = Lock()

    async def initialize(self) -> None:
        self._set_health(True)
        if self.logger:
            self.logger.info(f"In-memory store initialized (bucket '{self.config.bucket}')")

    async def shutdown(self) -> None:
        self._set_health(False)

    async def health_check(self) -> bool:
        return self.is_healthy()

    def _get(self, object_name: str) -> Tuple[bytes, ObjectInfo]:
        with self._lock:
            entry = self._objects.get(object_name)
        if entry is None:
            raise ObjectNotFound(object_name)
        return entry

    async def stat(self, object_name: str) -> ObjectInfo:
        return self._get(object_name)[1]

    async def open(self, object_name: str) -> ObjectStream:
        data, _ = self._get(object_name)
        return MemoryObjectStream(data, self.config.chunk_size)

    async def upload(
        self,
        object_name: str,
        data: BinaryIO,
        length: int,
        *,
        content_type: Optional[str] = None,
    ) -> None:
        payload = data.read() if length < 0 else data.read(length)
        info = ObjectInfo(
            key=object_name,
            size=len(payload),
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            etag=hashlib.md5(payload).hexdigest(),
            last_modified=datetime.now(timezone.utc),
        )
        with self._lock:
            self._objects[object_name] = (payload, info)

    async def delete(self, object_name: str) -> None:
        with self._lock:
            self._objects.pop(object_name, None)

    async def list_page(self, marker: str = "", max_keys: Optional[int] = None) -> ListingPage:
        max_keys = max_keys or self.config.list_page_size
        with self._lock:
            keys = sorted(k for k in self._objects if k > marker)
        page = keys[:max_keys]
        truncated = len(keys) > max_keys
        return ListingPage(
            keys=page,
            next_marker=page[-1] if truncated else "",
            is_truncated=truncated,
        )
