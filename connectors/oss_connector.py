"""
OSS Connector - S3-compatible object store access through the MinIO SDK.

Aliyun OSS, MinIO and S3 all speak the S3 API, so one client covers them.
Blocking SDK calls run in the shared executor; the client itself is safe
for concurrent use and is shared by every request.
"""
import asyncio
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from itertools import chain, islice
from threading import Lock
from typing import Any, AsyncIterator, BinaryIO, Callable, Iterator, Optional, Tuple

from minio import Minio
from minio.error import S3Error

from core.base_class.base_connectors import FileStorageConnector, ObjectStream
from core.connector_configs import StorageConnectorConfig
from core.errors import GatewayError, ObjectNotFound, StoreError, TransportError
from core.registry import register_connector
from models.storage_model import DEFAULT_CONTENT_TYPE, ListingPage, ObjectInfo

NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchObject"})

# Multipart threshold handled by the SDK when the length is unknown
UNKNOWN_LENGTH_PART_SIZE = 10 * 1024 * 1024

# Listings resumable from their last key; oldest dropped first
MAX_OPEN_LISTINGS = 16


def translate_error(exc: Exception, object_name: Optional[str] = None) -> GatewayError:
    """Map an SDK/transport exception onto the gateway error taxonomy"""
    if isinstance(exc, GatewayError):
        return exc
    if isinstance(exc, S3Error):
        if exc.code in NOT_FOUND_CODES and object_name is not None:
            return ObjectNotFound(object_name, exc.message)
        return StoreError(exc.code or "Unknown", exc.message or "", key=object_name)
    return TransportError(str(exc) or type(exc).__name__)


class MinioObjectStream(ObjectStream):
    """Chunked reader over an open GetObject response"""

    def __init__(
        self,
        object_name: str,
        response: Any,
        executor: Optional[ThreadPoolExecutor],
        chunk_size: int,
        logger,
    ):
        self.object_name = object_name
        self._response = response
        self._executor = executor
        self._chunk_size = chunk_size
        self._logger = logger
        self._closed = False

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        loop = asyncio.get_running_loop()
        bytes_read = 0
        while True:
            try:
                chunk = await loop.run_in_executor(
                    self._executor, partial(self._response.read, self._chunk_size)
                )
            except Exception as e:
                self._logger.error(
                    f"Error reading {self.object_name} at {bytes_read} bytes: {e}"
                )
                raise translate_error(e, self.object_name) from e
            if not chunk:
                break
            bytes_read += len(chunk)
            yield chunk
        self._logger.debug(f"Read {bytes_read} bytes from {self.object_name}")

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._response.close()
            self._response.release_conn()
        except Exception as e:
            self._logger.warning(f"Error closing stream for {self.object_name}: {e}")


@register_connector("OSS")
class OSSConnector(FileStorageConnector):
    """
    Bucket-scoped connector over the MinIO client.

    All public methods raise `core.errors` exceptions only:
    - S3 error responses become StoreError (ObjectNotFound for NoSuchKey)
    - everything else (DNS, TLS, resets, timeouts) becomes TransportError
    """

    def __init__(
        self,
        config: StorageConnectorConfig,
        get_logger: Callable,
        executor: Optional[ThreadPoolExecutor] = None,
        client: Optional[Minio] = None,
    ):
        super().__init__(name="oss")
        self.logger = get_logger()
        self.config = config
        self.bucket = config.bucket
        self.executor = executor
        self.client: Optional[Minio] = client
        self._listings: "OrderedDict[str, Tuple[Any, Iterator]]" = OrderedDict()
        self._listings_lock = Lock()

    async def initialize(self) -> None:
        """Create the client handle; probes the bucket but never fails startup"""
        if self.client is None:
            try:
                self.client = Minio(
                    endpoint=self.config.endpoint,
                    access_key=self.config.access_key,
                    secret_key=self.config.secret_key,
                    secure=self.config.use_ssl,
                    region=self.config.region,
                )
            except Exception as e:
                self.logger.error(f"Failed to create OSS client: {e}")
                raise

        if await self.health_check():
            self.logger.info(f"OSS initialized: {self.config.endpoint}/{self.bucket}")
        else:
            self.logger.warning(
                f"OSS bucket '{self.bucket}' is not reachable at {self.config.endpoint}; "
                "requests will fail until the store configuration is fixed"
            )

    async def shutdown(self) -> None:
        if self.client:
            self.client = None
            with self._listings_lock:
                self._listings.clear()
            self._set_health(False)
            self.logger.info("OSS client closed")

    async def health_check(self) -> bool:
        try:
            exists = await self._run(None, self._require_client().bucket_exists, self.bucket)
        except GatewayError as e:
            self.logger.warning(f"OSS health check failed: {e}")
            exists = False
        self._set_health(bool(exists))
        return bool(exists)

    def _require_client(self) -> Minio:
        if self.client is None:
            raise TransportError("OSS client not initialized")
        return self.client

    async def _run(self, object_name: Optional[str], func: Callable, /, *args: Any, **kwargs: Any) -> Any:
        """Run a blocking SDK call in the executor, translating its errors"""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self.executor, partial(func, *args, **kwargs))
        except Exception as e:
            raise translate_error(e, object_name) from e

    async def stat(self, object_name: str) -> ObjectInfo:
        client = self._require_client()
        obj = await self._run(
            object_name,
            client.stat_object,
            bucket_name=self.bucket,
            object_name=object_name,
        )
        return ObjectInfo(
            key=object_name,
            size=obj.size or 0,
            content_type=obj.content_type or DEFAULT_CONTENT_TYPE,
            etag=obj.etag,
            last_modified=obj.last_modified,
        )

    async def open(self, object_name: str) -> ObjectStream:
        client = self._require_client()
        response = await self._run(
            object_name,
            client.get_object,
            bucket_name=self.bucket,
            object_name=object_name,
        )
        return MinioObjectStream(
            object_name, response, self.executor, self.config.chunk_size, self.logger
        )

    async def upload(
        self,
        object_name: str,
        data: BinaryIO,
        length: int,
        *,
        content_type: Optional[str] = None,
    ) -> None:
        client = self._require_client()
        part_size = UNKNOWN_LENGTH_PART_SIZE if length < 0 else 0
        await self._run(
            object_name,
            client.put_object,
            bucket_name=self.bucket,
            object_name=object_name,
            data=data,
            length=length,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            part_size=part_size,
        )
        self.logger.debug(f"Uploaded {object_name} ({length} bytes)")

    async def delete(self, object_name: str) -> None:
        client = self._require_client()
        await self._run(
            object_name,
            client.remove_object,
            bucket_name=self.bucket,
            object_name=object_name,
        )

    async def list_page(self, marker: str = "", max_keys: Optional[int] = None) -> ListingPage:
        client = self._require_client()
        return await self._run(
            None,
            self._blocking_list_page,
            client,
            marker,
            max_keys or self.config.list_page_size,
        )

    def _blocking_list_page(self, client: Minio, marker: str, max_keys: int) -> ListingPage:
        """
        Collect up to max_keys keys after marker.

        The SDK iterator walks the store's own pages, so the iterator left
        over from the previous page is resumed when its last key matches
        the marker. One key is read ahead to detect truncation.
        """
        with self._listings_lock:
            cursor = self._listings.pop(marker, None) if marker else None

        if cursor is None:
            pending, objects = [], iter(client.list_objects(
                bucket_name=self.bucket,
                recursive=True,
                start_after=marker or None,
            ))
        else:
            pending, objects = [cursor[0]], cursor[1]

        keys = [obj.object_name for obj in islice(chain(pending, objects), max_keys)]
        ahead = next(objects, None)
        if ahead is None:
            return ListingPage(keys=keys, next_marker="", is_truncated=False)

        with self._listings_lock:
            self._listings[keys[-1]] = (ahead, objects)
            while len(self._listings) > MAX_OPEN_LISTINGS:
                self._listings.popitem(last=False)
        return ListingPage(keys=keys, next_marker=keys[-1], is_truncated=True)
