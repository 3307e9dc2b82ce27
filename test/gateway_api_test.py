"""
HTTP-level tests for the gateway routes

The app runs in-process through httpx's ASGI transport against the
in-memory store, or against connectors that fail on purpose.
"""

import unittest
from typing import List, Optional
from unittest.mock import patch

import httpx

from connectors.memory_connector import MemoryConnector
from core.base_class.base_connectors import ObjectStream
from core.base_class.observer import EventPublisher, MetricsObserver
from core.connector_configs import StorageConnectorConfig
from core.errors import StoreError, TransportError
from interface.storage import StorageInterface
from services.gateway import create_app

DISPOSITION_PATTERN = r"^attachment; filename=\d+_[A-Za-z0-9]{10}%s$"


class FailingConnector(MemoryConnector):
    """Every store call fails with the configured error"""

    def __init__(self, error: Exception):
        super().__init__()
        self.error = error

    async def stat(self, object_name):
        raise self.error

    async def open(self, object_name):
        raise self.error

    async def upload(self, object_name, data, length, *, content_type=None):
        raise self.error

    async def delete(self, object_name):
        raise self.error

    async def list_page(self, marker="", max_keys=None):
        raise self.error


class FlakyStream(ObjectStream):
    """Yields one chunk, then fails like a dropped connection"""

    def __init__(self, first_chunk: bytes):
        self.first_chunk = first_chunk
        self.closed = False

    async def iter_chunks(self):
        yield self.first_chunk
        raise TransportError("connection reset by peer")

    async def close(self):
        self.closed = True


class UnreadableConnector(MemoryConnector):
    """Metadata is served from memory; object bodies fail to open or to read"""

    def __init__(self, open_error: Optional[Exception] = None):
        super().__init__()
        self.open_error = open_error
        self.streams: List[FlakyStream] = []

    async def open(self, object_name):
        await self.stat(object_name)
        if self.open_error is not None:
            raise self.open_error
        stream = FlakyStream(b"abc")
        self.streams.append(stream)
        return stream


class GatewayTestCase(unittest.IsolatedAsyncioTestCase):
    page_size = 2

    def make_connector(self):
        return MemoryConnector(StorageConnectorConfig(bucket="test", chunk_size=3))

    async def asyncSetUp(self):
        self.metrics = MetricsObserver()
        publisher = EventPublisher()
        publisher.subscribe(self.metrics)
        self.storage = StorageInterface(self.make_connector(), event_publisher=publisher)
        await self.storage.initialize()
        self.app = create_app(self.storage, metrics=self.metrics, list_page_size=self.page_size)
        self.client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=self.app),
            base_url="http://test",
        )

    async def asyncTearDown(self):
        await self.client.aclose()
        await self.storage.shutdown()

    async def upload(self, filename: str, content: bytes = b"payload"):
        return await self.client.post(
            "/upload",
            files={"file": (filename, content, "application/octet-stream")},
        )


class TestGatewayRoutes(GatewayTestCase):

    async def test_index(self):
        resp = await self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Hello, Gin!"})

    async def test_isexist_missing_key(self):
        resp = await self.client.get("/isexist/ghost-key")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Object 'ghost-key' does not exist"})

    async def test_upload_then_exists(self):
        resp = await self.upload("report.pdf")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "File uploaded successfully"})

        resp = await self.client.get("/isexist/report.pdf")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Object 'report.pdf' exists"})

    async def test_upload_delete_round_trip(self):
        await self.upload("tmp.txt")

        resp = await self.client.delete("/delete/tmp.txt")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {
            "status": "success",
            "message": "Object 'tmp.txt' deleted successfully",
        })

        resp = await self.client.get("/isexist/tmp.txt")
        self.assertEqual(resp.json()["message"], "Object 'tmp.txt' does not exist")

    async def test_upload_last_write_wins(self):
        await self.upload("same.txt", b"first")
        await self.upload("same.txt", b"second")
        resp = await self.client.get("/download/same.txt")
        self.assertEqual(resp.content, b"second")

    async def test_upload_without_file_field(self):
        resp = await self.client.post("/upload")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"message": "Failed to get file"})

    async def test_upload_with_text_field_instead_of_file(self):
        resp = await self.client.post("/upload", data={"file": "not-a-file"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"message": "Failed to get file"})

    async def test_delete_absent_key_succeeds(self):
        resp = await self.client.delete("/delete/ghost-key")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "success")

    async def test_list_empty_bucket(self):
        resp = await self.client.get("/list")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {
            "status": "success",
            "message": "All objects have been listed",
            "objects": [],
        })

    async def test_list_spans_pages(self):
        names = [f"clip-{i}.mp3" for i in range(5)]
        for name in names:
            await self.upload(name)

        resp = await self.client.get("/list")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["objects"], names)

    async def test_download(self):
        await self.upload("song.mp3", b"ID3-audio-bytes")

        resp = await self.client.get("/download/song.mp3")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.content, b"ID3-audio-bytes")
        self.assertEqual(resp.headers["content-type"], "audio/mpeg")
        self.assertEqual(resp.headers["content-length"], str(len(b"ID3-audio-bytes")))
        self.assertRegex(resp.headers["content-disposition"], DISPOSITION_PATTERN % r"\.mp3")

    async def test_download_without_extension(self):
        await self.upload("blob", b"\x00\x01")

        resp = await self.client.get("/download/blob")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["content-type"], "application/octet-stream")
        self.assertRegex(resp.headers["content-disposition"], DISPOSITION_PATTERN % r"\.bin")

    async def test_download_filenames_differ(self):
        await self.upload("a.txt")
        first = await self.client.get("/download/a.txt")
        second = await self.client.get("/download/a.txt")
        self.assertNotEqual(
            first.headers["content-disposition"],
            second.headers["content-disposition"],
        )

    async def test_download_missing(self):
        resp = await self.client.get("/download/ghost.mp3")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"message": "Failed to get object metadata"})

    async def test_invertcode_is_not_implemented(self):
        await self.upload("voice.wav")
        resp = await self.client.get("/invertcode/voice.wav")
        self.assertEqual(resp.status_code, 501)
        self.assertEqual(resp.json()["file"], "voice.wav")

    async def test_invertcode_missing(self):
        resp = await self.client.get("/invertcode/ghost.wav")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"status": "error", "message": "Failed to get object"})

    async def test_health(self):
        resp = await self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")

    async def test_status_reports_operation_metrics(self):
        await self.upload("a.txt")
        resp = await self.client.get("/status")
        self.assertEqual(resp.status_code, 200)
        details = resp.json()["details"]
        self.assertEqual(details["backend"], "memory")
        self.assertIn("memory.upload", details["operations"])


class TestStoreErrors(GatewayTestCase):

    def make_connector(self):
        return FailingConnector(StoreError("AccessDenied", "Access denied"))

    async def test_isexist(self):
        resp = await self.client.get("/isexist/a.txt")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"message": "Error checking object: Access denied"})

    async def test_delete(self):
        resp = await self.client.delete("/delete/a.txt")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {
            "status": "error",
            "message": "Failed to delete object: AccessDenied: Access denied",
        })

    async def test_list(self):
        resp = await self.client.get("/list")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["status"], "error")
        self.assertTrue(resp.json()["message"].startswith("Failed to list objects: "))

    async def test_upload(self):
        resp = await self.upload("a.txt")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"message": "Failed to upload file to OSS"})

    async def test_download(self):
        resp = await self.client.get("/download/a.txt")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"message": "Failed to get object metadata"})

    async def test_server_keeps_serving(self):
        await self.client.get("/list")
        resp = await self.client.get("/")
        self.assertEqual(resp.status_code, 200)


class TestTransportErrors(GatewayTestCase):

    def make_connector(self):
        return FailingConnector(TransportError("dial tcp: connection refused"))

    async def test_isexist_reports_raw_error(self):
        resp = await self.client.get("/isexist/a.txt")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"message": "Error: dial tcp: connection refused"})

    async def test_delete(self):
        resp = await self.client.delete("/delete/a.txt")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json()["message"],
            "Failed to delete object: dial tcp: connection refused",
        )


class TestUnreadableObjects(GatewayTestCase):

    def make_connector(self):
        return UnreadableConnector()

    async def test_read_failure_aborts_body_and_closes_stream(self):
        await self.upload("song.mp3", b"abc")
        client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=self.app, raise_app_exceptions=False),
            base_url="http://test",
        )
        async with client:
            with self.assertLogs("objgate", level="ERROR") as logs:
                resp = await client.get("/download/song.mp3")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.content, b"abc")
        self.assertTrue(any("Failed to send file to client" in line for line in logs.output))
        self.assertEqual(len(self.storage.worker.streams), 1)
        self.assertTrue(self.storage.worker.streams[0].closed)


class TestOpenFailure(GatewayTestCase):

    def make_connector(self):
        return UnreadableConnector(open_error=StoreError("InternalError", "backend busy"))

    async def test_download_open_failure(self):
        await self.upload("song.mp3")
        resp = await self.client.get("/download/song.mp3")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"message": "Failed to get object"})


class TestUploadInput(GatewayTestCase):

    async def test_unreadable_upload(self):
        with patch("services.gateway._upload_length", side_effect=OSError("read error")):
            resp = await self.upload("a.txt")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"message": "Failed to open file"})
        self.assertFalse(await self.storage.exists("a.txt"))

    async def test_multipart_without_boundary(self):
        resp = await self.client.post(
            "/upload",
            content=b"garbage",
            headers={"Content-Type": "multipart/form-data"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"message": "Failed to get file"})


if __name__ == "__main__":
    unittest.main()
