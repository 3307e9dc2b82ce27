"""
Tests for settings, the .env template, connector configs and service wiring
"""

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pydantic import ValidationError

from config.config import ENV_TEMPLATE, Settings, ensure_env_file, get_settings, reset_settings
from core.connector_configs import StorageConnectorConfig
from core.registry import get_all_connectors, get_connector_class
from core.service_container import ServiceContainer
from services.service import GatewayService


def memory_settings(**overrides) -> Settings:
    values = dict(_env_file=None, storage_backend="Memory", log_file=None)
    values.update(overrides)
    return Settings(**values)


class TestEnvFile(unittest.TestCase):

    def test_creates_template_once(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / ".env"
            self.assertTrue(ensure_env_file(path))
            self.assertEqual(path.read_text(encoding="utf-8"), ENV_TEMPLATE)

            path.write_text("OSS_BUCKET_NAME=media\n", encoding="utf-8")
            self.assertFalse(ensure_env_file(path))
            self.assertEqual(path.read_text(encoding="utf-8"), "OSS_BUCKET_NAME=media\n")

    def test_template_keys(self):
        keys = [line.split("=", 1)[0] for line in ENV_TEMPLATE.splitlines()]
        self.assertEqual(keys, [
            "OSS_ENDPOINT",
            "OSS_ACCESS_KEY_ID",
            "OSS_ACCESS_KEY_SECRET",
            "OSS_BUCKET_NAME",
        ])


class TestSettings(unittest.TestCase):

    def test_reads_env_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / ".env"
            path.write_text(
                "OSS_ENDPOINT=oss-eu-central-1.aliyuncs.com\n"
                "OSS_ACCESS_KEY_ID=LTAI-id\n"
                "OSS_ACCESS_KEY_SECRET=s3cr3t\n"
                "OSS_BUCKET_NAME=media\n",
                encoding="utf-8",
            )
            settings = Settings(_env_file=path)

        self.assertEqual(settings.oss_endpoint, "oss-eu-central-1.aliyuncs.com")
        self.assertEqual(settings.oss_bucket_name, "media")
        self.assertFalse(settings.is_placeholder_config())

    def test_environment_overrides(self):
        with patch.dict(os.environ, {"OSS_BUCKET_NAME": "from-env", "HTTP_PORT": "9090"}):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.oss_bucket_name, "from-env")
        self.assertEqual(settings.http_port, 9090)

    def test_defaults_are_placeholders(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        self.assertTrue(settings.is_placeholder_config())
        self.assertEqual(settings.http_port, 8080)

    def test_storage_property(self):
        settings = memory_settings(oss_bucket_name="media", oss_list_page_size=50)
        storage = settings.storage
        self.assertIsInstance(storage, StorageConnectorConfig)
        self.assertEqual(storage.bucket, "media")
        self.assertEqual(storage.list_page_size, 50)

    def test_page_size_must_be_positive(self):
        with self.assertRaises(ValidationError):
            memory_settings(oss_list_page_size=0)

    def test_get_settings_is_cached_until_reset(self):
        reset_settings()
        try:
            first = get_settings()
            self.assertIs(get_settings(), first)
            reset_settings()
            self.assertIsNot(get_settings(), first)
        finally:
            reset_settings()


class TestStorageConnectorConfig(unittest.TestCase):

    def test_to_dict_masks_secret(self):
        config = StorageConnectorConfig(bucket="b", secret_key="s3cr3t")
        self.assertEqual(config.to_dict()["secret_key"], "***")

    def test_invalid_page_size(self):
        with self.assertRaises(ValueError):
            StorageConnectorConfig(bucket="b", list_page_size=0)


class TestRegistry(unittest.TestCase):

    def test_backends_registered(self):
        connectors = get_all_connectors()
        self.assertIn("OSS", connectors)
        self.assertIn("Memory", connectors)
        self.assertIs(get_connector_class("memory"), connectors["Memory"])

    def test_unknown_backend(self):
        with self.assertRaises(KeyError):
            get_connector_class("ftp")


class TestServiceWiring(unittest.IsolatedAsyncioTestCase):

    async def test_container_builds_storage(self):
        container = await ServiceContainer.from_config(memory_settings())
        try:
            storage = container.get_storage()
            self.assertEqual(storage.worker.name, "memory")
            self.assertTrue(await storage.health_check())
        finally:
            await container.shutdown_all()

    async def test_register_logs_masked_storage_config(self):
        container = ServiceContainer(memory_settings(oss_access_key_secret="s3cr3t"))
        with self.assertLogs("objgate", level="DEBUG") as logs:
            container.register_all()
        try:
            output = "\n".join(logs.output)
            self.assertIn("'secret_key': '***'", output)
            self.assertNotIn("s3cr3t", output)
        finally:
            await container.shutdown_all()

    async def test_get_storage_before_register(self):
        container = ServiceContainer(memory_settings())
        with self.assertRaises(KeyError):
            container.get_storage()

    async def test_gateway_service_builds_server(self):
        service = GatewayService(memory_settings(http_host="127.0.0.1", http_port=18080))
        await service.initialize_container()
        try:
            server = service.build_server()
            self.assertEqual(server.config.host, "127.0.0.1")
            self.assertEqual(server.config.port, 18080)
            self.assertIs(server.config.app.state.storage, service.container.get_storage())
        finally:
            await service.stop()
        self.assertIsNone(service.container)

    async def test_server_log_level_follows_settings(self):
        cases = [
            (memory_settings(log_level="WARNING"), logging.WARNING),
            (memory_settings(log_level="bogus"), logging.INFO),
            (memory_settings(log_level="ERROR", log_enable_debug=True), logging.DEBUG),
        ]
        for settings, expected in cases:
            with self.subTest(log_level=settings.log_level, debug=settings.log_enable_debug):
                service = GatewayService(settings)
                await service.initialize_container()
                try:
                    self.assertEqual(service.build_server().config.log_level, expected)
                finally:
                    await service.stop()


if __name__ == "__main__":
    unittest.main()
