"""
Configuration module using Pydantic Settings.

Reads from .env file and environment variables.
All fields are optional with sensible defaults; the OSS defaults are
placeholders and must be replaced before the gateway can reach the store.
"""

from pathlib import Path
from typing import Optional, Union

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.connector_configs import StorageConnectorConfig


ENV_FILE = ".env"

PLACEHOLDER_ACCESS_KEY_ID = "your-access-key-id"
PLACEHOLDER_ACCESS_KEY_SECRET = "your-access-key-secret"
PLACEHOLDER_BUCKET_NAME = "your-bucket-name"

ENV_TEMPLATE = (
    "OSS_ENDPOINT=oss-cn-hangzhou.aliyuncs.com\n"
    f"OSS_ACCESS_KEY_ID={PLACEHOLDER_ACCESS_KEY_ID}\n"
    f"OSS_ACCESS_KEY_SECRET={PLACEHOLDER_ACCESS_KEY_SECRET}\n"
    f"OSS_BUCKET_NAME={PLACEHOLDER_BUCKET_NAME}\n"
)


class Settings(BaseSettings):
    """Gateway settings - flat structure, grouped by prefix"""
    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        case_sensitive=False,
        extra="ignore"
    )

    # ========================================================================
    # LOGGING
    # ========================================================================
    log_level: str = Field(default="INFO", description="Logging level")
    log_enable_debug: bool = Field(default=False, description="Enable debug logging")
    log_file: Optional[str] = Field(default="logs/objgate.log", description="Log file path")

    # ========================================================================
    # OBJECT STORE
    # ========================================================================
    storage_backend: str = Field(
        default="OSS",
        description="Registered storage connector name (OSS or Memory)"
    )
    oss_endpoint: str = Field(
        default="oss-cn-hangzhou.aliyuncs.com",
        description="Object store endpoint"
    )
    oss_access_key_id: str = Field(
        default=PLACEHOLDER_ACCESS_KEY_ID,
        description="Access key id"
    )
    oss_access_key_secret: str = Field(
        default=PLACEHOLDER_ACCESS_KEY_SECRET,
        description="Access key secret"
    )
    oss_bucket_name: str = Field(
        default=PLACEHOLDER_BUCKET_NAME,
        description="Bucket name"
    )
    oss_use_ssl: bool = Field(default=True, description="Use HTTPS")
    oss_region: Optional[str] = Field(default=None, description="Bucket region")
    oss_list_page_size: int = Field(
        default=100,
        gt=0,
        le=1000,
        description="Keys requested per listing page"
    )

    # ========================================================================
    # HTTP SERVER
    # ========================================================================
    http_host: str = Field(default="0.0.0.0", description="Bind host")
    http_port: int = Field(default=8080, description="Bind port")

    executor_max_workers: int = Field(
        default=20,
        description="Thread pool size for blocking store calls"
    )

    # ========================================================================
    # HELPER PROPERTIES
    # ========================================================================

    @property
    def storage(self) -> StorageConnectorConfig:
        """Connector config built from the OSS_* values"""
        return StorageConnectorConfig(
            endpoint=self.oss_endpoint,
            access_key=self.oss_access_key_id,
            secret_key=self.oss_access_key_secret,
            bucket=self.oss_bucket_name,
            use_ssl=self.oss_use_ssl,
            region=self.oss_region,
            list_page_size=self.oss_list_page_size,
        )

    def is_placeholder_config(self) -> bool:
        """True while the auto-generated template values are still in use"""
        return (
            self.oss_access_key_id == PLACEHOLDER_ACCESS_KEY_ID
            or self.oss_access_key_secret == PLACEHOLDER_ACCESS_KEY_SECRET
            or self.oss_bucket_name == PLACEHOLDER_BUCKET_NAME
        )


def ensure_env_file(path: Union[str, Path] = ENV_FILE) -> bool:
    """
    Create a .env template with placeholder OSS values if none exists.

    Returns:
        True if the file was created, False if it already existed
    """
    env_path = Path(path)
    if env_path.exists():
        return False

    env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
    return True


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

_settings_instance: Optional[Settings] = None


def get_settings() -> Settings:
    """Get global settings instance (singleton)"""
    global _settings_instance

    if _settings_instance is None:
        _settings_instance = Settings()

    return _settings_instance


def reset_settings() -> None:
    """Reset settings instance (for testing)"""
    global _settings_instance
    _settings_instance = None

