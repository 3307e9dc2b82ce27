"""
Connector configuration classes.

Typed configuration for storage connectors. Values come from
`Settings.storage`.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass
class StorageConnectorConfig:
    """Configuration for storage connectors (OSS, MinIO, S3, in-memory)"""

    endpoint: str = "oss-cn-hangzhou.aliyuncs.com"
    access_key: str = ""
    secret_key: str = ""
    bucket: str = ""
    use_ssl: bool = True
    region: Optional[str] = None
    list_page_size: int = 100
    chunk_size: int = 65536 * 4

    def __post_init__(self) -> None:
        if self.list_page_size <= 0:
            raise ValueError("list_page_size must be positive")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

    def to_dict(self) -> dict:
        """Convert config to dictionary, secret masked"""
        result = asdict(self)
        if result["secret_key"]:
            result["secret_key"] = "***"
        return result
