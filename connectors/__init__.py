"""
Connectors module exports - importing registers every storage backend.
"""

from .memory_connector import MemoryConnector
from .oss_connector import OSSConnector

__all__ = [
    'MemoryConnector',
    'OSSConnector',
]
