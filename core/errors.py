"""
Gateway error taxonomy.

Connectors translate SDK exceptions into these classes at their boundary,
so handlers never inspect SDK types. `http_status` is the status class the
gateway reports when a handler has no more specific mapping.
"""

from typing import Optional


class GatewayError(Exception):
    """Base class for all errors surfaced to request handlers"""

    http_status: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def detail(self) -> str:
        """Human-readable detail used in response messages"""
        return self.message


class ObjectNotFound(GatewayError):
    """Object key is absent from the bucket"""

    def __init__(self, key: str, message: Optional[str] = None):
        super().__init__(message or f"Object '{key}' does not exist")
        self.key = key
        self.code = "NoSuchKey"


class StoreError(GatewayError):
    """Store reported a structured failure (error code + message)"""

    def __init__(self, code: str, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.key = key

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class TransportError(GatewayError):
    """Network or I/O failure without a structured store code"""


class ClientInputError(GatewayError):
    """Malformed or missing request input"""

    http_status = 400
