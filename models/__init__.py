"""
Models module exports - Centralized imports for data models.
"""

from .http_model import (
    HealthResponse,
    ListResponse,
    MessageResponse,
    StatusMessageResponse,
    StatusResponse,
)
from .storage_model import DEFAULT_CONTENT_TYPE, ListingPage, ObjectInfo

__all__ = [
    'HealthResponse',
    'ListResponse',
    'MessageResponse',
    'StatusMessageResponse',
    'StatusResponse',
    'DEFAULT_CONTENT_TYPE',
    'ListingPage',
    'ObjectInfo',
]
