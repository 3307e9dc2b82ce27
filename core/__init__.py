"""
Core module exports - errors, connector registry and configuration types.

The service container and base service are imported from their modules
directly, since they pull in the connector implementations.
"""

from .connector_configs import StorageConnectorConfig
from .errors import (
    ClientInputError,
    GatewayError,
    ObjectNotFound,
    StoreError,
    TransportError,
)
from .registry import (
    CONNECTOR_REGISTRY,
    get_all_connectors,
    get_connector_class,
    register_connector,
)

__all__ = [
    'StorageConnectorConfig',
    'ClientInputError',
    'GatewayError',
    'ObjectNotFound',
    'StoreError',
    'TransportError',
    'CONNECTOR_REGISTRY',
    'get_all_connectors',
    'get_connector_class',
    'register_connector',
]
