"""
Registry of storage connector implementations.
Provides a decorator for registering new backends under a config name.
"""

from typing import Dict, Type, Any

CONNECTOR_REGISTRY: Dict[str, Type[Any]] = {}


def register_connector(name: str):
    """
    Decorator to register a connector class in the global registry.

    Args:
        name: The name to register the connector class under
    """
    def decorator(cls):
        CONNECTOR_REGISTRY[name] = cls
        return cls
    return decorator


def get_connector_class(name: str) -> Type[Any]:
    """
    Retrieve a connector class by name, case-insensitively.

    Raises:
        KeyError: If no connector class is registered under the name
    """
    for registered, cls in CONNECTOR_REGISTRY.items():
        if registered.lower() == name.lower():
            return cls
    raise KeyError(
        f"No connector class registered under name '{name}' "
        f"(known: {sorted(CONNECTOR_REGISTRY)})"
    )


def get_all_connectors() -> Dict[str, Type[Any]]:
    return CONNECTOR_REGISTRY.copy()
