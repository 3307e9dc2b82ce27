from .base import BaseInterface
from .storage import StorageInterface

__all__ = [
    "BaseInterface",
    "StorageInterface",
]
