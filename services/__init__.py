"""
Services module exports.
"""

from .gateway import create_app
from .service import GatewayService

__all__ = [
    'create_app',
    'GatewayService',
]
