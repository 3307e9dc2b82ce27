"""
Config module exports - Centralized imports for configuration functionality.
"""

from .config import Settings, ensure_env_file, get_settings, reset_settings

__all__ = [
    'Settings',
    'ensure_env_file',
    'get_settings',
    'reset_settings',
]
