"""
Utils module exports - Centralized imports for utility functionality.
"""

from .content_types import get_mimetype_for_extension, get_mimetype_for_file, resolve_extension
from .logging import get_level_from_config, get_logger, get_logger_from_config
from .naming import generate_random_filename

__all__ = [
    'get_mimetype_for_extension',
    'get_mimetype_for_file',
    'resolve_extension',
    'get_logger',
    'get_level_from_config',
    'get_logger_from_config',
    'generate_random_filename',
]
