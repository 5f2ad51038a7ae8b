"""
Utilities module for pegrid.

This module provides helper functions and configuration management
for the pegrid package.
"""

from .config_manager import ConfigManager, DEFAULT_CONFIG
from .helpers import (
    update_dict_recursively,
    ensure_directory,
    validate_array_shape,
)

__all__ = [
    'ConfigManager',
    'DEFAULT_CONFIG',
    'update_dict_recursively',
    'ensure_directory',
    'validate_array_shape',
]
