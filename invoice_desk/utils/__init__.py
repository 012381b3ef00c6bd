"""
Utility Module for the Invoice Desk.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Exception hierarchy
    - File helpers
"""

from .logger import setup_logger, setup_logger_from_config, get_logger
from .helpers import ensure_directory, generate_timestamp, read_text_file, list_text_files

__all__ = [
    'setup_logger',
    'setup_logger_from_config',
    'get_logger',
    'ensure_directory',
    'generate_timestamp',
    'read_text_file',
    'list_text_files'
]
