"""
Utility modules.

This package contains shared utility functions and configurations:
- File I/O operations and backup utilities
- Logging configuration
- Environment configuration
- Shared constants
"""

from .file_operations import FileHandler
from .logging_config import setup_logging, get_logger
from .config import EngineConfig, load_config
from .constants import (
    SubtitleFormat,
    SUBTITLE_EXTENSIONS,
    UTF8_BOM,
    DEFAULT_MAX_CHARS_PER_LINE,
    DEFAULT_MIN_DURATION_MS,
    DEFAULT_MAX_DURATION_MS,
    DEFAULT_MIN_GAP_MS,
    DEFAULT_ASS_HEADER,
    BACKUP_DIR_NAME,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_DATE_FORMAT,
    APP_NAME,
    APP_VERSION,
    APP_DESCRIPTION,
)

__all__ = [
    'FileHandler',
    'setup_logging',
    'get_logger',
    'EngineConfig',
    'load_config',
    'SubtitleFormat',
    'SUBTITLE_EXTENSIONS',
    'UTF8_BOM',
    'DEFAULT_MAX_CHARS_PER_LINE',
    'DEFAULT_MIN_DURATION_MS',
    'DEFAULT_MAX_DURATION_MS',
    'DEFAULT_MIN_GAP_MS',
    'DEFAULT_ASS_HEADER',
    'BACKUP_DIR_NAME',
    'DEFAULT_LOG_FORMAT',
    'DEFAULT_LOG_DATE_FORMAT',
    'APP_NAME',
    'APP_VERSION',
    'APP_DESCRIPTION',
]
