# Path: artifact_fetcher/core/__init__.py
"""
Fetcher Core Module

Core utilities for the artifact fetcher: configuration,
logging and the error hierarchy.
"""

from .config_loader import ConfigLoader
from .logger import get_logger, configure_logging
from .errors import (
    FetchError,
    NetworkError,
    DecompressionError,
    ArchiveFormatError,
    FilesystemError,
    ConfigurationError,
)

__all__ = [
    'ConfigLoader',
    'get_logger',
    'configure_logging',
    'FetchError',
    'NetworkError',
    'DecompressionError',
    'ArchiveFormatError',
    'FilesystemError',
    'ConfigurationError',
]
