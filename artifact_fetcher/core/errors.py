# Path: artifact_fetcher/core/errors.py
"""
Fetch Error Hierarchy

Failure modes of the fetch -> decompress -> extract pipeline.
Every class carries a short `kind` string that ends up in FetchOutcome,
so callers can group failures without importing the classes.
"""

from pathlib import Path
from typing import Optional


class FetchError(RuntimeError):
    """Base exception for artifact fetch failures."""

    kind: str = 'fetch'


class NetworkError(FetchError):
    """Connection failure, timeout, broken payload or non-success HTTP status."""

    kind = 'network'

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class DecompressionError(FetchError):
    """Malformed, empty or truncated gzip stream."""

    kind = 'decompression'


class ArchiveFormatError(FetchError):
    """Malformed or truncated tar stream."""

    kind = 'archive_format'


class FilesystemError(FetchError):
    """Destination file could not be created, written, closed or renamed."""

    kind = 'filesystem'

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ConfigurationError(FetchError):
    """Required input (version, source name) is missing or invalid."""

    kind = 'configuration'


__all__ = [
    'FetchError',
    'NetworkError',
    'DecompressionError',
    'ArchiveFormatError',
    'FilesystemError',
    'ConfigurationError',
]
