# Path: artifact_fetcher/engine/extraction/__init__.py
"""
Extraction Module

Streaming tar demultiplexing for gzip-compressed artifact archives.

Use AsyncTarReader to walk the members of a decompressed tar stream.
"""

from artifact_fetcher.engine.extraction.tar_stream import (
    ArchiveEntry,
    AsyncTarReader,
)

__all__ = [
    'ArchiveEntry',
    'AsyncTarReader',
]
