# Path: artifact_fetcher/sources/__init__.py
"""Sources Module - Per-Project Artifact Publishing Schemes"""

from .base import ArtifactTarget, ArtifactSource, build_matrix
from .registry import register_source, get_source, get_available_sources
from .duckdb import DUCKDB_SOURCE
from .keytar import KEYTAR_SOURCE

__all__ = [
    'ArtifactTarget',
    'ArtifactSource',
    'build_matrix',
    'register_source',
    'get_source',
    'get_available_sources',
    'DUCKDB_SOURCE',
    'KEYTAR_SOURCE',
]
