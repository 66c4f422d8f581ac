# Path: artifact_fetcher/sources/registry.py
"""
Source Registry

Central registry for artifact sources.
Maps source names to ArtifactSource descriptions.
"""

from artifact_fetcher.core.errors import ConfigurationError
from artifact_fetcher.sources.base import ArtifactSource
from artifact_fetcher.sources.duckdb import DUCKDB_SOURCE
from artifact_fetcher.sources.keytar import KEYTAR_SOURCE


# Source registry
_SOURCE_REGISTRY: dict[str, ArtifactSource] = {}


def register_source(source: ArtifactSource) -> None:
    """
    Register an artifact source.

    Args:
        source: ArtifactSource; replaces any source with the same name
    """
    _SOURCE_REGISTRY[source.name] = source


def get_source(name: str) -> ArtifactSource:
    """
    Get a registered source by name.

    Args:
        name: Source identifier

    Returns:
        ArtifactSource

    Raises:
        ConfigurationError: If no source with that name is registered
    """
    if name not in _SOURCE_REGISTRY:
        raise ConfigurationError(
            f"Source '{name}' not registered. "
            f"Available sources: {get_available_sources()}"
        )

    return _SOURCE_REGISTRY[name]


def get_available_sources() -> list[str]:
    """
    Get list of registered source names.

    Returns:
        Source names in registration order
    """
    return list(_SOURCE_REGISTRY.keys())


register_source(DUCKDB_SOURCE)
register_source(KEYTAR_SOURCE)


__all__ = ['register_source', 'get_source', 'get_available_sources']
