# Path: artifact_fetcher/sources/base.py
"""
Artifact Source Definitions

Static description of where a family of prebuilt binaries is published
and how the per-platform target matrix is derived from a version string.

Architecture:
- ArtifactSource: naming templates + ordered platform list
- ArtifactTarget: one fully resolved (url, destination, entry) triple
- build_matrix(): pure function, no I/O, read-only result
"""

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

from artifact_fetcher.constants import DEFAULT_THIRD_PARTY_DIR
from artifact_fetcher.core.errors import ConfigurationError


@dataclass(frozen=True)
class ArtifactTarget:
    """
    One platform's artifact: where to fetch it and where to put it.

    Attributes:
        platform_key: Platform identifier, unique within a matrix
        archive_url: URL of the .tar.gz archive
        destination_path: Absolute path of the output file
        expected_entry_name: Archive entry holding the binary
    """
    platform_key: str
    archive_url: str
    destination_path: Path
    expected_entry_name: str


@dataclass(frozen=True)
class ArtifactSource:
    """
    Publishing scheme for one family of prebuilt binaries.

    Templates are str.format() patterns. `artifact_template` receives
    {version} and {platform}; `url_template` and `filename_template`
    receive {version} and {artifact}.

    Attributes:
        name: Source identifier used on the command line
        platforms: Ordered (platform_key, remote_platform) pairs
        artifact_template: Base artifact name
        url_template: Archive URL
        filename_template: Output file name
        destination_parts: Path components below the base directory
        expected_entry_name: Entry to materialize from each archive
    """
    name: str
    platforms: tuple[tuple[str, str], ...]
    artifact_template: str
    url_template: str
    filename_template: str
    destination_parts: tuple[str, ...]
    expected_entry_name: str


def build_matrix(
    source: ArtifactSource,
    version: Optional[str],
    base_dir: Union[str, Path, None] = None
) -> Mapping[str, ArtifactTarget]:
    """
    Build the target matrix for a source at a given version.

    Args:
        source: Artifact source description
        version: Version string to request (not format-validated)
        base_dir: Base output directory (defaults to ./third_party)

    Returns:
        Read-only mapping of platform key -> ArtifactTarget, in the
        source's platform order

    Raises:
        ConfigurationError: If version is missing or blank
    """
    if version is None or not str(version).strip():
        raise ConfigurationError(f"No version given for source '{source.name}'")

    version = str(version).strip()
    base = Path(base_dir) if base_dir is not None else Path(DEFAULT_THIRD_PARTY_DIR)
    destination_dir = base.joinpath(*source.destination_parts).absolute()

    matrix = {}
    for platform_key, remote_platform in source.platforms:
        artifact = source.artifact_template.format(version=version, platform=remote_platform)
        matrix[platform_key] = ArtifactTarget(
            platform_key=platform_key,
            archive_url=source.url_template.format(version=version, artifact=artifact),
            destination_path=destination_dir / source.filename_template.format(
                version=version, artifact=artifact
            ),
            expected_entry_name=source.expected_entry_name,
        )

    return MappingProxyType(matrix)


__all__ = ['ArtifactTarget', 'ArtifactSource', 'build_matrix']
