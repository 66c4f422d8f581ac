# Path: artifact_fetcher/sources/duckdb.py
"""DuckDB Node bindings published on the duckdb-node S3 bucket."""

from artifact_fetcher.sources.base import ArtifactSource

SOURCE_DUCKDB: str = 'duckdb'

DUCKDB_SOURCE = ArtifactSource(
    name=SOURCE_DUCKDB,
    platforms=(
        ('darwin-arm64', 'darwin-arm64'),
        ('darwin-x64', 'darwin-x64'),
        ('linux-x64', 'linux-x64'),
        ('win32-x64', 'win32-x64'),
    ),
    artifact_template='duckdb-v{version}-node-v93-{platform}',
    url_template='https://duckdb-node.s3.amazonaws.com/{artifact}.tar.gz',
    filename_template='{artifact}.node',
    destination_parts=('github.com', 'duckdb', 'duckdb'),
    # node-pre-gyp packs the binding under its module path; match on basename
    expected_entry_name='duckdb.node',
)

__all__ = ['SOURCE_DUCKDB', 'DUCKDB_SOURCE']
