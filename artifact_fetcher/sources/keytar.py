# Path: artifact_fetcher/sources/keytar.py
"""node-keytar N-API prebuilds published as GitHub release assets."""

from artifact_fetcher.sources.base import ArtifactSource

SOURCE_KEYTAR: str = 'keytar'

KEYTAR_SOURCE = ArtifactSource(
    name=SOURCE_KEYTAR,
    platforms=(
        ('linux-x64', 'linux-x64'),
        ('linux-arm64', 'linux-arm64'),
        ('linux-armhf', 'linux-ia32'),
        ('alpine-x64', 'linuxmusl-x64'),
        ('alpine-arm64', 'linuxmusl-arm64'),
        ('darwin-x64', 'darwin-x64'),
        ('darwin-arm64', 'darwin-arm64'),
        ('win32-x64', 'win32-x64'),
    ),
    artifact_template='keytar-v{version}-napi-v3-{platform}',
    url_template='https://github.com/atom/node-keytar/releases/download/v{version}/{artifact}.tar.gz',
    filename_template='{artifact}.node',
    destination_parts=('github.com', 'atom', 'node-keytar'),
    expected_entry_name='build/Release/keytar.node',
)

__all__ = ['SOURCE_KEYTAR', 'KEYTAR_SOURCE']
