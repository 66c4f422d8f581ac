# Path: tests/helpers.py
"""
Shared test helpers.

- build_tar / build_tar_gz: in-memory archives built with tarfile
- chunked: async chunk source over a bytes object
- ArchiveServer: local aiohttp server serving archives by path
"""

import gzip
import io
import tarfile
from typing import AsyncIterator, Optional

from aiohttp import web
from aiohttp.test_utils import TestServer


def build_tar(members: list, tar_format: int = tarfile.PAX_FORMAT) -> bytes:
    """
    Build a tar archive in memory.

    Args:
        members: (name, data, mode) tuples; data None makes a directory
        tar_format: tarfile format constant

    Returns:
        Uncompressed tar bytes
    """
    buffer = io.BytesIO()

    with tarfile.open(fileobj=buffer, mode='w', format=tar_format) as archive:
        for name, data, mode in members:
            info = tarfile.TarInfo(name)
            info.mode = mode
            if data is None:
                info.type = tarfile.DIRTYPE
                archive.addfile(info)
            else:
                info.size = len(data)
                archive.addfile(info, io.BytesIO(data))

    return buffer.getvalue()


def build_tar_gz(members: list, tar_format: int = tarfile.PAX_FORMAT) -> bytes:
    """Build a gzip-compressed tar archive in memory."""
    return gzip.compress(build_tar(members, tar_format))


async def chunked(data: bytes, size: int) -> AsyncIterator[bytes]:
    """Yield data in pieces of at most `size` bytes."""
    for start in range(0, len(data), size):
        yield data[start:start + size]


class ArchiveServer:
    """
    Local HTTP server for archive fixtures.

    Paths not in `routes` answer 404. Bodies are streamed with chunked
    transfer encoding in pieces of `write_size` bytes.

    Example:
        async with ArchiveServer({'/a.tar.gz': body}) as server:
            url = server.url('/a.tar.gz')
    """

    def __init__(self, routes: dict[str, bytes], write_size: Optional[int] = None):
        self.routes = routes
        self.write_size = write_size
        self.requests: list[str] = []
        self._server: Optional[TestServer] = None

    def url(self, path: str) -> str:
        return str(self._server.make_url(path))

    async def _handle(self, request: web.Request) -> web.StreamResponse:
        self.requests.append(request.path)

        if request.path not in self.routes:
            return web.Response(status=404, text='Not Found')

        body = self.routes[request.path]
        response = web.StreamResponse(status=200)
        response.content_type = 'application/gzip'
        await response.prepare(request)

        step = self.write_size or max(len(body), 1)
        for start in range(0, len(body), step):
            await response.write(body[start:start + step])

        await response.write_eof()
        return response

    async def __aenter__(self) -> 'ArchiveServer':
        app = web.Application()
        app.router.add_get('/{tail:.*}', self._handle)
        self._server = TestServer(app)
        await self._server.start_server()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self._server.close()
