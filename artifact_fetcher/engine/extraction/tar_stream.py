# Path: artifact_fetcher/engine/extraction/tar_stream.py
"""
Streaming Tar Reader

Pull-based tar demultiplexer over an async stream of byte chunks.
Yields ArchiveEntry objects in archive order; each entry is itself an
async iterator over its data, read straight from the shared buffer.

Architecture:
- Header parsing delegated to tarfile.TarInfo.frombuf (checksum verified)
- GNU long names and PAX extended headers resolved before the entry is yielded
- Entries left partly read are drained before the next header is parsed
- Memory bounded by one upstream chunk plus one 512-byte block

Example:
    reader = AsyncTarReader(gunzip_stream(body))
    async for entry in reader:
        if entry.name == 'duckdb.node':
            async for chunk in entry:
                ...
        else:
            await entry.drain()
"""

import tarfile
from typing import AsyncGenerator, AsyncIterable, AsyncIterator, Optional

from artifact_fetcher.core.errors import ArchiveFormatError
from artifact_fetcher.core.logger import get_logger
from artifact_fetcher.constants import LOG_PROCESS
from artifact_fetcher.engine.extraction.constants import (
    TAR_BLOCK_SIZE,
    TAR_ZERO_BLOCK,
    TAR_ENCODING,
    TAR_ERRORS,
    PAX_PATH,
    PAX_SIZE,
)

logger = get_logger(__name__, 'extraction')

_PAX_TYPES = (tarfile.XHDTYPE, tarfile.XGLTYPE, tarfile.SOLARIS_XHDTYPE)
_GNU_NAME_TYPES = (tarfile.GNUTYPE_LONGNAME, tarfile.GNUTYPE_LONGLINK)


class ArchiveEntry:
    """
    One member of a tar stream.

    Iterating yields the member's data in arrival order. The entry
    shares its reader's buffer, so it is only valid until the reader
    moves on to the next member.

    Attributes:
        name: Member path as recorded in the archive
        mode: Permission bits recorded in the archive
        size: Number of data bytes that follow the header
        type: Tar type flag (tarfile.REGTYPE, tarfile.DIRTYPE, ...)
    """

    def __init__(self, reader: 'AsyncTarReader', name: str, mode: int, size: int, type_flag: bytes):
        self.name = name
        self.mode = mode
        self.size = size
        self.type = type_flag
        self._reader = reader
        self._remaining = size

    @property
    def remaining(self) -> int:
        """Data bytes not consumed yet."""
        return self._remaining

    def is_file(self) -> bool:
        """Whether the member is a regular file."""
        return self.type in tarfile.REGULAR_TYPES

    def __aiter__(self) -> 'ArchiveEntry':
        return self

    async def __anext__(self) -> bytes:
        if self._remaining <= 0:
            raise StopAsyncIteration

        chunk = await self._reader._read_some(self._remaining, self.name)
        self._remaining -= len(chunk)
        return chunk

    async def drain(self) -> int:
        """
        Consume and discard the remaining data.

        Returns:
            Number of bytes discarded
        """
        drained = 0
        async for chunk in self:
            drained += len(chunk)
        return drained

    def __repr__(self) -> str:
        return f"ArchiveEntry(name={self.name!r}, mode={oct(self.mode)}, size={self.size})"


class AsyncTarReader:
    """
    Async tar demultiplexer.

    Accepts any async iterable of decompressed bytes. Iterating the
    reader yields one ArchiveEntry per file-like member (GNU long-name
    and PAX header members are folded into the entry they describe).

    Raises ArchiveFormatError for corrupt or truncated input.
    """

    def __init__(self, chunks: AsyncIterable[bytes], encoding: str = TAR_ENCODING):
        """
        Initialize tar reader.

        Args:
            chunks: Async iterable of decompressed tar bytes
            encoding: Encoding used for ustar/GNU member names
        """
        self._source = chunks.__aiter__()
        self._buffer = bytearray()
        self._exhausted = False
        self._encoding = encoding
        self.bytes_read = 0
        self.entries_read = 0
        self._entries: Optional[AsyncGenerator[ArchiveEntry, None]] = None

    def __aiter__(self) -> AsyncIterator[ArchiveEntry]:
        if self._entries is None:
            self._entries = self._iterate_entries()
        return self._entries

    async def aclose(self) -> None:
        """
        Close the entry iterator and the upstream chunk source.

        Use with contextlib.aclosing() so generator stages are finalized
        before the underlying response is released.
        """
        if self._entries is not None:
            await self._entries.aclose()

        close_source = getattr(self._source, 'aclose', None)
        if close_source is not None:
            await close_source()

    async def _iterate_entries(self) -> AsyncIterator[ArchiveEntry]:
        long_name: Optional[str] = None
        pax_headers: dict[str, str] = {}
        global_headers: dict[str, str] = {}

        while True:
            block = await self._read_block()

            if block is None:
                if self.bytes_read == 0:
                    raise ArchiveFormatError("Empty tar stream")
                break

            if block == TAR_ZERO_BLOCK:
                logger.debug(f"{LOG_PROCESS} End-of-archive marker after {self.entries_read} entries")
                break

            info = self._parse_header(block)

            if info.type in _GNU_NAME_TYPES:
                data = await self._read_exact(self._padded(info.size), info.name)
                if info.type == tarfile.GNUTYPE_LONGNAME:
                    long_name = self._decode_name(data[:info.size])
                continue

            if info.type in _PAX_TYPES:
                data = await self._read_exact(self._padded(info.size), info.name)
                records = self._parse_pax(data[:info.size])
                if info.type == tarfile.XGLTYPE:
                    global_headers.update(records)
                else:
                    pax_headers.update(records)
                continue

            if info.type == tarfile.GNUTYPE_SPARSE:
                raise ArchiveFormatError(f"GNU sparse member not supported: {info.name}")

            headers = {**global_headers, **pax_headers}
            name = headers.get(PAX_PATH) or long_name or info.name
            size = self._pax_size(headers, info.size)
            long_name = None
            pax_headers = {}

            # Same rule as tarfile: only regular and unknown members carry data
            data_size = size if info.isreg() or info.type not in tarfile.SUPPORTED_TYPES else 0

            entry = ArchiveEntry(
                self,
                name.rstrip('/') if info.isdir() else name,
                info.mode,
                data_size,
                info.type
            )
            self.entries_read += 1
            yield entry

            if entry.remaining:
                await entry.drain()
            await self._skip(self._padded(data_size) - data_size)

        await self._drain_source()

    def _parse_header(self, block: bytes) -> tarfile.TarInfo:
        try:
            return tarfile.TarInfo.frombuf(block, self._encoding, TAR_ERRORS)
        except tarfile.HeaderError as e:
            raise ArchiveFormatError(
                f"Invalid tar header after {self.entries_read} entries: {e}"
            ) from e

    def _decode_name(self, data: bytes) -> str:
        return data.split(b'\x00', 1)[0].decode(self._encoding, TAR_ERRORS)

    def _parse_pax(self, data: bytes) -> dict[str, str]:
        """Parse '<length> <keyword>=<value>\\n' records."""
        records = {}
        pos = 0

        while pos < len(data) and data[pos] != 0:
            space = data.find(b' ', pos)
            try:
                length = int(data[pos:space]) if space != -1 else 0
            except ValueError:
                length = 0

            end = pos + length
            if length <= 0 or end > len(data) or data[end - 1:end] != b'\n':
                raise ArchiveFormatError(f"Malformed PAX record at offset {pos}")

            keyword, sep, value = data[space + 1:end - 1].partition(b'=')
            if not sep:
                raise ArchiveFormatError(f"Malformed PAX record at offset {pos}")

            # PAX records are always UTF-8
            records[keyword.decode('utf-8', TAR_ERRORS)] = value.decode('utf-8', TAR_ERRORS)
            pos = end

        return records

    def _pax_size(self, headers: dict[str, str], default: int) -> int:
        if PAX_SIZE not in headers:
            return default
        try:
            return int(headers[PAX_SIZE])
        except ValueError as e:
            raise ArchiveFormatError(f"Invalid PAX size: {headers[PAX_SIZE]!r}") from e

    @staticmethod
    def _padded(size: int) -> int:
        """Round size up to a whole number of tar blocks."""
        return -(-size // TAR_BLOCK_SIZE) * TAR_BLOCK_SIZE

    async def _pull(self) -> bool:
        """
        Append the next non-empty upstream chunk to the buffer.

        Returns:
            False once the upstream is exhausted
        """
        if self._exhausted:
            return False

        async for chunk in self._source:
            if chunk:
                self._buffer += chunk
                self.bytes_read += len(chunk)
                return True

        self._exhausted = True
        return False

    async def _read_block(self) -> Optional[bytes]:
        """Read one header block; None on a clean end of stream."""
        while len(self._buffer) < TAR_BLOCK_SIZE:
            if not await self._pull():
                if self._buffer:
                    raise ArchiveFormatError(
                        f"Truncated tar header ({len(self._buffer)} of {TAR_BLOCK_SIZE} bytes)"
                    )
                return None

        block = bytes(self._buffer[:TAR_BLOCK_SIZE])
        del self._buffer[:TAR_BLOCK_SIZE]
        return block

    async def _read_exact(self, size: int, what: str) -> bytes:
        while len(self._buffer) < size:
            if not await self._pull():
                raise ArchiveFormatError(f"Truncated tar stream while reading {what}")

        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    async def _read_some(self, limit: int, what: str) -> bytes:
        """Return between 1 and `limit` bytes of member data."""
        if not self._buffer and not await self._pull():
            raise ArchiveFormatError(f"Truncated tar stream while reading {what}")

        take = min(limit, len(self._buffer))
        data = bytes(self._buffer[:take])
        del self._buffer[:take]
        return data

    async def _skip(self, size: int) -> None:
        while size > 0:
            size -= len(await self._read_some(size, 'block padding'))

    async def _drain_source(self) -> None:
        """Consume whatever follows the archive so upstream errors still surface."""
        self._buffer.clear()
        while await self._pull():
            self._buffer.clear()


__all__ = ['ArchiveEntry', 'AsyncTarReader']
