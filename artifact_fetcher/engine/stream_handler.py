# Path: artifact_fetcher/engine/stream_handler.py
"""
Stream Handler

Memory-efficient streaming stages between the HTTP body and the disk.

Architecture:
- gunzip_stream(): lazy gzip decoding with bounded output per step
- StreamHandler: writes one archive entry to disk through a temporary
  file and renames it into place only once the entry stream has ended
- Async file I/O via aiofiles
"""

import os
import uuid
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import AsyncIterable, AsyncIterator, Iterator, Optional

import aiofiles
import aiofiles.os

from artifact_fetcher.core.config_loader import ConfigLoader
from artifact_fetcher.core.errors import DecompressionError, FilesystemError
from artifact_fetcher.core.logger import get_logger
from artifact_fetcher.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_LOG_PROGRESS_INTERVAL,
    LOG_PROCESS,
)
from artifact_fetcher.engine.constants import (
    PARTIAL_FILE_PREFIX,
    PARTIAL_FILE_SUFFIX,
    EXCLUSIVE_WRITE_MODE,
)
from artifact_fetcher.engine.extraction.constants import (
    GZIP_WBITS,
    GZIP_PADDING_BYTE,
    MODE_PERMISSION_MASK,
)

logger = get_logger(__name__, 'engine')


async def gunzip_stream(
    chunks: AsyncIterable[bytes],
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> AsyncIterator[bytes]:
    """
    Decode a gzip byte stream lazily.

    No output piece is larger than chunk_size, however compressible the
    input is. Concatenated gzip members are decoded in sequence and NUL
    padding after the last member is ignored.

    Args:
        chunks: Async iterable of compressed bytes
        chunk_size: Maximum size of each decompressed piece

    Yields:
        Decompressed bytes in stream order

    Raises:
        DecompressionError: If the stream is empty, corrupt or truncated
    """
    decoder = zlib.decompressobj(GZIP_WBITS)
    received = 0

    async for chunk in chunks:
        if not chunk:
            continue
        received += len(chunk)

        data = chunk
        while data:
            if decoder.eof:
                # Start of a further gzip member, or trailing padding
                data = data.lstrip(GZIP_PADDING_BYTE)
                if not data:
                    break
                decoder = zlib.decompressobj(GZIP_WBITS)

            try:
                out = decoder.decompress(data, chunk_size)
            except zlib.error as e:
                raise DecompressionError(f"Invalid gzip data after {received} bytes: {e}") from e

            if out:
                yield out

            if decoder.eof:
                data = decoder.unused_data
            elif decoder.unconsumed_tail:
                data = decoder.unconsumed_tail
            elif len(out) == chunk_size:
                # Output was capped; zlib may still hold decoded bytes
                data = b''
                while not decoder.eof:
                    try:
                        out = decoder.decompress(b'', chunk_size)
                    except zlib.error as e:
                        raise DecompressionError(f"Invalid gzip data: {e}") from e
                    if not out:
                        break
                    yield out
                if decoder.eof:
                    data = decoder.unused_data
            else:
                data = b''

    if received == 0:
        raise DecompressionError("Empty response body")

    if not decoder.eof:
        raise DecompressionError(f"Truncated gzip stream after {received} bytes")


@contextmanager
def filesystem_errors(action: str, path: Path) -> Iterator[None]:
    """Translate OSError raised by a filesystem step into FilesystemError."""
    try:
        yield
    except OSError as e:
        raise FilesystemError(f"Cannot {action} {path}: {e}", path=path) from e


class StreamHandler:
    """
    Streams archive entry data to disk.

    Bytes are appended to a hidden temporary file beside the destination.
    After the last chunk the file is closed, given the entry's permission
    bits and renamed over the destination path. Any failure removes the
    temporary file, so the destination is either absent or complete.

    Example:
        handler = StreamHandler()
        bytes_written = await handler.stream_to_file(
            entry,
            Path('third_party/github.com/duckdb/duckdb/duckdb-v1.0.0-node-v93-linux-x64.node'),
            mode=entry.mode
        )
    """

    def __init__(
        self,
        log_interval: Optional[int] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize stream handler.

        Args:
            log_interval: Log progress every N chunks
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

        self.log_interval = log_interval if log_interval is not None else \
            self.config.get('log_progress_interval', DEFAULT_LOG_PROGRESS_INTERVAL)

    async def stream_to_file(
        self,
        chunks: AsyncIterable[bytes],
        output_path: Path,
        mode: int
    ) -> int:
        """
        Stream chunks into output_path.

        Args:
            chunks: Async iterable of bytes, written in arrival order
            output_path: Final destination path
            mode: Permission bits for the finished file

        Returns:
            Total bytes written

        Raises:
            FilesystemError: If the file cannot be created, written or renamed
            (errors raised by `chunks` propagate unchanged)
        """
        permissions = mode & MODE_PERMISSION_MASK
        temp_path = output_path.with_name(
            f"{PARTIAL_FILE_PREFIX}{uuid.uuid4().hex}{PARTIAL_FILE_SUFFIX}"
        )

        logger.info(f"{LOG_PROCESS} Streaming to: {output_path.name} (mode {oct(permissions)})")

        with filesystem_errors('create directory', output_path.parent):
            output_path.parent.mkdir(parents=True, exist_ok=True)

        bytes_written = 0
        chunks_written = 0
        committed = False

        try:
            with filesystem_errors('create', temp_path):
                handle = await aiofiles.open(
                    temp_path,
                    EXCLUSIVE_WRITE_MODE,
                    opener=lambda path, flags: os.open(path, flags, permissions)
                )

            try:
                async for chunk in chunks:
                    if not chunk:
                        continue
                    with filesystem_errors('write', temp_path):
                        await handle.write(chunk)
                    bytes_written += len(chunk)
                    chunks_written += 1

                    if self.log_interval and chunks_written % self.log_interval == 0:
                        logger.debug(f"{LOG_PROCESS} Written: {bytes_written} bytes to {output_path.name}")
            finally:
                with filesystem_errors('close', temp_path):
                    await handle.close()

            # os.open() applies the umask; set the recorded bits exactly
            with filesystem_errors('set permissions on', temp_path):
                os.chmod(temp_path, permissions)

            if os.path.lexists(output_path):
                raise FilesystemError(f"Destination appeared during fetch: {output_path}", path=output_path)

            with filesystem_errors('rename into place', output_path):
                await aiofiles.os.replace(temp_path, output_path)
            committed = True

        finally:
            if not committed:
                await self._discard(temp_path)

        logger.info(
            f"{LOG_PROCESS} Stream complete: {bytes_written} bytes "
            f"in {chunks_written} chunks"
        )

        return bytes_written

    async def _discard(self, temp_path: Path) -> None:
        """Remove a temporary file left by a failed write."""
        try:
            await aiofiles.os.remove(temp_path)
            logger.debug(f"{LOG_PROCESS} Removed partial file: {temp_path.name}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Cannot remove partial file {temp_path}: {e}")


__all__ = ['gunzip_stream', 'filesystem_errors', 'StreamHandler']
