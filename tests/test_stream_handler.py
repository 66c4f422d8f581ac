# Path: tests/test_stream_handler.py
"""
Unit tests for the streaming stages.

Tests:
- gunzip_stream: bounded output, multi-member input, error cases
- StreamHandler: atomic write, permission bits, cleanup on failure,
  long destination names
"""

import asyncio
import gzip
import os
import stat

import pytest

from artifact_fetcher.core.errors import (
    ArchiveFormatError,
    DecompressionError,
    FilesystemError,
)
from artifact_fetcher.engine.stream_handler import StreamHandler, gunzip_stream

from tests.helpers import chunked


async def gunzip_all(data: bytes, input_size: int, chunk_size: int) -> list[bytes]:
    return [piece async for piece in gunzip_stream(chunked(data, input_size), chunk_size)]


# ============================================================================
# gunzip_stream
# ============================================================================

def test_gunzip_output_is_bounded():
    """Test a highly compressible body never yields oversized pieces."""
    plain = b'0' * 1_000_000
    compressed = gzip.compress(plain)

    pieces = asyncio.run(gunzip_all(compressed, len(compressed), 1024))

    assert b''.join(pieces) == plain
    assert max(len(p) for p in pieces) <= 1024, "Decompressed piece exceeded chunk size"


@pytest.mark.parametrize('input_size', [1, 3, 100])
def test_gunzip_small_input_chunks(input_size):
    """Test decoding is independent of how the compressed bytes arrive."""
    plain = os.urandom(3000) + b'abc' * 2000
    compressed = gzip.compress(plain)

    pieces = asyncio.run(gunzip_all(compressed, input_size, 512))

    assert b''.join(pieces) == plain


def test_gunzip_multiple_members_and_padding():
    """Test concatenated members decode in sequence, NUL padding ignored."""
    compressed = gzip.compress(b'first|') + gzip.compress(b'second') + b'\x00' * 40

    pieces = asyncio.run(gunzip_all(compressed, 5, 4096))

    assert b''.join(pieces) == b'first|second'


def test_gunzip_truncated_stream():
    """Test a body missing its gzip trailer."""
    compressed = gzip.compress(b'payload' * 100)

    with pytest.raises(DecompressionError, match='Truncated'):
        asyncio.run(gunzip_all(compressed[:-6], 16, 4096))


def test_gunzip_empty_body():
    """Test an empty body is not a valid archive."""
    with pytest.raises(DecompressionError, match='Empty'):
        asyncio.run(gunzip_all(b'', 16, 4096))


def test_gunzip_not_gzip():
    """Test a body that is not gzip at all."""
    with pytest.raises(DecompressionError) as excinfo:
        asyncio.run(gunzip_all(b'<html>Not Found</html>', 64, 4096))

    assert excinfo.value.kind == 'decompression'


# ============================================================================
# StreamHandler
# ============================================================================

def test_stream_to_file_writes_bytes_and_mode(tmp_path):
    """Test content, exact permission bits and the returned byte count."""
    output = tmp_path / 'nested' / 'dir' / 'tool.node'
    data = os.urandom(10_000)

    handler = StreamHandler(log_interval=2)
    written = asyncio.run(handler.stream_to_file(chunked(data, 333), output, mode=0o100755))

    assert written == len(data)
    assert output.read_bytes() == data
    assert stat.S_IMODE(output.stat().st_mode) == 0o755
    assert os.listdir(output.parent) == ['tool.node'], "Temporary file left behind"


def test_stream_to_file_restrictive_mode(tmp_path):
    """Test modes narrower than the umask default are kept as recorded."""
    output = tmp_path / 'secret.bin'

    asyncio.run(StreamHandler().stream_to_file(chunked(b'abc', 1), output, mode=0o600))

    assert stat.S_IMODE(output.stat().st_mode) == 0o600


def test_stream_to_file_source_failure_leaves_nothing(tmp_path):
    """Test an upstream error removes the partial file and propagates."""
    output = tmp_path / 'tool.node'

    async def failing_chunks():
        yield b'first part'
        raise ArchiveFormatError('Truncated tar stream while reading tool.node')

    with pytest.raises(ArchiveFormatError):
        asyncio.run(StreamHandler().stream_to_file(failing_chunks(), output, mode=0o755))

    assert not output.exists()
    assert os.listdir(tmp_path) == []


def test_stream_to_file_never_overwrites(tmp_path):
    """Test a destination created mid-write is left untouched."""
    output = tmp_path / 'tool.node'

    async def racing_chunks():
        yield b'new content'
        output.write_bytes(b'other writer')

    with pytest.raises(FilesystemError) as excinfo:
        asyncio.run(StreamHandler().stream_to_file(racing_chunks(), output, mode=0o644))

    assert excinfo.value.path == output
    assert output.read_bytes() == b'other writer'
    assert os.listdir(tmp_path) == ['tool.node']


def test_stream_to_file_unwritable_directory(tmp_path):
    """Test a parent that is a regular file surfaces as FilesystemError."""
    blocker = tmp_path / 'blocker'
    blocker.write_bytes(b'')

    with pytest.raises(FilesystemError) as excinfo:
        asyncio.run(StreamHandler().stream_to_file(chunked(b'x', 1), blocker / 'tool.node', mode=0o644))

    assert excinfo.value.kind == 'filesystem'


def test_stream_to_file_long_destination_name(tmp_path):
    """Test a name near the filesystem limit still gets a usable temporary file."""
    name = 'a' * 245 + '.node'
    output = tmp_path / name

    written = asyncio.run(StreamHandler().stream_to_file(chunked(b'binary', 2), output, mode=0o644))

    assert written == len(b'binary')
    assert output.read_bytes() == b'binary'
    assert os.listdir(tmp_path) == [name]
