# Path: tests/test_tar_stream.py
"""
Unit tests for the streaming tar reader.

Tests:
- Entry order, names, modes and data
- Chunk boundary independence
- GNU and PAX long names
- Partly read and unread entries
- Closing the reader closes its chunk source
- Corrupt, truncated and empty input
"""

import asyncio
import tarfile
from contextlib import aclosing

import pytest

from artifact_fetcher.core.errors import ArchiveFormatError
from artifact_fetcher.engine.extraction import AsyncTarReader

from tests.helpers import build_tar, chunked


async def collect(reader: AsyncTarReader) -> list:
    """Read every entry fully; return (name, mode, is_file, data) tuples."""
    entries = []
    async for entry in reader:
        data = b''.join([chunk async for chunk in entry])
        entries.append((entry.name, entry.mode, entry.is_file(), data))
    return entries


MEMBERS = [
    ('a.txt', b'alpha\n', 0o644),
    ('bin/', None, 0o755),
    ('bin/target.bin', bytes(range(256)) * 9, 0o755),
    ('b.txt', b'', 0o600),
]


def test_entries_in_archive_order():
    """Test every member is yielded once, in order, with its metadata."""
    archive = build_tar(MEMBERS)

    entries = asyncio.run(collect(AsyncTarReader(chunked(archive, len(archive)))))

    assert [e[0] for e in entries] == ['a.txt', 'bin', 'bin/target.bin', 'b.txt']
    assert entries[0] == ('a.txt', 0o644, True, b'alpha\n')
    assert entries[1][2] is False, "Directory must not report as a file"
    assert entries[2] == ('bin/target.bin', 0o755, True, bytes(range(256)) * 9)
    assert entries[3][3] == b''


@pytest.mark.parametrize('chunk_size', [1, 7, 511, 513, 4096])
def test_chunk_boundaries_do_not_matter(chunk_size):
    """Test output is identical however the input is split."""
    archive = build_tar(MEMBERS)

    expected = asyncio.run(collect(AsyncTarReader(chunked(archive, len(archive)))))
    actual = asyncio.run(collect(AsyncTarReader(chunked(archive, chunk_size))))

    assert actual == expected


@pytest.mark.parametrize('tar_format', [tarfile.GNU_FORMAT, tarfile.PAX_FORMAT, tarfile.USTAR_FORMAT])
def test_long_names(tar_format):
    """Test names longer than the 100-byte header field."""
    long_name = 'd' * 70 + '/' + 'f' * 70 + '.node'
    archive = build_tar([(long_name, b'payload', 0o755), ('after.txt', b'x', 0o644)], tar_format)

    entries = asyncio.run(collect(AsyncTarReader(chunked(archive, 100))))

    assert [e[0] for e in entries] == [long_name, 'after.txt']
    assert entries[0][3] == b'payload'


def test_unread_and_partly_read_entries_are_skipped():
    """Test the reader realigns when the consumer abandons an entry."""
    archive = build_tar(MEMBERS)

    async def read_names_only():
        names = []
        async for entry in AsyncTarReader(chunked(archive, 64)):
            names.append(entry.name)
            if entry.name == 'bin/target.bin':
                first = await entry.__anext__()
                assert first, "Expected some data before abandoning the entry"
        return names

    names = asyncio.run(read_names_only())
    assert names == ['a.txt', 'bin', 'bin/target.bin', 'b.txt']


def test_drain_reports_discarded_bytes():
    """Test drain() consumes exactly the entry's data."""
    archive = build_tar(MEMBERS)

    async def drain_all():
        sizes = []
        async for entry in AsyncTarReader(chunked(archive, 300)):
            sizes.append(await entry.drain())
            assert entry.remaining == 0
        return sizes

    assert asyncio.run(drain_all()) == [6, 0, 2304, 0]


def test_archive_without_members():
    """Test an archive holding only the end marker yields nothing."""
    archive = build_tar([])

    reader = AsyncTarReader(chunked(archive, 512))
    entries = asyncio.run(collect(reader))

    assert entries == []
    assert reader.bytes_read == len(archive), "Trailing blocks must still be consumed"


def test_empty_stream_is_error():
    """Test zero bytes is not a valid archive."""
    with pytest.raises(ArchiveFormatError, match='Empty'):
        asyncio.run(collect(AsyncTarReader(chunked(b'', 512))))


def test_truncated_entry_data_is_error():
    """Test a stream ending inside member data."""
    archive = build_tar([('big.bin', b'z' * 5000, 0o644)])

    with pytest.raises(ArchiveFormatError, match='Truncated'):
        asyncio.run(collect(AsyncTarReader(chunked(archive[:2048], 256))))


def test_truncated_header_is_error():
    """Test a stream ending inside a header block."""
    archive = build_tar([('a.txt', b'alpha', 0o644)])

    with pytest.raises(ArchiveFormatError, match='Truncated tar header'):
        asyncio.run(collect(AsyncTarReader(chunked(archive[:300], 64))))


def test_corrupt_header_is_error():
    """Test a header with a bad checksum."""
    archive = bytearray(build_tar([('a.txt', b'alpha', 0o644)]))
    archive[0:5] = b'XXXXX'

    with pytest.raises(ArchiveFormatError, match='Invalid tar header'):
        asyncio.run(collect(AsyncTarReader(chunked(bytes(archive), 512))))


def test_aclose_finalizes_chunk_source():
    """Test leaving an aclosing() block early closes the upstream generator."""
    archive = build_tar(MEMBERS)
    closed = []

    async def source():
        try:
            async for chunk in chunked(archive, 512):
                yield chunk
        finally:
            closed.append(True)

    async def read_first_entry():
        async with aclosing(AsyncTarReader(source())) as reader:
            async for entry in reader:
                first = entry.name
                break
        # Checked before asyncio.run() finalizes leftover generators
        return first, list(closed)

    assert asyncio.run(read_first_entry()) == ('a.txt', [True])
