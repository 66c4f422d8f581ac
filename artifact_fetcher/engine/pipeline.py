# Path: artifact_fetcher/engine/pipeline.py
"""
Fetch-Extract Pipeline

Per-target workflow: existence check -> HTTP stream -> gunzip -> tar
demultiplex -> write the matching entry, drain the rest.

Architecture:
- One pipeline instance serves many targets; no per-target state is kept
  on the instance
- Every failure is converted into a FAILED FetchOutcome at this boundary
- IPO logging throughout
"""

import os
import posixpath
import time
from contextlib import aclosing
from typing import Optional

from artifact_fetcher.core.config_loader import ConfigLoader
from artifact_fetcher.core.errors import FetchError
from artifact_fetcher.core.logger import get_logger
from artifact_fetcher.constants import (
    DEFAULT_CHUNK_SIZE,
    ERROR_KIND_UNEXPECTED,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)
from artifact_fetcher.engine.extraction.tar_stream import ArchiveEntry, AsyncTarReader
from artifact_fetcher.engine.protocol_handlers import HTTPHandler
from artifact_fetcher.engine.result import FetchOutcome, FetchStatus
from artifact_fetcher.engine.stream_handler import StreamHandler, gunzip_stream
from artifact_fetcher.sources.base import ArtifactTarget

logger = get_logger(__name__, 'engine')


def normalize_entry_name(name: str) -> str:
    """Strip leading './' segments and trailing slashes from an entry name."""
    while name.startswith('./'):
        name = name[2:]
    return name.rstrip('/')


def entry_matches(entry_name: str, expected_name: str) -> bool:
    """
    Check whether an archive entry is the wanted one.

    A bare expected name (no '/') matches on the entry's basename, so
    'duckdb.node' finds 'binding/duckdb.node'. An expected name with a
    directory component must match the whole path.

    Args:
        entry_name: Name recorded in the archive
        expected_name: Name the target asks for

    Returns:
        True if the entry should be written
    """
    entry_name = normalize_entry_name(entry_name)
    expected_name = normalize_entry_name(expected_name)

    if '/' in expected_name:
        return entry_name == expected_name
    return posixpath.basename(entry_name) == expected_name


class FetchPipeline:
    """
    Fetches one target's archive and materializes its binary.

    Workflow per target:
    1. Skip if anything already exists at the destination
    2. Stream the archive over HTTP
    3. Gunzip lazily
    4. Walk tar entries in order: write the match, drain the others
    5. Report COMPLETED, or FAILED with the error kind

    Example:
        async with HTTPHandler() as http_handler:
            pipeline = FetchPipeline(http_handler)
            outcome = await pipeline.fetch_and_extract(target)
    """

    def __init__(
        self,
        http_handler: HTTPHandler,
        stream_handler: Optional[StreamHandler] = None,
        chunk_size: Optional[int] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize fetch pipeline.

        Args:
            http_handler: HTTP handler used to open archive streams
            stream_handler: Entry writer (created from config if None)
            chunk_size: Maximum decompressed chunk size (from config if None)
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self.http_handler = http_handler
        self.stream_handler = stream_handler if stream_handler else StreamHandler(config=self.config)

        self.chunk_size = chunk_size if chunk_size is not None else \
            self.config.get('chunk_size', DEFAULT_CHUNK_SIZE)

    async def fetch_and_extract(self, target: ArtifactTarget) -> FetchOutcome:
        """
        Run the pipeline for one target.

        Never raises (except on task cancellation); failures are
        returned as a FAILED outcome.

        Args:
            target: Target from the matrix

        Returns:
            FetchOutcome for the target
        """
        start_time = time.time()
        destination = target.destination_path

        logger.info(f"{LOG_INPUT} Target {target.platform_key}: {destination.name}")

        if os.path.lexists(destination):
            logger.info(f"{LOG_OUTPUT} Already exists: {destination.name}")
            return FetchOutcome(
                platform_key=target.platform_key,
                status=FetchStatus.SKIPPED,
                destination_path=destination,
                archive_url=target.archive_url,
                duration=time.time() - start_time
            )

        bytes_written = 0
        entry_found = False

        try:
            async with self.http_handler.stream(target.archive_url) as body:
                # Closed before the response is released, on success or error
                async with aclosing(AsyncTarReader(gunzip_stream(body, self.chunk_size))) as reader:
                    async for entry in reader:
                        if self._should_write(entry, target, entry_found):
                            logger.info(f"{LOG_PROCESS} Extracting entry: {entry.name}")
                            bytes_written = await self.stream_handler.stream_to_file(
                                entry,
                                destination,
                                mode=entry.mode
                            )
                            entry_found = True
                        else:
                            drained = await entry.drain()
                            logger.debug(f"{LOG_PROCESS} Skipped entry: {entry.name} ({drained} bytes)")

        except FetchError as e:
            duration = time.time() - start_time
            logger.error(f"{LOG_OUTPUT} Failed {target.platform_key} ({e.kind}): {e}")
            return FetchOutcome(
                platform_key=target.platform_key,
                status=FetchStatus.FAILED,
                error_kind=e.kind,
                error_message=str(e),
                destination_path=destination,
                archive_url=target.archive_url,
                entry_found=entry_found,
                duration=duration
            )

        except Exception as e:
            duration = time.time() - start_time
            logger.error(f"{LOG_OUTPUT} Failed {target.platform_key} (unexpected): {e}", exc_info=True)
            return FetchOutcome(
                platform_key=target.platform_key,
                status=FetchStatus.FAILED,
                error_kind=ERROR_KIND_UNEXPECTED,
                error_message=f"{type(e).__name__}: {e}",
                destination_path=destination,
                archive_url=target.archive_url,
                entry_found=entry_found,
                duration=duration
            )

        duration = time.time() - start_time

        if entry_found:
            logger.info(
                f"{LOG_OUTPUT} Completed {target.platform_key}: {bytes_written} bytes "
                f"in {duration:.2f}s"
            )
        else:
            logger.warning(
                f"{LOG_OUTPUT} Completed {target.platform_key} but archive has no entry "
                f"'{target.expected_entry_name}'; nothing written"
            )

        return FetchOutcome(
            platform_key=target.platform_key,
            status=FetchStatus.COMPLETED,
            destination_path=destination,
            archive_url=target.archive_url,
            bytes_written=bytes_written,
            entry_found=entry_found,
            duration=duration
        )

    def _should_write(self, entry: ArchiveEntry, target: ArtifactTarget, already_written: bool) -> bool:
        """Decide between writing and draining an entry."""
        if not entry_matches(entry.name, target.expected_entry_name):
            return False

        if not entry.is_file():
            logger.warning(f"{LOG_PROCESS} Matching entry is not a regular file, skipping: {entry.name}")
            return False

        if already_written:
            logger.warning(f"{LOG_PROCESS} Duplicate matching entry ignored: {entry.name}")
            return False

        return True


__all__ = ['FetchPipeline', 'entry_matches', 'normalize_entry_name']
