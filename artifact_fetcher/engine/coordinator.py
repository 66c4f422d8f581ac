# Path: artifact_fetcher/engine/coordinator.py
"""
Fetch Coordinator

Fan-out orchestrator: runs the fetch pipeline for every target of a
matrix concurrently and collects one outcome per target.

Architecture:
- One asyncio task per target, all started before any is awaited
- gather(return_exceptions=True): one failure never cancels the others
- Results returned in matrix order
- Owns the shared HTTP session
"""

import asyncio
import time
from pathlib import Path
from typing import Mapping, Optional, Union

from artifact_fetcher.core.config_loader import ConfigLoader
from artifact_fetcher.core.logger import get_logger
from artifact_fetcher.constants import (
    ERROR_KIND_UNEXPECTED,
    LOG_INPUT,
    LOG_OUTPUT,
)
from artifact_fetcher.engine.pipeline import FetchPipeline
from artifact_fetcher.engine.protocol_handlers import HTTPHandler
from artifact_fetcher.engine.result import FetchOutcome, FetchStatus
from artifact_fetcher.sources.base import ArtifactTarget, build_matrix
from artifact_fetcher.sources.registry import get_source

logger = get_logger(__name__, 'engine')


class FetchCoordinator:
    """
    Coordinates concurrent fetches for a target matrix.

    Example:
        async with FetchCoordinator() as coordinator:
            outcomes = await coordinator.run(matrix)

        failed = [o for o in outcomes if not o.succeeded]
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        http_handler: Optional[HTTPHandler] = None,
        pipeline: Optional[FetchPipeline] = None
    ):
        """
        Initialize fetch coordinator.

        Args:
            config: Optional ConfigLoader instance
            http_handler: HTTP handler (created from config if None)
            pipeline: Fetch pipeline (created around http_handler if None)
        """
        self.config = config if config else ConfigLoader()
        self.http_handler = http_handler if http_handler else HTTPHandler(config=self.config)
        self.pipeline = pipeline if pipeline else FetchPipeline(self.http_handler, config=self.config)

    async def run(self, matrix: Mapping[str, ArtifactTarget]) -> list[FetchOutcome]:
        """
        Fetch every target in the matrix concurrently.

        Waits until every pipeline has settled. Never raises because of
        an individual target's failure.

        Args:
            matrix: Mapping of platform key -> ArtifactTarget

        Returns:
            One FetchOutcome per target, in matrix order
        """
        logger.info(f"{LOG_INPUT} Fetching {len(matrix)} targets: {', '.join(matrix)}")

        start_time = time.time()
        targets = list(matrix.values())

        tasks = [
            asyncio.create_task(
                self.pipeline.fetch_and_extract(target),
                name=f"fetch-{target.platform_key}"
            )
            for target in targets
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes = []
        for target, result in zip(targets, results):
            if isinstance(result, BaseException):
                logger.error(
                    f"{LOG_OUTPUT} Pipeline for {target.platform_key} raised: {result!r}",
                    exc_info=result
                )
                result = FetchOutcome(
                    platform_key=target.platform_key,
                    status=FetchStatus.FAILED,
                    error_kind=ERROR_KIND_UNEXPECTED,
                    error_message=f"{type(result).__name__}: {result}",
                    destination_path=target.destination_path,
                    archive_url=target.archive_url
                )
            outcomes.append(result)

        self._log_summary(outcomes, time.time() - start_time)

        return outcomes

    def _log_summary(self, outcomes: list[FetchOutcome], duration: float) -> None:
        counts = {status: 0 for status in FetchStatus}
        for outcome in outcomes:
            counts[outcome.status] += 1
            logger.debug(f"{LOG_OUTPUT} Outcome: {outcome.to_dict()}")

        logger.info(
            f"{LOG_OUTPUT} Fetch complete: {counts[FetchStatus.COMPLETED]} completed, "
            f"{counts[FetchStatus.SKIPPED]} skipped, {counts[FetchStatus.FAILED]} failed "
            f"in {duration:.1f}s"
        )

    async def close(self):
        """Close coordinator and cleanup resources."""
        logger.debug("Closing fetch coordinator")
        await self.http_handler.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


async def fetch_source(
    source_name: str,
    version: Optional[str],
    base_dir: Union[str, Path, None] = None,
    config: Optional[ConfigLoader] = None
) -> list[FetchOutcome]:
    """
    Build the matrix for a registered source and fetch it.

    Args:
        source_name: Registered source name ('duckdb', 'keytar')
        version: Version to request
        base_dir: Base output directory (from config if None)
        config: Optional ConfigLoader instance

    Returns:
        One FetchOutcome per platform, in matrix order

    Raises:
        ConfigurationError: Unknown source or missing version, before any fetch
    """
    config = config if config else ConfigLoader()
    base_dir = base_dir if base_dir is not None else config.get('third_party_dir')

    matrix = build_matrix(get_source(source_name), version, base_dir)

    async with FetchCoordinator(config=config) as coordinator:
        return await coordinator.run(matrix)


__all__ = ['FetchCoordinator', 'fetch_source']
