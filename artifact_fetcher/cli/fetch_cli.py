# Path: artifact_fetcher/cli/fetch_cli.py
"""
Fetch CLI Interface

Command-line interface for fetching prebuilt native binaries.
Resolves the version for each selected source, builds every matrix up
front, runs the coordinator and prints a summary table.

Architecture:
- All configuration problems are reported before any request is made
- One coordinator (one HTTP session) shared by all selected sources
- Exit code: 0 all completed/skipped, 1 any failed, 2 configuration error
- IPO logging throughout

Usage:
    artifact-fetch duckdb --version 1.0.0
    artifact-fetch all --base-dir ./third_party
"""

import argparse
import asyncio
from pathlib import Path
from typing import Mapping, Optional, Sequence

from artifact_fetcher import __version__
from artifact_fetcher.core.config_loader import ConfigLoader
from artifact_fetcher.core.errors import ConfigurationError
from artifact_fetcher.core.logger import get_logger, configure_logging
from artifact_fetcher.constants import LOG_INPUT, LOG_PROCESS, LOG_OUTPUT
from artifact_fetcher.engine.coordinator import FetchCoordinator
from artifact_fetcher.engine.result import FetchOutcome, FetchStatus
from artifact_fetcher.sources.base import ArtifactTarget, build_matrix
from artifact_fetcher.sources.registry import get_source, get_available_sources

logger = get_logger(__name__, 'cli')

ALL_SOURCES = 'all'

EXIT_SUCCESS = 0
EXIT_FAILURES = 1
EXIT_CONFIGURATION_ERROR = 2

TABLE_WIDTH = 90


class FetchCLI:
    """
    Non-interactive CLI for fetching artifacts.

    Workflow:
    1. Resolve source names and versions
    2. Build every target matrix (no I/O)
    3. Fetch each source's matrix via the coordinator
    4. Display results

    Example:
        cli = FetchCLI()
        exit_code = await cli.run(['duckdb'], version='1.0.0')
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize fetch CLI.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

    async def run(
        self,
        source_names: Sequence[str],
        version: Optional[str] = None,
        base_dir: Optional[Path] = None
    ) -> int:
        """
        Run one fetch session.

        Args:
            source_names: Source names, or ['all']
            version: Version for every selected source (from env if None)
            base_dir: Base output directory (from config if None)

        Returns:
            Process exit code
        """
        logger.info(f"{LOG_INPUT} Starting Fetch CLI: {', '.join(source_names)}")

        try:
            matrices = self._build_matrices(source_names, version, base_dir)
        except ConfigurationError as e:
            logger.error(f"{LOG_OUTPUT} Configuration error: {e}")
            print(f"\nConfiguration error: {e}")
            return EXIT_CONFIGURATION_ERROR

        results: dict[str, list[FetchOutcome]] = {}

        async with FetchCoordinator(config=self.config) as coordinator:
            for name, matrix in matrices.items():
                print(f"\nFetching {name} ({len(matrix)} platforms)...")
                logger.info(f"{LOG_PROCESS} Fetching source {name}")
                results[name] = await coordinator.run(matrix)

        self._display_summary(results)

        failed_count = sum(
            1 for outcomes in results.values() for o in outcomes if not o.succeeded
        )
        return EXIT_FAILURES if failed_count else EXIT_SUCCESS

    def _resolve_sources(self, source_names: Sequence[str]) -> list[str]:
        if ALL_SOURCES in source_names:
            return get_available_sources()

        # Keep first occurrence order, drop repeats
        return list(dict.fromkeys(source_names))

    def _build_matrices(
        self,
        source_names: Sequence[str],
        version: Optional[str],
        base_dir: Optional[Path]
    ) -> dict[str, Mapping[str, ArtifactTarget]]:
        """
        Build the matrix of every selected source.

        Raises:
            ConfigurationError: Unknown source or no version available
        """
        base_dir = base_dir if base_dir is not None else self.config.get('third_party_dir')

        matrices = {}
        for name in self._resolve_sources(source_names):
            source = get_source(name)
            source_version = version or self.config.get_version(name)
            if not source_version:
                raise ConfigurationError(
                    f"No version for '{name}': pass --version or set "
                    f"FETCHER_{name.upper()}_VERSION"
                )
            matrices[name] = build_matrix(source, source_version, base_dir)

        return matrices

    def _display_summary(self, results: Mapping[str, list[FetchOutcome]]) -> None:
        """Print one row per target, then totals."""
        counts = {status: 0 for status in FetchStatus}

        print("\n" + "=" * TABLE_WIDTH)
        print("FETCH SUMMARY")
        print("=" * TABLE_WIDTH)
        print(f"\n{'Source':<10} {'Platform':<16} {'Status':<10} {'Bytes':>12}  {'Detail'}")
        print("-" * TABLE_WIDTH)

        for name, outcomes in results.items():
            for outcome in outcomes:
                counts[outcome.status] += 1

                if outcome.status is FetchStatus.FAILED:
                    detail = outcome.error
                elif outcome.destination_path is not None:
                    detail = outcome.destination_path.name
                else:
                    detail = ''

                if outcome.status is FetchStatus.COMPLETED and not outcome.entry_found:
                    detail = 'no matching entry in archive'

                print(
                    f"{name:<10} {outcome.platform_key:<16} {outcome.status.value:<10} "
                    f"{outcome.bytes_written:>12}  {detail}"
                )

        print("=" * TABLE_WIDTH)
        print(f"Completed: {counts[FetchStatus.COMPLETED]}")
        print(f"Skipped:   {counts[FetchStatus.SKIPPED]}")
        print(f"Failed:    {counts[FetchStatus.FAILED]}")
        print("=" * TABLE_WIDTH)

        logger.info(
            f"{LOG_OUTPUT} Fetch session complete: {counts[FetchStatus.COMPLETED]} completed, "
            f"{counts[FetchStatus.SKIPPED]} skipped, {counts[FetchStatus.FAILED]} failed"
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog='artifact-fetch',
        description="Fetch prebuilt native binaries for every supported platform",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch DuckDB node bindings
  artifact-fetch duckdb --version 1.0.0

  # Fetch every source, versions taken from FETCHER_<SOURCE>_VERSION
  artifact-fetch all

  # Write below a different directory
  artifact-fetch keytar --version 7.9.0 --base-dir ./vendor
        """
    )

    parser.add_argument(
        'sources',
        nargs='+',
        choices=get_available_sources() + [ALL_SOURCES],
        help='Sources to fetch'
    )
    parser.add_argument(
        '--version',
        dest='artifact_version',
        help='Artifact version (default: FETCHER_<SOURCE>_VERSION)'
    )
    parser.add_argument(
        '--base-dir',
        type=Path,
        help='Base output directory (default: FETCHER_THIRD_PARTY_DIR or ./third_party)'
    )
    parser.add_argument(
        '-V', '--program-version',
        action='version',
        version=f'artifact-fetcher {__version__}'
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command-line arguments (sys.argv[1:] if None)

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        configure_logging()
        cli = FetchCLI()
    except ConfigurationError as e:
        print(f"\nConfiguration error: {e}")
        return EXIT_CONFIGURATION_ERROR

    return asyncio.run(cli.run(args.sources, args.artifact_version, args.base_dir))


__all__ = ['FetchCLI', 'build_parser', 'main']
