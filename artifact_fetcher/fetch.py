# Path: artifact_fetcher/fetch.py
"""
Artifact Fetcher - Main Entry Point

Fetches prebuilt native binaries into the third-party directory.

Usage:
    python -m artifact_fetcher.fetch duckdb --version 1.0.0
    artifact-fetch all
"""

import sys

from artifact_fetcher.cli.fetch_cli import main


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nFetch cancelled by user.")
        sys.exit(130)
    except Exception as e:
        print(f"\nFatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    run()
