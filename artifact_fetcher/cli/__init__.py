# Path: artifact_fetcher/cli/__init__.py
"""
Fetcher CLI Module

Command-line interface for fetching prebuilt artifacts.
"""

from artifact_fetcher.cli.fetch_cli import FetchCLI, main

__all__ = ['FetchCLI', 'main']
