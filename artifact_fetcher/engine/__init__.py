# Path: artifact_fetcher/engine/__init__.py
"""
Fetcher Engine

HTTP streaming, decompression, extraction and fan-out orchestration.
"""

from artifact_fetcher.engine.coordinator import FetchCoordinator, fetch_source
from artifact_fetcher.engine.pipeline import FetchPipeline, entry_matches
from artifact_fetcher.engine.protocol_handlers import HTTPHandler
from artifact_fetcher.engine.result import FetchOutcome, FetchStatus
from artifact_fetcher.engine.stream_handler import StreamHandler, gunzip_stream

__all__ = [
    # Orchestration
    'FetchCoordinator',
    'fetch_source',
    'FetchPipeline',
    'entry_matches',

    # I/O stages
    'HTTPHandler',
    'StreamHandler',
    'gunzip_stream',

    # Results
    'FetchOutcome',
    'FetchStatus',
]
