# Path: artifact_fetcher/engine/result.py
"""
Fetch Result Objects

Type-safe, structured results for fetch operations.

Architecture:
- FetchStatus: terminal state of one target
- FetchOutcome: one immutable record per target, built by the pipeline
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from artifact_fetcher.constants import (
    STATUS_SKIPPED,
    STATUS_COMPLETED,
    STATUS_FAILED,
)


class FetchStatus(str, Enum):
    """Terminal state of a target's pipeline run."""
    SKIPPED = STATUS_SKIPPED
    COMPLETED = STATUS_COMPLETED
    FAILED = STATUS_FAILED


@dataclass(frozen=True)
class FetchOutcome:
    """
    Result of fetching one platform's artifact.

    Attributes:
        platform_key: Platform identifier from the matrix
        status: SKIPPED, COMPLETED or FAILED
        error_kind: Error category when FAILED ('network', 'filesystem', ...)
        error_message: Error detail when FAILED
        destination_path: Output file path
        archive_url: Source URL
        bytes_written: Size of the written file (0 unless COMPLETED)
        entry_found: Whether the expected entry was present in the archive
        duration: Pipeline duration in seconds
    """
    platform_key: str
    status: FetchStatus
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    destination_path: Optional[Path] = None
    archive_url: str = ''
    bytes_written: int = 0
    entry_found: bool = False
    duration: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def succeeded(self) -> bool:
        """True for SKIPPED and COMPLETED."""
        return self.status is not FetchStatus.FAILED

    @property
    def error(self) -> Optional[str]:
        """'<kind>: <message>' when FAILED, else None."""
        if self.status is not FetchStatus.FAILED:
            return None
        return f"{self.error_kind}: {self.error_message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/storage."""
        return {
            'platform_key': self.platform_key,
            'status': self.status.value,
            'error_kind': self.error_kind,
            'error_message': self.error_message,
            'destination_path': str(self.destination_path) if self.destination_path else None,
            'archive_url': self.archive_url,
            'bytes_written': self.bytes_written,
            'entry_found': self.entry_found,
            'duration': self.duration,
            'timestamp': self.timestamp.isoformat(),
        }


__all__ = ['FetchStatus', 'FetchOutcome']
