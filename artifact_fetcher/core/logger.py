# Path: artifact_fetcher/core/logger.py
"""
Fetcher Logger

Centralized logging configuration for the artifact fetcher.

Architecture:
- Component-based logging (core, engine, cli, extraction)
- Console output plus optional file output
- Configurable log levels
- IPO (Input-Process-Output) structured logging
"""

import logging
from typing import Optional

from artifact_fetcher.core.config_loader import ConfigLoader
from artifact_fetcher.constants import (
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_ACTIVITY_FILENAME,
    LOG_ERRORS_FILENAME,
    LOGGER_ROOT,
    LOGGER_CORE,
    LOGGER_ENGINE,
    LOGGER_CLI,
    LOGGER_EXTRACTION,
)

_COMPONENT_LOGGERS = {
    'core': LOGGER_CORE,
    'engine': LOGGER_ENGINE,
    'cli': LOGGER_CLI,
    'extraction': LOGGER_EXTRACTION,
}


class FetcherLogger:
    """
    Centralized logger for the artifact fetcher.

    Provides component-specific loggers with unified configuration.

    Example:
        logger = get_logger(__name__, 'engine')
        logger.info("[INPUT] Fetching linux-x64")
        logger.info("[PROCESS] Writing entry duckdb.node")
        logger.info("[OUTPUT] Completed linux-x64: 48213504 bytes")
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize fetcher logger.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self._configured = False

    def configure(self) -> None:
        """Configure logging system for the fetcher package."""
        if self._configured:
            return

        log_dir = self.config.get('log_dir')
        log_level = getattr(logging, self.config.get('log_level', 'INFO').upper(), logging.INFO)
        console_output = self.config.get('log_console', True)
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

        logger = logging.getLogger(LOGGER_ROOT)
        logger.setLevel(log_level)

        # Clear any existing handlers
        logger.handlers.clear()

        if log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_dir / LOG_ACTIVITY_FILENAME)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

            # Error-only log file
            error_handler = logging.FileHandler(log_dir / LOG_ERRORS_FILENAME)
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(formatter)
            logger.addHandler(error_handler)

        if console_output:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(log_level)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        self._configured = True


# Global logger instance
_fetcher_logger: Optional[FetcherLogger] = None


def get_logger(name: str, component: str = 'core') -> logging.Logger:
    """
    Get logger for a fetcher component.

    Handlers are attached by configure_logging(); until then records
    propagate to whatever the host application configured.

    Args:
        name: Module name (typically __name__)
        component: Component type ('core', 'engine', 'cli', 'extraction')

    Returns:
        Logger instance
    """
    prefix = _COMPONENT_LOGGERS.get(component, LOGGER_ROOT)
    return logging.getLogger(f"{prefix}.{name}")


def configure_logging(config: Optional[ConfigLoader] = None) -> None:
    """
    Configure fetcher logging system.

    Call this once from the entry point.

    Args:
        config: Optional ConfigLoader instance
    """
    global _fetcher_logger

    if config or _fetcher_logger is None:
        _fetcher_logger = FetcherLogger(config)

    _fetcher_logger.configure()


__all__ = ['get_logger', 'configure_logging', 'FetcherLogger']
