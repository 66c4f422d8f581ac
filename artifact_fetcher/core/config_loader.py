# Path: artifact_fetcher/core/config_loader.py
"""
Fetcher Configuration Loader

Centralized configuration management for the artifact fetcher.
Loads and validates environment variables with type safety and defaults.

Architecture:
- Singleton pattern for global configuration
- .env discovery from the working directory upwards
- Type-safe access with validation
- Sensible defaults (every key is optional)
"""

import os
from typing import Any, Optional
from pathlib import Path
from dotenv import load_dotenv, find_dotenv

from artifact_fetcher import __version__
from artifact_fetcher.core.errors import ConfigurationError
from artifact_fetcher.constants import (
    ENV_THIRD_PARTY_DIR,
    ENV_LOG_DIR,
    ENV_CHUNK_SIZE,
    ENV_REQUEST_TIMEOUT,
    ENV_CONNECT_TIMEOUT,
    ENV_MAX_CONNECTIONS,
    ENV_USER_AGENT,
    ENV_LOG_LEVEL,
    ENV_LOG_CONSOLE,
    ENV_LOG_PROGRESS_INTERVAL,
    ENV_VERSION_TEMPLATE,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_THIRD_PARTY_DIR,
    DEFAULT_LOG_PROGRESS_INTERVAL,
)


class ConfigLoader:
    """
    Singleton configuration loader.

    Loads configuration from environment variables with validation,
    type conversion, and sensible defaults.

    Example:
        config = ConfigLoader()
        base_dir = config.get('third_party_dir')
        chunk_size = config.get('chunk_size')
        duckdb_version = config.get_version('duckdb')
    """

    _instance: Optional['ConfigLoader'] = None
    _initialized: bool = False

    def __new__(cls) -> 'ConfigLoader':
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """
        Initialize configuration loader.

        Only runs once due to singleton pattern.
        """
        if ConfigLoader._initialized:
            return

        # .env is looked up from the working directory, not the install location
        env_path = find_dotenv(usecwd=True)
        if env_path:
            load_dotenv(dotenv_path=env_path, interpolate=True)

        self._config = self._load_configuration()
        ConfigLoader._initialized = True

    def _load_configuration(self) -> dict[str, Any]:
        """
        Load and validate all configuration from environment.

        Returns:
            Dictionary of validated configuration values

        Raises:
            ConfigurationError: If a value is out of range
        """
        config = {
            # ================================================================
            # DIRECTORY PATHS
            # ================================================================
            'third_party_dir': self._get_path(ENV_THIRD_PARTY_DIR) or Path(DEFAULT_THIRD_PARTY_DIR),
            'log_dir': self._get_path(ENV_LOG_DIR),

            # ================================================================
            # FETCH CONFIGURATION
            # ================================================================
            'chunk_size': self._get_int(ENV_CHUNK_SIZE, DEFAULT_CHUNK_SIZE),
            'request_timeout': self._get_float(ENV_REQUEST_TIMEOUT, DEFAULT_TIMEOUT),
            'connect_timeout': self._get_float(ENV_CONNECT_TIMEOUT, DEFAULT_CONNECT_TIMEOUT),
            'max_connections': self._get_int(ENV_MAX_CONNECTIONS, DEFAULT_MAX_CONNECTIONS),
            'user_agent': self._get_env(ENV_USER_AGENT, f'artifact-fetcher/{__version__}'),

            # ================================================================
            # LOGGING CONFIGURATION
            # ================================================================
            'log_level': self._get_env(ENV_LOG_LEVEL, 'INFO'),
            'log_console': self._get_bool(ENV_LOG_CONSOLE, True),
            'log_progress_interval': self._get_int(ENV_LOG_PROGRESS_INTERVAL, DEFAULT_LOG_PROGRESS_INTERVAL),
        }

        if config['chunk_size'] <= 0:
            raise ConfigurationError(f"{ENV_CHUNK_SIZE} must be positive, got {config['chunk_size']}")

        return config

    def reload(self) -> None:
        """Re-read the environment (used after os.environ changes)."""
        self._config = self._load_configuration()

    def _get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get string environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found or blank

        Returns:
            Environment variable value or default
        """
        value = os.getenv(key)

        if value is None or not value.strip():
            return default

        return value.strip()

    def _get_bool(self, key: str, default: bool) -> bool:
        """
        Get boolean environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found

        Returns:
            Boolean value
        """
        value = os.getenv(key)
        if value is None:
            return default

        return value.strip().lower() in ('true', '1', 'yes', 'on')

    def _get_int(self, key: str, default: int) -> int:
        """
        Get integer environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found or invalid

        Returns:
            Integer value
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value.strip())
        except ValueError:
            return default

    def _get_float(self, key: str, default: float) -> float:
        """
        Get float environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found or invalid

        Returns:
            Float value
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return float(value.strip())
        except ValueError:
            return default

    def _get_path(self, key: str) -> Optional[Path]:
        """
        Get path environment variable.

        Args:
            key: Environment variable name

        Returns:
            Path object or None when not set
        """
        value = os.getenv(key)

        if value is None or not value.strip():
            return None

        return Path(value.strip())

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        return self._config.get(key, default)

    def get_version(self, source_name: str) -> Optional[str]:
        """
        Get the artifact version configured for a source.

        Read live from the environment so a CLI override exported
        after startup is honoured.

        Args:
            source_name: Source identifier (e.g. 'duckdb')

        Returns:
            Version string or None when not configured
        """
        key = ENV_VERSION_TEMPLATE.format(source=source_name.upper())
        return self._get_env(key)

    def __getitem__(self, key: str) -> Any:
        """Dictionary-style access to configuration."""
        return self._config[key]


__all__ = ['ConfigLoader']
