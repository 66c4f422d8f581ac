# Path: artifact_fetcher/constants.py
"""
Artifact Fetcher Constants

Module-wide constants for fetch operations.
Source-specific naming templates live in sources/.

No hardcoded paths - base directories come from .env via config_loader.
"""

# ============================================================================
# OUTCOME STATUS VALUES
# ============================================================================
STATUS_SKIPPED: str = 'skipped'
STATUS_COMPLETED: str = 'completed'
STATUS_FAILED: str = 'failed'

# Error kind reported for exceptions outside the FetchError hierarchy
ERROR_KIND_UNEXPECTED: str = 'unexpected'

# ============================================================================
# HTTP STATUS CODES
# ============================================================================
HTTP_SUCCESS_MIN: int = 200
HTTP_SUCCESS_MAX: int = 299

# ============================================================================
# FETCH CONFIGURATION DEFAULTS
# ============================================================================
DEFAULT_CHUNK_SIZE: int = 65536  # 64KB chunks for streaming
DEFAULT_TIMEOUT: int = 0  # 0 disables the total request timeout
DEFAULT_CONNECT_TIMEOUT: int = 0  # 0 disables the connect timeout
DEFAULT_MAX_CONNECTIONS: int = 0  # 0 means no connection pool limit
DEFAULT_THIRD_PARTY_DIR: str = 'third_party'

# ============================================================================
# LOGGING DEFAULTS
# ============================================================================
DEFAULT_LOG_PROGRESS_INTERVAL: int = 100

# ============================================================================
# IPO LOGGING PREFIXES
# ============================================================================
LOG_INPUT: str = '[INPUT]'
LOG_PROCESS: str = '[PROCESS]'
LOG_OUTPUT: str = '[OUTPUT]'

# ============================================================================
# LOGGING COMPONENTS
# ============================================================================
LOGGER_ROOT: str = 'artifact_fetcher'
LOGGER_CORE: str = 'artifact_fetcher.core'
LOGGER_ENGINE: str = 'artifact_fetcher.engine'
LOGGER_CLI: str = 'artifact_fetcher.cli'
LOGGER_EXTRACTION: str = 'artifact_fetcher.extraction'

# ============================================================================
# LOG FORMAT
# ============================================================================
LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'
LOG_ACTIVITY_FILENAME: str = 'fetcher_activity.log'
LOG_ERRORS_FILENAME: str = 'errors.log'

# ============================================================================
# ENVIRONMENT VARIABLE KEYS (for reference in config_loader.py)
# ============================================================================

# Directory Paths
ENV_THIRD_PARTY_DIR: str = 'FETCHER_THIRD_PARTY_DIR'
ENV_LOG_DIR: str = 'FETCHER_LOG_DIR'

# Fetch Configuration
ENV_CHUNK_SIZE: str = 'FETCHER_CHUNK_SIZE'
ENV_REQUEST_TIMEOUT: str = 'FETCHER_REQUEST_TIMEOUT'
ENV_CONNECT_TIMEOUT: str = 'FETCHER_CONNECT_TIMEOUT'
ENV_MAX_CONNECTIONS: str = 'FETCHER_MAX_CONNECTIONS'
ENV_USER_AGENT: str = 'FETCHER_USER_AGENT'

# Logging Configuration
ENV_LOG_LEVEL: str = 'FETCHER_LOG_LEVEL'
ENV_LOG_CONSOLE: str = 'FETCHER_LOG_CONSOLE'
ENV_LOG_PROGRESS_INTERVAL: str = 'FETCHER_LOG_PROGRESS_INTERVAL'

# Artifact versions, keyed by source name: FETCHER_<SOURCE>_VERSION
ENV_VERSION_TEMPLATE: str = 'FETCHER_{source}_VERSION'

# ============================================================================
# EXPORTS
# ============================================================================
__all__ = [
    # Outcome Status Values
    'STATUS_SKIPPED',
    'STATUS_COMPLETED',
    'STATUS_FAILED',
    'ERROR_KIND_UNEXPECTED',

    # HTTP Status Codes
    'HTTP_SUCCESS_MIN',
    'HTTP_SUCCESS_MAX',

    # Fetch Configuration Defaults
    'DEFAULT_CHUNK_SIZE',
    'DEFAULT_TIMEOUT',
    'DEFAULT_CONNECT_TIMEOUT',
    'DEFAULT_MAX_CONNECTIONS',
    'DEFAULT_THIRD_PARTY_DIR',

    # Logging Defaults
    'DEFAULT_LOG_PROGRESS_INTERVAL',

    # IPO Logging Prefixes
    'LOG_INPUT',
    'LOG_PROCESS',
    'LOG_OUTPUT',

    # Logging Components
    'LOGGER_ROOT',
    'LOGGER_CORE',
    'LOGGER_ENGINE',
    'LOGGER_CLI',
    'LOGGER_EXTRACTION',

    # Log Format
    'LOG_FORMAT',
    'LOG_DATE_FORMAT',
    'LOG_ACTIVITY_FILENAME',
    'LOG_ERRORS_FILENAME',

    # Environment Variable Keys
    'ENV_THIRD_PARTY_DIR',
    'ENV_LOG_DIR',
    'ENV_CHUNK_SIZE',
    'ENV_REQUEST_TIMEOUT',
    'ENV_CONNECT_TIMEOUT',
    'ENV_MAX_CONNECTIONS',
    'ENV_USER_AGENT',
    'ENV_LOG_LEVEL',
    'ENV_LOG_CONSOLE',
    'ENV_LOG_PROGRESS_INTERVAL',
    'ENV_VERSION_TEMPLATE',
]
