# Path: artifact_fetcher/engine/constants.py
"""
Fetcher Engine Constants

Centralized constants for HTTP streaming and file materialization.
"""

# ============================================================================
# HTTP HEADERS
# ============================================================================

HEADER_USER_AGENT = 'User-Agent'
HEADER_ACCEPT = 'Accept'
HEADER_ACCEPT_ENCODING = 'Accept-Encoding'

DEFAULT_ACCEPT_HEADER = '*/*'

# The archive is already gzip; ask for it byte-for-byte
IDENTITY_ENCODING = 'identity'

# ============================================================================
# CONNECTION SETTINGS
# ============================================================================

FORCE_CLOSE_CONNECTIONS = False

# ============================================================================
# FILE MATERIALIZATION
# ============================================================================

# Temporary file: .<32 hex chars>.part beside the destination
PARTIAL_FILE_PREFIX = '.'
PARTIAL_FILE_SUFFIX = '.part'

# Create-only binary mode; never truncates an existing file
EXCLUSIVE_WRITE_MODE = 'xb'

__all__ = [
    'HEADER_USER_AGENT',
    'HEADER_ACCEPT',
    'HEADER_ACCEPT_ENCODING',
    'DEFAULT_ACCEPT_HEADER',
    'IDENTITY_ENCODING',
    'FORCE_CLOSE_CONNECTIONS',
    'PARTIAL_FILE_PREFIX',
    'PARTIAL_FILE_SUFFIX',
    'EXCLUSIVE_WRITE_MODE',
]
