# Path: artifact_fetcher/engine/extraction/constants.py
"""
Extraction Module Constants

Centralized constants for gzip decoding and tar demultiplexing.
"""

import zlib

# ============================================================================
# GZIP
# ============================================================================

# zlib window bits selecting the gzip wrapper (header + CRC32 trailer)
GZIP_WBITS: int = zlib.MAX_WBITS | 16

# Padding some servers append after the last gzip member
GZIP_PADDING_BYTE: bytes = b'\x00'

# ============================================================================
# TAR
# ============================================================================

TAR_BLOCK_SIZE: int = 512
TAR_ZERO_BLOCK: bytes = b'\x00' * TAR_BLOCK_SIZE
TAR_ENCODING: str = 'utf-8'
TAR_ERRORS: str = 'surrogateescape'

# PAX extended header keywords honoured by the reader
PAX_PATH: str = 'path'
PAX_SIZE: str = 'size'

# Mask applied to an entry's mode before it is written to disk
MODE_PERMISSION_MASK: int = 0o7777

__all__ = [
    'GZIP_WBITS',
    'GZIP_PADDING_BYTE',
    'TAR_BLOCK_SIZE',
    'TAR_ZERO_BLOCK',
    'TAR_ENCODING',
    'TAR_ERRORS',
    'PAX_PATH',
    'PAX_SIZE',
    'MODE_PERMISSION_MASK',
]
