"""Common utility functions for fileaudit.

This module consolidates shared utility functions used across the codebase,
including hashing and timestamps.
"""

from fileaudit.utils.hashing import (
    CHUNK_SIZE,
    DIGEST_SIZE,
    calculate_file_sha256,
    digest_stream,
    format_sha256,
)
from fileaudit.utils.timestamps import get_iso_timestamp

__all__ = [
    "CHUNK_SIZE",
    "DIGEST_SIZE",
    "get_iso_timestamp",
    "calculate_file_sha256",
    "digest_stream",
    "format_sha256",
]
