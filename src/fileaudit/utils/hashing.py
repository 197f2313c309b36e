"""Hashing utilities for fileaudit.

This module provides the bounded-memory SHA-256 accumulator shared by the
integrity verifier and the manifest builder.
"""

import hashlib
from pathlib import Path
from typing import BinaryIO

__all__ = [
    "CHUNK_SIZE",
    "DIGEST_SIZE",
    "format_sha256",
    "digest_stream",
    "calculate_file_sha256",
]

CHUNK_SIZE = 64 * 1024  # 64KB

# Output size of SHA-256 in bytes.
DIGEST_SIZE = hashlib.sha256().digest_size


def format_sha256(hex_digest: str) -> str:
    """Format SHA256 hash with standard prefix.

    Parameters
    ----------
    hex_digest : str
        Raw hexadecimal digest.

    Returns
    -------
    str
        Formatted hash with "sha256:" prefix.
    """
    return f"sha256:{hex_digest}"


def digest_stream(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> tuple[bytes, int]:
    """Feed a binary stream through SHA-256 in bounded chunks.

    Parameters
    ----------
    stream : BinaryIO
        Readable binary stream, consumed to EOF.
    chunk_size : int, optional
        Maximum bytes per read, by default CHUNK_SIZE.

    Returns
    -------
    tuple[bytes, int]
        Raw digest bytes and the number of bytes read.

    Raises
    ------
    OSError
        If a read fails part way through the stream.
    """
    sha256_hash = hashlib.sha256()
    total = 0
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        sha256_hash.update(chunk)
        total += len(chunk)
    return sha256_hash.digest(), total


def calculate_file_sha256(path: Path, chunk_size: int = CHUNK_SIZE) -> str:
    """Calculate SHA256 hash of file contents from file path.

    Parameters
    ----------
    path : Path
        Path to file.
    chunk_size : int, optional
        Maximum bytes per read, by default CHUNK_SIZE.

    Returns
    -------
    str
        Lower-case hexadecimal SHA256 digest.

    Raises
    ------
    FileNotFoundError
        If file does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with path.open("rb") as f:
        digest, _ = digest_stream(f, chunk_size)

    return digest.hex()
