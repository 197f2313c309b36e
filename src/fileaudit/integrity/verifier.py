"""Per-entry checksum verification.

Each manifest entry moves through decode → open → digest → compare on its
own. Failures are returned as results rather than raised, so one bad
entry never stops the rest of the pass.
"""

import binascii
import hmac
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from fileaudit.errors import DigestDecodeError
from fileaudit.integrity.models import EntryResult, Outcome, VerificationReport
from fileaudit.utils import CHUNK_SIZE, DIGEST_SIZE, digest_stream

__all__ = [
    "decode_expected_digest",
    "verify_entry",
    "verify_manifest",
]


def decode_expected_digest(hex_digest: str) -> bytes:
    """Decode an expected SHA-256 hex string into raw digest bytes.

    Parameters
    ----------
    hex_digest : str
        Hex digest, case-insensitive, surrounding whitespace ignored.

    Returns
    -------
    bytes
        Exactly DIGEST_SIZE bytes.

    Raises
    ------
    DigestDecodeError
        If the value is not a string, is not valid hex, or has the wrong length.
    """
    if not isinstance(hex_digest, str):
        raise DigestDecodeError(f"expected a hex string, got {type(hex_digest).__name__}")

    try:
        raw = binascii.unhexlify(hex_digest.strip())
    except (binascii.Error, ValueError) as e:
        raise DigestDecodeError(f"not valid hex: {e}") from e

    if len(raw) != DIGEST_SIZE:
        raise DigestDecodeError(f"decoded to {len(raw)} bytes, expected {DIGEST_SIZE}")

    return raw


def verify_entry(
    path: str,
    expected_hex: str,
    *,
    base_dir: Path | str | None = None,
    chunk_size: int = CHUNK_SIZE,
) -> EntryResult:
    """Verify a single file against its expected digest.

    Parameters
    ----------
    path : str
        Path as written in the manifest; reported unchanged.
    expected_hex : str
        Expected SHA-256 as hex.
    base_dir : Path | str | None, optional
        Directory that relative paths are resolved against.
    chunk_size : int, optional
        Maximum bytes per read, by default CHUNK_SIZE.

    Returns
    -------
    EntryResult
        Exactly one result; never raises for per-entry failures.
    """
    try:
        expected = decode_expected_digest(expected_hex)
    except DigestDecodeError as e:
        return EntryResult(
            path=path,
            outcome=Outcome.DIGEST_DECODE_ERROR,
            reason=f"invalid expected SHA256 hex: {e}",
        )

    expected_sha256 = expected.hex()
    file_path = Path(path)
    if base_dir is not None and not file_path.is_absolute():
        file_path = Path(base_dir) / file_path

    # ValueError: paths the OS cannot represent, e.g. an embedded NUL
    try:
        f = file_path.open("rb")
    except (OSError, ValueError) as e:
        return EntryResult(
            path=path,
            outcome=Outcome.OPEN_ERROR,
            reason=getattr(e, "strerror", None) or str(e),
            expected_sha256=expected_sha256,
        )

    with f:
        try:
            computed, bytes_read = digest_stream(f, chunk_size)
        except OSError as e:
            return EntryResult(
                path=path,
                outcome=Outcome.OPEN_ERROR,
                reason=f"read failed: {e.strerror or e}",
                expected_sha256=expected_sha256,
            )

    outcome = Outcome.MATCH if hmac.compare_digest(computed, expected) else Outcome.MISMATCH

    return EntryResult(
        path=path,
        outcome=outcome,
        expected_sha256=expected_sha256,
        computed_sha256=computed.hex(),
        bytes_read=bytes_read,
    )


def verify_manifest(
    manifest: Mapping[str, str],
    *,
    base_dir: Path | str | None = None,
    chunk_size: int = CHUNK_SIZE,
    max_workers: int = 1,
) -> VerificationReport:
    """Verify every entry of a decoded manifest.

    Parameters
    ----------
    manifest : Mapping[str, str]
        Path to expected SHA-256 hex.
    base_dir : Path | str | None, optional
        Directory that relative paths are resolved against.
    chunk_size : int, optional
        Maximum bytes per read, by default CHUNK_SIZE.
    max_workers : int, optional
        Entries verified concurrently, by default 1 (sequential).

    Returns
    -------
    VerificationReport
        One result per entry; ``report.ok`` is the aggregate verdict.

    Examples
    --------
        >>> report = verify_manifest({"missing.txt": "00" * 32})
        >>> report.ok, report.results[0].outcome
        (False, <Outcome.OPEN_ERROR: 'open_error'>)
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    def _verify(item: tuple[str, str]) -> EntryResult:
        path, expected_hex = item
        return verify_entry(path, expected_hex, base_dir=base_dir, chunk_size=chunk_size)

    if max_workers == 1:
        results = [_verify(item) for item in manifest.items()]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(_verify, manifest.items()))

    return VerificationReport(results=tuple(results))
