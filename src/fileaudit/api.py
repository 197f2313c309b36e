"""Public API for duplicate scanning and integrity verification.

This module provides the main public API for fileaudit, enabling:
- Finding duplicate keys in line streams and files
- Verifying files against an in-memory or on-disk checksum manifest
- Generating a manifest for a directory tree
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from fileaudit.duplicates import find_duplicates_in_file
from fileaudit.duplicates import find_duplicates as _find_duplicates
from fileaudit.errors import ManifestDecodeError
from fileaudit.integrity import (
    VerificationReport,
    build_manifest,
    verify_manifest,
    write_manifest,
)
from fileaudit.utils import CHUNK_SIZE

if TYPE_CHECKING:
    from fileaudit.engine.config import VerifyResult

__all__ = [
    "find_duplicates",
    "find_duplicates_in_file",
    "verify",
    "verify_manifest_file",
    "generate_manifest",
]


def find_duplicates(lines: Iterable[str], *, skip_blank: bool = False) -> list[str]:
    """Find keys that occur two or more times in ``lines``.

    Trailing line endings are stripped, so an open text file can be
    passed directly.

    Parameters
    ----------
    lines : Iterable[str]
        Keys or raw lines.
    skip_blank : bool, optional
        Ignore empty lines, by default False.

    Returns
    -------
    list[str]
        Each duplicated key once, ordered by its second occurrence.

    Raises
    ------
    StreamReadError
        If reading the stream fails.

    Examples
    --------
        >>> from fileaudit import find_duplicates
        >>> find_duplicates(["a1b2c3", "x9y8z7", "a1b2c3", "q1w2e3"])
        ['a1b2c3']
    """
    return _find_duplicates(lines, skip_blank=skip_blank)


def verify(
    manifest: Mapping[str, str],
    *,
    base_dir: str | Path | None = None,
    max_workers: int = 1,
) -> VerificationReport:
    """Verify files against an in-memory manifest.

    Parameters
    ----------
    manifest : Mapping[str, str]
        File path to expected SHA-256 hex digest.
    base_dir : str | Path | None, optional
        Directory relative paths resolve against. If None, the current
        working directory is used.
    max_workers : int, optional
        Entries verified concurrently, by default 1.

    Returns
    -------
    VerificationReport
        One result per entry; ``report.ok`` is the aggregate verdict.

    Examples
    --------
        >>> from fileaudit import verify
        >>> report = verify({"data.bin": "9f86d08188..."})
        >>> report.ok
        False
    """
    return verify_manifest(
        manifest,
        base_dir=base_dir,
        chunk_size=CHUNK_SIZE,
        max_workers=max_workers,
    )


def verify_manifest_file(
    manifest_path: str | Path,
    *,
    base_dir: str | Path | None = None,
    output_dir: str | Path | None = None,
    max_workers: int = 1,
) -> VerifyResult:
    """Verify files listed in a JSON manifest file.

    Simplified interface to :func:`fileaudit.engine.run_verification`.

    Parameters
    ----------
    manifest_path : str | Path
        JSON object mapping paths to expected SHA-256 hex.
    base_dir : str | Path | None, optional
        Directory relative paths resolve against. If None, the manifest
        file's directory is used.
    output_dir : str | Path | None, optional
        Directory for the audit trail (events.jsonl, run.json). If None,
        no audit trail is written.
    max_workers : int, optional
        Entries verified concurrently, by default 1.

    Returns
    -------
    VerifyResult
        ``result.success`` is the aggregate verdict and ``result.report``
        holds the per-entry results.

    Raises
    ------
    ManifestDecodeError
        If the manifest cannot be read or is not a path-to-string mapping.

    Examples
    --------
        >>> from fileaudit import verify_manifest_file
        >>> result = verify_manifest_file("checksums.json", output_dir="audit")
        >>> for entry in result.report.failed:
        ...     print(entry.path, entry.outcome.value)
    """
    from fileaudit.engine import VerifyConfig, run_verification

    config = VerifyConfig(
        max_workers=max_workers,
        base_dir=base_dir,
        output_dir=output_dir,
    )
    result = run_verification(manifest_path, config=config)

    if result.report is None:
        raise ManifestDecodeError(
            result.error_message or "Manifest could not be decoded",
            file=str(manifest_path),
        )

    return result


def generate_manifest(
    root: str | Path,
    output_path: str | Path,
    *,
    pattern: str = "*",
    recursive: bool = True,
) -> dict[str, str]:
    """Hash every file under ``root`` and write the manifest to ``output_path``.

    Parameters
    ----------
    root : str | Path
        Directory to hash.
    output_path : str | Path
        Manifest file to write (JSON).
    pattern : str, optional
        Glob pattern for file names, by default "*".
    recursive : bool, optional
        Whether to descend into subdirectories, by default True.

    Returns
    -------
    dict[str, str]
        The manifest that was written, keyed by POSIX path relative to ``root``.

    Raises
    ------
    NotADirectoryError
        If ``root`` is not a directory.
    """
    manifest = build_manifest(root, pattern=pattern, recursive=recursive)

    # a manifest written inside root must not list itself
    root_path = Path(root).resolve()
    output_file = Path(output_path).resolve()
    if output_file.is_relative_to(root_path):
        manifest.pop(output_file.relative_to(root_path).as_posix(), None)

    write_manifest(manifest, output_path)
    return manifest
