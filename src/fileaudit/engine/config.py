"""Run configuration and result dataclasses."""

import codecs
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fileaudit.duplicates.scanner import ScanReport
from fileaudit.integrity.models import VerificationReport
from fileaudit.utils import CHUNK_SIZE

__all__ = [
    "VerifyConfig",
    "ScanConfig",
    "VerifyResult",
    "ScanResult",
]


def _optional_path(value: Path | str | None) -> Path | None:
    return Path(value) if value is not None else None


@dataclass
class VerifyConfig:
    """Configuration for an integrity verification run.

    Attributes
    ----------
    chunk_size : int
        Maximum bytes per read while digesting (default: 64KB).
    max_workers : int
        Entries verified concurrently (default: 1, sequential).
    base_dir : Path | None
        Directory relative manifest paths resolve against. If None, the
        manifest file's directory is used.
    output_dir : Path | None
        Directory for events.jsonl and run.json. If None, no audit trail.
    """

    chunk_size: int = CHUNK_SIZE
    max_workers: int = 1
    base_dir: Path | None = None
    output_dir: Path | None = None

    def __post_init__(self) -> None:
        """Normalise paths and validate."""
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

        self.base_dir = _optional_path(self.base_dir)
        self.output_dir = _optional_path(self.output_dir)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "chunk_size": self.chunk_size,
            "max_workers": self.max_workers,
            "base_dir": str(self.base_dir) if self.base_dir is not None else None,
            "output_dir": str(self.output_dir) if self.output_dir is not None else None,
        }


@dataclass
class ScanConfig:
    """Configuration for a duplicate scan.

    Attributes
    ----------
    encoding : str
        Text encoding of the input (default: utf-8).
    skip_blank : bool
        Ignore empty lines instead of counting them as keys.
    output_dir : Path | None
        Directory for events.jsonl and run.json. If None, no audit trail.
    """

    encoding: str = "utf-8"
    skip_blank: bool = False
    output_dir: Path | None = None

    def __post_init__(self) -> None:
        """Normalise paths and validate."""
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {self.encoding}") from e

        self.output_dir = _optional_path(self.output_dir)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "encoding": self.encoding,
            "skip_blank": self.skip_blank,
            "output_dir": str(self.output_dir) if self.output_dir is not None else None,
        }


@dataclass
class VerifyResult:
    """Results from a verification run.

    Attributes
    ----------
    success : bool
        True iff the manifest decoded and every entry matched.
    report : VerificationReport | None
        Per-entry results, None if the manifest could not be decoded.
    error_message : str | None
        Fatal error message, if any.
    output_files : dict[str, str]
        Map of audit artifact name to file path.
    """

    success: bool
    report: VerificationReport | None
    error_message: str | None = None
    output_files: dict[str, str] = field(default_factory=dict)


@dataclass
class ScanResult:
    """Results from a duplicate scan run.

    Attributes
    ----------
    success : bool
        Whether the input was read to the end.
    report : ScanReport | None
        Scan outcome, None if the scan aborted.
    error_message : str | None
        Fatal error message, if any.
    output_files : dict[str, str]
        Map of audit artifact name to file path.
    """

    success: bool
    report: ScanReport | None
    error_message: str | None = None
    output_files: dict[str, str] = field(default_factory=dict)
