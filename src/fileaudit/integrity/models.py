"""Outcome types for checksum verification."""

from collections import Counter
from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any

__all__ = ["Outcome", "EntryResult", "VerificationReport"]


class Outcome(StrEnum):
    """Classification of a single manifest entry.

    Attributes
    ----------
    MATCH : str
        Computed digest equals the expected one.
    MISMATCH : str
        File was read in full but the digests differ.
    OPEN_ERROR : str
        File could not be opened or read; nothing was compared.
    DIGEST_DECODE_ERROR : str
        Expected value is not 32 bytes of hex; the file was not touched.
    """

    MATCH = "match"
    MISMATCH = "mismatch"
    OPEN_ERROR = "open_error"
    DIGEST_DECODE_ERROR = "digest_decode_error"

    @property
    def is_error(self) -> bool:
        """Whether the entry could not be compared at all."""
        return self in (Outcome.OPEN_ERROR, Outcome.DIGEST_DECODE_ERROR)


@dataclass(frozen=True)
class EntryResult:
    """Immutable result of verifying one manifest entry.

    Attributes
    ----------
    path : str
        Path exactly as written in the manifest.
    outcome : Outcome
        Classification of the entry.
    reason : str | None
        Human-readable cause for error outcomes.
    expected_sha256 : str | None
        Normalised expected digest, None if it could not be decoded.
    computed_sha256 : str | None
        Digest of the file content, None if no digest was computed.
    bytes_read : int
        Bytes fed through the digest.
    """

    path: str
    outcome: Outcome
    reason: str | None = None
    expected_sha256: str | None = None
    computed_sha256: str | None = None
    bytes_read: int = 0

    @property
    def ok(self) -> bool:
        """Whether the file matched its expected digest."""
        return self.outcome is Outcome.MATCH

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["outcome"] = self.outcome.value
        return data


@dataclass(frozen=True)
class VerificationReport:
    """Aggregate of all entry results from one verification pass.

    Attributes
    ----------
    results : tuple[EntryResult, ...]
        One result per manifest entry, in no guaranteed order.
    """

    results: tuple[EntryResult, ...]

    @property
    def ok(self) -> bool:
        """True iff every entry matched. An empty manifest is ok."""
        return all(r.ok for r in self.results)

    @property
    def failed(self) -> tuple[EntryResult, ...]:
        """Entries that did not match."""
        return tuple(r for r in self.results if not r.ok)

    @property
    def counts(self) -> dict[str, int]:
        """Number of entries per outcome, zero-filled."""
        tally = Counter(r.outcome for r in self.results)
        return {outcome.value: tally.get(outcome, 0) for outcome in Outcome}

    def get(self, path: str) -> EntryResult | None:
        """Look up the result for a manifest path."""
        for result in self.results:
            if result.path == path:
                return result
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "ok": self.ok,
            "total": len(self.results),
            "counts": self.counts,
            "results": [r.to_dict() for r in self.results],
        }
