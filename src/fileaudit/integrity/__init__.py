"""Integrity verification of files against a checksum manifest.

Main Components
---------------
- load_manifest / parse_manifest: manifest decoding and validation
- verify_manifest: per-entry verification with an aggregate verdict
- format_report: one diagnostic line per entry
"""

from fileaudit.integrity.manifest import (
    build_manifest,
    load_manifest,
    parse_manifest,
    write_manifest,
)
from fileaudit.integrity.models import EntryResult, Outcome, VerificationReport
from fileaudit.integrity.report import format_report, format_result, summarize
from fileaudit.integrity.verifier import (
    decode_expected_digest,
    verify_entry,
    verify_manifest,
)

__all__ = [
    "Outcome",
    "EntryResult",
    "VerificationReport",
    "parse_manifest",
    "load_manifest",
    "build_manifest",
    "write_manifest",
    "decode_expected_digest",
    "verify_entry",
    "verify_manifest",
    "format_result",
    "format_report",
    "summarize",
]
