"""Duplicate detection and SHA-256 integrity verification for files.

This package provides:
- Duplicates (fileaudit.duplicates) — streaming duplicate-key scanner
- Integrity (fileaudit.integrity) — manifest decoding and per-file verification
- Engine (fileaudit.engine) — audited runs of both
- Audit (fileaudit.audit) — event logging and run records
- CLI (fileaudit.cli) — command-line interface
- Public API (fileaudit.api) — high-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from fileaudit.api import (
    find_duplicates,
    find_duplicates_in_file,
    generate_manifest,
    verify,
    verify_manifest_file,
)
from fileaudit.errors import (
    DigestDecodeError,
    FileAuditError,
    ManifestDecodeError,
    StreamReadError,
)
from fileaudit.integrity import EntryResult, Outcome, VerificationReport

__all__ = [
    "__version__",
    "__license__",
    "find_duplicates",
    "find_duplicates_in_file",
    "verify",
    "verify_manifest_file",
    "generate_manifest",
    "Outcome",
    "EntryResult",
    "VerificationReport",
    "FileAuditError",
    "StreamReadError",
    "ManifestDecodeError",
    "DigestDecodeError",
]
