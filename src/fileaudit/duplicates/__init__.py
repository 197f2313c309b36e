"""Duplicate scanning for large line-delimited streams."""

from fileaudit.duplicates.scanner import (
    ScanReport,
    SeenCounter,
    find_duplicates,
    find_duplicates_in_file,
    scan_file,
    scan_lines,
    strip_line_ending,
)

__all__ = [
    "SeenCounter",
    "ScanReport",
    "strip_line_ending",
    "scan_lines",
    "scan_file",
    "find_duplicates",
    "find_duplicates_in_file",
]
