"""Diagnostic lines for verification results."""

from fileaudit.integrity.models import EntryResult, Outcome, VerificationReport

__all__ = [
    "CHECKSUM_MATCH",
    "CHECKSUM_MISMATCH",
    "ENTRY_ERROR",
    "format_result",
    "format_report",
    "summarize",
]

CHECKSUM_MATCH = "OK: {path}"
CHECKSUM_MISMATCH = "ALERT: {path} (checksum mismatch)"
ENTRY_ERROR = "ERROR: {path} ({reason})"


def format_result(result: EntryResult) -> str:
    """Render one entry as its diagnostic line.

    Parameters
    ----------
    result : EntryResult
        Entry to render.

    Returns
    -------
    str
        ``OK: ...``, ``ALERT: ... (checksum mismatch)`` or ``ERROR: ... (...)``.
    """
    if result.outcome is Outcome.MATCH:
        return CHECKSUM_MATCH.format(path=result.path)
    if result.outcome is Outcome.MISMATCH:
        return CHECKSUM_MISMATCH.format(path=result.path)
    return ENTRY_ERROR.format(path=result.path, reason=result.reason or result.outcome.value)


def format_report(report: VerificationReport) -> list[str]:
    """Render every entry of a report, one line each."""
    return [format_result(r) for r in report.results]


def summarize(report: VerificationReport) -> str:
    """One-line tally, e.g. ``3 checked: 1 ok, 1 mismatch, 1 error``."""
    counts = report.counts
    errors = counts[Outcome.OPEN_ERROR.value] + counts[Outcome.DIGEST_DECODE_ERROR.value]
    return (
        f"{len(report.results)} checked: "
        f"{counts[Outcome.MATCH.value]} ok, "
        f"{counts[Outcome.MISMATCH.value]} mismatch, "
        f"{errors} error"
    )
