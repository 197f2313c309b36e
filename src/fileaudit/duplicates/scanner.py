"""Streaming duplicate scanner for line-delimited inputs.

Memory is bounded by the number of distinct keys: each key maps to a
count that saturates at 2, which is all that is needed to tell unseen,
seen-once and duplicated keys apart.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fileaudit.errors import StreamReadError

__all__ = [
    "SeenCounter",
    "ScanReport",
    "strip_line_ending",
    "scan_lines",
    "scan_file",
    "find_duplicates",
    "find_duplicates_in_file",
]

_SATURATION = 2


class SeenCounter:
    """Saturating per-key occurrence counter.

    Attributes
    ----------
    duplicates : list[str]
        Keys in the order their second occurrence was observed.
    """

    def __init__(self) -> None:
        """Initialize an empty counter."""
        self._counts: dict[str, int] = {}
        self.duplicates: list[str] = []

    def observe(self, key: str) -> bool:
        """Record one occurrence of ``key``.

        Parameters
        ----------
        key : str
            Key read from the stream.

        Returns
        -------
        bool
            True only on the occurrence that turns the key into a duplicate.
        """
        seen = self._counts.get(key, 0)
        became_duplicate = seen == 1
        if became_duplicate:
            self.duplicates.append(key)
        if seen < _SATURATION:
            self._counts[key] = seen + 1
        return became_duplicate

    def count(self, key: str) -> int:
        """Return 0, 1 or 2 (meaning two or more) for ``key``."""
        return self._counts.get(key, 0)

    def __len__(self) -> int:
        return len(self._counts)


@dataclass(frozen=True)
class ScanReport:
    """Outcome of a completed duplicate scan.

    Attributes
    ----------
    duplicates : tuple[str, ...]
        Duplicated keys ordered by second occurrence.
    lines_read : int
        Lines consumed from the input.
    distinct_keys : int
        Distinct keys seen.
    """

    duplicates: tuple[str, ...]
    lines_read: int
    distinct_keys: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "duplicates": list(self.duplicates),
            "lines_read": self.lines_read,
            "distinct_keys": self.distinct_keys,
        }


def strip_line_ending(line: str) -> str:
    """Drop a trailing ``"\\n"`` or ``"\\r\\n"`` from ``line``."""
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def scan_lines(
    lines: Iterable[str],
    *,
    skip_blank: bool = False,
    on_duplicate: Callable[[str, int], None] | None = None,
) -> ScanReport:
    """Stream lines through a SeenCounter.

    Parameters
    ----------
    lines : Iterable[str]
        Line stream, e.g. an open text file.
    skip_blank : bool, optional
        Ignore empty lines instead of treating them as keys, by default False.
    on_duplicate : Callable[[str, int], None] | None, optional
        Called with the key and 1-based line number each time a key
        becomes a duplicate.

    Returns
    -------
    ScanReport
        Duplicates and counters for the whole stream.

    Raises
    ------
    StreamReadError
        If reading the stream fails. No partial result is returned.
        Exceptions raised by ``on_duplicate`` propagate unchanged.
    """
    counter = SeenCounter()
    lines_read = 0
    source = iter(lines)
    while True:
        # Only pulling from the stream counts as a read error.
        try:
            line = next(source)
        except StopIteration:
            break
        except (OSError, UnicodeDecodeError) as e:
            raise StreamReadError(f"Failed to read line stream: {e}") from e

        lines_read += 1
        key = strip_line_ending(line)
        if skip_blank and not key:
            continue
        if counter.observe(key) and on_duplicate is not None:
            on_duplicate(key, lines_read)

    return ScanReport(
        duplicates=tuple(counter.duplicates),
        lines_read=lines_read,
        distinct_keys=len(counter),
    )


def find_duplicates(lines: Iterable[str], *, skip_blank: bool = False) -> list[str]:
    """Find keys that occur two or more times in a line stream.

    The stream is consumed once and never held in memory as a whole.

    Parameters
    ----------
    lines : Iterable[str]
        Line stream, e.g. an open text file.
    skip_blank : bool, optional
        Ignore empty lines, by default False.

    Returns
    -------
    list[str]
        Each duplicated key once, ordered by its second occurrence.

    Raises
    ------
    StreamReadError
        If reading the stream fails. No partial result is returned.

    Examples
    --------
        >>> find_duplicates(["a1b2c3", "x9y8z7", "a1b2c3", "q1w2e3"])
        ['a1b2c3']
    """
    return list(scan_lines(lines, skip_blank=skip_blank).duplicates)


def scan_file(
    path: str | Path,
    *,
    encoding: str = "utf-8",
    skip_blank: bool = False,
    on_duplicate: Callable[[str, int], None] | None = None,
) -> ScanReport:
    """Open ``path`` as text and stream it through :func:`scan_lines`.

    Only ``"\\n"`` terminates a line, so a stray ``"\\r"`` inside a key
    is kept as part of it.

    Parameters
    ----------
    path : str | Path
        Line-delimited input file.
    encoding : str, optional
        Text encoding, by default "utf-8".
    skip_blank : bool, optional
        Ignore empty lines, by default False.
    on_duplicate : Callable[[str, int], None] | None, optional
        Forwarded to :func:`scan_lines`.

    Returns
    -------
    ScanReport
        Duplicates and counters for the whole file.

    Raises
    ------
    StreamReadError
        If the file cannot be opened, read or decoded.
    """
    file_path = Path(path)
    try:
        f = file_path.open("r", encoding=encoding, newline="\n")
    except OSError as e:
        raise StreamReadError(f"Cannot open {file_path}: {e}", source=str(file_path)) from e

    with f:
        try:
            return scan_lines(f, skip_blank=skip_blank, on_duplicate=on_duplicate)
        except StreamReadError as e:
            e.source = str(file_path)
            raise


def find_duplicates_in_file(
    path: str | Path,
    *,
    encoding: str = "utf-8",
    skip_blank: bool = False,
) -> list[str]:
    """Scan a file for duplicate lines.

    Raises
    ------
    StreamReadError
        If the file cannot be opened, read or decoded.
    """
    return list(scan_file(path, encoding=encoding, skip_blank=skip_blank).duplicates)
