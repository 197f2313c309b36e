"""Tests for the streaming duplicate scanner."""

import io
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from fileaudit.duplicates import (
    SeenCounter,
    find_duplicates,
    find_duplicates_in_file,
    scan_file,
    scan_lines,
    strip_line_ending,
)
from fileaudit.errors import StreamReadError

# ---------------------------------------------------------------------------
# SeenCounter
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_counter_saturates_at_two() -> None:
    """Test count moves 0 → 1 → 2 and stays at 2."""
    counter = SeenCounter()

    assert counter.count("k") == 0
    assert counter.observe("k") is False
    assert counter.count("k") == 1
    assert counter.observe("k") is True
    assert counter.count("k") == 2
    assert counter.observe("k") is False
    assert counter.count("k") == 2


@pytest.mark.unit
def test_counter_reports_each_key_once() -> None:
    """Test a key enters duplicates only on its second occurrence."""
    counter = SeenCounter()
    for key in ["a", "a", "a", "a", "b"]:
        counter.observe(key)

    assert counter.duplicates == ["a"]
    assert len(counter) == 2


# ---------------------------------------------------------------------------
# find_duplicates
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_find_duplicates_basic_scenario() -> None:
    """Test the reference example returns the single repeated key."""
    assert find_duplicates(["a1b2c3", "x9y8z7", "a1b2c3", "q1w2e3"]) == ["a1b2c3"]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("lines", "expected"),
    [
        ([], []),
        (["only"], []),
        (["a", "b", "c"], []),
        (["a", "a"], ["a"]),
        (["a", "a", "a", "a", "a"], ["a"]),
        (["b", "a", "a", "b"], ["a", "b"]),
        (["x", "y", "y", "x", "x", "y"], ["y", "x"]),
    ],
)
def test_find_duplicates_order_and_uniqueness(lines: list[str], expected: list[str]) -> None:
    """Test each key ≥2 times appears once, ordered by second occurrence."""
    assert find_duplicates(lines) == expected


@pytest.mark.unit
def test_find_duplicates_membership_matches_counts() -> None:
    """Test result membership is exactly the set of keys seen at least twice."""
    lines = [f"k{i % 7}" for i in range(10)] + ["solo"]

    result = find_duplicates(lines)

    counts = {key: lines.count(key) for key in set(lines)}
    assert set(result) == {k for k, c in counts.items() if c >= 2}
    assert len(result) == len(set(result))


@pytest.mark.unit
def test_find_duplicates_consumes_generator_once() -> None:
    """Test a one-shot iterator works."""

    def gen() -> Iterator[str]:
        yield from ["a", "b", "a"]

    assert find_duplicates(gen()) == ["a"]


@pytest.mark.unit
def test_find_duplicates_on_text_stream() -> None:
    """Test line endings from a text stream are not part of the key."""
    stream = io.StringIO("alpha\nbeta\nalpha\r\nbeta")

    assert find_duplicates(stream) == ["alpha", "beta"]


@pytest.mark.unit
def test_blank_lines_are_keys_by_default() -> None:
    """Test empty lines count as the empty key unless skipped."""
    lines = ["a", "", "b", ""]

    assert find_duplicates(lines) == [""]
    assert find_duplicates(lines, skip_blank=True) == []


@pytest.mark.unit
def test_keys_are_case_and_whitespace_sensitive() -> None:
    """Test keys are compared exactly."""
    assert find_duplicates(["Key", "key", " key", "key "]) == []


@pytest.mark.unit
@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("abc\n", "abc"),
        ("abc\r\n", "abc"),
        ("abc", "abc"),
        ("abc\r", "abc\r"),
        ("\n", ""),
    ],
)
def test_strip_line_ending(line: str, expected: str) -> None:
    """Test only a trailing newline (with optional CR) is removed."""
    assert strip_line_ending(line) == expected


# ---------------------------------------------------------------------------
# scan_lines
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_scan_lines_report_counters() -> None:
    """Test report carries lines read and distinct keys."""
    report = scan_lines(["a", "b", "a", "c", "a"])

    assert report.duplicates == ("a",)
    assert report.lines_read == 5
    assert report.distinct_keys == 3
    assert report.to_dict() == {"duplicates": ["a"], "lines_read": 5, "distinct_keys": 3}


@pytest.mark.unit
def test_scan_lines_callback_gets_second_occurrence_line() -> None:
    """Test on_duplicate fires once per key with the 1-based line number."""
    seen: list[tuple[str, int]] = []

    scan_lines(["a", "b", "b", "a", "a"], on_duplicate=lambda k, n: seen.append((k, n)))

    assert seen == [("b", 3), ("a", 4)]


@pytest.mark.unit
def test_scan_lines_read_failure_aborts() -> None:
    """Test a read error mid-stream raises StreamReadError."""

    def failing() -> Iterator[str]:
        yield "a"
        yield "a"
        raise OSError("device gone")

    with pytest.raises(StreamReadError, match="device gone"):
        scan_lines(failing())


@pytest.mark.unit
def test_scan_lines_callback_error_propagates_unchanged() -> None:
    """Test an OSError from on_duplicate is not reported as a read failure."""

    def full_disk(key: str, line_number: int) -> None:
        raise OSError("disk full")

    with pytest.raises(OSError, match="disk full") as excinfo:
        scan_lines(["a", "a"], on_duplicate=full_disk)

    assert not isinstance(excinfo.value, StreamReadError)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_scan_file(make_file: Callable[..., Path]) -> None:
    """Test scanning a file on disk."""
    path = make_file("ids.txt", "a1b2c3\nx9y8z7\na1b2c3\nq1w2e3\n")

    report = scan_file(path)

    assert report.duplicates == ("a1b2c3",)
    assert report.lines_read == 4
    assert find_duplicates_in_file(path) == ["a1b2c3"]


@pytest.mark.unit
def test_scan_file_keeps_inner_carriage_return(make_file: Callable[..., Path]) -> None:
    """Test a bare CR does not split a line."""
    path = make_file("ids.txt", b"a\rb\na\rb\n")

    assert find_duplicates_in_file(path) == ["a\rb"]


@pytest.mark.unit
def test_scan_file_missing_raises(tmp_path: Path) -> None:
    """Test a missing input raises StreamReadError naming the source."""
    missing = tmp_path / "nope.txt"

    with pytest.raises(StreamReadError) as exc_info:
        scan_file(missing)

    assert exc_info.value.source == str(missing)


@pytest.mark.unit
def test_scan_file_callback_error_is_not_an_open_error(make_file: Callable[..., Path]) -> None:
    """Test an OSError from on_duplicate escapes scan_file as itself."""
    path = make_file("ids.txt", "a\na\n")

    def full_disk(key: str, line_number: int) -> None:
        raise OSError("disk full")

    with pytest.raises(OSError, match="^disk full$"):
        scan_file(path, on_duplicate=full_disk)


@pytest.mark.unit
def test_scan_file_decode_error_raises(make_file: Callable[..., Path]) -> None:
    """Test undecodable bytes raise StreamReadError, not a partial result."""
    path = make_file("ids.bin", b"ok\nok\n\xff\xfe\xfa\n")

    with pytest.raises(StreamReadError) as exc_info:
        find_duplicates_in_file(path)

    assert exc_info.value.source == str(path)


@pytest.mark.unit
def test_scan_file_with_other_encoding(make_file: Callable[..., Path]) -> None:
    """Test the encoding parameter is honored."""
    path = make_file("ids.txt", "café\ncafé\n".encode("latin-1"))

    assert find_duplicates_in_file(path, encoding="latin-1") == ["café"]
