"""Tests for CLI module."""

import hashlib
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from fileaudit.cli.main import cli

HELLO_SHA = hashlib.sha256(b"hello world\n").hexdigest()


@pytest.fixture
def runner() -> CliRunner:
    """Provide Click test CLI runner."""
    return CliRunner()


def _write_manifest(directory: Path, manifest: dict) -> Path:
    path = directory / "sums.json"
    path.write_text(json.dumps(manifest), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Top-level CLI
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_cli_version_flag(runner: CliRunner) -> None:
    """Test --version flag outputs version string."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "fileaudit" in result.output


@pytest.mark.unit
def test_cli_help(runner: CliRunner) -> None:
    """Test --help output lists commands."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("dups", "verify", "generate"):
        assert command in result.output


@pytest.mark.unit
def test_cli_invalid_command(runner: CliRunner) -> None:
    """Test invalid command returns non-zero exit code."""
    result = runner.invoke(cli, ["invalid-command"])

    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# dups command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_dups_prints_each_duplicate_once(runner: CliRunner, tmp_path: Path) -> None:
    """Test duplicated keys are printed one per line."""
    input_path = tmp_path / "ids.txt"
    input_path.write_text("a1b2c3\nx9y8z7\na1b2c3\nq1w2e3\na1b2c3\n", encoding="utf-8")

    result = runner.invoke(cli, ["dups", str(input_path)])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["a1b2c3"]


@pytest.mark.unit
def test_dups_no_duplicates(runner: CliRunner, tmp_path: Path) -> None:
    """Test no output and success when every key is unique."""
    input_path = tmp_path / "ids.txt"
    input_path.write_text("a\nb\nc\n", encoding="utf-8")

    result = runner.invoke(cli, ["dups", str(input_path)])

    assert result.exit_code == 0
    assert result.output == ""


@pytest.mark.unit
def test_dups_missing_input(runner: CliRunner, tmp_path: Path) -> None:
    """Test an unreadable input exits 1."""
    result = runner.invoke(cli, ["dups", str(tmp_path / "missing.txt")])

    assert result.exit_code == 1


@pytest.mark.unit
def test_dups_bad_encoding(runner: CliRunner, tmp_path: Path) -> None:
    """Test an unknown encoding is a usage error."""
    input_path = tmp_path / "ids.txt"
    input_path.write_text("a\n", encoding="utf-8")

    result = runner.invoke(cli, ["dups", str(input_path), "--encoding", "nope-codec"])

    assert result.exit_code == 2


@pytest.mark.unit
def test_dups_with_audit_trail(runner: CliRunner, tmp_path: Path) -> None:
    """Test -o writes the audit trail."""
    input_path = tmp_path / "ids.txt"
    input_path.write_text("a\na\n", encoding="utf-8")
    output_dir = tmp_path / "audit"

    result = runner.invoke(cli, ["dups", str(input_path), "-o", str(output_dir), "-v"])

    assert result.exit_code == 0
    assert (output_dir / "run.json").exists()
    assert (output_dir / "events.jsonl").exists()


# ---------------------------------------------------------------------------
# verify command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_verify_all_match_exits_zero(runner: CliRunner, data_dir: Path) -> None:
    """Test a clean manifest prints OK lines and exits 0."""
    manifest_path = _write_manifest(data_dir, {"a.txt": HELLO_SHA})

    result = runner.invoke(cli, ["verify", str(manifest_path)])

    assert result.exit_code == 0
    assert "OK: a.txt" in result.output


@pytest.mark.unit
def test_verify_reports_each_failure(runner: CliRunner, data_dir: Path) -> None:
    """Test mismatches and errors are reported and the exit code is 1."""
    manifest_path = _write_manifest(
        data_dir,
        {
            "a.txt": "0" * 64,
            "missing.txt": HELLO_SHA,
            "garbled.txt": "xyz",
        },
    )

    result = runner.invoke(cli, ["verify", str(manifest_path)])

    assert result.exit_code == 1
    lines = set(result.output.splitlines())
    assert "ALERT: a.txt (checksum mismatch)" in lines
    assert any(line.startswith("ERROR: missing.txt (") for line in lines)
    assert any(
        line.startswith("ERROR: garbled.txt (invalid expected SHA256 hex") for line in lines
    )


@pytest.mark.unit
def test_verify_unopenable_path_gets_error_line(runner: CliRunner, data_dir: Path) -> None:
    """Test a NUL byte in a path is reported as one ERROR line, not a crash."""
    manifest_path = _write_manifest(data_dir, {"bad\x00name": HELLO_SHA, "a.txt": HELLO_SHA})

    result = runner.invoke(cli, ["verify", str(manifest_path)])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    lines = result.output.splitlines()
    assert "OK: a.txt" in lines
    assert any(line.startswith("ERROR: bad") and "null byte" in line for line in lines)


@pytest.mark.unit
def test_verify_bad_manifest_exits_one(runner: CliRunner, tmp_path: Path) -> None:
    """Test an undecodable manifest exits 1 without entry lines."""
    manifest_path = tmp_path / "sums.json"
    manifest_path.write_text("[]", encoding="utf-8")

    result = runner.invoke(cli, ["verify", str(manifest_path)])

    assert result.exit_code == 1
    assert "OK:" not in result.output


@pytest.mark.unit
def test_verify_base_dir_and_workers(runner: CliRunner, tmp_path: Path, data_dir: Path) -> None:
    """Test --base-dir and --workers are honored."""
    manifest_path = _write_manifest(tmp_path, {"a.txt": HELLO_SHA})

    result = runner.invoke(
        cli,
        ["verify", str(manifest_path), "--base-dir", str(data_dir), "--workers", "3"],
    )

    assert result.exit_code == 0


@pytest.mark.unit
def test_verify_rejects_zero_workers(runner: CliRunner, data_dir: Path) -> None:
    """Test --workers must be at least 1."""
    manifest_path = _write_manifest(data_dir, {})

    result = runner.invoke(cli, ["verify", str(manifest_path), "--workers", "0"])

    assert result.exit_code == 2


@pytest.mark.unit
def test_verify_empty_manifest_exits_zero(runner: CliRunner, data_dir: Path) -> None:
    """Test an empty manifest passes."""
    manifest_path = _write_manifest(data_dir, {})

    result = runner.invoke(cli, ["verify", str(manifest_path)])

    assert result.exit_code == 0
    assert result.output == ""


# ---------------------------------------------------------------------------
# generate command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_generate_writes_manifest(runner: CliRunner, tmp_path: Path, data_dir: Path) -> None:
    """Test generate writes a manifest that verify accepts."""
    manifest_path = tmp_path / "sums.json"

    result = runner.invoke(cli, ["generate", str(data_dir), "-o", str(manifest_path)])

    assert result.exit_code == 0
    assert set(json.loads(manifest_path.read_text(encoding="utf-8"))) == {"a.txt", "sub/b.bin"}

    verify_result = runner.invoke(
        cli, ["verify", str(manifest_path), "--base-dir", str(data_dir)]
    )
    assert verify_result.exit_code == 0


@pytest.mark.unit
def test_generate_requires_output(runner: CliRunner, data_dir: Path) -> None:
    """Test -o is mandatory."""
    result = runner.invoke(cli, ["generate", str(data_dir)])

    assert result.exit_code == 2
