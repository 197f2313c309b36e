"""Command-line interface for fileaudit.

Provides CLI commands for duplicate scanning and checksum verification.
"""

import importlib.metadata
import sys
from pathlib import Path

import click

from fileaudit.integrity.models import Outcome
from fileaudit.utils import CHUNK_SIZE

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("fileaudit")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development

_OUTCOME_COLORS = {
    Outcome.MATCH: None,
    Outcome.MISMATCH: "yellow",
    Outcome.OPEN_ERROR: "red",
    Outcome.DIGEST_DECODE_ERROR: "red",
}


@click.group()
@click.version_option(version=__version__, prog_name="fileaudit")
def cli() -> None:
    """Duplicate detection and SHA-256 integrity checks for files.

    Use 'fileaudit COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(dir_okay=False))
@click.option(
    "--skip-blank",
    is_flag=True,
    help="Ignore empty lines instead of treating them as keys",
)
@click.option(
    "--encoding",
    type=str,
    default="utf-8",
    help="Text encoding of the input (default: utf-8)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Write an audit trail (events.jsonl, run.json) to this directory",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def dups(
    input_path: str,
    skip_blank: bool,
    encoding: str,
    output_dir: str | None,
    verbose: bool,
) -> None:
    """Print every key that occurs more than once in INPUT_PATH.

    INPUT_PATH holds one key per line. Each duplicated key is printed once,
    in the order its second occurrence appears.

    Examples
    --------
        fileaudit dups ids.txt
        fileaudit dups ids.txt --skip-blank -o audit
    """
    from fileaudit.engine import ScanConfig, run_duplicate_scan

    try:
        config = ScanConfig(encoding=encoding, skip_blank=skip_blank, output_dir=output_dir)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--encoding") from e

    if verbose:
        click.echo(f"Scanning: {input_path}", err=True)

    result = run_duplicate_scan(input_path, config=config)

    if not result.success or result.report is None:
        click.secho(f"✗ Error: {result.error_message}", fg="red", err=True)
        sys.exit(1)

    for key in result.report.duplicates:
        click.echo(key)

    if verbose:
        report = result.report
        click.echo(
            f"{report.lines_read} lines, {report.distinct_keys} distinct keys, "
            f"{len(report.duplicates)} duplicated",
            err=True,
        )
        for name, path in result.output_files.items():
            click.echo(f"  {name}: {path}", err=True)


@cli.command()
@click.argument("manifest_path", type=click.Path(dir_okay=False))
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory relative paths resolve against (default: manifest's directory)",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=1,
    help="Number of files verified concurrently (default: 1)",
)
@click.option(
    "--chunk-size",
    type=click.IntRange(min=1),
    default=CHUNK_SIZE,
    help="Maximum bytes per read while hashing (default: 65536)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Write an audit trail (events.jsonl, run.json) to this directory",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def verify(
    manifest_path: str,
    base_dir: str | None,
    workers: int,
    chunk_size: int,
    output_dir: str | None,
    verbose: bool,
) -> None:
    """Verify files against the checksum manifest MANIFEST_PATH.

    MANIFEST_PATH is a JSON object mapping file paths to expected SHA-256
    hex digests. One line is printed per entry; the exit code is 0 only
    if every file matches.

    Examples
    --------
        fileaudit verify checksums.json
        fileaudit verify checksums.json --base-dir /data --workers 4 -o audit
    """
    from fileaudit.engine import VerifyConfig, run_verification
    from fileaudit.integrity.report import format_result, summarize

    config = VerifyConfig(
        chunk_size=chunk_size,
        max_workers=workers,
        base_dir=base_dir,
        output_dir=output_dir,
    )

    if verbose:
        click.echo(f"Verifying: {manifest_path}", err=True)

    result = run_verification(manifest_path, config=config)

    if result.report is None:
        click.secho(f"✗ Error: {result.error_message}", fg="red", err=True)
        sys.exit(1)

    for entry in result.report.results:
        click.secho(format_result(entry), fg=_OUTCOME_COLORS[entry.outcome])

    if verbose:
        click.echo(summarize(result.report), err=True)
        for name, path in result.output_files.items():
            click.echo(f"  {name}: {path}", err=True)

    if not result.success:
        sys.exit(1)


@cli.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    required=True,
    help="Manifest file to write",
)
@click.option(
    "--pattern",
    type=str,
    default="*",
    help="Glob pattern for file names (default: *)",
)
@click.option(
    "--no-recursive",
    is_flag=True,
    help="Only hash files directly under ROOT",
)
def generate(root: str, output: str, pattern: str, no_recursive: bool) -> None:
    """Write a checksum manifest for every file under ROOT.

    Paths in the manifest are relative to ROOT, so verify it with
    ``--base-dir ROOT`` unless the manifest is stored in ROOT itself.

    Examples
    --------
        fileaudit generate data/ -o data/checksums.json
    """
    from fileaudit.api import generate_manifest

    output_path = Path(output).resolve()

    try:
        manifest = generate_manifest(root, output_path, pattern=pattern, recursive=not no_recursive)
    except OSError as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.secho(f"✓ Wrote {len(manifest)} entries to {output}", fg="green")


if __name__ == "__main__":
    cli()
