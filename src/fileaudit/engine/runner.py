"""Audited runs of the duplicate scanner and the integrity verifier.

Each run is one pass with an optional audit trail: when the config names
an output directory, events go to ``events.jsonl`` and a ``run.json``
record is written at the end, whatever the outcome.

Fatal errors (an unreadable scan input, an undecodable manifest) end the
run with ``success=False``; per-entry verification failures do not stop
the pass and only turn the aggregate verdict to failure.
"""

from pathlib import Path

from fileaudit.audit.context import EVENTS_FILENAME, RECORD_FILENAME, RunContext
from fileaudit.duplicates.scanner import scan_file
from fileaudit.engine.config import ScanConfig, ScanResult, VerifyConfig, VerifyResult
from fileaudit.errors import ManifestDecodeError, StreamReadError
from fileaudit.integrity.manifest import load_manifest
from fileaudit.integrity.verifier import verify_manifest

__all__ = ["run_verification", "run_duplicate_scan"]

_STAGE_MANIFEST = "manifest_decode"
_STAGE_VERIFY = "verify_entries"
_STAGE_SCAN = "scan_lines"


def _output_files(run: RunContext | None) -> dict[str, str]:
    if run is None:
        return {}
    return {
        "events": str(run.output_dir / EVENTS_FILENAME),
        "run_record": str(run.output_dir / RECORD_FILENAME),
    }


def run_verification(
    manifest_path: Path | str,
    config: VerifyConfig | None = None,
    command_argv: list[str] | None = None,
) -> VerifyResult:
    """Verify every file listed in a manifest file.

    Parameters
    ----------
    manifest_path : Path | str
        JSON manifest mapping paths to expected SHA-256 hex.
    config : VerifyConfig | None, optional
        Run configuration. If None, uses defaults.
    command_argv : list[str] | None, optional
        Command line recorded in run.json, uses sys.argv if None.

    Returns
    -------
    VerifyResult
        ``success`` is the aggregate verdict; ``report`` is None only when
        the manifest itself could not be decoded.

    Examples
    --------
        >>> from fileaudit.engine import run_verification
        >>> result = run_verification("checksums.json")
        >>> if not result.success:
        ...     print(result.error_message or result.report.failed)
    """
    manifest_path = Path(manifest_path)
    if config is None:
        config = VerifyConfig()

    base_dir = config.base_dir if config.base_dir is not None else manifest_path.parent

    run: RunContext | None = None
    if config.output_dir is not None:
        parameters = config.to_dict()
        parameters["manifest"] = str(manifest_path)
        run = RunContext.start(
            operation="verify",
            output_dir=config.output_dir,
            parameters=parameters,
            command_argv=command_argv,
        )

    try:
        if run:
            run.start_stage(_STAGE_MANIFEST)
        try:
            manifest = load_manifest(manifest_path)
        except ManifestDecodeError as e:
            if run:
                run.record_error(e, stage=_STAGE_MANIFEST, path=str(manifest_path))
                run.finish(status="failed")
            return VerifyResult(
                success=False,
                report=None,
                error_message=str(e),
                output_files=_output_files(run),
            )
        if run:
            run.finish_stage(_STAGE_MANIFEST, counters={"entries_total": len(manifest)})
            run.start_stage(_STAGE_VERIFY)

        report = verify_manifest(
            manifest,
            base_dir=base_dir,
            chunk_size=config.chunk_size,
            max_workers=config.max_workers,
        )

        if run:
            for entry in report.results:
                run.audit_logger.entry_verified(
                    path=entry.path,
                    outcome=entry.outcome.value,
                    reason=entry.reason,
                )
            run.finish_stage(_STAGE_VERIFY, counters=report.counts)
            run.finish(status="success" if report.ok else "failed")

        return VerifyResult(
            success=report.ok,
            report=report,
            output_files=_output_files(run),
        )
    except BaseException as e:
        if run:
            run.record_error(e, include_traceback=True)
            run.finish(status="failed")
        raise


def run_duplicate_scan(
    input_path: Path | str,
    config: ScanConfig | None = None,
    command_argv: list[str] | None = None,
) -> ScanResult:
    """Scan a line-delimited file for duplicate keys.

    Parameters
    ----------
    input_path : Path | str
        Input file, one key per line.
    config : ScanConfig | None, optional
        Run configuration. If None, uses defaults.
    command_argv : list[str] | None, optional
        Command line recorded in run.json, uses sys.argv if None.

    Returns
    -------
    ScanResult
        ``report`` holds the duplicates; it is None when the input could
        not be read, in which case no partial result is kept.
    """
    input_path = Path(input_path)
    if config is None:
        config = ScanConfig()

    run: RunContext | None = None
    if config.output_dir is not None:
        parameters = config.to_dict()
        parameters["input"] = str(input_path)
        run = RunContext.start(
            operation="scan",
            output_dir=config.output_dir,
            parameters=parameters,
            command_argv=command_argv,
        )

    on_duplicate = None
    if run:
        logger = run.audit_logger

        def on_duplicate(key: str, line_number: int) -> None:
            logger.duplicate_found(key=key, line_number=line_number)

    try:
        if run:
            run.start_stage(_STAGE_SCAN)
        try:
            report = scan_file(
                input_path,
                encoding=config.encoding,
                skip_blank=config.skip_blank,
                on_duplicate=on_duplicate,
            )
        except StreamReadError as e:
            if run:
                run.record_error(e, stage=_STAGE_SCAN, path=str(input_path))
                run.finish(status="failed")
            return ScanResult(
                success=False,
                report=None,
                error_message=str(e),
                output_files=_output_files(run),
            )

        if run:
            run.finish_stage(
                _STAGE_SCAN,
                counters={
                    "lines_read": report.lines_read,
                    "distinct_keys": report.distinct_keys,
                    "duplicates": len(report.duplicates),
                },
            )
            run.finish(status="success")

        return ScanResult(success=True, report=report, output_files=_output_files(run))
    except BaseException as e:
        if run:
            run.record_error(e, include_traceback=True)
            run.finish(status="failed")
        raise
