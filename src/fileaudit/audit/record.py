"""Run record writer.

Builds the ``run.json`` record for an audited run and writes it atomically.
"""

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any

from fileaudit.audit.models import (
    ArtifactInfo,
    CommandInfo,
    EnvironmentInfo,
    ErrorInfo,
    RunRecord,
)
from fileaudit.utils import calculate_file_sha256, format_sha256, get_iso_timestamp

__all__ = ["RunRecordWriter", "RECORD_VERSION"]

RECORD_VERSION = "1.0.0"


class RunRecordWriter:
    """Atomic writer for the run record.

    Attributes
    ----------
    record : RunRecord
        Current record being built.
    output_dir : Path
        Output directory for run files.
    record_path : Path
        Final location of ``run.json``.
    """

    def __init__(
        self,
        run_id: str,
        operation: str,
        output_dir: Path,
        command: CommandInfo,
        environment: EnvironmentInfo,
        parameters: dict[str, Any],
    ) -> None:
        """Initialize run record writer.

        Parameters
        ----------
        run_id : str
            Unique run identifier.
        operation : str
            "verify" or "scan".
        output_dir : Path
            Output directory for the record.
        command : CommandInfo
            Command-line information.
        environment : EnvironmentInfo
            Execution environment.
        parameters : dict[str, Any]
            Configuration parameters.
        """
        self.output_dir = output_dir
        self.record_path = output_dir / "run.json"

        self.record = RunRecord(
            record_version=RECORD_VERSION,
            run_id=run_id,
            operation=operation,
            created_at=get_iso_timestamp(),
            status="partial",
            command=command,
            environment=environment,
            parameters=parameters,
        )

    def update_counters(self, counters: dict[str, int]) -> None:
        """Merge run-level counters."""
        self.record.counters.update(counters)

    def add_artifact(self, artifact: ArtifactInfo) -> None:
        """Register an output file."""
        self.record.artifacts.append(artifact)

    def add_error(self, error: ErrorInfo) -> None:
        """Add error record."""
        self.record.errors.append(error)

    def hash_artifact(self, relative_path: str) -> None:
        """Hash a file in the output directory and register it, if present.

        Parameters
        ----------
        relative_path : str
            Path relative to ``output_dir``.
        """
        artifact_path = self.output_dir / relative_path

        if artifact_path.exists():
            self.add_artifact(
                ArtifactInfo(
                    path=relative_path,
                    sha256=format_sha256(calculate_file_sha256(artifact_path)),
                    bytes=artifact_path.stat().st_size,
                )
            )

    def finish(
        self,
        status: str,
        finished_at: str | None = None,
        duration_seconds: float | None = None,
    ) -> None:
        """Finalize the record and write it atomically.

        Parameters
        ----------
        status : str
            Final run status ("success", "failed", "partial").
        finished_at : str | None, optional
            ISO8601 timestamp, uses current time if None.
        duration_seconds : float | None, optional
            Total run duration in seconds.
        """
        self.record.status = status
        self.record.finished_at = finished_at or get_iso_timestamp()
        self.record.duration_seconds = duration_seconds

        self._write_atomic(self.record_path)

    def _write_atomic(self, path: Path) -> None:
        """Write record atomically: write to temp, fsync, rename."""
        temp_path = path.with_suffix(".tmp")

        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())

        temp_path.replace(path)

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary."""
        return asdict(self.record)
