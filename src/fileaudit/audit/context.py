"""Lifecycle of one audited run: event log, stages, errors, run record."""

import sys
import time
import traceback
from pathlib import Path
from typing import Any

from fileaudit.audit.helpers import describe_environment, generate_run_id
from fileaudit.audit.logger import AuditLogger
from fileaudit.audit.models import CommandInfo, ErrorInfo
from fileaudit.audit.record import RunRecordWriter
from fileaudit.utils import get_iso_timestamp

__all__ = ["RunContext", "EVENTS_FILENAME", "RECORD_FILENAME"]

EVENTS_FILENAME = "events.jsonl"
RECORD_FILENAME = "run.json"


class RunContext:
    """Ties an :class:`AuditLogger` and a :class:`RunRecordWriter` together.

    Create one with :meth:`start`. The run record is only written by
    :meth:`finish`, after the event log has been closed and hashed, so a
    ``run.json`` on disk always describes a complete ``events.jsonl``.

    Used as a context manager, a clean exit finishes the run as "success"
    and an exception finishes it as "failed" before propagating.
    """

    def __init__(
        self,
        run_id: str,
        output_dir: Path,
        audit_logger: AuditLogger,
        record_writer: RunRecordWriter,
    ) -> None:
        self.run_id = run_id
        self.output_dir = output_dir
        self.audit_logger = audit_logger
        self.record_writer = record_writer
        self._started = time.perf_counter()
        self._open_stages: dict[str, float] = {}
        self._finished = False

    @classmethod
    def start(
        cls,
        operation: str,
        output_dir: Path,
        parameters: dict[str, Any],
        command_argv: list[str] | None = None,
    ) -> "RunContext":
        """Open the event log in ``output_dir`` and log ``run_started``.

        Parameters
        ----------
        operation : str
            "verify" or "scan".
        output_dir : Path
            Created if missing.
        parameters : dict[str, Any]
            Run configuration, stored verbatim in the record.
        command_argv : list[str] | None, optional
            Invocation to record, defaults to ``sys.argv``.

        Returns
        -------
        RunContext
            A started run.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        run_id = generate_run_id()
        command = CommandInfo(argv=list(command_argv or sys.argv), cwd=Path.cwd().name or None)

        audit_logger = AuditLogger(run_id=run_id, log_path=output_dir / EVENTS_FILENAME)
        record_writer = RunRecordWriter(
            run_id=run_id,
            operation=operation,
            output_dir=output_dir,
            command=command,
            environment=describe_environment(),
            parameters=parameters,
        )
        audit_logger.run_started(command=command.argv, parameters=parameters)

        return cls(run_id, output_dir, audit_logger, record_writer)

    def start_stage(self, stage_name: str) -> None:
        self._open_stages[stage_name] = time.perf_counter()
        self.audit_logger.stage_started(stage=stage_name)

    def finish_stage(self, stage_name: str, counters: dict[str, int] | None = None) -> None:
        """Close a stage, log its duration and merge ``counters`` into the record.

        Raises
        ------
        ValueError
            If ``stage_name`` was never started.
        """
        if stage_name not in self._open_stages:
            raise ValueError(f"Stage not started: {stage_name}")
        elapsed = time.perf_counter() - self._open_stages.pop(stage_name)

        if counters:
            self.record_writer.update_counters(counters)
        self.audit_logger.stage_finished(
            stage=stage_name, duration_seconds=elapsed, counters=counters
        )
        self.audit_logger.set_stage(None)

    def record_error(
        self,
        exception: BaseException,
        stage: str | None = None,
        path: str | None = None,
        include_traceback: bool = False,
    ) -> None:
        """Log ``exception`` and add it to the run record's errors.

        Parameters
        ----------
        exception : BaseException
            The error to record.
        stage : str | None, optional
            Stage it happened in.
        path : str | None, optional
            Manifest or input file it concerns.
        include_traceback : bool, optional
            Attach the formatted traceback, by default False.
        """
        formatted = None
        if include_traceback:
            formatted = "".join(traceback.format_exception(exception))

        info = ErrorInfo(
            timestamp=get_iso_timestamp(),
            exception_class=type(exception).__name__,
            message=str(exception),
            stage=stage,
            traceback=formatted,
        )
        self.record_writer.add_error(info)
        self.audit_logger.error(
            exception_class=info.exception_class,
            message=info.message,
            stage=stage,
            path=path,
            traceback=formatted,
        )

    def finish(self, status: str = "success") -> None:
        """Log ``run_finished``, close and hash the event log, write run.json.

        Only the first call has any effect.
        """
        if self._finished:
            return
        self._finished = True

        elapsed = time.perf_counter() - self._started
        self.audit_logger.run_finished(status=status, duration_seconds=elapsed)
        self.audit_logger.close()

        self.record_writer.hash_artifact(EVENTS_FILENAME)
        self.record_writer.finish(
            status=status,
            finished_at=get_iso_timestamp(),
            duration_seconds=elapsed,
        )

    def __enter__(self) -> "RunContext":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_val is not None:
            self.record_error(exc_val, include_traceback=True)
            self.finish(status="failed")
        else:
            self.finish(status="success")
