"""Append-only JSONL event log for audited runs.

One JSON object per line, written compactly and flushed immediately, so
the log of a crashed run is still readable up to its last event.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from fileaudit.audit.models import LogEvent
from fileaudit.utils import get_iso_timestamp

__all__ = ["AuditLogger"]

_MATCH = "match"


class AuditLogger:
    """Writer for ``events.jsonl``.

    The file stays open for the lifetime of the logger. Events that do
    not name a stage are attributed to ``current_stage``.

    Attributes
    ----------
    run_id : str
        Id stamped on every event.
    log_path : Path
        The JSONL file being appended to.
    current_stage : str | None
        Stage attributed to events that do not name one.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        self.run_id = run_id
        self.log_path = log_path
        self.current_stage: str | None = None

        log_path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        """True once :meth:`close` has run."""
        return self._handle.closed

    def close(self) -> None:
        """Close the log; further calls are no-ops."""
        if not self._handle.closed:
            self._handle.close()

    def set_stage(self, stage: str | None) -> None:
        """Attribute subsequent events to ``stage`` (None clears it)."""
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        path: str | None = None,
    ) -> None:
        """Append one event.

        Parameters
        ----------
        event_type : str
            Name of the event, e.g. "entry_verified".
        data : dict[str, Any] | None, optional
            JSON-serializable payload.
        level : str, optional
            "DEBUG", "INFO", "WARN" or "ERROR", by default "INFO".
        stage : str | None, optional
            Overrides ``current_stage`` for this event.
        path : str | None, optional
            Manifest entry or input file the event is about.
        """
        record = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data if data is not None else {},
            stage=stage if stage is not None else self.current_stage,
            path=path,
        )
        self._handle.write(json.dumps(asdict(record), ensure_ascii=False, separators=(",", ":")))
        self._handle.write("\n")
        self._handle.flush()

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        self.event("run_started", data={"command": command, "parameters": parameters})

    def run_finished(self, status: str, duration_seconds: float) -> None:
        self.event("run_finished", data={"status": status, "duration_seconds": duration_seconds})

    def stage_started(self, stage: str) -> None:
        """Log the start of ``stage`` and make it the current stage."""
        self.set_stage(stage)
        self.event("stage_started", stage=stage)

    def stage_finished(
        self,
        stage: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Log the end of ``stage`` with its timing and optional counters."""
        data: dict[str, Any] = {"duration_seconds": duration_seconds}
        if counters:
            data["counters"] = counters
        self.event("stage_finished", data=data, stage=stage)

    def entry_verified(
        self,
        path: str,
        outcome: str,
        reason: str | None = None,
        stage: str | None = None,
    ) -> None:
        """Log the outcome of one manifest entry.

        Anything other than a match is logged at WARN, with ``reason``
        included when there is one.
        """
        data: dict[str, Any] = {"outcome": outcome}
        if reason is not None:
            data["reason"] = reason
        level = "INFO" if outcome == _MATCH else "WARN"
        self.event("entry_verified", data=data, level=level, stage=stage, path=path)

    def duplicate_found(self, key: str, line_number: int, stage: str | None = None) -> None:
        """Log a key at the line where it was seen for the second time."""
        self.event("duplicate_found", data={"key": key, "line": line_number}, stage=stage)

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        path: str | None = None,
        traceback: str | None = None,
    ) -> None:
        """Log an error at ERROR level; ``traceback`` is omitted when None."""
        data: dict[str, Any] = {"exception_class": exception_class, "message": message}
        if traceback is not None:
            data["traceback"] = traceback
        self.event("error", data=data, level="ERROR", stage=stage, path=path)
