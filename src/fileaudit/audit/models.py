"""Dataclasses behind ``events.jsonl`` and ``run.json``.

Every field maps one-to-one onto a key of the serialized documents
(see ``schemas/log_event.schema.json`` and ``schemas/run_record.schema.json``),
so ``dataclasses.asdict`` is the whole serializer.
"""

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "CommandInfo",
    "EnvironmentInfo",
    "ArtifactInfo",
    "ErrorInfo",
    "RunRecord",
    "LogEvent",
]


@dataclass
class CommandInfo:
    """How the run was invoked.

    ``cwd`` keeps only the directory's basename so records can be shared
    without leaking the full local path.
    """

    argv: list[str]
    cwd: str | None = None


@dataclass
class EnvironmentInfo:
    """Interpreter, OS and library versions the run executed with."""

    python_version: str
    platform: str
    package_version: str
    dependencies: dict[str, str] = field(default_factory=dict)


@dataclass
class ArtifactInfo:
    """A file the run produced, pinned by its digest.

    Attributes
    ----------
    path : str
        Location relative to the run's output directory.
    sha256 : str
        ``sha256:``-prefixed hex digest of the finished file.
    bytes : int | None
        Size of the file.
    """

    path: str
    sha256: str
    bytes: int | None = None


@dataclass
class ErrorInfo:
    """A fatal or unexpected error raised during the run."""

    timestamp: str
    exception_class: str
    message: str
    stage: str | None = None
    traceback: str | None = None


@dataclass
class RunRecord:
    """Contents of ``run.json``.

    Attributes
    ----------
    record_version : str
        Semver of this document layout.
    run_id : str
        Id shared with every event of the run.
    operation : str
        "verify" or "scan".
    created_at : str
        UTC start time.
    status : str
        "partial" while running, then "success" or "failed".
    command : CommandInfo
        Invocation.
    environment : EnvironmentInfo
        Versions in effect.
    parameters : dict[str, Any]
        Config the run was started with.
    counters : dict[str, int]
        Totals merged from every finished stage, e.g. entries per outcome
        or lines read.
    artifacts : list[ArtifactInfo]
        Files produced, currently the event log.
    finished_at : str | None
        UTC end time.
    duration_seconds : float | None
        Wall-clock duration.
    errors : list[ErrorInfo]
        Errors recorded along the way.
    """

    record_version: str
    run_id: str
    operation: str
    created_at: str
    status: str
    command: CommandInfo
    environment: EnvironmentInfo
    parameters: dict[str, Any]
    counters: dict[str, int] = field(default_factory=dict)
    artifacts: list[ArtifactInfo] = field(default_factory=list)
    finished_at: str | None = None
    duration_seconds: float | None = None
    errors: list[ErrorInfo] = field(default_factory=list)


@dataclass
class LogEvent:
    """One line of ``events.jsonl``.

    ``path`` is set for events about a single manifest entry or input
    file; ``stage`` is inherited from the logger when not given.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any]
    stage: str | None = None
    path: str | None = None
