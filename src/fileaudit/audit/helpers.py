"""Run identity and environment capture for the audit trail."""

import importlib.metadata
import platform
import secrets
from datetime import UTC, datetime

from fileaudit.audit.models import EnvironmentInfo

__all__ = [
    "TRACKED_DISTRIBUTIONS",
    "generate_run_id",
    "distribution_version",
    "describe_environment",
]

# Third-party distributions whose versions go into every run record.
TRACKED_DISTRIBUTIONS = ("click", "jsonschema")


def generate_run_id() -> str:
    """Return a sortable, collision-resistant run id.

    The id is the UTC start time followed by eight random hex digits,
    e.g. ``2026-10-19T08:15:02.417733Z__5f0c9a1e``.
    """
    started = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return f"{started}__{secrets.token_hex(4)}"


def distribution_version(name: str) -> str:
    """Installed version of distribution ``name``, or "unknown"."""
    try:
        return importlib.metadata.version(name)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def describe_environment(
    distributions: tuple[str, ...] = TRACKED_DISTRIBUTIONS,
) -> EnvironmentInfo:
    """Snapshot the interpreter, OS and library versions for a run record.

    Parameters
    ----------
    distributions : tuple[str, ...], optional
        Distributions to report, by default click and jsonschema.

    Returns
    -------
    EnvironmentInfo
        Environment block of ``run.json``.
    """
    return EnvironmentInfo(
        python_version=platform.python_version(),
        platform=f"{platform.system()}-{platform.release()}-{platform.machine()}",
        package_version=distribution_version("fileaudit"),
        dependencies={name: distribution_version(name) for name in distributions},
    )
