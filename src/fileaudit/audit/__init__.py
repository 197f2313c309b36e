"""Audit logging and run record subsystem for fileaudit.

Main Components
---------------
- RunContext: High-level context manager for audited runs
- AuditLogger: JSONL event logger
- RunRecordWriter: run.json builder
"""

from fileaudit.audit.context import RunContext
from fileaudit.audit.helpers import generate_run_id
from fileaudit.audit.logger import AuditLogger
from fileaudit.audit.record import RunRecordWriter

__all__ = [
    "RunContext",
    "AuditLogger",
    "RunRecordWriter",
    "generate_run_id",
]
