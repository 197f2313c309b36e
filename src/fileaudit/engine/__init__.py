"""Run orchestration engine.

This package runs the duplicate scanner and the integrity verifier with
an optional audit trail, and holds their configuration and result types.
"""

from fileaudit.engine.config import ScanConfig, ScanResult, VerifyConfig, VerifyResult
from fileaudit.engine.runner import run_duplicate_scan, run_verification

__all__ = [
    "VerifyConfig",
    "VerifyResult",
    "ScanConfig",
    "ScanResult",
    "run_verification",
    "run_duplicate_scan",
]
