"""
Recon subsystem comparing a source and a target collection.

Five check invocations (document count, index definitions, sampled document
content, first N and last N ``_id`` values) run in sequence against two
collection handles; their verdicts are combined into one pass/fail result and
a bitmask exit status naming the failed checks.
"""

from .cli import run_cli
from .results import CheckResult, RunSummary
from .runner import run_reconciliation

__all__ = ["CheckResult", "RunSummary", "run_cli", "run_reconciliation"]
