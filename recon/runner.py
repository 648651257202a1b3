from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pymongo import ASCENDING, DESCENDING

from mongocompare.common import PrintLogger
from mongocompare.config import CompareConfig
from mongocompare.endpoints.base import CollectionHandle

from .checks import registry
from .context import ReconContext
from .results import CheckResult, RunSummary


def build_check_plan(config: CompareConfig) -> List[Dict[str, Any]]:
    """The five check invocations of a run, in execution order, with their exit bits."""
    return [
        {"type": "count", "name": "count", "exit_bit": 1},
        {"type": "indexes", "name": "indexes", "exit_bit": 2},
        {
            "type": "sample_content",
            "name": "sample_content",
            "exit_bit": 4,
            "sample_size": config.sample_size,
        },
        {
            "type": "boundary_ids",
            "name": "first_ids",
            "exit_bit": 8,
            "count": config.first_ids_count,
            "direction": ASCENDING,
        },
        {
            "type": "boundary_ids",
            "name": "last_ids",
            "exit_bit": 16,
            "count": config.last_ids_count,
            "direction": DESCENDING,
        },
    ]


def run_reconciliation(
    *,
    source: CollectionHandle,
    target: CollectionHandle,
    config: CompareConfig,
    logger: PrintLogger,
    plan: Optional[Sequence[Dict[str, Any]]] = None,
) -> RunSummary:
    """
    Run every check in order and aggregate the verdicts.

    A failing check never stops the ones after it. A ReconFatalError does:
    it propagates to the caller because the comparison itself could not be
    completed.
    """
    ctx = ReconContext(source=source, target=target, config=config, logger=logger)
    logger.info("recon_start", source=source.namespace, target=target.namespace)
    results: List[CheckResult] = []
    for check_cfg in plan if plan is not None else build_check_plan(config):
        check_type = str(check_cfg.get("type", "")).strip().lower()
        check_cls = registry.get(check_type)
        if check_cls is None:
            raise ValueError(f"Unknown reconciliation check type: {check_type or 'unknown'}")
        results.append(check_cls(ctx, dict(check_cfg)).run())
    summary = RunSummary.from_results(results)
    logger.log(
        "INFO" if summary.ok else "WARN",
        "recon_end",
        passed=summary.passed,
        failed=summary.failed,
        exit_status=summary.exit_status,
    )
    return summary


__all__ = ["build_check_plan", "run_reconciliation"]
