from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from mongocompare.common import RUN_ID

FATAL_EXIT_STATUS = 32
PASSED_MESSAGE = "Passed all validation checks"
FAILED_MESSAGE = "Some validation checks failed. See above."


@dataclass(frozen=True)
class CheckResult:
    check_name: str
    check_type: str
    passed: bool
    exit_bit: int = 0
    diagnostics: Tuple[str, ...] = ()
    detail: Mapping[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> str:
        return "pass" if self.passed else "fail"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "check_name": self.check_name,
            "check_type": self.check_type,
            "status": self.status,
            "exit_bit": self.exit_bit,
            "diagnostics": list(self.diagnostics),
            "detail": dict(self.detail),
        }


@dataclass
class RunSummary:
    results: List[CheckResult]
    total: int
    passed: int
    failed: int

    @classmethod
    def from_results(cls, results: Iterable[CheckResult]) -> "RunSummary":
        collected = list(results)
        passed = sum(1 for result in collected if result.passed)
        return cls(results=collected, total=len(collected), passed=passed, failed=len(collected) - passed)

    @property
    def ok(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def exit_status(self) -> int:
        status = 0
        for result in self.results:
            if not result.passed:
                status |= result.exit_bit
        return status

    @property
    def failed_checks(self) -> List[str]:
        return [result.check_name for result in self.results if not result.passed]

    def render_lines(self) -> List[str]:
        lines: List[str] = []
        for result in self.results:
            if result.passed:
                continue
            lines.append(f"[{result.check_name}] failed")
        lines.append(PASSED_MESSAGE if self.ok else FAILED_MESSAGE)
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": RUN_ID,
            "status": "passed" if self.ok else "failed",
            "exit_status": self.exit_status,
            "summary": {
                "total": self.total,
                "passed": self.passed,
                "failed": self.failed,
            },
            "checks": [result.to_dict() for result in self.results],
        }


__all__ = ["CheckResult", "FAILED_MESSAGE", "FATAL_EXIT_STATUS", "PASSED_MESSAGE", "RunSummary"]
