from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from pymongo.errors import PyMongoError

from ..context import ReconContext
from ..results import CheckResult


class ReconFatalError(RuntimeError):
    """Raised when a comparison cannot be completed; aborts the whole run."""

    def __init__(self, message: str, check_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.check_name = check_name


@dataclass
class CheckOutcome:
    """Verdict of one comparison plus the lines explaining a failure."""

    passed: bool
    diagnostics: List[str] = field(default_factory=list)
    detail: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.passed


class CheckRegistry:
    """Registry of available reconciliation checks."""

    def __init__(self) -> None:
        self._by_type: Dict[str, Type["ReconCheck"]] = {}

    def register(self, check_cls: Type["ReconCheck"]) -> None:
        check_type = check_cls.type_name()
        self._by_type[check_type] = check_cls

    def get(self, check_type: str) -> Optional[Type["ReconCheck"]]:
        return self._by_type.get(check_type.lower())

    def all(self) -> Dict[str, Type["ReconCheck"]]:
        return dict(self._by_type)


registry = CheckRegistry()


class ReconCheck(abc.ABC):
    """Base class for reconciliation checks."""

    def __init__(self, context: ReconContext, cfg: Optional[Dict[str, Any]] = None) -> None:
        self.context = context
        self.cfg = cfg or {}
        self.name = str(self.cfg.get("name") or self.type_name()).strip() or self.type_name()
        self.exit_bit = int(self.cfg.get("exit_bit", 0))

    @classmethod
    def type_name(cls) -> str:
        return getattr(cls, "_TYPE", cls.__name__.lower())

    def run(self) -> CheckResult:
        logger = self.context.logger
        logger.info("recon_check_start", check=self.name, type=self.type_name())
        try:
            outcome = self._execute()
        except ReconFatalError as exc:
            if exc.check_name is None:
                exc.check_name = self.name
            raise
        except PyMongoError as exc:
            raise ReconFatalError(f"{self.name}: database operation failed: {exc}", check_name=self.name) from exc
        for line in outcome.diagnostics:
            logger.warn("recon_check_diagnostic", check=self.name, message=line)
        logger.log(
            "INFO" if outcome.passed else "WARN",
            "recon_check_end",
            check=self.name,
            status="pass" if outcome.passed else "fail",
        )
        return CheckResult(
            check_name=self.name,
            check_type=self.type_name(),
            passed=outcome.passed,
            exit_bit=self.exit_bit,
            diagnostics=tuple(outcome.diagnostics),
            detail=dict(outcome.detail),
        )

    @abc.abstractmethod
    def _execute(self) -> CheckOutcome:
        ...


__all__ = ["CheckOutcome", "CheckRegistry", "ReconCheck", "ReconFatalError", "registry"]
