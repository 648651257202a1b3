from __future__ import annotations

from dataclasses import dataclass

from mongocompare.common import PrintLogger
from mongocompare.config import CompareConfig
from mongocompare.endpoints.base import CollectionHandle


@dataclass
class ReconContext:
    """Lightweight execution context passed to reconciliation checks."""

    source: CollectionHandle
    target: CollectionHandle
    config: CompareConfig
    logger: PrintLogger
