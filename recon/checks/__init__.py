from .base import CheckOutcome, CheckRegistry, ReconCheck, ReconFatalError, registry
from .builtin import (
    BoundaryKeyCheck,
    CountCheck,
    IndexCheck,
    SampleContentCheck,
    check_counts,
    compare_ids,
    compare_indexes,
    compare_sample_content,
)

registry.register(CountCheck)
registry.register(IndexCheck)
registry.register(SampleContentCheck)
registry.register(BoundaryKeyCheck)

__all__ = [
    "BoundaryKeyCheck",
    "CheckOutcome",
    "CheckRegistry",
    "CountCheck",
    "IndexCheck",
    "ReconCheck",
    "ReconFatalError",
    "SampleContentCheck",
    "check_counts",
    "compare_ids",
    "compare_indexes",
    "compare_sample_content",
    "registry",
]
