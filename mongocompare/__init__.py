"""
Sampling-based equivalence checks between a source and a target MongoDB collection.

The comparison engine lives in the sibling ``recon`` package; this package
holds the shared pieces it builds on (configuration, logging, BSON value
equality, index listing normalization and collection handles).
"""

from .common import PrintLogger, RUN_ID
from .config import CompareConfig, ConnectionSettings, validate_config

__all__ = ["CompareConfig", "ConnectionSettings", "PrintLogger", "RUN_ID", "validate_config"]
