"""
Pre-flight Check Implementations

Individual check modules for different validation areas.
"""

from .config import validate_config
from .backend import FLOW_TABLES, flow_tables, validate_backend

__all__ = [
    "validate_config",
    "validate_backend",
    "FLOW_TABLES",
    "flow_tables",
]
