"""
Pre-flight Check Module

Validates configuration and backend access before a wizard run.
"""

from .models import CheckGroup, CheckResult, CheckSeverity
from .checker import PreflightChecker, PreflightResult

__all__ = [
    "CheckGroup",
    "PreflightChecker",
    "PreflightResult",
    "CheckResult",
    "CheckSeverity",
]
