"""
Pre-flight Check Models

Results produced by the config and backend check groups.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class CheckGroup(str, Enum):
    """The area a check belongs to; also the name accepted by run_check."""
    CONFIG = "config"
    BACKEND = "backend"


class CheckSeverity(str, Enum):
    """How much a failed check blocks a wizard run."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class CheckResult:
    """Outcome of one check, e.g. "API Key" in the config group."""
    group: CheckGroup
    name: str
    passed: bool
    severity: CheckSeverity
    message: str
    details: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls, group: CheckGroup, name: str, message: str) -> "CheckResult":
        return cls(group, name, True, CheckSeverity.INFO, message)

    @classmethod
    def problem(
        cls,
        group: CheckGroup,
        name: str,
        message: str,
        details: Optional[List[str]] = None,
        severity: CheckSeverity = CheckSeverity.ERROR,
    ) -> "CheckResult":
        """A failed check; warnings do not fail the preflight run."""
        return cls(group, name, False, severity, message, list(details or []))

    @property
    def blocking(self) -> bool:
        return not self.passed and self.severity == CheckSeverity.ERROR

    @property
    def status_label(self) -> str:
        """Rich-formatted status for the preflight table."""
        if self.passed:
            return "[green]PASS[/green]"
        if self.blocking:
            return "[red]FAIL[/red]"
        return "[yellow]WARN[/yellow]"

    def __str__(self) -> str:
        if self.passed:
            status = "PASS"
        else:
            status = "FAIL" if self.blocking else "WARN"
        return f"[{status}] {self.group.value}/{self.name}: {self.message}"
