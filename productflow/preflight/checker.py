"""
Pre-flight Checker

Main orchestrator for pre-flight validation checks.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..backend import CatalogBackend, get_backend
from ..config.models import ProductFlowConfig
from ..wizard.checkpoint import Checkpoint
from .checks.backend import validate_backend
from .checks.config import validate_config
from .models import CheckGroup, CheckResult, CheckSeverity


@dataclass
class PreflightResult:
    """Complete pre-flight check results."""
    checks: List[CheckResult]
    config_path: Optional[Path] = None

    @property
    def passed(self) -> bool:
        """Check if all critical checks passed."""
        return not self.errors

    @property
    def errors(self) -> List[CheckResult]:
        """Get all error-level failures."""
        return [c for c in self.checks if c.blocking]

    @property
    def warnings(self) -> List[CheckResult]:
        """Get all warning-level issues."""
        return [c for c in self.checks if not c.passed and c.severity == CheckSeverity.WARNING]

    def by_group(self, group: CheckGroup) -> List[CheckResult]:
        """Get the results of one check group."""
        return [c for c in self.checks if c.group == group]

    def summary(self) -> str:
        """Get summary string."""
        total = len(self.checks)
        passed = len([c for c in self.checks if c.passed])
        errors = len(self.errors)
        warnings = len(self.warnings)

        if errors > 0:
            status = "FAILED"
        elif warnings > 0:
            status = "PASSED with warnings"
        else:
            status = "PASSED"

        return f"{status}: {passed}/{total} checks passed ({errors} errors, {warnings} warnings)"


class PreflightChecker:
    """
    Orchestrates pre-flight validation checks.

    Runs a series of checks to validate:
    - The backend URL and API key are configured
    - The checkpoint directory is writable
    - The backend answers and the flow's tables are readable
    """

    def __init__(
        self,
        config: ProductFlowConfig,
        config_path: Optional[Path] = None,
        backend: Optional[CatalogBackend] = None,
    ):
        """
        Initialize the checker.

        Args:
            config: Loaded configuration
            config_path: Path the configuration was loaded from
            backend: Backend to probe (built from the config when omitted)
        """
        self.config = config
        self.config_path = config_path
        self._backend = backend

    @property
    def backend(self) -> CatalogBackend:
        if self._backend is None:
            self._backend = get_backend(self.config.backend)
        return self._backend

    @property
    def state_dir(self) -> Path:
        return Checkpoint(self.config.wizard.state_dir).state_dir.expanduser()

    def run_all(self) -> PreflightResult:
        """
        Run all pre-flight checks.

        Backend checks are skipped when the connection is not configured.

        Returns:
            PreflightResult with all check results
        """
        checks = validate_config(self.config, self.state_dir)

        if self.config.backend.is_configured or self._backend is not None:
            checks.extend(validate_backend(self.backend, self.config.wizard.flow.value))

        return PreflightResult(checks=checks, config_path=self.config_path)

    def run_check(self, check_name: str) -> Optional[List[CheckResult]]:
        """
        Run one check group by name.

        Args:
            check_name: A CheckGroup value, "config" or "backend"

        Returns:
            The group's results, or None if the name is unknown
        """
        check_map: Dict[CheckGroup, Callable[[], List[CheckResult]]] = {
            CheckGroup.CONFIG: lambda: validate_config(self.config, self.state_dir),
            CheckGroup.BACKEND: lambda: validate_backend(self.backend, self.config.wizard.flow.value),
        }

        try:
            group = CheckGroup(check_name)
        except ValueError:
            return None
        return check_map[group]()
