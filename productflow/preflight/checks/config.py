"""
Configuration Validation

Validates that the loaded configuration can drive a wizard run.
"""

import os
from pathlib import Path
from typing import List

from ...config.models import ProductFlowConfig
from ..models import CheckGroup, CheckResult, CheckSeverity

GROUP = CheckGroup.CONFIG


def validate_config(config: ProductFlowConfig, state_dir: Path) -> List[CheckResult]:
    """
    Validate configuration completeness.

    Args:
        config: Loaded configuration
        state_dir: Directory the checkpoint will be written to

    Returns:
        List of check results
    """
    results = [_check_backend_url(config), _check_api_key(config)]
    if config.wizard.checkpoint:
        results.append(_check_state_dir(state_dir))
    return results


def _check_backend_url(config: ProductFlowConfig) -> CheckResult:
    if not config.backend.url:
        return CheckResult.problem(
            GROUP,
            "Backend URL",
            "No backend URL configured",
            ["Set 'backend.url' in your config file", "or export PRODUCTFLOW_URL"],
        )
    return CheckResult.ok(GROUP, "Backend URL", config.backend.url)


def _check_api_key(config: ProductFlowConfig) -> CheckResult:
    if not config.backend.api_key:
        return CheckResult.problem(
            GROUP,
            "API Key",
            "No API key configured",
            ["Set 'backend.api_key' or export PRODUCTFLOW_API_KEY"],
        )
    return CheckResult.ok(GROUP, "API Key", "API key present")


def _check_state_dir(state_dir: Path) -> CheckResult:
    """The nearest existing ancestor must be writable so the directory can be created."""
    existing = state_dir
    while not existing.exists() and existing != existing.parent:
        existing = existing.parent

    if not os.access(existing, os.W_OK):
        return CheckResult.problem(
            GROUP,
            "Checkpoint Directory",
            f"Cannot write to {state_dir}",
            ["Progress will not be resumable", "Set PRODUCTFLOW_STATE_DIR to a writable path"],
            severity=CheckSeverity.WARNING,
        )
    return CheckResult.ok(GROUP, "Checkpoint Directory", str(state_dir))
