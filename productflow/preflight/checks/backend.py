"""
Backend Connectivity Validation

Validates that the catalog backend is reachable and that every table the
chosen flow writes to can be read with the configured key.
"""

from typing import Dict, List

from ...backend.base import BackendError, CatalogBackend
from ...config.defaults import get_flow
from ..models import CheckGroup, CheckResult

GROUP = CheckGroup.BACKEND

# Tables touched by each step
FLOW_TABLES: Dict[str, List[str]] = {
    "brand-product-line": ["brands", "product_lines"],
    "categories": [],
    "variants": ["product_variants"],
    "nutrition": ["nutritional_analysis"],
    "options": ["product_options", "product_option_values"],
    "variant-options": ["product_variant_options"],
    "ingredients": ["ingredients", "ingredient_aliases", "product_variant_ingredients"],
    "rating": ["product_ratings"],
    "sources": ["retailers", "product_sources"],
}


def validate_backend(backend: CatalogBackend, flow: str) -> List[CheckResult]:
    """
    Validate backend connectivity.

    Table access is only checked once the backend answers.

    Args:
        backend: Backend to probe
        flow: Flow whose tables must be accessible

    Returns:
        List of check results
    """
    connectivity = _check_connectivity(backend)
    if not connectivity.passed:
        return [connectivity]
    return [connectivity, _check_table_access(backend, flow)]


def flow_tables(flow: str) -> List[str]:
    """Tables written by the steps of a flow, in step order."""
    tables: List[str] = []
    for step_id in get_flow(flow):
        tables.extend(t for t in FLOW_TABLES.get(step_id, []) if t not in tables)
    return tables


def _check_connectivity(backend: CatalogBackend) -> CheckResult:
    if not backend.ping():
        return CheckResult.problem(
            GROUP,
            "Backend Connectivity",
            "Backend is not reachable",
            ["Check the URL, API key and network access"],
        )
    return CheckResult.ok(GROUP, "Backend Connectivity", f"Connected ({backend.name})")


def _check_table_access(backend: CatalogBackend, flow: str) -> CheckResult:
    tables = flow_tables(flow)

    failed = []
    for table in tables:
        try:
            backend.select(table, "id", limit=1)
        except BackendError as e:
            failed.append(f"{table}: {e}")

    if failed:
        return CheckResult.problem(
            GROUP,
            "Table Access",
            f"{len(failed)} of {len(tables)} tables not accessible",
            failed,
        )
    return CheckResult.ok(GROUP, "Table Access", f"{len(tables)} tables accessible")
