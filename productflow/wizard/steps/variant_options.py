"""
Step: Variant Options

Assign an option value to each variant, e.g. "5 lb" for the weight of the
small bag.
"""

from typing import Any, List, Mapping

from rich.console import Console

from ...catalog.models import VariantOptionAssignment
from ..checkpoint import StepResult
from .base import WizardStep

NO_VALUE = "(none)"


class VariantOptionsStep(WizardStep):
    """Link variants to option values."""

    id = "variant-options"
    name = "Variant Options"
    description = "Choose the option value each variant has"

    def execute(self, shared_data: Mapping[str, Any], console: Console) -> StepResult:
        is_new = bool(shared_data.get("is_new_product_line"))
        variants, options = self.service.load_assignment_grid(
            shared_data.get("variant_ids") or [],
            shared_data.get("option_ids") or [],
        )

        assignments: List[VariantOptionAssignment] = []
        for variant in variants:
            console.print(f"\n[bold]{variant['name']}[/bold]")
            for option in options:
                values = [v["value"] for v in option["values"]]
                if not values:
                    continue
                choice = self.prompt_choice(console, option["label"], values + [NO_VALUE], default=NO_VALUE)
                if choice == NO_VALUE:
                    continue
                value_id = option["values"][values.index(choice)]["id"]
                assignments.append(VariantOptionAssignment(
                    variant_id=variant["id"],
                    option_id=option["id"],
                    value_id=value_id,
                ))

        written = self.service.assign_variant_options(assignments, is_new)
        if not written:
            return self.success(message="No option values assigned, skipping.")
        return self.success(message=f"{written} option values assigned.")
