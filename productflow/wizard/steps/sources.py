"""
Step: Sources

Record where each variant is sold: retailer, product URL and price.
"""

from typing import Any, List, Mapping

from rich.console import Console

from ...catalog.models import SourceInput, StepInputError
from ...config.defaults import AVAILABILITY_VALUES, DEFAULT_CURRENCY, SOURCE_TYPES
from ..checkpoint import StepResult
from .base import WizardStep


class SourcesStep(WizardStep):
    """Add retailer listings for variants."""

    id = "sources"
    name = "Sources"
    description = "Add where each variant can be bought (blank retailer to move on)"

    def execute(self, shared_data: Mapping[str, Any], console: Console) -> StepResult:
        variants, _ = self.service.load_assignment_grid(shared_data.get("variant_ids") or [], [])
        if not variants:
            raise StepInputError("No variants available. Please add variants first.")

        sources: List[SourceInput] = []
        for variant in variants:
            console.print(f"\n[bold]{variant['name']}[/bold]")
            while True:
                retailer = self.prompt_text(console, "Retailer", required=False)
                if not retailer:
                    break

                sources.append(SourceInput(
                    variant_id=variant["id"],
                    retailer_name=retailer,
                    url=self.prompt_text(console, "Product URL"),
                    price=self.prompt_float(console, "Price", min_val=0),
                    currency=self.prompt_text(console, "Currency", default=DEFAULT_CURRENCY),
                    availability=self.prompt_choice(console, "Availability", AVAILABILITY_VALUES,
                                                    default=AVAILABILITY_VALUES[0]),
                    source_type=self.prompt_choice(console, "Source type", SOURCE_TYPES,
                                                   default=SOURCE_TYPES[0]),
                ))

        written = self.service.add_sources(shared_data.get("brand_id"), sources)
        return self.success(message=f"{written} sources added.")
