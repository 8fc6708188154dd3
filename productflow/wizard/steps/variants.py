"""
Step: Variants

Enter the sellable variants (size, flavor...) of the product line.
"""

from typing import Any, List, Mapping

from rich.console import Console

from ...catalog.models import VariantInput
from ..checkpoint import StepResult
from .base import WizardStep


class VariantsStep(WizardStep):
    """Create product variants."""

    id = "variants"
    name = "Variants"
    description = "Add the variants of this product line (blank name to finish)"

    def execute(self, shared_data: Mapping[str, Any], console: Console) -> StepResult:
        variants: List[VariantInput] = []

        while True:
            console.print(f"\n[bold]Variant {len(variants) + 1}[/bold]")
            name = self.prompt_text(console, "Variant name", required=False)
            if not name:
                break

            variants.append(VariantInput(
                name=name,
                image_url=self.prompt_text(console, "Image URL", required=False),
                lookup_key=self.prompt_text(console, "UPC/EAN", required=False),
                asin=self.prompt_text(console, "ASIN", required=False),
            ))

        variant_ids = self.service.create_variants(shared_data.get("product_line_id"), variants)
        return self.success(
            {"variant_ids": variant_ids},
            message=f"{len(variant_ids)} variants created.",
        )
