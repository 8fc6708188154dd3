"""
Step: Brand & Product Line

Select or create the brand and the product line everything else hangs off.
"""

from typing import Any, Dict, List, Mapping, Tuple

from rich.console import Console

from ...catalog.models import BrandInput, ProductLineInput
from ...config.defaults import TARGET_SPECIES
from ..checkpoint import StepResult
from .base import WizardStep

NEW_BRAND = "Create a new brand"
NEW_PRODUCT_LINE = "Create a new product line"


class BrandProductLineStep(WizardStep):
    """Pick an existing brand and product line or create them."""

    id = "brand-product-line"
    name = "Brand & Product Line"
    description = "Select or create the brand and product line"

    def execute(self, shared_data: Mapping[str, Any], console: Console) -> StepResult:
        brand_id, brand_name = self._choose_brand(console)
        product_line_id, is_new = self._choose_product_line(console, brand_id)

        data = {
            "brand_id": brand_id,
            "product_line_id": product_line_id,
            "is_new_product_line": is_new,
        }
        verb = "created" if is_new else "selected"
        return self.success(data, message=f"Product line {verb} for {brand_name}.")

    def _choose_brand(self, console: Console) -> Tuple[str, str]:
        search = self.prompt_text(console, "Search brands (blank lists all)", required=False)
        brands = self.service.find_brands(search)

        if brands:
            labels = self._labels(brands)
            choice = self.prompt_choice(console, "Brand", labels + [NEW_BRAND])
            if choice != NEW_BRAND:
                brand = brands[labels.index(choice)]
                return brand["id"], brand["name"]
        else:
            console.print("[dim]No matching brands, creating a new one.[/dim]")

        brand = BrandInput(
            name=self.prompt_text(console, "Brand name", default=search),
            website=self.prompt_text(console, "Website", required=False),
            contact_email=self.prompt_text(console, "Contact email", required=False),
        )
        return self.service.create_brand(brand), brand.name

    def _choose_product_line(self, console: Console, brand_id: str) -> Tuple[str, bool]:
        lines = self.service.find_product_lines(brand_id)

        if lines:
            labels = self._labels(lines)
            choice = self.prompt_choice(console, "Product line", labels + [NEW_PRODUCT_LINE])
            if choice != NEW_PRODUCT_LINE:
                return lines[labels.index(choice)]["id"], False

        species_hint = ", ".join(TARGET_SPECIES)
        line = ProductLineInput(
            name=self.prompt_text(console, "Product line name"),
            description=self.prompt_text(console, "Description", required=False),
            target_species=self.prompt_list(console, f"Target species ({species_hint})"),
        )
        return self.service.create_product_line(brand_id, line), True

    @staticmethod
    def _labels(rows: List[Dict[str, Any]]) -> List[str]:
        # Numbered so rows with the same name stay distinguishable
        return [f"{row['name']} ({i})" if sum(r["name"] == row["name"] for r in rows) > 1 else row["name"]
                for i, row in enumerate(rows, 1)]
