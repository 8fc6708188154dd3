"""
Step: Ingredients

Map the ingredient panel of each variant. Names are matched against known
ingredients and their aliases; unknown ones are created.
"""

from typing import Any, List, Mapping

from rich.console import Console

from ...catalog.models import IngredientListInput, StepInputError
from ..checkpoint import StepResult
from .base import WizardStep


class IngredientsStep(WizardStep):
    """Attach ingredient lists to variants."""

    id = "ingredients"
    name = "Ingredients"
    description = "Paste each variant's ingredient list (comma separated)"

    def execute(self, shared_data: Mapping[str, Any], console: Console) -> StepResult:
        variants, _ = self.service.load_assignment_grid(shared_data.get("variant_ids") or [], [])
        if not variants:
            raise StepInputError("No variants available. Please add variants first.")

        mapped = 0
        created: List[str] = []
        for variant in variants:
            text = self.prompt_text(console, f"Ingredients for {variant['name']}", required=False)
            ingredients = IngredientListInput.from_text(text)
            if not ingredients.names:
                continue

            links, new_names = self.service.map_ingredients(variant["id"], ingredients)
            mapped += links
            created.extend(n for n in new_names if n not in created)

        if not mapped:
            raise StepInputError("Please enter ingredients for at least one variant.")

        message = f"{mapped} ingredients mapped."
        if created:
            message += f" New ingredients: {', '.join(created)}."
        return self.success(message=message)
