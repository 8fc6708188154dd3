"""
Step: Nutrition

Guaranteed analysis of the product line. Entirely optional: leaving every
row blank skips the step.
"""

from typing import Any, List, Mapping

from rich.console import Console

from ...catalog.models import NutrientInput
from ...config.defaults import COMMON_NUTRIENTS, PREFILLED_NUTRIENTS, get_nutrient_label
from ..checkpoint import StepResult
from .base import WizardStep


class NutritionStep(WizardStep):
    """Record nutritional analysis."""

    id = "nutrition"
    name = "Nutrition"
    description = "Enter the guaranteed analysis (leave blank to skip)"

    def execute(self, shared_data: Mapping[str, Any], console: Console) -> StepResult:
        units = {n["key"]: n["unit"] for n in COMMON_NUTRIENTS}
        nutrients: List[NutrientInput] = []

        for key in PREFILLED_NUTRIENTS:
            value = self.prompt_float(console, f"{get_nutrient_label(key)} ({units[key]})", min_val=0)
            nutrients.append(NutrientInput(key=key, value=value, unit=units[key]))

        while self.prompt_confirm(console, "Add another nutrient?", default=False):
            key = self.prompt_text(console, "Nutrient")
            value = self.prompt_float(console, "Value", min_val=0, required=True)
            unit = self.prompt_text(console, "Unit", default=units.get(key.lower(), "%"), required=False)
            nutrients.append(NutrientInput(key=key, value=value, unit=unit))

        saved = self.service.save_nutrition(shared_data.get("product_line_id"), nutrients)
        if not saved:
            return self.success(message="No nutritional data entered, skipping.")
        return self.success(message=f"{saved} nutrient values saved.")
