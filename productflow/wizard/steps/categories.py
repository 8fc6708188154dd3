"""
Step: Categories

Tag the product line with one or more of the predefined categories. The
first category chosen is the primary one.
"""

from typing import Any, List, Mapping

from rich.console import Console

from ...config.defaults import PREDEFINED_CATEGORIES
from ..checkpoint import StepResult
from .base import WizardStep


class CategoriesStep(WizardStep):
    """Select product categories."""

    id = "categories"
    name = "Categories"
    description = "Select the categories this product line belongs to"

    def execute(self, shared_data: Mapping[str, Any], console: Console) -> StepResult:
        self.show_table(
            console,
            "Available Categories",
            ["#", "Category", "Description"],
            [[str(i), c["name"], c["description"]] for i, c in enumerate(PREDEFINED_CATEGORIES, 1)],
        )

        default = ", ".join(shared_data.get("category_ids") or [])
        entries = self.prompt_list(console, "Categories (numbers or ids, comma separated)", default=default)

        category_ids = self.service.select_categories(self._resolve(entries))
        primary = self._name(category_ids[0])
        return self.success(
            {"category_ids": category_ids},
            message=f"{len(category_ids)} categories selected (primary: {primary}).",
        )

    @staticmethod
    def _resolve(entries: List[str]) -> List[str]:
        """Map list numbers to category ids; other entries pass through."""
        resolved = []
        for entry in entries:
            if entry.isdigit() and 1 <= int(entry) <= len(PREDEFINED_CATEGORIES):
                resolved.append(PREDEFINED_CATEGORIES[int(entry) - 1]["id"])
            else:
                resolved.append(entry.lower())
        return resolved

    @staticmethod
    def _name(category_id: str) -> str:
        for category in PREDEFINED_CATEGORIES:
            if category["id"] == category_id:
                return category["name"]
        return category_id
