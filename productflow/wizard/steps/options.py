"""
Step: Options

Define the attributes variants differ by (weight, flavor, life stage...)
and the values each can take. Existing options are reused by name.
"""

from typing import Any, List, Mapping

from rich.console import Console

from ...catalog.models import OptionInput
from ...config.defaults import OPTION_DATA_TYPES
from ..checkpoint import StepResult
from .base import WizardStep


class OptionsStep(WizardStep):
    """Create product options and their values."""

    id = "options"
    name = "Options"
    description = "Define product options and their values (blank name to finish)"

    def execute(self, shared_data: Mapping[str, Any], console: Console) -> StepResult:
        options: List[OptionInput] = []
        type_labels = [t["label"] for t in OPTION_DATA_TYPES]

        while True:
            console.print(f"\n[bold]Option {len(options) + 1}[/bold]")
            name = self.prompt_text(console, "Option name (e.g. weight)", required=False)
            if not name:
                break

            label = self.prompt_text(console, "Label", default=name.replace("_", " ").title())
            type_label = self.prompt_choice(console, "Data type", type_labels, default=type_labels[0])
            options.append(OptionInput(
                name=name,
                label=label,
                data_type=OPTION_DATA_TYPES[type_labels.index(type_label)]["value"],
                unit=self.prompt_text(console, "Unit", required=False),
                values=self.prompt_list(console, "Values (comma separated)", required=True),
            ))

        option_ids = self.service.create_options(options)
        if not option_ids:
            return self.success({"option_ids": []}, message="No options defined, skipping.")
        return self.success(
            {"option_ids": option_ids},
            message=f"{len(option_ids)} options saved.",
        )
