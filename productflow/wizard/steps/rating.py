"""
Step: Rating

Score the product line on the standard factors (1-10). Without an overall
score the stored score is the average of all factors.
"""

from typing import Any, List, Mapping

from rich.console import Console

from ...catalog.models import CustomFactor, RatingInput
from ...config.defaults import DEFAULT_RATING, RATING_CATEGORIES, RATING_MAX, RATING_MIN
from ..checkpoint import StepResult
from .base import WizardStep


class RatingStep(WizardStep):
    """Rate the product line."""

    id = "rating"
    name = "Rating"
    description = "Rate the product line from 1 to 10"

    def execute(self, shared_data: Mapping[str, Any], console: Console) -> StepResult:
        factors = {}
        for category in RATING_CATEGORIES:
            factors[category["key"]] = self.prompt_float(
                console,
                category["label"],
                default=DEFAULT_RATING,
                min_val=RATING_MIN,
                max_val=RATING_MAX,
            )

        custom: List[CustomFactor] = []
        while self.prompt_confirm(console, "Add a custom factor?", default=False):
            custom.append(CustomFactor(
                key=self.prompt_text(console, "Factor name"),
                value=self.prompt_float(console, "Score", default=DEFAULT_RATING,
                                        min_val=RATING_MIN, max_val=RATING_MAX),
            ))

        overall = self.prompt_float(
            console,
            "Overall score (blank to average the factors)",
            min_val=RATING_MIN,
            max_val=RATING_MAX,
        )

        rating = RatingInput(overall_score=overall, factors=factors, custom_factors=custom)
        score = self.service.save_rating(shared_data.get("product_line_id"), rating)
        return self.success(message=f"Rating saved with a score of {score:g}/10.")
