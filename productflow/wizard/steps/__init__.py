"""
Wizard Steps

Each step handles one catalog form and one completion signal.
"""

from typing import Dict, List, Type

from ...catalog.service import CatalogService
from ...config.defaults import get_flow
from .base import WizardStep
from .brand_product_line import BrandProductLineStep
from .categories import CategoriesStep
from .variants import VariantsStep
from .nutrition import NutritionStep
from .options import OptionsStep
from .variant_options import VariantOptionsStep
from .ingredients import IngredientsStep
from .rating import RatingStep
from .sources import SourcesStep

STEP_CLASSES: Dict[str, Type[WizardStep]] = {
    cls.id: cls
    for cls in (
        BrandProductLineStep,
        CategoriesStep,
        VariantsStep,
        NutritionStep,
        OptionsStep,
        VariantOptionsStep,
        IngredientsStep,
        RatingStep,
        SourcesStep,
    )
}


def build_steps(flow: str, service: CatalogService) -> List[WizardStep]:
    """Instantiate the steps of a flow in order."""
    return [STEP_CLASSES[step_id](service) for step_id in get_flow(flow)]


__all__ = [
    "WizardStep",
    "BrandProductLineStep",
    "CategoriesStep",
    "VariantsStep",
    "NutritionStep",
    "OptionsStep",
    "VariantOptionsStep",
    "IngredientsStep",
    "RatingStep",
    "SourcesStep",
    "STEP_CLASSES",
    "build_steps",
]
