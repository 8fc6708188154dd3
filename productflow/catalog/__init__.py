"""Catalog form models and the writes behind each wizard step."""

from .models import (
    StepInputError,
    BrandInput,
    ProductLineInput,
    VariantInput,
    OptionInput,
    VariantOptionAssignment,
    IngredientListInput,
    SourceInput,
    NutrientInput,
    CustomFactor,
    RatingInput,
)
from .service import CatalogService

__all__ = [
    "StepInputError",
    "BrandInput",
    "ProductLineInput",
    "VariantInput",
    "OptionInput",
    "VariantOptionAssignment",
    "IngredientListInput",
    "SourceInput",
    "NutrientInput",
    "CustomFactor",
    "RatingInput",
    "CatalogService",
]
