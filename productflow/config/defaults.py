"""
Default configuration values and catalog reference lists.

Provides the flow definitions, the reference lists shown by the steps,
and the template written by ``productflow init``.
"""

from typing import Any, Dict, List


FLOWS: Dict[str, List[str]] = {
    "standard": [
        "brand-product-line",
        "variants",
        "options",
        "variant-options",
        "ingredients",
        "sources",
    ],
    "extended": [
        "brand-product-line",
        "categories",
        "variants",
        "nutrition",
        "options",
        "variant-options",
        "ingredients",
        "rating",
        "sources",
    ],
}

OPTION_DATA_TYPES: List[Dict[str, str]] = [
    {"value": "text", "label": "Text"},
    {"value": "number", "label": "Number"},
    {"value": "boolean", "label": "Yes/No"},
]

TARGET_SPECIES = ["dog", "cat"]

PREDEFINED_CATEGORIES: List[Dict[str, Any]] = [
    {"id": "dry-food", "name": "Dry Food", "description": "Kibble and dry pet food products", "target_species": ["dog", "cat"]},
    {"id": "wet-food", "name": "Wet Food", "description": "Canned and wet food products", "target_species": ["dog", "cat"]},
    {"id": "treats", "name": "Treats & Snacks", "description": "Training treats and snacks", "target_species": ["dog", "cat"]},
    {"id": "supplements", "name": "Supplements", "description": "Health and nutrition supplements", "target_species": ["dog", "cat"]},
    {"id": "raw-food", "name": "Raw Food", "description": "Raw and freeze-dried foods", "target_species": ["dog", "cat"]},
]

RATING_CATEGORIES: List[Dict[str, str]] = [
    {"key": "overall_quality", "label": "Overall Quality", "description": "General product quality assessment"},
    {"key": "ingredient_quality", "label": "Ingredient Quality", "description": "Quality and sourcing of ingredients"},
    {"key": "nutritional_value", "label": "Nutritional Value", "description": "Completeness and balance of nutrition"},
    {"key": "price_value", "label": "Price/Value Ratio", "description": "Value for money compared to alternatives"},
    {"key": "palatability", "label": "Palatability", "description": "How much pets typically enjoy this food"},
    {"key": "digestibility", "label": "Digestibility", "description": "How easily pets can digest this food"},
    {"key": "packaging", "label": "Packaging Quality", "description": "Quality and convenience of packaging"},
    {"key": "availability", "label": "Availability", "description": "How easy it is to find and purchase"},
    {"key": "brand_reputation", "label": "Brand Reputation", "description": "Brand's reputation and trustworthiness"},
]

DEFAULT_RATING = 5.0
RATING_MIN = 1.0
RATING_MAX = 10.0

COMMON_NUTRIENTS: List[Dict[str, str]] = [
    {"key": "protein", "label": "Protein", "unit": "%"},
    {"key": "fat", "label": "Fat", "unit": "%"},
    {"key": "fiber", "label": "Crude Fiber", "unit": "%"},
    {"key": "moisture", "label": "Moisture", "unit": "%"},
    {"key": "ash", "label": "Ash", "unit": "%"},
    {"key": "carbohydrates", "label": "Carbohydrates", "unit": "%"},
    {"key": "calcium", "label": "Calcium", "unit": "%"},
    {"key": "phosphorus", "label": "Phosphorus", "unit": "%"},
    {"key": "sodium", "label": "Sodium", "unit": "%"},
    {"key": "calories", "label": "Calories", "unit": "kcal/cup"},
    {"key": "omega_3", "label": "Omega-3 Fatty Acids", "unit": "%"},
    {"key": "omega_6", "label": "Omega-6 Fatty Acids", "unit": "%"},
]

# Guaranteed-analysis rows offered first in the nutrition step
PREFILLED_NUTRIENTS = ["protein", "fat", "fiber", "moisture", "ash"]

SOURCE_TYPES = ["online", "retail", "manufacturer"]
AVAILABILITY_VALUES = ["in_stock", "out_of_stock", "limited", "discontinued"]
DEFAULT_CURRENCY = "USD"


def get_flow(name: str) -> List[str]:
    """Get the step ids of a flow, falling back to the standard flow."""
    return list(FLOWS.get(name, FLOWS["standard"]))


def get_nutrient_label(key: str) -> str:
    """Display label for a nutrient key."""
    for nutrient in COMMON_NUTRIENTS:
        if nutrient["key"] == key:
            return nutrient["label"]
    return key[:1].upper() + key[1:]


def get_config_template() -> Dict[str, Any]:
    """Get the configuration template written by ``productflow init``."""
    return {
        "backend": {
            "url": "https://your-project.supabase.co",
            "api_key": "your-service-role-or-anon-key",
            "schema_name": "public",
            "timeout": 30,
            "verify_ssl": True,
        },
        "wizard": {
            "flow": "standard",
            "checkpoint": True,
        },
        "logging": {
            "level": "WARNING",
            "file": None,
        },
    }
