"""
Catalog Service

The writes behind each wizard step. Every method either completes its
inserts or raises (BackendError from the backend, StepInputError for
missing input), so a step can decide whether to signal completion.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..backend.base import CatalogBackend, ILike, In
from ..config.defaults import PREDEFINED_CATEGORIES
from ..utils.logger import get_logger
from .models import (
    BrandInput,
    IngredientListInput,
    NutrientInput,
    OptionInput,
    ProductLineInput,
    RatingInput,
    SourceInput,
    StepInputError,
    VariantInput,
    VariantOptionAssignment,
)
from .rules import average_score, dedupe_values, normalize_key

logger = get_logger(__name__)


def _exact(text: str) -> ILike:
    """Case-insensitive equality (wildcards in the input are dropped)."""
    return ILike(text.replace("*", "").replace("%", ""))


class CatalogService:
    """
    Writes catalog rows for the wizard steps.

    Table layout follows the hosted catalog schema: brands, product_lines,
    product_variants, product_options, product_option_values,
    product_variant_options, ingredients, ingredient_aliases,
    product_variant_ingredients, retailers, product_sources,
    nutritional_analysis and product_ratings.
    """

    def __init__(self, backend: CatalogBackend):
        """
        Initialize the service.

        Args:
            backend: Data access backend
        """
        self.backend = backend

    # ------------------------------------------------------------
    # Brand and product line
    # ------------------------------------------------------------

    def find_brands(self, name: str = "") -> List[Dict[str, Any]]:
        """Brands whose name contains ``name`` (all brands when blank)."""
        filters = {"name": ILike(f"*{name.strip()}*")} if name.strip() else None
        return self.backend.select("brands", "id, name, website", filters=filters, order="name")

    def create_brand(self, brand: BrandInput) -> str:
        """Create a brand and return its id."""
        created = self.backend.insert("brands", brand.model_dump())
        logger.info(f"Created brand '{brand.name}'")
        return created[0]["id"]

    def find_product_lines(self, brand_id: str) -> List[Dict[str, Any]]:
        """Product lines of a brand."""
        return self.backend.select(
            "product_lines",
            "id, name, description",
            filters={"brand_id": brand_id},
            order="name",
        )

    def create_product_line(self, brand_id: str, line: ProductLineInput) -> str:
        """Create a product line under a brand and return its id."""
        if not brand_id:
            raise StepInputError("A brand is required before creating a product line.")
        row = {"brand_id": brand_id, **line.model_dump()}
        created = self.backend.insert("product_lines", row)
        logger.info(f"Created product line '{line.name}'")
        return created[0]["id"]

    # ------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------

    def create_variants(self, product_line_id: Optional[str], variants: Sequence[VariantInput]) -> List[str]:
        """
        Insert the named variants of a product line.

        Args:
            product_line_id: Product line from the first step
            variants: Variant rows; rows without a name are ignored

        Returns:
            Ids of the created variants, in input order
        """
        valid = [v for v in variants if v.is_named]
        if not valid:
            raise StepInputError("Please add at least one variant with a name.")
        if not product_line_id:
            raise StepInputError("Product line ID is required to create variants.")

        rows = [
            {
                "product_id": product_line_id,
                "name": v.name,
                "image_url": v.image_url,
                "lookup_key": v.lookup_key,
                "asin": v.asin,
            }
            for v in valid
        ]
        created = self.backend.insert("product_variants", rows)
        return [row["id"] for row in created]

    # ------------------------------------------------------------
    # Options
    # ------------------------------------------------------------

    def create_options(self, options: Sequence[OptionInput]) -> List[str]:
        """
        Create (or reuse) options and their values.

        An option whose name already exists is reused. Values are trimmed
        and deduplicated, and values the option already has are skipped.

        Returns:
            Option ids, one per distinct valid option (empty when none)
        """
        option_ids: List[str] = []

        for option in options:
            if not option.is_complete:
                continue

            name = option.name.strip()
            existing = self.backend.select_one("product_options", "id", filters={"name": name})
            if existing:
                option_id = existing["id"]
                logger.debug(f"Reusing option '{name}'")
            else:
                created = self.backend.insert("product_options", {
                    "name": name,
                    "label": option.label.strip(),
                    "data_type": option.data_type,
                    "unit": option.unit,
                })
                option_id = created[0]["id"]

            self._add_option_values(option_id, option.values)

            if option_id not in option_ids:
                option_ids.append(option_id)

        return option_ids

    def _add_option_values(self, option_id: str, values: Sequence[str]) -> int:
        """Insert the values an option does not have yet; returns the count."""
        wanted = dedupe_values(values)
        if not wanted:
            return 0

        existing = self.backend.select(
            "product_option_values",
            "value",
            filters={"product_option_id": option_id, "value": In(wanted)},
        )
        present = {row["value"] for row in existing}
        missing = [v for v in wanted if v not in present]

        if missing:
            self.backend.insert("product_option_values", [
                {"product_option_id": option_id, "value": value} for value in missing
            ])
        return len(missing)

    def load_assignment_grid(
        self,
        variant_ids: Sequence[str],
        option_ids: Sequence[str],
    ) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """
        Load the variants and options (with values) to assign.

        Returns:
            (variants, options); each option carries a ``values`` list
        """
        variants: List[Dict[str, Any]] = []
        options: List[Dict[str, Any]] = []

        if variant_ids:
            variants = self.backend.select(
                "product_variants", "id, name", filters={"id": In(variant_ids)}
            )

        if option_ids:
            rows = self.backend.select(
                "product_options",
                "id, name, label, product_option_values(id, value)",
                filters={"id": In(option_ids)},
            )
            options = [
                {
                    "id": row["id"],
                    "name": row.get("name"),
                    "label": row.get("label") or row.get("name"),
                    "values": row.get("product_option_values") or [],
                }
                for row in rows
            ]

        return variants, options

    def assign_variant_options(
        self,
        assignments: Sequence[VariantOptionAssignment],
        is_new_product_line: bool,
    ) -> int:
        """
        Link variants to option values.

        Existing product lines may skip this step; a new product line needs
        at least one assignment.

        Returns:
            Number of assignments written
        """
        valid = [a for a in assignments if a.value_id]
        if not valid:
            if is_new_product_line:
                raise StepInputError("Please assign at least one option value to a variant.")
            return 0

        self.backend.insert("product_variant_options", [
            {"product_variant_id": a.variant_id, "product_option_value_id": a.value_id}
            for a in valid
        ])
        return len(valid)

    # ------------------------------------------------------------
    # Ingredients
    # ------------------------------------------------------------

    def resolve_ingredient(self, name: str) -> Tuple[str, bool]:
        """
        Find an ingredient by name or alias, creating it when unknown.

        Returns:
            (ingredient_id, created)
        """
        found = self.backend.select_one("ingredients", "id", filters={"name": _exact(name)})
        if found:
            return found["id"], False

        alias = self.backend.select_one(
            "ingredient_aliases", "ingredient_id", filters={"alias": _exact(name)}
        )
        if alias and alias.get("ingredient_id"):
            return alias["ingredient_id"], False

        created = self.backend.insert("ingredients", {"name": name})
        logger.info(f"Created ingredient '{name}'")
        return created[0]["id"], True

    def map_ingredients(self, variant_id: str, ingredients: IngredientListInput) -> Tuple[int, List[str]]:
        """
        Attach an ingredient list to a variant.

        Returns:
            (links written, names of newly created ingredients)
        """
        ingredient_ids: List[str] = []
        created_names: List[str] = []
        seen_names = set()

        for name in ingredients.names:
            if name.lower() in seen_names:
                continue
            seen_names.add(name.lower())

            ingredient_id, created = self.resolve_ingredient(name)
            if created:
                created_names.append(name)
            if ingredient_id not in ingredient_ids:
                ingredient_ids.append(ingredient_id)

        if ingredient_ids:
            self.backend.insert("product_variant_ingredients", [
                {"product_variant_id": variant_id, "ingredient_id": ingredient_id}
                for ingredient_id in ingredient_ids
            ])
        return len(ingredient_ids), created_names

    # ------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------

    def add_sources(self, brand_id: Optional[str], sources: Sequence[SourceInput]) -> int:
        """
        Record retailer listings for variants.

        Retailers are matched by name (case-insensitive) and created when
        missing.

        Returns:
            Number of sources written
        """
        if not sources:
            raise StepInputError("Please add at least one source.")

        retailer_ids: Dict[str, str] = {}
        rows = []

        for source in sources:
            key = source.retailer_name.lower()
            if key not in retailer_ids:
                retailer = self.backend.select_one(
                    "retailers", "id", filters={"name": _exact(source.retailer_name)}
                )
                if retailer:
                    retailer_ids[key] = retailer["id"]
                else:
                    created = self.backend.insert("retailers", {"name": source.retailer_name})
                    retailer_ids[key] = created[0]["id"]

            rows.append({
                "product_variant_id": source.variant_id,
                "retailer_id": retailer_ids[key],
                "retailer_name": source.retailer_name,
                "brand_id": brand_id,
                "url": source.url,
                "price": source.price,
                "currency": source.currency,
                "availability": source.availability,
                "source_type": source.source_type,
            })

        self.backend.insert("product_sources", rows)
        return len(rows)

    # ------------------------------------------------------------
    # Nutrition, rating, categories
    # ------------------------------------------------------------

    def save_nutrition(self, product_line_id: Optional[str], nutrients: Sequence[NutrientInput]) -> int:
        """Save filled nutrient rows; returns how many were written (may be 0)."""
        valid = [n for n in nutrients if n.is_filled]
        if not valid:
            return 0
        if not product_line_id:
            raise StepInputError("Product line ID is required to save nutritional analysis")

        self.backend.insert("nutritional_analysis", [
            {
                "product_line_id": product_line_id,
                "key": normalize_key(n.key),
                "value": n.value,
                "unit": n.unit,
            }
            for n in valid
        ])
        return len(valid)

    @staticmethod
    def combine_factors(rating: RatingInput) -> Dict[str, float]:
        """Standard factors plus named custom factors under normalized keys."""
        factors = dict(rating.factors)
        for factor in rating.custom_factors:
            if factor.key.strip():
                factors[normalize_key(factor.key)] = factor.value
        return factors

    def save_rating(self, product_line_id: Optional[str], rating: RatingInput) -> float:
        """
        Save a product line rating.

        Returns:
            The stored score: the overall score if given, else the factor average
        """
        if not product_line_id:
            raise StepInputError("Product line ID is required to save rating")

        factors = self.combine_factors(rating)
        score = rating.overall_score if rating.overall_score else average_score(factors.values())

        self.backend.insert("product_ratings", {
            "product_line_id": product_line_id,
            "score": score,
            "factors": factors,
        })
        return score

    def select_categories(self, category_ids: Sequence[str]) -> List[str]:
        """
        Validate a category selection. Nothing is written to the backend.

        Returns:
            The selected ids in selection order (the first is the primary)
        """
        known = {c["id"] for c in PREDEFINED_CATEGORIES}
        selected = dedupe_values(category_ids)
        if not selected:
            raise StepInputError("Please select at least one category.")
        unknown = [c for c in selected if c not in known]
        if unknown:
            raise StepInputError(f"Unknown categories: {', '.join(unknown)}")
        return selected
