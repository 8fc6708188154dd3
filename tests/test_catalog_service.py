"""
Tests for the catalog service.

Tests cover:
- Brand and product line creation
- Variant and option writes
- Ingredient resolution through names and aliases
- Sources, nutrition, rating and categories
"""

import pytest

from productflow.catalog import (
    BrandInput,
    CustomFactor,
    IngredientListInput,
    NutrientInput,
    OptionInput,
    RatingInput,
    SourceInput,
    StepInputError,
    VariantInput,
    VariantOptionAssignment,
)
from productflow.catalog.rules import average_score, dedupe_values, normalize_key


class TestRules:
    """Test the pure helpers."""

    def test_normalize_key(self):
        assert normalize_key("  Grain  Free Score ") == "grain_free_score"

    def test_dedupe_values(self):
        assert dedupe_values([" 5 lb", "5 lb", "", "  ", "10 lb"]) == ["5 lb", "10 lb"]

    def test_average_score_rounds_half_up(self):
        assert average_score([7, 8]) == 7.5
        assert average_score([7.25, 7.2]) == 7.2
        assert average_score([7, 8, 8]) == 7.7
        assert average_score([6, 7]) == 6.5

    def test_average_score_default(self):
        assert average_score([]) == 5.0


class TestBrandAndProductLine:
    """Test the first step's writes."""

    def test_find_brands(self, service):
        service.create_brand(BrandInput(name="Acme Pet"))
        service.create_brand(BrandInput(name="Other"))
        assert [b["name"] for b in service.find_brands("acme")] == ["Acme Pet"]
        assert len(service.find_brands("")) == 2

    def test_blank_optional_fields_stored_as_null(self, service, backend):
        service.create_brand(BrandInput(name=" Acme ", website="  ", contact_email=""))
        row = backend.rows("brands")[0]
        assert row["name"] == "Acme"
        assert row["website"] is None
        assert row["contact_email"] is None

    def test_product_line_requires_brand(self, service):
        from productflow.catalog import ProductLineInput

        with pytest.raises(StepInputError):
            service.create_product_line("", ProductLineInput(name="Line"))

    def test_find_product_lines(self, service, product_line):
        lines = service.find_product_lines(product_line["brand_id"])
        assert [line["id"] for line in lines] == [product_line["product_line_id"]]


class TestVariants:
    """Test variant creation."""

    def test_only_named_variants_created(self, service, backend, product_line):
        ids = service.create_variants(
            product_line["product_line_id"],
            [VariantInput(name="Small"), VariantInput(name="  "), VariantInput(name="Large", asin="")],
        )
        assert len(ids) == 2
        rows = backend.rows("product_variants")
        assert [r["name"] for r in rows] == ["Small", "Large"]
        assert all(r["product_id"] == product_line["product_line_id"] for r in rows)
        assert rows[1]["asin"] is None

    def test_no_named_variant_is_an_error(self, service, product_line):
        with pytest.raises(StepInputError, match="at least one variant"):
            service.create_variants(product_line["product_line_id"], [VariantInput()])

    def test_missing_product_line(self, service):
        with pytest.raises(StepInputError, match="Product line ID"):
            service.create_variants(None, [VariantInput(name="Small")])


class TestOptions:
    """Test option and option value creation."""

    def test_values_trimmed_and_deduplicated(self, service, backend):
        ids = service.create_options([
            OptionInput(name="weight", label="Weight", values=[" 5 lb", "5 lb", "", "10 lb"]),
        ])
        assert len(ids) == 1
        assert [r["value"] for r in backend.rows("product_option_values")] == ["5 lb", "10 lb"]

    def test_existing_option_reused_and_values_skipped(self, service, backend):
        first = service.create_options([OptionInput(name="weight", label="Weight", values=["5 lb"])])
        second = service.create_options([OptionInput(name="weight", label="Weight", values=["5 lb", "15 lb"])])

        assert first == second
        assert len(backend.rows("product_options")) == 1
        assert [r["value"] for r in backend.rows("product_option_values")] == ["5 lb", "15 lb"]

    def test_incomplete_options_skipped(self, service, backend):
        ids = service.create_options([
            OptionInput(name="flavor", label="", values=["Chicken"]),
            OptionInput(name="size", label="Size", values=["  "]),
        ])
        assert ids == []
        assert backend.rows("product_options") == []

    def test_duplicate_options_return_one_id(self, service):
        ids = service.create_options([
            OptionInput(name="weight", label="Weight", values=["5 lb"]),
            OptionInput(name="weight", label="Weight", values=["10 lb"]),
        ])
        assert len(ids) == 1

    def test_invalid_data_type_rejected(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            OptionInput(name="weight", label="Weight", data_type="date", values=["1"])


class TestVariantOptions:
    """Test the assignment grid and assignments."""

    def test_assignment_grid(self, service, product_line):
        variant_ids = service.create_variants(product_line["product_line_id"], [VariantInput(name="Small")])
        option_ids = service.create_options([OptionInput(name="weight", label="Weight", values=["5 lb"])])

        variants, options = service.load_assignment_grid(variant_ids, option_ids)

        assert [v["name"] for v in variants] == ["Small"]
        assert options[0]["label"] == "Weight"
        assert [v["value"] for v in options[0]["values"]] == ["5 lb"]

    def test_assignments_written(self, service, backend):
        written = service.assign_variant_options([
            VariantOptionAssignment(variant_id="v1", option_id="o1", value_id="val1"),
            VariantOptionAssignment(variant_id="v2", option_id="o1", value_id=None),
        ], is_new_product_line=True)
        assert written == 1
        rows = backend.rows("product_variant_options")
        assert len(rows) == 1
        assert rows[0]["product_variant_id"] == "v1"
        assert rows[0]["product_option_value_id"] == "val1"

    def test_empty_assignments_for_new_line_is_error(self, service):
        with pytest.raises(StepInputError):
            service.assign_variant_options([], is_new_product_line=True)

    def test_empty_assignments_for_existing_line_skips(self, service, backend):
        assert service.assign_variant_options([], is_new_product_line=False) == 0
        assert backend.rows("product_variant_options") == []


class TestIngredients:
    """Test ingredient mapping."""

    def test_resolves_name_alias_and_creates(self, service, backend):
        chicken = backend.insert("ingredients", {"name": "Chicken"})[0]["id"]
        rice = backend.insert("ingredients", {"name": "Brown Rice"})[0]["id"]
        backend.insert("ingredient_aliases", {"alias": "whole grain rice", "ingredient_id": rice})

        links, created = service.map_ingredients(
            "v1", IngredientListInput.from_text("chicken, Whole Grain Rice, Kelp, CHICKEN")
        )

        assert links == 3
        assert created == ["Kelp"]
        linked = [r["ingredient_id"] for r in backend.rows("product_variant_ingredients")]
        assert linked[:2] == [chicken, rice]

    def test_from_text_drops_blanks(self):
        assert IngredientListInput.from_text(" a, ,b ,").names == ["a", "b"]


class TestSources:
    """Test retailer sources."""

    def test_retailers_resolved_once(self, service, backend):
        backend.insert("retailers", {"name": "Chewy"})
        count = service.add_sources("b1", [
            SourceInput(variant_id="v1", retailer_name="chewy", url="https://chewy.com/a", price=10),
            SourceInput(variant_id="v2", retailer_name="Petco", url="https://petco.com/b"),
            SourceInput(variant_id="v2", retailer_name="petco", url="https://petco.com/c"),
        ])

        assert count == 3
        assert len(backend.rows("retailers")) == 2
        sources = backend.rows("product_sources")
        assert sources[1]["retailer_id"] == sources[2]["retailer_id"]
        assert all(s["brand_id"] == "b1" for s in sources)
        assert sources[0]["currency"] == "USD"

    def test_no_sources_is_error(self, service):
        with pytest.raises(StepInputError):
            service.add_sources("b1", [])

    def test_source_url_validated(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            SourceInput(variant_id="v1", retailer_name="Chewy", url="chewy.com")


class TestNutritionAndRating:
    """Test nutrition and rating writes."""

    def test_blank_nutrition_skipped(self, service, backend):
        assert service.save_nutrition(None, [NutrientInput(key="protein", value="")]) == 0
        assert backend.rows("nutritional_analysis") == []

    def test_nutrition_saved(self, service, backend):
        saved = service.save_nutrition("pl1", [
            NutrientInput(key="Crude Protein", value="26"),
            NutrientInput(key="fat", value=None),
        ])
        assert saved == 1
        row = backend.rows("nutritional_analysis")[0]
        assert row["key"] == "crude_protein"
        assert row["value"] == 26.0

    def test_nutrition_needs_product_line(self, service):
        with pytest.raises(StepInputError):
            service.save_nutrition(None, [NutrientInput(key="protein", value=20)])

    def test_rating_overall_score_wins(self, service, backend):
        score = service.save_rating("pl1", RatingInput(overall_score=9))
        assert score == 9
        assert backend.rows("product_ratings")[0]["score"] == 9

    def test_rating_averages_factors(self, service, backend):
        rating = RatingInput(
            factors={"overall_quality": 8, "palatability": 7},
            custom_factors=[CustomFactor(key="Grain Free", value=9), CustomFactor(key=" ", value=1)],
        )
        score = service.save_rating("pl1", rating)
        assert score == 8.0
        factors = backend.rows("product_ratings")[0]["factors"]
        assert factors == {"overall_quality": 8, "palatability": 7, "grain_free": 9}

    def test_rating_range_validated(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            RatingInput(factors={"palatability": 11})

    def test_default_factors(self):
        assert set(RatingInput().factors.values()) == {5.0}


class TestCategories:
    """Test category selection."""

    def test_selection_keeps_order(self, service):
        assert service.select_categories(["treats", "dry-food", "treats"]) == ["treats", "dry-food"]

    def test_empty_selection_is_error(self, service):
        with pytest.raises(StepInputError):
            service.select_categories([])

    def test_unknown_category_is_error(self, service):
        with pytest.raises(StepInputError, match="Unknown"):
            service.select_categories(["toys"])
