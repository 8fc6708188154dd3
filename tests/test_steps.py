"""
Tests for the wizard steps.

Prompts are answered from a scripted queue and writes go to the
in-memory backend.
"""

import pytest

from productflow.config.defaults import RATING_CATEGORIES, get_flow
from productflow.wizard.controller import WizardController
from productflow.wizard.steps import (
    STEP_CLASSES,
    BrandProductLineStep,
    CategoriesStep,
    IngredientsStep,
    NutritionStep,
    OptionsStep,
    RatingStep,
    SourcesStep,
    VariantOptionsStep,
    VariantsStep,
    build_steps,
)


def controller_at(step_id, shared_data=None, flow="extended"):
    """Controller with every step before ``step_id`` completed."""
    steps = get_flow(flow)
    controller = WizardController(steps)
    for previous in steps[:steps.index(step_id)]:
        controller.complete_step(previous)
    controller.activate(step_id)
    controller.merge_shared_data(shared_data or {})
    return controller


def run_step(step, controller, console):
    return step.run(controller.context_for(step.id), console)


class TestRegistry:
    """Test the step registry."""

    def test_every_flow_step_registered(self):
        for flow in ("standard", "extended"):
            assert all(step_id in STEP_CLASSES for step_id in get_flow(flow))

    def test_build_steps_in_order(self, service):
        steps = build_steps("standard", service)
        assert [s.id for s in steps] == get_flow("standard")


class TestBrandProductLineStep:
    """Test brand and product line selection."""

    def test_creates_brand_and_product_line(self, service, backend, prompts, console):
        controller = WizardController(get_flow("standard"))
        prompts.queue("", "Acme Pet", "", "", "Grain Free", "", "Dog, cat")

        result = run_step(BrandProductLineStep(service), controller, console)

        assert result.success
        assert controller.active_step_id == "variants"
        assert controller.shared_data["is_new_product_line"] is True
        line = backend.rows("product_lines")[0]
        assert line["target_species"] == ["dog", "cat"]
        assert controller.shared_data["product_line_id"] == line["id"]
        assert "Success!" in console.file.getvalue()

    def test_selects_existing_brand_and_line(self, service, product_line, prompts, console):
        controller = WizardController(get_flow("standard"))
        prompts.queue("acme", "1", "1")

        result = run_step(BrandProductLineStep(service), controller, console)

        assert result.success
        assert controller.shared_data["brand_id"] == product_line["brand_id"]
        assert controller.shared_data["product_line_id"] == product_line["product_line_id"]
        assert controller.shared_data["is_new_product_line"] is False

    def test_invalid_email_keeps_step_active(self, service, prompts, console):
        controller = WizardController(get_flow("standard"))
        prompts.queue("", "Acme", "", "not-an-email")

        result = run_step(BrandProductLineStep(service), controller, console)

        assert not result.success
        assert "Invalid email" in result.message
        assert controller.active_step_id == "brand-product-line"
        assert controller.completed_step_ids == frozenset()


class TestCategoriesStep:
    """Test category selection."""

    def test_numbers_and_ids(self, service, prompts, console):
        controller = controller_at("categories")
        prompts.queue("1, treats")

        result = run_step(CategoriesStep(service), controller, console)

        assert result.success
        assert controller.shared_data["category_ids"] == ["dry-food", "treats"]
        assert "primary: Dry Food" in result.message

    def test_empty_selection_fails(self, service, prompts, console):
        controller = controller_at("categories")
        prompts.queue("")

        result = run_step(CategoriesStep(service), controller, console)

        assert not result.success
        assert controller.active_step_id == "categories"


class TestVariantsStep:
    """Test variant entry."""

    def test_creates_variants(self, service, backend, product_line, prompts, console):
        controller = controller_at("variants", product_line)
        prompts.queue("Small", "", "0123", "", "Large", "", "", "B00TEST", "")

        result = run_step(VariantsStep(service), controller, console)

        assert result.success
        assert len(controller.shared_data["variant_ids"]) == 2
        assert backend.rows("product_variants")[1]["asin"] == "B00TEST"
        assert controller.active_step_id == "nutrition"

    def test_no_variants_fails(self, service, product_line, prompts, console):
        controller = controller_at("variants", product_line)
        prompts.queue("")

        result = run_step(VariantsStep(service), controller, console)

        assert not result.success
        assert "at least one variant" in result.message
        assert not controller.is_completed("variants")
        assert "Error" in console.file.getvalue()

    def test_backend_failure_keeps_step_active(self, service, backend, product_line, prompts, console):
        backend.fail_inserts_into("product_variants", "permission denied for table")
        controller = controller_at("variants", product_line)
        prompts.queue("Small", "", "", "", "")

        result = run_step(VariantsStep(service), controller, console)

        assert not result.success
        assert result.message == "permission denied for table"
        assert controller.active_step_id == "variants"
        assert "variant_ids" not in controller.shared_data


class TestNutritionStep:
    """Test nutrition entry."""

    def test_all_blank_skips(self, service, backend, prompts, console):
        controller = controller_at("nutrition")
        prompts.queue("", "", "", "", "", False)

        result = run_step(NutritionStep(service), controller, console)

        assert result.success
        assert "skipping" in result.message
        assert controller.active_step_id == "options"

    def test_values_saved(self, service, backend, product_line, prompts, console):
        controller = controller_at("nutrition", product_line)
        prompts.queue("26", "16", "", "10", "", True, "Calories", "380", "", False)

        result = run_step(NutritionStep(service), controller, console)

        assert result.success
        rows = backend.rows("nutritional_analysis")
        assert [r["key"] for r in rows] == ["protein", "fat", "moisture", "calories"]
        assert rows[-1]["unit"] == "kcal/cup"


class TestOptionsStep:
    """Test option entry."""

    def test_creates_options(self, service, backend, prompts, console):
        controller = controller_at("options")
        prompts.queue("life_stage", "", "", "", "Puppy, Adult, Adult", "")

        result = run_step(OptionsStep(service), controller, console)

        assert result.success
        option = backend.rows("product_options")[0]
        assert option["label"] == "Life Stage"
        assert option["data_type"] == "text"
        assert [r["value"] for r in backend.rows("product_option_values")] == ["Puppy", "Adult"]
        assert controller.shared_data["option_ids"] == [option["id"]]

    def test_no_options_still_completes(self, service, prompts, console):
        controller = controller_at("options")
        prompts.queue("")

        result = run_step(OptionsStep(service), controller, console)

        assert result.success
        assert controller.shared_data["option_ids"] == []
        assert controller.active_step_id == "variant-options"


@pytest.fixture
def catalog_with_variants(service, product_line):
    """Shared data after the variants and options steps."""
    from productflow.catalog import OptionInput, VariantInput

    variant_ids = service.create_variants(
        product_line["product_line_id"], [VariantInput(name="Small"), VariantInput(name="Large")]
    )
    option_ids = service.create_options([OptionInput(name="weight", label="Weight", values=["5 lb", "30 lb"])])
    return dict(product_line, variant_ids=variant_ids, option_ids=option_ids)


class TestVariantOptionsStep:
    """Test option value assignment."""

    def test_assigns_values(self, service, backend, catalog_with_variants, prompts, console):
        controller = controller_at("variant-options", catalog_with_variants)
        prompts.queue("1", "2")

        result = run_step(VariantOptionsStep(service), controller, console)

        assert result.success
        rows = backend.rows("product_variant_options")
        assert len(rows) == 2
        values = {r["id"]: r["value"] for r in backend.rows("product_option_values")}
        assert [values[r["product_option_value_id"]] for r in rows] == ["5 lb", "30 lb"]

    def test_no_assignment_for_new_line_fails(self, service, catalog_with_variants, prompts, console):
        controller = controller_at("variant-options", catalog_with_variants)
        prompts.queue("", "")

        result = run_step(VariantOptionsStep(service), controller, console)

        assert not result.success
        assert controller.active_step_id == "variant-options"

    def test_no_assignment_for_existing_line_skips(self, service, catalog_with_variants, prompts, console):
        shared = dict(catalog_with_variants, is_new_product_line=False)
        controller = controller_at("variant-options", shared)
        prompts.queue("", "")

        result = run_step(VariantOptionsStep(service), controller, console)

        assert result.success
        assert controller.active_step_id == "ingredients"


class TestIngredientsStep:
    """Test ingredient mapping."""

    def test_maps_ingredients(self, service, backend, catalog_with_variants, prompts, console):
        controller = controller_at("ingredients", catalog_with_variants)
        prompts.queue("Chicken, Brown Rice", "")

        result = run_step(IngredientsStep(service), controller, console)

        assert result.success
        assert len(backend.rows("product_variant_ingredients")) == 2
        assert "New ingredients: Chicken, Brown Rice" in result.message

    def test_no_variants_fails(self, service, prompts, console):
        controller = controller_at("ingredients")

        result = run_step(IngredientsStep(service), controller, console)

        assert not result.success
        assert "add variants first" in result.message


class TestRatingStep:
    """Test product line rating."""

    def test_defaults_average_to_five(self, service, backend, product_line, prompts, console):
        controller = controller_at("rating", product_line)
        prompts.queue(*([""] * len(RATING_CATEGORIES)), False, "")

        result = run_step(RatingStep(service), controller, console)

        assert result.success
        assert backend.rows("product_ratings")[0]["score"] == 5.0
        assert controller.active_step_id == "sources"

    def test_out_of_range_value_reprompted(self, service, backend, product_line, prompts, console):
        controller = controller_at("rating", product_line)
        answers = ["12", "9"] + [""] * (len(RATING_CATEGORIES) - 1)
        prompts.queue(*answers, True, "Grain Free", "8", False, "")

        result = run_step(RatingStep(service), controller, console)

        assert result.success
        factors = backend.rows("product_ratings")[0]["factors"]
        assert factors["overall_quality"] == 9
        assert factors["grain_free"] == 8
        assert "at most 10" in console.file.getvalue()


class TestSourcesStep:
    """Test retailer sources, the last step of the flow."""

    def test_adds_sources_and_resets(self, service, backend, catalog_with_variants, prompts, console):
        controller = controller_at("sources", catalog_with_variants)
        prompts.queue(
            "Chewy", "https://chewy.com/small", "12.99", "", "", "", "",
            "Chewy", "https://chewy.com/large", "", "eur", "2", "3", "",
        )

        result = run_step(SourcesStep(service), controller, console)

        assert result.success
        sources = backend.rows("product_sources")
        assert len(sources) == 2
        assert sources[0]["price"] == 12.99
        assert sources[1]["currency"] == "EUR"
        assert sources[1]["availability"] == "out_of_stock"
        assert sources[1]["source_type"] == "manufacturer"
        assert len(backend.rows("retailers")) == 1
        assert controller.active_step_id == "brand-product-line"
        assert controller.completed_step_ids == frozenset()

    def test_invalid_url_fails(self, service, catalog_with_variants, prompts, console):
        controller = controller_at("sources", catalog_with_variants)
        prompts.queue("Chewy", "chewy.com", "", "", "", "")

        result = run_step(SourcesStep(service), controller, console)

        assert not result.success
        assert "http" in result.message
        assert controller.active_step_id == "sources"
