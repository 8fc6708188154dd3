"""
Tests for the wizard runner and navigator.

Tests cover:
- A full product entry through the standard flow
- Quit, jump and restart navigation
- Resuming from a checkpoint
"""

import pytest

from productflow.wizard import Checkpoint, Navigator, WizardController, WizardRunner

# Answers for one product through the standard flow (each step preceded by Enter)
STANDARD_PRODUCT = [
    "", "", "Acme Pet", "", "", "Grain Free", "", "dog",
    "", "Small", "", "", "", "",
    "", "weight", "", "", "lb", "5, 30", "",
    "", "1",
    "", "Chicken, Rice",
    "", "Chewy", "https://chewy.com/p", "", "", "", "", "",
]


@pytest.fixture
def checkpoint(tmp_path):
    return Checkpoint(state_dir=tmp_path, flow="standard")


@pytest.fixture
def runner(service, console, checkpoint):
    return WizardRunner(service, flow="standard", console=console, checkpoint=checkpoint)


class TestWizardRunner:
    """Test the interactive loop."""

    def test_full_product_entry(self, runner, backend, checkpoint, prompts):
        prompts.queue(*STANDARD_PRODUCT, False)

        assert runner.run() is True

        assert runner.products_entered == 1
        assert prompts.remaining == []
        assert not checkpoint.has_checkpoint()
        assert len(backend.rows("product_variant_options")) == 1
        assert len(backend.rows("product_sources")) == 1
        assert runner.controller.active_step_id == "brand-product-line"

    def test_two_products_in_one_session(self, runner, backend, prompts):
        second = list(STANDARD_PRODUCT)
        second[1] = "acme"
        second[2:8] = ["1", "2", "Puppy Line", "", ""]
        prompts.queue(*STANDARD_PRODUCT, True, *second, False)

        assert runner.run() is True

        assert runner.products_entered == 2
        assert len(backend.rows("brands")) == 1
        assert len(backend.rows("product_lines")) == 2

    def test_quit_saves_checkpoint(self, runner, checkpoint, prompts):
        prompts.queue("", "", "Acme Pet", "", "", "Grain Free", "", "", "q", "y")

        assert runner.run() is False

        info = checkpoint.get_info()
        assert info["active_step_id"] == "variants"
        assert info["completed_step_ids"] == ["brand-product-line"]

    def test_quit_can_be_cancelled(self, runner, prompts):
        prompts.queue("q", "n", "q", "y")
        assert runner.run() is False
        assert prompts.remaining == []

    def test_jump_to_locked_step_refused(self, runner, prompts, console):
        prompts.queue("g", "3", "", "q", "y")

        runner.run()

        assert runner.controller.active_step_id == "brand-product-line"
        assert "Complete 'Variants' first" in console.file.getvalue()

    def test_jump_back_to_completed_step(self, runner, prompts):
        prompts.queue("", "", "Acme Pet", "", "", "Grain Free", "", "", "g", "1", "q", "y")

        runner.run()

        assert runner.controller.active_step_id == "brand-product-line"
        assert runner.controller.is_completed("brand-product-line")

    def test_restart(self, runner, prompts):
        prompts.queue("", "", "Acme Pet", "", "", "Grain Free", "", "", "r", "y", "q", "y")

        runner.run()

        assert runner.controller.state == WizardController(runner.controller.steps).state

    def test_failed_step_stays_active(self, runner, prompts):
        prompts.queue("", "", "Acme Pet", "", "", "Grain Free", "", "", "", "", "q", "y")

        runner.run()

        assert runner.controller.active_step_id == "variants"
        assert not runner.controller.is_completed("variants")

    def test_resume_from_checkpoint(self, service, console, checkpoint, prompts):
        saved = WizardController(runner_steps())
        saved.merge_shared_data({"brand_id": "b1", "product_line_id": "p1"})
        saved.context_for("brand-product-line").on_complete()
        checkpoint.save(saved)

        runner = WizardRunner(service, flow="standard", console=console, checkpoint=checkpoint)
        prompts.queue("r", "q", "y")

        assert runner.run(resume=True) is False
        assert runner.controller.active_step_id == "variants"
        assert runner.controller.shared_data["product_line_id"] == "p1"
        assert runner.navigator.controller is runner.controller

    def test_resume_quit(self, service, console, checkpoint, prompts):
        checkpoint.save(WizardController(runner_steps()))
        runner = WizardRunner(service, flow="standard", console=console, checkpoint=checkpoint)
        prompts.queue("q")

        assert runner.run(resume=True) is False
        assert checkpoint.has_checkpoint()


def runner_steps():
    from productflow.config.defaults import get_flow

    return get_flow("standard")


class TestNavigator:
    """Test progress and summary rendering."""

    def test_step_summary_icons(self, console):
        controller = WizardController(["a", "b", "c"])
        controller.context_for("a").on_complete()
        controller.activate("a")

        summary = Navigator(controller, console, {"a": "Alpha", "b": "Beta", "c": "Gamma"}).get_step_summary()
        lines = summary.splitlines()

        assert "→" in lines[0] and "Alpha" in lines[0]
        assert "○" in lines[1] and "Beta" in lines[1]
        assert "🔒" in lines[2]

    def test_show_progress(self, console):
        controller = WizardController(["a", "b"])
        Navigator(controller, console, {}).show_progress()
        assert "Step 1 of 2" in console.file.getvalue()
        assert "50%" in console.file.getvalue()

    def test_progress_rounds_half_up(self, console):
        controller = WizardController(["a", "b", "c"])
        controller.context_for("a").on_complete()
        Navigator(controller, console, {}).show_progress()
        assert "Step 2 of 3" in console.file.getvalue()
        assert "67%" in console.file.getvalue()

        eight = WizardController([str(n) for n in range(8)])
        Navigator(eight, console, {}).show_progress()
        assert "13%" in console.file.getvalue()
