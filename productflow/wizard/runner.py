"""
Wizard Runner

Drives the controller from the terminal: shows progress, prompts for
navigation, runs the active step and keeps the checkpoint current.
"""

from typing import Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm

from ..catalog.service import CatalogService
from ..utils.logger import get_logger
from .checkpoint import Checkpoint, StepResult
from .controller import WizardController
from .navigator import NavigationAction, Navigator
from .steps import WizardStep, build_steps

logger = get_logger(__name__)


class WizardRunner:
    """
    Orchestrates the product entry wizard.

    Manages step execution, navigation, and checkpoint persistence.
    """

    BANNER = """
╔═══════════════════════════════════════════════════════════╗
║        PRODUCTFLOW CATALOG WIZARD                         ║
║        Brand, variants, options, ingredients, sources     ║
╚═══════════════════════════════════════════════════════════╝
"""

    def __init__(
        self,
        service: CatalogService,
        flow: str = "standard",
        console: Optional[Console] = None,
        checkpoint: Optional[Checkpoint] = None,
    ):
        """
        Initialize the wizard runner.

        Args:
            service: Catalog service the steps write through
            flow: Flow name (standard or extended)
            console: Rich console for output
            checkpoint: Checkpoint to save progress to; None disables saving
        """
        self.console = console or Console()
        self.flow = flow
        self.checkpoint = checkpoint

        self.steps: List[WizardStep] = build_steps(flow, service)
        self.steps_by_id: Dict[str, WizardStep] = {step.id: step for step in self.steps}
        self.controller = WizardController([step.id for step in self.steps])
        self.navigator = Navigator(
            self.controller,
            self.console,
            {step.id: step.name for step in self.steps},
        )
        self.products_entered = 0

    def run(self, resume: bool = False) -> bool:
        """
        Run the wizard.

        Args:
            resume: Whether to try resuming from checkpoint

        Returns:
            True if the user finished entering products, False on quit
        """
        self.console.print(self.BANNER, style="bold blue")

        if resume and self.checkpoint and self.checkpoint.has_checkpoint():
            action, state = self.navigator.handle_resume(self.checkpoint)
            if action == NavigationAction.QUIT:
                return False
            if state is not None:
                self._restore(state)
                self.console.print(
                    f"\n[green]Resuming at step {self.controller.current_index + 1}...[/green]\n"
                )

        while True:
            self._show_step_header()
            action = self.navigator.show_navigation_prompt()

            if action == NavigationAction.QUIT:
                if self.navigator.confirm_quit():
                    self._save()
                    self.console.print(
                        "\n[yellow]Progress saved. Run 'productflow wizard resume' to continue.[/yellow]"
                    )
                    return False
                continue

            if action == NavigationAction.RESTART:
                if self.navigator.confirm_restart():
                    self.controller.reset()
                    self._save()
                continue

            if action == NavigationAction.JUMP:
                step_id = self.navigator.choose_step()
                if step_id:
                    self.controller.activate(step_id)
                    self._save()
                continue

            step_id = self.controller.active_step_id
            result = self.run_active_step()

            if result.success and step_id == self.controller.steps[-1]:
                self.products_entered += 1
                self._show_completion()
                if not Confirm.ask("Enter another product?", default=True):
                    if self.checkpoint:
                        self.checkpoint.clear()
                    return True

    def run_active_step(self) -> StepResult:
        """Run the active step once and save the checkpoint afterwards."""
        step_id = self.controller.active_step_id
        step = self.steps_by_id[step_id]

        if self.controller.is_completed(step_id):
            logger.warning(f"Re-running completed step '{step_id}'; its shared data will be overwritten")

        result = step.run(self.controller.context_for(step_id), self.console)
        if not result.success:
            for error in result.errors:
                self.console.print(f"  [red]• {error}[/red]")
        self._save()
        return result

    def _restore(self, state) -> None:
        self.controller = WizardController(self.controller.steps, state)
        self.navigator.controller = self.controller

    def _save(self) -> None:
        if self.checkpoint:
            self.checkpoint.save(self.controller)

    def _show_step_header(self) -> None:
        """Show header and progress for the active step."""
        step = self.steps_by_id[self.controller.active_step_id]
        self.console.print()
        self.console.rule(
            f"[bold]Step {self.controller.current_index + 1} of "
            f"{self.controller.total_steps}: {step.name}[/bold]",
            style="cyan"
        )
        self.navigator.show_progress()

        if step.description:
            self.console.print(f"[dim]{step.description}[/dim]")

    def _show_completion(self) -> None:
        """Show product completion message."""
        self.console.print()
        self.console.print(Panel.fit(
            "[bold green]Product entry complete![/bold green]\n\n"
            f"Products entered this session: [cyan]{self.products_entered}[/cyan]\n"
            "The wizard has been reset to the first step.",
            title="✓ Success",
            border_style="green"
        ))
