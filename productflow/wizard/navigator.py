"""
Wizard Navigation

Handles jump/restart/resume navigation for the wizard. Jumps go through
the controller, so only reachable steps can be chosen.
"""

import math
from enum import Enum
from typing import Dict, Optional, Tuple

from rich.console import Console
from rich.prompt import Prompt

from .checkpoint import Checkpoint
from .controller import WizardController, WizardState


class NavigationAction(str, Enum):
    """Possible navigation actions."""
    CONTINUE = "continue"
    JUMP = "jump"
    RESTART = "restart"
    QUIT = "quit"


class Navigator:
    """
    Handles wizard navigation including jumps, restart, and resume.
    """

    def __init__(self, controller: WizardController, console: Console, step_names: Dict[str, str]):
        """
        Initialize navigator.

        Args:
            controller: The wizard controller
            console: Rich console for output
            step_names: Display name per step id
        """
        self.controller = controller
        self.console = console
        self.step_names = step_names

    def show_navigation_prompt(self) -> NavigationAction:
        """
        Show navigation prompt and get user choice.

        Returns:
            The chosen navigation action
        """
        options = ["[Enter] Continue", "[G] Go to step", "[R] Restart", "[Q] Quit"]

        self.console.print()
        self.console.print("  ".join(options), style="dim", markup=False)

        while True:
            choice = Prompt.ask("", default="").strip().lower()

            if choice == "" or choice == "c":
                return NavigationAction.CONTINUE
            elif choice == "g":
                return NavigationAction.JUMP
            elif choice == "r":
                return NavigationAction.RESTART
            elif choice == "q":
                return NavigationAction.QUIT
            else:
                self.console.print("[yellow]Invalid choice. Please try again.[/yellow]")

    def choose_step(self) -> Optional[str]:
        """
        Ask which step to go to.

        Returns:
            A reachable step id, or None if the user backed out
        """
        self.console.print()
        self.console.print(self.get_step_summary())
        self.console.print()

        while True:
            selection = Prompt.ask("Step number (blank to cancel)", default="").strip()
            if not selection:
                return None

            try:
                idx = int(selection) - 1
            except ValueError:
                idx = -1

            if not 0 <= idx < self.controller.total_steps:
                self.console.print("[red]Invalid selection. Please choose a number from the list.[/red]")
                continue

            step_id = self.controller.steps[idx]
            if not self.controller.is_reachable(step_id):
                previous = self.step_names.get(self.controller.steps[idx - 1], self.controller.steps[idx - 1])
                self.console.print(f"[yellow]Complete '{previous}' first.[/yellow]")
                continue

            return step_id

    def handle_resume(self, checkpoint: Checkpoint) -> Tuple[NavigationAction, Optional[WizardState]]:
        """
        Handle resuming from a checkpoint.

        Returns:
            (QUIT, None) to quit, (CONTINUE, state) to resume, or
            (RESTART, None) to start fresh
        """
        checkpoint_info = checkpoint.get_info()
        if not checkpoint_info:
            return NavigationAction.RESTART, None

        self.console.print()
        self.console.print("[bold yellow]Existing wizard session found![/bold yellow]")
        self.console.print()
        self.console.print(f"  Flow: [cyan]{checkpoint_info['flow']}[/cyan]")
        self.console.print(
            f"  Progress: Step [cyan]{checkpoint_info['current_step'] + 1}[/cyan] "
            f"of [cyan]{checkpoint_info['total_steps']}[/cyan]"
        )
        self.console.print(f"  Started: [cyan]{checkpoint_info['started_at']}[/cyan]")
        self.console.print(f"  Last Updated: [cyan]{checkpoint_info['last_updated']}[/cyan]")
        self.console.print()

        choice = Prompt.ask(
            "Would you like to [bold]R[/bold]esume, start [bold]F[/bold]resh, or [bold]Q[/bold]uit?",
            choices=["r", "f", "q"],
            default="r",
        ).lower()

        if choice == "q":
            return NavigationAction.QUIT, None

        if choice == "r":
            state = checkpoint.load(list(self.controller.steps))
            if state is not None:
                return NavigationAction.CONTINUE, state
            self.console.print("[red]Failed to load checkpoint. Starting fresh.[/red]")
            return NavigationAction.RESTART, None

        checkpoint.clear()
        return NavigationAction.RESTART, None

    def confirm_quit(self) -> bool:
        """
        Confirm the user wants to quit.

        Returns:
            True if user confirms quit
        """
        self.console.print()
        self.console.print("[yellow]Your progress will be saved and can be resumed later.[/yellow]")

        choice = Prompt.ask(
            "Are you sure you want to quit?",
            choices=["y", "n"],
            default="n",
        ).lower()

        return choice == "y"

    def confirm_restart(self) -> bool:
        """Confirm discarding the current product entry."""
        choice = Prompt.ask(
            "Start over from the first step? Entered data stays saved in the catalog",
            choices=["y", "n"],
            default="n",
        ).lower()

        return choice == "y"

    def show_progress(self) -> None:
        """Show wizard progress bar for the active step."""
        total = self.controller.total_steps
        current = self.controller.current_index

        bar_length = 30
        filled_length = int(self.controller.progress_fraction * bar_length)
        completed_length = max(filled_length - 1, 0)
        remaining_length = bar_length - completed_length - 1

        bar = (
            "[green]" + "=" * completed_length + "[/green]"
            + "[cyan]>[/cyan]"
            + "[dim]" + "-" * remaining_length + "[/dim]"
        )

        # Half-up, so 2 of 3 reads 67% and 1 of 8 reads 13%
        percentage = math.floor(self.controller.progress_fraction * 100 + 0.5)

        self.console.print()
        self.console.print(f"Step {current + 1} of {total}  \\[{bar}] {percentage}%")

    def get_step_summary(self) -> str:
        """
        Get a summary of all steps with their status.

        Returns:
            Formatted summary string
        """
        lines = []
        for number, step_id in enumerate(self.controller.steps, 1):
            if step_id == self.controller.active_step_id:
                icon = "[cyan]→[/cyan]"
            elif self.controller.is_completed(step_id):
                icon = "[green]✓[/green]"
            elif self.controller.is_reachable(step_id):
                icon = "[yellow]○[/yellow]"
            else:
                icon = "[dim]🔒[/dim]"

            lines.append(f"  {icon} Step {number}: {self.step_names.get(step_id, step_id)}")

        return "\n".join(lines)
