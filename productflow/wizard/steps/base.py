"""
Base Wizard Step

Abstract base class for all wizard steps.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ...backend.base import BackendError
from ...catalog.models import StepInputError
from ...catalog.service import CatalogService
from ...utils.logger import get_logger
from ..checkpoint import StepResult
from ..controller import StepContext
from ..toast import toast_error, toast_success

logger = get_logger(__name__)


def describe_validation_error(error: ValidationError) -> str:
    """First readable message of a pydantic validation error."""
    first = error.errors()[0]
    message = first.get("msg", str(error))
    return message.replace("Value error, ", "")


class WizardStep(ABC):
    """
    Abstract base class for wizard steps.

    A step collects one form, writes it through the catalog service and
    reports the ids later steps need. ``run()`` wraps ``execute()`` with the
    completion contract: shared data is merged and ``on_complete`` fires
    only when the write succeeded.
    """

    # Step metadata
    id: str = ""
    name: str = "Unnamed Step"
    description: str = ""

    def __init__(self, service: CatalogService):
        """
        Initialize the step.

        Args:
            service: Catalog service the step writes through
        """
        self.service = service

    @abstractmethod
    def execute(self, shared_data: Mapping[str, Any], console: Console) -> StepResult:
        """
        Execute this wizard step.

        Args:
            shared_data: Read-only data produced by earlier steps
            console: Rich console for output

        Returns:
            StepResult indicating success/failure and the data to share

        Raises:
            StepInputError, BackendError or ValidationError; ``run()``
            turns these into a failed result
        """
        pass

    def run(self, context: StepContext, console: Console) -> StepResult:
        """
        Execute the step against a controller context.

        Args:
            context: Contract handed out by the controller
            console: Rich console for output

        Returns:
            The step result
        """
        try:
            result = self.execute(context.shared_data, console)
        except StepInputError as e:
            result = self.failure(str(e))
        except ValidationError as e:
            result = self.failure(describe_validation_error(e))
        except BackendError as e:
            logger.error(f"Step '{self.id}' failed: {e}")
            result = self.failure(e.message, errors=[e.details] if e.details else [])

        if not result.success:
            toast_error(console, result.message)
            return result

        if result.data:
            context.merge_shared_data(result.data)
        if result.message:
            toast_success(console, result.message)
        context.on_complete()
        return result

    # Utility methods for common prompts

    def prompt_text(
        self,
        console: Console,
        prompt: str,
        default: str = "",
        required: bool = True,
        validator: Optional[Callable[[str], Optional[str]]] = None,
    ) -> str:
        """
        Prompt for text input.

        Args:
            console: Rich console
            prompt: Prompt text
            default: Default value
            required: Whether input is required
            validator: Optional function returning an error message

        Returns:
            User input string, stripped
        """
        while True:
            value = Prompt.ask(prompt, default=default or "").strip()

            if required and not value:
                console.print("[red]This field is required.[/red]")
                continue

            if validator and value:
                error = validator(value)
                if error:
                    console.print(f"[red]{error}[/red]")
                    continue

            return value

    def prompt_float(
        self,
        console: Console,
        prompt: str,
        default: Optional[float] = None,
        min_val: Optional[float] = None,
        max_val: Optional[float] = None,
        required: bool = False,
    ) -> Optional[float]:
        """
        Prompt for a number; blank input returns the default.

        Returns:
            The entered number, or the default (may be None)
        """
        while True:
            raw = self.prompt_text(
                console,
                prompt,
                default="" if default is None else f"{default:g}",
                required=required,
            )
            if not raw:
                return default

            try:
                value = float(raw)
            except ValueError:
                console.print("[red]Please enter a valid number.[/red]")
                continue

            if min_val is not None and value < min_val:
                console.print(f"[red]Value must be at least {min_val:g}.[/red]")
                continue

            if max_val is not None and value > max_val:
                console.print(f"[red]Value must be at most {max_val:g}.[/red]")
                continue

            return value

    def prompt_choice(
        self,
        console: Console,
        prompt: str,
        choices: List[str],
        default: Optional[str] = None,
    ) -> str:
        """
        Prompt for a choice from a list.

        Args:
            console: Rich console
            prompt: Prompt text
            choices: List of valid choices
            default: Default choice

        Returns:
            Selected choice
        """
        console.print()
        for i, choice in enumerate(choices, 1):
            console.print(f"  [{i}] {choice}", markup=False)
        console.print()

        while True:
            selection = Prompt.ask(
                prompt,
                default=str(choices.index(default) + 1) if default in choices else "1"
            ).strip()

            try:
                idx = int(selection) - 1
                if 0 <= idx < len(choices):
                    return choices[idx]
            except ValueError:
                for choice in choices:
                    if choice.lower() == selection.lower():
                        return choice

            console.print("[red]Invalid selection. Please choose a number from the list.[/red]")

    def prompt_confirm(
        self,
        console: Console,
        prompt: str,
        default: bool = True,
    ) -> bool:
        """Prompt for yes/no confirmation."""
        return Confirm.ask(prompt, default=default)

    def prompt_list(
        self,
        console: Console,
        prompt: str,
        default: str = "",
        required: bool = False,
    ) -> List[str]:
        """
        Prompt for a comma separated list.

        Returns:
            Trimmed, non-blank items in the order entered
        """
        raw = self.prompt_text(console, prompt, default=default, required=required)
        return [item.strip() for item in raw.split(",") if item.strip()]

    def show_table(
        self,
        console: Console,
        title: str,
        columns: List[str],
        rows: List[List[str]],
    ) -> None:
        """
        Display a table.

        Args:
            console: Rich console
            title: Table title
            columns: Column headers
            rows: Table rows
        """
        table = Table(title=title, show_header=True, header_style="bold cyan")

        for col in columns:
            table.add_column(col)

        for row in rows:
            table.add_row(*row)

        console.print(table)

    def success(self, data: Dict[str, Any] = None, message: str = "") -> StepResult:
        """Create a successful step result."""
        return StepResult(success=True, data=data or {}, message=message)

    def failure(self, message: str, errors: List[str] = None) -> StepResult:
        """Create a failed step result."""
        return StepResult(success=False, message=message, errors=errors or [])
