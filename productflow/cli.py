"""
Command-line interface for the ProductFlow catalog wizard.

Provides commands for configuring the backend connection, running and
resuming the product entry wizard, and checking connectivity.
"""

import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from . import __version__
from .backend import get_backend
from .catalog import CatalogService
from .config import ConfigError, ConfigLoader, DEFAULT_CONFIG_FILE, ProductFlowConfig
from .config.defaults import FLOWS, get_config_template, get_flow
from .utils.logger import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)

FLOW_CHOICE = click.Choice(sorted(FLOWS))


def _load_config(ctx: click.Context) -> ProductFlowConfig:
    """Load the configuration once per invocation and set up logging."""
    obj = ctx.ensure_object(dict)
    if "config" in obj:
        return obj["config"]

    try:
        loader = ConfigLoader(obj.get("config_path")).load()
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    config = loader.config
    level = "DEBUG" if obj.get("verbose") else config.logging.level.value
    setup_logging(level, config.logging.file)

    obj["loader"] = loader
    obj["config"] = config
    return config


def _checkpoint(config: ProductFlowConfig, flow: str):
    from .wizard import Checkpoint

    return Checkpoint(config.wizard.state_dir, flow=flow)


def _step_names():
    from .wizard.steps import STEP_CLASSES

    return {step_id: cls.name for step_id, cls in STEP_CLASSES.items()}


# ============================================================
# Main CLI Group
# ============================================================

@click.group()
@click.version_option(version=__version__, prog_name="productflow")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Configuration file (default: {DEFAULT_CONFIG_FILE})",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, config_path: Optional[str], verbose: bool):
    """
    ProductFlow Catalog Wizard

    Enter brands, product lines, variants, options, ingredients and
    retail sources into the product catalog, step by step.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


# ============================================================
# INIT Command
# ============================================================

@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Where to write the configuration (default: {DEFAULT_CONFIG_FILE})",
)
@click.pass_context
def init(ctx, output: Optional[str]):
    """Write a configuration template."""
    output_path = Path(output or ctx.obj.get("config_path") or DEFAULT_CONFIG_FILE).expanduser()

    if output_path.exists():
        if not Confirm.ask(f"[yellow]{output_path} already exists. Overwrite?[/yellow]", default=False):
            console.print("[red]Aborted.[/red]")
            return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        yaml.dump(get_config_template(), f, default_flow_style=False, sort_keys=False)

    console.print(Panel.fit(
        f"[bold green]Configuration written![/bold green]\n\n"
        f"File: [cyan]{output_path}[/cyan]\n\n"
        f"[bold]Next steps:[/bold]\n"
        f"1. Set your project URL and API key (or export PRODUCTFLOW_URL / PRODUCTFLOW_API_KEY)\n"
        f"2. Check the connection: [yellow]productflow preflight[/yellow]\n"
        f"3. Start entering products: [yellow]productflow wizard run[/yellow]",
        title="Init",
        border_style="green"
    ))


# ============================================================
# WIZARD Commands
# ============================================================

@cli.group()
def wizard():
    """
    Product entry wizard.

    Run 'productflow wizard run' to enter a product step by step.
    """
    pass


def _run_wizard(ctx: click.Context, flow: Optional[str], dry_run: bool, resume: bool) -> None:
    from .wizard import WizardRunner

    config = _load_config(ctx)
    flow = flow or config.wizard.flow.value

    if not dry_run and not config.backend.is_configured:
        console.print("[red]Backend is not configured.[/red]")
        console.print("Run [yellow]productflow init[/yellow] or set PRODUCTFLOW_URL and PRODUCTFLOW_API_KEY.")
        console.print("Use [yellow]--dry-run[/yellow] to try the wizard without a backend.")
        sys.exit(1)

    if dry_run:
        console.print("[yellow]Dry run: nothing will be written to the catalog.[/yellow]")

    checkpoint = None
    if config.wizard.checkpoint and not dry_run:
        checkpoint = _checkpoint(config, flow)

    service = CatalogService(get_backend(config.backend, dry_run=dry_run))
    runner = WizardRunner(service, flow=flow, console=console, checkpoint=checkpoint)
    logger.debug(f"Starting wizard with flow '{flow}'")

    try:
        success = runner.run(resume=resume)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted. Run 'productflow wizard resume' to continue.[/yellow]")
        sys.exit(130)

    if success:
        console.print(f"\n[green]Done. {runner.products_entered} products entered.[/green]")
        sys.exit(0)
    sys.exit(1)


@wizard.command("run")
@click.option("--flow", "-f", type=FLOW_CHOICE, default=None, help="Step list to run")
@click.option("--dry-run", "-n", is_flag=True, help="Use an in-memory catalog instead of the backend")
@click.pass_context
def wizard_run(ctx, flow: Optional[str], dry_run: bool):
    """Enter a product step by step."""
    _run_wizard(ctx, flow, dry_run, resume=False)


@wizard.command("resume")
@click.pass_context
def wizard_resume(ctx):
    """Resume from a saved checkpoint."""
    config = _load_config(ctx)
    info = _checkpoint(config, config.wizard.flow.value).get_info()

    if not info:
        console.print("[yellow]No saved session found. Starting a new one.[/yellow]")
        _run_wizard(ctx, None, dry_run=False, resume=False)
        return

    _run_wizard(ctx, info["flow"], dry_run=False, resume=True)


@wizard.command("status")
@click.pass_context
def wizard_status(ctx):
    """Show the saved session."""
    from .wizard import Navigator, WizardController

    config = _load_config(ctx)
    checkpoint = _checkpoint(config, config.wizard.flow.value)
    info = checkpoint.get_info()

    if not info:
        console.print("[dim]No saved wizard session.[/dim]")
        return

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="dim")
    table.add_column("Value", style="cyan")
    table.add_row("Session", info["wizard_id"])
    table.add_row("Flow", info["flow"])
    table.add_row("Step", f"{info['current_step'] + 1} of {info['total_steps']}")
    table.add_row("Started", info["started_at"])
    table.add_row("Last updated", info["last_updated"])
    console.print(table)

    steps = get_flow(info["flow"])
    state = checkpoint.load(steps)
    if state is None:
        console.print("\n[yellow]The saved session does not match the current step list.[/yellow]")
        return

    controller = WizardController(steps, state)
    console.print()
    console.print(Navigator(controller, console, _step_names()).get_step_summary())


@wizard.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def wizard_reset(ctx, yes: bool):
    """Delete the saved session."""
    config = _load_config(ctx)
    checkpoint = _checkpoint(config, config.wizard.flow.value)

    if not checkpoint.has_checkpoint():
        console.print("[dim]No saved wizard session.[/dim]")
        return

    if not yes and not Confirm.ask("Delete the saved wizard session?", default=False):
        console.print("[red]Aborted.[/red]")
        return

    checkpoint.clear()
    console.print("[green]Saved session deleted.[/green]")


# ============================================================
# STEPS Command
# ============================================================

@cli.command("steps")
@click.option("--flow", "-f", type=FLOW_CHOICE, default="standard", help="Flow to list")
def list_steps(flow: str):
    """List the steps of a flow."""
    from .wizard.steps import STEP_CLASSES

    table = Table(title=f"{flow.title()} Flow", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Step")
    table.add_column("Description")

    for number, step_id in enumerate(get_flow(flow), 1):
        step_cls = STEP_CLASSES[step_id]
        table.add_row(str(number), step_id, step_cls.name, step_cls.description)

    console.print(table)


# ============================================================
# PREFLIGHT Command
# ============================================================

@cli.command("preflight")
@click.option("--verbose", "-v", "show_details", is_flag=True, help="Show detailed output")
@click.pass_context
def preflight(ctx, show_details: bool):
    """
    Run pre-flight validation checks.

    Validates configuration and tests backend connectivity and table
    access before entering products.
    """
    from .preflight import PreflightChecker

    config = _load_config(ctx)
    loader = ctx.obj["loader"]

    console.print(f"\n[bold blue]Running Pre-flight Checks[/bold blue]\n")
    console.print(f"Configuration: [cyan]{loader.config_path}[/cyan]\n")

    checker = PreflightChecker(config, config_path=loader.config_path)
    result = checker.run_all()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Check", no_wrap=True)
    table.add_column("Status")
    table.add_column("Details")

    for check in result.checks:
        details = check.message
        if show_details and check.details:
            details += f" ({'; '.join(check.details[:2])})"

        table.add_row(check.name, check.status_label, details)

    console.print(table)

    console.print()
    if result.passed:
        console.print(f"[green]{result.summary()}[/green]")
        console.print("\n[bold]Ready to enter products![/bold]")
        console.print("  [dim]productflow wizard run[/dim]")
    else:
        console.print(f"[red]{result.summary()}[/red]")
        console.print("\n[bold]Please fix the errors above before running the wizard.[/bold]")
        sys.exit(1)


# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    cli()
