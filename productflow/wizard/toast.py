"""Toast notifications shown after a step saves or fails."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

VARIANT_STYLES = {
    "default": ("green", "Success!"),
    "destructive": ("red", "Error"),
}


def show_toast(console: Console, description: str, title: str = "", variant: str = "default") -> None:
    """
    Print a titled notification panel.

    Args:
        console: Rich console for output
        description: Body text
        title: Panel title (defaults per variant)
        variant: "default" (green) or "destructive" (red)
    """
    style, default_title = VARIANT_STYLES.get(variant, VARIANT_STYLES["default"])
    console.print()
    console.print(Panel.fit(
        escape(description),
        title=f"[bold]{title or default_title}[/bold]",
        border_style=style,
    ))


def toast_success(console: Console, description: str) -> None:
    show_toast(console, description, variant="default")


def toast_error(console: Console, description: str) -> None:
    show_toast(console, description, variant="destructive")
