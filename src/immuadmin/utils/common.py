"""Common utilities shared across the CLI."""

import typer
from rich.console import Console

# Single shared console instances for the entire CLI
console = Console()
err_console = Console(stderr=True)


def print_plain(text: str, *, err: bool = False, style: str | None = None) -> None:
    """Print text verbatim: no markup, no highlighting, no wrapping."""
    target = err_console if err else console
    target.print(text, style=style, markup=False, highlight=False, soft_wrap=True)


def show_help(ctx: typer.Context) -> None:
    """Print the help of ``ctx``'s command once."""
    # Rich help is printed by get_help itself, which then returns ""
    help_text = ctx.get_help()
    if help_text:
        typer.echo(help_text)


__all__ = ["console", "err_console", "print_plain", "show_help"]
