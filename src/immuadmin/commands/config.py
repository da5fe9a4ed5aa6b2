"""Commands for inspecting the resolved client configuration."""

import typer
from rich.table import Table

from immuadmin.config import Options
from immuadmin.utils.common import console, print_plain, show_help


def build_app(options: Options) -> typer.Typer:
    """Build the ``config`` command group bound to ``options``."""
    app = typer.Typer(help="Inspect the client configuration")

    @app.callback(invoke_without_command=True)
    def main(ctx: typer.Context) -> None:
        if ctx.invoked_subcommand is None:
            show_help(ctx)

    @app.command()
    def show() -> None:
        """Show the resolved settings."""
        settings = options.get()

        table = Table(title="Configuration")
        table.add_column("Setting", style="cyan", no_wrap=True)
        table.add_column("Value")

        for name, value in settings.model_dump().items():
            table.add_row(name, str(value))

        console.print(table)

    @app.command()
    def path() -> None:
        """Show the config file in use."""
        source = options.config_source
        print_plain(str(source) if source else "(none)")

    return app
