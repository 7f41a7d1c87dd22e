"""rtrebuild CLI - Main application entry point.

Registers the rebuild, check and options commands.
"""

from __future__ import annotations

import typer

from rtrebuild.cli.commands import check_command, options_command, rebuild_command
from rtrebuild.cli.console import set_verbose_mode

app = typer.Typer(
    name="rtrebuild",
    help="Rebuild real-time search indexes from relational tables",
    add_completion=False,
    pretty_exceptions_enable=False,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Show tracebacks for errors"
    ),
) -> None:
    """rtrebuild - RT index rebuilds from SQL tables."""
    set_verbose_mode(verbose)

    if version:
        from rtrebuild import __version__

        typer.echo(f"rtrebuild {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


app.command("rebuild")(rebuild_command)
app.command("check")(check_command)
app.command("options")(options_command)


def cli_main() -> None:
    """Entry point for console_scripts."""
    app()


if __name__ == "__main__":
    cli_main()
