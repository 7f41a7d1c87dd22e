"""Command-line interface for rtrebuild (typer + rich)."""

from rtrebuild.cli.main import app, cli_main

__all__ = ["app", "cli_main"]
