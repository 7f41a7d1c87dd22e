"""Options command - Show the resolved rebuild options."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from rtrebuild.cli.base import RebuildCommandBase
from rtrebuild.core.config.rebuild import RebuildOptions


class OptionsCommand(RebuildCommandBase):
    """Print options after defaults and the config file are applied."""

    def execute(self, config_path: Optional[Path] = None) -> int:
        try:
            config = self.load_config(config_path)
            options = config.rebuild_options()
        except Exception as e:
            return self.handle_error(e, "While resolving rebuild options")

        self.console.print(self.create_options_table(options))
        return 0

    def create_options_table(self, options: RebuildOptions) -> Table:
        table = Table(title="Rebuild options")
        table.add_column("Option", style="cyan")
        table.add_column("Value", style="green")

        for key, value in options.to_dict().items():
            table.add_row(key, str(value))

        return table


def command(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to rtrebuild.yaml"
    ),
) -> None:
    """Show the rebuild options that would be used."""
    exit_code = OptionsCommand().execute(config)
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
