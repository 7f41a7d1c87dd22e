"""Check command - Report whether an RT index exists on the search daemon."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from rtrebuild.cli.base import RebuildCommandBase
from rtrebuild.storage.searchd import index_exists


class CheckCommand(RebuildCommandBase):
    """Check index existence."""

    def execute(self, index: str, config_path: Optional[Path] = None) -> int:
        """Returns 0 if the index exists, 1 if it does not or on error."""
        try:
            config = self.load_config(config_path)
            searchd = self.open_searchd(config)
            try:
                exists = index_exists(searchd, index)
            finally:
                searchd.close()
        except Exception as e:
            return self.handle_error(e, f"While checking index {index}")

        if exists:
            self.print_success(f"Index {index} exists on {config.searchd.describe()}")
            return 0

        self.print_error(f"Index {index} not present on {config.searchd.describe()}")
        return 1


def command(
    index: str = typer.Argument(..., help="RT index name"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to rtrebuild.yaml"
    ),
) -> None:
    """Check that an RT index exists.

    Exits with code 1 when the index is missing.
    """
    exit_code = CheckCommand().execute(index, config)
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
