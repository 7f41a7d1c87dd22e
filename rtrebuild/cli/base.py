"""Base class for rtrebuild CLI commands.

Commands load the config file, open connections through the storage
factory and return an exit code instead of exiting themselves.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape

from rtrebuild.cli.console import ErrorRenderer, get_console
from rtrebuild.core.config.config import AppConfig
from rtrebuild.core.config_loaders import load_config
from rtrebuild.core.logging import configure_logging
from rtrebuild.storage.dbapi import DBAPISearchConnection, DBAPISourceConnection


class RebuildCommandBase(ABC):
    """Shared plumbing for CLI commands.

    Subclasses implement execute() and return 0 on success.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or get_console()

    @abstractmethod
    def execute(self, *args: Any, **kwargs: Any) -> int:
        """Run the command and return an exit code."""

    def load_config(self, config_path: Optional[Path] = None) -> AppConfig:
        """Load config and apply its logging section."""
        config = load_config(config_path)
        configure_logging(
            level=config.logging.level,
            log_file=config.logging.file_path,
            console=config.logging.console,
        )
        return config

    def open_source(self, config: AppConfig) -> DBAPISourceConnection:
        from rtrebuild.storage import factory

        return factory.open_source(config.source)

    def open_searchd(self, config: AppConfig) -> DBAPISearchConnection:
        from rtrebuild.storage import factory

        return factory.open_searchd(config.searchd)

    # === Output Methods ===

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def print_info(self, message: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan] {escape(message)}")

    # === Error Handling ===

    def handle_error(self, error: Exception, context: str = "") -> int:
        """Render the error and return exit code 1."""
        ErrorRenderer.render(error, context=context)
        return 1
