"""Rebuild command - Truncate an RT index and refill it from a source table."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.panel import Panel

from rtrebuild.cli.base import RebuildCommandBase
from rtrebuild.rebuild.engine import RebuildReport, RTIndexRebuilder
from rtrebuild.rebuild.messenger import ConsoleMessenger, NullMessenger
from rtrebuild.rebuild.transforms import identity_transform, load_transform


class RebuildCommand(RebuildCommandBase):
    """Rebuild one RT index."""

    def execute(
        self,
        source_table: str,
        index: str,
        transform_path: Optional[str] = None,
        condition: str = "",
        mva_columns: Optional[List[str]] = None,
        chunk_length: Optional[int] = None,
        sleep_time: Optional[int] = None,
        reconfigure: bool = True,
        quiet: bool = False,
        config_path: Optional[Path] = None,
    ) -> int:
        """Run the rebuild.

        Returns:
            0 on success, 1 on error
        """
        try:
            config = self.load_config(config_path)
            transform = load_transform(transform_path) if transform_path else identity_transform

            options = config.rebuild_options(
                chunk_length=chunk_length,
                sleep_time=sleep_time,
            )
            messenger = NullMessenger() if quiet else ConsoleMessenger(self.console)

            source = self.open_source(config)
            try:
                searchd = self.open_searchd(config)
                try:
                    rebuilder = RTIndexRebuilder(source, searchd, options.to_dict(), messenger)
                    report = rebuilder.rebuild(
                        source_table,
                        index,
                        transform,
                        condition,
                        mva_enabled=bool(mva_columns),
                        mva_columns=mva_columns or (),
                        reconfigure=reconfigure,
                    )
                finally:
                    searchd.close()
            finally:
                source.close()

            self._display_results(report)
            return 0

        except Exception as e:
            return self.handle_error(e, f"While rebuilding {index} from {source_table}")

    def _display_results(self, report: RebuildReport) -> None:
        lines = [
            "[bold]Index Rebuilt[/bold]",
            "",
            f"[cyan]Index:[/cyan] {report.index}",
            f"[cyan]Source table:[/cyan] {report.source_table}",
            f"[cyan]Rows found:[/cyan] {report.total_found}",
            f"[cyan]Rows written:[/cyan] {report.rows_written}",
            f"[cyan]Chunks:[/cyan] {report.chunks}",
            f"[cyan]Duration:[/cyan] {report.duration_seconds:.2f}s",
        ]

        panel = Panel("\n".join(lines), border_style="green")
        self.console.print()
        self.console.print(panel)


def command(
    source_table: str = typer.Argument(..., help="Source SQL table"),
    index: str = typer.Argument(..., help="Target RT index"),
    transform: Optional[str] = typer.Option(
        None, "--transform", "-t", help="Row transform as module:callable"
    ),
    where: str = typer.Option(
        "", "--where", "-w", help="Condition for source rows (without WHERE)"
    ),
    mva: Optional[List[str]] = typer.Option(
        None, "--mva", help="Multi-valued attribute column (repeatable)"
    ),
    chunk_length: Optional[int] = typer.Option(
        None, "--chunk-length", "-n", help="Rows per chunk"
    ),
    sleep_time: Optional[int] = typer.Option(
        None, "--sleep-time", help="Seconds to sleep between chunks (0 disables)"
    ),
    reconfigure: bool = typer.Option(
        True, "--reconfigure/--no-reconfigure", help="Truncate WITH RECONFIGURE"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress progress output"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to rtrebuild.yaml"
    ),
) -> None:
    """Rebuild an RT index from a source table.

    The index is truncated first, then refilled chunk by chunk
    (newest id first). Without --transform, rows are written unchanged.

    Examples:
        # Rebuild with a transform
        rtrebuild rebuild articles rt_articles -t myapp.search:article_row

        # Only published rows, tags as MVA, no throttling
        rtrebuild rebuild articles rt_articles -w "published = 1" --mva tags --sleep-time 0
    """
    cmd = RebuildCommand()
    exit_code = cmd.execute(
        source_table,
        index,
        transform_path=transform,
        condition=where,
        mva_columns=mva,
        chunk_length=chunk_length,
        sleep_time=sleep_time,
        reconfigure=reconfigure,
        quiet=quiet,
        config_path=config,
    )
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
