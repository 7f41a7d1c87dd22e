"""Console output helpers.

One shared rich Console for all commands, plus ErrorRenderer, which
turns a RebuildError into a panel with its code, the failing statement
and the "Why it happened" / "How to fix" hints.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from rtrebuild.core.exceptions import RebuildError, get_root_cause

UNEXPECTED_ERROR_CODE = "RT-ERR-999"

_console: Console | None = None
_verbose_mode: bool = False


def get_console() -> Console:
    """Shared console, created on first use."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_verbose_mode(enabled: bool) -> None:
    """Toggle tracebacks under rendered errors (--verbose)."""
    global _verbose_mode
    _verbose_mode = enabled


def is_verbose_mode() -> bool:
    return _verbose_mode


@dataclass
class ErrorView:
    """What the error panel shows for one exception."""

    code: str
    message: str
    why: str
    fixes: List[str] = field(default_factory=list)
    statement: Optional[str] = None
    root_cause: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorView":
        root = get_root_cause(exc)
        root_cause = f"{type(root).__name__}: {root}" if root is not exc else None

        if isinstance(exc, RebuildError):
            return cls(
                code=exc.error_code,
                message=exc.user_message,
                why=exc.why_it_happened,
                fixes=list(exc.how_to_fix),
                statement=getattr(exc, "statement", None),
                root_cause=root_cause,
            )

        return cls(
            code=UNEXPECTED_ERROR_CODE,
            message=f"{type(exc).__name__}: {exc}",
            why="The rebuild hit an error rtrebuild does not classify",
            fixes=["Re-run with --verbose to see the traceback"],
            root_cause=root_cause,
        )


class ErrorRenderer:
    """Prints exceptions as red panels instead of bare tracebacks."""

    @staticmethod
    def build_body(view: ErrorView, context: str = "") -> Text:
        body = Text()
        if context:
            body.append(context + "\n\n", style="dim")
        body.append(view.message + "\n", style="bold red")

        if view.statement:
            body.append("\nStatement: ", style="bold yellow")
            body.append(view.statement + "\n", style="yellow")
        if view.root_cause and view.root_cause != view.message:
            body.append("\nRoot cause: ", style="bold yellow")
            body.append(view.root_cause + "\n", style="yellow")

        body.append("\nWhy it happened:\n", style="bold cyan")
        body.append(f"  {view.why}\n", style="cyan")

        body.append("\nHow to fix:\n", style="bold green")
        body.append("\n".join(f"  - {fix}" for fix in view.fixes), style="green")
        return body

    @classmethod
    def render(
        cls,
        exc: BaseException,
        context: str = "",
        show_traceback: Optional[bool] = None,
    ) -> None:
        """Print exc as an error panel.

        Args:
            exc: The failure to show
            context: What the command was doing, e.g. "While rebuilding rt_docs"
            show_traceback: Force the traceback on or off; None follows --verbose
        """
        console = get_console()
        view = ErrorView.from_exception(exc)

        console.print(
            Panel(
                cls.build_body(view, context),
                title=f"[bold red]Error: {view.code}[/bold red]",
                border_style="red",
                padding=(1, 2),
            )
        )

        if show_traceback is None:
            show_traceback = is_verbose_mode()
        if show_traceback:
            console.print()
            console.print(
                "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
                style="dim",
                markup=False,
            )
