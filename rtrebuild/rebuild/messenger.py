"""Progress messengers.

A messenger is any callable taking ``(message, linebreak)``. The engine
emits partial lines (linebreak=False) and completes them with a later
call, so a messenger sees the same sequence an operator would read.

Implementations:
- StreamMessenger: writes to a text stream (default: stdout)
- ConsoleMessenger: writes through a rich Console
- LoggerMessenger: turns completed lines into log records
- NullMessenger: discards everything
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional, Protocol, TextIO

from rich.console import Console


class Messenger(Protocol):
    """Sink for operator-facing progress text."""

    def __call__(self, message: str = "", linebreak: bool = True) -> None:
        ...


class StreamMessenger:
    """Write progress text to a stream, one call at a time."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved per call so redirected stdout is honoured
        return self._stream if self._stream is not None else sys.stdout

    def __call__(self, message: str = "", linebreak: bool = True) -> None:
        stream = self.stream
        stream.write(message)
        if linebreak:
            stream.write("\n")
        stream.flush()


class ConsoleMessenger:
    """Write progress text through a rich Console.

    Markup and highlighting are off: row identifiers and index names are
    printed exactly as received.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def __call__(self, message: str = "", linebreak: bool = True) -> None:
        self.console.print(
            message,
            end="\n" if linebreak else "",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


class LoggerMessenger:
    """Forward progress text to a logger.

    Fragments sent with linebreak=False are held until the line is
    completed, then logged as one record.
    """

    def __init__(self, logger: Any, level: int = logging.INFO) -> None:
        self.logger = logger
        self.level = level
        self._pending: list[str] = []

    def __call__(self, message: str = "", linebreak: bool = True) -> None:
        self._pending.append(message)
        if linebreak:
            self.flush()

    def flush(self) -> None:
        """Log any buffered fragment."""
        if not self._pending:
            return
        line = "".join(self._pending).strip()
        self._pending = []
        if line:
            self.logger.log(self.level, line)


class NullMessenger:
    """Discard all progress text."""

    def __call__(self, message: str = "", linebreak: bool = True) -> None:
        return None
