"""
Structured Logging for rtrebuild.

Every module gets its logger from here:

    from rtrebuild.core.logging import get_logger
    logger = get_logger(__name__)

Records carry ``key=value`` fields after the message:

    logger.bind(index="rt_articles")
    logger.info("Truncated", reconfigure=True)
    # Truncated | index=rt_articles | reconfigure=True

RebuildLogger times the stages of one rebuild run and sums the
time spent per stage in ``stage_durations``:

    rlog = RebuildLogger("rt_articles")
    rlog.start_stage("truncating")
    rlog.start_stage("counting")
    rlog.finish(success=True, rows=1200)

The operator-facing progress text of a rebuild goes through the
messenger (rtrebuild.rebuild.messenger), not through these loggers.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from rich.logging import RichHandler


@dataclass
class LogConfig:
    """Handler and level settings shared by rtrebuild loggers."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%dT%H:%M:%S"
    file_path: Optional[Path] = None
    console: bool = True

    @property
    def numeric_level(self) -> int:
        level = logging.getLevelName(self.level.upper())
        return level if isinstance(level, int) else logging.INFO


class StructuredLogger:
    """Wraps a stdlib logger and appends bound and per-call fields."""

    def __init__(self, name: str, config: Optional[LogConfig] = None) -> None:
        self.logger = logging.getLogger(name)
        self.config = config or _LogDefaults.config
        self.fields: Dict[str, Any] = {}
        self.install_handlers()

    def install_handlers(self) -> None:
        """Replace the handlers according to self.config."""
        level = self.config.numeric_level

        self.logger.setLevel(level)
        self.logger.handlers.clear()

        if self.config.console:
            self.logger.addHandler(
                RichHandler(
                    level=level,
                    show_path=False,
                    markup=False,
                    rich_tracebacks=True,
                )
            )

        if self.config.file_path:
            path = Path(self.config.file_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(path, encoding="utf-8")
            handler.setLevel(level)
            handler.setFormatter(
                logging.Formatter(self.config.format, datefmt=self.config.date_format)
            )
            self.logger.addHandler(handler)

    def bind(self, **fields: Any) -> "StructuredLogger":
        self.fields.update(fields)
        return self

    def unbind(self, *names: str) -> "StructuredLogger":
        for name in names:
            self.fields.pop(name, None)
        return self

    def render(self, message: str, **fields: Any) -> str:
        """Message followed by bound fields, then call fields."""
        merged = dict(self.fields)
        merged.update(fields)
        parts = [message] + [f"{key}={value}" for key, value in merged.items()]
        return " | ".join(parts)

    def log(self, level: int, message: str, **fields: Any) -> None:
        if self.logger.isEnabledFor(level):
            self.logger.log(level, self.render(message, **fields))

    def debug(self, message: str, **fields: Any) -> None:
        self.log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self.log(logging.ERROR, message, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        self.logger.exception(self.render(message, **fields))


class _LogDefaults:
    """Config handed to loggers created without one."""

    config: LogConfig = LogConfig()


_registry: Dict[str, StructuredLogger] = {}


def get_logger(name: str, config: Optional[LogConfig] = None) -> StructuredLogger:
    """Return the StructuredLogger for name, creating it on first use."""
    logger = _registry.get(name)
    if logger is None:
        logger = _registry[name] = StructuredLogger(name, config)
    return logger


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> LogConfig:
    """
    Set the process-wide logging config.

    Loggers already handed out by get_logger() get new handlers too.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: Also append records to this file
        console: Emit records through rich on the terminal

    Returns:
        The config now in effect
    """
    config = LogConfig(level=level, file_path=log_file, console=console)
    _LogDefaults.config = config

    for logger in _registry.values():
        logger.config = config
        logger.install_handlers()

    return config


class RebuildLogger:
    """Stage timing for one rebuild run."""

    def __init__(self, index: str) -> None:
        self.index = index
        self.logger = get_logger("rtrebuild.rebuild")
        self.stage_durations: Dict[str, float] = {}
        self._stage: Optional[str] = None
        self._stage_started = 0.0
        self._run_started = time.monotonic()

    @property
    def current_stage(self) -> Optional[str]:
        return self._stage

    def start_stage(self, stage: str) -> None:
        self._close_stage()
        self._stage = stage
        self._stage_started = time.monotonic()
        self.logger.debug("Starting stage", index=self.index, stage=stage)

    def _close_stage(self) -> None:
        if self._stage is None:
            return
        elapsed = time.monotonic() - self._stage_started
        # chunk stages repeat, so durations accumulate
        self.stage_durations[self._stage] = self.stage_durations.get(self._stage, 0.0) + elapsed
        self.logger.debug(
            "Completed stage",
            index=self.index,
            stage=self._stage,
            duration_sec=f"{elapsed:.2f}",
        )

    def finish(self, success: bool, rows: int = 0, error: Optional[str] = None) -> None:
        """Close the open stage and log the outcome of the run."""
        self._close_stage()
        self._stage = None
        elapsed = f"{time.monotonic() - self._run_started:.2f}"

        if success:
            self.logger.info(
                "Rebuild completed", index=self.index, rows_written=rows, duration_sec=elapsed
            )
            return

        self.logger.error(
            "Rebuild aborted",
            index=self.index,
            rows_written=rows,
            duration_sec=elapsed,
            error=error,
        )

    def log_progress(self, message: str, **fields: Any) -> None:
        self.logger.debug(message, index=self.index, stage=self._stage, **fields)
