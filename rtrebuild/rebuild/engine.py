"""RT index rebuild engine.

Rebuilds a real-time index from a relational source table:

    validate -> truncate -> count -> chunk loop -> report

Each chunk is one ``ORDER BY id DESC LIMIT offset, count`` page of the
source table. Every row goes through the caller's transform, becomes a
REPLACE statement and is written to the index before the next row is
fetched. Between chunks the engine optionally sleeps to relieve the
search daemon.

Any failure aborts the whole run. The index is left truncated and holds
only the rows written before the failure; there is no retry and no
resume point.

Example:
    rebuilder = RTIndexRebuilder(source, searchd, {"chunk_length": 1000})
    written = rebuilder.rebuild_index(
        "articles",
        "rt_articles",
        lambda row: {"id": row["id"], "title": row["title"], "tags": row["tag_ids"]},
        condition="deleted = 0",
        mva_enabled=True,
        mva_columns=["tags"],
    )
"""

from __future__ import annotations

import math
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Collection, Dict, Iterator, Mapping, Optional

from rtrebuild.core.config.rebuild import RebuildOptions, resolve_options
from rtrebuild.core.exceptions import (
    ConfigurationError,
    PreconditionError,
    RebuildError,
    TransformError,
    UpstreamQueryError,
)
from rtrebuild.core.logging import RebuildLogger
from rtrebuild.rebuild.messenger import Messenger, StreamMessenger
from rtrebuild.rebuild.statements import (
    ReplaceStatement,
    build_replace_statement,
    build_replace_statement_mva,
)
from rtrebuild.storage.base import SearchConnection, SourceConnection, SourceRow
from rtrebuild.storage.searchd import (
    DEFAULT_ID_COLUMN,
    build_chunk_query,
    build_count_query,
    build_show_tables_query,
    build_truncate_statement,
    count_rows,
    index_exists,
    truncate_index,
)

Transform = Callable[[SourceRow], Mapping[str, Any]]


class RebuildStage(str, Enum):
    """Where a rebuild run currently is."""

    IDLE = "idle"
    VALIDATING = "validating"
    TRUNCATING = "truncating"
    COUNTING = "counting"
    FETCHING = "fetching"
    ROW_PROCESSING = "row_processing"
    THROTTLING = "throttling"
    REPORTING = "reporting"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class RebuildReport:
    """Outcome of one rebuild run."""

    source_table: str
    index: str
    total_found: int = 0
    rows_written: int = 0
    chunks: int = 0
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    duration_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source_table": self.source_table,
            "index": self.index,
            "total_found": self.total_found,
            "rows_written": self.rows_written,
            "chunks": self.chunks,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_seconds": self.duration_seconds,
        }


class RTIndexRebuilder:
    """Truncate an RT index and refill it from a source table, chunk by chunk.

    One rebuilder may be reused for several indexes, one run at a time.
    Concurrent rebuilds of the same index are not detected.
    """

    def __init__(
        self,
        source: SourceConnection,
        searchd: SearchConnection,
        options: Optional[Mapping[str, Any]] = None,
        messenger: Optional[Messenger] = None,
    ) -> None:
        """Initialize rebuilder.

        Args:
            source: Connection to the relational source database
            searchd: Connection to the search daemon
            options: Option overrides (see RebuildOptions); defaults otherwise
            messenger: Progress sink; defaults to StreamMessenger on stdout
        """
        self.source = source
        self.searchd = searchd
        self.messenger: Messenger = messenger or StreamMessenger()
        self.stage = RebuildStage.IDLE
        self._options = resolve_options(options)

    @property
    def options(self) -> RebuildOptions:
        return self._options

    def set_options(self, options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Replace the options, starting again from defaults.

        Returns:
            The resolved flat option mapping
        """
        self._options = resolve_options(options)
        return self._options.to_dict()

    def set_messenger(self, messenger: Messenger) -> None:
        """Swap the progress sink, e.g. for ConsoleMessenger or LoggerMessenger."""
        self.messenger = messenger

    def check_index_exists(self, index: str) -> bool:
        """True if the search daemon lists this index."""
        with self._upstream(build_show_tables_query(index), index=index):
            return index_exists(self.searchd, index)

    def rebuild_index(
        self,
        source_table: str,
        index: str,
        transform: Transform,
        condition: str = "",
        mva_enabled: bool = False,
        mva_columns: Collection[str] = (),
        *,
        reconfigure: bool = True,
        id_column: str = DEFAULT_ID_COLUMN,
    ) -> int:
        """Rebuild index from source_table and return the number of rows written.

        Args:
            source_table: Source SQL table
            index: Target RT index
            transform: Turns a source row into the index column -> value mapping
            condition: SQL condition for the source rows, without WHERE
            mva_enabled: Whether the update sets carry multi-valued attributes
            mva_columns: Columns whose values are inlined rather than bound
            reconfigure: Issue the truncate WITH RECONFIGURE
            id_column: Identifier column used for ordering and row logging

        Raises:
            ConfigurationError: Empty table/index name or non-positive chunk length
            PreconditionError: The index does not exist
            UpstreamQueryError: A source or search daemon statement failed
            TransformError: The transform failed for a row
        """
        report = self.rebuild(
            source_table,
            index,
            transform,
            condition,
            mva_enabled,
            mva_columns,
            reconfigure=reconfigure,
            id_column=id_column,
        )
        return report.rows_written

    def rebuild(
        self,
        source_table: str,
        index: str,
        transform: Transform,
        condition: str = "",
        mva_enabled: bool = False,
        mva_columns: Collection[str] = (),
        *,
        reconfigure: bool = True,
        id_column: str = DEFAULT_ID_COLUMN,
    ) -> RebuildReport:
        """Same as rebuild_index() but returns the full RebuildReport."""
        options = self._options
        rlog = RebuildLogger(index)
        report = RebuildReport(source_table=source_table, index=index)
        context = {"index": index, "source_table": source_table}

        try:
            self._enter(RebuildStage.VALIDATING, rlog)
            self._validate(source_table, index, transform, options)

            self._enter(RebuildStage.TRUNCATING, rlog)
            with self._upstream(build_truncate_statement(index, reconfigure), **context):
                truncate_index(self.searchd, index, reconfigure)

            self._enter(RebuildStage.COUNTING, rlog)
            with self._upstream(build_count_query(source_table, condition), **context):
                report.total_found = count_rows(self.source, source_table, condition)

            if options.log_before_index:
                self._say(f"[{index}] index : ", False)
            if options.log_total_rows_found:
                self._say(f"{report.total_found} elements found for rebuild.")

            chunk_length = options.chunk_length
            total_chunks = math.ceil(report.total_found / chunk_length)
            rlog.log_progress("Chunk plan", total=report.total_found, chunks=total_chunks)

            for i in range(total_chunks):
                offset = i * chunk_length
                limit = min(chunk_length, report.total_found - offset)
                self._process_chunk(
                    report,
                    transform,
                    offset,
                    limit,
                    condition,
                    mva_enabled,
                    mva_columns,
                    id_column,
                    rlog,
                )
                report.chunks += 1

            self._enter(RebuildStage.REPORTING, rlog)
            if options.log_after_index:
                self._say(
                    f"Total updated {report.rows_written} elements for {index} RT-index."
                )

        except RebuildError as e:
            self.stage = RebuildStage.ABORTED
            rlog.finish(success=False, rows=report.rows_written, error=e.user_message)
            raise
        except BaseException as e:
            # messenger failures and interrupts
            self.stage = RebuildStage.ABORTED
            rlog.finish(
                success=False, rows=report.rows_written, error=f"{type(e).__name__}: {e}"
            )
            raise

        self.stage = RebuildStage.DONE
        report.finished_at = datetime.now()
        report.duration_seconds = (report.finished_at - report.started_at).total_seconds()
        rlog.finish(success=True, rows=report.rows_written)
        return report

    # === Stages ===

    def _validate(
        self,
        source_table: str,
        index: str,
        transform: Transform,
        options: RebuildOptions,
    ) -> None:
        """Fail fast before anything destructive happens."""
        if not index or not index.strip():
            raise ConfigurationError(
                "Requested update of undefined index", source_table=source_table
            )

        if not source_table or not source_table.strip():
            raise ConfigurationError("Not defined source SQL table", index=index)

        if not callable(transform):
            raise ConfigurationError(
                f"Transform for {index} is not callable: {transform!r}",
                index=index,
            )

        if not self.check_index_exists(index):
            raise PreconditionError(
                f"Index [{index}] not present", index=index, source_table=source_table
            )

        chunk_length = options.chunk_length
        if isinstance(chunk_length, bool) or not isinstance(chunk_length, int):
            raise ConfigurationError(
                f"Chunk size must be an integer, got {chunk_length!r}", index=index
            )
        if chunk_length == 0:
            raise ConfigurationError("Chunk size is ZERO", index=index)
        if chunk_length < 0:
            raise ConfigurationError(
                f"Chunk size must be positive, got {chunk_length}", index=index
            )

        if options.sleep_after_chunk and options.sleep_time < 0:
            raise ConfigurationError(
                f"Sleep time must not be negative, got {options.sleep_time}",
                index=index,
            )

    def _process_chunk(
        self,
        report: RebuildReport,
        transform: Transform,
        offset: int,
        limit: int,
        condition: str,
        mva_enabled: bool,
        mva_columns: Collection[str],
        id_column: str,
        rlog: RebuildLogger,
    ) -> None:
        """Fetch one page, write every row, then report and throttle."""
        options = self._options
        source_table = report.source_table
        index = report.index

        if options.log_before_chunk:
            self._say(
                f"Rebuilding elements from {offset}, {options.chunk_length} count... ",
                False,
            )

        self._enter(RebuildStage.FETCHING, rlog)
        sql = build_chunk_query(source_table, offset, limit, condition, id_column)
        with self._upstream(sql, index=index, source_table=source_table):
            rows = iter(self.source.query(sql))

        self._enter(RebuildStage.ROW_PROCESSING, rlog)
        for row in self._fetch_rows(rows, sql, index, source_table):
            row_id = row.get(id_column)

            if options.log_rows_inside_chunk:
                self._say(f"{source_table}: {row_id}")

            update_set = self._apply_transform(transform, row, row_id, index, source_table)

            if mva_enabled:
                statement = build_replace_statement_mva(index, update_set, mva_columns)
            else:
                statement = build_replace_statement(index, update_set)

            self._write(statement, index, source_table, row_id)
            report.rows_written += 1

        linebreak_after_chunk = not options.sleep_after_chunk

        if options.log_after_chunk:
            self._say(f"Updated RT-index {index}.", linebreak_after_chunk)
        else:
            self._say("Ok", linebreak_after_chunk)

        if options.sleep_after_chunk:
            self._enter(RebuildStage.THROTTLING, rlog)
            self._say(f"ZZZZzzz for {options.sleep_time} second(s)... ", False)
            time.sleep(options.sleep_time)
            self._say("I woke up!")

    def _fetch_rows(
        self,
        rows: Iterator[Mapping[str, Any]],
        sql: str,
        index: str,
        source_table: str,
    ) -> Iterator[SourceRow]:
        """Pull rows one at a time, wrapping fetch failures."""
        while True:
            with self._upstream(sql, index=index, source_table=source_table):
                row = next(rows, None)
            if row is None:
                return
            yield dict(row)

    def _apply_transform(
        self,
        transform: Transform,
        row: SourceRow,
        row_id: Any,
        index: str,
        source_table: str,
    ) -> Mapping[str, Any]:
        try:
            update_set = transform(row)
        except Exception as e:
            raise TransformError(
                f"Transform failed for {source_table} row {row_id}: {e}",
                row_id=row_id,
                index=index,
                source_table=source_table,
            ) from e

        if not isinstance(update_set, Mapping) or not update_set:
            raise TransformError(
                f"Transform returned no update set for {source_table} row {row_id}: "
                f"{update_set!r}",
                row_id=row_id,
                index=index,
                source_table=source_table,
            )
        return update_set

    def _write(
        self,
        statement: ReplaceStatement,
        index: str,
        source_table: str,
        row_id: Any,
    ) -> None:
        with self._upstream(
            statement.template, index=index, source_table=source_table, row_id=row_id
        ):
            prepared = self.searchd.prepare(statement.template)
            prepared.execute(statement.params)

    # === Helpers ===

    def _enter(self, stage: RebuildStage, rlog: RebuildLogger) -> None:
        self.stage = stage
        rlog.start_stage(stage.value)

    def _say(self, message: str, linebreak: bool = True) -> None:
        self.messenger(message, linebreak)

    @contextmanager
    def _upstream(self, statement: str, **context: Any) -> Iterator[None]:
        """Re-raise connection failures as UpstreamQueryError."""
        try:
            yield
        except RebuildError:
            raise
        except Exception as e:
            raise UpstreamQueryError(
                f"{type(e).__name__}: {e}", statement=statement, **context
            ) from e


def rebuild_index(
    source: SourceConnection,
    searchd: SearchConnection,
    source_table: str,
    index: str,
    transform: Transform,
    condition: str = "",
    mva_enabled: bool = False,
    mva_columns: Collection[str] = (),
    options: Optional[Mapping[str, Any]] = None,
    messenger: Optional[Messenger] = None,
    **kwargs: Any,
) -> int:
    """Convenience function: build a rebuilder and run one rebuild.

    Returns:
        Number of rows written to the index
    """
    rebuilder = RTIndexRebuilder(source, searchd, options, messenger)
    return rebuilder.rebuild_index(
        source_table,
        index,
        transform,
        condition,
        mva_enabled,
        mva_columns,
        **kwargs,
    )
