"""Search daemon helpers and source-side SQL builders.

Thin wrappers over the catalog and DDL surface of an RT index, plus the
count and chunk queries run against the source table. Connection errors
propagate unchanged; nothing here retries.
"""

from __future__ import annotations

from typing import Any, Mapping

from rtrebuild.storage.base import SearchConnection, SourceConnection

DEFAULT_ID_COLUMN = "id"


def build_show_tables_query(index: str) -> str:
    return f"SHOW TABLES LIKE '{index}'"


def _listed_name(row: Any) -> Any:
    """First column of a catalog row (``Index`` or ``Table``)."""
    if isinstance(row, Mapping):
        return next(iter(row.values()), None)
    return row[0] if row else None


def index_exists(connection: SearchConnection, index: str) -> bool:
    """True if the daemon's catalog lists a table/index with exactly this name.

    ``_`` and ``%`` are LIKE wildcards, so the rows returned are compared
    against the name before answering.
    """
    if not index:
        return False

    rows = connection.query(build_show_tables_query(index))
    return any(_listed_name(row) == index for row in rows)


def truncate_index(connection: SearchConnection, index: str, reconfigure: bool = True) -> None:
    """Remove every document from an RT index.

    With reconfigure, the daemon also reloads the index settings from its
    configuration as part of the same command.
    """
    connection.query(build_truncate_statement(index, reconfigure))


def build_truncate_statement(index: str, reconfigure: bool = True) -> str:
    statement = f"TRUNCATE RTINDEX {index}"
    if reconfigure:
        statement += " WITH RECONFIGURE"
    return statement


def _where(condition: str) -> str:
    return f" WHERE {condition}" if condition else ""


def build_count_query(table: str, condition: str = "") -> str:
    return f"SELECT COUNT(*) AS cnt FROM {table}{_where(condition)}"


def build_chunk_query(
    table: str,
    offset: int,
    limit: int,
    condition: str = "",
    id_column: str = DEFAULT_ID_COLUMN,
) -> str:
    """SELECT one page of source rows, newest identifier first."""
    return (
        f"SELECT * FROM {table}{_where(condition)} "
        f"ORDER BY {id_column} DESC LIMIT {offset}, {limit}"
    )


def count_rows(connection: SourceConnection, table: str, condition: str = "") -> int:
    """Number of source rows matching condition (all rows when empty)."""
    if not table:
        return 0

    value: Any = connection.query_scalar(build_count_query(table, condition))
    return int(value) if value is not None else 0
