"""
Storage layer: connection interfaces, DB-API adapters and search daemon helpers.

    base     SourceConnection / SearchConnection / PreparedStatement protocols
    dbapi    adapters over PEP 249 connections
    searchd  index_exists, truncate_index, count_rows, query builders
    factory  PyMySQL connection factory (imported on demand)
"""

from rtrebuild.storage.base import (
    PreparedStatement,
    SearchConnection,
    SourceConnection,
    SourceRow,
)
from rtrebuild.storage.dbapi import DBAPISearchConnection, DBAPISourceConnection
from rtrebuild.storage.searchd import (
    DEFAULT_ID_COLUMN,
    build_chunk_query,
    build_show_tables_query,
    build_count_query,
    build_truncate_statement,
    count_rows,
    index_exists,
    truncate_index,
)

__all__ = [
    "DBAPISearchConnection",
    "DBAPISourceConnection",
    "DEFAULT_ID_COLUMN",
    "PreparedStatement",
    "SearchConnection",
    "SourceConnection",
    "SourceRow",
    "build_chunk_query",
    "build_show_tables_query",
    "build_count_query",
    "build_truncate_statement",
    "count_rows",
    "index_exists",
    "truncate_index",
]
