"""
Connection interfaces consumed by the rebuild engine.

The engine only needs a handful of operations from each side, so any
client offering them can be plugged in, whatever driver sits underneath.

SourceConnection (relational source)
    query(sql)         -> iterator of row mappings, fetched lazily
    query_scalar(sql)  -> first column of the first row

SearchConnection (search daemon)
    query(sql)         -> list of result rows (catalog lookups, DDL)
    prepare(template)  -> PreparedStatement

PreparedStatement
    execute(params)    -> None

Templates use ``:name`` placeholders.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Protocol, runtime_checkable


SourceRow = Dict[str, Any]


@runtime_checkable
class SourceConnection(Protocol):
    """Read access to the relational source table."""

    def query(self, sql: str) -> Iterator[Mapping[str, Any]]:
        ...

    def query_scalar(self, sql: str) -> Any:
        ...


@runtime_checkable
class PreparedStatement(Protocol):
    """A statement template ready to run with bound parameters."""

    def execute(self, params: Mapping[str, Any]) -> None:
        ...


@runtime_checkable
class SearchConnection(Protocol):
    """Write and catalog access to the search daemon."""

    def query(self, sql: str) -> List[Any]:
        ...

    def prepare(self, template: str) -> PreparedStatement:
        ...
