"""DB-API (PEP 249) adapters for both sides of a rebuild.

Wraps any PEP 249 connection (PyMySQL, sqlite3, ...) in the narrow
SourceConnection / SearchConnection interfaces. Driver exceptions are
re-raised as UpstreamQueryError with the failing statement attached.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from rtrebuild.core.exceptions import UpstreamQueryError

SUPPORTED_PARAMSTYLES = ("named", "pyformat")

_PLACEHOLDER = re.compile(r":(\w+)")


def row_to_dict(row: Any, description: Optional[Sequence[Sequence[Any]]]) -> Dict[str, Any]:
    """Convert a fetched row to a column -> value dict.

    Rows that are already mappings (dict cursors) are copied; tuples are
    zipped with the cursor description.
    """
    if isinstance(row, Mapping):
        return dict(row)
    if hasattr(row, "keys"):
        return {key: row[key] for key in row.keys()}
    columns = [col[0] for col in description or ()]
    return dict(zip(columns, row))


def convert_placeholders(template: str, params: Mapping[str, Any], paramstyle: str) -> str:
    """Rewrite ``:name`` placeholders for the driver's paramstyle.

    Only names present in params are rewritten, so inlined literal text
    is left alone.
    """
    if paramstyle == "named":
        return template
    if paramstyle != "pyformat":
        raise ValueError(f"Unsupported paramstyle: {paramstyle}")

    escaped = template.replace("%", "%%")

    def replace(match: re.Match) -> str:
        name = match.group(1)
        return f"%({name})s" if name in params else match.group(0)

    return _PLACEHOLDER.sub(replace, escaped)


class DBAPISourceConnection:
    """SourceConnection over a PEP 249 connection."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def query(self, sql: str) -> Iterator[Dict[str, Any]]:
        """Run sql and yield rows one fetch at a time."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql)
        except Exception as e:
            cursor.close()
            raise UpstreamQueryError(
                f"Source query failed: {e}", statement=sql
            ) from e
        return self._iterate(cursor, sql)

    def _iterate(self, cursor: Any, sql: str) -> Iterator[Dict[str, Any]]:
        try:
            while True:
                try:
                    row = cursor.fetchone()
                except Exception as e:
                    raise UpstreamQueryError(
                        f"Source fetch failed: {e}", statement=sql
                    ) from e
                if row is None:
                    break
                yield row_to_dict(row, cursor.description)
        finally:
            cursor.close()

    def query_scalar(self, sql: str) -> Any:
        """Return the first column of the first row, or None."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql)
            row = cursor.fetchone()
        except Exception as e:
            raise UpstreamQueryError(
                f"Source query failed: {e}", statement=sql
            ) from e
        finally:
            cursor.close()

        if row is None:
            return None
        if isinstance(row, Mapping):
            return next(iter(row.values()), None)
        return row[0]

    def close(self) -> None:
        self.connection.close()


class DBAPIPreparedStatement:
    """Prepared REPLACE/INSERT statement bound to a search connection."""

    def __init__(self, connection: Any, template: str, paramstyle: str) -> None:
        self.connection = connection
        self.template = template
        self.paramstyle = paramstyle

    def execute(self, params: Mapping[str, Any]) -> None:
        sql = convert_placeholders(self.template, params, self.paramstyle)
        cursor = self.connection.cursor()
        try:
            if params:
                cursor.execute(sql, dict(params))
            else:
                cursor.execute(self.template)
        except Exception as e:
            raise UpstreamQueryError(
                f"Statement execution failed: {e}", statement=self.template
            ) from e
        finally:
            cursor.close()


class DBAPISearchConnection:
    """SearchConnection over a PEP 249 connection to the search daemon.

    Args:
        connection: Open DB-API connection
        paramstyle: "pyformat" for PyMySQL/MySQLdb, "named" for sqlite3
    """

    def __init__(self, connection: Any, paramstyle: str = "pyformat") -> None:
        if paramstyle not in SUPPORTED_PARAMSTYLES:
            raise ValueError(
                f"paramstyle must be one of {SUPPORTED_PARAMSTYLES}, got {paramstyle!r}"
            )
        self.connection = connection
        self.paramstyle = paramstyle

    def query(self, sql: str) -> List[Dict[str, Any]]:
        """Run sql and return all rows (empty for statements without results)."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql)
            if cursor.description is None:
                return []
            return [row_to_dict(row, cursor.description) for row in cursor.fetchall()]
        except Exception as e:
            raise UpstreamQueryError(
                f"Search daemon query failed: {e}", statement=sql
            ) from e
        finally:
            cursor.close()

    def prepare(self, template: str) -> DBAPIPreparedStatement:
        return DBAPIPreparedStatement(self.connection, template, self.paramstyle)

    def close(self) -> None:
        self.connection.close()
