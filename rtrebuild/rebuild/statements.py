"""REPLACE statement builder for RT indexes.

Plain mode binds every column as a ``:name`` placeholder. MVA mode inlines
the values of multi-valued attribute columns as ``(v1,v2,...)`` literals,
because the search daemon does not accept a bound parameter for an MVA
list, and drops those columns from the bound parameters.

    stmt = build_replace_statement_mva("rt_docs", {"id": 1, "tags": "3,7"}, ["tags"])
    stmt.template  # REPLACE INTO rt_docs (id, tags) VALUES (:id, (3,7))
    stmt.params    # {"id": 1}

MVA values are inserted verbatim, without escaping. Callers must make sure
they only contain numbers and commas.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Collection, Dict, Mapping


@dataclass(frozen=True)
class ReplaceStatement:
    """Statement template plus the parameters to bind to it."""

    template: str
    params: Dict[str, Any] = field(default_factory=dict)


def mva_literal(value: Any) -> str:
    """Render an MVA value as the parenthesized list the daemon expects."""
    if isinstance(value, (list, tuple)):
        value = ",".join(str(item) for item in value)
    return f"({value})"


def _render(index: str, update_set: Mapping[str, Any], mva_columns: Collection[str]) -> str:
    if not update_set:
        raise ValueError(f"Cannot build REPLACE for {index}: update set is empty")

    columns = list(update_set.keys())
    values = [
        mva_literal(update_set[column]) if column in mva_columns else f":{column}"
        for column in columns
    ]
    return f"REPLACE INTO {index} ({', '.join(columns)}) VALUES ({', '.join(values)})"


def build_replace_statement(index: str, update_set: Mapping[str, Any]) -> ReplaceStatement:
    """REPLACE with one placeholder per column, in update_set order."""
    return ReplaceStatement(_render(index, update_set, ()), dict(update_set))


def build_replace_statement_mva(
    index: str,
    update_set: Mapping[str, Any],
    mva_columns: Collection[str],
) -> ReplaceStatement:
    """REPLACE with MVA columns inlined and excluded from the parameters.

    Names in mva_columns that are absent from update_set are ignored.
    With no MVA columns the result equals build_replace_statement().
    """
    mva = frozenset(mva_columns)
    params = {k: v for k, v in update_set.items() if k not in mva}
    return ReplaceStatement(_render(index, update_set, mva), params)
