"""
Rebuild option resolution.

Turns a flat, possibly partial mapping of option overrides into a fully
populated RebuildOptions value. Unknown keys are ignored.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional


DEFAULT_CHUNK_LENGTH = 500
DEFAULT_SLEEP_TIME = 1


@dataclass(frozen=True)
class RebuildOptions:
    """Resolved options for one rebuild run."""

    chunk_length: int = DEFAULT_CHUNK_LENGTH
    sleep_after_chunk: bool = True
    sleep_time: int = DEFAULT_SLEEP_TIME

    log_before_index: bool = True
    log_after_index: bool = True
    log_before_chunk: bool = True
    log_after_chunk: bool = True
    log_rows_inside_chunk: bool = True
    log_total_rows_found: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Flat option mapping."""
        return asdict(self)


OPTION_KEYS = frozenset(f.name for f in fields(RebuildOptions))


def resolve_options(overrides: Optional[Mapping[str, Any]] = None) -> RebuildOptions:
    """Fill every option from overrides or its default.

    A sleep_time of zero always disables sleep_after_chunk, whatever
    sleep_after_chunk was set to.

    Args:
        overrides: Option key -> value; missing keys take defaults

    Returns:
        Fully populated RebuildOptions
    """
    values = {k: v for k, v in (overrides or {}).items() if k in OPTION_KEYS}
    options = RebuildOptions(**values)

    if options.sleep_time == 0:
        values["sleep_after_chunk"] = False
        options = RebuildOptions(**values)

    return options
