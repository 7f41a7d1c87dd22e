"""rtrebuild - Rebuild real-time search indexes from relational tables.

Streams rows from a source table in chunks, passes each row through a
caller-supplied transform and writes it to the RT index with REPLACE.
"""

__version__ = "1.0.0"

from rtrebuild.core.exceptions import (
    ConfigurationError,
    PreconditionError,
    RebuildError,
    TransformError,
    UpstreamQueryError,
)
from rtrebuild.rebuild.engine import RTIndexRebuilder, RebuildReport, rebuild_index

__all__ = [
    "__version__",
    "ConfigurationError",
    "PreconditionError",
    "RTIndexRebuilder",
    "RebuildError",
    "RebuildReport",
    "TransformError",
    "UpstreamQueryError",
    "rebuild_index",
]
