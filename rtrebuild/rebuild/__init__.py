"""
Rebuild package: the chunked RT index rebuild and its building blocks.

    engine      RTIndexRebuilder, RebuildReport, rebuild_index()
    statements  REPLACE statement builder (plain and MVA)
    messenger   pluggable progress sinks
    transforms  identity transform and dotted-path loader
"""

from rtrebuild.rebuild.engine import (
    RebuildReport,
    RebuildStage,
    RTIndexRebuilder,
    Transform,
    rebuild_index,
)
from rtrebuild.rebuild.messenger import (
    ConsoleMessenger,
    LoggerMessenger,
    Messenger,
    NullMessenger,
    StreamMessenger,
)
from rtrebuild.rebuild.statements import (
    ReplaceStatement,
    build_replace_statement,
    build_replace_statement_mva,
)
from rtrebuild.rebuild.transforms import identity_transform, load_transform

__all__ = [
    "ConsoleMessenger",
    "LoggerMessenger",
    "Messenger",
    "NullMessenger",
    "RTIndexRebuilder",
    "RebuildReport",
    "RebuildStage",
    "ReplaceStatement",
    "StreamMessenger",
    "Transform",
    "build_replace_statement",
    "build_replace_statement_mva",
    "identity_transform",
    "load_transform",
    "rebuild_index",
]
