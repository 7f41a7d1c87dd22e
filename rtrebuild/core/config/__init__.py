"""
Configuration package for rtrebuild.

- rebuild: RebuildOptions and resolve_options (per-run rebuild options)
- connections: ConnectionSettings for the source DB and the search daemon
- config: AppConfig, the complete file-backed configuration
"""

from rtrebuild.core.config.config import AppConfig
from rtrebuild.core.config.connections import (
    DEFAULT_MYSQL_PORT,
    DEFAULT_SEARCHD_PORT,
    ConnectionSettings,
)
from rtrebuild.core.config.rebuild import (
    DEFAULT_CHUNK_LENGTH,
    DEFAULT_SLEEP_TIME,
    OPTION_KEYS,
    RebuildOptions,
    resolve_options,
)

__all__ = [
    "AppConfig",
    "ConnectionSettings",
    "DEFAULT_CHUNK_LENGTH",
    "DEFAULT_MYSQL_PORT",
    "DEFAULT_SEARCHD_PORT",
    "DEFAULT_SLEEP_TIME",
    "OPTION_KEYS",
    "RebuildOptions",
    "resolve_options",
]
