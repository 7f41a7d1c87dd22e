"""Connection factory.

Opens PyMySQL connections for the source database and the search daemon
and wraps them in the DB-API adapters.

Example:
    config = load_config()
    source = open_source(config.source)
    searchd = open_searchd(config.searchd)
"""

from __future__ import annotations

import pymysql

from rtrebuild.core.config.connections import ConnectionSettings
from rtrebuild.core.exceptions import UpstreamQueryError
from rtrebuild.storage.dbapi import DBAPISearchConnection, DBAPISourceConnection


class _Logger:
    """Lazy logger holder."""

    _instance = None

    @classmethod
    def get(cls):
        """Get logger (lazy-loaded)."""
        if cls._instance is None:
            from rtrebuild.core.logging import get_logger

            cls._instance = get_logger(__name__)
        return cls._instance


def connect(settings: ConnectionSettings) -> pymysql.connections.Connection:
    """Open an autocommit PyMySQL connection.

    Raises:
        UpstreamQueryError: If the server cannot be reached
    """
    kwargs = dict(
        host=settings.host,
        port=settings.port,
        user=settings.user,
        password=settings.password,
        charset=settings.charset,
        connect_timeout=settings.connect_timeout,
        autocommit=True,
    )
    if settings.database:
        kwargs["database"] = settings.database

    try:
        conn = pymysql.connect(**kwargs)
    except pymysql.MySQLError as e:
        raise UpstreamQueryError(
            f"Cannot connect to {settings.describe()}: {e}",
            server=settings.describe(),
        ) from e

    _Logger.get().debug("Connected", server=settings.describe())
    return conn


def open_source(settings: ConnectionSettings) -> DBAPISourceConnection:
    return DBAPISourceConnection(connect(settings))


def open_searchd(settings: ConnectionSettings) -> DBAPISearchConnection:
    return DBAPISearchConnection(connect(settings), paramstyle="pyformat")
