"""Tests for the PyMySQL connection factory."""

from unittest.mock import MagicMock, patch

import pymysql
import pytest

from rtrebuild.core.config.connections import ConnectionSettings
from rtrebuild.core.exceptions import UpstreamQueryError
from rtrebuild.storage.dbapi import DBAPISearchConnection, DBAPISourceConnection
from rtrebuild.storage.factory import connect, open_searchd, open_source


class TestConnect:
    """Tests for connect."""

    def test_passes_settings(self) -> None:
        settings = ConnectionSettings(
            host="db", port=3307, user="app", password="pw", database="content"
        )

        with patch("rtrebuild.storage.factory.pymysql.connect") as mock_connect:
            connect(settings)

        mock_connect.assert_called_once_with(
            host="db",
            port=3307,
            user="app",
            password="pw",
            charset="utf8mb4",
            connect_timeout=10,
            autocommit=True,
            database="content",
        )

    def test_no_database_for_searchd(self) -> None:
        with patch("rtrebuild.storage.factory.pymysql.connect") as mock_connect:
            connect(ConnectionSettings(port=9306))

        assert "database" not in mock_connect.call_args.kwargs

    def test_connection_error_wrapped(self) -> None:
        settings = ConnectionSettings(host="down", password="hunter2")

        with patch(
            "rtrebuild.storage.factory.pymysql.connect",
            side_effect=pymysql.err.OperationalError(2003, "Can't connect"),
        ):
            with pytest.raises(UpstreamQueryError) as exc_info:
                connect(settings)

        assert exc_info.value.context["server"] == "down:3306"
        assert "hunter2" not in str(exc_info.value)


class TestOpeners:
    """Tests for open_source and open_searchd."""

    def test_wrap_connections(self) -> None:
        with patch("rtrebuild.storage.factory.pymysql.connect", return_value=MagicMock()):
            source = open_source(ConnectionSettings())
            searchd = open_searchd(ConnectionSettings(port=9306))

        assert isinstance(source, DBAPISourceConnection)
        assert isinstance(searchd, DBAPISearchConnection)
        assert searchd.paramstyle == "pyformat"
