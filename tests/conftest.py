"""
Shared pytest fixtures for rtrebuild tests.

Fixture Organization
--------------------
- **source_db / source_conn**: in-memory sqlite3 source table ``docs``
- **searchd**: FakeSearchConnection recording every statement
- **messenger**: RecordingMessenger capturing (message, linebreak) calls
- **no_sleep**: patches the inter-chunk sleep

The fake classes live in tests.fixtures.fakes.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Generator
from unittest.mock import patch

import pytest

from rtrebuild.storage.dbapi import DBAPISourceConnection
from tests.fixtures.fakes import FakeSearchConnection, RecordingMessenger, make_source_db


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def source_db() -> Generator[sqlite3.Connection, None, None]:
    """Source table with ids 10, 11, 12."""
    conn = make_source_db(
        [
            (10, "First", "1,2"),
            (11, "Second", "3"),
            (12, "Third", "4,5,6"),
        ]
    )
    yield conn
    conn.close()


@pytest.fixture
def source_conn(source_db: sqlite3.Connection) -> DBAPISourceConnection:
    return DBAPISourceConnection(source_db)


@pytest.fixture
def searchd() -> FakeSearchConnection:
    return FakeSearchConnection()


@pytest.fixture
def messenger() -> RecordingMessenger:
    return RecordingMessenger()


@pytest.fixture
def no_sleep() -> Generator[Any, None, None]:
    """Patch time.sleep inside the engine and yield the mock."""
    with patch("rtrebuild.rebuild.engine.time.sleep") as mocked:
        yield mocked
