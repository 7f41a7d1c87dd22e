"""
Fixture modules for rtrebuild tests.

Modules
-------
- fakes: in-memory search daemon, recording messenger, sqlite source table
"""

from tests.fixtures.fakes import (
    FakePreparedStatement,
    FakeSearchConnection,
    RecordingMessenger,
    make_source_db,
)

__all__ = [
    "FakePreparedStatement",
    "FakeSearchConnection",
    "RecordingMessenger",
    "make_source_db",
]
