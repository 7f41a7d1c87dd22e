"""
Connection settings for the source database and the search daemon.

Both sides speak the MySQL wire protocol; the search daemon listens on
its SphinxQL port (9306 by default) and has no database name.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


DEFAULT_MYSQL_PORT = 3306
DEFAULT_SEARCHD_PORT = 9306


class ConnectionSettings(BaseModel):
    """Host and credentials for one MySQL-protocol server."""

    model_config = {"frozen": True}

    host: str = Field(default="127.0.0.1", min_length=1)
    port: int = Field(default=DEFAULT_MYSQL_PORT, ge=1, le=65535)
    user: str = Field(default="root")
    password: str = Field(default="", repr=False)
    database: Optional[str] = Field(default=None)
    charset: str = Field(default="utf8mb4")
    connect_timeout: int = Field(default=10, ge=1, le=600)

    def describe(self) -> str:
        """host:port[/database] without credentials."""
        target = f"{self.host}:{self.port}"
        if self.database:
            target += f"/{self.database}"
        return target


def default_source_settings() -> ConnectionSettings:
    return ConnectionSettings()


def default_searchd_settings() -> ConnectionSettings:
    return ConnectionSettings(port=DEFAULT_SEARCHD_PORT)
