"""
Main configuration for rtrebuild.

Configuration File (rtrebuild.yaml)
-----------------------------------
    source:
      host: db.internal
      user: indexer
      password: ${MYSQL_PASSWORD}
      database: content
    searchd:
      host: search.internal
      port: 9306
    rebuild:
      chunk_length: 1000
      sleep_time: 0
    logging:
      level: INFO

Every section is optional; missing sections take defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from rtrebuild.core.config.connections import (
    ConnectionSettings,
    default_searchd_settings,
    default_source_settings,
)
from rtrebuild.core.config.rebuild import RebuildOptions, resolve_options
from rtrebuild.core.logging import LogConfig


@dataclass
class AppConfig:
    """Complete rtrebuild configuration."""

    source: ConnectionSettings = field(default_factory=default_source_settings)
    searchd: ConnectionSettings = field(default_factory=default_searchd_settings)
    rebuild: Dict[str, Any] = field(default_factory=dict)
    logging: LogConfig = field(default_factory=LogConfig)

    def rebuild_options(self, **overrides: Any) -> RebuildOptions:
        """Resolve the rebuild section, with keyword overrides on top."""
        merged = dict(self.rebuild)
        merged.update({k: v for k, v in overrides.items() if v is not None})
        return resolve_options(merged)

    @staticmethod
    def _filter_fields(cls_type: Any, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Filter dict to only keys that match dataclass fields, handling None."""
        if not data:
            return {}
        valid_keys = {f.name for f in fields(cls_type)}
        return {k: v for k, v in data.items() if k in valid_keys}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create AppConfig from a parsed YAML mapping."""
        source_data = data.get("source") or {}
        searchd_data = dict(data.get("searchd") or {})
        searchd_data.setdefault("port", default_searchd_settings().port)

        log_data = cls._filter_fields(LogConfig, data.get("logging"))
        if log_data.get("file_path"):
            log_data["file_path"] = Path(log_data["file_path"])

        return cls(
            source=ConnectionSettings(**source_data),
            searchd=ConnectionSettings(**searchd_data),
            rebuild=dict(data.get("rebuild") or {}),
            logging=LogConfig(**log_data),
        )
