"""Row transforms.

A transform turns one source row into the column -> value mapping written
to the index. The CLI loads transforms by dotted path, e.g.
``myproject.search:article_row``.
"""

from __future__ import annotations

import importlib
from typing import Any, Callable, Dict, Mapping

from rtrebuild.core.exceptions import ConfigurationError


def identity_transform(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Write the source row unchanged."""
    return dict(row)


def load_transform(path: str) -> Callable[[Mapping[str, Any]], Mapping[str, Any]]:
    """Import a transform from ``package.module:callable``.

    Raises:
        ConfigurationError: If the path is malformed or does not resolve
            to a callable
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"Transform must be given as 'module:callable', got {path!r}"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import transform module {module_name!r}: {e}") from e

    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ConfigurationError(
                f"Transform {path!r} not found: {module_name} has no {attr!r}"
            ) from e

    if not callable(target):
        raise ConfigurationError(f"Transform {path!r} is not callable")
    return target
