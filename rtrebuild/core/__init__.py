"""Core layer: configuration, logging and the exception hierarchy."""

from rtrebuild.core.exceptions import (
    ConfigurationError,
    PreconditionError,
    RebuildError,
    TransformError,
    UpstreamQueryError,
)

__all__ = [
    "ConfigurationError",
    "PreconditionError",
    "RebuildError",
    "TransformError",
    "UpstreamQueryError",
]
