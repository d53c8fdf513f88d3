"""sysscan package initialization."""

from __future__ import annotations

from .api import discover
from .errors import (
    CacheCorruptError,
    CacheWriteError,
    DiscoveryError,
    SourceReadError,
    SourceSyntaxError,
)
from .services.discovery_service import DiscoveryResult
from .services.registration_service import Registration

__all__ = [
    "__version__",
    "CacheCorruptError",
    "CacheWriteError",
    "DiscoveryError",
    "DiscoveryResult",
    "Registration",
    "SourceReadError",
    "SourceSyntaxError",
    "discover",
    "get_version",
]

__version__ = "0.1.0"


def get_version() -> str:
    """Return the current package version."""
    return __version__
