"""Exception taxonomy for discovery passes."""

from __future__ import annotations

from pathlib import Path


class DiscoveryError(RuntimeError):
    """Base class for every failure that aborts a discovery pass."""


class SourceReadError(DiscoveryError):
    """Raised when a source file or its metadata cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class SourceSyntaxError(DiscoveryError):
    """Raised when a source file does not parse."""

    def __init__(self, path: Path | None, line: int, column: int) -> None:
        location = f"{path}:{line}:{column}" if path is not None else f"{line}:{column}"
        super().__init__(f"Unable to parse {location}")
        self.path = path
        self.line = line
        self.column = column


class CacheCorruptError(DiscoveryError):
    """Raised when a readable cache artifact holds a malformed entry."""


class CacheWriteError(DiscoveryError):
    """Raised when the cache artifact cannot be written at the end of a pass."""
