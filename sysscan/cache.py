"""Discovery cache: per-file entries persisted as one JSON artifact per root."""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Mapping

from .config import DEFAULT_MARKER, DEFAULT_ROOT_MODULE
from .errors import CacheCorruptError, CacheWriteError
from .symbols import SymbolPath
from .text import Messages

logger = logging.getLogger(__name__)

CACHE_VERSION = 1
CACHE_PREFIX = "discovery_cache_"
CACHE_SUFFIX = ".json"


@dataclass(frozen=True, slots=True)
class DiscoveredDeclaration:
    path: SymbolPath
    stage: str | None = None

    def to_dict(self) -> dict:
        return {"path": str(self.path), "stage": self.stage}


@dataclass(frozen=True, slots=True)
class FileReference:
    file: Path
    module_path: SymbolPath

    def to_dict(self) -> dict:
        return {"file": str(self.file), "module_path": str(self.module_path)}


@dataclass(slots=True)
class CacheEntry:
    last_modified: int
    module_path: SymbolPath
    search_directory: Path
    fn_paths: list[DiscoveredDeclaration] = field(default_factory=list)
    referenced_files: list[FileReference] = field(default_factory=list)

    def is_fresh(self, last_modified: int) -> bool:
        return self.last_modified == last_modified

    def to_dict(self) -> dict:
        return {
            "last_modified": self.last_modified,
            "module_path": str(self.module_path),
            "search_directory": str(self.search_directory),
            "fn_paths": [decl.to_dict() for decl in self.fn_paths],
            "referenced_files": [ref.to_dict() for ref in self.referenced_files],
        }

    @classmethod
    def from_dict(cls, raw: Mapping) -> "CacheEntry":
        last_modified = raw["last_modified"]
        if not isinstance(last_modified, int) or isinstance(last_modified, bool):
            raise TypeError("last_modified must be an integer")
        search_directory = raw["search_directory"]
        if not isinstance(search_directory, str):
            raise TypeError("search_directory must be a string")
        fn_paths = []
        for item in raw["fn_paths"]:
            stage = item["stage"]
            if stage is not None and not isinstance(stage, str):
                raise TypeError("stage must be a string or null")
            fn_paths.append(DiscoveredDeclaration(SymbolPath.parse(item["path"]), stage))
        referenced_files = []
        for item in raw["referenced_files"]:
            if not isinstance(item["file"], str):
                raise TypeError("referenced file must be a string")
            referenced_files.append(
                FileReference(Path(item["file"]), SymbolPath.parse(item["module_path"]))
            )
        return cls(
            last_modified=last_modified,
            module_path=SymbolPath.parse(raw["module_path"]),
            search_directory=Path(search_directory),
            fn_paths=fn_paths,
            referenced_files=referenced_files,
        )


class CacheStore:
    """Mapping of normalized file path to its cache entry for one pass."""

    def __init__(self, entries: Mapping[Path, CacheEntry] | None = None) -> None:
        self._entries: dict[Path, CacheEntry] = dict(entries or {})

    def take(self, key: Path) -> CacheEntry | None:
        """Remove and return the entry for *key* so no other branch can reuse it."""
        return self._entries.pop(key, None)

    def put(self, key: Path, entry: CacheEntry) -> None:
        self._entries[key] = entry

    def get(self, key: Path) -> CacheEntry | None:
        return self._entries.get(key)

    def items(self):
        return self._entries.items()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[Path]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def to_dict(self) -> dict[str, dict]:
        return {str(key): entry.to_dict() for key, entry in self._entries.items()}


def _cache_key(root: Path, marker: str, root_module: str) -> str:
    base = f"{root}|marker={marker}|root_module={root_module}"
    return hashlib.sha1(base.encode("utf-8")).hexdigest()[:16]


def cache_file(
    cache_dir: Path,
    root: Path,
    *,
    marker: str = DEFAULT_MARKER,
    root_module: str = DEFAULT_ROOT_MODULE,
) -> Path:
    """Return the artifact path for *root* scanned with *marker* under *root_module*.

    Every setting that changes scan output is part of the key, so entries
    recorded under one setting are never replayed under another.
    """
    key = _cache_key(root, marker, root_module)
    return cache_dir / f"{CACHE_PREFIX}{key}{CACHE_SUFFIX}"


def load_store(path: Path) -> CacheStore:
    """Load the artifact at *path*.

    A missing, unreadable or structurally invalid artifact yields an empty
    store. A readable artifact with a malformed entry raises
    :class:`CacheCorruptError`.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug("No discovery cache at %s", path)
        return CacheStore()
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.debug("Ignoring unreadable discovery cache %s: %s", path, exc)
        return CacheStore()
    if not isinstance(raw, dict) or raw.get("version") != CACHE_VERSION:
        logger.debug("Ignoring discovery cache %s with unexpected layout", path)
        return CacheStore()
    entries_raw = raw.get("entries")
    if not isinstance(entries_raw, dict):
        logger.debug("Ignoring discovery cache %s without entries", path)
        return CacheStore()

    entries: dict[Path, CacheEntry] = {}
    for key, value in entries_raw.items():
        try:
            entries[Path(key)] = CacheEntry.from_dict(value)
        except (KeyError, TypeError, ValueError) as exc:
            raise CacheCorruptError(
                Messages.ERROR_CACHE_CORRUPT.format(path=key, reason=exc)
            ) from exc
    logger.debug("Loaded %d discovery cache entries from %s", len(entries), path)
    return CacheStore(entries)


def persist_store(store: CacheStore, path: Path, *, root: Path) -> Path:
    """Overwrite the artifact at *path* with the complete contents of *store*."""
    payload = {
        "version": CACHE_VERSION,
        "root": str(root),
        "entries": store.to_dict(),
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
    except OSError as exc:
        raise CacheWriteError(f"Cannot write discovery cache {path}: {exc}") from exc
    logger.debug("Stored %d discovery cache entries in %s", len(store), path)
    return path


def clear_store(path: Path) -> bool:
    """Delete the artifact at *path*; return True when a file was removed."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
