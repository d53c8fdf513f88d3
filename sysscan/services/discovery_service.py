"""Logic helpers for one incremental discovery pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .registration_service import Registration, RegistrationSink
from .rust_parser import scan_source
from ..cache import (
    CacheEntry,
    CacheStore,
    FileReference,
    cache_file,
    load_store,
    persist_store,
)
from ..config import DEFAULT_MARKER, DEFAULT_ROOT_MODULE
from ..errors import SourceReadError
from ..symbols import SymbolPath
from ..utils import normalize_source_path, resolve_module_file, resolve_search_directory

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DiscoveryResult:
    registrations: list[Registration]
    cache_path: Path
    scanned: list[Path] = field(default_factory=list)
    reused: list[Path] = field(default_factory=list)


def read_last_modified(path: Path) -> int:
    try:
        return path.stat().st_mtime_ns
    except OSError as exc:
        raise SourceReadError(path, exc.strerror or str(exc)) from exc


def read_source(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise SourceReadError(path, exc.strerror or str(exc)) from exc


class DiscoveryPass:
    """Walk the module tree once, reusing fresh cache entries and rescanning the rest.

    Entries are taken out of the store while their file is being processed and
    put back afterwards. A file reached twice in one pass is therefore
    rescanned on the second visit.
    """

    def __init__(
        self,
        store: CacheStore,
        sink: RegistrationSink | None = None,
        *,
        marker: str = DEFAULT_MARKER,
    ) -> None:
        self.store = store
        self.sink = sink if sink is not None else RegistrationSink()
        self.marker = marker
        self.scanned: list[Path] = []
        self.reused: list[Path] = []

    def resolve(self, file: Path, module_path: SymbolPath) -> None:
        key = normalize_source_path(file)
        last_modified = read_last_modified(key)
        entry = self.store.take(key)
        if entry is None:
            search_directory = resolve_search_directory(key)
        elif entry.is_fresh(last_modified):
            self._reuse(key, entry)
            return
        else:
            logger.debug("Cache entry for %s is stale", key)
            search_directory = entry.search_directory
        self._rescan(key, module_path, search_directory, last_modified)

    def _reuse(self, key: Path, entry: CacheEntry) -> None:
        logger.debug("Reusing cache entry for %s", key)
        self.reused.append(key)
        self.sink.register_all(entry.fn_paths)
        for reference in entry.referenced_files:
            self.resolve(reference.file, reference.module_path)
        self.store.put(key, entry)

    def _rescan(
        self,
        key: Path,
        module_path: SymbolPath,
        search_directory: Path,
        last_modified: int,
    ) -> None:
        logger.debug("Scanning %s as %s", key, module_path)
        self.scanned.append(key)
        result = scan_source(
            read_source(key),
            module_path=module_path,
            search_directory=search_directory,
            marker=self.marker,
            path=key,
        )
        self.sink.register_all(result.declarations)

        references: list[FileReference] = []
        for module in result.modules:
            child = resolve_module_file(module.search_directory, module.name)
            self.resolve(child, module.module_path)
            references.append(FileReference(child, module.module_path))

        self.store.put(
            key,
            CacheEntry(
                last_modified=last_modified,
                module_path=module_path,
                search_directory=search_directory,
                fn_paths=result.declarations,
                referenced_files=references,
            ),
        )


def run_discovery(
    root_file: Path,
    cache_dir: Path,
    *,
    marker: str = DEFAULT_MARKER,
    root_module: str = DEFAULT_ROOT_MODULE,
) -> DiscoveryResult:
    """Run one pass: load the cache, walk from *root_file*, persist the cache."""
    root = normalize_source_path(root_file)
    path = cache_file(cache_dir, root, marker=marker, root_module=root_module)
    store = load_store(path)
    discovery = DiscoveryPass(store, marker=marker)
    discovery.resolve(root, SymbolPath.root(root_module))
    persist_store(store, path, root=root)
    logger.debug(
        "Discovery pass for %s: %d scanned, %d reused",
        root,
        len(discovery.scanned),
        len(discovery.reused),
    )
    return DiscoveryResult(
        registrations=list(discovery.sink.registrations),
        cache_path=path,
        scanned=discovery.scanned,
        reused=discovery.reused,
    )
