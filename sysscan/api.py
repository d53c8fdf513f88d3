"""Public API for running discovery passes from Python build scripts."""

from __future__ import annotations

from pathlib import Path

from .config import (
    load_config,
    resolve_cache_dir,
    resolve_project_dir,
    resolve_root_file,
    validate_identifier,
)
from .services.discovery_service import DiscoveryResult, run_discovery


def discover(
    project_dir: Path | str | None = None,
    *,
    root: Path | str | None = None,
    cache_dir: Path | str | None = None,
    marker: str | None = None,
    root_module: str | None = None,
) -> DiscoveryResult:
    """Run one discovery pass for the crate at *project_dir*.

    Unset arguments fall back to ``sysscan.json`` in the crate directory and
    then to the built-in defaults. Failures propagate as
    :class:`~sysscan.errors.DiscoveryError` subclasses.
    """
    directory = resolve_project_dir(project_dir)
    config = load_config(directory)
    return run_discovery(
        resolve_root_file(directory, config, root),
        resolve_cache_dir(directory, config, cache_dir),
        marker=validate_identifier(marker, "marker") if marker else config.marker,
        root_module=(
            validate_identifier(root_module, "root_module")
            if root_module
            else config.root_module
        ),
    )
