"""Path helpers: cache-key normalization and module file resolution."""

from __future__ import annotations

from pathlib import Path

SOURCE_EXTENSION = ".rs"
RESERVED_ROOT_NAMES = frozenset({"main", "lib", "mod"})
MODULE_LEAF_NAME = "mod"
RAW_PREFIX = "r#"


def _plain_segment(segment: str) -> str:
    if segment.startswith(RAW_PREFIX):
        return segment[len(RAW_PREFIX) :]
    return segment


def normalize_source_path(path: Path | str) -> Path:
    """Return the cache key for *path*.

    Segments spelled as raw identifiers (``r#type``) are rewritten to their
    plain form so a file reached through different module routes always maps
    to one key.
    """
    path = Path(path)
    parts = [_plain_segment(part) for part in path.parts]
    if not parts:
        return path
    return Path(*parts)


def resolve_search_directory(file: Path) -> Path:
    """Return the directory that external modules of *file* resolve against."""
    stem = file.with_suffix("").name
    if stem in RESERVED_ROOT_NAMES:
        return file.parent
    return file.with_suffix("")


def resolve_module_file(search_directory: Path, name: str) -> Path:
    """Map an external ``mod name;`` to its source file.

    ``<dir>/<name>.rs`` wins when it exists, otherwise ``<dir>/<name>/mod.rs``
    is returned whether or not it exists.
    """
    candidate = normalize_source_path(search_directory / f"{name}{SOURCE_EXTENSION}")
    if candidate.exists():
        return candidate
    return normalize_source_path(
        search_directory / name / f"{MODULE_LEAF_NAME}{SOURCE_EXTENSION}"
    )


def resolve_directory(path: Path | str) -> Path:
    """Resolve and validate a user supplied directory path."""
    dir_path = Path(path).expanduser().resolve()
    if not dir_path.exists():
        raise FileNotFoundError(f"Directory does not exist: {dir_path}")
    if not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    return dir_path


def format_path(path: Path, base: Path | None = None) -> str:
    """Return a user friendly representation of *path* relative to *base* when possible."""
    if base is not None:
        try:
            return f"./{path.relative_to(base).as_posix()}"
        except ValueError:
            pass
    return str(path)
