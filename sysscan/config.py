"""Project configuration management for sysscan."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from .symbols import is_identifier
from .text import Messages
from .utils import resolve_directory

CONFIG_FILENAME = "sysscan.json"
DEFAULT_ROOT_FILE = "src/main.rs"
DEFAULT_MARKER = "system"
DEFAULT_ROOT_MODULE = "crate"
DEFAULT_CACHE_SUBDIR = Path("target") / "sysscan"
ENV_PROJECT_DIR = "CARGO_MANIFEST_DIR"
ENV_CACHE_DIR = "SYSSCAN_CACHE_DIR"


@dataclass
class Config:
    root_file: str = DEFAULT_ROOT_FILE
    marker: str = DEFAULT_MARKER
    root_module: str = DEFAULT_ROOT_MODULE
    cache_dir: str | None = None


def config_file(project_dir: Path) -> Path:
    return project_dir / CONFIG_FILENAME


def load_config(project_dir: Path) -> Config:
    path = config_file(project_dir)
    if not path.exists():
        return Config()
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(Messages.ERROR_CONFIG_INVALID.format(path=path))
    for key in ("root_file", "marker", "root_module", "cache_dir"):
        value = raw.get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(Messages.ERROR_CONFIG_INVALID.format(path=path))
    return Config(
        root_file=raw.get("root_file") or DEFAULT_ROOT_FILE,
        marker=validate_identifier(raw.get("marker") or DEFAULT_MARKER, "marker"),
        root_module=validate_identifier(
            raw.get("root_module") or DEFAULT_ROOT_MODULE, "root_module"
        ),
        cache_dir=raw.get("cache_dir") or None,
    )


def save_config(project_dir: Path, config: Config) -> None:
    data: Dict[str, Any] = {
        "root_file": config.root_file,
        "marker": config.marker,
        "root_module": config.root_module,
    }
    if config.cache_dir:
        data["cache_dir"] = config.cache_dir
    config_file(project_dir).write_text(
        json.dumps(data, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def validate_identifier(value: str, name: str) -> str:
    token = (value or "").strip()
    if not is_identifier(token):
        raise ValueError(Messages.ERROR_IDENTIFIER_INVALID.format(name=name, value=value))
    return token


def set_root_file(project_dir: Path, value: str) -> None:
    token = (value or "").strip()
    if not token:
        raise ValueError(Messages.ERROR_ROOT_EMPTY)
    config = load_config(project_dir)
    config.root_file = token
    save_config(project_dir, config)


def set_marker(project_dir: Path, value: str) -> None:
    config = load_config(project_dir)
    config.marker = validate_identifier(value, "marker")
    save_config(project_dir, config)


def set_root_module(project_dir: Path, value: str) -> None:
    config = load_config(project_dir)
    config.root_module = validate_identifier(value, "root_module")
    save_config(project_dir, config)


def set_cache_dir(project_dir: Path, value: str | None) -> None:
    config = load_config(project_dir)
    config.cache_dir = (value or "").strip() or None
    save_config(project_dir, config)


def resolve_project_dir(path: Path | str | None = None) -> Path:
    """Return the crate directory: explicit path, then $CARGO_MANIFEST_DIR, then cwd."""
    if path is None:
        path = os.environ.get(ENV_PROJECT_DIR) or Path.cwd()
    return resolve_directory(path)


def resolve_root_file(
    project_dir: Path,
    config: Config,
    override: Path | str | None = None,
) -> Path:
    root = Path(override) if override is not None else Path(config.root_file)
    return project_dir / root


def resolve_cache_dir(
    project_dir: Path,
    config: Config,
    override: Path | str | None = None,
) -> Path:
    if override is not None:
        return Path(override).expanduser().resolve()
    env_value = os.environ.get(ENV_CACHE_DIR)
    if env_value:
        return Path(env_value).expanduser().resolve()
    if config.cache_dir:
        return (project_dir / Path(config.cache_dir).expanduser()).resolve()
    return project_dir / DEFAULT_CACHE_SUBDIR
