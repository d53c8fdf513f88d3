from __future__ import annotations

import os
from pathlib import Path

import pytest

BASE_MTIME_NS = 1_700_000_000_000_000_000


def _write_source(path: Path, text: str, mtime_ns: int = BASE_MTIME_NS) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    os.utime(path, ns=(mtime_ns, mtime_ns))
    return path


def _touch(path: Path, mtime_ns: int) -> None:
    os.utime(path, ns=(mtime_ns, mtime_ns))


@pytest.fixture
def write_source():
    """Write a Rust source file with a fixed modification time."""
    return _write_source


@pytest.fixture
def touch():
    return _touch


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    monkeypatch.delenv("CARGO_MANIFEST_DIR", raising=False)
    monkeypatch.delenv("SYSSCAN_CACHE_DIR", raising=False)


@pytest.fixture
def crate(tmp_path: Path) -> Path:
    """A small crate: root with inline and external modules."""
    src = tmp_path / "src"
    _write_source(
        src / "main.rs",
        """use bevy::prelude::*;

#[system]
fn startup() {}

mod physics;
mod net;

mod ui {
    #[system(stage::POST_UPDATE)]
    fn draw_hud() {}

    fn helper() {}
}
""",
    )
    _write_source(
        src / "physics.rs",
        """#[system]
fn integrate() {}

#[system(Late)]
fn resolve_collisions() {}
""",
    )
    _write_source(src / "net" / "mod.rs", "mod client;\n")
    _write_source(
        src / "net" / "client.rs",
        """/// Polls the socket.
#[system]
pub fn poll() {}
""",
    )
    return tmp_path
