"""Formatting helpers for discover output."""

from __future__ import annotations

from rich.console import Console

from .services.registration_service import Registration


def format_status_icon(passed: bool, console: Console) -> str:
    """Return a check or cross mark, falling back to ASCII when *console* cannot encode it."""
    mark = "✓" if passed else "✗"
    try:
        mark.encode(console.encoding or "ascii")
    except (LookupError, UnicodeEncodeError):
        mark = "OK" if passed else "X"
    color = "green" if passed else "red"
    return f"[{color}]{mark}[/{color}]"


def format_porcelain_line(registration: Registration) -> str:
    """Return ``path<TAB>stage`` with ``-`` standing in for a missing stage."""
    stage = registration.stage if registration.stage is not None else "-"
    return f"{registration.path_text}\t{stage}"
