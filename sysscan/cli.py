"""Command line interface for sysscan."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__, config as config_module
from .cache import cache_file, clear_store, load_store
from .config import (
    load_config,
    resolve_cache_dir,
    resolve_project_dir,
    resolve_root_file,
    validate_identifier,
)
from .errors import DiscoveryError
from .output import format_porcelain_line, format_status_icon
from .services.discovery_service import run_discovery
from .services.registration_service import DEFAULT_PLUGIN_NAME, render_plugin_impl
from .text import Messages, Styles
from .utils import format_path, normalize_source_path

console = Console()

app = typer.Typer(
    help=Messages.APP_HELP,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


class DiscoverOutputFormat(str, Enum):
    rich = "rich"
    porcelain = "porcelain"
    rust = "rust"


def _styled(text: str, style: str) -> str:
    return f"[{style}]{text}[/{style}]"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"sysscan v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _resolve_project(project: Path | None) -> Path:
    try:
        return resolve_project_dir(project)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load_project_config(project_dir: Path) -> config_module.Config:
    try:
        return load_config(project_dir)
    except ValueError as exc:
        console.print(_styled(str(exc), Styles.ERROR))
        raise typer.Exit(code=1)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Global options."""
    return None


def _resolve_scan_settings(
    config: config_module.Config,
    marker: str | None,
    root_module: str | None,
) -> tuple[str, str]:
    try:
        marker_value = validate_identifier(marker, "marker") if marker else config.marker
        module_value = (
            validate_identifier(root_module, "root_module")
            if root_module
            else config.root_module
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return marker_value, module_value


@app.command(help=Messages.HELP_DISCOVER)
def discover(
    project: Path | None = typer.Option(None, "--project", "-p", help=Messages.HELP_PROJECT),
    root: Path | None = typer.Option(None, "--root", "-r", help=Messages.HELP_ROOT),
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help=Messages.HELP_CACHE_DIR),
    marker: str | None = typer.Option(None, "--marker", help=Messages.HELP_MARKER),
    root_module: str | None = typer.Option(
        None,
        "--root-module",
        help=Messages.HELP_ROOT_MODULE,
    ),
    output_format: DiscoverOutputFormat = typer.Option(
        DiscoverOutputFormat.rich,
        "--format",
        "-f",
        help=Messages.HELP_FORMAT,
    ),
    plugin_name: str = typer.Option(
        DEFAULT_PLUGIN_NAME,
        "--plugin-name",
        help=Messages.HELP_PLUGIN_NAME,
    ),
    verbose: bool = typer.Option(False, "--verbose", help=Messages.HELP_VERBOSE),
) -> None:
    _configure_logging(verbose)
    project_dir = _resolve_project(project)
    config = _load_project_config(project_dir)
    marker_value, module_value = _resolve_scan_settings(config, marker, root_module)

    root_file = resolve_root_file(project_dir, config, root)
    directory = resolve_cache_dir(project_dir, config, cache_dir)
    if output_format == DiscoverOutputFormat.rich:
        console.print(
            _styled(
                Messages.INFO_DISCOVER_RUNNING.format(path=format_path(root_file, project_dir)),
                Styles.INFO,
            )
        )
    try:
        result = run_discovery(
            root_file,
            directory,
            marker=marker_value,
            root_module=module_value,
        )
    except DiscoveryError as exc:
        console.print(_styled(str(exc), Styles.ERROR))
        raise typer.Exit(code=1)

    if output_format == DiscoverOutputFormat.porcelain:
        for registration in result.registrations:
            typer.echo(format_porcelain_line(registration))
        return
    if output_format == DiscoverOutputFormat.rust:
        typer.echo(render_plugin_impl(result.registrations, plugin_name))
        return

    if result.registrations:
        table = Table(title=Messages.TABLE_TITLE, header_style=Styles.TABLE_HEADER)
        table.add_column(Messages.TABLE_HEADER_INDEX, justify="right")
        table.add_column(Messages.TABLE_HEADER_PATH, overflow="fold")
        table.add_column(Messages.TABLE_HEADER_STAGE, overflow="fold")
        for idx, registration in enumerate(result.registrations, start=1):
            table.add_row(str(idx), registration.path_text, registration.stage or "-")
        console.print(table)
    else:
        console.print(_styled(Messages.INFO_NO_REGISTRATIONS, Styles.WARNING))
    count = len(result.registrations)
    summary = Messages.INFO_DISCOVER_SUMMARY.format(
        count=count,
        plural="" if count == 1 else "s",
        scanned=len(result.scanned),
        reused=len(result.reused),
        path=result.cache_path,
    )
    console.print(f"{format_status_icon(True, console)} {summary}")


@app.command(help=Messages.HELP_CACHE)
def cache(
    project: Path | None = typer.Option(None, "--project", "-p", help=Messages.HELP_PROJECT),
    root: Path | None = typer.Option(None, "--root", "-r", help=Messages.HELP_ROOT),
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help=Messages.HELP_CACHE_DIR),
    marker: str | None = typer.Option(None, "--marker", help=Messages.HELP_MARKER),
    root_module: str | None = typer.Option(
        None,
        "--root-module",
        help=Messages.HELP_ROOT_MODULE,
    ),
    show: bool = typer.Option(False, "--show", help=Messages.HELP_CACHE_SHOW),
    clear: bool = typer.Option(False, "--clear", help=Messages.HELP_CACHE_CLEAR),
) -> None:
    if show and clear:
        raise typer.BadParameter(Messages.ERROR_CACHE_OPTION_CONFLICT)
    project_dir = _resolve_project(project)
    config = _load_project_config(project_dir)
    marker_value, module_value = _resolve_scan_settings(config, marker, root_module)
    root_file = normalize_source_path(resolve_root_file(project_dir, config, root))
    path = cache_file(
        resolve_cache_dir(project_dir, config, cache_dir),
        root_file,
        marker=marker_value,
        root_module=module_value,
    )

    if clear:
        if clear_store(path):
            console.print(_styled(Messages.INFO_CACHE_CLEARED.format(path=path), Styles.SUCCESS))
        else:
            console.print(_styled(Messages.INFO_CACHE_CLEAR_NONE.format(path=path), Styles.INFO))
        return

    try:
        store = load_store(path)
    except DiscoveryError as exc:
        console.print(_styled(str(exc), Styles.ERROR))
        raise typer.Exit(code=1)
    if not len(store):
        console.print(_styled(Messages.INFO_CACHE_EMPTY.format(path=root_file), Styles.INFO))
        return
    table = Table(title=Messages.TABLE_CACHE_TITLE, header_style=Styles.TABLE_HEADER)
    table.add_column(Messages.TABLE_HEADER_FILE, overflow="fold")
    table.add_column(Messages.TABLE_HEADER_MODULE, overflow="fold")
    table.add_column(Messages.TABLE_HEADER_FUNCTIONS, justify="right")
    table.add_column(Messages.TABLE_HEADER_REFERENCES, justify="right")
    for key, entry in sorted(store.items(), key=lambda item: str(item[0])):
        table.add_row(
            format_path(key, project_dir),
            str(entry.module_path),
            str(len(entry.fn_paths)),
            str(len(entry.referenced_files)),
        )
    console.print(table)


@app.command(help=Messages.HELP_CONFIG)
def config(
    project: Path | None = typer.Option(None, "--project", "-p", help=Messages.HELP_PROJECT),
    show: bool = typer.Option(False, "--show", help=Messages.HELP_SHOW_CONFIG),
    set_root: str | None = typer.Option(None, "--set-root", help=Messages.HELP_SET_ROOT),
    set_marker: str | None = typer.Option(None, "--set-marker", help=Messages.HELP_SET_MARKER),
    set_root_module: str | None = typer.Option(
        None,
        "--set-root-module",
        help=Messages.HELP_SET_ROOT_MODULE,
    ),
    set_cache_dir: str | None = typer.Option(
        None,
        "--set-cache-dir",
        help=Messages.HELP_SET_CACHE_DIR,
    ),
) -> None:
    project_dir = _resolve_project(project)
    changed = False
    try:
        if set_root is not None:
            config_module.set_root_file(project_dir, set_root)
            changed = True
        if set_marker is not None:
            config_module.set_marker(project_dir, set_marker)
            changed = True
        if set_root_module is not None:
            config_module.set_root_module(project_dir, set_root_module)
            changed = True
        if set_cache_dir is not None:
            config_module.set_cache_dir(project_dir, set_cache_dir)
            changed = True
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if changed:
        console.print(
            _styled(
                Messages.INFO_CONFIG_SAVED.format(path=config_module.config_file(project_dir)),
                Styles.SUCCESS,
            )
        )
    if show or not changed:
        cfg = _load_project_config(project_dir)
        console.print(
            _styled(
                Messages.INFO_CONFIG_SUMMARY.format(
                    root=cfg.root_file,
                    marker=cfg.marker,
                    module=cfg.root_module,
                    cache_dir=resolve_cache_dir(project_dir, cfg),
                ),
                Styles.INFO,
            )
        )


def run(argv: list[str] | None = None) -> None:
    """Entry point wrapper allowing optional argument override."""
    if argv is None:
        app()
    else:
        app(args=list(argv))
