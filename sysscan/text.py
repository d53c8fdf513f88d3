"""Centralized user-facing text for the sysscan CLI."""

from __future__ import annotations


class Styles:
    ERROR = "red"
    WARNING = "yellow"
    SUCCESS = "green"
    INFO = "dim"
    TABLE_HEADER = "bold magenta"


class Messages:
    APP_HELP = "sysscan – discover #[system] functions in a Rust crate and keep an incremental cache."
    HELP_DISCOVER = "Run one discovery pass from the root file and print the registrations."
    HELP_CACHE = "Inspect or remove the discovery cache for the configured root file."
    HELP_CONFIG = "Show or update the project configuration stored in sysscan.json."
    HELP_PROJECT = "Crate directory (defaults to $CARGO_MANIFEST_DIR or the working directory)."
    HELP_ROOT = "Root source file relative to the crate directory (default: src/main.rs)."
    HELP_CACHE_DIR = "Directory that holds the discovery cache artifact."
    HELP_MARKER = "Attribute name that marks functions for registration."
    HELP_ROOT_MODULE = "Symbolic prefix used for the root file's module path."
    HELP_FORMAT = "Output format: rich table, porcelain lines, or a Rust plugin impl."
    HELP_PLUGIN_NAME = "Struct name used by the rust output format."
    HELP_VERBOSE = "Log cache reuse and rescan decisions."
    HELP_CACHE_SHOW = "List the entries stored in the cache artifact."
    HELP_CACHE_CLEAR = "Delete the cache artifact so the next pass rescans every file."
    HELP_SHOW_CONFIG = "Show current configuration."
    HELP_SET_ROOT = "Set the root source file."
    HELP_SET_MARKER = "Set the marker attribute name."
    HELP_SET_ROOT_MODULE = "Set the symbolic prefix of the root module."
    HELP_SET_CACHE_DIR = "Set the cache directory (empty string resets to target/sysscan)."

    ERROR_CONFIG_INVALID = (
        "Configuration file {path} must contain a JSON object with string values."
    )
    ERROR_IDENTIFIER_INVALID = "{name} must be an identifier, got {value!r}."
    ERROR_ROOT_EMPTY = "Root file must not be empty."
    ERROR_CACHE_OPTION_CONFLICT = "Use either --show or --clear, not both."
    ERROR_CACHE_CORRUPT = (
        "Cache entry for {path} is malformed ({reason}). "
        "Run `sysscan cache --clear` to start over."
    )

    INFO_DISCOVER_RUNNING = "Discovering from {path}..."
    INFO_NO_REGISTRATIONS = "No marked functions found."
    INFO_DISCOVER_SUMMARY = (
        "{count} registration{plural}; scanned {scanned}, reused {reused}. Cache: {path}"
    )
    INFO_CACHE_EMPTY = "No cached entries for {path}."
    INFO_CACHE_CLEARED = "Removed cache artifact {path}."
    INFO_CACHE_CLEAR_NONE = "No cache artifact found at {path}."
    INFO_CONFIG_SAVED = "Configuration saved to {path}."
    INFO_CONFIG_SUMMARY = (
        "Root file: {root}\n"
        "Marker: {marker}\n"
        "Root module: {module}\n"
        "Cache directory: {cache_dir}"
    )

    TABLE_TITLE = "Discovered registrations"
    TABLE_CACHE_TITLE = "Discovery cache entries"
    TABLE_HEADER_INDEX = "#"
    TABLE_HEADER_PATH = "Path"
    TABLE_HEADER_STAGE = "Stage"
    TABLE_HEADER_FILE = "File"
    TABLE_HEADER_MODULE = "Module"
    TABLE_HEADER_FUNCTIONS = "Functions"
    TABLE_HEADER_REFERENCES = "References"
