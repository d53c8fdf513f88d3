"""Tree-sitter based scanner for marker-tagged Rust functions and modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

import tree_sitter_rust as ts_rust
from tree_sitter import Language, Parser

from ..cache import DiscoveredDeclaration
from ..config import DEFAULT_MARKER
from ..errors import SourceSyntaxError
from ..symbols import SymbolPath

if TYPE_CHECKING:
    from tree_sitter import Node

_COMMENT_TYPES = frozenset({"line_comment", "block_comment"})


@dataclass(frozen=True, slots=True)
class ModuleReference:
    """An external ``mod name;`` waiting to be resolved to a file."""

    name: str
    module_path: SymbolPath
    search_directory: Path


@dataclass(slots=True)
class ScanResult:
    declarations: list[DiscoveredDeclaration] = field(default_factory=list)
    modules: list[ModuleReference] = field(default_factory=list)

    def extend(self, other: "ScanResult") -> None:
        self.declarations.extend(other.declarations)
        self.modules.extend(other.modules)


@lru_cache(maxsize=1)
def _get_parser() -> Parser:
    """Return a configured tree-sitter parser for Rust sources."""
    return Parser(Language(ts_rust.language()))


def _node_text(node: "Node", source: bytes) -> str:
    """Extract text content from a tree-sitter node."""
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _first_error(node: "Node") -> "Node | None":
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


def _marker_stage(attribute_item: "Node", source: bytes, marker: str) -> tuple[bool, str | None]:
    """Return (matched, stage) for one ``#[...]`` attribute item."""
    attribute = next(
        (child for child in attribute_item.named_children if child.type == "attribute"),
        None,
    )
    if attribute is None or not attribute.named_children:
        return False, None
    name = attribute.named_children[0]
    if name.type != "identifier" or _node_text(name, source) != marker:
        return False, None
    arguments = attribute.child_by_field_name("arguments")
    if arguments is None:
        return True, None
    stage = _node_text(arguments, source)[1:-1].strip()
    return True, stage or None


def _find_marker(
    attributes: list["Node"],
    source: bytes,
    marker: str,
) -> tuple[bool, str | None]:
    for attribute_item in attributes:
        matched, stage = _marker_stage(attribute_item, source, marker)
        if matched:
            return True, stage
    return False, None


def _scan_items(
    items: list["Node"],
    source: bytes,
    *,
    module_path: SymbolPath,
    search_directory: Path,
    marker: str,
) -> ScanResult:
    result = ScanResult()
    pending: list["Node"] = []
    for node in items:
        node_type = node.type
        if node_type == "attribute_item":
            pending.append(node)
            continue
        if node_type in _COMMENT_TYPES:
            continue
        attributes, pending = pending, []

        if node_type == "function_item":
            attributes += [c for c in node.named_children if c.type == "attribute_item"]
            matched, stage = _find_marker(attributes, source, marker)
            name = node.child_by_field_name("name")
            if matched and name is not None:
                result.declarations.append(
                    DiscoveredDeclaration(module_path.child(_node_text(name, source)), stage)
                )
            continue

        if node_type == "mod_item":
            name_node = node.child_by_field_name("name")
            if name_node is None:
                continue
            name = _node_text(name_node, source)
            body = node.child_by_field_name("body")
            if body is None:
                result.modules.append(
                    ModuleReference(name, module_path.child(name), search_directory)
                )
                continue
            result.extend(
                _scan_items(
                    body.named_children,
                    source,
                    module_path=module_path.child(name),
                    search_directory=search_directory / name,
                    marker=marker,
                )
            )
    return result


def scan_source(
    source: bytes,
    *,
    module_path: SymbolPath,
    search_directory: Path,
    marker: str = DEFAULT_MARKER,
    path: Path | None = None,
) -> ScanResult:
    """Scan one Rust file for marked functions and module declarations.

    Declarations come back in source order, depth-first through inline
    ``mod name { ... }`` blocks. External ``mod name;`` declarations are
    returned as :class:`ModuleReference` values in the same order; they are
    not read here.

    Raises :class:`SourceSyntaxError` when the source does not parse cleanly.
    """
    tree = _get_parser().parse(source)
    root = tree.root_node
    error = _first_error(root)
    if error is not None:
        row, column = error.start_point[0], error.start_point[1]
        raise SourceSyntaxError(path, row + 1, column + 1)
    return _scan_items(
        root.named_children,
        source,
        module_path=module_path,
        search_directory=search_directory,
        marker=marker,
    )
