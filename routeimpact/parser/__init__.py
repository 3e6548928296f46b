"""Tree-sitter front end for route impact analysis.

One interface over the TypeScript, TSX and JavaScript grammars: hand it a
file's text and path, get back a syntax tree (or None for files that are
not JS/TS family sources).
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

from .config import detect_language, needs_script_block
from .utils import extract_script_block

# =============================================================================
# Data Types
# =============================================================================


@dataclass(frozen=True)
class TsParsed:
    """Parsed source code with tree-sitter AST."""

    language: str
    src: bytes
    tree: Any
    root: Node


# =============================================================================
# Parser Infrastructure
# =============================================================================

_THREAD_LOCAL = threading.local()


def _get_parser(language_name: str) -> Parser:
    """Get or create a thread-local parser for the given grammar."""
    parsers = getattr(_THREAD_LOCAL, "parsers", None)
    if parsers is None:
        parsers = {}
        _THREAD_LOCAL.parsers = parsers

    parser = parsers.get(language_name)
    if parser is None:
        lang = get_language(language_name)
        parser = Parser()
        if hasattr(parser, "set_language"):
            parser.set_language(lang)
        else:
            parser.language = lang
        parsers[language_name] = parser
    return parser


def language_for_file(file_path: Path | str) -> Optional[str]:
    """Map a file path to its tree-sitter grammar name."""
    return detect_language(str(file_path))


# =============================================================================
# AST Utilities (exported for extraction modules)
# =============================================================================


def iter_named_nodes(root: Node) -> Iterable[Node]:
    """Iterate over all named nodes in the AST (pre-order)."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        for child in reversed(node.named_children):
            stack.append(child)


def node_text(src: bytes, node: Node) -> str:
    """Extract text content of a node."""
    return src[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def string_value(src: bytes, node: Node) -> Optional[str]:
    """Literal value of a `string` (or plain `template_string`) node, else None."""
    if node.type == "string":
        return node_text(src, node)[1:-1]
    if node.type == "template_string":
        if any(c.type == "template_substitution" for c in node.named_children):
            return None
        return node_text(src, node)[1:-1]
    return None


def node_line(node: Node) -> int:
    """1-based line of a node's first character."""
    return node.start_point[0] + 1


# =============================================================================
# Core Parsing
# =============================================================================


def parse_source(text: str, *, file_path: Path | str) -> Optional[TsParsed]:
    """Parse source code with tree-sitter.

    Args:
        text: Source code text
        file_path: Path to source file (used for grammar selection)

    Returns:
        TsParsed object or None if the file is not a JS/TS family source
    """
    language = language_for_file(file_path)
    if language is None:
        return None

    if needs_script_block(str(file_path)):
        text = extract_script_block(text)

    src = text.encode("utf-8", errors="replace")
    parser = _get_parser(language)
    tree = parser.parse(src)
    return TsParsed(language=language, src=src, tree=tree, root=tree.root_node)


__all__ = [
    "TsParsed",
    "iter_named_nodes",
    "language_for_file",
    "node_line",
    "node_text",
    "parse_source",
    "string_value",
]
