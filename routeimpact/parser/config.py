"""Language configuration for the route impact parser.

Maps file extensions onto the tree-sitter grammar used to read them.
Single-file components (Svelte, Vue) are read through their `<script>`
block, which is parsed as TypeScript.
"""

from __future__ import annotations

from typing import Dict, Optional

# File extension to tree-sitter grammar name
EXTENSION_TO_LANGUAGE: Dict[str, str] = {
    # TypeScript
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    # JSX-capable (tsx is a superset of jsx)
    ".tsx": "tsx",
    ".jsx": "tsx",
    # JavaScript
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    # Single-file components
    ".svelte": "typescript",
    ".vue": "typescript",
}

# Extensions whose source must be cut down to a <script> block before parsing
SCRIPT_BLOCK_EXTENSIONS: set[str] = {".svelte", ".vue"}

# Probe order used when an import specifier has no extension
RESOLVE_EXTENSIONS: tuple[str, ...] = (".tsx", ".ts", ".jsx", ".js")

# Style sheets can be imported but are never parsed
STYLE_EXTENSIONS: tuple[str, ...] = (".css", ".scss", ".sass", ".less")


def detect_language(path: str) -> Optional[str]:
    """Detect the tree-sitter grammar for a file path.

    Returns:
        Grammar name (e.g., "tsx") or None if extension is unknown
    """
    if "." not in path:
        return None
    ext = "." + path.rsplit(".", 1)[-1].lower()
    return EXTENSION_TO_LANGUAGE.get(ext)


def needs_script_block(path: str) -> bool:
    if "." not in path:
        return False
    return "." + path.rsplit(".", 1)[-1].lower() in SCRIPT_BLOCK_EXTENSIONS
