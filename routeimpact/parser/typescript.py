"""TypeScript/JavaScript tree-sitter extraction.

Extracts imports (static, re-exports, dynamic `import()`, `require()`),
exported names and import bindings from TS/TSX/JS syntax trees.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from tree_sitter import Node

from ..core.models import ImportBinding, ImportRef
from . import iter_named_nodes, node_line, node_text, string_value

_DECLARATION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "abstract_class_declaration",
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
}


# =============================================================================
# Imports
# =============================================================================


def _clause_specifiers(src: bytes, clause: Node) -> List[str]:
    """Imported names from an `import_clause` ("default", "*", or names)."""
    out: List[str] = []
    for child in clause.named_children:
        if child.type == "identifier":
            out.append("default")
        elif child.type == "namespace_import":
            out.append("*")
        elif child.type == "named_imports":
            for spec in child.named_children:
                if spec.type != "import_specifier":
                    continue
                name = spec.child_by_field_name("name")
                if name is not None:
                    out.append(node_text(src, name))
    return out


def _export_clause_specifiers(src: bytes, node: Node) -> List[str]:
    """Names pulled through an `export ... from` statement."""
    out: List[str] = []
    for child in node.children:
        if child.type == "*":
            out.append("*")
        elif child.type == "namespace_export":
            out.append("*")
        elif child.type == "export_clause":
            for spec in child.named_children:
                if spec.type != "export_specifier":
                    continue
                name = spec.child_by_field_name("name")
                if name is not None:
                    out.append(node_text(src, name))
    return out


def _call_string_argument(src: bytes, call: Node) -> Optional[str]:
    args = call.child_by_field_name("arguments")
    if args is None or not args.named_children:
        return None
    return string_value(src, args.named_children[0])


def _dynamic_import_source(src: bytes, node: Node) -> Optional[str]:
    """Specifier of `import("x")` / `require("x")`; None for anything else."""
    if node.type != "call_expression":
        return None
    fn = node.child_by_field_name("function")
    if fn is None:
        return None
    if fn.type == "import" or (fn.type == "identifier" and node_text(src, fn) == "require"):
        return _call_string_argument(src, node)
    return None


def extract_imports(src: bytes, root: Node) -> List[ImportRef]:
    """Extract unresolved import references from a TypeScript/JavaScript AST."""
    out: List[ImportRef] = []
    for node in iter_named_nodes(root):
        if node.type == "import_statement":
            source = node.child_by_field_name("source")
            specifiers: List[str] = []
            if source is None:
                # import x = require("y")
                req = next((c for c in node.named_children if c.type == "import_require_clause"), None)
                source = req.child_by_field_name("source") if req is not None else None
                specifiers = ["default"]
            clause = next((c for c in node.named_children if c.type == "import_clause"), None)
            if clause is not None:
                specifiers = _clause_specifiers(src, clause)
            raw = string_value(src, source) if source is not None else None
            if raw:
                out.append(ImportRef(raw=raw, specifiers=tuple(specifiers), line=node_line(node)))

        elif node.type == "export_statement":
            source = node.child_by_field_name("source")
            raw = string_value(src, source) if source is not None else None
            if raw:
                specifiers = _export_clause_specifiers(src, node)
                out.append(ImportRef(raw=raw, specifiers=tuple(specifiers), line=node_line(node)))

        elif node.type == "call_expression":
            raw = _dynamic_import_source(src, node)
            if raw:
                out.append(ImportRef(raw=raw, specifiers=("default",), line=node_line(node)))
    return out


# =============================================================================
# Exports
# =============================================================================


def _declared_names(src: bytes, decl: Node) -> List[str]:
    if decl.type in _DECLARATION_TYPES:
        name = decl.child_by_field_name("name")
        return [node_text(src, name)] if name is not None else []
    if decl.type in {"lexical_declaration", "variable_declaration"}:
        out: List[str] = []
        for child in decl.named_children:
            if child.type != "variable_declarator":
                continue
            name = child.child_by_field_name("name")
            if name is not None and name.type == "identifier":
                out.append(node_text(src, name))
        return out
    return []


def extract_exports(src: bytes, root: Node) -> List[str]:
    """Extract exported names (`default` for default exports)."""
    out: List[str] = []
    seen: set[str] = set()

    def add(name: str) -> None:
        if name and name not in seen:
            seen.add(name)
            out.append(name)

    for node in root.named_children:
        if node.type != "export_statement":
            continue
        if any(c.type == "default" for c in node.children):
            add("default")
            continue
        decl = node.child_by_field_name("declaration")
        if decl is not None:
            for name in _declared_names(src, decl):
                add(name)
            continue
        for child in node.named_children:
            if child.type == "export_clause":
                for spec in child.named_children:
                    if spec.type != "export_specifier":
                        continue
                    alias = spec.child_by_field_name("alias")
                    name = spec.child_by_field_name("name")
                    target = alias if alias is not None else name
                    if target is not None:
                        add(node_text(src, target))
            elif child.type == "namespace_export":
                ident = next((c for c in child.named_children if c.type == "identifier"), None)
                if ident is not None:
                    add(node_text(src, ident))
    return out


# =============================================================================
# Bindings
# =============================================================================


def _first_dynamic_import(src: bytes, node: Node) -> Optional[str]:
    for child in iter_named_nodes(node):
        if child.type != "call_expression":
            continue
        fn = child.child_by_field_name("function")
        if fn is not None and fn.type == "import":
            raw = _call_string_argument(src, child)
            if raw:
                return raw
    return None


def extract_import_bindings(src: bytes, root: Node) -> Dict[str, ImportBinding]:
    """Map local identifiers to the module (and export) they were bound from.

    Covers default/named/namespace imports and lazily loaded components such
    as `const Page = lazy(() => import("./Page"))` (any wrapper call whose
    argument performs a dynamic import, e.g. `React.lazy`, `dynamic`,
    `loadable`).
    """
    out: Dict[str, ImportBinding] = {}
    for node in iter_named_nodes(root):
        if node.type == "import_statement":
            source = node.child_by_field_name("source")
            raw = string_value(src, source) if source is not None else None
            if not raw:
                continue
            clause = next((c for c in node.named_children if c.type == "import_clause"), None)
            if clause is None:
                continue
            for child in clause.named_children:
                if child.type == "identifier":
                    local = node_text(src, child)
                    out[local] = ImportBinding(local=local, source=raw, imported="default")
                elif child.type == "namespace_import":
                    ident = next((c for c in child.named_children if c.type == "identifier"), None)
                    if ident is not None:
                        local = node_text(src, ident)
                        out[local] = ImportBinding(local=local, source=raw, imported="*")
                elif child.type == "named_imports":
                    for spec in child.named_children:
                        if spec.type != "import_specifier":
                            continue
                        name = spec.child_by_field_name("name")
                        alias = spec.child_by_field_name("alias")
                        if name is None:
                            continue
                        imported = node_text(src, name)
                        local = node_text(src, alias) if alias is not None else imported
                        out[local] = ImportBinding(local=local, source=raw, imported=imported)

        elif node.type == "variable_declarator":
            name = node.child_by_field_name("name")
            value = node.child_by_field_name("value")
            if name is None or value is None or name.type != "identifier":
                continue
            if value.type == "await_expression" and value.named_children:
                value = value.named_children[0]
            if value.type != "call_expression":
                continue
            local = node_text(src, name)
            raw = _dynamic_import_source(src, value)
            if raw is None:
                raw = _first_dynamic_import(src, value)
            if raw:
                out[local] = ImportBinding(local=local, source=raw, imported="default")
    return out


__all__ = [
    "extract_exports",
    "extract_import_bindings",
    "extract_imports",
]
