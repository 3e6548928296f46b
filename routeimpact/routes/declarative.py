"""Declarative route configuration (React Router style).

Two shapes are recognized:

* route objects, `{ path: "admin", element: <Admin />, children: [...] }`,
  as passed to `createBrowserRouter`/`useRoutes` (Vue Router and Angular
  route tables share the shape);
* JSX `<Route path="admin" element={<Admin />}>` trees.

Nested paths are joined with `/`; an index child without a path of its own
becomes `<parent>/(index)`.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

from tree_sitter import Node

from ..core.models import RouteEntry
from ..parser import TsParsed, iter_named_nodes, node_line, node_text, string_value
from .base import RouteExtractor, join_route

INDEX_SUFFIX = "(index)"

_COMPONENT_KEYS = ("element", "component", "Component")
_JSX_TAGS = {"jsx_opening_element", "jsx_self_closing_element"}


def _node_key(node: Node) -> Tuple[int, int, str]:
    return (node.start_byte, node.end_byte, node.type)


# =============================================================================
# Shared helpers
# =============================================================================


def _jsx_name(src: bytes, tag: Node) -> Optional[str]:
    name = tag.child_by_field_name("name")
    if name is None:
        return None
    return node_text(src, name)


def _component_refs(src: bytes, value: Node) -> Tuple[List[str], List[str]]:
    """Component identifiers and inline dynamic-import specifiers in a value."""
    refs: List[str] = []
    sources: List[str] = []
    if value.type == "identifier":
        return [node_text(src, value)], []
    for node in iter_named_nodes(value):
        if node.type in _JSX_TAGS:
            name = _jsx_name(src, node)
            if name and name not in refs:
                refs.append(name)
        elif node.type == "call_expression":
            fn = node.child_by_field_name("function")
            if fn is not None and fn.type == "import":
                args = node.child_by_field_name("arguments")
                if args is not None and args.named_children:
                    raw = string_value(src, args.named_children[0])
                    if raw and raw not in sources:
                        sources.append(raw)
    return refs, sources


def _component_label(refs: List[str], sources: List[str]) -> str:
    if refs:
        return refs[0]
    if sources:
        return sources[0].rsplit("/", 1)[-1]
    return ""


# =============================================================================
# Route objects
# =============================================================================


def _object_pairs(src: bytes, obj: Node) -> Dict[str, Node]:
    pairs: Dict[str, Node] = {}
    for child in obj.named_children:
        if child.type != "pair":
            continue
        key = child.child_by_field_name("key")
        value = child.child_by_field_name("value")
        if key is None or value is None:
            continue
        if key.type in {"property_identifier", "identifier"}:
            pairs[node_text(src, key)] = value
        elif key.type == "string":
            pairs[node_text(src, key)[1:-1]] = value
    return pairs


def _is_route_object(src: bytes, pairs: Dict[str, Node]) -> bool:
    path = pairs.get("path")
    if path is not None and string_value(src, path) is not None:
        return True
    index = pairs.get("index")
    return index is not None and index.type == "true"


def _walk_route_object(
    src: bytes,
    file: str,
    obj: Node,
    parent: str,
    out: List[RouteEntry],
    seen: Set[Tuple[int, int, str]],
) -> None:
    seen.add(_node_key(obj))
    pairs = _object_pairs(src, obj)

    path_node = pairs.get("path")
    path_value = string_value(src, path_node) if path_node is not None else None
    index_node = pairs.get("index")
    is_index = index_node is not None and index_node.type == "true"

    if path_value is not None:
        full = join_route(parent, path_value)
    elif is_index:
        full = join_route(parent, INDEX_SUFFIX) if parent else INDEX_SUFFIX
    else:
        full = parent

    refs: List[str] = []
    sources: List[str] = []
    for key in _COMPONENT_KEYS:
        value = pairs.get(key)
        if value is not None:
            r, s = _component_refs(src, value)
            refs.extend(x for x in r if x not in refs)
            sources.extend(x for x in s if x not in sources)

    children = pairs.get("children")
    child_objects: List[Node] = []
    if children is not None and children.type == "array":
        child_objects = [c for c in children.named_children if c.type == "object"]

    has_component = bool(refs or sources)
    # Leaves without a component are routes only when nested
    if full and (has_component or (parent and not child_objects)):
        out.append(
            RouteEntry(
                path=full,
                component=_component_label(refs, sources),
                file=file,
                line=node_line(obj),
                references=tuple(refs),
                sources=tuple(sources),
            )
        )

    for child in child_objects:
        child_pairs = _object_pairs(src, child)
        if _is_route_object(src, child_pairs) or "children" in child_pairs:
            _walk_route_object(src, file, child, full, out, seen)


def extract_object_routes(src: bytes, root: Node, file: str) -> List[RouteEntry]:
    out: List[RouteEntry] = []
    seen: Set[Tuple[int, int, str]] = set()
    for node in iter_named_nodes(root):
        if node.type != "object" or _node_key(node) in seen:
            continue
        if _is_route_object(src, _object_pairs(src, node)):
            _walk_route_object(src, file, node, "", out, seen)
    return out


# =============================================================================
# JSX <Route> trees
# =============================================================================


def _jsx_attributes(src: bytes, tag: Node) -> Dict[str, Optional[Node]]:
    attrs: Dict[str, Optional[Node]] = {}
    for child in tag.named_children:
        if child.type != "jsx_attribute" or not child.named_children:
            continue
        name = node_text(src, child.named_children[0])
        attrs[name] = child.named_children[1] if len(child.named_children) > 1 else None
    return attrs


def _open_tag(node: Node) -> Optional[Node]:
    if node.type == "jsx_self_closing_element":
        return node
    for field in ("open_tag", "opening_element"):
        tag = node.child_by_field_name(field)
        if tag is not None:
            return tag
    return next((c for c in node.named_children if c.type == "jsx_opening_element"), None)


def _attr_string(src: bytes, value: Optional[Node]) -> Optional[str]:
    if value is None:
        return None
    if value.type == "jsx_expression" and value.named_children:
        value = value.named_children[0]
    return string_value(src, value)


def _walk_jsx(src: bytes, file: str, node: Node, parent: str, out: List[RouteEntry]) -> None:
    if node.type in {"jsx_element", "jsx_self_closing_element"}:
        tag = _open_tag(node)
        if tag is not None and _jsx_name(src, tag) == "Route":
            attrs = _jsx_attributes(src, tag)
            path_value = _attr_string(src, attrs.get("path"))
            is_index = "index" in attrs and (attrs["index"] is None or node_text(src, attrs["index"]) == "{true}")

            if path_value is not None:
                full = join_route(parent, path_value)
            elif is_index:
                full = join_route(parent, INDEX_SUFFIX) if parent else INDEX_SUFFIX
            else:
                full = parent

            refs: List[str] = []
            sources: List[str] = []
            for key in _COMPONENT_KEYS:
                value = attrs.get(key)
                if value is not None:
                    r, s = _component_refs(src, value)
                    refs.extend(x for x in r if x not in refs)
                    sources.extend(x for x in s if x not in sources)

            nested = node.type == "jsx_element" and any(
                c.type in {"jsx_element", "jsx_self_closing_element"} for c in node.named_children
            )
            if full and (refs or sources or not nested):
                out.append(
                    RouteEntry(
                        path=full,
                        component=_component_label(refs, sources),
                        file=file,
                        line=node_line(node),
                        references=tuple(refs),
                        sources=tuple(sources),
                    )
                )
            if node.type == "jsx_element":
                for child in node.named_children:
                    if child.type not in {"jsx_opening_element", "jsx_closing_element"}:
                        _walk_jsx(src, file, child, full, out)
            return

    for child in node.named_children:
        _walk_jsx(src, file, child, parent, out)


def extract_jsx_routes(src: bytes, root: Node, file: str) -> List[RouteEntry]:
    out: List[RouteEntry] = []
    _walk_jsx(src, file, root, "", out)
    return out


class RouteConfigExtractor(RouteExtractor):
    """Route objects and `<Route>` elements inside a parsed module."""

    name = "route-config"

    def extract(self, path: str, parsed: Optional[TsParsed]) -> List[RouteEntry]:
        if parsed is None:
            return []
        routes = extract_object_routes(parsed.src, parsed.root, path)
        if parsed.language in {"tsx", "javascript"}:
            routes.extend(extract_jsx_routes(parsed.src, parsed.root, path))
        return routes
