"""Bidirectional import graph over project-relative file paths."""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, Iterator, List, Optional

from .models import GraphNode


class ImportGraph:
    """Adjacency map: file -> (imports, imported_by, flags).

    Every mutation keeps `imports` and `imported_by` symmetric: if A imports
    B then B is imported by A.
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, GraphNode] = {}
        self._edge_count = 0

    # -- nodes ---------------------------------------------------------------

    def ensure_node(self, file: str) -> GraphNode:
        node = self._nodes.get(file)
        if node is None:
            node = GraphNode(file=file)
            self._nodes[file] = node
        return node

    def get(self, file: str) -> Optional[GraphNode]:
        return self._nodes.get(file)

    def files(self) -> List[str]:
        return list(self._nodes)

    def __contains__(self, file: object) -> bool:
        return file in self._nodes

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(list(self._nodes.values()))

    def __len__(self) -> int:
        return len(self._nodes)

    # -- edges ---------------------------------------------------------------

    def add_edge(self, from_file: str, to_file: str) -> bool:
        """Add `from_file -> to_file`. Returns True if the edge is new."""
        if from_file == to_file:
            return False
        src = self.ensure_node(from_file)
        dst = self.ensure_node(to_file)
        if to_file in src.imports:
            return False
        src.imports.add(to_file)
        dst.imported_by.add(from_file)
        self._edge_count += 1
        return True

    def remove_file_edges(self, file: str) -> None:
        """Drop every outgoing edge of `file` (before re-adding on reparse)."""
        node = self._nodes.get(file)
        if node is None:
            return
        for target in node.imports:
            dst = self._nodes.get(target)
            if dst is not None:
                dst.imported_by.discard(file)
        self._edge_count -= len(node.imports)
        node.imports = set()

    def remove_file(self, file: str) -> None:
        """Remove a node together with its incoming and outgoing edges."""
        node = self._nodes.get(file)
        if node is None:
            return
        self.remove_file_edges(file)
        for importer in node.imported_by:
            src = self._nodes.get(importer)
            if src is not None and file in src.imports:
                src.imports.discard(file)
                self._edge_count -= 1
        del self._nodes[file]

    def mark_route_file(self, file: str, value: bool = True) -> None:
        self.ensure_node(file).is_route_file = value

    def mark_entry_point(self, file: str, value: bool = True) -> None:
        self.ensure_node(file).is_entry_point = value

    def clear(self) -> None:
        self._nodes.clear()
        self._edge_count = 0

    # -- traversal -----------------------------------------------------------

    def walk_importers(self, start: str) -> List[str]:
        """Breadth-first walk over `imported_by`, starting file included.

        Cycle-safe: each file is visited once.
        """
        if start not in self._nodes:
            return [start]
        visited = {start}
        order: List[str] = []
        queue = deque([start])
        while queue:
            current = queue.popleft()
            order.append(current)
            node = self._nodes.get(current)
            if node is None:
                continue
            for importer in sorted(node.imported_by):
                if importer not in visited:
                    visited.add(importer)
                    queue.append(importer)
        return order

    def route_files_reaching(self, start: str) -> List[str]:
        """Route files reachable upward from `start` (itself included)."""
        out: List[str] = []
        for file in self.walk_importers(start):
            node = self._nodes.get(file)
            if node is not None and node.is_route_file:
                out.append(file)
        return out

    # -- stats / serialization ----------------------------------------------

    def stats(self) -> Dict[str, int]:
        """Return graph statistics."""
        return {
            "total_files": len(self._nodes),
            "route_files": sum(1 for n in self._nodes.values() if n.is_route_file),
            "entry_points": sum(1 for n in self._nodes.values() if n.is_entry_point),
            "import_edges": self._edge_count,
        }

    def to_records(self) -> List[dict]:
        return [self._nodes[f].to_dict() for f in sorted(self._nodes)]

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "ImportGraph":
        """Rebuild from persisted node dicts.

        Adjacency is rebuilt from `imports` alone so the result is symmetric
        even if the stored `importedBy` lists disagree.
        """
        graph = cls()
        for rec in records:
            node = graph.ensure_node(str(rec["file"]))
            node.is_route_file = bool(rec.get("isRouteFile"))
            node.is_entry_point = bool(rec.get("isEntryPoint"))
            for target in rec.get("imports") or []:
                graph.add_edge(node.file, str(target))
        return graph

    def check_symmetry(self) -> bool:
        for node in self._nodes.values():
            for target in node.imports:
                dst = self._nodes.get(target)
                if dst is None or node.file not in dst.imported_by:
                    return False
            for importer in node.imported_by:
                src = self._nodes.get(importer)
                if src is None or node.file not in src.imports:
                    return False
        return True
