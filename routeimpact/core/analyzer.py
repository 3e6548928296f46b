"""Route impact analyzer.

Owns the import graph and file cache for one project and answers, for a
set of changed files, which route files (and routes) sit above them in the
import graph.

State: `RouteAnalyzer(...)` starts uninitialized; `initialize()` detects
the framework and loads or builds the graph; `clear_cache()` returns it to
the uninitialized state. Query methods initialize lazily.
"""

from __future__ import annotations

import logging
import os
import posixpath
import time
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import AnalyzerConfig, load_config
from ..parser import TsParsed, parse_source
from ..parser.typescript import extract_exports, extract_import_bindings, extract_imports
from ..parser.utils import to_project_path
from ..routes import extractors_for
from ..storage import LocalStorage, StorageProvider
from .cache import FileCache, read_source
from .framework import detect_framework
from .graph import ImportGraph
from .models import (
    FileRecord,
    Framework,
    ImpactResult,
    ImportBinding,
    RouteEntry,
    RouteFileType,
    RouteMatch,
    ServingRoute,
)
from .persistence import GraphStore, graph_cache_key
from .resolver import ImportResolver

logger = logging.getLogger(__name__)

_ENTRY_STEMS = {"index", "main", "app", "_app", "root"}
_LAYOUT_STEMS = {"layout", "+layout", "_layout", "template"}


def is_test_file(path: str) -> bool:
    name = posixpath.basename(path).lower()
    if ".test." in name or ".spec." in name:
        return True
    return "__tests__" in path.split("/")


def filter_complete_routes(routes: Iterable[str]) -> List[str]:
    """Drop route fragments that only appear as the tail of a fuller route.

    `["parent/child", "child", "parent"]` -> `["parent", "parent/child"]`.
    """
    unique = {r for r in routes if r}
    keep = [
        r
        for r in unique
        if not any(o != r and (o.endswith("/" + r) or f"/{r}/" in o) for o in unique)
    ]
    return sorted(keep)


class RouteAnalyzer:
    """Incremental import-graph analyzer for one project root."""

    def __init__(
        self,
        root_path: str | Path,
        storage: Optional[StorageProvider] = None,
        config: Optional[AnalyzerConfig] = None,
    ):
        self.root = Path(root_path).absolute()
        self.config = config or load_config(self.root)
        self.storage = storage if storage is not None else LocalStorage(self._artifact_dir())
        self.framework = Framework.UNKNOWN
        self.graph = ImportGraph()
        self.cache = FileCache()
        self.resolver = ImportResolver(self.root, self.config.aliases)
        self.initialized = False
        self.loaded_from_storage = False

        self._extractors = extractors_for(self.framework)
        self._store = GraphStore(self.storage, graph_cache_key(self.config.cache_namespace, self.root.name))
        self._route_cache: Dict[str, List[str]] = {}
        self._serving_cache: Dict[str, List[ServingRoute]] = {}

    def _artifact_dir(self) -> Path:
        p = Path(self.config.artifact_dir)
        return p if p.is_absolute() else self.root / p

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def initialize(self, force_rebuild: bool = False) -> None:
        """Detect the framework, then load the persisted graph or scan the project."""
        start = time.perf_counter()
        self.framework = detect_framework(self.root)
        self._extractors = extractors_for(self.framework)
        logger.info("Detected framework: %s", self.framework.value)

        self.loaded_from_storage = False
        if not force_rebuild and self._load_persisted():
            self.loaded_from_storage = True
            if self._refresh_stale():
                self._store.save(self.graph, self.cache)
        else:
            self._full_scan()
            self._store.save(self.graph, self.cache)

        self.initialized = True
        stats = self.graph.stats()
        logger.info(
            "Import graph ready (%s): %d files, %d route files, %d edges in %.2fs",
            "loaded" if self.loaded_from_storage else "built",
            stats["total_files"],
            stats["route_files"],
            stats["import_edges"],
            time.perf_counter() - start,
        )

    def _ensure_initialized(self) -> None:
        if not self.initialized:
            self.initialize()

    def clear_cache(self) -> None:
        """Empty every in-memory store and delete the persisted graph. Never raises."""
        self.cache.clear()
        self.graph.clear()
        self._route_cache.clear()
        self._serving_cache.clear()
        self._store.delete()
        self.initialized = False
        self.loaded_from_storage = False

    # =========================================================================
    # Scanning
    # =========================================================================

    def _scan_files(self) -> List[str]:
        skipped = self.config.skipped_dirs()
        exts = {e.lower() for e in self.config.source_extensions}
        out: List[str] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if d not in skipped)
            for name in filenames:
                if os.path.splitext(name)[1].lower() not in exts:
                    continue
                rel = os.path.relpath(os.path.join(dirpath, name), self.root)
                out.append(Path(rel).as_posix())
        return sorted(out)

    def _parse_record(self, path: str, text: str, digest: str, mtime: float) -> FileRecord:
        try:
            parsed = parse_source(text, file_path=path)
        except Exception as exc:
            logger.debug("Parse failed for %s: %s", path, exc)
            parsed = None
        if parsed is None:
            return FileRecord(path=path, hash=digest, last_modified=mtime)

        imports = [replace(ref, resolved=self.resolver.resolve(path, ref.raw)) for ref in extract_imports(parsed.src, parsed.root)]
        exports = extract_exports(parsed.src, parsed.root)
        routes: List[RouteEntry] = []
        for extractor in self._extractors:
            routes.extend(extractor.extract(path, parsed))
        return FileRecord(path=path, imports=imports, exports=exports, routes=routes, hash=digest, last_modified=mtime)

    def _process_file(self, path: str) -> Tuple[FileRecord, bool]:
        """Read and (re)parse a file unless its content hash is unchanged.

        Returns the current record and whether it differs from the cached one.
        Missing, oversized and binary files produce an empty record.
        """
        src = read_source(self.root / path, max_bytes=self.config.max_file_bytes)
        cached = self.cache.get(path)
        if cached is not None and self.cache.is_fresh(path, src.hash):
            cached.last_modified = src.last_modified
            return cached, False

        if src.text is None:
            record = FileRecord(path=path, hash=src.hash, last_modified=src.last_modified)
        else:
            record = self._parse_record(path, src.text, src.hash, src.last_modified)
        self.cache.put(record)
        return record, True

    def _apply_record(self, record: FileRecord) -> None:
        self.graph.remove_file_edges(record.path)
        self.graph.ensure_node(record.path)
        for ref in record.imports:
            if ref.resolved and ref.resolved != record.path:
                self.graph.add_edge(record.path, ref.resolved)
        self.graph.mark_route_file(record.path, bool(record.routes))

    def _identify_entry_points(self) -> None:
        for node in self.graph:
            stem = posixpath.basename(node.file).split(".", 1)[0].lower()
            node.is_entry_point = (
                not node.imported_by and stem in _ENTRY_STEMS and not is_test_file(node.file)
            )

    def _full_scan(self) -> None:
        self.graph.clear()
        self.cache.clear()
        self._clear_memos()
        for path in self._scan_files():
            record, _ = self._process_file(path)
            self._apply_record(record)
        self._identify_entry_points()

    # =========================================================================
    # Persistence
    # =========================================================================

    def _load_persisted(self) -> bool:
        persisted = self._store.load()
        if persisted is None:
            return False
        self.graph = persisted.graph
        self.cache.clear()
        for record in persisted.records:
            self.cache.put(record)
        self._clear_memos()
        logger.info("Loaded persisted import graph: %d files", len(self.graph))
        return True

    def _refresh_stale(self) -> bool:
        """Bring a loaded graph up to date with the working tree."""
        current = self._scan_files()
        current_set = set(current)
        changed = False

        for path in self.cache.paths():
            if path not in current_set:
                self.graph.remove_file(path)
                self.cache.remove(path)
                changed = True

        for path in current:
            cached = self.cache.get(path)
            if cached is not None:
                try:
                    mtime = (self.root / path).stat().st_mtime
                except OSError:
                    continue
                if mtime <= cached.last_modified:
                    continue
            record, differs = self._process_file(path)
            if differs:
                self._apply_record(record)
            changed = True

        if changed:
            self._identify_entry_points()
            self._clear_memos()
            logger.info("Refreshed persisted import graph against working tree")
        return changed

    # =========================================================================
    # Updates
    # =========================================================================

    def _clear_memos(self) -> None:
        self._route_cache.clear()
        self._serving_cache.clear()

    def _normalize(self, files: Iterable[str]) -> List[str]:
        out: List[str] = []
        for f in files:
            if not f:
                continue
            rel = to_project_path(self.root, f)
            if rel is None:
                logger.debug("Ignoring path outside project: %s", f)
                continue
            if rel not in out:
                out.append(rel)
        return out

    def update_graph_for_files(self, files: Sequence[str]) -> List[str]:
        """Re-read the given files and rewire their outgoing edges.

        Returns the project paths whose records changed.
        """
        self._ensure_initialized()
        changed: List[str] = []
        for path in self._normalize(files):
            record, differs = self._process_file(path)
            if differs or path not in self.graph:
                self._apply_record(record)
                changed.append(path)
        if changed:
            self._identify_entry_points()
            self._clear_memos()
            self._store.save(self.graph, self.cache)
        return changed

    # =========================================================================
    # Queries
    # =========================================================================

    def _routes_of(self, route_file: str) -> List[str]:
        record = self.cache.get(route_file)
        return record.route_paths if record is not None else []

    def detect_routes(self, changed_files: Sequence[str]) -> Dict[str, List[RouteMatch]]:
        """Map each changed file to the route files reached through its importers.

        A file that reaches no route file maps to an empty list.
        """
        if not changed_files:
            return {}
        self._ensure_initialized()
        paths = self._normalize(changed_files)
        self.update_graph_for_files(paths)

        results: Dict[str, List[RouteMatch]] = {}
        for path in paths:
            results[path] = [RouteMatch(route_file=rf, routes=self._routes_of(rf)) for rf in self.graph.route_files_reaching(path)]

        total = sum(len(m.routes) for matches in results.values() for m in matches)
        logger.info("Route impact: %d routes across %d changed files", total, len(results))
        return results

    def classify_route_file(self, path: str) -> RouteFileType:
        if is_test_file(path):
            return RouteFileType.TEST
        node = self.graph.get(path)
        if node is not None and node.is_entry_point:
            return RouteFileType.ENTRY
        stem = posixpath.splitext(posixpath.basename(path))[0].lower()
        record = self.cache.get(path)
        if record is not None and record.routes and stem not in _LAYOUT_STEMS:
            return RouteFileType.PAGE
        if stem in _LAYOUT_STEMS or "layout" in stem:
            return RouteFileType.LAYOUT
        return RouteFileType.COMPONENT

    def _affected_routes(self, path: str) -> List[str]:
        memo = self._route_cache.get(path)
        if memo is not None:
            return memo
        routes: List[str] = []
        for rf in self.graph.route_files_reaching(path):
            routes.extend(self._routes_of(rf))
        serving = self.find_routes_serving_component(path)
        if serving:
            routes = [s.route_path for s in serving]
        result = filter_complete_routes(routes)
        self._route_cache[path] = result
        return result

    def get_route_info(self, changed_files: Sequence[str]) -> Dict[str, ImpactResult]:
        """Per changed file: route-definer flag, file classification and affected routes."""
        if not changed_files:
            return {}
        self._ensure_initialized()
        paths = self._normalize(changed_files)
        self.update_graph_for_files(paths)

        results: Dict[str, ImpactResult] = {}
        for path in paths:
            node = self.graph.get(path)
            results[path] = ImpactResult(
                is_route_definer=bool(node is not None and node.is_route_file),
                route_file_type=self.classify_route_file(path),
                routes=self._affected_routes(path),
            )
        return results

    def find_routes_serving_component(self, component_file: str) -> List[ServingRoute]:
        """Routes whose element/component resolves to `component_file`.

        Walks up to the reachable route files and re-reads their route
        definitions together with the file's import bindings. Returns [] on
        empty input or any failure.
        """
        if not component_file:
            return []
        try:
            self._ensure_initialized()
            paths = self._normalize([component_file])
            if not paths:
                return []
            path = paths[0]
            memo = self._serving_cache.get(path)
            if memo is not None:
                return list(memo)
            out = self._serving_routes(path)
        except Exception as exc:
            logger.debug("Component route lookup failed for %s: %s", component_file, exc)
            return []
        self._serving_cache[path] = out
        return list(out)

    def _serving_routes(self, path: str) -> List[ServingRoute]:
        record = self.cache.get(path)
        exports = set(record.exports) if record is not None else set()
        stem = _component_stem(path)

        out: List[ServingRoute] = []
        seen: set[Tuple[str, str]] = set()
        for rf in self.graph.route_files_reaching(path):
            parsed = self._parse_route_file(rf)
            if parsed is None:
                continue
            bindings = extract_import_bindings(parsed.src, parsed.root)
            for entry in self._route_entries(rf, parsed):
                component = self._entry_serves(rf, entry, path, bindings, exports, stem)
                if component is None or (rf, entry.path) in seen:
                    continue
                seen.add((rf, entry.path))
                out.append(ServingRoute(route_path=entry.path, component=component, route_file=rf, line=entry.line))
        return out

    def _parse_route_file(self, route_file: str) -> Optional[TsParsed]:
        src = read_source(self.root / route_file, max_bytes=self.config.max_file_bytes)
        if src.text is None:
            return None
        return parse_source(src.text, file_path=route_file)

    def _route_entries(self, route_file: str, parsed: TsParsed) -> List[RouteEntry]:
        entries: List[RouteEntry] = []
        for extractor in self._extractors:
            entries.extend(extractor.extract(route_file, parsed))
        return entries

    def _entry_serves(
        self,
        route_file: str,
        entry: RouteEntry,
        path: str,
        bindings: Dict[str, ImportBinding],
        exports: set[str],
        stem: str,
    ) -> Optional[str]:
        """Component name through which `entry` renders `path`, else None."""
        if not entry.references and not entry.sources:
            # File-system route: the route file is the component
            return (entry.component or stem) if route_file == path else None
        for ref in entry.references:
            binding = bindings.get(ref.split(".", 1)[0])
            if binding is not None and self._binding_serves(route_file, binding, path, exports, stem):
                return ref
        for raw in entry.sources:
            if self.resolver.resolve(route_file, raw) == path:
                return entry.component or stem
        return None

    def _binding_serves(self, route_file: str, binding: ImportBinding, path: str, exports: set[str], stem: str) -> bool:
        resolved = self.resolver.resolve(route_file, binding.source)
        if resolved is None:
            return False
        if resolved == path:
            return True
        # One level of barrel re-export (`export { Page } from "./Page"`)
        barrel = self.cache.get(resolved)
        if barrel is None:
            return False
        for ref in barrel.imports:
            if ref.resolved != path:
                continue
            if binding.imported == stem:
                return True
            if binding.imported != "default" and binding.imported in ref.specifiers:
                return True
            if "*" in ref.specifiers and binding.imported in exports:
                return True
        return False

    # =========================================================================
    # Metrics
    # =========================================================================

    def get_metrics(self) -> Dict[str, int]:
        """Counts from in-memory state (no rescan)."""
        stats = self.graph.stats()
        return {
            "total_files": stats["total_files"],
            "route_files": stats["route_files"],
            "entry_points": stats["entry_points"],
            "import_edges": stats["import_edges"],
            "cache_size": len(self.cache),
        }


def _component_stem(path: str) -> str:
    stem = posixpath.splitext(posixpath.basename(path))[0]
    if stem == "index":
        parent = posixpath.basename(posixpath.dirname(path))
        return parent or stem
    return stem
