from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Framework(str, Enum):
    """Routing framework detected from the project manifest."""

    NEXTJS_APP = "nextjs-app"
    NEXTJS_PAGES = "nextjs-pages"
    REACT_ROUTER = "react-router"
    SVELTEKIT = "sveltekit"
    UNKNOWN = "unknown"


class RouteFileType(str, Enum):
    """How a changed file relates to the routes it affects."""

    ENTRY = "entry"
    PAGE = "page"
    LAYOUT = "layout"
    TEST = "test"
    COMPONENT = "component"


@dataclass(frozen=True)
class ImportRef:
    """One import site: the raw specifier and where it resolved to."""

    raw: str
    resolved: Optional[str] = None
    specifiers: tuple[str, ...] = ()  # "default" | "*" | imported names
    line: int = 0

    def to_dict(self) -> dict:
        return {
            "raw": self.raw,
            "resolved": self.resolved,
            "specifiers": list(self.specifiers),
            "line": self.line,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ImportRef":
        if isinstance(data, str):
            return cls(raw=data)
        return cls(
            raw=str(data.get("raw") or ""),
            resolved=data.get("resolved") or None,
            specifiers=tuple(data.get("specifiers") or ()),
            line=int(data.get("line") or 0),
        )


@dataclass(frozen=True)
class ImportBinding:
    """A local name bound by an import (`import X from`, `lazy(() => import())`)."""

    local: str
    source: str
    imported: str  # "default" | "*" | exported name


@dataclass(frozen=True)
class RouteEntry:
    """A single route definition found in a file."""

    path: str
    component: str = ""
    file: str = ""
    line: int = 0
    # Component identifiers referenced by the route element (wrappers included)
    references: tuple[str, ...] = ()
    # Inline `() => import("./Page")` specifiers used as the route component
    sources: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "component": self.component,
            "file": self.file,
            "line": self.line,
        }

    @classmethod
    def from_dict(cls, data: Any, *, file: str = "") -> "RouteEntry":
        if isinstance(data, str):
            return cls(path=data, file=file)
        return cls(
            path=str(data.get("path") or ""),
            component=str(data.get("component") or ""),
            file=str(data.get("file") or file),
            line=int(data.get("line") or 0),
        )


@dataclass
class FileRecord:
    """Parsed facts about one source file."""

    path: str
    imports: List[ImportRef] = field(default_factory=list)
    exports: List[str] = field(default_factory=list)
    routes: List[RouteEntry] = field(default_factory=list)
    hash: str = ""
    last_modified: float = 0.0

    @property
    def route_paths(self) -> List[str]:
        return [r.path for r in self.routes]

    @property
    def is_empty(self) -> bool:
        return not self.imports and not self.exports and not self.routes

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "imports": [i.to_dict() for i in self.imports],
            "exports": list(self.exports),
            "routes": [r.to_dict() for r in self.routes],
            "hash": self.hash,
            "lastModified": self.last_modified,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FileRecord":
        path = str(data["path"])
        return cls(
            path=path,
            imports=[ImportRef.from_dict(i) for i in data.get("imports") or []],
            exports=[str(e) for e in data.get("exports") or []],
            routes=[RouteEntry.from_dict(r, file=path) for r in data.get("routes") or []],
            hash=str(data.get("hash") or ""),
            last_modified=float(data.get("lastModified") or 0.0),
        )


@dataclass
class GraphNode:
    """Adjacency for one file. `imports`/`importedBy` are kept symmetric."""

    file: str
    imports: set[str] = field(default_factory=set)
    imported_by: set[str] = field(default_factory=set)
    is_route_file: bool = False
    is_entry_point: bool = False

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "importedBy": sorted(self.imported_by),
            "imports": sorted(self.imports),
            "isRouteFile": self.is_route_file,
            "isEntryPoint": self.is_entry_point,
        }


@dataclass(frozen=True)
class RouteMatch:
    """A route file reached from a changed file, with the routes it defines."""

    route_file: str
    routes: List[str]

    def to_dict(self) -> dict:
        return {"routeFile": self.route_file, "routes": list(self.routes)}


@dataclass(frozen=True)
class ImpactResult:
    """Per changed file: is it a route definer, what kind of file, which routes."""

    is_route_definer: bool
    route_file_type: RouteFileType
    routes: List[str]

    def to_dict(self) -> dict:
        return {
            "isRouteDefiner": self.is_route_definer,
            "routeFileType": self.route_file_type.value,
            "routes": list(self.routes),
        }


@dataclass(frozen=True)
class ServingRoute:
    """A route whose element renders a given component."""

    route_path: str
    component: str
    route_file: str
    line: int = 0

    def to_dict(self) -> dict:
        return {
            "routePath": self.route_path,
            "component": self.component,
            "routeFile": self.route_file,
            "line": self.line,
        }


__all__ = [
    "FileRecord",
    "Framework",
    "GraphNode",
    "ImpactResult",
    "ImportBinding",
    "ImportRef",
    "RouteEntry",
    "RouteFileType",
    "RouteMatch",
    "ServingRoute",
]
