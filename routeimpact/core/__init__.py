"""Core domain types and algorithms."""

from .cache import FileCache, read_source
from .graph import ImportGraph
from .models import (
    FileRecord,
    Framework,
    GraphNode,
    ImpactResult,
    ImportBinding,
    ImportRef,
    RouteEntry,
    RouteFileType,
    RouteMatch,
    ServingRoute,
)

__all__ = [
    # models
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
    # structures
    "FileCache",
    "ImportGraph",
    "read_source",
]
