"""Cross-run persistence of the import graph and file cache.

The document is plain JSON:

    {"version": "1.0", "timestamp": <ms>,
     "graph": [GraphNode.to_dict(), ...],
     "fileCache": [FileRecord.to_dict(), ...]}

Every storage failure is logged and swallowed; a failed load simply means
a full rebuild.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from ..storage import StorageProvider
from .cache import FileCache
from .graph import ImportGraph
from .models import FileRecord

logger = logging.getLogger(__name__)

PERSIST_VERSION = "1.0"
GRAPH_BLOB_NAME = "import-graph.json"


@dataclass
class PersistedGraph:
    graph: ImportGraph
    records: List[FileRecord]
    timestamp: int


def graph_cache_key(namespace: str, project_name: str) -> str:
    return f"{namespace.strip('/')}/{project_name}/{GRAPH_BLOB_NAME}"


def encode_graph(graph: ImportGraph, cache: FileCache) -> bytes:
    doc = {
        "version": PERSIST_VERSION,
        "timestamp": int(time.time() * 1000),
        "graph": graph.to_records(),
        "fileCache": [r.to_dict() for r in sorted(cache, key=lambda r: r.path)],
    }
    return json.dumps(doc, ensure_ascii=False).encode("utf-8")


def decode_graph(data: bytes) -> Optional[PersistedGraph]:
    """Parse a persisted document; None if corrupt or from another version."""
    try:
        doc = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        logger.warning("Discarding corrupt persisted graph: %s", exc)
        return None
    if not isinstance(doc, dict) or doc.get("version") != PERSIST_VERSION:
        logger.info("Discarding persisted graph with version %r", doc.get("version") if isinstance(doc, dict) else None)
        return None
    try:
        graph = ImportGraph.from_records(doc.get("graph") or [])
        records = [FileRecord.from_dict(r) for r in doc.get("fileCache") or []]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("Discarding malformed persisted graph: %s", exc)
        return None
    return PersistedGraph(graph=graph, records=records, timestamp=int(doc.get("timestamp") or 0))


class GraphStore:
    """Reads and writes the persisted graph through a storage provider."""

    def __init__(self, storage: StorageProvider, key: str):
        self.storage = storage
        self.key = key

    def save(self, graph: ImportGraph, cache: FileCache) -> bool:
        try:
            self.storage.upload_file(self.key, encode_graph(graph, cache), content_type="application/json")
        except Exception as exc:
            logger.warning("Failed to persist import graph to %s: %s", self.key, exc)
            return False
        logger.debug("Persisted import graph (%d files) to %s", len(graph), self.key)
        return True

    def load(self) -> Optional[PersistedGraph]:
        try:
            data = self.storage.download_file(self.key)
        except Exception as exc:
            logger.warning("Failed to load import graph from %s: %s", self.key, exc)
            return None
        if data is None:
            logger.debug("No persisted import graph at %s", self.key)
            return None
        return decode_graph(data)

    def delete(self) -> bool:
        try:
            self.storage.delete_file(self.key)
        except Exception as exc:
            logger.warning("Failed to delete persisted import graph %s: %s", self.key, exc)
            return False
        return True
