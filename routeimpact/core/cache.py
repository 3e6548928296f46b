"""Per-file record cache.

Records are keyed by normalized project path and carry the content hash
they were built from, so a file only needs re-parsing when its bytes
change.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional

from .models import FileRecord

logger = logging.getLogger(__name__)


def content_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class SourceText:
    """Result of reading a file for analysis. `text` is None when unparsable."""

    text: Optional[str]
    hash: str
    last_modified: float


def read_source(path: Path, *, max_bytes: int) -> SourceText:
    """Read a source file, screening out missing, oversized and binary files.

    Never raises: all of those come back with `text=None` so the caller can
    store an empty record for the path.
    """
    try:
        stat = path.stat()
    except OSError:
        logger.debug("Missing file: %s", path)
        return SourceText(text=None, hash="", last_modified=0.0)

    if stat.st_size > max_bytes:
        logger.debug("Skipping oversized file (%d bytes): %s", stat.st_size, path)
        return SourceText(text=None, hash="", last_modified=stat.st_mtime)

    try:
        data = path.read_bytes()
    except OSError as exc:
        logger.debug("Unreadable file %s: %s", path, exc)
        return SourceText(text=None, hash="", last_modified=stat.st_mtime)

    digest = content_hash(data)
    if b"\0" in data:
        logger.debug("Skipping binary file: %s", path)
        return SourceText(text=None, hash=digest, last_modified=stat.st_mtime)
    return SourceText(text=data.decode("utf-8", errors="replace"), hash=digest, last_modified=stat.st_mtime)


class FileCache:
    """In-memory map of path -> FileRecord."""

    def __init__(self) -> None:
        self._records: Dict[str, FileRecord] = {}

    def get(self, path: str) -> Optional[FileRecord]:
        return self._records.get(path)

    def put(self, record: FileRecord) -> None:
        self._records[record.path] = record

    def remove(self, path: str) -> None:
        self._records.pop(path, None)

    def is_fresh(self, path: str, digest: str) -> bool:
        """True when a cached record exists and was built from `digest`."""
        record = self._records.get(path)
        return record is not None and bool(digest) and record.hash == digest

    def clear(self) -> None:
        self._records.clear()

    def paths(self) -> list[str]:
        return list(self._records)

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)
