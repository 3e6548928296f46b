"""Storage collaborators for the persisted import graph.

`StorageProvider` is the interface the analyzer consumes. `LocalStorage`
keeps blobs under a directory on disk and is used when no other provider
is configured.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable

from .errors import StorageError
from .parser.utils import escapes_root, normalize_path


@runtime_checkable
class StorageProvider(Protocol):
    def upload_file(self, path: str, data: bytes, *, content_type: str = "application/octet-stream") -> None: ...

    def download_file(self, path: str) -> Optional[bytes]: ...

    def list_files(self, prefix: str) -> List[str]: ...

    def delete_file(self, path: str) -> None: ...


class LocalStorage:
    """Blob storage in a local directory (`<project>/.routeimpact` by default)."""

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def _path_for(self, key: str) -> Path:
        if escapes_root(key):
            raise StorageError(f"Storage key escapes base directory: {key}", path=key)
        rel = normalize_path(key)
        if not rel:
            raise StorageError("Empty storage key", path=key)
        return self.base_dir / rel

    def upload_file(self, path: str, data: bytes, *, content_type: str = "application/octet-stream") -> None:
        target = self._path_for(path)
        tmp = target.with_name(target.name + ".tmp")
        try:
            tmp.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            tmp.replace(target)
        except OSError as exc:
            raise StorageError(f"Failed to write {path}: {exc}", path=path) from exc

    def download_file(self, path: str) -> Optional[bytes]:
        target = self._path_for(path)
        try:
            return target.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"Failed to read {path}: {exc}", path=path) from exc

    def list_files(self, prefix: str) -> List[str]:
        if not self.base_dir.is_dir():
            return []
        out: List[str] = []
        for p in sorted(self.base_dir.rglob("*")):
            if not p.is_file() or p.name.endswith(".tmp"):
                continue
            key = p.relative_to(self.base_dir).as_posix()
            if key.startswith(prefix):
                out.append(key)
        return out

    def delete_file(self, path: str) -> None:
        target = self._path_for(path)
        try:
            target.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StorageError(f"Failed to delete {path}: {exc}", path=path) from exc
