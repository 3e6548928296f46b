"""Import specifier resolution.

Turns `(importing_file, raw_specifier)` into a project-relative path, or
None for external packages and anything that does not exist on disk.
"""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..parser.config import RESOLVE_EXTENSIONS
from ..parser.utils import escapes_root, normalize_path

logger = logging.getLogger(__name__)

# `./util.js` in an ESM TypeScript project usually means `./util.ts`
_JS_TO_TS = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
    ".mjs": (".mts",),
}


class ImportResolver:
    """Resolve import specifiers against a project root and alias table."""

    def __init__(self, root: Path, aliases: Optional[Dict[str, str]] = None, *, extensions: Iterable[str] = RESOLVE_EXTENSIONS):
        self.root = Path(root)
        # Longest prefix wins
        self.aliases = sorted((aliases or {}).items(), key=lambda kv: len(kv[0]), reverse=True)
        self.extensions = tuple(extensions)

    def resolve(self, importing_file: str, raw: str) -> Optional[str]:
        """Resolve `raw` as imported from `importing_file` (project-relative).

        Never raises.
        """
        if not raw:
            return None
        spec = raw.split("?", 1)[0].split("#", 1)[0]

        base = self._base_path(importing_file, spec)
        if base is None:
            return None
        for candidate in self._candidates(base):
            if self._is_file(candidate):
                return candidate
        logger.debug("Unresolved import %r from %s", raw, importing_file)
        return None

    def _base_path(self, importing_file: str, spec: str) -> Optional[str]:
        if spec.startswith("."):
            joined = posixpath.join(posixpath.dirname(importing_file), spec)
        elif spec.startswith("/"):
            joined = spec.lstrip("/")
        else:
            for prefix, target in self.aliases:
                if spec.startswith(prefix):
                    joined = target + spec[len(prefix):]
                    break
            else:
                return None
        if escapes_root(joined):
            return None
        return normalize_path(joined)

    def _candidates(self, base: str) -> List[str]:
        out = [base] if base else []
        out.extend(base + ext for ext in self.extensions)
        stem, ext = posixpath.splitext(base)
        out.extend(stem + alt for alt in _JS_TO_TS.get(ext, ()))
        prefix = f"{base}/" if base else ""
        out.extend(f"{prefix}index{ext}" for ext in self.extensions)
        return out

    def _is_file(self, rel: str) -> bool:
        try:
            return (self.root / rel).is_file()
        except OSError:
            return False
