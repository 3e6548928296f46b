"""Parser utilities.

Path normalization, single-file-component script extraction and workspace
root detection.
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional

# =============================================================================
# Path Utilities
# =============================================================================


def normalize_path(path: str) -> str:
    """Normalize path to posix style, collapsing `.` and `..` segments."""
    parts = path.replace("\\", "/").split("/")
    out: List[str] = []
    for part in parts:
        if not part or part == ".":
            continue
        if part == "..":
            if out:
                out.pop()
            continue
        out.append(part)
    return "/".join(out)


def escapes_root(path: str) -> bool:
    """True when a relative posix path climbs above its starting directory."""
    depth = 0
    for part in path.replace("\\", "/").split("/"):
        if not part or part == ".":
            continue
        if part == "..":
            depth -= 1
            if depth < 0:
                return True
        else:
            depth += 1
    return False


def to_project_path(root: Path, path: str | Path) -> Optional[str]:
    """Convert an absolute or root-relative path to a normalized project key."""
    p = Path(path)
    if p.is_absolute():
        try:
            p = p.relative_to(root)
        except ValueError:
            try:
                p = p.resolve().relative_to(root.resolve())
            except (OSError, ValueError):
                return None
    rel = str(p)
    if escapes_root(rel):
        return None
    return normalize_path(rel)


# =============================================================================
# Source Code Utilities
# =============================================================================

_SCRIPT_RE = re.compile(r"<script\b[^>]*>([\s\S]*?)</script\s*>", re.IGNORECASE)


def extract_script_block(src: str) -> str:
    """Return the `<script>` contents of a Svelte/Vue component.

    Multiple blocks (e.g. `<script context="module">` plus the instance
    script) are joined. Everything outside the blocks is replaced by
    newlines so line numbers still match the source file.
    """
    out: List[str] = []
    cursor = 0
    for match in _SCRIPT_RE.finditer(src):
        out.append("\n" * src.count("\n", cursor, match.start(1)))
        out.append(match.group(1))
        cursor = match.end(1)
    return "".join(out)


# =============================================================================
# Workspace Root Detection
# =============================================================================

_DEFAULT_MARKERS: tuple[str, ...] = (
    "package.json",
    ".git",
)


def find_workspace_root(start: str | Path, *, max_up: int = 30, markers: Iterable[str] = _DEFAULT_MARKERS) -> Path:
    """Find the most likely JS/TS project root for a given file or folder.

    Resolution order:
    1) If `ROUTEIMPACT_PROJECT_DIR` is set and `start` is inside it, use that.
    2) Walk upwards looking for `package.json` or `.git`.
    3) Fallback to the starting directory.
    """
    p = Path(start)
    if p.is_file():
        p = p.parent
    p = p.absolute()

    env_root = os.environ.get("ROUTEIMPACT_PROJECT_DIR")
    if env_root:
        env_path = Path(env_root).absolute()
        if env_path.exists() and _is_relative_to(p, env_path):
            return env_path

    return _find_workspace_root_cached(str(p), max_up=max_up, markers=tuple(markers))


@lru_cache(maxsize=256)
def _find_workspace_root_cached(path_str: str, *, max_up: int, markers: tuple[str, ...]) -> Path:
    start = Path(path_str)
    p = start
    for _ in range(max_up):
        if any((p / m).exists() for m in markers):
            return p
        if p.parent == p:
            break
        p = p.parent
    return start


def _is_relative_to(path: Path, base: Path) -> bool:
    try:
        path.relative_to(base)
        return True
    except ValueError:
        return False
