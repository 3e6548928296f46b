from __future__ import annotations

import posixpath
from typing import List, Optional

from ..core.models import RouteEntry
from ..parser import TsParsed


class RouteExtractor:
    """One routing convention. Subclasses return the routes a file defines."""

    name = "base"

    def extract(self, path: str, parsed: Optional[TsParsed]) -> List[RouteEntry]:
        raise NotImplementedError


def convert_segment(segment: str) -> Optional[str]:
    """Rewrite one file-system route segment; None drops it from the URL.

    `(group)` and `@slot` vanish, `[...rest]`/`[[...rest]]` become `*`,
    `[id]` (and SvelteKit `[[id]]`, `[id=matcher]`) become `:id`.
    """
    if not segment:
        return None
    if segment.startswith("(") and segment.endswith(")"):
        return None
    if segment.startswith("@"):
        return None
    if segment.startswith("[") and segment.endswith("]"):
        inner = segment.strip("[]")
        if inner.startswith("..."):
            return "*"
        return ":" + inner.split("=", 1)[0]
    return segment


def url_from_segments(segments: List[str]) -> str:
    parts = [p for p in (convert_segment(s) for s in segments) if p]
    return "/" + "/".join(parts)


def split_stem(path: str) -> tuple[str, str]:
    """(`dir/name`, `.ext`) with the final extension removed."""
    return posixpath.splitext(path)


def join_route(parent: str, child: str) -> str:
    """Join route fragments with a single `/`."""
    if not parent:
        return child
    if not child:
        return parent
    return parent.rstrip("/") + "/" + child.lstrip("/")
