"""File-system routing conventions (Next.js app/pages, SvelteKit)."""

from __future__ import annotations

import posixpath
from typing import List, Optional

from ..core.models import RouteEntry
from ..parser import TsParsed
from .base import RouteExtractor, split_stem, url_from_segments

_SCRIPT_EXTS = {".tsx", ".ts", ".jsx", ".js"}


def _strip_root(path: str, root: str) -> Optional[List[str]]:
    """Segments after a top-level (or `src/`-level) `root` directory."""
    parts = path.split("/")
    if len(parts) > 1 and parts[0] == root:
        return parts[1:]
    if len(parts) > 2 and parts[0] == "src" and parts[1] == root:
        return parts[2:]
    return None


class AppRouterExtractor(RouteExtractor):
    """Next.js App Router: `app/**/page.tsx` and `app/**/layout.tsx`."""

    name = "nextjs-app"

    def extract(self, path: str, parsed: Optional[TsParsed]) -> List[RouteEntry]:
        rest = _strip_root(path, "app")
        if not rest:
            return []
        stem, ext = split_stem(rest[-1])
        if ext not in _SCRIPT_EXTS or stem not in {"page", "layout"}:
            return []
        component = "Next.js Page" if stem == "page" else "Next.js Layout"
        return [RouteEntry(path=url_from_segments(rest[:-1]), component=component, file=path, line=1)]


class PagesRouterExtractor(RouteExtractor):
    """Next.js Pages Router: every module under `pages/` except `_*` and `api/`."""

    name = "nextjs-pages"

    def extract(self, path: str, parsed: Optional[TsParsed]) -> List[RouteEntry]:
        rest = _strip_root(path, "pages")
        if not rest or rest[0] == "api":
            return []
        stem, ext = split_stem(rest[-1])
        if ext not in _SCRIPT_EXTS or stem.startswith("_"):
            return []
        segments = rest[:-1] if stem == "index" else rest[:-1] + [stem]
        return [RouteEntry(path=url_from_segments(segments), component="Next.js Page", file=path, line=1)]


class SvelteKitExtractor(RouteExtractor):
    """SvelteKit: `src/routes/**/+page.svelte` and `+layout.svelte`."""

    name = "sveltekit"

    def extract(self, path: str, parsed: Optional[TsParsed]) -> List[RouteEntry]:
        rest = _strip_root(path, "routes")
        if not rest:
            return []
        base = posixpath.basename(path)
        if base not in {"+page.svelte", "+layout.svelte"}:
            return []
        component = "SvelteKit Page" if base == "+page.svelte" else "SvelteKit Layout"
        return [RouteEntry(path=url_from_segments(rest[:-1]), component=component, file=path, line=1)]
