"""Route extraction strategies, one per routing convention."""

from __future__ import annotations

from typing import List

from ..core.models import Framework
from .base import RouteExtractor, convert_segment, join_route
from .declarative import INDEX_SUFFIX, RouteConfigExtractor
from .filesystem import AppRouterExtractor, PagesRouterExtractor, SvelteKitExtractor


def extractors_for(framework: Framework) -> List[RouteExtractor]:
    """Strategies to run on every file for a detected framework."""
    if framework == Framework.NEXTJS_APP:
        # Pages router may still be in use during an app/ migration
        return [AppRouterExtractor(), PagesRouterExtractor()]
    if framework == Framework.NEXTJS_PAGES:
        return [PagesRouterExtractor()]
    if framework == Framework.REACT_ROUTER:
        return [RouteConfigExtractor()]
    if framework == Framework.SVELTEKIT:
        return [SvelteKitExtractor()]
    return [RouteConfigExtractor(), AppRouterExtractor(), SvelteKitExtractor()]


__all__ = [
    "AppRouterExtractor",
    "INDEX_SUFFIX",
    "PagesRouterExtractor",
    "RouteConfigExtractor",
    "RouteExtractor",
    "SvelteKitExtractor",
    "convert_segment",
    "extractors_for",
    "join_route",
]
