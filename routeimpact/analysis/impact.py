"""
Impact analysis for a pull request.

Answers: "Which routes does this set of changed files touch, and how?"
Each affected route lists the changed files that reach it, split into
route-file, component and style changes.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..core.analyzer import RouteAnalyzer
from ..core.models import ServingRoute
from ..parser.config import STYLE_EXTENSIONS

_GLOBAL_STYLE_HINTS = ("global", "app", "index", "main")


def is_style_file(path: str) -> bool:
    return posixpath.splitext(path)[1].lower() in STYLE_EXTENSIONS or ".module." in path


def is_global_style(path: str) -> bool:
    """Style sheets that apply app-wide (global.css, styles/…, assets/…)."""
    if not is_style_file(path):
        return False
    name = posixpath.basename(path).lower()
    if any(hint in name for hint in _GLOBAL_STYLE_HINTS):
        return True
    return "styles/" in path or "assets/" in path


@dataclass
class RouteImpact:
    route: str
    direct_changes: List[str] = field(default_factory=list)
    component_changes: List[str] = field(default_factory=list)
    style_changes: List[str] = field(default_factory=list)
    shared_components: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "route": self.route,
            "directChanges": list(self.direct_changes),
            "componentChanges": list(self.component_changes),
            "styleChanges": list(self.style_changes),
            "sharedComponents": list(self.shared_components),
        }


@dataclass
class RouteImpactTree:
    affected_routes: List[RouteImpact] = field(default_factory=list)
    shared_components: Dict[str, List[str]] = field(default_factory=dict)
    total_files_changed: int = 0
    total_routes_affected: int = 0
    component_routes: Dict[str, List[ServingRoute]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "affectedRoutes": [r.to_dict() for r in self.affected_routes],
            "sharedComponents": {k: list(v) for k, v in self.shared_components.items()},
            "totalFilesChanged": self.total_files_changed,
            "totalRoutesAffected": self.total_routes_affected,
            "componentRouteMapping": {k: [s.to_dict() for s in v] for k, v in self.component_routes.items()},
        }


def build_impact_tree(analyzer: RouteAnalyzer, changed_files: Sequence[str]) -> RouteImpactTree:
    """Group changed files by the routes they affect."""
    info = analyzer.get_route_info(changed_files)

    by_route: Dict[str, RouteImpact] = {}
    for file, result in info.items():
        for route in result.routes:
            impact = by_route.setdefault(route, RouteImpact(route=route))
            if result.is_route_definer:
                impact.direct_changes.append(file)
            elif is_style_file(file):
                impact.style_changes.append(file)
            else:
                impact.component_changes.append(file)

    # Global styles that no route imports still restyle every affected route
    for file, result in info.items():
        if result.routes or not is_global_style(file):
            continue
        for impact in by_route.values():
            if file not in impact.style_changes:
                impact.style_changes.append(file)

    component_to_routes: Dict[str, List[str]] = {}
    for impact in by_route.values():
        for component in impact.component_changes:
            component_to_routes.setdefault(component, []).append(impact.route)

    shared = {c: routes for c, routes in component_to_routes.items() if len(routes) > 1}
    for impact in by_route.values():
        impact.shared_components = [c for c in impact.component_changes if c in shared]

    component_routes: Dict[str, List[ServingRoute]] = {}
    for file in info:
        if is_style_file(file):
            continue
        serving = analyzer.find_routes_serving_component(file)
        if serving:
            component_routes[file] = serving

    affected = list(by_route.values())
    return RouteImpactTree(
        affected_routes=affected,
        shared_components=shared,
        total_files_changed=len(info),
        total_routes_affected=len(affected),
        component_routes=component_routes,
    )
