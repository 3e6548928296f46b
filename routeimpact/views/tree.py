"""Route Impact Tree - markdown rendering for PR comments."""

from __future__ import annotations

import posixpath
from typing import Dict, List

from ..analysis.impact import RouteImpactTree
from ..core.models import RouteMatch

NO_ROUTES_MESSAGE = "✅ No routes affected by changes in this PR"


def _branch(is_last: bool) -> str:
    return "└── " if is_last else "├── "


def format_impact_tree(tree: RouteImpactTree) -> str:
    if not tree.affected_routes and not tree.component_routes:
        return NO_ROUTES_MESSAGE

    lines: List[str] = ["## 🌳 Route Impact Tree", ""]
    lines.append(f"📊 **{tree.total_files_changed}** files changed → **{tree.total_routes_affected}** routes affected")
    lines.append("")

    if tree.component_routes:
        lines.append("🎯 **Component Usage** (routes that serve these components):")
        for component, serving in tree.component_routes.items():
            lines.append(f"- `{posixpath.basename(component)}` served by:")
            for s in serving:
                lines.append(f"  - `{s.route_path}` in {posixpath.basename(s.route_file)}")
        lines.append("")

    if tree.shared_components:
        lines.append("⚠️ **Shared Components** (changes affect multiple routes):")
        for component, routes in tree.shared_components.items():
            affects = ", ".join(f"`{r}`" for r in routes)
            lines.append(f"- `{posixpath.basename(component)}` → affects {affects}")
        lines.append("")

    lines.append("```")
    lines.append("Route Tree:")
    for i, impact in enumerate(tree.affected_routes):
        is_last = i == len(tree.affected_routes) - 1
        lines.append(f"{_branch(is_last)}{impact.route}")
        child_prefix = "    " if is_last else "│   "

        files = [(f, "route file") for f in impact.direct_changes]
        for f in impact.component_changes:
            files.append((f, "shared component" if f in impact.shared_components else "component"))
        files.extend((f, "styles") for f in impact.style_changes)

        for j, (file, label) in enumerate(files):
            lines.append(f"{child_prefix}{_branch(j == len(files) - 1)}{posixpath.basename(file)} ({label})")
    lines.append("```")
    return "\n".join(lines)


def format_route_matches(results: Dict[str, List[RouteMatch]]) -> str:
    """Plain listing of `detect_routes` output, one changed file per block."""
    if not results:
        return "No files analyzed"
    lines: List[str] = []
    for file, matches in results.items():
        lines.append(file)
        if not matches:
            lines.append("  (no routes)")
            continue
        for m in matches:
            routes = ", ".join(m.routes) if m.routes else "-"
            lines.append(f"  {m.route_file}: {routes}")
    return "\n".join(lines)
