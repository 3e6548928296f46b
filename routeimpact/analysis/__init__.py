"""PR-level impact analysis built on top of the route analyzer."""

from .impact import RouteImpact, RouteImpactTree, build_impact_tree, is_global_style, is_style_file

__all__ = ["RouteImpact", "RouteImpactTree", "build_impact_tree", "is_global_style", "is_style_file"]
