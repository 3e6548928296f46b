"""Text renderings of analysis results."""

from .tree import format_impact_tree, format_route_matches

__all__ = ["format_impact_tree", "format_route_matches"]
