"""
routeimpact: which routes does a change touch?

Main interface: RouteAnalyzer
"""

__version__ = "0.1.0"

from .analysis.impact import RouteImpactTree, build_impact_tree
from .config import AnalyzerConfig, load_config
from .core.analyzer import RouteAnalyzer, filter_complete_routes
from .storage import LocalStorage, StorageProvider
from .views.tree import format_impact_tree

__all__ = [
    "AnalyzerConfig",
    "LocalStorage",
    "RouteAnalyzer",
    "RouteImpactTree",
    "StorageProvider",
    "build_impact_tree",
    "filter_complete_routes",
    "format_impact_tree",
    "load_config",
]
