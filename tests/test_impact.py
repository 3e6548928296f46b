from __future__ import annotations

import pytest

from routeimpact.analysis.impact import (
    RouteImpact,
    RouteImpactTree,
    build_impact_tree,
    is_global_style,
    is_style_file,
)
from routeimpact.core.analyzer import RouteAnalyzer
from routeimpact.core.models import RouteMatch, ServingRoute
from routeimpact.views.tree import NO_ROUTES_MESSAGE, format_impact_tree, format_route_matches

ALL_ROUTES = ["/", "/(index)", "/dashboard", "/settings"]


@pytest.fixture
def analyzer(react_project, memory_storage):
    a = RouteAnalyzer(react_project, storage=memory_storage)
    a.initialize()
    return a


@pytest.mark.parametrize(
    "path,style,global_",
    [
        ("src/styles/theme.scss", True, True),
        ("src/global.css", True, True),
        ("src/components/Button.module.css", True, False),
        ("src/components/Card.less", True, False),
        ("src/theme.sass", True, False),
        ("src/assets/fonts.css", True, True),
        ("src/App.tsx", False, False),
    ],
)
def test_style_classification(path, style, global_):
    assert is_style_file(path) is style
    assert is_global_style(path) is global_


# =============================================================================
# build_impact_tree
# =============================================================================


def test_shared_component_and_global_style(analyzer):
    tree = build_impact_tree(
        analyzer,
        ["src/components/Button.tsx", "src/styles/global.css", "src/components/Button.module.css"],
    )

    assert tree.total_files_changed == 3
    assert tree.total_routes_affected == 4
    assert [r.route for r in tree.affected_routes] == ALL_ROUTES
    for impact in tree.affected_routes:
        assert impact.component_changes == ["src/components/Button.tsx"]
        assert impact.shared_components == ["src/components/Button.tsx"]
        assert impact.style_changes == ["src/components/Button.module.css", "src/styles/global.css"]
        assert impact.direct_changes == []
    assert tree.shared_components == {"src/components/Button.tsx": ALL_ROUTES}
    assert tree.component_routes == {}


def test_route_definer_is_a_direct_change(analyzer):
    tree = build_impact_tree(analyzer, ["src/routes.tsx"])
    assert [r.direct_changes for r in tree.affected_routes] == [["src/routes.tsx"]] * 4
    assert tree.shared_components == {}


def test_component_usage_is_recorded(analyzer):
    tree = build_impact_tree(analyzer, ["src/pages/Settings.tsx"])

    assert [r.route for r in tree.affected_routes] == ["/settings"]
    assert tree.component_routes == {
        "src/pages/Settings.tsx": [
            ServingRoute(route_path="/settings", component="Settings", route_file="src/routes.tsx", line=15)
        ]
    }
    data = tree.to_dict()
    assert data["componentRouteMapping"]["src/pages/Settings.tsx"][0]["routePath"] == "/settings"
    assert data["affectedRoutes"][0]["componentChanges"] == ["src/pages/Settings.tsx"]


def test_unrouted_change_renders_no_routes(analyzer):
    tree = build_impact_tree(analyzer, ["src/pages/Home.test.tsx"])
    assert tree.affected_routes == []
    assert format_impact_tree(tree) == NO_ROUTES_MESSAGE


# =============================================================================
# Rendering
# =============================================================================


def test_format_impact_tree():
    button = "src/components/Button.tsx"
    tree = RouteImpactTree(
        affected_routes=[
            RouteImpact(
                route="/",
                direct_changes=["src/routes.tsx"],
                component_changes=[button],
                shared_components=[button],
            ),
            RouteImpact(
                route="/dashboard",
                component_changes=[button],
                style_changes=["src/styles/global.css"],
                shared_components=[button],
            ),
        ],
        shared_components={button: ["/", "/dashboard"]},
        total_files_changed=3,
        total_routes_affected=2,
    )

    assert format_impact_tree(tree) == "\n".join(
        [
            "## 🌳 Route Impact Tree",
            "",
            "📊 **3** files changed → **2** routes affected",
            "",
            "⚠️ **Shared Components** (changes affect multiple routes):",
            "- `Button.tsx` → affects `/`, `/dashboard`",
            "",
            "```",
            "Route Tree:",
            "├── /",
            "│   ├── routes.tsx (route file)",
            "│   └── Button.tsx (shared component)",
            "└── /dashboard",
            "    ├── Button.tsx (shared component)",
            "    └── global.css (styles)",
            "```",
        ]
    )


def test_format_impact_tree_component_usage():
    tree = RouteImpactTree(
        affected_routes=[RouteImpact(route="/settings", component_changes=["src/pages/Settings.tsx"])],
        total_files_changed=1,
        total_routes_affected=1,
        component_routes={
            "src/pages/Settings.tsx": [ServingRoute("/settings", "Settings", "src/routes.tsx", 15)],
        },
    )
    lines = format_impact_tree(tree).split("\n")

    assert lines[4:8] == [
        "🎯 **Component Usage** (routes that serve these components):",
        "- `Settings.tsx` served by:",
        "  - `/settings` in routes.tsx",
        "",
    ]
    assert lines[-3:] == ["└── /settings", "    └── Settings.tsx (component)", "```"]


def test_format_impact_tree_empty():
    assert format_impact_tree(RouteImpactTree()) == NO_ROUTES_MESSAGE


def test_format_route_matches():
    assert format_route_matches({}) == "No files analyzed"
    text = format_route_matches(
        {
            "src/components/Button.tsx": [RouteMatch("src/routes.tsx", ["/", "/dashboard"])],
            "src/main.tsx": [],
        }
    )
    assert text == "src/components/Button.tsx\n  src/routes.tsx: /, /dashboard\nsrc/main.tsx\n  (no routes)"
