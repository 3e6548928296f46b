"""Tests for the bidirectional import graph."""

from __future__ import annotations

from routeimpact.core.graph import ImportGraph


def _graph(*edges):
    g = ImportGraph()
    for a, b in edges:
        g.add_edge(a, b)
    return g


def test_add_edge_is_symmetric():
    g = _graph(("a.ts", "b.ts"))
    assert g.get("a.ts").imports == {"b.ts"}
    assert g.get("b.ts").imported_by == {"a.ts"}
    assert g.check_symmetry()


def test_duplicate_and_self_edges_are_ignored():
    g = ImportGraph()
    assert g.add_edge("a.ts", "b.ts") is True
    assert g.add_edge("a.ts", "b.ts") is False
    assert g.add_edge("a.ts", "a.ts") is False
    assert g.stats()["import_edges"] == 1


def test_remove_file_edges_drops_stale_importers():
    g = _graph(("a.ts", "b.ts"), ("a.ts", "c.ts"), ("d.ts", "b.ts"))
    g.remove_file_edges("a.ts")

    assert g.get("a.ts").imports == set()
    assert g.get("b.ts").imported_by == {"d.ts"}
    assert g.get("c.ts").imported_by == set()
    assert g.stats()["import_edges"] == 1
    assert g.check_symmetry()


def test_remove_file_drops_both_directions():
    g = _graph(("a.ts", "b.ts"), ("b.ts", "c.ts"))
    g.remove_file("b.ts")

    assert "b.ts" not in g
    assert g.get("a.ts").imports == set()
    assert g.get("c.ts").imported_by == set()
    assert g.stats()["import_edges"] == 0
    assert g.check_symmetry()


def test_walk_importers_is_cycle_safe():
    g = _graph(("a.ts", "b.ts"), ("b.ts", "a.ts"), ("c.ts", "a.ts"))
    assert g.walk_importers("b.ts") == ["b.ts", "a.ts", "c.ts"]


def test_walk_importers_unknown_file():
    assert ImportGraph().walk_importers("x.ts") == ["x.ts"]


def test_route_files_reaching():
    # routes.tsx -> Page.tsx -> Button.tsx ; App.tsx -> routes.tsx
    g = _graph(("routes.tsx", "Page.tsx"), ("Page.tsx", "Button.tsx"), ("App.tsx", "routes.tsx"))
    g.mark_route_file("routes.tsx")

    assert g.route_files_reaching("Button.tsx") == ["routes.tsx"]
    assert g.route_files_reaching("routes.tsx") == ["routes.tsx"]
    assert g.route_files_reaching("App.tsx") == []


def test_stats_counts_flags():
    g = _graph(("main.tsx", "routes.tsx"))
    g.mark_route_file("routes.tsx")
    g.mark_entry_point("main.tsx")
    assert g.stats() == {"total_files": 2, "route_files": 1, "entry_points": 1, "import_edges": 1}


def test_from_records_rebuilds_symmetric_adjacency():
    records = [
        {"file": "a.ts", "imports": ["b.ts"], "importedBy": [], "isRouteFile": True, "isEntryPoint": False},
        # importedBy lies: it should be rebuilt from imports
        {"file": "b.ts", "imports": [], "importedBy": ["zzz.ts"], "isRouteFile": False, "isEntryPoint": False},
    ]
    g = ImportGraph.from_records(records)

    assert g.get("b.ts").imported_by == {"a.ts"}
    assert "zzz.ts" not in g
    assert g.get("a.ts").is_route_file
    assert g.check_symmetry()


def test_to_records_uses_wire_keys():
    g = _graph(("a.ts", "b.ts"))
    rec = g.to_records()[0]
    assert rec == {"file": "a.ts", "importedBy": [], "imports": ["b.ts"], "isRouteFile": False, "isEntryPoint": False}
