#!/usr/bin/env python3
"""
routeimpact CLI - which routes does a change touch?

Usage:
    routeimpact analyze <file>...      Route impact tree for changed files
    routeimpact routes <file>...       Route files reached by each changed file
    routeimpact serving <file>         Routes whose element renders a component
    routeimpact metrics                Import graph statistics
    routeimpact clear                  Drop the cached import graph
"""

import argparse
import json
import logging
import sys
from pathlib import Path


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--root", "-r", help="Project root (default: nearest package.json/.git above cwd)")
    parser.add_argument("--rebuild", action="store_true", help="Ignore the persisted graph and rescan")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--quiet", "-q", action="store_true", help="Errors only")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="routeimpact",
        description="Route impact analysis for JS/TS applications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    routeimpact analyze src/components/Button.tsx src/styles/global.css
    routeimpact routes --json src/pages/Home.tsx
    routeimpact serving src/pages/Dashboard.tsx
    routeimpact metrics --root ./web
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    analyze_parser = subparsers.add_parser("analyze", help="Route impact tree for changed files")
    analyze_parser.add_argument("files", nargs="+", help="Changed files (project-relative or absolute)")
    analyze_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    _add_common(analyze_parser)

    routes_parser = subparsers.add_parser("routes", help="Route files reached by each changed file")
    routes_parser.add_argument("files", nargs="+", help="Changed files")
    routes_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    _add_common(routes_parser)

    serving_parser = subparsers.add_parser("serving", help="Routes that render a component")
    serving_parser.add_argument("file", help="Component file")
    serving_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    _add_common(serving_parser)

    metrics_parser = subparsers.add_parser("metrics", help="Import graph statistics")
    metrics_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    _add_common(metrics_parser)

    clear_parser = subparsers.add_parser("clear", help="Drop the cached import graph")
    _add_common(clear_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    level = logging.DEBUG if args.verbose else logging.ERROR if args.quiet else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    # Import here to avoid slow startup for --help
    from .core.analyzer import RouteAnalyzer
    from .errors import RouteImpactError
    from .parser.utils import find_workspace_root

    root = Path(args.root).absolute() if args.root else find_workspace_root(Path.cwd())
    try:
        analyzer = RouteAnalyzer(root)
        if args.command == "clear":
            return cmd_clear(analyzer, args)
        analyzer.initialize(force_rebuild=args.rebuild)

        if args.command == "analyze":
            return cmd_analyze(analyzer, args)
        elif args.command == "routes":
            return cmd_routes(analyzer, args)
        elif args.command == "serving":
            return cmd_serving(analyzer, args)
        elif args.command == "metrics":
            return cmd_metrics(analyzer, args)
    except RouteImpactError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def cmd_analyze(analyzer, args):
    """Handle analyze command."""
    from .analysis.impact import build_impact_tree
    from .views.tree import format_impact_tree

    tree = build_impact_tree(analyzer, args.files)
    if args.json:
        print(json.dumps(tree.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_impact_tree(tree))
    return 0


def cmd_routes(analyzer, args):
    """Handle routes command."""
    from .views.tree import format_route_matches

    results = analyzer.detect_routes(args.files)
    if args.json:
        payload = {file: [m.to_dict() for m in matches] for file, matches in results.items()}
        print(json.dumps(payload, indent=2))
    else:
        print(format_route_matches(results))
    return 0


def cmd_serving(analyzer, args):
    """Handle serving command."""
    serving = analyzer.find_routes_serving_component(args.file)
    if args.json:
        print(json.dumps([s.to_dict() for s in serving], indent=2))
        return 0

    if not serving:
        print(f"No routes serve: {args.file}")
        return 0

    print(f"# Routes serving `{args.file}` ({len(serving)})")
    print("")
    for s in serving:
        print(f"- `{s.route_path}` via `{s.component}` ({s.route_file}:{s.line})")
    return 0


def cmd_metrics(analyzer, args):
    """Handle metrics command."""
    metrics = analyzer.get_metrics()
    if args.json:
        print(json.dumps({"framework": analyzer.framework.value, **metrics}, indent=2))
        return 0

    print("# Route Impact Statistics")
    print("")
    print(f"- **Framework:** {analyzer.framework.value}")
    print(f"- **Files:** {metrics['total_files']}")
    print(f"- **Route Files:** {metrics['route_files']}")
    print(f"- **Entry Points:** {metrics['entry_points']}")
    print(f"- **Import Edges:** {metrics['import_edges']}")
    print(f"- **Cached Records:** {metrics['cache_size']}")
    return 0


def cmd_clear(analyzer, args):
    """Handle clear command."""
    analyzer.clear_cache()
    print(f"Cleared cached import graph for {analyzer.root}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
