"""CLI for passive-tree."""

import argparse
import logging
import sys
from pathlib import Path

from .cache import FileStore, SnapshotCache
from .fetch import FetchFailure, FileFetcher, GraphQLFetcher
from .layout import Palette, write_svg
from .snapshot import selection_from_ids, validate_snapshot
from .view import SkillTreeView
from .visualize import generate_html, generate_summary

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "passive-tree"
DEFAULT_TIMEOUT = 60.0


def load_config(config_path: Path) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Dictionary of configuration values.
    """
    import yaml

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def parse_selected(value: str | list | None) -> list[int]:
    """Parse selected node ids from "1,2,3" or a YAML list."""
    if value is None:
        return []
    if isinstance(value, list):
        return [int(v) for v in value]
    return [int(v) for v in value.split(",") if v.strip()]


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments shared between subcommands."""
    parser.add_argument("--tree-version", dest="tree_version", help="Passive tree version to show")
    parser.add_argument("--league", help="League passed to the data source")
    parser.add_argument("--input", type=Path, help="Read the tree from a local JSON file")
    parser.add_argument("--endpoint", help="GraphQL endpoint to fetch the tree from")
    parser.add_argument("--cache-dir", type=Path, help=f"Snapshot cache directory (default: {DEFAULT_CACHE_DIR})")
    parser.add_argument("--no-cache", action="store_true", help="Do not read or write the snapshot cache")
    parser.add_argument("--selected", help="Comma-separated node ids to highlight")
    parser.add_argument("--highlight-color", help="Color of selected nodes and edges (default: red)")
    parser.add_argument("--default-color", help="Color of other nodes and edges (default: black)")
    parser.add_argument("--config", type=Path, help="Path to YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def resolve_common_args(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Resolve common arguments: load config, validate, and fill defaults."""
    if args.config:
        config = load_config(args.config)
        if not args.tree_version and "version" in config:
            args.tree_version = str(config["version"])
        if not args.league and "league" in config:
            args.league = config["league"]
        if not args.input and "input" in config:
            args.input = Path(config["input"])
        if not args.endpoint and "endpoint" in config:
            args.endpoint = config["endpoint"]
        if not args.cache_dir and "cache-dir" in config:
            args.cache_dir = Path(config["cache-dir"])
        if not args.selected and "selected" in config:
            args.selected = config["selected"]
        if not args.highlight_color and "highlight-color" in config:
            args.highlight_color = config["highlight-color"]
        if not args.default_color and "default-color" in config:
            args.default_color = config["default-color"]

    if not args.input and not args.endpoint:
        parser.error("one of --input or --endpoint is required")
    if not args.tree_version:
        if args.input:
            # A local file is its own version
            args.tree_version = args.input.stem
        else:
            parser.error("--tree-version is required with --endpoint")

    args.cache_dir = (args.cache_dir or DEFAULT_CACHE_DIR).expanduser()
    try:
        args.selected = parse_selected(args.selected)
    except ValueError:
        parser.error(f"--selected must be a comma-separated list of integers, got {args.selected!r}")

    palette = Palette()
    args.palette = Palette(
        highlight=args.highlight_color or palette.highlight,
        default=args.default_color or palette.default,
    )


class _NullStore:
    def get(self, key: str) -> None:
        return None

    def set(self, key: str, value: str) -> None:
        pass


def build_view(args: argparse.Namespace) -> SkillTreeView | None:
    """Create a view from args and wait for its snapshot.

    Returns:
        The loaded view, or None if no snapshot could be obtained.
    """
    if args.input:
        fetcher = FileFetcher(args.input)
    else:
        fetcher = GraphQLFetcher(args.endpoint)
    store = _NullStore() if args.no_cache else FileStore(args.cache_dir)

    view = SkillTreeView(
        fetcher,
        SnapshotCache(store),
        args.tree_version,
        league=args.league,
        selected=args.selected,
        palette=args.palette,
    )
    print(f"Loading passive tree {args.tree_version}...")
    view.mount()
    if not view.wait(DEFAULT_TIMEOUT):
        print(f"ERROR: Could not load passive tree {args.tree_version}", file=sys.stderr)
        return None

    snapshot = view.snapshot
    print(f"Loaded {len(snapshot.nodes)} nodes and {len(snapshot.edges)} edges")
    return view


def cmd_render(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Render the tree to SVG and optionally HTML."""
    resolve_common_args(args, parser)
    view = build_view(args)
    if view is None:
        return 1

    output = args.output.resolve()
    write_svg(output, view.render())
    print(f"Wrote {output}")

    if args.html:
        html_output = args.html.resolve()
        generate_html(view.snapshot, view.selected, html_output, args.palette)
        print(f"Wrote {html_output}")
    return 0


def cmd_summary(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Print statistics about the tree and selection."""
    resolve_common_args(args, parser)
    view = build_view(args)
    if view is None:
        return 1
    print()
    print(generate_summary(view.snapshot, selection_from_ids(args.selected)))
    return 0


def cmd_validate(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Check a local tree file for dangling edges and bad orbit data."""
    try:
        snapshot = FileFetcher(args.input).fetch_sync(args.input.stem)
    except FetchFailure as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    problems = validate_snapshot(snapshot)
    if not problems:
        print(f"{args.input}: OK ({len(snapshot.nodes)} nodes, {len(snapshot.edges)} edges)")
        return 0

    print(f"{args.input}: {len(problems)} problem(s)")
    for problem in problems:
        print(f"  {problem}")
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for passive-tree CLI."""
    parser = argparse.ArgumentParser(description="Render passive skill trees laid out on concentric orbits")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Render the tree to SVG")
    add_common_args(render_parser)
    render_parser.add_argument(
        "--output",
        type=Path,
        default=Path("passive_tree.svg"),
        help="SVG output path (default: passive_tree.svg)",
    )
    render_parser.add_argument("--html", type=Path, help="Also write an interactive HTML page")

    summary_parser = subparsers.add_parser("summary", help="Print tree and selection statistics")
    add_common_args(summary_parser)

    validate_parser = subparsers.add_parser("validate", help="Check a tree file for inconsistencies")
    validate_parser.add_argument("input", type=Path, help="Tree JSON file")
    validate_parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.command == "render":
        return cmd_render(args, render_parser)
    elif args.command == "summary":
        return cmd_summary(args, summary_parser)
    elif args.command == "validate":
        return cmd_validate(args, validate_parser)
    else:
        # No subcommand provided - show help
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
