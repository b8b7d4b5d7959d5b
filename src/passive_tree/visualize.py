"""Generate output files and summaries for a passive tree."""

from collections.abc import Set
from pathlib import Path

from .layout import (
    DEFAULT_PALETTE,
    Palette,
    build_tree_graph,
    derive_edge_attributes,
    derive_node_attributes,
    render_html,
    render_svg,
    write_svg,
)
from .layout.network import nodes_per_orbit, selected_components
from .snapshot import GraphSnapshot, validate_snapshot


def generate_svg(
    snapshot: GraphSnapshot,
    selected: Set[str],
    output_file: Path,
    palette: Palette = DEFAULT_PALETTE,
) -> None:
    """Write the tree as a standalone SVG document."""
    nodes = derive_node_attributes(snapshot, selected, palette)
    edges = derive_edge_attributes(snapshot, selected, palette)
    write_svg(output_file, render_svg(snapshot.bounds, nodes, edges))


def generate_html(
    snapshot: GraphSnapshot,
    selected: Set[str],
    output_file: Path,
    palette: Palette = DEFAULT_PALETTE,
) -> None:
    """Write the tree as an interactive pyvis page."""
    nodes = derive_node_attributes(snapshot, selected, palette)
    edges = derive_edge_attributes(snapshot, selected, palette)
    render_html(nodes, edges, output_file)


def generate_summary(snapshot: GraphSnapshot, selected: Set[str]) -> str:
    """Human-readable statistics for a snapshot and selection.

    Args:
        snapshot: The tree.
        selected: Hashes of highlighted nodes.

    Returns:
        Multi-line summary text.
    """
    G = build_tree_graph(snapshot)
    edges = derive_edge_attributes(snapshot, selected)
    curved = sum(1 for e in snapshot.edges if e.curved)
    highlighted_edges = sum(1 for e in edges if e.from_hash in selected and e.to_hash in selected)
    selected_present = [h for h in selected if h in snapshot.nodes]
    components = selected_components(G, set(selected_present))
    problems = validate_snapshot(snapshot)

    lines = [
        "=== PASSIVE TREE SUMMARY ===",
        f"Nodes: {len(snapshot.nodes)}",
        f"Edges: {len(snapshot.edges)} ({curved} curved, {len(snapshot.edges) - curved} straight)",
        f"Drawable edges: {len(edges)}",
        f"Bounds: {snapshot.bounds.width} x {snapshot.bounds.height}",
        "",
        "Nodes per orbit:",
    ]
    for orbit, count in sorted(nodes_per_orbit(snapshot).items()):
        radius = snapshot.orbit_radii[orbit] if orbit < len(snapshot.orbit_radii) else "?"
        lines.append(f"  orbit {orbit} (radius {radius}): {count}")

    lines.append("")
    lines.append(f"Selected nodes: {len(selected_present)} of {len(selected)} requested")
    lines.append(f"Highlighted edges: {highlighted_edges}")
    lines.append(f"Selected groups: {len(components)}")

    if problems:
        lines.append("")
        lines.append(f"Problems ({len(problems)}):")
        for problem in problems[:20]:
            lines.append(f"  {problem}")
        if len(problems) > 20:
            lines.append(f"  ... and {len(problems) - 20} more")

    return "\n".join(lines)
