"""NetworkX view of a passive tree snapshot."""

import networkx as nx

from ..snapshot import GraphSnapshot


def build_tree_graph(snapshot: GraphSnapshot) -> nx.Graph:
    """Build an undirected graph of the tree.

    Node attributes: x, y, size, orbit, orbit_index.
    Edge attributes: curved.
    Edges whose endpoints are missing from the snapshot are left out.

    Args:
        snapshot: The tree to convert.

    Returns:
        NetworkX Graph keyed by nodeMap key.
    """
    G = nx.Graph()

    for key, node in snapshot.nodes.items():
        G.add_node(
            key,
            x=node.x,
            y=node.y,
            size=node.size,
            orbit=node.orbit,
            orbit_index=node.orbit_index,
        )

    for edge in snapshot.edges:
        if edge.from_node not in G or edge.to_node not in G:
            continue
        G.add_edge(edge.from_node, edge.to_node, curved=edge.curved)

    return G


def nodes_per_orbit(snapshot: GraphSnapshot) -> dict[int, int]:
    """Count nodes on each orbit; nodes without an orbit are not counted."""
    counts: dict[int, int] = {}
    for node in snapshot.nodes.values():
        if node.orbit is None:
            continue
        if node.orbit not in counts:
            counts[node.orbit] = 0
        counts[node.orbit] += 1
    return counts


def selected_components(G: nx.Graph, selected: set[str]) -> list[set[str]]:
    """Connected groups of selected nodes, largest first."""
    subgraph = G.subgraph(n for n in selected if n in G)
    return sorted(nx.connected_components(subgraph), key=len, reverse=True)
