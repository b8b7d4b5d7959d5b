"""Derive render-ready node and edge attributes from a snapshot and a selection."""

import logging
from collections.abc import Set
from dataclasses import dataclass

from ..snapshot import (
    DanglingReferenceError,
    GraphSnapshot,
    OrbitDataError,
    TreeDataError,
    TreeEdge,
)
from .geometry import sweep_direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Palette:
    """Colors for highlighted (selected) and default nodes and edges."""

    highlight: str = "red"
    default: str = "black"

    def pick(self, highlighted: bool) -> str:
        return self.highlight if highlighted else self.default


DEFAULT_PALETTE = Palette()


@dataclass(frozen=True)
class NodeAttributes:
    """Everything needed to draw one node."""

    x: float
    y: float
    radius: float
    fill: str
    hash: str
    tooltip: str


@dataclass(frozen=True)
class EdgeAttributes:
    """Everything needed to draw one edge.

    Orbit fields are None for straight edges whose from-node has no usable
    orbit data.
    """

    from_x: float
    from_y: float
    to_x: float
    to_y: float
    radius: float | None
    from_index: int | None
    to_index: int | None
    skills_in_orbit: int | None
    sweep: int
    stroke: str
    from_hash: str
    to_hash: str
    curved: bool


def derive_node_attributes(
    snapshot: GraphSnapshot | None,
    selected: Set[str],
    palette: Palette = DEFAULT_PALETTE,
) -> list[NodeAttributes]:
    """Build one attribute bundle per node, in snapshot order.

    Args:
        snapshot: The tree, or None if nothing is loaded yet.
        selected: Hashes of highlighted nodes.
        palette: Fill colors.

    Returns:
        Node attribute bundles.
    """
    if snapshot is None:
        return []
    return [
        NodeAttributes(
            x=node.x,
            y=node.y,
            radius=node.size,
            fill=palette.pick(node.hash in selected),
            hash=node.hash,
            tooltip="\n".join(node.stats),
        )
        for node in snapshot.nodes.values()
    ]


def resolve_edge(
    snapshot: GraphSnapshot,
    edge: TreeEdge,
    selected: Set[str],
    palette: Palette = DEFAULT_PALETTE,
) -> EdgeAttributes:
    """Build the attribute bundle for a single edge.

    Radius and slot count come from the from-node's orbit; both endpoints of a
    curved edge are taken to share that orbit.

    Raises:
        DanglingReferenceError: If either endpoint is missing from the snapshot.
        OrbitDataError: If the edge is curved and its endpoints lack orbit data.
    """
    from_node = snapshot.nodes.get(edge.from_node)
    if from_node is None:
        raise DanglingReferenceError(edge, edge.from_node)
    to_node = snapshot.nodes.get(edge.to_node)
    if to_node is None:
        raise DanglingReferenceError(edge, edge.to_node)

    radius = skills_in_orbit = None
    sweep = 1
    try:
        radius = snapshot.orbit_radius(from_node.orbit)
        skills_in_orbit = snapshot.skills_in_orbit(from_node.orbit)
        if from_node.orbit_index is None or to_node.orbit_index is None:
            raise OrbitDataError(f"Edge {edge.from_node} -> {edge.to_node} has an endpoint without orbit index")
        sweep = sweep_direction(from_node.orbit_index, to_node.orbit_index, skills_in_orbit)
    except (OrbitDataError, ValueError) as e:
        if edge.curved:
            raise OrbitDataError(f"Curved edge {edge.from_node} -> {edge.to_node}: {e}") from e
        radius = skills_in_orbit = None

    highlighted = from_node.hash in selected and to_node.hash in selected
    return EdgeAttributes(
        from_x=from_node.x,
        from_y=from_node.y,
        to_x=to_node.x,
        to_y=to_node.y,
        radius=radius,
        from_index=from_node.orbit_index,
        to_index=to_node.orbit_index,
        skills_in_orbit=skills_in_orbit,
        sweep=sweep,
        stroke=palette.pick(highlighted),
        from_hash=from_node.hash,
        to_hash=to_node.hash,
        curved=edge.curved,
    )


def derive_edge_attributes(
    snapshot: GraphSnapshot | None,
    selected: Set[str],
    palette: Palette = DEFAULT_PALETTE,
) -> list[EdgeAttributes]:
    """Build one attribute bundle per edge, skipping malformed edges.

    A dangling or orbit-less curved edge is logged and omitted; the rest of the
    tree is still derived.
    """
    if snapshot is None:
        return []
    result: list[EdgeAttributes] = []
    for edge in snapshot.edges:
        try:
            result.append(resolve_edge(snapshot, edge, selected, palette))
        except TreeDataError as e:
            logger.warning("Skipping edge: %s", e)
    return result


class ViewModelCache:
    """Memoize derivation on (snapshot identity, selection contents, palette).

    Only the most recent key is kept, mirroring a single view re-rendering.
    """

    def __init__(self, palette: Palette = DEFAULT_PALETTE):
        self.palette = palette
        self.hits = 0
        self.misses = 0
        self._key: tuple | None = None
        self._snapshot: GraphSnapshot | None = None
        self._value: tuple[list[NodeAttributes], list[EdgeAttributes]] = ([], [])

    def derive(
        self,
        snapshot: GraphSnapshot | None,
        selected: Set[str],
    ) -> tuple[list[NodeAttributes], list[EdgeAttributes]]:
        """Return (node attributes, edge attributes), recomputing only on change."""
        key = (id(snapshot), frozenset(selected), self.palette)
        # Holding the snapshot keeps its id from being reused by another object
        if self._key == key and self._snapshot is snapshot:
            self.hits += 1
            return self._value

        self.misses += 1
        self._value = (
            derive_node_attributes(snapshot, selected, self.palette),
            derive_edge_attributes(snapshot, selected, self.palette),
        )
        self._key = key
        self._snapshot = snapshot
        return self._value
