"""Passive tree snapshot model and wire-format parsing."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


class TreeDataError(Exception):
    """Base class for malformed tree data."""


class SnapshotFormatError(TreeDataError):
    """Raised when a payload does not have the snapshot wire shape."""


class DanglingReferenceError(TreeDataError):
    """Raised when an edge references a node hash absent from the snapshot."""

    def __init__(self, edge: "TreeEdge", missing: str):
        super().__init__(f"Edge {edge.from_node} -> {edge.to_node} references unknown node {missing}")
        self.edge = edge
        self.missing = missing


class OrbitDataError(TreeDataError):
    """Raised when orbit data is absent or does not index the orbit tables."""


@dataclass(frozen=True)
class Bounds:
    """Renderable extent of the tree."""

    min_x: float = 0
    min_y: float = 0
    max_x: float = 0
    max_y: float = 0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def view_box(self) -> str:
        return f"{self.min_x} {self.min_y} {self.width} {self.height}"


@dataclass(frozen=True)
class TreeNode:
    """A single passive node. Position is already resolved by the data source."""

    hash: str
    x: float
    y: float
    size: float
    orbit: int | None = None
    orbit_index: int | None = None
    stats: tuple[str, ...] = ()


@dataclass(frozen=True)
class TreeEdge:
    """A connection between two nodes, drawn as an arc when curved."""

    from_node: str
    to_node: str
    curved: bool = False


@dataclass
class GraphSnapshot:
    """One immutable, versioned instance of the full tree."""

    bounds: Bounds = field(default_factory=Bounds)
    orbit_radii: list[float] = field(default_factory=list)
    skills_per_orbit: list[int] = field(default_factory=list)
    nodes: dict[str, TreeNode] = field(default_factory=dict)  # Snapshot order preserved
    edges: list[TreeEdge] = field(default_factory=list)

    def orbit_radius(self, orbit: int | None) -> float:
        """Radius of an orbit.

        Raises:
            OrbitDataError: If orbit is None or out of range.
        """
        return self._orbit_lookup(self.orbit_radii, orbit, "orbitRadii")

    def skills_in_orbit(self, orbit: int | None) -> int:
        """Number of angular slots on an orbit.

        Raises:
            OrbitDataError: If orbit is None or out of range.
        """
        return self._orbit_lookup(self.skills_per_orbit, orbit, "skillsPerOrbit")

    @staticmethod
    def _orbit_lookup(table: list, orbit: int | None, name: str):
        if orbit is None:
            raise OrbitDataError("Node has no orbit")
        if not 0 <= orbit < len(table):
            raise OrbitDataError(f"Orbit {orbit} out of range for {name} (size {len(table)})")
        return table[orbit]

    @classmethod
    def from_dict(cls, data: dict) -> "GraphSnapshot":
        """Parse the data source's wire shape.

        The expected shape is::

            {
              "constants": {"minX", "minY", "maxX", "maxY", "skillsPerOrbit", "orbitRadii"},
              "nodeMap": {hash: {"x", "y", "size", "hash", "orbit", "orbitIndex", "stats"}},
              "connectionMap": [{"fromNode", "toNode", "curved"}],
            }

        Args:
            data: Decoded JSON payload.

        Returns:
            The parsed snapshot.

        Raises:
            SnapshotFormatError: If required fields are missing or mistyped.
        """
        if not isinstance(data, dict):
            raise SnapshotFormatError(f"Expected an object, got {type(data).__name__}")
        try:
            constants = data["constants"]
            bounds = Bounds(
                min_x=_number(constants["minX"], "minX"),
                min_y=_number(constants["minY"], "minY"),
                max_x=_number(constants["maxX"], "maxX"),
                max_y=_number(constants["maxY"], "maxY"),
            )
            orbit_radii = [_number(r, "orbitRadii") for r in constants["orbitRadii"]]
            skills_per_orbit = [int(n) for n in constants["skillsPerOrbit"]]

            node_map = data.get("nodeMap") or {}
            # nodeMap may arrive as a list of nodes rather than a mapping.
            # Edges refer to nodeMap keys, so those key the graph when present.
            nodes: dict[str, TreeNode] = {}
            if isinstance(node_map, dict):
                for key, raw in node_map.items():
                    nodes[str(key)] = _parse_node(raw, default_hash=str(key))
            else:
                for raw in node_map:
                    node = _parse_node(raw)
                    nodes[node.hash] = node

            edges = [
                TreeEdge(
                    from_node=str(raw["fromNode"]),
                    to_node=str(raw["toNode"]),
                    curved=bool(raw.get("curved", False)),
                )
                for raw in data.get("connectionMap") or []
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SnapshotFormatError(f"Malformed snapshot: {e!r}") from e

        return cls(
            bounds=bounds,
            orbit_radii=orbit_radii,
            skills_per_orbit=skills_per_orbit,
            nodes=nodes,
            edges=edges,
        )

    def to_dict(self) -> dict:
        """Serialize back to the wire shape accepted by from_dict."""
        return {
            "constants": {
                "minX": self.bounds.min_x,
                "minY": self.bounds.min_y,
                "maxX": self.bounds.max_x,
                "maxY": self.bounds.max_y,
                "skillsPerOrbit": list(self.skills_per_orbit),
                "orbitRadii": list(self.orbit_radii),
            },
            "nodeMap": {
                key: {
                    "hash": node.hash,
                    "x": node.x,
                    "y": node.y,
                    "size": node.size,
                    "orbit": node.orbit,
                    "orbitIndex": node.orbit_index,
                    "stats": list(node.stats),
                }
                for key, node in self.nodes.items()
            },
            "connectionMap": [
                {"fromNode": edge.from_node, "toNode": edge.to_node, "curved": edge.curved}
                for edge in self.edges
            ],
        }


def _number(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SnapshotFormatError(f"{name} must be a number, got {value!r}")
    return value


def _parse_node(raw: dict, default_hash: str | None = None) -> TreeNode:
    orbit = raw.get("orbit")
    orbit_index = raw.get("orbitIndex")
    hash_ = raw.get("hash", default_hash)
    if hash_ is None:
        raise SnapshotFormatError("Node has no hash")
    return TreeNode(
        hash=str(hash_),
        x=_number(raw["x"], "x"),
        y=_number(raw["y"], "y"),
        size=_number(raw["size"], "size"),
        orbit=int(orbit) if orbit is not None else None,
        orbit_index=int(orbit_index) if orbit_index is not None else None,
        stats=tuple(str(line) for line in raw.get("stats") or ()),
    )


def validate_snapshot(snapshot: GraphSnapshot) -> list[str]:
    """Check the snapshot's invariants at the ingestion boundary.

    Args:
        snapshot: Snapshot to check.

    Returns:
        Human-readable problems, empty if the snapshot is consistent.
    """
    problems: list[str] = []

    for key, node in snapshot.nodes.items():
        if node.hash != key:
            problems.append(f"Node {key}: hash field {node.hash} differs from its nodeMap key")
        if node.orbit is None:
            continue
        try:
            slots = snapshot.skills_in_orbit(node.orbit)
            snapshot.orbit_radius(node.orbit)
        except OrbitDataError as e:
            problems.append(f"Node {node.hash}: {e}")
            continue
        if node.orbit_index is not None and not 0 <= node.orbit_index < slots:
            problems.append(
                f"Node {node.hash}: orbit index {node.orbit_index} out of range for orbit {node.orbit} ({slots} slots)"
            )

    for edge in snapshot.edges:
        missing = [h for h in (edge.from_node, edge.to_node) if h not in snapshot.nodes]
        if missing:
            for h in missing:
                problems.append(f"Edge {edge.from_node} -> {edge.to_node}: unknown node {h}")
            continue
        if edge.curved:
            for h in (edge.from_node, edge.to_node):
                node = snapshot.nodes[h]
                if node.orbit is None or node.orbit_index is None:
                    problems.append(f"Curved edge {edge.from_node} -> {edge.to_node}: node {h} has no orbit data")

    return problems


def selection_from_ids(ids: Iterable[int | str] | None) -> frozenset[str]:
    """Convert caller-supplied node ids to the string hashes used by the graph."""
    if ids is None:
        return frozenset()
    return frozenset(str(i) for i in ids)
