"""Pytest fixtures for passive tree tests."""

import pytest

from passive_tree.layout.geometry import node_position
from passive_tree.snapshot import GraphSnapshot


def _orbit_node(hash_: str, orbit: int, index: int, radii: list[float], slots: list[int]) -> dict:
    x, y = node_position(radii[orbit], index, slots[orbit])
    return {
        "hash": hash_,
        "x": x,
        "y": y,
        "size": 10,
        "orbit": orbit,
        "orbitIndex": index,
        "stats": [f"Node {hash_}", "+10 to Strength"],
    }


@pytest.fixture
def triangle_payload() -> dict:
    """3 nodes on orbit 0 (radius 100, 6 slots) at indices 0, 1, 3.

    Edges: 10 -> 11 straight, 11 -> 13 curved.
    """
    radii = [100]
    slots = [6]
    return {
        "constants": {
            "minX": -120,
            "minY": -120,
            "maxX": 120,
            "maxY": 120,
            "skillsPerOrbit": slots,
            "orbitRadii": radii,
        },
        "nodeMap": {
            "10": _orbit_node("10", 0, 0, radii, slots),
            "11": _orbit_node("11", 0, 1, radii, slots),
            "13": _orbit_node("13", 0, 3, radii, slots),
        },
        "connectionMap": [
            {"fromNode": "10", "toNode": "11", "curved": False},
            {"fromNode": "11", "toNode": "13", "curved": True},
        ],
    }


@pytest.fixture
def triangle_snapshot(triangle_payload) -> GraphSnapshot:
    """Parsed form of triangle_payload."""
    return GraphSnapshot.from_dict(triangle_payload)


@pytest.fixture
def two_orbit_payload() -> dict:
    """Two orbits with a wrap-around arc and an unknown-node edge."""
    radii = [0, 82, 162]
    slots = [1, 6, 16]
    nodes = {
        "1": _orbit_node("1", 1, 5, radii, slots),
        "2": _orbit_node("2", 1, 1, radii, slots),
        "3": _orbit_node("3", 2, 0, radii, slots),
        "4": _orbit_node("4", 2, 12, radii, slots),
        "5": {"hash": "5", "x": 0, "y": 0, "size": 20, "stats": []},
    }
    return {
        "constants": {
            "minX": -200,
            "minY": -200,
            "maxX": 200,
            "maxY": 200,
            "skillsPerOrbit": slots,
            "orbitRadii": radii,
        },
        "nodeMap": nodes,
        "connectionMap": [
            {"fromNode": "1", "toNode": "2", "curved": True},  # Wraps past slot 0
            {"fromNode": "3", "toNode": "4", "curved": True},  # Long way forward
            {"fromNode": "5", "toNode": "1", "curved": False},
            {"fromNode": "2", "toNode": "999", "curved": False},  # Dangling
        ],
    }


@pytest.fixture
def two_orbit_snapshot(two_orbit_payload) -> GraphSnapshot:
    """Parsed form of two_orbit_payload."""
    return GraphSnapshot.from_dict(two_orbit_payload)
