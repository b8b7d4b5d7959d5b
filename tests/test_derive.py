"""Tests for derive.py module."""

import logging

import pytest

from passive_tree.layout.derive import (
    Palette,
    ViewModelCache,
    derive_edge_attributes,
    derive_node_attributes,
    resolve_edge,
)
from passive_tree.snapshot import (
    DanglingReferenceError,
    GraphSnapshot,
    OrbitDataError,
    TreeEdge,
    TreeNode,
)


class TestDeriveNodeAttributes:
    """Tests for derive_node_attributes function."""

    def test_one_bundle_per_node_in_order(self, triangle_snapshot):
        attrs = derive_node_attributes(triangle_snapshot, frozenset())
        assert [a.hash for a in attrs] == ["10", "11", "13"]

    def test_fill_highlighted_iff_selected(self, triangle_snapshot):
        attrs = derive_node_attributes(triangle_snapshot, {"10", "13"})
        fills = {a.hash: a.fill for a in attrs}
        assert fills == {"10": "red", "11": "black", "13": "red"}

    def test_position_and_radius_copied(self, triangle_snapshot):
        node = triangle_snapshot.nodes["11"]
        attrs = derive_node_attributes(triangle_snapshot, set())[1]
        assert (attrs.x, attrs.y, attrs.radius) == (node.x, node.y, node.size)

    def test_tooltip_joins_stats(self, triangle_snapshot):
        attrs = derive_node_attributes(triangle_snapshot, set())[0]
        assert attrs.tooltip == "Node 10\n+10 to Strength"

    def test_empty_stats_give_empty_tooltip(self, two_orbit_snapshot):
        attrs = {a.hash: a for a in derive_node_attributes(two_orbit_snapshot, set())}
        assert attrs["5"].tooltip == ""

    def test_custom_palette(self, triangle_snapshot):
        palette = Palette(highlight="#ffd43b", default="#e9ecef")
        attrs = derive_node_attributes(triangle_snapshot, {"10"}, palette)
        assert attrs[0].fill == "#ffd43b"
        assert attrs[1].fill == "#e9ecef"

    def test_no_snapshot(self):
        assert derive_node_attributes(None, {"1"}) == []

    def test_pure(self, triangle_payload):
        """Equal inputs by value give equal outputs."""
        a = derive_node_attributes(GraphSnapshot.from_dict(triangle_payload), {"10"})
        b = derive_node_attributes(GraphSnapshot.from_dict(triangle_payload), frozenset({"10"}))
        assert a == b


class TestDeriveEdgeAttributes:
    """Tests for derive_edge_attributes function."""

    def test_end_to_end_triangle(self, triangle_snapshot):
        """Straight 10 -> 11 is highlighted; curved 11 -> 13 is not, with sweep 1."""
        straight, curved = derive_edge_attributes(triangle_snapshot, {"10", "11"})

        assert not straight.curved
        assert straight.stroke == "red"
        assert (straight.from_hash, straight.to_hash) == ("10", "11")

        assert curved.curved
        assert curved.stroke == "black"
        assert curved.sweep == 1
        assert curved.radius == 100
        assert curved.skills_in_orbit == 6
        assert (curved.from_index, curved.to_index) == (1, 3)

    def test_endpoint_coordinates(self, triangle_snapshot):
        edge = derive_edge_attributes(triangle_snapshot, set())[1]
        from_node = triangle_snapshot.nodes["11"]
        to_node = triangle_snapshot.nodes["13"]
        assert (edge.from_x, edge.from_y) == (from_node.x, from_node.y)
        assert (edge.to_x, edge.to_y) == (to_node.x, to_node.y)

    def test_stroke_needs_both_endpoints(self, triangle_snapshot):
        edges = derive_edge_attributes(triangle_snapshot, {"11"})
        assert [e.stroke for e in edges] == ["black", "black"]
        edges = derive_edge_attributes(triangle_snapshot, {"11", "13"})
        assert [e.stroke for e in edges] == ["black", "red"]

    def test_dangling_edge_skipped(self, two_orbit_snapshot, caplog):
        """The edge to an unknown node is dropped; every other edge survives."""
        with caplog.at_level(logging.WARNING, logger="passive_tree.layout.derive"):
            edges = derive_edge_attributes(two_orbit_snapshot, set())

        assert [(e.from_hash, e.to_hash) for e in edges] == [("1", "2"), ("3", "4"), ("5", "1")]
        assert "999" in caplog.text
        assert len(derive_node_attributes(two_orbit_snapshot, set())) == 5

    def test_wrap_around_sweep(self, two_orbit_snapshot):
        edges = {(e.from_hash, e.to_hash): e for e in derive_edge_attributes(two_orbit_snapshot, set())}
        assert edges[("1", "2")].sweep == 1
        assert edges[("3", "4")].sweep == 0
        assert edges[("3", "4")].radius == 162
        assert edges[("3", "4")].skills_in_orbit == 16

    def test_straight_edge_without_orbit(self, two_orbit_snapshot):
        """A straight edge from an orbit-less node carries no orbit data."""
        edges = {(e.from_hash, e.to_hash): e for e in derive_edge_attributes(two_orbit_snapshot, set())}
        edge = edges[("5", "1")]
        assert edge.radius is None
        assert edge.skills_in_orbit is None
        assert not edge.curved

    def test_no_snapshot(self):
        assert derive_edge_attributes(None, set()) == []

    def test_pure(self, two_orbit_payload):
        a = derive_edge_attributes(GraphSnapshot.from_dict(two_orbit_payload), {"1", "2"})
        b = derive_edge_attributes(GraphSnapshot.from_dict(two_orbit_payload), {"2", "1"})
        assert a == b


class TestResolveEdge:
    """Tests for resolve_edge function."""

    def test_missing_from_node(self, triangle_snapshot):
        with pytest.raises(DanglingReferenceError) as exc_info:
            resolve_edge(triangle_snapshot, TreeEdge("404", "10"), set())
        assert exc_info.value.missing == "404"

    def test_missing_to_node(self, triangle_snapshot):
        with pytest.raises(DanglingReferenceError):
            resolve_edge(triangle_snapshot, TreeEdge("10", "404"), set())

    def test_curved_edge_without_orbit(self, triangle_snapshot):
        triangle_snapshot.nodes["99"] = TreeNode(hash="99", x=0, y=0, size=5)
        with pytest.raises(OrbitDataError):
            resolve_edge(triangle_snapshot, TreeEdge("99", "10", curved=True), set())

    def test_curved_edge_with_out_of_range_orbit(self, triangle_snapshot):
        triangle_snapshot.nodes["98"] = TreeNode(hash="98", x=0, y=0, size=5, orbit=7, orbit_index=0)
        with pytest.raises(OrbitDataError):
            resolve_edge(triangle_snapshot, TreeEdge("98", "10", curved=True), set())

    def test_curved_orbitless_edge_skipped_in_derivation(self, triangle_snapshot):
        triangle_snapshot.nodes["99"] = TreeNode(hash="99", x=0, y=0, size=5)
        triangle_snapshot.edges.append(TreeEdge("99", "10", curved=True))
        edges = derive_edge_attributes(triangle_snapshot, set())
        assert len(edges) == 2


class TestViewModelCache:
    """Tests for ViewModelCache class."""

    def test_same_inputs_hit(self, triangle_snapshot):
        cache = ViewModelCache()
        first = cache.derive(triangle_snapshot, {"10"})
        second = cache.derive(triangle_snapshot, frozenset({"10"}))
        assert second is first
        assert (cache.hits, cache.misses) == (1, 1)

    def test_selection_change_recomputes(self, triangle_snapshot):
        cache = ViewModelCache()
        cache.derive(triangle_snapshot, {"10"})
        nodes, _ = cache.derive(triangle_snapshot, {"11"})
        assert cache.misses == 2
        assert [n.fill for n in nodes] == ["black", "red", "black"]

    def test_new_snapshot_recomputes(self, triangle_payload):
        cache = ViewModelCache()
        a = GraphSnapshot.from_dict(triangle_payload)
        b = GraphSnapshot.from_dict(triangle_payload)
        first = cache.derive(a, set())
        second = cache.derive(b, set())
        assert cache.misses == 2
        assert first == second

    def test_palette_applied(self, triangle_snapshot):
        cache = ViewModelCache(Palette(highlight="gold", default="gray"))
        nodes, edges = cache.derive(triangle_snapshot, {"10", "11"})
        assert nodes[0].fill == "gold"
        assert edges[0].stroke == "gold"
        assert edges[1].stroke == "gray"
