"""Passive tree geometry, view-model derivation and rendering.

Node positions are supplied by the data source on concentric orbits; this
module turns them into render attributes and draws them.
"""

from .derive import (
    DEFAULT_PALETTE,
    EdgeAttributes,
    NodeAttributes,
    Palette,
    ViewModelCache,
    derive_edge_attributes,
    derive_node_attributes,
    resolve_edge,
)
from .geometry import angular_span, arc_path, node_position, sweep_direction
from .interactive import render_html
from .network import build_tree_graph
from .render import render_edge, render_loading, render_node, render_svg, write_svg

__all__ = [
    "node_position",
    "sweep_direction",
    "angular_span",
    "arc_path",
    "Palette",
    "DEFAULT_PALETTE",
    "NodeAttributes",
    "EdgeAttributes",
    "derive_node_attributes",
    "derive_edge_attributes",
    "resolve_edge",
    "ViewModelCache",
    "build_tree_graph",
    "render_node",
    "render_edge",
    "render_svg",
    "render_loading",
    "write_svg",
    "render_html",
]
