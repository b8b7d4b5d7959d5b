"""SVG rendering of the passive tree."""

from functools import lru_cache
from html import escape
from pathlib import Path

from ..snapshot import Bounds
from .derive import EdgeAttributes, NodeAttributes
from .geometry import arc_path

EDGE_STROKE_WIDTH = 6

LOADING_PLACEHOLDER = '<div class="loading-indicator" role="status">Loading passive tree...</div>'


@lru_cache(maxsize=8192)
def render_node(attrs: NodeAttributes) -> str:
    """Draw a node as a filled circle carrying its hash and tooltip.

    Cached on the attribute bundle, so unchanged nodes are not redrawn.
    """
    return (
        f'<circle cx="{attrs.x}" cy="{attrs.y}" r="{attrs.radius}" fill="{escape(attrs.fill)}" '
        f'data-hash="{escape(attrs.hash)}"><title>{escape(attrs.tooltip)}</title></circle>'
    )


@lru_cache(maxsize=8192)
def render_edge(attrs: EdgeAttributes) -> str:
    """Draw an edge as a straight line or, when curved, an orbit arc.

    Cached on the attribute bundle, so unchanged edges are not redrawn.
    """
    stroke = escape(attrs.stroke)
    meta = f'data-from="{escape(attrs.from_hash)}" data-to="{escape(attrs.to_hash)}"'
    if attrs.curved:
        d = arc_path((attrs.from_x, attrs.from_y), (attrs.to_x, attrs.to_y), attrs.radius, attrs.sweep)
        return (
            f'<path stroke="{stroke}" stroke-width="{EDGE_STROKE_WIDTH}" d="{d}" '
            f'fill="transparent" {meta}/>'
        )
    return (
        f'<line x1="{attrs.from_x}" y1="{attrs.from_y}" x2="{attrs.to_x}" y2="{attrs.to_y}" '
        f'stroke="{stroke}" stroke-width="{EDGE_STROKE_WIDTH}" {meta}/>'
    )


def render_svg(
    bounds: Bounds | None,
    node_attrs: list[NodeAttributes],
    edge_attrs: list[EdgeAttributes],
) -> str:
    """Lay out the whole tree in one SVG document.

    Edges are drawn before nodes so that nodes cover the edge endpoints.

    Args:
        bounds: Tree extent used for the view box, or None if nothing is loaded.
        node_attrs: Derived node bundles.
        edge_attrs: Derived edge bundles.

    Returns:
        SVG markup scaled to the container width.
    """
    view_box = (bounds or Bounds()).view_box
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="100%" '
        f'preserveAspectRatio="xMidYMid meet" viewBox="{view_box}">'
    ]
    parts.extend(render_edge(attrs) for attrs in edge_attrs)
    parts.extend(render_node(attrs) for attrs in node_attrs)
    parts.append("</svg>")
    return "\n".join(parts)


def render_loading() -> str:
    """Placeholder shown while a snapshot is being fetched."""
    return LOADING_PLACEHOLDER


def write_svg(output_path: Path, svg: str) -> None:
    """Write an SVG document to disk."""
    with open(output_path, "w") as f:
        f.write(svg)
