"""Interactive pyvis export with fixed orbit positions."""

from pathlib import Path

from .derive import EdgeAttributes, NodeAttributes

# vis.js edge smoothing matching the SVG sweep flag
_SWEEP_SMOOTH = {
    1: {"enabled": True, "type": "curvedCW", "roundness": 0.2},
    0: {"enabled": True, "type": "curvedCCW", "roundness": 0.2},
}


def render_html(
    node_attrs: list[NodeAttributes],
    edge_attrs: list[EdgeAttributes],
    output_path: Path,
) -> None:
    """Render the derived tree to an interactive HTML page with pyvis.

    Physics is disabled and every node is pinned to its orbit position.

    Args:
        node_attrs: Derived node bundles.
        edge_attrs: Derived edge bundles.
        output_path: Path to write the HTML file.
    """
    from pyvis.network import Network

    net = Network(
        height="100vh",
        width="100%",
        bgcolor="#ffffff",
        directed=False,
        cdn_resources="remote",
    )
    net.toggle_physics(False)

    for attrs in node_attrs:
        net.add_node(
            attrs.hash,
            label=" ",  # Space to suppress default label
            title=attrs.tooltip or attrs.hash,
            x=attrs.x,
            y=attrs.y,
            fixed=True,
            shape="dot",
            color=attrs.fill,
            size=attrs.radius,
        )

    for attrs in edge_attrs:
        options = {"color": attrs.stroke, "width": 2}
        if attrs.curved:
            options["smooth"] = _SWEEP_SMOOTH[attrs.sweep]
        else:
            options["smooth"] = False
        net.add_edge(attrs.from_hash, attrs.to_hash, **options)

    net.set_options("""
    {
        "physics": {"enabled": false},
        "interaction": {
            "navigationButtons": true,
            "zoomView": true,
            "dragView": true,
            "dragNodes": false,
            "hover": true,
            "tooltipDelay": 100
        },
        "nodes": {
            "borderWidth": 0
        }
    }
    """)

    net.save_graph(str(output_path))
