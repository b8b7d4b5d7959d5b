"""Orbit geometry: slot positions and arc sweep selection.

Angles follow the data source's convention: slot 0 sits at 12 o'clock and
indices advance clockwise in screen space (y grows downward).
"""

import math


def slot_angle(angular_index: int, slots_on_orbit: int) -> float:
    """Angle in radians of a slot, clockwise from 12 o'clock."""
    if slots_on_orbit <= 0:
        raise ValueError(f"slots_on_orbit must be positive, got {slots_on_orbit}")
    return 2 * math.pi * angular_index / slots_on_orbit


def node_position(
    orbit_radius: float,
    angular_index: int,
    slots_on_orbit: int,
    center: tuple[float, float] = (0.0, 0.0),
) -> tuple[float, float]:
    """Compute the (x, y) position of an orbit slot.

    Args:
        orbit_radius: Radius of the orbit.
        angular_index: Slot number on the orbit.
        slots_on_orbit: Number of evenly spaced slots on the orbit.
        center: Origin of the orbit.

    Returns:
        Cartesian (x, y) position in screen coordinates.
    """
    angle = slot_angle(angular_index, slots_on_orbit)
    cx, cy = center
    return (cx + orbit_radius * math.sin(angle), cy - orbit_radius * math.cos(angle))


def forward_distance(from_index: int, to_index: int, slots_on_orbit: int) -> int:
    """Clockwise slot distance from one index to another, in [0, slots)."""
    if slots_on_orbit <= 0:
        raise ValueError(f"slots_on_orbit must be positive, got {slots_on_orbit}")
    return (to_index - from_index) % slots_on_orbit


def sweep_direction(from_index: int, to_index: int, slots_on_orbit: int) -> int:
    """Pick the SVG sweep flag for an arc between two slots on one orbit.

    The clockwise distance is normalized into [0, slots) first, so wrap-around
    edges (to_index < from_index) pick the same arc as their forward twin.

    Returns:
        1 (clockwise) if the clockwise distance is at most half the orbit,
        otherwise 0 (counter-clockwise).
    """
    if forward_distance(from_index, to_index, slots_on_orbit) > slots_on_orbit / 2:
        return 0
    return 1


def angular_span(from_index: int, to_index: int, slots_on_orbit: int, sweep: int) -> float:
    """Angle in radians travelled from one slot to another in the sweep direction."""
    if sweep:
        steps = forward_distance(from_index, to_index, slots_on_orbit)
    else:
        steps = forward_distance(to_index, from_index, slots_on_orbit)
    return 2 * math.pi * steps / slots_on_orbit


def arc_path(
    start: tuple[float, float],
    end: tuple[float, float],
    radius: float,
    sweep: int,
) -> str:
    """SVG path data for a circular arc between two points.

    The large-arc flag is always 0, so the sweep flag alone decides which way
    round the orbit the arc bends.
    """
    fx, fy = start
    tx, ty = end
    return f"M {fx} {fy} A {radius} {radius}, 0, 0 {sweep}, {tx} {ty}"
