"""
Navigation Layer - Where to go.

Pure plane geometry used by the decision layer to reach and
patrol the arena circle.
"""

from .geometry import (
    PATROL_CENTER,
    PATROL_CIRCLE,
    Circle,
    Line,
    Position,
    Rotation,
    angle_between,
    circle_line_intersections,
    closest_point,
    heading_to_circle_center,
    next_patrol_point,
    rotate_point,
    to_circle_frame,
    to_world_frame,
    within_tolerance,
)

__all__ = [
    "PATROL_CENTER",
    "PATROL_CIRCLE",
    "Circle",
    "Line",
    "Position",
    "Rotation",
    "angle_between",
    "circle_line_intersections",
    "closest_point",
    "heading_to_circle_center",
    "next_patrol_point",
    "rotate_point",
    "to_circle_frame",
    "to_world_frame",
    "within_tolerance",
]
