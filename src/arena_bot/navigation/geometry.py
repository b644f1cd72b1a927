"""
Plane geometry for patrolling the arena circle.

All angles are in degrees, counter-clockwise, measured from the
positive x axis. No state; every function is pure.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from config import CIRCLE_CENTER, PATROL_RADIUS

Rotation = float


@dataclass(frozen=True)
class Position:
    """Point in the arena coordinate frame."""

    x: float
    y: float


@dataclass(frozen=True)
class Circle:
    center: Position
    radius: float


@dataclass(frozen=True)
class Line:
    """Line through a point with the given slope angle (degrees)."""

    through_point: Position
    slope: Rotation


PATROL_CENTER = Position(*CIRCLE_CENTER)
PATROL_CIRCLE = Circle(PATROL_CENTER, PATROL_RADIUS)

# |cos(slope)| below this is treated as a vertical line
VERTICAL_EPSILON = 1e-9


def rotate_point(point: Position, angle: Rotation) -> Position:
    """Rotate point about the origin by angle degrees."""
    radians = math.radians(angle)
    x = point.x * math.cos(radians) - point.y * math.sin(radians)
    y = point.x * math.sin(radians) + point.y * math.cos(radians)
    return Position(x, y)


def to_circle_frame(point: Position) -> Position:
    """World coordinates -> frame centered on the patrol circle."""
    return Position(point.x - PATROL_CENTER.x, point.y - PATROL_CENTER.y)


def to_world_frame(point: Position) -> Position:
    """Patrol circle frame -> world coordinates."""
    return Position(point.x + PATROL_CENTER.x, point.y + PATROL_CENTER.y)


def circle_line_intersections(circle: Circle, line: Line) -> list[Position]:
    """
    Intersect a circle with a line.

    Substitutes the line y = m*x + n into (x - h)^2 + (y - k)^2 = r^2
    and solves the resulting quadratic in x. Vertical lines (slope 90 or
    270) have no finite m and are solved as x = through_point.x instead.

    Returns:
        Two points when the discriminant is positive, one when it is
        exactly zero (tangent), none when negative.
    """
    h = circle.center.x
    k = circle.center.y
    r = circle.radius
    radians = math.radians(line.slope)

    if abs(math.cos(radians)) < VERTICAL_EPSILON:
        return _vertical_intersections(circle, line.through_point.x)

    m = math.tan(radians)
    n = line.through_point.y - m * line.through_point.x

    a = 1 + m ** 2
    b = 2 * (m * (n - k) - h)
    c = h ** 2 + (n - k) ** 2 - r ** 2

    discriminant = b ** 2 - 4 * a * c
    if discriminant < 0:
        return []

    root = math.sqrt(discriminant)
    x_a = (-b + root) / (2 * a)
    x_b = (-b - root) / (2 * a)
    point_a = Position(x_a, m * x_a + n)

    if discriminant == 0:
        return [point_a]
    return [point_a, Position(x_b, m * x_b + n)]


def _vertical_intersections(circle: Circle, x: float) -> list[Position]:
    # (y - k)^2 = r^2 - (x - h)^2
    discriminant = circle.radius ** 2 - (x - circle.center.x) ** 2
    if discriminant < 0:
        return []

    root = math.sqrt(discriminant)
    point_a = Position(x, circle.center.y + root)

    if discriminant == 0:
        return [point_a]
    return [point_a, Position(x, circle.center.y - root)]


def closest_point(origin: Position, candidates: Sequence[Position]) -> Position:
    """
    Candidate closest to origin (squared Euclidean distance).

    Ties go to the earliest candidate.

    Raises:
        ValueError: if candidates is empty.
    """
    if not candidates:
        raise ValueError("closest_point() needs at least one candidate")

    coords = np.array([(p.x, p.y) for p in candidates], dtype=float)
    deltas = coords - np.array([origin.x, origin.y])
    distances = np.einsum("ij,ij->i", deltas, deltas)
    return candidates[int(np.argmin(distances))]


def angle_between(origin: Position, target: Position) -> Rotation:
    """Bearing from origin to target, normalized to [0, 360)."""
    angle = math.degrees(math.atan2(target.y - origin.y, target.x - origin.x))
    return angle % 360


def heading_to_circle_center(
    position: Position,
    circle_center: Position = PATROL_CENTER,
    radius: float = PATROL_RADIUS,
) -> Rotation:
    """
    Heading that takes the agent onto the patrol circle.

    Outside (or on) the circle this is the bearing to the center. Inside
    the circle the heading is the slope angle of the position-center line
    turned by 180 degrees. The slope uses absolute deltas, so the result
    always lies in [180, 270] whatever quadrant the agent is in.
    """
    dx = position.x - circle_center.x
    dy = position.y - circle_center.y

    if dx ** 2 + dy ** 2 < radius ** 2:
        slope_angle = math.degrees(math.atan2(abs(dy), abs(dx)))
        return (slope_angle + 180) % 360

    return angle_between(position, circle_center)


def next_patrol_point(position: Position, step: Rotation) -> Position:
    """Point reached by advancing position step degrees around the circle center."""
    return to_world_frame(rotate_point(to_circle_frame(position), step))


def within_tolerance(position: Position, target: Position, tolerance: float) -> bool:
    """True when both per-axis deltas are strictly below tolerance."""
    return abs(position.x - target.x) < tolerance and abs(position.y - target.y) < tolerance
