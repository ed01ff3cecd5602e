"""
Geometry helpers for the creature plane and the ground plane.

Creatures integrate motion in a 2D plane (x, y). The host world is 3D with
Y up, so the creature plane lies on the ground as (X, Z): plane x maps to
ground X, plane y maps to ground Z, and ground Y is the terrain height.
All helpers here are stateless.
"""
from __future__ import annotations

import math
from typing import Tuple


def plane_to_ground(x: float, y: float) -> Tuple[float, float]:
    """Map a creature-plane point to ground (X, Z) coordinates."""
    return float(x), float(y)


def ground_to_plane(x: float, z: float) -> Tuple[float, float]:
    """Map ground (X, Z) coordinates to a creature-plane point."""
    return float(x), float(z)


def distance_2d(ax: float, ay: float, bx: float, by: float) -> float:
    """Euclidean distance between two points in the same plane."""
    return math.hypot(bx - ax, by - ay)


def clamp_to_arena(x: float, y: float, half_extent: float) -> Tuple[float, float]:
    """
    Clamp a point into the square arena [-half_extent, half_extent]^2.

    Applied after integration; heading and speed are left untouched.
    """
    x = -half_extent if x < -half_extent else (half_extent if x > half_extent else x)
    y = -half_extent if y < -half_extent else (half_extent if y > half_extent else y)
    return x, y


def distance_to_wall(x: float, y: float, half_extent: float) -> float:
    """
    Distance from a point to the nearest arena edge.

    Zero on (or beyond) an edge, half_extent at the arena center.
    """
    return max(0.0, min(half_extent - abs(x), half_extent - abs(y)))
