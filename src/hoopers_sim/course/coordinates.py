"""Conversions between 2D canvas coordinates and the 3D world frame.

The 3D frame is y-up with the canvas y axis mapped onto world z.
"""

from __future__ import annotations

import math

from hoopers_sim.course.models import SCALE, Point


def sim_to_world(x: float, y: float, scale: float = SCALE) -> tuple[float, float, float]:
    """Convert a canvas point (pixels) to a world position (metres)."""
    return (x / scale, 0.0, y / scale)


def sim_rotation_to_world(degrees: float) -> float:
    """Convert a canvas rotation in degrees to a world y-rotation in radians."""
    return -math.radians(degrees)


def heading_to_world_yaw(direction: Point) -> float:
    """World y-rotation that faces along *direction* (metres, z = canvas y)."""
    return math.atan2(-direction.x, -direction.y)
