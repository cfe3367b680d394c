"""Course data structures.

Equipment coordinates are stored in canvas pixels; ring dimensions are in
metres.  :data:`SCALE` converts between the two.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

SCALE = 20.0
"""Pixels per metre."""

RING_PRESETS: dict[str, tuple[float, float]] = {
    "small": (20.0, 30.0),
    "medium": (25.0, 35.0),
    "large": (30.0, 40.0),
}
"""Preset ring sizes as ``(width_m, height_m)``."""


@dataclass(frozen=True)
class Point:
    """An immutable 2D coordinate."""

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def scale(self, k: float) -> Point:
        return Point(self.x * k, self.y * k)

    def dot(self, other: Point) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Point) -> float:
        """z-component of the 2D cross product ``self × other``."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self, eps: float = 1e-10) -> Point:
        """Unit vector in the same direction, or ``(1, 0)`` if shorter than *eps*."""
        n = self.length()
        if n <= eps:
            return Point(1.0, 0.0)
        return Point(self.x / n, self.y / n)


ORIGIN = Point(0.0, 0.0)


class EquipmentType(str, Enum):
    HOOP = "hoop"
    BARREL = "barrel"
    TUNNEL = "tunnel"
    START = "start"
    FINISH = "finish"


EQUIPMENT_LABELS: dict[EquipmentType, str] = {
    EquipmentType.HOOP: "Hoop",
    EquipmentType.BARREL: "Barrel",
    EquipmentType.TUNNEL: "Tunnel",
    EquipmentType.START: "Start",
    EquipmentType.FINISH: "Finish",
}


@dataclass(frozen=True)
class Equipment:
    """A single piece of equipment placed in the ring."""

    id: str
    type: EquipmentType

    x: float
    """X position in pixels."""

    y: float
    """Y position in pixels (grows downward)."""

    rotation: float = 0.0
    """Rotation in degrees."""

    order_number: int | None = None
    """Position in the judged sequence, or ``None`` for markers and unused obstacles."""


@dataclass(frozen=True)
class Course:
    """A hoopers course.

    Frozen and hashable so that derived path geometry can be memoised per
    course.  Only ``order_number`` matters for the run; the order of
    :attr:`equipment` is insertion order.
    """

    id: str
    name: str

    ring_width: float
    """Ring width in metres."""

    ring_height: float
    """Ring height in metres."""

    equipment: tuple[Equipment, ...] = ()

    def find_first(self, kind: EquipmentType) -> Equipment | None:
        """Return the first equipment of *kind*, or ``None``."""
        for eq in self.equipment:
            if eq.type == kind:
                return eq
        return None

    def ordered_obstacles(self) -> list[Equipment]:
        """Numbered equipment sorted by ``order_number``.

        The sort is stable, so equipment sharing an order number keeps its
        insertion order.
        """
        numbered = [eq for eq in self.equipment if eq.order_number is not None]
        return sorted(numbered, key=lambda eq: eq.order_number)
