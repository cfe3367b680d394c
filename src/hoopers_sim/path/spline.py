"""Spline evaluation through run control points.

Two interchangeable bases are provided:

* **Hermite**: cardinal spline with explicit per-point tangents
  ``m[i] = (1 - tension) / 2 * (P[i+1] - P[i-1])``.  Evaluated at a continuous
  segment parameter ``t ∈ [0, N-1]`` with analytic derivatives.
* **Catmull-Rom**: uniform Catmull-Rom over the control sequence padded with
  reflected phantom points; sampled into a dense polyline.

Both pass exactly through every control point and are C¹ at interior points.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from hoopers_sim.course.models import ORIGIN, Point

DEFAULT_TANGENT = Point(1.0, 0.0)


class SplineBasis(str, Enum):
    HERMITE = "hermite"
    CATMULL_ROM = "catmull_rom"


@dataclass(frozen=True)
class SplineSample:
    position: Point
    tangent: Point


# ---------------------------------------------------------------------------
# Hermite (cardinal) form
# ---------------------------------------------------------------------------

def compute_tangents(points: list[Point], tension: float) -> list[Point]:
    """Cardinal tangents; the two ends use a doubled one-sided difference."""
    n = len(points)
    if n < 2:
        return [DEFAULT_TANGENT] * n
    k = (1.0 - tension) / 2.0
    tangents: list[Point] = []
    for i in range(n):
        if i == 0:
            tangents.append((points[1] - points[0]).scale(2.0 * k))
        elif i == n - 1:
            tangents.append((points[n - 1] - points[n - 2]).scale(2.0 * k))
        else:
            tangents.append((points[i + 1] - points[i - 1]).scale(k))
    return tangents


def hermite(p0: Point, p1: Point, m0: Point, m1: Point, t: float) -> Point:
    """Cubic Hermite position at local parameter *t* ∈ [0, 1]."""
    t2 = t * t
    t3 = t2 * t
    h00 = 2 * t3 - 3 * t2 + 1
    h10 = t3 - 2 * t2 + t
    h01 = -2 * t3 + 3 * t2
    h11 = t3 - t2
    return Point(
        h00 * p0.x + h10 * m0.x + h01 * p1.x + h11 * m1.x,
        h00 * p0.y + h10 * m0.y + h01 * p1.y + h11 * m1.y,
    )


def hermite_tangent(p0: Point, p1: Point, m0: Point, m1: Point, t: float) -> Point:
    """Derivative of :func:`hermite` with respect to *t*."""
    t2 = t * t
    dh00 = 6 * t2 - 6 * t
    dh10 = 3 * t2 - 4 * t + 1
    dh01 = -6 * t2 + 6 * t
    dh11 = 3 * t2 - 2 * t
    return Point(
        dh00 * p0.x + dh10 * m0.x + dh01 * p1.x + dh11 * m1.x,
        dh00 * p0.y + dh10 * m0.y + dh01 * p1.y + dh11 * m1.y,
    )


def sample_spline(
    points: list[Point],
    tension: float,
    t: float,
    tangents: list[Point] | None = None,
) -> SplineSample:
    """Position and (unnormalised) tangent at segment parameter *t*.

    *t* is clamped to ``[0, len(points) - 1]``.  With fewer than two points
    the first point (or the origin) is returned with tangent ``(1, 0)``.
    Pass precomputed *tangents* to avoid recomputing them on every call.
    """
    if len(points) < 2:
        return SplineSample(points[0] if points else ORIGIN, DEFAULT_TANGENT)

    if tangents is None:
        tangents = compute_tangents(points, tension)
    max_t = len(points) - 1
    clamped = max(0.0, min(float(max_t), t))
    seg = min(int(math.floor(clamped)), len(points) - 2)
    local = clamped - seg

    p0, p1 = points[seg], points[seg + 1]
    m0, m1 = tangents[seg], tangents[seg + 1]
    return SplineSample(
        position=hermite(p0, p1, m0, m1, local),
        tangent=hermite_tangent(p0, p1, m0, m1, local),
    )


def generate_spline_points(
    points: list[Point],
    tension: float = 0.5,
    samples_per_segment: int = 50,
) -> list[Point]:
    """Dense Hermite polyline through *points*, for drawing the run path."""
    if len(points) < 2:
        return list(points)

    tangents = compute_tangents(points, tension)
    result: list[Point] = []
    last_seg = len(points) - 2
    for i in range(len(points) - 1):
        stop = samples_per_segment if i == last_seg else samples_per_segment - 1
        for s in range(stop + 1):
            u = s / samples_per_segment
            result.append(hermite(points[i], points[i + 1], tangents[i], tangents[i + 1], u))
    return result


# ---------------------------------------------------------------------------
# Catmull-Rom (phantom point) form
# ---------------------------------------------------------------------------

def catmull_rom_point(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Uniform Catmull-Rom point between *p1* and *p2* at *t* ∈ [0, 1]."""
    t2 = t * t
    t3 = t2 * t

    def axis(a: float, b: float, c: float, d: float) -> float:
        return 0.5 * (
            2 * b
            + (-a + c) * t
            + (2 * a - 5 * b + 4 * c - d) * t2
            + (-a + 3 * b - 3 * c + d) * t3
        )

    return Point(axis(p0.x, p1.x, p2.x, p3.x), axis(p0.y, p1.y, p2.y, p3.y))


def linear_interpolate(a: Point, b: Point, segments: int) -> list[Point]:
    """``segments + 1`` evenly spaced points from *a* to *b* inclusive."""
    return [
        Point(a.x + (b.x - a.x) * i / segments, a.y + (b.y - a.y) * i / segments)
        for i in range(segments + 1)
    ]


def catmull_rom_spline(points: list[Point], segments_per_span: int = 20) -> list[Point]:
    """Dense Catmull-Rom polyline through *points*.

    The sequence is padded with phantom points ``2*P[0] - P[1]`` and
    ``2*P[-1] - P[-2]`` so the curve starts and ends on the real endpoints.
    Two points degenerate to a straight line.
    """
    if len(points) < 2:
        return list(points)
    if len(points) == 2:
        return linear_interpolate(points[0], points[1], segments_per_span)

    head = points[0].scale(2.0) - points[1]
    tail = points[-1].scale(2.0) - points[-2]
    padded = [head, *points, tail]

    result: list[Point] = []
    for i in range(1, len(padded) - 2):
        p0, p1, p2, p3 = padded[i - 1], padded[i], padded[i + 1], padded[i + 2]
        for j in range(segments_per_span):
            result.append(catmull_rom_point(p0, p1, p2, p3, j / segments_per_span))

    result.append(points[-1])
    return result
