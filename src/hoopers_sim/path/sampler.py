"""Arc-length parameterised sampling of the run path.

The raw spline parameter does not move at uniform speed, so the sampler
builds a cumulative-distance table once and maps distance back to the curve:

* Hermite basis: table of ``(distance, param)`` at evenly spaced parameter
  steps; lookups interpolate the parameter and evaluate the spline, giving an
  analytic tangent.
* Catmull-Rom basis: table of ``(distance, point)`` over a dense polyline;
  lookups interpolate the position and estimate the tangent from two nearby
  samples.

The distance → parameter map is piecewise linear, so accuracy is bounded by
the table resolution.
"""

from __future__ import annotations

import bisect

from hoopers_sim.course.models import ORIGIN, Point
from hoopers_sim.path.spline import (
    DEFAULT_TANGENT,
    SplineBasis,
    SplineSample,
    catmull_rom_spline,
    compute_tangents,
    sample_spline,
)

_ZERO_SPAN = 1e-10
_MIN_DIRECTION = 1e-4


def compute_arc_lengths(path: list[Point]) -> list[float]:
    """Cumulative Euclidean distance at each vertex of *path* (first entry 0)."""
    if not path:
        return [0.0]
    lengths = [0.0]
    for prev, curr in zip(path, path[1:]):
        lengths.append(lengths[-1] + (curr - prev).length())
    return lengths


def sample_polyline_at_distance(
    path: list[Point],
    arc_lengths: list[float],
    distance: float,
) -> Point:
    """Position at *distance* along *path*, clamped to its ends."""
    if not path:
        return ORIGIN
    if distance <= 0:
        return path[0]
    total = arc_lengths[-1]
    if distance >= total:
        return path[-1]

    hi = bisect.bisect_right(arc_lengths, distance)
    lo = hi - 1
    span = arc_lengths[hi] - arc_lengths[lo]
    if span < _ZERO_SPAN:
        return path[lo]
    frac = (distance - arc_lengths[lo]) / span
    a, b = path[lo], path[hi]
    return Point(a.x + (b.x - a.x) * frac, a.y + (b.y - a.y) * frac)


class PathSampler:
    """Uniform-speed sampler over a spline through *control_points*.

    Args:
        control_points: Ordered waypoints.  Fewer than two gives a stationary,
            zero-length path.
        basis: Which spline form to sample.
        tension: Cardinal tension for the Hermite basis (0.5 ≈ Catmull-Rom).
        table_resolution: Number of parameter steps in the Hermite table.
        segments_per_span: Polyline steps per control-point span for the
            Catmull-Rom basis.
        tangent_epsilon: Half-distance used to estimate polyline tangents.
    """

    def __init__(
        self,
        control_points: list[Point],
        basis: SplineBasis = SplineBasis.HERMITE,
        tension: float = 0.5,
        table_resolution: int = 500,
        segments_per_span: int = 30,
        tangent_epsilon: float = 0.1,
    ) -> None:
        if table_resolution < 1:
            raise ValueError("table_resolution must be >= 1")
        if segments_per_span < 1:
            raise ValueError("segments_per_span must be >= 1")
        self.control_points = list(control_points)
        self.basis = basis
        self.tension = tension
        self.tangent_epsilon = tangent_epsilon

        self._tangents = compute_tangents(self.control_points, tension)
        self._params: list[float] = []
        self._points: list[Point] = []
        self._distances: list[float] = []

        if len(self.control_points) < 2:
            self._points = [self.control_points[0] if self.control_points else ORIGIN]
            self._params = [0.0]
            self._distances = [0.0]
        elif basis is SplineBasis.HERMITE:
            self._build_parameter_table(table_resolution)
        else:
            self._points = catmull_rom_spline(self.control_points, segments_per_span)
            self._distances = compute_arc_lengths(self._points)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def total_length(self) -> float:
        return self._distances[-1]

    @property
    def is_degenerate(self) -> bool:
        return len(self.control_points) < 2

    def polyline(self) -> list[Point]:
        """Table vertices, ordered from start to finish."""
        return list(self._points)

    def sample_at(self, t: float) -> SplineSample:
        """Position and unit tangent at fraction *t* ∈ [0, 1] of the total length."""
        clamped = max(0.0, min(1.0, t))
        return self.sample_at_distance(clamped * self.total_length)

    def sample_at_distance(self, distance: float) -> SplineSample:
        """Position and unit tangent at *distance* along the path."""
        if self.is_degenerate:
            return SplineSample(self._points[0], DEFAULT_TANGENT)

        if self.basis is SplineBasis.HERMITE:
            param = self.distance_to_param(distance)
            sample = sample_spline(self.control_points, self.tension, param, self._tangents)
            return SplineSample(sample.position, sample.tangent.normalized())

        return SplineSample(
            self.position_at_distance(distance),
            self.direction_at_distance(distance),
        )

    def position_at_distance(self, distance: float) -> Point:
        if self.basis is SplineBasis.HERMITE and not self.is_degenerate:
            return self.sample_at_distance(distance).position
        return sample_polyline_at_distance(self._points, self._distances, distance)

    def direction_at_distance(self, distance: float) -> Point:
        """Unit direction of travel at *distance*; ``(1, 0)`` when undefined."""
        if self.is_degenerate:
            return DEFAULT_TANGENT
        if self.basis is SplineBasis.HERMITE:
            return self.sample_at_distance(distance).tangent

        total = self.total_length
        d0 = max(0.0, distance - self.tangent_epsilon)
        d1 = min(total, distance + self.tangent_epsilon)
        p0 = sample_polyline_at_distance(self._points, self._distances, d0)
        p1 = sample_polyline_at_distance(self._points, self._distances, d1)
        delta = p1 - p0
        if delta.length() < _MIN_DIRECTION:
            return DEFAULT_TANGENT
        return delta.normalized()

    def distance_to_param(self, distance: float) -> float:
        """Spline parameter at *distance* (Hermite table; 0 for other bases)."""
        if not self._params or self.is_degenerate:
            return 0.0
        if distance <= 0:
            return 0.0
        if distance >= self.total_length:
            return self._params[-1]

        hi = bisect.bisect_right(self._distances, distance)
        lo = hi - 1
        span = self._distances[hi] - self._distances[lo]
        if span < _ZERO_SPAN:
            return self._params[lo]
        frac = (distance - self._distances[lo]) / span
        return self._params[lo] + frac * (self._params[hi] - self._params[lo])

    def find_distance_for_point(self, point: Point, search_step: float = 0.5) -> float:
        """Distance along the path whose sample lies closest to *point*.

        Scans ``0, step, 2*step, ...`` up to the total length; the first
        minimum wins.  A non-positive *search_step* scans the table vertices
        instead.
        """
        if search_step > 0:
            count = int(self.total_length / search_step) + 1
            candidates = (i * search_step for i in range(count))
        else:
            candidates = iter(self._distances)

        best_dist = 0.0
        best_sq = float("inf")
        for d in candidates:
            delta = self.position_at_distance(d) - point
            sq = delta.dot(delta)
            if sq < best_sq:
                best_sq = sq
                best_dist = d
        return best_dist

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_parameter_table(self, resolution: int) -> None:
        max_param = len(self.control_points) - 1
        prev = sample_spline(self.control_points, self.tension, 0.0, self._tangents).position
        cumulative = 0.0
        self._params = [0.0]
        self._points = [prev]
        self._distances = [0.0]

        for i in range(1, resolution + 1):
            param = i / resolution * max_param
            pos = sample_spline(self.control_points, self.tension, param, self._tangents).position
            cumulative += (pos - prev).length()
            self._params.append(param)
            self._points.append(pos)
            self._distances.append(cumulative)
            prev = pos


def build_path_sampler(
    control_points: list[Point],
    basis: SplineBasis = SplineBasis.HERMITE,
    tension: float = 0.5,
    table_resolution: int = 500,
    segments_per_span: int = 30,
) -> PathSampler:
    """Build a :class:`PathSampler` over *control_points*."""
    return PathSampler(
        control_points,
        basis=basis,
        tension=tension,
        table_resolution=table_resolution,
        segments_per_span=segments_per_span,
    )
