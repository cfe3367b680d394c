"""Decision points: the turn each interior obstacle asks for, and where to ask.

Turn direction uses canvas coordinates, where y grows downward: a positive
``incoming × outgoing`` cross product is a clockwise, i.e. right, turn.
"""

from __future__ import annotations

import math

from hoopers_sim.course.models import Point
from hoopers_sim.path.sampler import PathSampler
from hoopers_sim.training.models import DecisionPoint, Signal, TrainingConfig

_MIN_DENOM = 1e-12


def turn_angle(incoming: Point, outgoing: Point) -> float:
    """Unsigned angle in radians between two directions.

    Returns 0.0 if either vector is (near) zero length.  The cosine is clamped to
    [-1, 1] before ``acos``.
    """
    mag_in = incoming.length()
    mag_out = outgoing.length()
    denom = mag_in * mag_out
    if denom <= _MIN_DENOM:
        return 0.0
    cos = incoming.dot(outgoing) / denom
    return math.acos(max(-1.0, min(1.0, cos)))


def classify_turn(prev: Point, curr: Point, nxt: Point, go_on_angle_deg: float = 30.0) -> Signal:
    """Signal the handler should give at *curr* when running prev → curr → nxt."""
    incoming = curr - prev
    outgoing = nxt - curr
    if math.degrees(turn_angle(incoming, outgoing)) < go_on_angle_deg:
        return Signal.GO_ON
    return Signal.RIGHT if incoming.cross(outgoing) > 0 else Signal.LEFT


def compute_decision_points(
    waypoints: list[Point],
    sampler: PathSampler,
    config: TrainingConfig,
) -> list[DecisionPoint]:
    """One :class:`DecisionPoint` per interior waypoint (first and last excluded)."""
    decisions: list[DecisionPoint] = []
    for i in range(1, len(waypoints) - 1):
        signal = classify_turn(waypoints[i - 1], waypoints[i], waypoints[i + 1], config.go_on_angle_deg)
        obstacle_distance = sampler.find_distance_for_point(waypoints[i], config.search_step)
        decisions.append(DecisionPoint(
            obstacle_index=i,
            correct_signal=signal,
            window_start=max(0.0, obstacle_distance - config.signal_window_before),
            window_end=max(0.0, obstacle_distance - config.signal_window_close),
            obstacle_distance=obstacle_distance,
        ))
    return decisions
