"""Course-derived geometry for training runs, memoised per course."""

from __future__ import annotations

import functools
from dataclasses import dataclass

from hoopers_sim.course.control_points import extract_control_points
from hoopers_sim.course.models import Course, EquipmentType, Point
from hoopers_sim.path.sampler import PathSampler, build_path_sampler
from hoopers_sim.path.spline import SplineBasis
from hoopers_sim.training.decisions import compute_decision_points
from hoopers_sim.training.models import DecisionPoint, TrainingConfig


@dataclass(frozen=True)
class RunGeometry:
    """Waypoints, sampled path and decision points of one course (metres)."""

    waypoints: tuple[Point, ...]
    sampler: PathSampler
    decision_points: tuple[DecisionPoint, ...]

    waypoint_labels: tuple[str, ...]
    """HUD label for each waypoint, e.g. ``"#3 barrel"``."""

    @property
    def path_length(self) -> float:
        return self.sampler.total_length


def _waypoint_labels(course: Course) -> list[str]:
    labels: list[str] = []
    if course.find_first(EquipmentType.START) is not None:
        labels.append("Start")
    labels.extend(f"#{eq.order_number} {eq.type.value}" for eq in course.ordered_obstacles())
    if course.find_first(EquipmentType.FINISH) is not None:
        labels.append("Finish")
    return labels


@functools.lru_cache(maxsize=16)
def build_run_geometry(course: Course, config: TrainingConfig) -> RunGeometry:
    """Derive the training geometry for *course*.

    Recomputed only when the course content or config changes.
    """
    waypoints = extract_control_points(course, scale=config.scale)
    sampler = build_path_sampler(
        waypoints,
        basis=SplineBasis.CATMULL_ROM,
        segments_per_span=config.segments_per_span,
    )
    decisions = compute_decision_points(waypoints, sampler, config)
    return RunGeometry(
        waypoints=tuple(waypoints),
        sampler=sampler,
        decision_points=tuple(decisions),
        waypoint_labels=tuple(_waypoint_labels(course)),
    )
