"""Run path control points: start → numbered obstacles → finish."""

from __future__ import annotations

from hoopers_sim.course.models import Course, EquipmentType, Point


def extract_control_points(course: Course, scale: float = 1.0) -> list[Point]:
    """Return the ordered waypoints the run path must pass through.

    Args:
        course: Course to read.
        scale: Divisor applied to every coordinate.  Use ``1.0`` to stay in
            pixels or :data:`~hoopers_sim.course.models.SCALE` for metres.

    Returns:
        ``[start?, *numbered ascending, finish?]``.  Only the first start and
        the first finish marker are used.  Gaps and duplicate order numbers
        are not validated; the stable sort is the only normalisation.
    """
    points: list[Point] = []

    start = course.find_first(EquipmentType.START)
    if start is not None:
        points.append(Point(start.x / scale, start.y / scale))

    for eq in course.ordered_obstacles():
        points.append(Point(eq.x / scale, eq.y / scale))

    finish = course.find_first(EquipmentType.FINISH)
    if finish is not None:
        points.append(Point(finish.x / scale, finish.y / scale))

    return points
