"""Handler movement during a training run."""

from __future__ import annotations

from hoopers_sim.course.models import Point
from hoopers_sim.path.sampler import PathSampler


def trailing_handler_position(
    sampler: PathSampler,
    dog_distance: float,
    trail: float,
    lateral: float,
) -> Point:
    """Handler *trail* metres behind the dog on the path, *lateral* metres aside.

    The lateral step is along ``(dir.y, -dir.x)``, the left-hand side of the
    direction of travel in canvas coordinates.
    """
    handler_dist = max(0.0, dog_distance - trail)
    on_path = sampler.position_at_distance(handler_dist)
    direction = sampler.direction_at_distance(handler_dist)
    return Point(on_path.x + direction.y * lateral, on_path.y - direction.x * lateral)


def walk_towards(position: Point, target: Point, speed: float, dt: float, arrive_eps: float) -> Point:
    """Move *position* towards *target* by at most ``speed * dt``.

    Snaps onto the target once within *arrive_eps*, after which it holds.
    """
    delta = target - position
    remaining = delta.length()
    if remaining <= arrive_eps:
        return target
    step = speed * dt
    if step >= remaining:
        return target
    return position + delta.scale(step / remaining)
