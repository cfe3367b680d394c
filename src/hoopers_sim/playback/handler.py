"""Handler placement for playback mode."""

from __future__ import annotations

from hoopers_sim.course.models import Point


def compute_handler_position(
    dog_pos: Point,
    dog_tangent: Point,
    ring_width: float,
    ring_height: float,
    offset: float,
    prev: Point | None,
    smoothing: float,
    padding: float = 10.0,
) -> Point:
    """Place the handler beside the dog, on the side facing the ring centre.

    Of the two perpendiculars to the dog's travel direction, the one with the
    larger dot product towards the ring centre is used.  The raw position is
    clamped inside the ring minus *padding*, then smoothed from *prev*
    (``prev + smoothing * (raw - prev)``).  With ``prev=None`` the raw
    position is returned directly.

    All arguments share one unit (pixels in the playback engine).
    """
    perp_left = Point(-dog_tangent.y, dog_tangent.x)
    perp_right = Point(dog_tangent.y, -dog_tangent.x)

    to_center = Point(ring_width / 2 - dog_pos.x, ring_height / 2 - dog_pos.y)
    perp = perp_left if perp_left.dot(to_center) > perp_right.dot(to_center) else perp_right

    hx = dog_pos.x + perp.x * offset
    hy = dog_pos.y + perp.y * offset

    hx = max(padding, min(ring_width - padding, hx))
    hy = max(padding, min(ring_height - padding, hy))

    if prev is not None:
        hx = prev.x + smoothing * (hx - prev.x)
        hy = prev.y + smoothing * (hy - prev.y)

    return Point(hx, hy)
