"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from hoopers_sim.web.app import app


@pytest.fixture
def client():
    """FastAPI test client."""
    with TestClient(app) as c:
        yield c


def make_course_dict(
    coords: list[tuple[float, float]] | None = None,
    course_id: str = "course-1",
    name: str = "Test course",
    ring_width: float = 25,
    ring_height: float = 35,
) -> dict:
    """Build a camelCase course payload: start, numbered hoops, finish (pixels)."""
    if coords is None:
        coords = [(100, 100), (300, 100), (500, 100)]
    equipment = []
    for i, (x, y) in enumerate(coords):
        item = {"id": f"e{i}", "type": "hoop", "x": x, "y": y, "rotation": 0}
        if i == 0:
            item["type"] = "start"
        elif i == len(coords) - 1:
            item["type"] = "finish"
        else:
            item["orderNumber"] = i
        equipment.append(item)
    return {
        "id": course_id,
        "name": name,
        "ringWidth": ring_width,
        "ringHeight": ring_height,
        "equipment": equipment,
    }
