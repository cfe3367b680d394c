"""Tests for training-run handler movement."""

from __future__ import annotations

import pytest

from hoopers_sim.course.models import Point
from hoopers_sim.path.sampler import PathSampler
from hoopers_sim.path.spline import SplineBasis
from hoopers_sim.training.handler import trailing_handler_position, walk_towards


class TestTrailingHandler:
    def test_behind_and_to_the_side(self):
        sampler = PathSampler([Point(0, 0), Point(10, 0), Point(20, 0)], basis=SplineBasis.CATMULL_ROM)
        pos = trailing_handler_position(sampler, 8.0, trail=3.0, lateral=2.0)
        assert pos.x == pytest.approx(5.0)
        assert pos.y == pytest.approx(-2.0)

    def test_never_behind_the_start(self):
        sampler = PathSampler([Point(0, 0), Point(10, 0)], basis=SplineBasis.CATMULL_ROM)
        pos = trailing_handler_position(sampler, 1.0, trail=3.0, lateral=0.0)
        assert pos == Point(0, 0)


class TestWalkTowards:
    def test_moves_at_walking_speed(self):
        pos = walk_towards(Point(0, 0), Point(3, 4), speed=3.0, dt=0.5, arrive_eps=0.05)
        assert pos.x == pytest.approx(0.9)
        assert pos.y == pytest.approx(1.2)

    def test_does_not_overshoot(self):
        assert walk_towards(Point(0, 0), Point(3, 4), speed=3.0, dt=10.0, arrive_eps=0.05) == Point(3, 4)

    def test_snaps_within_epsilon_and_holds(self):
        target = Point(3, 4)
        pos = walk_towards(Point(3.01, 4.0), target, speed=3.0, dt=0.016, arrive_eps=0.05)
        assert pos == target
        assert walk_towards(pos, target, speed=3.0, dt=0.016, arrive_eps=0.05) == target
