"""Tests for arc-length parameterised path sampling."""

from __future__ import annotations

import pytest

from hoopers_sim.course.models import ORIGIN, Point
from hoopers_sim.path.sampler import PathSampler, compute_arc_lengths, sample_polyline_at_distance
from hoopers_sim.path.spline import DEFAULT_TANGENT, SplineBasis

STRAIGHT = [Point(0, 0), Point(10, 0), Point(20, 0)]
LOOP = [Point(0, 0), Point(100, 0), Point(100, 100), Point(0, 100)]


# ---------------------------------------------------------------------------
# Polyline helpers
# ---------------------------------------------------------------------------

class TestPolylineHelpers:
    def test_arc_lengths(self):
        assert compute_arc_lengths([Point(0, 0), Point(3, 4), Point(3, 10)]) == [0.0, 5.0, 11.0]

    def test_sample_interpolates_and_clamps(self):
        path = [Point(0, 0), Point(10, 0), Point(10, 10)]
        lengths = compute_arc_lengths(path)
        assert sample_polyline_at_distance(path, lengths, 15.0) == Point(10, 5)
        assert sample_polyline_at_distance(path, lengths, -1.0) == Point(0, 0)
        assert sample_polyline_at_distance(path, lengths, 99.0) == Point(10, 10)

    def test_empty_path(self):
        assert sample_polyline_at_distance([], [0.0], 5.0) == ORIGIN


# ---------------------------------------------------------------------------
# PathSampler
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("basis", list(SplineBasis))
class TestPathSamplerBothBases:
    def test_endpoints(self, basis):
        sampler = PathSampler(LOOP, basis=basis)
        start = sampler.sample_at(0.0).position
        end = sampler.sample_at(1.0).position
        assert start.x == pytest.approx(0.0, abs=1e-6)
        assert start.y == pytest.approx(0.0, abs=1e-6)
        assert end.x == pytest.approx(0.0, abs=1e-6)
        assert end.y == pytest.approx(100.0, abs=1e-6)

    def test_straight_line_length_and_direction(self, basis):
        sampler = PathSampler(STRAIGHT, basis=basis)
        assert sampler.total_length == pytest.approx(20.0, rel=1e-6)
        mid = sampler.sample_at(0.5)
        assert mid.position.x == pytest.approx(10.0, abs=0.05)
        assert mid.tangent.x == pytest.approx(1.0)
        assert mid.tangent.y == pytest.approx(0.0, abs=1e-9)

    def test_tangent_is_unit_length(self, basis):
        sampler = PathSampler(LOOP, basis=basis)
        for i in range(11):
            assert sampler.sample_at(i / 10).tangent.length() == pytest.approx(1.0)

    def test_fraction_is_clamped(self, basis):
        sampler = PathSampler(LOOP, basis=basis)
        assert sampler.sample_at(-0.5).position == sampler.sample_at(0.0).position
        assert sampler.sample_at(7.0).position == sampler.sample_at(1.0).position

    def test_length_grows_as_points_are_appended(self, basis):
        points = [Point(0, 0), Point(10, 2), Point(20, -1), Point(30, 3), Point(40, 0)]
        lengths = [PathSampler(points[:n], basis=basis).total_length for n in range(2, len(points) + 1)]
        assert lengths == sorted(lengths)


class TestHermiteSampler:
    def test_equal_distance_steps_give_equal_chords(self):
        sampler = PathSampler(LOOP)
        steps = 50
        positions = [sampler.sample_at(i / steps).position for i in range(steps + 1)]
        chords = [(b - a).length() for a, b in zip(positions, positions[1:])]
        assert max(chords) / min(chords) < 1.1

    def test_parameter_lookup_is_monotonic(self):
        sampler = PathSampler(LOOP)
        params = [sampler.distance_to_param(d) for d in range(0, int(sampler.total_length) + 5)]
        assert params == sorted(params)
        assert params[0] == 0.0
        assert params[-1] == pytest.approx(len(LOOP) - 1)


class TestCatmullRomSampler:
    def test_polyline_resolution(self):
        sampler = PathSampler(LOOP, basis=SplineBasis.CATMULL_ROM, segments_per_span=8)
        assert len(sampler.polyline()) == (len(LOOP) - 1) * 8 + 1

    def test_direction_at_the_end_of_the_path(self):
        sampler = PathSampler(STRAIGHT, basis=SplineBasis.CATMULL_ROM)
        direction = sampler.direction_at_distance(sampler.total_length)
        assert direction.x == pytest.approx(1.0)

    def test_find_distance_for_point(self):
        sampler = PathSampler(STRAIGHT, basis=SplineBasis.CATMULL_ROM)
        assert sampler.find_distance_for_point(Point(10, 0)) == pytest.approx(10.0, abs=0.5)
        assert sampler.find_distance_for_point(Point(-5, 3)) == 0.0
        assert sampler.find_distance_for_point(Point(25, 0)) == pytest.approx(20.0, abs=0.6)

    def test_find_distance_scans_vertices_without_step(self):
        sampler = PathSampler(STRAIGHT, basis=SplineBasis.CATMULL_ROM, segments_per_span=10)
        assert sampler.find_distance_for_point(Point(10, 1), search_step=0) == pytest.approx(10.0, abs=1e-6)


class TestDegenerateSampler:
    def test_no_points(self):
        sampler = PathSampler([])
        assert sampler.is_degenerate
        assert sampler.total_length == 0.0
        sample = sampler.sample_at(0.5)
        assert sample.position == ORIGIN
        assert sample.tangent == DEFAULT_TANGENT

    @pytest.mark.parametrize("basis", list(SplineBasis))
    def test_single_point(self, basis):
        sampler = PathSampler([Point(7, 8)], basis=basis)
        assert sampler.total_length == 0.0
        assert sampler.sample_at(1.0).position == Point(7, 8)
        assert sampler.direction_at_distance(3.0) == DEFAULT_TANGENT
        assert sampler.find_distance_for_point(Point(0, 0)) == 0.0

    def test_invalid_resolution(self):
        with pytest.raises(ValueError):
            PathSampler(STRAIGHT, table_resolution=0)
