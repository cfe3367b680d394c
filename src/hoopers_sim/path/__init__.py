"""Spline evaluation and arc-length sampling."""

from hoopers_sim.path.sampler import PathSampler, build_path_sampler
from hoopers_sim.path.spline import (
    SplineBasis,
    SplineSample,
    catmull_rom_spline,
    generate_spline_points,
    sample_spline,
)

__all__ = [
    "PathSampler",
    "SplineBasis",
    "SplineSample",
    "build_path_sampler",
    "catmull_rom_spline",
    "generate_spline_points",
    "sample_spline",
]
