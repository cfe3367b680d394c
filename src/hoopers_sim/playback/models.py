"""Playback data structures."""

from __future__ import annotations

from dataclasses import dataclass

from hoopers_sim.course.models import SCALE, Point


@dataclass(frozen=True)
class PlaybackConfig:
    """Tuning for the progress-driven playback engine.

    Distances are in metres unless noted; the engine itself works in canvas
    pixels and converts with :attr:`scale`.

    Args:
        dog_speed: Dog running speed in m/s; sets the playback duration.
        handler_offset: Distance of the handler from the dog, in metres.
        handler_smoothing: Per-tick exponential smoothing factor in (0, 1].
        smoothing_rate: When set, replaces *handler_smoothing* with the
            frame-rate independent factor ``1 - exp(-smoothing_rate * dt)``.
        step_size: Progress increment for single-step transport controls.
        ring_padding: Minimum handler distance from the ring edge, in pixels.
        tension: Cardinal spline tension.
        table_resolution: Arc-length table size.
        scale: Pixels per metre.
        speeds: Speed multipliers offered by the transport controls.
    """

    dog_speed: float = 3.5
    handler_offset: float = 3.0
    handler_smoothing: float = 0.12
    smoothing_rate: float | None = None
    step_size: float = 0.02
    ring_padding: float = 10.0
    tension: float = 0.5
    table_resolution: int = 500
    scale: float = SCALE
    speeds: tuple[float, ...] = (0.5, 1.0, 1.5, 2.0)

    def __post_init__(self) -> None:
        if self.dog_speed <= 0:
            raise ValueError("dog_speed must be > 0")
        if not 0.0 < self.handler_smoothing <= 1.0:
            raise ValueError("handler_smoothing must be in (0, 1]")
        if self.smoothing_rate is not None and self.smoothing_rate <= 0:
            raise ValueError("smoothing_rate must be > 0")
        if self.scale <= 0:
            raise ValueError("scale must be > 0")

    @property
    def handler_offset_px(self) -> float:
        return self.handler_offset * self.scale


@dataclass(frozen=True)
class PlaybackState:
    """Transport state of a playback run."""

    playing: bool = False

    progress: float = 0.0
    """Fraction of the path covered [0.0, 1.0]."""

    speed: float = 1.0
    """Multiplier applied to real elapsed time."""

    duration: float = 0.0
    """Seconds needed to cover the full path at speed 1."""


@dataclass(frozen=True)
class PlaybackFrame:
    """Everything a renderer needs for one playback frame (pixel units)."""

    progress: float
    playing: bool
    dog_position: Point
    dog_tangent: Point

    dog_heading: float
    """Radians, ``atan2(ty, tx)`` in canvas coordinates."""

    handler_position: Point
    handler_heading: float
