"""PlaybackDriver advances a single progress value along the run path.

The host calls :meth:`PlaybackDriver.tick` once per rendered frame with the
(already clamped) wall-clock delta; transport commands may be called at any
time between ticks.
"""

from __future__ import annotations

import functools
import logging
import math
from dataclasses import dataclass, replace

from hoopers_sim.course.control_points import extract_control_points
from hoopers_sim.course.models import Course, Point
from hoopers_sim.path.sampler import PathSampler, build_path_sampler
from hoopers_sim.path.spline import SplineBasis, generate_spline_points
from hoopers_sim.playback.handler import compute_handler_position
from hoopers_sim.playback.models import PlaybackConfig, PlaybackFrame, PlaybackState

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackPath:
    """Course-derived geometry for playback, in pixels."""

    control_points: tuple[Point, ...]
    sampler: PathSampler
    polyline: tuple[Point, ...]

    duration: float
    """Seconds to run the whole path at the configured dog speed."""

    ring_width: float
    ring_height: float


@functools.lru_cache(maxsize=16)
def build_playback_path(course: Course, config: PlaybackConfig) -> PlaybackPath:
    """Derive the playback geometry for *course* (memoised per course content)."""
    points = extract_control_points(course)
    sampler = build_path_sampler(
        points,
        basis=SplineBasis.HERMITE,
        tension=config.tension,
        table_resolution=config.table_resolution,
    )
    polyline = generate_spline_points(points, config.tension, 50) if len(points) >= 2 else []
    duration = sampler.total_length / config.scale / config.dog_speed
    return PlaybackPath(
        control_points=tuple(points),
        sampler=sampler,
        polyline=tuple(polyline),
        duration=duration,
        ring_width=course.ring_width * config.scale,
        ring_height=course.ring_height * config.scale,
    )


class PlaybackDriver:
    """Progress-based playback of a course run.

    Parameters
    ----------
    course:
        Course to play.  ``None`` leaves the driver inert until
        :meth:`load_course` is called.
    config:
        Speeds, offsets and smoothing; defaults to :class:`PlaybackConfig`.
    """

    def __init__(self, course: Course | None = None, config: PlaybackConfig | None = None) -> None:
        self._cfg = config or PlaybackConfig()
        self.state = PlaybackState()
        self._course: Course | None = None
        self._path: PlaybackPath | None = None
        self._handler_prev: Point | None = None
        if course is not None:
            self.load_course(course)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> PlaybackConfig:
        return self._cfg

    @property
    def course(self) -> Course | None:
        return self._course

    @property
    def path(self) -> PlaybackPath | None:
        return self._path

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def load_course(self, course: Course) -> None:
        """Switch to *course*; rewinds to the start and stops playback."""
        self._course = course
        self._path = build_playback_path(course, self._cfg)
        self._handler_prev = None
        self.state = replace(self.state, duration=self._path.duration, progress=0.0, playing=False)
        _logger.debug(
            "Loaded course %r: %d control points, %.1f px, %.2f s",
            course.name,
            len(self._path.control_points),
            self._path.sampler.total_length,
            self._path.duration,
        )

    def toggle_play(self) -> None:
        """Play/pause; at the end of the path, restart from the beginning."""
        if self.state.progress >= 1.0:
            self._handler_prev = None
            self.state = replace(self.state, playing=True, progress=0.0)
        else:
            self.state = replace(self.state, playing=not self.state.playing)

    def seek(self, progress: float) -> None:
        """Jump to *progress* (clamped to [0, 1]); the playing flag is unchanged."""
        self._handler_prev = None
        self.state = replace(self.state, progress=max(0.0, min(1.0, progress)))

    def step_forward(self) -> None:
        self.state = replace(
            self.state,
            playing=False,
            progress=min(1.0, self.state.progress + self._cfg.step_size),
        )

    def step_back(self) -> None:
        self._handler_prev = None
        self.state = replace(
            self.state,
            playing=False,
            progress=max(0.0, self.state.progress - self._cfg.step_size),
        )

    def restart(self) -> None:
        self._handler_prev = None
        self.state = replace(self.state, progress=0.0, playing=False)

    def reset(self) -> None:
        """Rewind, stop and return to normal speed.

        The duration of the loaded path is kept; with no course it is 0.
        """
        self._handler_prev = None
        self.state = PlaybackState(duration=self._path.duration if self._path else 0.0)

    def set_speed(self, speed: float) -> None:
        """Set the time multiplier; non-positive values are ignored."""
        if speed > 0:
            self.state = replace(self.state, speed=speed)

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def tick(self, dt: float) -> PlaybackFrame:
        """Advance playback by *dt* seconds of real time and return the new frame.

        Progress stops exactly at 1.0 and playback halts there.  The handler
        smoothing memory advances once per call.
        """
        state = self.state
        if state.playing:
            if state.duration <= 0:
                state = replace(state, progress=1.0, playing=False)
            else:
                progress = min(1.0, state.progress + (dt * state.speed) / state.duration)
                if progress >= 1.0:
                    state = replace(state, progress=1.0, playing=False)
                else:
                    state = replace(state, progress=progress)
        self.state = state

        frame = self._build_frame(self._smoothing_factor(dt))
        self._handler_prev = frame.handler_position
        return frame

    def frame(self) -> PlaybackFrame:
        """Current frame without advancing time or handler smoothing."""
        if self._handler_prev is not None:
            return self._build_frame(0.0)
        return self._build_frame(1.0)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _smoothing_factor(self, dt: float) -> float:
        if self._cfg.smoothing_rate is None:
            return self._cfg.handler_smoothing
        return 1.0 - math.exp(-self._cfg.smoothing_rate * dt)

    def _build_frame(self, smoothing: float) -> PlaybackFrame:
        state = self.state
        path = self._path
        if path is None:
            origin = Point(0.0, 0.0)
            return PlaybackFrame(
                progress=state.progress,
                playing=state.playing,
                dog_position=origin,
                dog_tangent=Point(1.0, 0.0),
                dog_heading=0.0,
                handler_position=origin,
                handler_heading=0.0,
            )

        sample = path.sampler.sample_at(state.progress)
        heading = math.atan2(sample.tangent.y, sample.tangent.x)
        handler = compute_handler_position(
            sample.position,
            sample.tangent,
            path.ring_width,
            path.ring_height,
            self._cfg.handler_offset_px,
            self._handler_prev,
            smoothing,
            self._cfg.ring_padding,
        )
        return PlaybackFrame(
            progress=state.progress,
            playing=state.playing,
            dog_position=sample.position,
            dog_tangent=sample.tangent,
            dog_heading=heading,
            handler_position=handler,
            handler_heading=heading,
        )
