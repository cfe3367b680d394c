"""SimulationService: headless frame loops behind the Web API."""

from __future__ import annotations

import logging

from hoopers_sim.config import Settings, clamp_dt
from hoopers_sim.course.control_points import extract_control_points
from hoopers_sim.course.models import Point
from hoopers_sim.path.sampler import PathSampler
from hoopers_sim.path.spline import SplineBasis, catmull_rom_spline, generate_spline_points
from hoopers_sim.playback.driver import PlaybackDriver
from hoopers_sim.training.engine import RunStateMachine
from hoopers_sim.training.models import TrainingConfig, format_run_time
from hoopers_sim.web.schemas import (
    DecisionPointModel,
    PathRequest,
    PathResponse,
    PlaybackFrameModel,
    PlaybackRequest,
    PlaybackResponse,
    PointModel,
    RunFrameModel,
    RunRequest,
    RunResponse,
)

_logger = logging.getLogger(__name__)


def _pt(p: Point) -> PointModel:
    return PointModel(x=p.x, y=p.y)


class SimulationService:
    """Runs playback and training simulations to completion.

    Parameters
    ----------
    settings:
        Frame rate, delta clamp and run-time cap.  Defaults to
        :meth:`Settings.from_env`.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings.from_env()

    def _dt(self, fps: float | None) -> float:
        return clamp_dt(1.0 / (fps or self._settings.fps), self._settings.max_dt)

    # ------------------------------------------------------------------
    # Path preview
    # ------------------------------------------------------------------

    def plan_path(self, req: PathRequest) -> PathResponse:
        """Control points, length and drawable polyline in course pixels."""
        course = req.course.to_course()
        points = extract_control_points(course)
        sampler = PathSampler(points, basis=req.basis, segments_per_span=req.samples_per_segment)
        if req.basis is SplineBasis.HERMITE:
            polyline = generate_spline_points(points, 0.5, req.samples_per_segment)
        else:
            polyline = catmull_rom_spline(points, req.samples_per_segment)
        return PathResponse(
            control_points=[_pt(p) for p in points],
            total_length=sampler.total_length,
            polyline=[_pt(p) for p in polyline],
        )

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def run_playback(self, req: PlaybackRequest) -> PlaybackResponse:
        """Play the course once from start to finish at ``req.speed``."""
        driver = PlaybackDriver(req.course.to_course())
        driver.set_speed(req.speed)
        dt = self._dt(req.fps)

        first = driver.tick(0.0)
        frames = [PlaybackFrameModel(
            t=0.0,
            progress=first.progress,
            dog=_pt(first.dog_position),
            dog_heading=first.dog_heading,
            handler=_pt(first.handler_position),
        )]

        driver.toggle_play()
        t = 0.0
        while driver.state.playing and t < self._settings.max_run_seconds:
            frame = driver.tick(dt)
            t += dt
            frames.append(PlaybackFrameModel(
                t=t,
                progress=frame.progress,
                dog=_pt(frame.dog_position),
                dog_heading=frame.dog_heading,
                handler=_pt(frame.handler_position),
            ))

        _logger.info(
            "Playback of %r: %d frames, duration %.2f s at x%.1f",
            req.course.name,
            len(frames),
            driver.state.duration,
            req.speed,
        )
        return PlaybackResponse(
            duration=driver.state.duration,
            total_length=driver.path.sampler.total_length if driver.path else 0.0,
            frames=frames,
        )

    # ------------------------------------------------------------------
    # Training run
    # ------------------------------------------------------------------

    def run_training(self, req: RunRequest) -> RunResponse:
        """Run a training course with a scripted sequence of handler inputs.

        Signals and handler targets are applied on the first frame whose
        elapsed time has reached their ``at`` value.

        Raises
        ------
        ValueError
            If the training configuration is invalid.
        """
        config = TrainingConfig(handler_mode=req.handler_mode)
        machine = RunStateMachine(req.course.to_course(), config)
        dt = self._dt(req.fps)

        signals = sorted(req.signals, key=lambda e: e.at)
        targets = sorted(req.handler_targets, key=lambda e: e.at)
        si = ti = 0

        machine.start()
        frames: list[RunFrameModel] = []
        n = 0
        while machine.state.running and machine.state.elapsed_time < self._settings.max_run_seconds:
            now = machine.state.elapsed_time
            while si < len(signals) and signals[si].at <= now:
                machine.send_signal(signals[si].signal)
                si += 1
            while ti < len(targets) and targets[ti].at <= now:
                machine.move_handler_target(targets[ti].x, targets[ti].y)
                ti += 1

            frame = machine.tick(dt)
            n += 1
            if n % req.every == 0 or frame.finished:
                frames.append(RunFrameModel(
                    t=frame.elapsed_time,
                    distance=frame.distance,
                    dog=_pt(frame.dog_position),
                    handler=_pt(frame.handler_position),
                    state=frame.dog_state,
                    faults=frame.faults,
                ))

        state = machine.state
        if not state.finished:
            _logger.warning(
                "Run on %r stopped unfinished after %.1f s", req.course.name, state.elapsed_time
            )
        return RunResponse(
            finished=state.finished,
            clean=state.faults == 0,
            faults=state.faults,
            elapsed_time=state.elapsed_time,
            formatted_time=format_run_time(state.elapsed_time),
            path_length=machine.path_length,
            decision_points=[
                DecisionPointModel(
                    obstacle_index=dp.obstacle_index,
                    correct_signal=dp.correct_signal,
                    window_start=dp.window_start,
                    window_end=dp.window_end,
                    obstacle_distance=dp.obstacle_distance,
                )
                for dp in machine.decision_points
            ],
            frames=frames,
        )
