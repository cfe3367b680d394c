"""Training-run state machine.

Behaviour states::

    idle → approaching ⇄ hesitating → {committed | recovering} → approaching → … → finished
                 ↕ waiting (via WAIT / GO signals)

The transition functions (:func:`start_run`, :func:`apply_signal`,
:func:`move_handler_target`, :func:`advance`) are pure: they read one
:class:`SimulationState` snapshot and return a new one.  They never raise;
commands that make no sense in the current state return it unchanged.
:class:`RunStateMachine` owns a state and wraps them for a frame loop.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace

from hoopers_sim.course.coordinates import heading_to_world_yaw
from hoopers_sim.course.models import ORIGIN, Course, Point
from hoopers_sim.training.geometry import RunGeometry, build_run_geometry
from hoopers_sim.training.handler import trailing_handler_position, walk_towards
from hoopers_sim.training.models import (
    INITIAL_STATE,
    DecisionPoint,
    DogBehaviorState,
    HandlerMode,
    RunFrame,
    RunResult,
    Signal,
    SimulationState,
    TrainingConfig,
)

_logger = logging.getLogger(__name__)

_SLOW_STATES = (DogBehaviorState.HESITATING, DogBehaviorState.RECOVERING)


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------

def start_run(geometry: RunGeometry, config: TrainingConfig) -> SimulationState:
    """Fresh running state with the dog at the start and the handler beside it."""
    return replace(
        INITIAL_STATE,
        running=True,
        dog_state=DogBehaviorState.APPROACHING,
        dog_speed=config.dog_speed,
        handler_pos=geometry.waypoints[0] if geometry.waypoints else ORIGIN,
    )


def apply_signal(state: SimulationState, signal: Signal, config: TrainingConfig) -> SimulationState:
    """Apply a handler signal.

    * ``WAIT`` stops the dog (it decelerates to a standstill).
    * ``GO`` releases a waiting dog at full speed.  A ``GO`` while the dog is
      not waiting is dropped rather than queued, so it can never be judged
      as a wrong turn signal.
    * Directional signals replace the queued signal, judged when the dog
      reaches the next decision window.
    """
    if not state.running or state.finished:
        return state

    if signal is Signal.WAIT:
        return replace(state, dog_state=DogBehaviorState.WAITING, dog_speed=0.0)
    if signal is Signal.GO:
        if state.dog_state is DogBehaviorState.WAITING:
            return replace(state, dog_state=DogBehaviorState.APPROACHING, dog_speed=config.dog_speed)
        return state
    return replace(state, current_signal=signal)


def move_handler_target(
    state: SimulationState,
    target: Point,
    config: TrainingConfig,
) -> SimulationState:
    """Give the walking handler a new destination (``WALK`` mode, running only)."""
    if config.handler_mode is not HandlerMode.WALK:
        return state
    if not state.running or state.finished:
        return state
    return replace(state, handler_target=target)


def _passed(decisions: tuple[DecisionPoint, ...], index: int) -> DecisionPoint | None:
    """The most recently consumed decision point, if any."""
    if 0 < index <= len(decisions):
        return decisions[index - 1]
    return None


def advance(
    state: SimulationState,
    dt: float,
    geometry: RunGeometry,
    config: TrainingConfig,
) -> SimulationState:
    """Advance a running state by *dt* seconds.

    At most one decision point is judged per call.  *dt* is trusted as given;
    clamp it in the frame loop.
    """
    if not state.running or state.finished:
        return state

    decisions = geometry.decision_points
    distance = state.dog_distance
    speed = state.dog_speed
    dog_state = state.dog_state
    faults = state.faults
    next_index = state.next_decision_index
    signal = state.current_signal
    obstacle_index = state.current_obstacle_index

    # 1. Move along the path
    if dog_state is DogBehaviorState.WAITING:
        speed = max(0.0, speed - dt * config.wait_deceleration)
    elif dog_state in _SLOW_STATES:
        speed = config.hesitate_speed
    else:
        speed = config.dog_speed
    distance += speed * dt

    if dog_state is DogBehaviorState.RECOVERING:
        passed = _passed(decisions, next_index)
        if passed is not None and distance > passed.obstacle_distance + config.recover_margin:
            dog_state = DogBehaviorState.APPROACHING
            speed = config.dog_speed

    # 2. Judge the next decision point
    if next_index < len(decisions):
        dp = decisions[next_index]

        if dp.window_start <= distance < dp.window_end:
            if signal is not None:
                if signal is Signal.GO_ON or signal is dp.correct_signal:
                    dog_state = DogBehaviorState.APPROACHING
                    speed = config.dog_speed
                else:
                    dog_state = DogBehaviorState.RECOVERING
                    faults += 1
                next_index += 1
                obstacle_index = dp.obstacle_index
                signal = None
            elif dog_state not in (DogBehaviorState.HESITATING, DogBehaviorState.WAITING):
                dog_state = DogBehaviorState.HESITATING

        if distance >= dp.window_end and next_index == state.next_decision_index:
            if dog_state is DogBehaviorState.HESITATING:
                # No signal in time: the dog guesses, scored as a fault
                dog_state = DogBehaviorState.RECOVERING
                faults += 1
            elif dog_state is DogBehaviorState.APPROACHING:
                dog_state = DogBehaviorState.COMMITTED
            next_index += 1
            obstacle_index = dp.obstacle_index
            signal = None

    if dog_state is DogBehaviorState.COMMITTED:
        passed = _passed(decisions, next_index)
        if passed is not None and distance > passed.obstacle_distance + config.commit_margin:
            dog_state = DogBehaviorState.APPROACHING

    # 3. Finish line
    finished = False
    if distance >= geometry.path_length:
        distance = geometry.path_length
        speed = 0.0
        finished = True
        dog_state = DogBehaviorState.FINISHED

    # 4. Handler
    if config.handler_mode is HandlerMode.WALK:
        handler_pos = state.handler_pos
        if state.handler_target is not None:
            handler_pos = walk_towards(
                handler_pos,
                state.handler_target,
                config.handler_walk_speed,
                dt,
                config.handler_arrive_epsilon,
            )
    else:
        handler_pos = trailing_handler_position(
            geometry.sampler,
            distance,
            config.handler_offset,
            config.handler_lateral_offset,
        )

    return SimulationState(
        dog_distance=distance,
        dog_speed=speed,
        dog_state=dog_state,
        handler_pos=handler_pos,
        handler_target=state.handler_target,
        next_decision_index=next_index,
        running=not finished,
        finished=finished,
        elapsed_time=state.elapsed_time + dt,
        faults=faults,
        current_signal=signal,
        current_obstacle_index=obstacle_index,
    )


# ---------------------------------------------------------------------------
# Stateful wrapper
# ---------------------------------------------------------------------------

class RunStateMachine:
    """Interactive training run over one course.

    Parameters
    ----------
    course:
        Course to run.  Coordinates are converted to metres with
        ``config.scale``.
    config:
        Speeds, windows and handler behaviour; defaults to
        :class:`TrainingConfig`.
    """

    def __init__(self, course: Course, config: TrainingConfig | None = None) -> None:
        self._cfg = config or TrainingConfig()
        self._course = course
        self._geometry = build_run_geometry(course, self._cfg)
        self.state = INITIAL_STATE

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> TrainingConfig:
        return self._cfg

    @property
    def geometry(self) -> RunGeometry:
        return self._geometry

    @property
    def decision_points(self) -> tuple[DecisionPoint, ...]:
        return self._geometry.decision_points

    @property
    def waypoints(self) -> tuple[Point, ...]:
        return self._geometry.waypoints

    @property
    def path_length(self) -> float:
        return self._geometry.path_length

    @property
    def expected_signal(self) -> Signal | None:
        """Correct signal for the next decision point, or ``None``."""
        idx = self.state.next_decision_index
        if idx < len(self.decision_points):
            return self.decision_points[idx].correct_signal
        return None

    @property
    def current_obstacle_name(self) -> str:
        idx = self.state.next_decision_index
        if idx < len(self.decision_points):
            return self._geometry.waypoint_labels[self.decision_points[idx].obstacle_index]
        return "Finished!" if self.state.finished else ""

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> None:
        self.state = start_run(self._geometry, self._cfg)
        _logger.debug(
            "Run started on %r: %.1f m, %d decision point(s)",
            self._course.name,
            self.path_length,
            len(self.decision_points),
        )

    def reset(self) -> None:
        self.state = INITIAL_STATE

    def send_signal(self, signal: Signal | str) -> None:
        self.state = apply_signal(self.state, Signal(signal), self._cfg)

    def move_handler_target(self, x: float, y: float) -> None:
        self.state = move_handler_target(self.state, Point(x, y), self._cfg)

    def tick(self, dt: float) -> RunFrame:
        """Advance the run by *dt* seconds and return the new frame."""
        prev = self.state
        self.state = advance(prev, dt, self._geometry, self._cfg)

        if self.state.faults > prev.faults:
            _logger.info(
                "Fault at %s (expected %s), total %d",
                self._geometry.waypoint_labels[self.state.current_obstacle_index],
                self.decision_points[self.state.next_decision_index - 1].correct_signal.value,
                self.state.faults,
            )
        if self.state.dog_state is not prev.dog_state:
            _logger.debug(
                "Dog %s → %s at %.2f m",
                prev.dog_state.value,
                self.state.dog_state.value,
                self.state.dog_distance,
            )
        if self.state.finished and not prev.finished:
            _logger.info(
                "Run finished in %.2f s with %d fault(s)",
                self.state.elapsed_time,
                self.state.faults,
            )
        return self.frame()

    def frame(self) -> RunFrame:
        """Renderer view of the current state."""
        state = self.state
        sampler = self._geometry.sampler
        dog_pos = sampler.position_at_distance(state.dog_distance)
        dog_dir = sampler.direction_at_distance(state.dog_distance)

        if self._cfg.handler_mode is HandlerMode.WALK:
            handler_dir = (dog_pos - state.handler_pos).normalized()
        else:
            handler_dir = sampler.direction_at_distance(
                max(0.0, state.dog_distance - self._cfg.handler_offset)
            )

        length = self.path_length
        return RunFrame(
            dog_position=dog_pos,
            dog_heading=math.atan2(dog_dir.y, dog_dir.x),
            dog_yaw=heading_to_world_yaw(dog_dir),
            handler_position=state.handler_pos,
            handler_heading=math.atan2(handler_dir.y, handler_dir.x),
            handler_yaw=heading_to_world_yaw(handler_dir),
            dog_state=state.dog_state,
            faults=state.faults,
            elapsed_time=state.elapsed_time,
            distance=state.dog_distance,
            progress=state.dog_distance / length if length > 0 else (1.0 if state.finished else 0.0),
            finished=state.finished,
            next_obstacle=self.current_obstacle_name,
            expected_signal=self.expected_signal,
        )

    def result(self) -> RunResult | None:
        """Time and faults of a finished run, ``None`` while it is still going."""
        if not self.state.finished:
            return None
        return RunResult(elapsed_time=self.state.elapsed_time, faults=self.state.faults)
