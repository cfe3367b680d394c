"""Training-run data structures.

All distances are metres along the run path; positions are metres in the
canvas frame (y grows downward).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from hoopers_sim.course.models import ORIGIN, SCALE, Point


class Signal(str, Enum):
    """Handler signals."""

    LEFT = "left"
    RIGHT = "right"
    GO_ON = "go_on"
    WAIT = "wait"
    GO = "go"

    @property
    def is_directional(self) -> bool:
        return self in (Signal.LEFT, Signal.RIGHT, Signal.GO_ON)


class DogBehaviorState(str, Enum):
    IDLE = "idle"
    APPROACHING = "approaching"
    COMMITTED = "committed"
    HESITATING = "hesitating"
    WAITING = "waiting"
    RECOVERING = "recovering"
    FINISHED = "finished"


class HandlerMode(str, Enum):
    """How the handler moves during a training run."""

    TRAILING = "trailing"
    """Fixed offset behind the dog along the path, stepped out to the side."""

    WALK = "walk"
    """Walks towards the last target given by ``move_handler_target``."""


@dataclass(frozen=True)
class TrainingConfig:
    """Tuning for the decision-based training engine.

    Args:
        dog_speed: Full running speed (m/s).
        hesitate_speed: Speed while hesitating or recovering (m/s).
        wait_deceleration: Deceleration while waiting (m/s²).
        handler_offset: Trailing distance behind the dog along the path (m).
        handler_lateral_offset: Sideways offset of the trailing handler (m).
        signal_window_before: Window opens this far before an obstacle (m).
        signal_window_close: Window closes this far before an obstacle (m).
        go_on_angle_deg: Turns sharper than this need a directional signal.
        commit_margin: Distance past the obstacle before a committed dog
            resumes approaching (m).
        recover_margin: Same, for a recovering dog (m).
        segments_per_span: Catmull-Rom polyline resolution.
        search_step: Scan step when anchoring obstacles to the path (m).
        scale: Pixels per metre of the course coordinates.
        handler_mode: See :class:`HandlerMode`.
        handler_walk_speed: Handler walking speed in ``WALK`` mode (m/s).
        handler_arrive_epsilon: Distance at which the walking handler snaps
            onto its target (m).
    """

    dog_speed: float = 4.0
    hesitate_speed: float = 2.0
    wait_deceleration: float = 5.0
    handler_offset: float = 3.0
    handler_lateral_offset: float = 2.0
    signal_window_before: float = 4.0
    signal_window_close: float = 1.0
    go_on_angle_deg: float = 30.0
    commit_margin: float = 0.5
    recover_margin: float = 1.0
    segments_per_span: int = 30
    search_step: float = 0.5
    scale: float = SCALE
    handler_mode: HandlerMode = HandlerMode.TRAILING
    handler_walk_speed: float = 3.0
    handler_arrive_epsilon: float = 0.05

    def __post_init__(self) -> None:
        if self.dog_speed <= 0 or self.hesitate_speed <= 0:
            raise ValueError("dog_speed and hesitate_speed must be > 0")
        if self.signal_window_before < self.signal_window_close:
            raise ValueError("signal_window_before must be >= signal_window_close")
        if self.search_step <= 0:
            raise ValueError("search_step must be > 0")
        if self.scale <= 0:
            raise ValueError("scale must be > 0")


@dataclass(frozen=True)
class DecisionPoint:
    """Where a signal is judged, anchored to one interior waypoint.

    ::

        window_start ──[signal window]── window_end ──── obstacle_distance
    """

    obstacle_index: int
    """Index of the obstacle in the ordered waypoint list."""

    correct_signal: Signal

    window_start: float
    """Distance along the path where the signal window opens."""

    window_end: float
    """Distance along the path where the window closes and the dog commits."""

    obstacle_distance: float
    """Distance along the path of the obstacle itself."""


@dataclass(frozen=True)
class SimulationState:
    """Complete state of a training run at one instant."""

    dog_distance: float = 0.0
    dog_speed: float = 0.0
    dog_state: DogBehaviorState = DogBehaviorState.IDLE
    handler_pos: Point = ORIGIN
    handler_target: Point | None = None
    next_decision_index: int = 0
    running: bool = False
    finished: bool = False
    elapsed_time: float = 0.0
    faults: int = 0

    current_signal: Signal | None = None
    """Directional signal queued for the next decision window."""

    current_obstacle_index: int = 0


INITIAL_STATE = SimulationState()


@dataclass(frozen=True)
class RunFrame:
    """Per-tick output of the training engine for renderers and HUDs."""

    dog_position: Point

    dog_heading: float
    """Radians, ``atan2(dy, dx)`` in the canvas frame."""

    dog_yaw: float
    """World y-rotation for the 3D view."""

    handler_position: Point
    handler_heading: float
    handler_yaw: float
    dog_state: DogBehaviorState
    faults: int
    elapsed_time: float
    distance: float
    progress: float
    finished: bool

    next_obstacle: str
    """Label of the next judged obstacle, ``"Finished!"`` or ``""``."""

    expected_signal: Signal | None


@dataclass(frozen=True)
class RunResult:
    elapsed_time: float
    faults: int

    @property
    def clean(self) -> bool:
        return self.faults == 0

    @property
    def formatted_time(self) -> str:
        return format_run_time(self.elapsed_time)


def format_run_time(seconds: float) -> str:
    """Format *seconds* as ``m:ss.hh``."""
    mins = int(math.floor(seconds / 60))
    secs = int(math.floor(seconds % 60))
    hundredths = int(math.floor((seconds % 1) * 100))
    return f"{mins}:{secs:02d}.{hundredths:02d}"
