"""Decision-based training runs with handler signals and fault scoring."""

from hoopers_sim.training.decisions import classify_turn, compute_decision_points
from hoopers_sim.training.engine import (
    RunStateMachine,
    advance,
    apply_signal,
    move_handler_target,
    start_run,
)
from hoopers_sim.training.geometry import RunGeometry, build_run_geometry
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
    format_run_time,
)

__all__ = [
    "INITIAL_STATE",
    "DecisionPoint",
    "DogBehaviorState",
    "HandlerMode",
    "RunFrame",
    "RunGeometry",
    "RunResult",
    "RunStateMachine",
    "Signal",
    "SimulationState",
    "TrainingConfig",
    "advance",
    "apply_signal",
    "build_run_geometry",
    "classify_turn",
    "compute_decision_points",
    "format_run_time",
    "move_handler_target",
    "start_run",
]
