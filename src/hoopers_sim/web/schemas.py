"""Pydantic request/response schemas for the simulation API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from hoopers_sim.course.loader import CourseModel
from hoopers_sim.path.spline import SplineBasis
from hoopers_sim.training.models import DogBehaviorState, HandlerMode, Signal


class PointModel(BaseModel):
    x: float
    y: float


class HealthResponse(BaseModel):
    status: str
    version: str


class PathRequest(BaseModel):
    course: CourseModel
    basis: SplineBasis = SplineBasis.HERMITE
    samples_per_segment: int = Field(default=50, ge=1, le=500)


class PathResponse(BaseModel):
    control_points: list[PointModel]
    total_length: float
    polyline: list[PointModel]


class PlaybackRequest(BaseModel):
    course: CourseModel
    speed: float = Field(default=1.0, gt=0)
    fps: float | None = Field(default=None, gt=0)


class PlaybackFrameModel(BaseModel):
    t: float
    progress: float
    dog: PointModel
    dog_heading: float
    handler: PointModel


class PlaybackResponse(BaseModel):
    duration: float
    total_length: float
    frames: list[PlaybackFrameModel]


class SignalEvent(BaseModel):
    at: float = Field(ge=0)
    signal: Signal


class HandlerTargetEvent(BaseModel):
    at: float = Field(ge=0)
    x: float
    y: float


class RunRequest(BaseModel):
    course: CourseModel
    signals: list[SignalEvent] = Field(default_factory=list)
    handler_targets: list[HandlerTargetEvent] = Field(default_factory=list)
    handler_mode: HandlerMode = HandlerMode.TRAILING
    fps: float | None = Field(default=None, gt=0)
    every: int = Field(default=1, ge=1)
    """Keep one frame in *every* (the final frame is always kept)."""


class DecisionPointModel(BaseModel):
    obstacle_index: int
    correct_signal: Signal
    window_start: float
    window_end: float
    obstacle_distance: float


class RunFrameModel(BaseModel):
    t: float
    distance: float
    dog: PointModel
    handler: PointModel
    state: DogBehaviorState
    faults: int


class RunResponse(BaseModel):
    finished: bool
    clean: bool
    faults: int
    elapsed_time: float
    formatted_time: str
    path_length: float
    decision_points: list[DecisionPointModel]
    frames: list[RunFrameModel]
