"""FastAPI Web application for headless path preview, playback and training runs."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from hoopers_sim.config import Settings
from hoopers_sim.web.schemas import (
    HealthResponse,
    PathRequest,
    PathResponse,
    PlaybackRequest,
    PlaybackResponse,
    RunRequest,
    RunResponse,
)
from hoopers_sim.web.service import SimulationService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

_logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(title="Hoopers Simulator", version=VERSION)


def _service() -> SimulationService:
    return SimulationService(Settings.from_env())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.post("/api/path", response_model=PathResponse)
def path(req: PathRequest) -> PathResponse:
    """Return the control points and sampled run path of a course."""
    return _service().plan_path(req)


@app.post("/api/playback", response_model=PlaybackResponse)
def playback(req: PlaybackRequest) -> PlaybackResponse:
    """Play a course from start to finish and return every frame."""
    return _service().run_playback(req)


@app.post("/api/run", response_model=RunResponse)
def run(req: RunRequest) -> RunResponse:
    """Simulate a training run driven by a scripted list of handler signals."""
    try:
        return _service().run_training(req)
    except ValueError as exc:
        _logger.warning("Rejected run request: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
