"""Process-level settings read from the environment.

Entry points call :func:`dotenv.load_dotenv` before :meth:`Settings.from_env`
so a ``.env`` file in the working directory is honoured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Frame-loop and logging settings for the service and CLI."""

    fps: float = 60.0
    """Frame rate of headless simulation loops."""

    max_dt: float = 0.1
    """Largest frame delta passed to ``tick`` (seconds)."""

    max_run_seconds: float = 300.0
    """Upper bound on simulated time for one headless run."""

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            fps=float(os.environ.get("HOOPERS_FPS", cls.fps)),
            max_dt=float(os.environ.get("HOOPERS_MAX_DT", cls.max_dt)),
            max_run_seconds=float(os.environ.get("HOOPERS_MAX_RUN_SECONDS", cls.max_run_seconds)),
            log_level=os.environ.get("HOOPERS_LOG_LEVEL", cls.log_level).upper(),
        )


def clamp_dt(dt: float, max_dt: float = 0.1) -> float:
    """Clamp a wall-clock frame delta into ``[0, max_dt]``.

    The engines trust the delta they are given, so the frame loop clamps it
    first to avoid a jump after the host was suspended.
    """
    return max(0.0, min(dt, max_dt))
