"""Progress-driven playback of a course run."""

from hoopers_sim.playback.driver import PlaybackDriver, PlaybackPath, build_playback_path
from hoopers_sim.playback.handler import compute_handler_position
from hoopers_sim.playback.models import PlaybackConfig, PlaybackFrame, PlaybackState

__all__ = [
    "PlaybackConfig",
    "PlaybackDriver",
    "PlaybackFrame",
    "PlaybackPath",
    "PlaybackState",
    "build_playback_path",
    "compute_handler_position",
]
