"""Video player and playback action executor."""
from .action_executor import ActionExecutor
from .player import VideoPlayer, build_playlist

__all__ = ["ActionExecutor", "VideoPlayer", "build_playlist"]
