"""
Local video player: the playback collaborator the gesture actions drive.

Owns the playback state (volume, position, duration, paused) and decodes
frames for display with OpenCV. OpenCV has no audio output, so volume is
tracked as state and rendered as a bar on the dashboard.
"""

import os
import time
import logging
from typing import Callable, List, Optional

import cv2
import numpy as np

from zoneplay.core.errors import MediaLoadError

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = (".mp4", ".avi", ".mkv", ".mov", ".webm", ".m4v")


def build_playlist(paths=None, media_dir: Optional[str] = None) -> List[str]:
    """Explicit paths first, then the videos found in ``media_dir`` by name."""
    playlist = [str(p) for p in (paths or [])]
    if media_dir:
        if os.path.isdir(media_dir):
            for name in sorted(os.listdir(media_dir)):
                path = os.path.join(media_dir, name)
                if name.lower().endswith(VIDEO_EXTENSIONS) and path not in playlist:
                    playlist.append(path)
        else:
            logger.warning("Media directory not found: %s", media_dir)
    return playlist


class VideoPlayer:
    """Plays a video file with clamped volume and position controls.

    Position advances with the wall clock while playing; reaching the end
    pauses playback at ``duration``.

    Example:
        >>> player = VideoPlayer({"volume": 0.5})
        >>> player.load("movie.mp4")
        >>> player.current_time += 5
        >>> frame = player.read_frame()
    """

    def __init__(self, config: Optional[dict] = None,
                 clock: Callable[[], float] = time.monotonic):
        config = config or {}
        self._clock = clock
        self._autoplay = config.get("autoplay", True)

        self._volume = 1.0
        self.volume = config.get("volume", 1.0)
        self._current_time = 0.0
        self._duration = 0.0
        self._paused = True
        self._last_update = clock()

        self._cap = None
        self._media_path: Optional[str] = None
        self._media_fps = 0.0
        self._decoded_time = None
        self._last_frame: Optional[np.ndarray] = None

    # -------------------------------------------------------------------------
    # Playback state
    # -------------------------------------------------------------------------

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float):
        self._volume = min(1.0, max(0.0, float(value)))

    # Position and paused flag are brought up to date on every access, so a
    # seek starts from where playback actually is.

    @property
    def current_time(self) -> float:
        self.update()
        return self._current_time

    @current_time.setter
    def current_time(self, value: float):
        self.update()
        self._current_time = min(self._duration, max(0.0, float(value)))

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def paused(self) -> bool:
        self.update()
        return self._paused

    @property
    def media_path(self) -> Optional[str]:
        return self._media_path

    @property
    def has_media(self) -> bool:
        return self._cap is not None

    def play(self):
        """Start or resume playback."""
        if self._current_time >= self._duration > 0:
            self._current_time = 0.0
        self._paused = False
        self._last_update = self._clock()
        logger.debug("Playback started at %.1fs", self._current_time)

    def pause(self):
        """Pause playback at the current position."""
        self.update()
        self._paused = True
        logger.debug("Playback paused at %.1fs", self._current_time)

    def update(self):
        """Advance the position by the wall time elapsed while playing."""
        now = self._clock()
        if not self._paused:
            self._current_time += now - self._last_update
            if self._current_time >= self._duration:
                self._current_time = self._duration
                self._paused = True
        self._last_update = now

    def state(self) -> dict:
        """Snapshot of the playback state."""
        self.update()
        return {
            "volume": self._volume,
            "current_time": self._current_time,
            "duration": self._duration,
            "paused": self._paused,
            "media": self._media_path,
        }

    # -------------------------------------------------------------------------
    # Media
    # -------------------------------------------------------------------------

    def load(self, path: str):
        """Replace the current media with a new video file.

        Raises:
            MediaLoadError: the file is missing or cannot be decoded
        """
        if not os.path.exists(path):
            raise MediaLoadError(f"{path} not found")

        cap = cv2.VideoCapture(path)
        if not cap.isOpened():
            raise MediaLoadError(f"cannot decode {path}")

        self.close()
        self._cap = cap
        self._media_path = path
        self._media_fps = cap.get(cv2.CAP_PROP_FPS) or 0.0
        frame_count = cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0
        self._duration = frame_count / self._media_fps if self._media_fps > 0 else 0.0
        self._current_time = 0.0
        self._decoded_time = None
        self._last_frame = None
        self._paused = True

        logger.info("Loaded media %s (%.1fs @ %.1f FPS)", path, self._duration, self._media_fps)

        if self._autoplay:
            self.play()

    def read_frame(self) -> Optional[np.ndarray]:
        """Decode the frame at the current position.

        Sequential playback reads the next frame; after a seek the decoder
        is repositioned first. Returns the last good frame if decoding
        fails, or None with no media.
        """
        if self._cap is None:
            return None

        self.update()
        frame_interval = 1.0 / self._media_fps if self._media_fps > 0 else 0.04

        if self._decoded_time is not None:
            lag = self._current_time - self._decoded_time
            if 0 <= lag < frame_interval:
                return self._last_frame
            if lag < 0 or lag > frame_interval * 2:
                self._cap.set(cv2.CAP_PROP_POS_MSEC, self._current_time * 1000)
        else:
            self._cap.set(cv2.CAP_PROP_POS_MSEC, self._current_time * 1000)

        ret, image = self._cap.read()
        if ret and image is not None:
            self._last_frame = image
            self._decoded_time = self._current_time
        return self._last_frame

    def close(self):
        """Release the decoder."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
