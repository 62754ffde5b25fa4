"""
Gesture source capture: a live camera or a pre-recorded video file.

Frames are read synchronously, one per frame-loop tick. Opening the source
raises one of the camera error kinds from ``zoneplay.core.errors`` so the
frame loop can report it on the status line.
"""

import os
import sys
import time
import logging
from typing import Optional, Union

import cv2

from zoneplay.core.errors import (
    CameraError,
    CameraNotFoundError,
    CameraPermissionDeniedError,
    CameraUnsupportedError,
)
from zoneplay.core.types import Frame

logger = logging.getLogger(__name__)


def parse_source(source: Union[int, str, None]) -> Union[int, str]:
    """Normalise a source setting: digit strings become device indices."""
    if source is None:
        return 0
    if isinstance(source, int):
        return source
    text = str(source).strip()
    if text.isdigit():
        return int(text)
    return text


class CameraManager:
    """Camera or video-file capture for the gesture side of the loop."""

    def __init__(self, config: dict):
        self._source = parse_source(config.get("source", 0))
        self._width = config.get("width", 640)
        self._height = config.get("height", 480)
        self._fps = config.get("fps", 30)
        self._backend = config.get("backend", "auto")
        self._buffer_size = config.get("buffer_size", 1)
        self._flip_h = config.get("flip_horizontal", True)
        self._warmup_frames = config.get("warmup_frames", 5)
        self._max_read_failures = config.get("max_read_failures", 30)

        self._cap = None
        self._frame_id = 0
        self._read_failures = 0
        self._ended = False

    @property
    def is_file(self) -> bool:
        return isinstance(self._source, str)

    @property
    def source(self) -> Union[int, str]:
        return self._source

    def open(self) -> None:
        """Open the configured source.

        Raises:
            CameraUnsupportedError: OpenCV has no camera backend
            CameraPermissionDeniedError: device node is not readable
            CameraNotFoundError: no such device or video file
            CameraError: the source exists but could not be opened
        """
        if self.is_file:
            self._open_file()
        else:
            self._open_device()

        self._frame_id = 0
        self._read_failures = 0
        self._ended = False

    def _open_file(self):
        path = self._source
        if not os.path.exists(path):
            raise CameraNotFoundError(path)

        self._cap = cv2.VideoCapture(path)
        if not self._cap.isOpened():
            self._cap = None
            raise CameraError(f"cannot decode {path}")

        logger.info("Gesture source: video file %s", path)

    def _open_device(self):
        if not cv2.videoio_registry.getCameraBackends():
            raise CameraUnsupportedError()

        device_path = self._device_path(self._source)
        if device_path and os.path.exists(device_path) and not os.access(device_path, os.R_OK):
            raise CameraPermissionDeniedError(device_path)

        backend_map = {
            "v4l2": cv2.CAP_V4L2,
            "gstreamer": cv2.CAP_GSTREAMER,
            "auto": cv2.CAP_ANY,
        }
        backend = backend_map.get(self._backend, cv2.CAP_ANY)

        self._cap = cv2.VideoCapture(self._source, backend)
        if not self._cap.isOpened():
            self._cap = None
            raise CameraNotFoundError(f"device {self._source}")

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._height)
        self._cap.set(cv2.CAP_PROP_FPS, self._fps)
        self._cap.set(cv2.CAP_PROP_BUFFERSIZE, self._buffer_size)

        actual_w = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_h = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        actual_fps = self._cap.get(cv2.CAP_PROP_FPS)
        logger.info(
            "Camera opened: %dx%d @ %.0f FPS (requested %dx%d @ %d)",
            actual_w, actual_h, actual_fps,
            self._width, self._height, self._fps,
        )

        # Let auto-exposure settle
        for _ in range(self._warmup_frames):
            self._cap.read()

    @staticmethod
    def _device_path(index: int) -> Optional[str]:
        if sys.platform.startswith("linux"):
            return f"/dev/video{index}"
        return None

    def read(self) -> Optional[Frame]:
        """Read the next frame, or None if nothing is available.

        A video file that runs out, or a camera that keeps failing, marks
        the source as ended.
        """
        if self._cap is None or self._ended:
            return None

        ret, image = self._cap.read()
        if not ret or image is None:
            self._read_failures += 1
            if self.is_file or self._read_failures >= self._max_read_failures:
                logger.info("Gesture source ended after %d frames", self._frame_id)
                self._ended = True
            return None

        self._read_failures = 0
        if self._flip_h and not self.is_file:
            image = cv2.flip(image, 1)

        self._frame_id += 1
        return Frame(image, frame_id=self._frame_id, timestamp=time.time())

    @property
    def resolution(self) -> tuple:
        return (self._width, self._height)

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    @property
    def ended(self) -> bool:
        return self._ended

    def stop(self):
        """Release the capture source."""
        if self._cap:
            self._cap.release()
            self._cap = None
            logger.info("Gesture source released")

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *args):
        self.stop()
