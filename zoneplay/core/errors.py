"""
Error kinds raised while acquiring the gesture source, the detector model
or the playback media.

None of these escape the frame loop: each carries a ``user_message`` that
is written to the status line, and the session degrades to an inert state.
"""


class ZonePlayError(Exception):
    """Base class for all session setup errors."""

    default_message = "Unexpected error"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.default_message)
        self.detail = detail

    @property
    def user_message(self) -> str:
        return self.default_message


class CameraError(ZonePlayError):
    """Camera could not be opened for a reason not covered below."""

    default_message = "Camera error"

    @property
    def user_message(self) -> str:
        if self.detail:
            return f"Camera error: {self.detail}"
        return self.default_message


class CameraUnsupportedError(CameraError):
    """No camera capture backend is available in this OpenCV build."""

    default_message = "Camera API not supported in this build."

    @property
    def user_message(self) -> str:
        return self.default_message


class CameraPermissionDeniedError(CameraError):
    """The device exists but the process may not read it."""

    default_message = "Camera permission denied."

    @property
    def user_message(self) -> str:
        if self.detail:
            return f"Camera permission denied. Allow access to {self.detail} and restart."
        return self.default_message


class CameraNotFoundError(CameraError):
    """No camera device (or gesture video file) at the requested location."""

    default_message = "No camera device found."

    @property
    def user_message(self) -> str:
        return self.default_message


class ModelLoadError(ZonePlayError):
    """Detector model could not be downloaded or created."""

    default_message = "Model load error"

    @property
    def user_message(self) -> str:
        if self.detail:
            return f"Model load error: {self.detail}"
        return self.default_message


class MediaLoadError(ZonePlayError):
    """Playback video could not be opened."""

    default_message = "Could not open video"

    @property
    def user_message(self) -> str:
        if self.detail:
            return f"Could not open video: {self.detail}"
        return self.default_message
