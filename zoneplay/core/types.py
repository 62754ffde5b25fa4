"""
Shared domain types for the zone-based gesture media controller.

Centralizes enums and data classes used across modules to eliminate
circular imports and keep the classifier, executor and dashboard in
agreement about zones and actions.
"""

import time
from enum import Enum
from typing import Optional, Tuple

import numpy as np


# =============================================================================
# Detection Kinds
# =============================================================================

class DetectionKind(Enum):
    """What a detector box contains, decided once when the box is ingested."""
    HAND = "hand"
    FACE = "face"
    OTHER = "other"

    @classmethod
    def from_label(cls, label: Optional[str]) -> 'DetectionKind':
        """Map a detector label to a kind.

        Detector models report free-form labels ("face", "Face", "hand",
        "open_hand", ...), so matching is a case-insensitive substring test.
        """
        text = str(label or "").lower()
        if "face" in text:
            return cls.FACE
        if "hand" in text:
            return cls.HAND
        return cls.OTHER


# =============================================================================
# Zones
# =============================================================================

class Zone(Enum):
    """The nine equal-thirds regions of the canvas, as (row, col)."""
    TOP_LEFT = (0, 0)
    TOP_CENTER = (0, 1)
    TOP_RIGHT = (0, 2)
    MIDDLE_LEFT = (1, 0)
    CENTER = (1, 1)
    MIDDLE_RIGHT = (1, 2)
    BOTTOM_LEFT = (2, 0)
    BOTTOM_CENTER = (2, 1)
    BOTTOM_RIGHT = (2, 2)

    @property
    def row(self) -> int:
        return self.value[0]

    @property
    def col(self) -> int:
        return self.value[1]

    def rect(self, width: float, height: float) -> Tuple[int, int, int, int]:
        """Pixel rectangle (x, y, w, h) of this zone on a canvas."""
        third_w = width / 3
        third_h = height / 3
        return (int(self.col * third_w), int(self.row * third_h),
                int(third_w), int(third_h))


# =============================================================================
# Actions
# =============================================================================

class Action(Enum):
    """Playback commands a zone can trigger."""
    VOLUME_UP = "volume_up"
    VOLUME_DOWN = "volume_down"
    PLAY = "play"
    PAUSE = "pause"
    REWIND = "rewind"
    FORWARD = "forward"
    NONE = "none"

    @property
    def label(self) -> str:
        return ACTION_LABELS[self]

    @property
    def zones(self) -> Tuple[Zone, ...]:
        """Zones highlighted on the dashboard when this action fires."""
        return ACTION_ZONES.get(self, ())

    @property
    def is_action(self) -> bool:
        return self is not Action.NONE


ACTION_LABELS = {
    Action.VOLUME_UP: "Volume Up",
    Action.VOLUME_DOWN: "Volume Down",
    Action.PLAY: "Play",
    Action.PAUSE: "Pause",
    Action.REWIND: "Rewind 5s",
    Action.FORWARD: "Forward 5s",
    Action.NONE: "No action",
}

# Rewind owns the whole left column; the rest own a single cell.
ACTION_ZONES = {
    Action.VOLUME_UP: (Zone.TOP_RIGHT,),
    Action.VOLUME_DOWN: (Zone.BOTTOM_RIGHT,),
    Action.PLAY: (Zone.TOP_CENTER,),
    Action.PAUSE: (Zone.BOTTOM_CENTER,),
    Action.REWIND: (Zone.TOP_LEFT, Zone.MIDDLE_LEFT, Zone.BOTTOM_LEFT),
    Action.FORWARD: (Zone.MIDDLE_RIGHT,),
}

# Short captions drawn inside the zone grid.
ZONE_CAPTIONS = {
    Action.PLAY: "Play",
    Action.PAUSE: "Pause",
    Action.REWIND: "Rewind",
    Action.VOLUME_UP: "Vol+",
    Action.VOLUME_DOWN: "Vol-",
    Action.FORWARD: "Fwd",
}


# =============================================================================
# Data Containers
# =============================================================================

class Detection:
    """One box reported by the detector for a single frame.

    Uses __slots__ since a handful are created every frame.
    """

    __slots__ = ("bbox", "label", "kind", "score")

    def __init__(self, bbox: Optional[Tuple[float, float, float, float]],
                 label: str = "hand", score: float = 1.0,
                 kind: Optional[DetectionKind] = None):
        self.bbox = tuple(bbox) if bbox is not None else None
        self.label = label
        self.kind = kind if kind is not None else DetectionKind.from_label(label)
        self.score = score

    def __repr__(self):
        return f"Detection({self.kind.value}, bbox={self.bbox}, score={self.score:.2f})"

    @property
    def anchor(self) -> Optional[Tuple[float, float]]:
        """Top-left corner of the box, the only point used for zoning."""
        if self.bbox is None or len(self.bbox) < 2:
            return None
        return (self.bbox[0], self.bbox[1])

    @property
    def is_face(self) -> bool:
        return self.kind is DetectionKind.FACE


class Frame:
    """A single captured image with its metadata."""

    __slots__ = ("image", "frame_id", "timestamp")

    def __init__(self, image: np.ndarray, frame_id: int = 0,
                 timestamp: Optional[float] = None):
        self.image = image
        self.frame_id = frame_id
        self.timestamp = time.time() if timestamp is None else timestamp

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    def __repr__(self):
        return f"Frame(#{self.frame_id}, {self.width}x{self.height})"


class ZoneDecision:
    """Classifier output for one frame plus the status text to display."""

    __slots__ = ("action", "status", "face_detected", "detection")

    def __init__(self, action: Action, status: str,
                 face_detected: bool = False,
                 detection: Optional[Detection] = None):
        self.action = action
        self.status = status
        self.face_detected = face_detected
        self.detection = detection

    def __repr__(self):
        return f"ZoneDecision({self.action.value}, status={self.status!r})"
