"""
Zone classifier: maps the first detection's anchor point to a playback
action using a 3x3 split of the canvas.

The rule ladder is evaluated in order and the first match wins. The
regions overlap by construction, so the order is the tie-break:

    1. top row,    right column   -> VOLUME_UP
    2. bottom row, right column   -> VOLUME_DOWN
    3. top row,    centre column  -> PLAY
    4. bottom row, centre column  -> PAUSE
    5. left column (any row)      -> REWIND
    6. middle row, right column   -> FORWARD
    7. anything else              -> NONE

All comparisons are strict, so an anchor lying exactly on a third line
falls through to the later rules. A face anywhere in the frame suppresses
every action for that frame.
"""

import logging
from typing import Optional, Sequence

from zoneplay.core.types import Action, Detection, ZoneDecision

logger = logging.getLogger(__name__)

STATUS_FACE = "Face detected - no action"
STATUS_NO_HAND = "No hand detected"
STATUS_IDLE_HAND = "Hand detected - no action"


def classify(detections: Sequence[Detection], canvas_w: float, canvas_h: float) -> Action:
    """Return the action for one frame's detections.

    Pure function of its arguments: no state is kept between calls.
    """
    if any(d.is_face for d in detections):
        return Action.NONE

    if not detections:
        return Action.NONE

    anchor = detections[0].anchor
    if anchor is None:
        return Action.NONE

    return action_for_point(anchor[0], anchor[1], canvas_w, canvas_h)


def action_for_point(x: float, y: float, canvas_w: float, canvas_h: float) -> Action:
    """Run the zone ladder for a single anchor point."""
    left = canvas_w / 3
    right = canvas_w * 2 / 3
    top = canvas_h / 3
    bottom = canvas_h * 2 / 3

    if y < top and x > right:
        return Action.VOLUME_UP
    if y > bottom and x > right:
        return Action.VOLUME_DOWN
    if y < top and left < x < right:
        return Action.PLAY
    if y > bottom and left < x < right:
        return Action.PAUSE
    if x < left:
        return Action.REWIND
    if x > right and top < y < bottom:
        return Action.FORWARD
    return Action.NONE


class ZoneClassifier:
    """Wraps :func:`classify` and produces the status line for the frame."""

    def evaluate(self, detections: Sequence[Detection],
                 canvas_w: float, canvas_h: float) -> ZoneDecision:
        """Classify a frame and describe the outcome.

        Args:
            detections: Detector output for the frame, best first
            canvas_w: Canvas width in pixels
            canvas_h: Canvas height in pixels

        Returns:
            ZoneDecision with the action and a human-readable status
        """
        if any(d.is_face for d in detections):
            return ZoneDecision(Action.NONE, STATUS_FACE, face_detected=True)

        primary: Optional[Detection] = detections[0] if detections else None
        if primary is None or primary.anchor is None:
            return ZoneDecision(Action.NONE, STATUS_NO_HAND)

        action = classify(detections, canvas_w, canvas_h)
        status = action.label if action.is_action else STATUS_IDLE_HAND

        logger.debug("Anchor (%.0f, %.0f) on %dx%d -> %s",
                     primary.anchor[0], primary.anchor[1],
                     canvas_w, canvas_h, action.value)

        return ZoneDecision(action, status, detection=primary)
