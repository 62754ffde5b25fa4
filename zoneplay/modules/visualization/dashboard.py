"""
Dashboard rendering: zone grid over the camera view, the player panel with
volume bar and position, and the status line.
"""

import logging
import cv2
import numpy as np

from zoneplay.core.types import Action, ZONE_CAPTIONS

logger = logging.getLogger(__name__)


def format_time(seconds: float) -> str:
    """Format seconds as m:ss."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


class Dashboard:
    """Renders the combined camera + player view for one frame."""

    def __init__(self, config: dict):
        self._show_zones = config.get("show_zones", True)
        self._show_bbox = config.get("show_bbox", True)
        self._show_fps = config.get("show_fps", True)
        self._panel_width = config.get("panel_width", 640)
        self._status_height = config.get("status_height", 40)

        colors = config.get("colors", {})
        self._color_grid = tuple(colors.get("grid", [0, 0, 0]))
        self._color_caption = tuple(colors.get("caption", [40, 40, 40]))
        self._color_highlight = tuple(colors.get("highlight", [80, 175, 76]))
        self._color_bbox = tuple(colors.get("bbox", [0, 255, 255]))
        self._color_text = tuple(colors.get("text", [255, 255, 255]))
        self._color_volume = tuple(colors.get("volume", [80, 175, 76]))

        self._highlight_alpha = config.get("highlight_alpha", 0.2)

    @property
    def show_zones(self) -> bool:
        return self._show_zones

    @show_zones.setter
    def show_zones(self, value: bool):
        self._show_zones = bool(value)

    def toggle_zones(self) -> bool:
        self._show_zones = not self._show_zones
        return self._show_zones

    def render(self, camera_image: np.ndarray, player_image, state: dict) -> np.ndarray:
        """Render the full window.

        Args:
            camera_image: BGR gesture-source frame (drawn on in place)
            player_image: BGR media frame, or None with no media loaded
            state: dict with:
                - action: Action for this frame
                - detection: Detection used, or None
                - status: status line text
                - volume, current_time, duration, paused: playback state
                - mode: "control" or "demo"
                - fps: float

        Returns:
            Composite BGR image
        """
        h, w = camera_image.shape[:2]
        action = state.get("action", Action.NONE)

        if self._show_zones:
            self.draw_grid(camera_image)
            if action is not None and action.is_action:
                self.highlight(camera_image, action)

        detection = state.get("detection")
        if self._show_bbox and detection is not None and detection.bbox is not None:
            self._draw_bbox(camera_image, detection.bbox)

        panel = self._render_player(player_image, h, state)
        body = np.hstack([camera_image, panel])
        return self._draw_status(body, state)

    def draw_grid(self, image: np.ndarray) -> np.ndarray:
        """Draw the thirds grid and the zone captions."""
        h, w = image.shape[:2]
        for i in (1, 2):
            x = int(w * i / 3)
            y = int(h * i / 3)
            cv2.line(image, (x, 0), (x, h), self._color_grid, 1)
            cv2.line(image, (0, y), (w, y), self._color_grid, 1)

        font = cv2.FONT_HERSHEY_SIMPLEX
        positions = {
            Action.PLAY: (w // 2 - 14, 14),
            Action.PAUSE: (w // 2 - 18, h - 6),
            Action.REWIND: (6, h // 2 + 4),
            Action.VOLUME_UP: (w - 34, 14),
            Action.VOLUME_DOWN: (w - 34, h - 6),
            Action.FORWARD: (w - 28, h // 2 + 4),
        }
        for action, pos in positions.items():
            cv2.putText(image, ZONE_CAPTIONS[action], pos, font, 0.4, self._color_caption, 1)
        return image

    def highlight(self, image: np.ndarray, action: Action) -> np.ndarray:
        """Tint the zones belonging to an action."""
        h, w = image.shape[:2]
        overlay = image.copy()
        for zone in action.zones:
            x, y, zw, zh = zone.rect(w, h)
            cv2.rectangle(overlay, (x, y), (x + zw, y + zh), self._color_highlight, -1)
        cv2.addWeighted(overlay, self._highlight_alpha, image, 1 - self._highlight_alpha, 0, image)
        return image

    def _draw_bbox(self, image, bbox):
        x, y, bw, bh = (int(v) for v in bbox[:4])
        cv2.rectangle(image, (x, y), (x + bw, y + bh), self._color_bbox, 2)

    def _render_player(self, player_image, height: int, state: dict) -> np.ndarray:
        """Media frame scaled to the camera height, with volume and time."""
        if player_image is None:
            panel = np.zeros((height, self._panel_width, 3), dtype=np.uint8)
            cv2.putText(panel, "No video loaded", (20, height // 2),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, self._color_text, 1)
        else:
            ph, pw = player_image.shape[:2]
            scale = height / ph
            panel = cv2.resize(player_image, (max(1, int(pw * scale)), height))

        pw = panel.shape[1]

        # Volume bar along the bottom edge
        volume = min(1.0, max(0.0, state.get("volume", 0.0)))
        cv2.rectangle(panel, (10, height - 16), (pw - 10, height - 8), (60, 60, 60), -1)
        cv2.rectangle(panel, (10, height - 16), (10 + int((pw - 20) * volume), height - 8),
                      self._color_volume, -1)

        position = "{} / {}".format(format_time(state.get("current_time", 0.0)),
                                    format_time(state.get("duration", 0.0)))
        marker = "||" if state.get("paused", True) else ">"
        cv2.putText(panel, f"{marker} {position}", (10, height - 24),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, self._color_text, 1)
        return panel

    def _draw_status(self, body: np.ndarray, state: dict) -> np.ndarray:
        """Append the status line below the body."""
        w = body.shape[1]
        bar = np.full((self._status_height, w, 3), 20, dtype=np.uint8)

        cv2.putText(bar, state.get("status", ""), (10, 27),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, self._color_text, 2)

        right = f"Mode: {state.get('mode', 'control').upper()}"
        if self._show_fps:
            right = f"FPS: {state.get('fps', 0.0):.1f}  {right}"
        size = cv2.getTextSize(right, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)[0]
        cv2.putText(bar, right, (w - size[0] - 10, 25),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, self._color_text, 1)

        return np.vstack([body, bar])
