"""
Per-run session context.

Holds every collaborator the frame loop touches together with the
readiness flags and the status line, so nothing lives in module globals.
The driver creates one session and passes it to the frame loop.
"""

import logging
from typing import Optional

from zoneplay.core.classifier import ZoneClassifier
from zoneplay.core.errors import MediaLoadError
from zoneplay.core.events import EventBus, Events

logger = logging.getLogger(__name__)

MODES = ("control", "demo")


class SessionContext:
    """Collaborators and mutable state for one gesture-control session."""

    def __init__(
        self,
        source,
        detector,
        player,
        executor,
        dashboard=None,
        classifier: Optional[ZoneClassifier] = None,
        event_bus: Optional[EventBus] = None,
        mode: str = "control",
        playlist=None,
    ):
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode!r}")

        self.source = source
        self.detector = detector
        self.player = player
        self.executor = executor
        self.dashboard = dashboard
        self.classifier = classifier or ZoneClassifier()
        self.bus = event_bus or EventBus()
        self.mode = mode
        self.playlist = list(playlist or [])
        self._playlist_index = -1

        self.source_ready = False
        self.model_ready = False
        self.source_failed = False
        self.model_failed = False
        self.active = False
        self.status = ""

    @property
    def ready(self) -> bool:
        """Both the gesture source and the detector model are usable."""
        return self.source_ready and self.model_ready

    @property
    def can_become_ready(self) -> bool:
        """False once either initialisation task has failed for good."""
        return not (self.source_failed or self.model_failed)

    def set_status(self, text: str):
        """Update the status line, publishing only real changes."""
        if text == self.status:
            return
        self.status = text
        logger.info("Status: %s", text)
        self.bus.emit(Events.STATUS_CHANGED, status=text)

    def toggle_mode(self) -> str:
        """Switch between control and demo modes."""
        self.mode = "demo" if self.mode == "control" else "control"
        logger.info("Mode switched to: %s", self.mode)
        self.bus.emit(Events.MODE_CHANGED, mode=self.mode)
        return self.mode

    def load_media(self, path: str) -> bool:
        """Swap the playback media without interrupting the frame loop.

        Returns:
            True if the new media was loaded; on failure the status line
            carries the reason and the previous media keeps playing.
        """
        try:
            self.player.load(path)
        except MediaLoadError as e:
            logger.error("Media load failed: %s", e)
            self.set_status(e.user_message)
            return False

        if path in self.playlist:
            self._playlist_index = self.playlist.index(path)
        self.bus.emit(Events.MEDIA_CHANGED, path=path)
        return True

    def next_media(self) -> bool:
        """Load the playlist entry after the current one, wrapping around.

        An entry that fails to load is still stepped past, so the next
        call moves on to the one after it.
        """
        if not self.playlist:
            logger.info("No playlist configured")
            return False

        self._playlist_index = (self._playlist_index + 1) % len(self.playlist)
        return self.load_media(self.playlist[self._playlist_index])

    def close(self):
        """Release the capture source, detector and player."""
        for name in ("source", "detector", "player"):
            component = getattr(self, name)
            closer = getattr(component, "stop", None) or getattr(component, "close", None)
            if closer is not None:
                closer()
