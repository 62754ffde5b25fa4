"""
Applies zone actions to the video player.

    VOLUME_UP / VOLUME_DOWN   +/- volume_step, clamped to [0, 1]
    PLAY / PAUSE              only when the state would change
    REWIND / FORWARD          +/- seek_seconds, clamped to [0, duration]

Actions fire on every frame the hand stays in a zone; there is no
debouncing.
"""

import logging

from zoneplay.core.types import Action

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Executes playback actions against a player."""

    def __init__(self, config: dict, player):
        self._player = player
        self._volume_step = config.get("volume_step", 0.05)
        self._seek_seconds = config.get("seek_seconds", 5.0)

        self._last_action = None
        self._action_count = 0

        self._handlers = {
            Action.VOLUME_UP: self._volume_up,
            Action.VOLUME_DOWN: self._volume_down,
            Action.PLAY: self._play,
            Action.PAUSE: self._pause,
            Action.REWIND: self._rewind,
            Action.FORWARD: self._forward,
        }

        logger.info("ActionExecutor initialized (volume_step=%.2f, seek=%.1fs)",
                    self._volume_step, self._seek_seconds)

    def execute(self, action: Action) -> bool:
        """Apply an action to the player.

        Returns:
            True if the action was applied (NONE is never applied)
        """
        handler = self._handlers.get(action)
        if handler is None:
            return False

        handler()
        self._record_action(action)
        return True

    def _volume_up(self):
        p = self._player
        p.volume = min(1.0, p.volume + self._volume_step)

    def _volume_down(self):
        p = self._player
        p.volume = max(0.0, p.volume - self._volume_step)

    def _play(self):
        if self._player.paused:
            self._player.play()

    def _pause(self):
        if not self._player.paused:
            self._player.pause()

    def _rewind(self):
        p = self._player
        p.current_time = max(0.0, p.current_time - self._seek_seconds)

    def _forward(self):
        p = self._player
        p.current_time = min(p.duration, p.current_time + self._seek_seconds)

    def _record_action(self, action: Action):
        self._last_action = action
        self._action_count += 1

    @property
    def last_action(self):
        return self._last_action

    @property
    def action_count(self) -> int:
        return self._action_count
