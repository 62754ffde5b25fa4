"""
Structured logging setup and playback-action event logging.
"""

import os
import logging
import logging.handlers
import time
from collections import Counter, deque


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Configure structured logging for the application."""
    console_format = "%(asctime)s  %(levelname)-5s  %(message)s"
    file_format = "%(asctime)s [%(levelname)-7s] %(name)-25s | %(message)s"
    date_format = "%H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(root_logger.level)
    console.setFormatter(logging.Formatter(console_format, datefmt=date_format))
    root_logger.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(file_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    return root_logger


class ActionLogger:
    """Logs applied playback actions and keeps a per-session tally."""

    def __init__(self, history_size=1000):
        self.logger = logging.getLogger("playback_actions")
        self._history = deque(maxlen=history_size)  # recent actions only; totals live in _counts
        self._counts = Counter()

    def log_action(self, action, volume=None, position=None, **_):
        """Log one applied action with the resulting playback state."""
        name = getattr(action, "value", action)
        self._history.append({
            "timestamp": time.time(),
            "action": name,
            "volume": volume,
            "position": position,
        })
        self._counts[name] += 1
        self.logger.debug(
            "Action: %-12s | Volume: %s | Position: %s",
            name,
            f"{volume:.2f}" if volume is not None else "N/A",
            f"{position:.1f}s" if position is not None else "N/A",
        )

    def get_history(self, last_n=None):
        """Get recent action history."""
        history = list(self._history)
        if last_n:
            return history[-last_n:]
        return history

    @property
    def counts(self) -> dict:
        return dict(self._counts)

    @property
    def total_actions(self):
        return sum(self._counts.values())

    def print_summary(self):
        """Log per-action totals for the session."""
        self.logger.info("Actions applied: %d", self.total_actions)
        for name, count in self._counts.most_common():
            self.logger.info("  %-12s %5d", name, count)
