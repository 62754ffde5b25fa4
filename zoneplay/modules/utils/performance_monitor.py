"""
Frame-loop performance monitoring with per-stage latency tracking.
"""

import time
import logging
from collections import deque
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """Tracks FPS and per-stage latency over a rolling window."""

    STAGES = ("capture", "detection", "classification", "action", "render", "total")

    def __init__(self, window_size=100):
        self._window_size = window_size

        self._frame_times = deque(maxlen=window_size)
        self._last_frame_time = None

        self._stage_times = {name: deque(maxlen=window_size) for name in self.STAGES}

        self._frame_count = 0
        self._idle_ticks = 0
        self._start_time = time.time()

    @contextmanager
    def measure(self, stage_name: str):
        """Context manager to measure a loop stage's duration."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            if stage_name not in self._stage_times:
                self._stage_times[stage_name] = deque(maxlen=self._window_size)
            self._stage_times[stage_name].append(elapsed_ms)

    def tick(self):
        """Call once per processed frame to track FPS."""
        now = time.perf_counter()
        if self._last_frame_time is not None:
            self._frame_times.append(now - self._last_frame_time)
        self._last_frame_time = now
        self._frame_count += 1

    def record_idle(self):
        """Record a tick that was rescheduled because inputs were not ready."""
        self._idle_ticks += 1

    @property
    def fps(self) -> float:
        """Current frames per second (rolling average)."""
        if len(self._frame_times) < 2:
            return 0.0
        avg_interval = sum(self._frame_times) / len(self._frame_times)
        return 1.0 / avg_interval if avg_interval > 0 else 0.0

    @property
    def total_latency_ms(self) -> float:
        """Average total pass latency in ms."""
        return self.get_stage_latency("total")

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def get_stage_latency(self, stage_name: str) -> float:
        """Get average latency for a specific stage in ms."""
        times = self._stage_times.get(stage_name)
        if not times:
            return 0.0
        return sum(times) / len(times)

    def get_report(self) -> dict:
        """Generate a performance report."""
        uptime = time.time() - self._start_time
        return {
            "fps": round(self.fps, 1),
            "total_frames": self._frame_count,
            "idle_ticks": self._idle_ticks,
            "uptime_seconds": round(uptime, 1),
            "latencies_ms": {
                name: round(self.get_stage_latency(name), 2)
                for name in self._stage_times
            },
        }

    def print_report(self):
        """Log formatted performance report."""
        report = self.get_report()
        logger.info("=" * 50)
        logger.info("PERFORMANCE REPORT")
        logger.info("=" * 50)
        logger.info("FPS:            %.1f", report["fps"])
        logger.info("Total Frames:   %d", report["total_frames"])
        logger.info("Idle Ticks:     %d", report["idle_ticks"])
        logger.info("Uptime:         %.1fs", report["uptime_seconds"])
        logger.info("-" * 40)
        for stage, latency in report["latencies_ms"].items():
            logger.info("  %-16s %7.2f ms", stage, latency)
        logger.info("=" * 50)
