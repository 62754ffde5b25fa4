"""
Tests for Performance Monitoring, Events and Action Logging
=============================================================
"""

import pytest
import time
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from zoneplay.core.events import EventBus
from zoneplay.core.types import Action
from zoneplay.modules.utils.logger import ActionLogger
from zoneplay.modules.utils.performance_monitor import PerformanceMonitor


class TestPerformanceMonitor:
    """Test suite for PerformanceMonitor class."""

    @pytest.fixture
    def monitor(self):
        return PerformanceMonitor(window_size=5)

    def test_stage_timing(self, monitor):
        with monitor.measure("detection"):
            time.sleep(0.01)

        assert monitor.get_stage_latency("detection") >= 9

    def test_unknown_stage_is_tracked(self, monitor):
        with monitor.measure("custom"):
            pass
        assert "custom" in monitor.get_report()["latencies_ms"]

    def test_measure_records_on_error(self, monitor):
        with pytest.raises(ValueError):
            with monitor.measure("classification"):
                raise ValueError("boom")
        assert monitor.get_stage_latency("classification") >= 0
        assert len(monitor._stage_times["classification"]) == 1

    def test_fps_needs_two_intervals(self, monitor):
        monitor.tick()
        assert monitor.fps == 0.0

    def test_fps_calculation(self, monitor):
        for _ in range(6):
            monitor.tick()
            time.sleep(0.02)
        assert 10 < monitor.fps < 60

    def test_report(self, monitor):
        monitor.tick()
        monitor.record_idle()
        report = monitor.get_report()
        assert report["total_frames"] == 1
        assert report["idle_ticks"] == 1
        assert set(PerformanceMonitor.STAGES) <= set(report["latencies_ms"])


class TestEventBus:
    """Test suite for the per-session event bus."""

    def test_priority_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe("e", lambda **kw: calls.append("low"), priority=0)
        bus.subscribe("e", lambda **kw: calls.append("high"), priority=5)

        bus.emit("e")

        assert calls == ["high", "low"]

    def test_kwargs_passed(self):
        bus = EventBus()
        got = {}
        bus.subscribe("e", lambda **kw: got.update(kw))
        bus.emit("e", action=Action.PLAY)
        assert got == {"action": Action.PLAY}

    def test_failing_listener_is_isolated(self):
        bus = EventBus()
        calls = []

        def broken(**kw):
            raise RuntimeError("boom")

        bus.subscribe("e", broken, priority=1)
        bus.subscribe("e", lambda **kw: calls.append(1))
        bus.emit("e")

        assert calls == [1]

    def test_unsubscribe_and_clear(self):
        bus = EventBus()

        def handler(**kw):
            pass

        bus.subscribe("a", handler)
        bus.subscribe("b", handler)
        bus.unsubscribe("a", handler)
        assert bus.listener_count == 1
        bus.clear()
        assert bus.listener_count == 0

    def test_history_is_bounded(self):
        bus = EventBus(max_history=3)
        for i in range(5):
            bus.emit(f"e{i}")
        assert [h["event"] for h in bus.get_history(10)] == ["e2", "e3", "e4"]

    def test_buses_are_independent(self):
        assert EventBus() is not EventBus()


class TestActionLogger:
    """Test suite for applied-action logging."""

    def test_counts(self):
        log = ActionLogger()
        log.log_action(Action.VOLUME_UP, volume=0.55, position=3.0)
        log.log_action(Action.VOLUME_UP, volume=0.6, position=3.0)
        log.log_action(action=Action.REWIND)

        assert log.total_actions == 3
        assert log.counts == {"volume_up": 2, "rewind": 1}
        assert log.get_history(1)[0]["action"] == "rewind"

    def test_history_is_bounded(self):
        log = ActionLogger(history_size=100)
        # ten minutes in a zone at 30 FPS
        for _ in range(18000):
            log.log_action(Action.VOLUME_UP, volume=1.0, position=0.0)

        assert len(log.get_history()) == 100
        assert log.total_actions == 18000
        assert log.counts == {"volume_up": 18000}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
