"""
Tests for the Dashboard Overlay
================================
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from zoneplay.core.types import Action, Detection
from zoneplay.modules.visualization.dashboard import Dashboard, format_time


@pytest.fixture
def dashboard():
    return Dashboard({"panel_width": 320, "status_height": 40, "show_zones": True})


def blank(h=300, w=300):
    return np.zeros((h, w, 3), dtype=np.uint8)


class TestDashboard:
    """Test suite for the composite window image."""

    def test_render_shape_without_media(self, dashboard):
        image = dashboard.render(blank(), None, {"action": Action.NONE, "status": "No hand detected"})
        assert image.shape == (340, 620, 3)

    def test_render_scales_media_to_camera_height(self, dashboard):
        media = np.zeros((150, 400, 3), dtype=np.uint8)
        image = dashboard.render(blank(), media, {"action": Action.NONE})
        # 400x150 scaled to height 300 -> 800 wide
        assert image.shape == (340, 1100, 3)

    def test_highlight_tints_action_zone(self, dashboard):
        camera = blank()
        dashboard.highlight(camera, Action.PLAY)

        assert camera[50, 150].any()        # top centre
        assert not camera[150, 150].any()   # centre untouched

    def test_rewind_highlights_left_column(self, dashboard):
        camera = blank()
        dashboard.highlight(camera, Action.REWIND)
        assert camera[20, 50].any()
        assert camera[280, 50].any()
        assert not camera[150, 250].any()

    def test_zones_hidden(self, dashboard):
        dashboard.show_zones = False
        camera = blank()
        dashboard.render(camera, None, {"action": Action.PLAY})
        assert not camera.any()

    def test_bbox_drawn(self, dashboard):
        dashboard.show_zones = False
        camera = blank()
        det = Detection((100, 100, 50, 50))
        dashboard.render(camera, None, {"action": Action.NONE, "detection": det})
        assert camera[100, 120].any()

    def test_toggle(self, dashboard):
        assert dashboard.toggle_zones() is False
        assert dashboard.toggle_zones() is True


class TestFormatTime:
    """Test suite for the position label."""

    @pytest.mark.parametrize("seconds,text", [(0, "0:00"), (5.9, "0:05"), (75, "1:15"), (-3, "0:00")])
    def test_format(self, seconds, text):
        assert format_time(seconds) == text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
