"""
Tests for the Video Player
===========================
"""

import pytest
import numpy as np
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from zoneplay.core.errors import MediaLoadError
from zoneplay.core.types import Action
from zoneplay.modules.control.action_executor import ActionExecutor
from zoneplay.modules.control.player import VideoPlayer, build_playlist


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_cv2():
    """Mock OpenCV decoder: 25 FPS, 250 frames (10 seconds)."""
    with patch("zoneplay.modules.control.player.cv2") as mock:
        props = {mock.CAP_PROP_FPS: 25.0, mock.CAP_PROP_FRAME_COUNT: 250.0}
        mock_cap = MagicMock()
        mock_cap.isOpened.return_value = True
        mock_cap.get.side_effect = lambda prop: props.get(prop, 0.0)
        mock_cap.read.return_value = (True, np.zeros((360, 640, 3), dtype=np.uint8))
        mock.VideoCapture.return_value = mock_cap
        yield mock


@pytest.fixture
def media_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00")
    return str(path)


@pytest.fixture
def player(clock, mock_cv2, media_file):
    p = VideoPlayer({"volume": 0.5, "autoplay": False}, clock=clock)
    p.load(media_file)
    return p


class TestPlaybackState:
    """Test suite for clamped playback state."""

    def test_initial_state(self, clock):
        p = VideoPlayer(clock=clock)
        assert p.volume == 1.0
        assert p.paused
        assert p.current_time == 0.0
        assert not p.has_media

    @pytest.mark.parametrize("value,expected", [(1.5, 1.0), (-0.2, 0.0), (0.3, 0.3)])
    def test_volume_clamps(self, clock, value, expected):
        p = VideoPlayer(clock=clock)
        p.volume = value
        assert p.volume == expected

    def test_duration_from_metadata(self, player):
        assert player.duration == pytest.approx(10.0)

    def test_current_time_clamps(self, player):
        player.current_time = 25.0
        assert player.current_time == pytest.approx(10.0)
        player.current_time = -3.0
        assert player.current_time == 0.0


class TestPlayback:
    """Test suite for the wall-clock driven position."""

    def test_position_advances_while_playing(self, player, clock):
        player.play()
        clock.advance(2.0)
        player.update()
        assert player.current_time == pytest.approx(2.0)

    def test_position_holds_while_paused(self, player, clock):
        clock.advance(2.0)
        player.update()
        assert player.current_time == 0.0

    def test_pause_keeps_position(self, player, clock):
        player.play()
        clock.advance(1.5)
        player.pause()
        clock.advance(5.0)
        player.update()
        assert player.current_time == pytest.approx(1.5)
        assert player.paused

    def test_end_of_media_pauses(self, player, clock):
        player.play()
        clock.advance(30.0)
        player.update()
        assert player.current_time == pytest.approx(10.0)
        assert player.paused

    def test_play_at_end_restarts(self, player):
        player.current_time = 10.0
        player.play()
        assert player.current_time == 0.0

    def test_position_read_without_update(self, player, clock):
        player.play()
        clock.advance(2.0)
        assert player.current_time == pytest.approx(2.0)

    def test_seek_keeps_elapsed_playback(self, player, clock):
        player.play()
        clock.advance(2.0)
        player.current_time += 5
        assert player.current_time == pytest.approx(7.0)

    def test_paused_reflects_end_of_media(self, player, clock):
        player.play()
        clock.advance(12.0)
        assert player.paused
        assert player.state()["current_time"] == pytest.approx(10.0)


class TestWithExecutor:
    """Seeks applied by the executor start from the live position."""

    def test_forward_after_playing(self, player, clock):
        executor = ActionExecutor({"seek_seconds": 5.0}, player)
        player.play()
        clock.advance(2.0)

        executor.execute(Action.FORWARD)

        assert player.current_time == pytest.approx(7.0)

    def test_rewind_after_playing(self, player, clock):
        executor = ActionExecutor({"seek_seconds": 5.0}, player)
        player.play()
        clock.advance(6.0)

        executor.execute(Action.REWIND)

        assert player.current_time == pytest.approx(1.0)

    def test_play_after_end_restarts(self, player, clock):
        executor = ActionExecutor({}, player)
        player.play()
        clock.advance(15.0)

        executor.execute(Action.PLAY)

        assert not player.paused
        assert player.current_time == 0.0


class TestMedia:
    """Test suite for loading and decoding media."""

    def test_load_missing_file(self, clock, tmp_path):
        p = VideoPlayer(clock=clock)
        with pytest.raises(MediaLoadError) as exc:
            p.load(str(tmp_path / "nope.mp4"))
        assert "not found" in exc.value.user_message

    def test_load_undecodable(self, clock, mock_cv2, media_file):
        mock_cv2.VideoCapture.return_value.isOpened.return_value = False
        p = VideoPlayer(clock=clock)
        with pytest.raises(MediaLoadError):
            p.load(media_file)

    def test_autoplay(self, clock, mock_cv2, media_file):
        p = VideoPlayer({"autoplay": True}, clock=clock)
        p.load(media_file)
        assert not p.paused
        assert p.media_path == media_file

    def test_swap_releases_previous(self, player, mock_cv2, media_file):
        first = mock_cv2.VideoCapture.return_value
        player.load(media_file)
        first.release.assert_called()
        assert player.current_time == 0.0

    def test_read_frame(self, player):
        frame = player.read_frame()
        assert frame.shape == (360, 640, 3)

    def test_read_frame_without_media(self, clock):
        assert VideoPlayer(clock=clock).read_frame() is None

    def test_state_snapshot(self, player):
        state = player.state()
        assert state["volume"] == 0.5
        assert state["paused"] is True
        assert state["duration"] == pytest.approx(10.0)


class TestPlaylist:
    """Test suite for playlist discovery."""

    def test_paths_then_directory(self, tmp_path):
        for name in ("b.mp4", "a.MKV", "notes.txt"):
            (tmp_path / name).write_bytes(b"\x00")

        playlist = build_playlist(["intro.mp4"], str(tmp_path))

        assert playlist == [
            "intro.mp4",
            str(tmp_path / "a.MKV"),
            str(tmp_path / "b.mp4"),
        ]

    def test_duplicates_skipped(self, tmp_path):
        clip = tmp_path / "clip.mp4"
        clip.write_bytes(b"\x00")
        assert build_playlist([str(clip)], str(tmp_path)) == [str(clip)]

    def test_missing_directory(self, tmp_path):
        assert build_playlist(None, str(tmp_path / "absent")) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
