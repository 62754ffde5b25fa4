"""
Tests for the MediaPipe Object Detector
========================================

Box selection and landmark boxing only; no model is loaded.
"""

import pytest
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

pytest.importorskip("mediapipe")

from zoneplay.core.errors import ModelLoadError
from zoneplay.core.types import Detection
from zoneplay.modules.detection.object_detector import (
    ObjectDetector,
    download_model,
    hand_box,
)


def landmarks(*points):
    return [SimpleNamespace(x=x, y=y) for x, y in points]


class TestSelect:
    """Test suite for score filtering and the box cap."""

    @pytest.fixture
    def detector(self):
        return ObjectDetector({"max_num_boxes": 1, "score_threshold": 0.6})

    def test_low_score_face_dropped(self, detector):
        assert detector.select([Detection((0, 0, 1, 1), label="face", score=0.5)]) == []

    def test_ambiguous_handedness_hand_kept(self, detector):
        """Hand scores are handedness confidence and are not thresholded."""
        hand = Detection((0, 0, 1, 1), label="hand", score=0.55)
        assert detector.select([hand]) == [hand]

    def test_best_hand_kept(self, detector):
        weak = Detection((0, 0, 1, 1), score=0.7)
        strong = Detection((5, 5, 1, 1), score=0.9)
        assert detector.select([weak, strong]) == [strong]

    def test_face_survives_cap(self, detector):
        hand = Detection((0, 0, 1, 1), label="hand", score=0.95)
        face = Detection((9, 9, 1, 1), label="face", score=0.7)

        selected = detector.select([face, hand])

        assert selected == [hand, face]

    def test_not_loaded_detects_nothing(self, detector):
        assert not detector.is_loaded
        assert detector.detect(None) == []


class TestHandBox:
    """Test suite for landmark extent boxes."""

    def test_padding(self):
        box = hand_box(landmarks((0.5, 0.5), (0.6, 0.7)), 100, 100, padding=5)
        assert box == (45, 45, 20, 30)

    def test_clipped_to_frame(self):
        box = hand_box(landmarks((0.0, 0.0), (1.0, 1.0)), 200, 100, padding=20)
        assert box == (0, 0, 200, 100)


class TestDownload:
    """Test suite for model fetching."""

    def test_existing_file_skipped(self, tmp_path):
        path = tmp_path / "model.task"
        path.write_bytes(b"x")
        with patch("urllib.request.urlretrieve") as fetch:
            download_model("http://example.invalid/model.task", path)
        fetch.assert_not_called()

    def test_failure_raises_model_error(self, tmp_path):
        with patch("urllib.request.urlretrieve", side_effect=OSError("offline")):
            with pytest.raises(ModelLoadError) as exc:
                download_model("http://example.invalid/model.task", tmp_path / "m.task")
        assert exc.value.user_message.startswith("Model load error:")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
