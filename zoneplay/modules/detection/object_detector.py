"""
Hand and face box detection using the MediaPipe Tasks API.

HandLandmarker boxes become ``hand`` detections (box = landmark extent plus
padding); FaceDetector boxes become ``face`` detections. Both are merged,
filtered by score and ordered best first, so the zone classifier can take
the first box and check for faces anywhere in the list.
"""

import logging
import urllib.request
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from zoneplay.core.errors import ModelLoadError
from zoneplay.core.types import Detection, DetectionKind, Frame

logger = logging.getLogger(__name__)

HAND_LANDMARKER_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
FACE_DETECTOR_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/face_detector/blaze_face_short_range/float16/1/blaze_face_short_range.tflite"


def download_model(url: str, save_path: Path) -> None:
    """Download a model file if it is not already present.

    Raises:
        ModelLoadError: the download failed
    """
    if save_path.exists():
        logger.debug("Model already exists at %s", save_path)
        return

    try:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading model to %s...", save_path)
        urllib.request.urlretrieve(url, save_path)
        logger.info("Model download complete")
    except OSError as e:
        raise ModelLoadError(f"download of {save_path.name} failed ({e})") from e


def hand_box(landmarks, width: int, height: int, padding: int = 20):
    """Pixel box (x, y, w, h) around normalized hand landmarks, clipped to the frame."""
    xs = [lm.x for lm in landmarks]
    ys = [lm.y for lm in landmarks]

    min_x = max(0, int(min(xs) * width) - padding)
    min_y = max(0, int(min(ys) * height) - padding)
    max_x = min(width, int(max(xs) * width) + padding)
    max_y = min(height, int(max(ys) * height) + padding)

    return (min_x, min_y, max_x - min_x, max_y - min_y)


class ObjectDetector:
    """Detects hands (and optionally faces) in BGR frames.

    Example:
        >>> detector = ObjectDetector({"models_dir": "models"})
        >>> detector.load()
        >>> detections = detector.detect(frame)
        >>> detector.close()
    """

    def __init__(self, config: dict):
        self._models_dir = Path(config.get("models_dir", "models"))
        self._hand_model = config.get("hand_model_path") or str(self._models_dir / "hand_landmarker.task")
        self._face_model = config.get("face_model_path") or str(self._models_dir / "blaze_face_short_range.tflite")
        self._max_boxes = config.get("max_num_boxes", 1)
        self._max_hands = config.get("max_num_hands", 1)
        self._score_threshold = config.get("score_threshold", 0.6)
        self._detect_faces = config.get("detect_faces", True)
        self._padding = config.get("box_padding", 20)

        self._hands: Optional[vision.HandLandmarker] = None
        self._faces: Optional[vision.FaceDetector] = None
        self._timestamp_ms = 0

    def load(self) -> None:
        """Download (if needed) and create the MediaPipe tasks.

        Raises:
            ModelLoadError: a model could not be fetched or created
        """
        download_model(HAND_LANDMARKER_MODEL_URL, Path(self._hand_model))
        if self._detect_faces:
            download_model(FACE_DETECTOR_MODEL_URL, Path(self._face_model))

        try:
            self._hands = vision.HandLandmarker.create_from_options(
                vision.HandLandmarkerOptions(
                    base_options=python.BaseOptions(model_asset_path=self._hand_model),
                    running_mode=vision.RunningMode.VIDEO,
                    num_hands=self._max_hands,
                    min_hand_detection_confidence=self._score_threshold,
                )
            )
            if self._detect_faces:
                self._faces = vision.FaceDetector.create_from_options(
                    vision.FaceDetectorOptions(
                        base_options=python.BaseOptions(model_asset_path=self._face_model),
                        running_mode=vision.RunningMode.VIDEO,
                        min_detection_confidence=self._score_threshold,
                    )
                )
        except (RuntimeError, ValueError) as e:
            self.close()
            raise ModelLoadError(str(e)) from e

        logger.info(
            "Detector loaded (max_boxes=%d, score_threshold=%.2f, faces=%s)",
            self._max_boxes, self._score_threshold, self._detect_faces,
        )

    @property
    def is_loaded(self) -> bool:
        return self._hands is not None

    def detect(self, frame: Frame) -> List[Detection]:
        """Run detection on one frame.

        Returns:
            Up to ``max_num_boxes`` hand boxes ordered by score, then any faces
        """
        if self._hands is None:
            logger.warning("Detector not loaded. Call load() first.")
            return []

        rgb = cv2.cvtColor(frame.image, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=np.ascontiguousarray(rgb))

        # VIDEO mode needs strictly increasing timestamps
        self._timestamp_ms = max(self._timestamp_ms + 1, int(frame.timestamp * 1000))

        detections = self._hand_detections(
            self._hands.detect_for_video(mp_image, self._timestamp_ms),
            frame.width, frame.height,
        )
        if self._faces is not None:
            detections.extend(self._face_detections(
                self._faces.detect_for_video(mp_image, self._timestamp_ms)
            ))

        return self.select(detections)

    def select(self, detections: List[Detection]) -> List[Detection]:
        """Order boxes best first and cap the count.

        Hand scores are handedness confidence, not detection confidence;
        the landmarker already applied the detection threshold, so hands
        are only ordered. Other boxes must meet ``score_threshold``.
        Faces are exempt from the cap and follow the other boxes, so a
        face in view always reaches the classifier.
        """
        kept = [d for d in detections
                if d.kind is DetectionKind.HAND or d.score >= self._score_threshold]
        kept.sort(key=lambda d: d.score, reverse=True)
        faces = [d for d in kept if d.is_face]
        others = [d for d in kept if not d.is_face]
        return others[:self._max_boxes] + faces

    def _hand_detections(self, result, width: int, height: int) -> List[Detection]:
        detections = []
        for i, landmarks in enumerate(result.hand_landmarks):
            score = 0.0
            if result.handedness and len(result.handedness) > i:
                score = result.handedness[i][0].score
            detections.append(Detection(
                hand_box(landmarks, width, height, self._padding),
                label="hand", score=score, kind=DetectionKind.HAND,
            ))
        return detections

    @staticmethod
    def _face_detections(result) -> List[Detection]:
        detections = []
        for det in result.detections:
            box = det.bounding_box
            score = det.categories[0].score if det.categories else 0.0
            detections.append(Detection(
                (box.origin_x, box.origin_y, box.width, box.height),
                label="face", score=score, kind=DetectionKind.FACE,
            ))
        return detections

    def close(self):
        """Release MediaPipe resources."""
        for task in (self._hands, self._faces):
            if task is not None:
                task.close()
        self._hands = None
        self._faces = None

    def __enter__(self):
        self.load()
        return self

    def __exit__(self, *args):
        self.close()
