"""Hand and face detection using MediaPipe."""
