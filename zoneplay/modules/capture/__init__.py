"""Gesture source capture (camera or video file)."""
from .camera_manager import CameraManager, parse_source

__all__ = ["CameraManager", "parse_source"]
