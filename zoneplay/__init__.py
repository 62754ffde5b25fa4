"""
ZonePlay Gesture Media Control
==============================

Hand-position media control: the screen is split into a 3x3 grid and the
zone a detected hand sits in drives play, pause, seek and volume on a
local video player.

Packages:
    - core: Domain types, zone classifier, session context, frame loop
    - modules.capture: Camera / video-file frame acquisition
    - modules.detection: MediaPipe hand and face detection
    - modules.control: Video player and action executor
    - modules.visualization: Zone grid dashboard overlay
    - modules.utils: Config, logging, performance monitoring
    - server: Static landing-page server
"""

__version__ = "1.0.0"
__author__ = "HCI Team"
