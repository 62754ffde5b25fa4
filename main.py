#!/usr/bin/env python3
"""
ZonePlay - hand-position media control.
Main application entry point.

Usage:
    python main.py                            # Webcam controls the player
    python main.py --media movie.mp4          # Play a video file
    python main.py --source gestures.mp4      # Use a recorded gesture video
    python main.py --mode demo                # Classify only, no control
    python main.py --mode serve               # Static landing-page server
"""

import sys
import asyncio
import signal
import argparse
import logging

from zoneplay import __version__
from zoneplay.core.events import Events
from zoneplay.core.frame_loop import CvWindow, FrameLoop
from zoneplay.core.session import SessionContext
from zoneplay.modules.capture.camera_manager import CameraManager
from zoneplay.modules.control.action_executor import ActionExecutor
from zoneplay.modules.control.player import VideoPlayer, build_playlist
from zoneplay.modules.utils.config import Config
from zoneplay.modules.utils.logger import ActionLogger, setup_logging
from zoneplay.modules.utils.performance_monitor import PerformanceMonitor
from zoneplay.modules.visualization.dashboard import Dashboard

logger = logging.getLogger(__name__)


class ZonePlayApp:
    """Builds a session from config and drives it through the frame loop."""

    def __init__(self, config: Config, mode: str = "control"):
        # Imported here so `--mode serve` does not need MediaPipe
        from zoneplay.modules.detection.object_detector import ObjectDetector

        self._config = config

        detector_cfg = dict(config.detector)
        detector_cfg["models_dir"] = config.resolve_path(detector_cfg.get("models_dir", "models"))

        player = VideoPlayer(config.player)
        media_dir = config.get("player.media_dir")
        playlist = build_playlist(
            config.get("player.playlist") or [],
            config.resolve_path(media_dir) if media_dir else None,
        )
        self._session = SessionContext(
            source=CameraManager(config.camera),
            detector=ObjectDetector(detector_cfg),
            player=player,
            executor=ActionExecutor(config.control, player),
            dashboard=Dashboard(config.visualization),
            mode=mode,
            playlist=playlist,
        )

        display = None
        if config.get("visualization.enabled", True):
            display = CvWindow(config.get("visualization.window_name", "ZonePlay"))

        self._perf = PerformanceMonitor()
        self._loop = FrameLoop(
            self._session,
            display=display,
            target_fps=config.get("loop.target_fps", 30),
            performance=self._perf,
        )

        self._action_logger = ActionLogger()
        self._session.bus.subscribe(Events.ACTION_APPLIED, self._action_logger.log_action)
        self._session.bus.subscribe(Events.STREAM_ENDED, self._on_stream_ended)

        logger.info("ZonePlayApp initialized (mode=%s)", mode)

    def _on_stream_ended(self, **kwargs):
        logger.info("Gesture video finished")

    def start(self):
        """Load the configured media and run until the loop stops."""
        media = self._config.get("player.media")
        if media:
            self._session.load_media(media)
        elif self._session.playlist:
            self._session.next_media()

        try:
            asyncio.run(self._loop.run())
        finally:
            self._perf.print_report()
            self._action_logger.print_summary()
            logger.info("Shutdown complete.")

    def handle_signal(self, signum, frame):
        """Handle SIGINT/SIGTERM for graceful shutdown."""
        logger.info("Signal %d received, shutting down...", signum)
        self._session.active = False


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="ZonePlay - hand-position media control"
    )
    parser.add_argument(
        "--mode", choices=["control", "demo", "serve"],
        default=None, help="Operating mode"
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to config.yaml"
    )
    parser.add_argument(
        "--source", type=str, default=None,
        help="Gesture source: camera index or video file"
    )
    parser.add_argument(
        "--media", type=str, default=None,
        help="Video file to play"
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    config = Config()
    config.load(config_path=args.config)

    if args.source is not None:
        config.set("camera.source", args.source)
    if args.media is not None:
        config.set("player.media", args.media)

    log_cfg = config.get_section("logging")
    setup_logging(
        level="DEBUG" if args.debug else log_cfg.get("level", "INFO"),
        log_file=log_cfg.get("file"),
        max_size_mb=log_cfg.get("max_size_mb", 10),
        backup_count=log_cfg.get("backup_count", 3),
    )

    mode = args.mode or config.get("loop.mode", "control")

    logger.info("=" * 50)
    logger.info("  ZONEPLAY - Hand-Position Media Control")
    logger.info("  Version: %s", __version__)
    logger.info("  Mode: %s", mode)
    logger.info("=" * 50)

    if mode == "serve":
        from zoneplay.server.app import serve
        serve(config)
        return 0

    app = ZonePlayApp(config, mode=mode)

    signal.signal(signal.SIGINT, app.handle_signal)
    signal.signal(signal.SIGTERM, app.handle_signal)

    app.start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
