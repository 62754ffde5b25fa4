"""
Cooperative frame loop: capture -> detect -> classify -> act -> render.

Runs on a single asyncio task. Each pass runs to completion, then the loop
yields until the next display refresh. Until both the gesture source and
the detector model are ready a pass does no work and is simply
rescheduled. Opening the source and loading the model are independent
startup tasks run concurrently in worker threads.
"""

import asyncio
import logging
from typing import Optional

import cv2
import numpy as np

from zoneplay.core.errors import CameraError, ModelLoadError, ZonePlayError
from zoneplay.core.events import Events
from zoneplay.core.session import SessionContext
from zoneplay.core.types import Action
from zoneplay.modules.utils.performance_monitor import PerformanceMonitor

logger = logging.getLogger(__name__)

STATUS_REQUESTING = "Requesting camera..."
STATUS_CAMERA_STARTED = "Camera started"
STATUS_MODEL_LOADED = "Model loaded"

KEY_ESC = 27


class TickResult:
    """Result of a single loop pass."""

    __slots__ = (
        "processed", "frame", "detections", "decision",
        "action_applied", "image",
    )

    def __init__(self):
        self.processed = False
        self.frame = None
        self.detections = []
        self.decision = None
        self.action_applied = False
        self.image = None

    @property
    def action(self) -> Action:
        return self.decision.action if self.decision is not None else Action.NONE


class CvWindow:
    """OpenCV window used as the display surface."""

    def __init__(self, name: str):
        self._name = name
        self._opened = False

    def show(self, image):
        cv2.imshow(self._name, image)
        self._opened = True

    def poll_key(self) -> int:
        """Pump window events; returns the pressed key or -1."""
        return cv2.waitKey(1) & 0xFF if self._opened else -1

    @property
    def closed(self) -> bool:
        """True once the user has closed a window that was shown."""
        if not self._opened:
            return False
        return cv2.getWindowProperty(self._name, cv2.WND_PROP_VISIBLE) < 1

    def close(self):
        if self._opened:
            cv2.destroyWindow(self._name)
            self._opened = False


class FrameLoop:
    """Drives one session from startup to teardown.

    Example:
        >>> loop = FrameLoop(session, display=CvWindow("ZonePlay"))
        >>> asyncio.run(loop.run())
    """

    def __init__(self, session: SessionContext, display=None,
                 target_fps: float = 30.0,
                 performance: Optional[PerformanceMonitor] = None):
        self._session = session
        self._display = display
        self._interval = 1.0 / target_fps if target_fps > 0 else 0.0
        self._perf = performance or PerformanceMonitor()

    @property
    def session(self) -> SessionContext:
        return self._session

    @property
    def performance(self) -> PerformanceMonitor:
        return self._perf

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    async def initialize(self):
        """Open the gesture source and load the model concurrently.

        Each task sets its readiness flag on success. A failure is logged
        and written to the status line; it is not retried.
        """
        s = self._session
        s.set_status(STATUS_REQUESTING)

        source_result, model_result = await asyncio.gather(
            asyncio.to_thread(self._open_source),
            asyncio.to_thread(self._load_model),
            return_exceptions=True,
        )

        if isinstance(model_result, BaseException):
            self._fail("model", model_result)
        else:
            s.model_ready = True
            s.bus.emit(Events.MODEL_READY)
            logger.info(STATUS_MODEL_LOADED)

        if isinstance(source_result, BaseException):
            self._fail("source", source_result)
        else:
            s.source_ready = True
            s.bus.emit(Events.SOURCE_READY)
            if s.model_ready:
                s.set_status(STATUS_CAMERA_STARTED)

    def _open_source(self):
        try:
            self._session.source.open()
        except ZonePlayError:
            raise
        except Exception as e:
            raise CameraError(str(e)) from e

    def _load_model(self):
        try:
            self._session.detector.load()
        except ZonePlayError:
            raise
        except Exception as e:
            raise ModelLoadError(str(e)) from e

    def _fail(self, task: str, error: BaseException):
        s = self._session
        if task == "model":
            s.model_failed = True
        else:
            s.source_failed = True

        message = getattr(error, "user_message", str(error))
        logger.error("Startup task '%s' failed: %s", task, error)
        s.set_status(message)
        s.bus.emit(Events.INIT_FAILED, task=task, error=error)

    # -------------------------------------------------------------------------
    # Per-frame pass
    # -------------------------------------------------------------------------

    def tick(self) -> TickResult:
        """Run one classification + render pass.

        Returns:
            TickResult; ``processed`` is False when inputs were not ready
            or no frame was available
        """
        s = self._session
        result = TickResult()

        if not s.ready:
            self._perf.record_idle()
            return result

        with self._perf.measure("total"):
            with self._perf.measure("capture"):
                frame = s.source.read()

            if frame is None:
                if s.source.ended:
                    self._end_stream()
                return result

            result.frame = frame

            with self._perf.measure("detection"):
                detections = s.detector.detect(frame)
            result.detections = detections

            with self._perf.measure("classification"):
                decision = s.classifier.evaluate(detections, frame.width, frame.height)
            result.decision = decision

            if s.mode == "control" and decision.action.is_action:
                with self._perf.measure("action"):
                    result.action_applied = s.executor.execute(decision.action)
                if result.action_applied:
                    s.bus.emit(Events.ACTION_APPLIED, action=decision.action,
                               volume=s.player.volume, position=s.player.current_time)

            s.set_status(decision.status)

            if s.dashboard is not None:
                with self._perf.measure("render"):
                    result.image = self._render(frame.image, decision)

        result.processed = True
        self._perf.tick()
        return result

    def _render(self, camera_image, decision):
        s = self._session
        state = dict(s.player.state())
        state.update({
            "action": decision.action if decision is not None else Action.NONE,
            "detection": decision.detection if decision is not None else None,
            "status": s.status,
            "mode": s.mode,
            "fps": self._perf.fps,
        })
        image = s.dashboard.render(camera_image, s.player.read_frame(), state)
        if self._display is not None:
            self._display.show(image)
        return image

    def _render_idle(self):
        """Show the status line on a blank canvas while waiting or failed."""
        width, height = self._session.source.resolution
        return self._render(np.zeros((height, width, 3), dtype=np.uint8), None)

    def _end_stream(self):
        s = self._session
        logger.info("Gesture source stream ended")
        s.active = False
        s.bus.emit(Events.STREAM_ENDED)

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def handle_key(self, key: int):
        """Keyboard: q/ESC quit, z toggle zones, m toggle control/demo, o next video."""
        s = self._session
        if key in (ord("q"), KEY_ESC):
            s.active = False
        elif key == ord("z") and s.dashboard is not None:
            shown = s.dashboard.toggle_zones()
            logger.info("Zone overlay %s", "on" if shown else "off")
        elif key == ord("m"):
            s.toggle_mode()
        elif key == ord("o"):
            s.next_media()

    async def run(self):
        """Initialise, then loop until the stream ends or the user quits."""
        s = self._session
        await self.initialize()

        s.active = True
        s.bus.emit(Events.SYSTEM_STARTED, mode=s.mode)

        try:
            while s.active:
                result = self.tick()

                if not result.processed and not s.ready and s.dashboard is not None:
                    self._render_idle()

                if self._display is not None:
                    self.handle_key(self._display.poll_key())
                    if self._display.closed:
                        s.active = False
                elif not s.ready and not s.can_become_ready:
                    # Headless and nothing can ever become ready
                    s.active = False

                await asyncio.sleep(self._interval)
        finally:
            self.shutdown()

    def shutdown(self):
        """Release session resources and close the display."""
        s = self._session
        s.active = False
        s.close()
        if self._display is not None:
            self._display.close()
        s.bus.emit(Events.SYSTEM_SHUTDOWN)
        last = s.executor.last_action
        logger.info("Frame loop stopped after %d frames, %d actions applied (last: %s)",
                    self._perf.frame_count, s.executor.action_count,
                    last.label if last is not None else "none")
