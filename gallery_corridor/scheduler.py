"""Display-synchronised frame scheduling with an explicit cancellation handle."""
from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

LOGGER = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameDriver:
    """Calls ``callback(now_ms)`` once per frame on a background thread.

    A failing callback is logged and the next frame is still scheduled, so a
    cosmetic error can never stop the walk.
    """

    def __init__(
        self,
        callback: FrameCallback,
        *,
        frame_rate: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if frame_rate <= 0:
            raise ValueError("Frame rate must be positive")
        self._callback = callback
        self._interval = 1.0 / frame_rate
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._frames = 0
        self._failures = 0

    @property
    def running(self) -> bool:
        return self._thread is not None

    @property
    def frames(self) -> int:
        return self._frames

    @property
    def failures(self) -> int:
        return self._failures

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("FrameDriver already running")
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="gallery-frames", daemon=True)
        self._thread.start()
        LOGGER.debug("Frame driver started at %.1f fps", 1.0 / self._interval)

    def stop(self, timeout: float = 2.0) -> None:
        """Cancel the frame schedule; safe to call more than once."""

        thread = self._thread
        self._stop_event.set()
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout=timeout)
        self._thread = None
        LOGGER.debug("Frame driver stopped after %d frames", self._frames)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            started = self._clock()
            try:
                self._callback(started * 1000.0)
            except Exception:  # noqa: BLE001
                self._failures += 1
                LOGGER.exception("Frame callback failed; continuing")
            self._frames += 1
            remaining = self._interval - (self._clock() - started)
            if self._stop_event.wait(timeout=max(0.0, remaining)):
                break
