"""Runtime harness serving a live gallery session to a browser renderer."""

from __future__ import annotations

import logging
import os
import signal
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .bridge import RenderBridgeServer
from .preload import PreloadReport, default_fetcher, run_preload
from .scheduler import FrameDriver
from .session import GallerySession, PreloadFinished
from .settings import GallerySettings, SessionSeeds, load_gallery_settings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunnerConfig:
    """Resolved configuration describing how the gallery should run."""

    # //1.- Interface and port of the render bridge.
    host: str
    port: int
    # //2.- Frame rate of the simulation thread.
    frame_rate: float
    # //3.- Initial viewport used before the renderer reports its own size.
    viewport: Tuple[int, int]
    # //4.- Optional overrides for bundled settings and on-disk assets.
    config_dir: Optional[str]
    asset_root: Optional[str]
    # //5.- Interval between heartbeat log lines.
    log_interval_seconds: float


def _parse_viewport(value: str) -> Tuple[int, int]:
    width, _, height = value.lower().partition("x")
    try:
        parsed = (int(width), int(height))
    except ValueError as exc:
        raise ValueError(f"Viewport must look like 1280x800, got {value!r}") from exc
    if parsed[0] <= 0 or parsed[1] <= 0:
        raise ValueError("Viewport dimensions must be positive")
    return parsed


def load_config_from_env(env: Optional[dict[str, str]] = None) -> RunnerConfig:
    """Construct a :class:`RunnerConfig` from ``GALLERY_*`` environment variables."""

    source = env if env is not None else os.environ
    return RunnerConfig(
        host=source.get("GALLERY_HOST", "127.0.0.1"),
        port=int(source.get("GALLERY_PORT", "8000")),
        frame_rate=float(source.get("GALLERY_FRAME_RATE", "60")),
        viewport=_parse_viewport(source.get("GALLERY_VIEWPORT", "1280x800")),
        config_dir=source.get("GALLERY_CONFIG_DIR") or None,
        asset_root=source.get("GALLERY_ASSET_ROOT") or None,
        log_interval_seconds=float(source.get("GALLERY_LOG_INTERVAL_SEC", "30.0")),
    )


class GalleryApplication:
    """Lifecycle manager for the session, its frame driver and the bridge."""

    def __init__(
        self,
        config: RunnerConfig,
        *,
        settings: Optional[GallerySettings] = None,
        seeds: Optional[SessionSeeds] = None,
    ) -> None:
        self._config = config
        self._settings = settings or load_gallery_settings(config.config_dir)
        self._seeds = seeds or SessionSeeds.from_environment()
        self.session: Optional[GallerySession] = None
        self._driver: Optional[FrameDriver] = None
        self._server: Optional[RenderBridgeServer] = None
        self._preload_thread: Optional[threading.Thread] = None
        self._shutdown_event = threading.Event()
        self._last_log = 0.0

    def start(self) -> None:
        if self.session is not None:
            raise RuntimeError("GalleryApplication already running")
        session = GallerySession(self._settings, seeds=self._seeds, viewport=self._config.viewport)
        # //1.- Frames first so the walk never waits on the network.
        driver = FrameDriver(session.frame, frame_rate=self._config.frame_rate)
        driver.start()
        server = RenderBridgeServer(
            scene_provider=lambda: session.published_scene,
            state_provider=lambda: session.snapshot.to_payload(),
            input_handler=session.post,
            frame_provider=session.frame_payload,
            host=self._config.host,
            port=self._config.port,
        )
        try:
            server.start()
        except OSError:
            driver.stop()
            raise
        self.session = session
        self._driver = driver
        self._server = server
        # //2.- Preload in the background; the result is applied on the frame thread.
        self._preload_thread = threading.Thread(target=self._preload, name="gallery-preload", daemon=True)
        self._preload_thread.start()
        host, port = server.address
        LOGGER.info("Gallery bridge listening on http://%s:%s", host, port)

    def _preload(self) -> None:
        session = self.session
        if session is None:
            return
        asset_root = Path(self._config.asset_root) if self._config.asset_root else None
        refs = session.asset_refs()
        video = self._settings.assets.background_video
        if video:
            refs.append(video)
        posted = threading.Event()

        def _deliver(report: PreloadReport) -> None:
            session.post(PreloadFinished(report))
            posted.set()

        try:
            run_preload(refs, default_fetcher(asset_root), self._settings.assets.preload_timeout_s, on_report=_deliver)
        except Exception:  # noqa: BLE001
            LOGGER.exception("Preload crashed; revealing the gallery without it")
            if not posted.is_set():
                _deliver(PreloadReport(pending=set(refs)))

    def stop(self) -> None:
        # //1.- Tear down in reverse order of start; safe to call repeatedly.
        if self._server is not None:
            self._server.stop()
            self._server = None
        if self._driver is not None:
            self._driver.stop()
            self._driver = None
        if self.session is not None:
            self.session.detach()
            self.session = None
        self._shutdown_event.set()

    def wait_forever(self) -> None:
        while not self._shutdown_event.wait(timeout=1.0):
            self._maybe_log_heartbeat()

    def _maybe_log_heartbeat(self) -> None:
        now = time.monotonic()
        if now - self._last_log < self._config.log_interval_seconds:
            return
        self._last_log = now
        session = self.session
        if session is not None:
            snapshot = session.snapshot
            LOGGER.info(
                "Heartbeat: frame %d, position %.1f, speed x%.2f, tier %s",
                snapshot.index,
                snapshot.camera.position,
                snapshot.camera.speed_multiplier,
                snapshot.tier.value if snapshot.tier is not None else "unknown",
            )

    @property
    def address(self) -> tuple[str, int]:
        if self._server is None:
            raise RuntimeError("GalleryApplication is not running")
        return self._server.address


def _install_signal_handlers(app: GalleryApplication) -> None:
    def _handler(signum: int, _frame) -> None:  # type: ignore[override]
        LOGGER.info("Received signal %s, shutting down gallery", signum)
        app.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _handler)


def run(config: Optional[RunnerConfig] = None) -> None:
    resolved_config = config or load_config_from_env()
    app = GalleryApplication(resolved_config)
    app.start()
    _install_signal_handlers(app)
    try:
        app.wait_forever()
    finally:
        app.stop()


def main() -> int:
    """Console script entry point."""

    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(message)s")
    run()
    return 0


if __name__ == "__main__":  # pragma: no cover - exercised via ``python -m`` execution
    raise SystemExit(main())
