"""HTTP bridge handing frame data to an out-of-process renderer."""

from __future__ import annotations

import json
import logging
import math
import threading
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Dict, Optional, Tuple
from urllib.parse import urlparse

from .events import ResizeEvent, WheelEvent

LOGGER = logging.getLogger(__name__)

PayloadProvider = Callable[[], Dict[str, object]]
InputHandler = Callable[[object], None]


def parse_input_command(payload: Dict[str, object]) -> object:
    """Translate a renderer input message into a session event."""

    # //1.- Only wheel and resize signals are accepted from the renderer.
    kind = payload.get("type")
    if kind == "wheel":
        delta = float(payload.get("deltaY", 0.0))
        if not math.isfinite(delta):
            raise ValueError("deltaY must be finite")
        return WheelEvent(delta_y=delta)
    if kind == "resize":
        width = int(payload["width"])
        height = int(payload["height"])
        if width <= 0 or height <= 0:
            raise ValueError("Viewport dimensions must be positive")
        return ResizeEvent(width=width, height=height)
    raise ValueError(f"Unsupported input type {kind!r}")


class RenderBridgeServer:
    """Threaded HTTP server exposing scene, state, frame and input endpoints."""

    def __init__(
        self,
        scene_provider: PayloadProvider,
        state_provider: PayloadProvider,
        input_handler: InputHandler,
        *,
        frame_provider: Optional[PayloadProvider] = None,
        host: str = "127.0.0.1",
        port: int = 0,
    ) -> None:
        # //1.- Persist collaborators so the request handler can reach them.
        self._host = host
        self._port = port
        self._scene_provider = scene_provider
        self._state_provider = state_provider
        self._frame_provider = frame_provider
        self._input_handler = input_handler
        # //2.- The daemon and its thread exist only between start and stop.
        self._httpd: Optional[ThreadingHTTPServer] = None
        self._serve_thread: Optional[threading.Thread] = None

    @property
    def address(self) -> Tuple[str, int]:
        # //1.- Only a started server has a resolved bind address.
        if not self._httpd:
            raise RuntimeError("Server is not running")
        return self._httpd.server_address  # type: ignore[return-value]

    def start(self) -> None:
        """Launch the HTTP server on a background thread."""

        # //1.- A second start would leak a socket and a serving thread.
        if self._httpd is not None:
            raise RuntimeError("Server already running")

        server_ref = self

        # //2.- Build a handler class bound to this server instance.
        class RequestHandler(BaseHTTPRequestHandler):
            def log_message(self, format: str, *args: object) -> None:  # type: ignore[override]
                # //1.- Route access logs to debug so frame polling stays quiet.
                LOGGER.debug("render_bridge: %s", format % args)

            def _set_headers(self, status: HTTPStatus, content_type: str = "application/json") -> None:
                # //1.- The renderer page is served from another origin, so every reply carries CORS headers.
                self.send_response(status)
                self.send_header("Content-Type", content_type)
                self.send_header("Access-Control-Allow-Origin", "*")
                self.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
                self.send_header("Access-Control-Allow-Headers", "Content-Type")

            def _write_json(self, payload: Dict[str, object], status: HTTPStatus = HTTPStatus.OK) -> None:
                # //1.- Serialise once so Content-Length matches the body.
                body = json.dumps(payload).encode("utf-8")
                self._set_headers(status)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def _serve_provider(self, provider: PayloadProvider, key: str) -> None:
                # //1.- Provider failures become a 500 and never kill the serving thread.
                try:
                    self._write_json({"status": "ok", key: provider()})
                except Exception as exc:  # noqa: BLE001
                    LOGGER.exception("Failed to gather %s payload", key)
                    self._write_json(
                        {"status": "error", "message": str(exc)}, status=HTTPStatus.INTERNAL_SERVER_ERROR
                    )

            def do_OPTIONS(self) -> None:  # type: ignore[override]
                # //1.- Answer CORS preflight for POST /input without touching the session.
                self._set_headers(HTTPStatus.NO_CONTENT)
                self.end_headers()

            def do_GET(self) -> None:  # type: ignore[override]
                # //1.- Route on the path alone; query strings are ignored.
                path = urlparse(self.path).path
                if path == "/handshake":
                    self._write_json({"status": "ok", "message": "Gallery bridge online"})
                    return
                # //2.- Static scene description, republished only when it changes.
                if path == "/scene":
                    self._serve_provider(server_ref._scene_provider, "scene")
                    return
                # //3.- Latest camera snapshot.
                if path == "/state":
                    self._serve_provider(server_ref._state_provider, "state")
                    return
                # //4.- Per-frame drawables with their matrix3d transforms.
                if path == "/frame" and server_ref._frame_provider is not None:
                    self._serve_provider(server_ref._frame_provider, "frame")
                    return
                self._write_json({"status": "error", "message": "Not found"}, status=HTTPStatus.NOT_FOUND)

            def do_POST(self) -> None:  # type: ignore[override]
                # //1.- Only the input endpoint accepts POST.
                path = urlparse(self.path).path
                if path != "/input":
                    self._write_json({"status": "error", "message": "Not found"}, status=HTTPStatus.NOT_FOUND)
                    return
                try:
                    # //2.- Decode the signal into a session event.
                    content_length = int(self.headers.get("Content-Length", "0"))
                    raw_body = self.rfile.read(content_length) if content_length > 0 else b"{}"
                    payload = json.loads(raw_body.decode("utf-8") or "{}")
                    if not isinstance(payload, dict):
                        raise ValueError("Input payload must be a JSON object")
                    event = parse_input_command(payload)
                except (ValueError, KeyError, TypeError) as exc:
                    # //3.- Malformed bodies get a 400 the renderer can act on.
                    self._write_json(
                        {"status": "error", "message": f"Invalid input payload: {exc}"},
                        status=HTTPStatus.BAD_REQUEST,
                    )
                    return
                try:
                    # //4.- Queue the event for the frame thread.
                    server_ref._input_handler(event)
                except Exception as exc:  # noqa: BLE001
                    LOGGER.exception("Input handler failed")
                    self._write_json(
                        {"status": "error", "message": str(exc)}, status=HTTPStatus.INTERNAL_SERVER_ERROR
                    )
                    return
                self._write_json({"status": "ok", "accepted": payload.get("type")})

        # //3.- Bind, capture the resolved port, and serve on a daemon thread.
        self._httpd = ThreadingHTTPServer((self._host, self._port), RequestHandler)
        self._port = self._httpd.server_address[1]
        self._serve_thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)
        self._serve_thread.start()

    def stop(self) -> None:
        """Terminate the HTTP server and wait for the thread to exit."""

        # //1.- Stopping a server that never started is a no-op.
        if self._httpd is None:
            return
        # //2.- Shut the daemon down and join its thread.
        self._httpd.shutdown()
        self._httpd.server_close()
        if self._serve_thread:
            self._serve_thread.join(timeout=2.0)
        # //3.- Reset so the instance can be started again.
        self._httpd = None
        self._serve_thread = None
