"""Unit tests for the render bridge HTTP server."""

from __future__ import annotations

import json
import time
import urllib.error
import urllib.request
from typing import Dict, List

import pytest

from gallery_corridor.bridge import RenderBridgeServer, parse_input_command
from gallery_corridor.events import ResizeEvent, WheelEvent
from gallery_corridor.projection import Drawable, translation


def _wait_for_server(host: str, port: int, timeout: float = 2.0) -> None:
    """Poll the handshake endpoint until the server responds or the timeout elapses."""

    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with urllib.request.urlopen(f"http://{host}:{port}/handshake"):
                return
        except urllib.error.URLError:
            time.sleep(0.05)
    raise TimeoutError("Server did not respond within the allotted time")


def _post(host: str, port: int, path: str, body: bytes) -> Dict[str, object]:
    request = urllib.request.Request(
        f"http://{host}:{port}{path}",
        data=body,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    with urllib.request.urlopen(request) as response:
        return json.loads(response.read().decode("utf-8"))


@pytest.fixture()
def received() -> List[object]:
    return []


@pytest.fixture()
def running_server(received):
    """Spin up the bridge on an ephemeral port for the duration of a test."""

    # //1.- Deterministic providers keep assertions stable.
    server = RenderBridgeServer(
        scene_provider=lambda: {"presentation": {"mode": "corridor"}},
        state_provider=lambda: {"frame": 7, "position": 10.0},
        input_handler=received.append,
    )
    server.start()
    host, port = server.address
    _wait_for_server(host, port)
    yield server
    # //2.- Guarantee the socket is closed after each scenario completes.
    server.stop()


def test_scene_and_state_endpoints(running_server: RenderBridgeServer) -> None:
    host, port = running_server.address
    with urllib.request.urlopen(f"http://{host}:{port}/scene") as response:
        scene = json.loads(response.read().decode("utf-8"))
    with urllib.request.urlopen(f"http://{host}:{port}/state?cache=0") as response:
        state = json.loads(response.read().decode("utf-8"))
    assert scene == {"status": "ok", "scene": {"presentation": {"mode": "corridor"}}}
    assert state["state"]["frame"] == 7


# //1.- Input messages are decoded into session events and handed over.
def test_input_endpoint_forwards_events(running_server: RenderBridgeServer, received: List[object]) -> None:
    host, port = running_server.address
    payload = _post(host, port, "/input", json.dumps({"type": "wheel", "deltaY": -120}).encode("utf-8"))
    assert payload == {"status": "ok", "accepted": "wheel"}
    _post(host, port, "/input", json.dumps({"type": "resize", "width": 375, "height": 812}).encode("utf-8"))
    assert received == [WheelEvent(delta_y=-120.0), ResizeEvent(375, 812)]


@pytest.mark.parametrize(
    "body",
    [b"{not json", b"[1, 2]", json.dumps({"type": "teleport"}).encode("utf-8"), json.dumps({"type": "resize"}).encode("utf-8")],
)
def test_malformed_input_is_rejected(running_server: RenderBridgeServer, received: List[object], body: bytes) -> None:
    host, port = running_server.address
    with pytest.raises(urllib.error.HTTPError) as excinfo:
        _post(host, port, "/input", body)
    assert excinfo.value.code == 400
    assert received == []


def test_unknown_path_returns_not_found(running_server: RenderBridgeServer) -> None:
    host, port = running_server.address
    with pytest.raises(urllib.error.HTTPError) as excinfo:
        urllib.request.urlopen(f"http://{host}:{port}/teleport")
    assert excinfo.value.code == 404


def test_provider_failure_returns_server_error() -> None:
    def broken() -> Dict[str, object]:
        raise RuntimeError("no frame yet")

    server = RenderBridgeServer(scene_provider=broken, state_provider=broken, input_handler=lambda event: None)
    server.start()
    host, port = server.address
    _wait_for_server(host, port)
    try:
        with pytest.raises(urllib.error.HTTPError) as excinfo:
            urllib.request.urlopen(f"http://{host}:{port}/state")
        assert excinfo.value.code == 500
    finally:
        server.stop()


def test_parse_input_command_validates_dimensions() -> None:
    with pytest.raises(ValueError):
        parse_input_command({"type": "resize", "width": 0, "height": 100})
    assert parse_input_command({"type": "wheel"}) == WheelEvent(delta_y=0.0)


# //2.- Per-frame drawables reach the renderer as CSS matrix3d transforms.
def test_frame_endpoint_serves_drawable_transforms() -> None:
    drawable = Drawable(kind="artwork", key="left-0", matrix=translation(10.0, 20.0, -30.0), width=248.0, height=248.0, src="/cuadro1.png")
    server = RenderBridgeServer(
        scene_provider=lambda: {},
        state_provider=lambda: {},
        input_handler=lambda event: None,
        frame_provider=lambda: {"frame": 3, "drawables": [drawable.to_payload()]},
    )
    server.start()
    host, port = server.address
    _wait_for_server(host, port)
    try:
        with urllib.request.urlopen(f"http://{host}:{port}/frame") as response:
            payload = json.loads(response.read().decode("utf-8"))
    finally:
        server.stop()
    served = payload["frame"]["drawables"][0]
    assert payload["status"] == "ok"
    assert served["transform"] == "matrix3d(1,0,0,0,0,1,0,0,0,0,1,0,10,20,-30,1)"
    assert served["src"] == "/cuadro1.png"


def test_frame_endpoint_is_absent_without_provider(running_server: RenderBridgeServer) -> None:
    host, port = running_server.address
    with pytest.raises(urllib.error.HTTPError) as excinfo:
        urllib.request.urlopen(f"http://{host}:{port}/frame")
    assert excinfo.value.code == 404
