"""Runner configuration and lifecycle tests."""
from __future__ import annotations

import json
import time
import urllib.request

import pytest

from gallery_corridor.runner import GalleryApplication, RunnerConfig, load_config_from_env
from gallery_corridor.settings import SessionSeeds


def test_load_config_from_env_defaults() -> None:
    config = load_config_from_env({})
    assert config.host == "127.0.0.1"
    assert config.port == 8000
    assert config.viewport == (1280, 800)
    assert config.config_dir is None


def test_load_config_from_env_overrides() -> None:
    config = load_config_from_env(
        {"GALLERY_PORT": "9100", "GALLERY_VIEWPORT": "375x812", "GALLERY_FRAME_RATE": "30"}
    )
    assert config.port == 9100
    assert config.viewport == (375, 812)
    assert config.frame_rate == 30.0


def test_bad_viewport_is_rejected() -> None:
    with pytest.raises(ValueError):
        load_config_from_env({"GALLERY_VIEWPORT": "wide"})


def _get(host: str, port: int, path: str) -> dict:
    with urllib.request.urlopen(f"http://{host}:{port}{path}") as response:
        return json.loads(response.read().decode("utf-8"))


# //1.- End to end: frames tick, missing assets are hidden, the gallery is revealed.
def test_application_reveals_with_missing_assets(tmp_path) -> None:
    config = RunnerConfig(
        host="127.0.0.1",
        port=0,
        frame_rate=120.0,
        viewport=(1280, 800),
        config_dir=None,
        asset_root=str(tmp_path),
        log_interval_seconds=30.0,
    )
    app = GalleryApplication(config, seeds=SessionSeeds(1, 2))
    app.start()
    try:
        host, port = app.address
        deadline = time.time() + 10.0
        scene = _get(host, port, "/scene")["scene"]
        while not scene["revealed"] and time.time() < deadline:
            time.sleep(0.05)
            scene = _get(host, port, "/scene")["scene"]
        assert scene["revealed"]
        assert scene["hidden"]
        state = _get(host, port, "/state")["state"]
        assert state["frame"] > 0
        assert state["tier"] == "full_3d"
    finally:
        app.stop()
    assert app.session is None
    app.stop()
