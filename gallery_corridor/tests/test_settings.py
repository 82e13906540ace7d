"""Tests for gallery configuration loading."""
from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from gallery_corridor.errors import SettingsError
from gallery_corridor.settings import SessionSeeds, load_gallery_settings

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


# //1.- Bundled JSON files parse into a consistent bundle.
def test_load_gallery_settings_uses_defaults() -> None:
    settings = load_gallery_settings()
    assert settings.corridor.row_count == 20
    assert settings.corridor.row_depth == 500.0
    assert settings.corridor.framed_size == 248.0
    assert settings.camera.boost_cap == 5.0
    assert 0.0 < settings.camera.decay_rate <= 1.0
    assert settings.tiers.full_copies == 3
    assert settings.tiers.simplified_copies == 2
    assert len(settings.assets.catalog) == 14
    assert settings.assets.link_target.startswith("https://")


def _copy_config(tmp_path: Path) -> Path:
    target = tmp_path / "config"
    shutil.copytree(CONFIG_DIR, target)
    return target


@pytest.mark.parametrize(
    "filename, key, value",
    [
        ("tiers.json", "simplified_mode", "hologram"),
        ("corridor.json", "layout_policy", "alphabetical"),
        ("camera.json", "decay_rate", 0.0),
        ("camera.json", "base_speed", -55.0),
        ("camera.json", "boost_step", -0.5),
        ("corridor.json", "row_count", 0),
        ("assets.json", "catalog", []),
    ],
)
def test_invalid_values_are_rejected(tmp_path: Path, filename: str, key: str, value) -> None:
    config_dir = _copy_config(tmp_path)
    path = config_dir / filename
    payload = json.loads(path.read_text(encoding="utf-8"))
    payload[key] = value
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(SettingsError):
        load_gallery_settings(str(config_dir))


def test_missing_key_is_reported(tmp_path: Path) -> None:
    config_dir = _copy_config(tmp_path)
    path = config_dir / "camera.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    del payload["base_speed"]
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(SettingsError):
        load_gallery_settings(str(config_dir))


def test_missing_directory_is_reported(tmp_path: Path) -> None:
    with pytest.raises(SettingsError):
        load_gallery_settings(str(tmp_path / "nowhere"))


# //2.- Seeds come from the environment and feed reproducible generators.
def test_seeds_from_environment() -> None:
    seeds = SessionSeeds.from_environment(env={"GALLERY_LAYOUT_SEED": "5"})
    assert seeds == SessionSeeds(layout_seed=5, camera_seed=None)
    first = seeds.create_generators()["layout"].random()
    second = seeds.create_generators()["layout"].random()
    assert first == second


def test_bad_seed_is_reported() -> None:
    with pytest.raises(SettingsError):
        SessionSeeds.from_environment(env={"GALLERY_CAMERA_SEED": "abc"})
