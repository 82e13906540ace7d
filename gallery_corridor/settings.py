"""Structured loader for gallery corridor settings."""
from __future__ import annotations

import json
import os
import random
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .errors import SettingsError


# //1.- Capture the corridor dimensions and the row layout parameters.
@dataclass(frozen=True)
class CorridorSettings:
    row_count: int
    row_depth: float
    corridor_width: float
    corridor_height: float
    painting_size: float
    frame_width: float
    painting_lift: float
    max_tilt_deg: float
    layout_policy: str

    @property
    def framed_size(self) -> float:
        return self.painting_size + self.frame_width * 2


# //2.- Record camera speed, decay and perspective tuning.
@dataclass(frozen=True)
class CameraSettings:
    base_speed: float
    decay_rate: float
    time_scaled_decay: bool
    reference_frame_ms: float
    boost_step: float
    boost_cap: float
    perspective_base: float
    perspective_min: float
    perspective_per_unit: float
    sphere_radius: float


# //3.- Describe how the viewport is classified and what each tier renders.
@dataclass(frozen=True)
class TierSettings:
    narrow_width: int
    full_copies: int
    simplified_copies: int
    simplified_mode: str
    portrait_stage_scale: float
    strip_image_size: float
    strip_period_ms: float


# //4.- Hold the external references consumed by the core.
@dataclass(frozen=True)
class AssetSettings:
    catalog: Tuple[str, ...]
    background_video: str
    link_target: str
    cta_lines: Tuple[str, ...]
    preload_timeout_s: float


# //5.- Aggregate the complete settings bundle handed to a session.
@dataclass(frozen=True)
class GallerySettings:
    corridor: CorridorSettings
    camera: CameraSettings
    tiers: TierSettings
    assets: AssetSettings


# //6.- Seeds driving the stochastic parts of a session; ``None`` means unseeded.
@dataclass(frozen=True)
class SessionSeeds:
    layout_seed: Optional[int] = None
    camera_seed: Optional[int] = None

    @classmethod
    def from_environment(cls, prefix: str = "GALLERY", env: Optional[Dict[str, str]] = None) -> "SessionSeeds":
        source = env if env is not None else os.environ
        layout = source.get(f"{prefix}_LAYOUT_SEED")
        camera = source.get(f"{prefix}_CAMERA_SEED")
        try:
            return cls(
                layout_seed=int(layout) if layout is not None else None,
                camera_seed=int(camera) if camera is not None else None,
            )
        except ValueError as exc:
            raise SettingsError(f"Seed variables under {prefix}_* must be integers") from exc

    def create_generators(self) -> Dict[str, random.Random]:
        return {
            "layout": random.Random(self.layout_seed),
            "camera": random.Random(self.camera_seed),
        }


_SIMPLIFIED_MODES = {"strips", "corridor"}
_LAYOUT_POLICIES = {"randomized", "fixed"}


def _default_config_directory() -> str:
    return os.path.join(os.path.dirname(__file__), "config")


def _read_json_config(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise SettingsError(f"Unable to read configuration file {path}") from exc


def _load_corridor_settings(config_dir: str) -> CorridorSettings:
    payload = _read_json_config(os.path.join(config_dir, "corridor.json"))
    policy = str(payload.get("layout_policy", "randomized")).strip().lower()
    if policy not in _LAYOUT_POLICIES:
        raise SettingsError(f"Unknown layout policy {policy!r}")
    settings = CorridorSettings(
        row_count=int(payload["row_count"]),
        row_depth=float(payload["row_depth"]),
        corridor_width=float(payload["corridor_width"]),
        corridor_height=float(payload["corridor_height"]),
        painting_size=float(payload["painting_size"]),
        frame_width=float(payload.get("frame_width", 4.0)),
        painting_lift=float(payload.get("painting_lift", 0.0)),
        max_tilt_deg=float(payload.get("max_tilt_deg", 2.0)),
        layout_policy=policy,
    )
    if settings.row_count < 1 or settings.row_depth <= 0:
        raise SettingsError("Corridor needs at least one row and a positive row depth")
    return settings


def _load_camera_settings(config_dir: str) -> CameraSettings:
    payload = _read_json_config(os.path.join(config_dir, "camera.json"))
    settings = CameraSettings(
        base_speed=float(payload["base_speed"]),
        decay_rate=float(payload["decay_rate"]),
        time_scaled_decay=bool(payload.get("time_scaled_decay", False)),
        reference_frame_ms=float(payload.get("reference_frame_ms", 1000.0 / 60.0)),
        boost_step=float(payload["boost_step"]),
        boost_cap=float(payload["boost_cap"]),
        perspective_base=float(payload["perspective_base"]),
        perspective_min=float(payload["perspective_min"]),
        perspective_per_unit=float(payload["perspective_per_unit"]),
        sphere_radius=float(payload.get("sphere_radius", 22.0)),
    )
    if settings.base_speed < 0.0:
        raise SettingsError("Base speed must not be negative")
    if not 0.0 < settings.decay_rate <= 1.0:
        raise SettingsError("Decay rate must lie in (0, 1]")
    if settings.boost_step < 0.0:
        raise SettingsError("Boost step must not be negative")
    if settings.boost_cap < 1.0:
        raise SettingsError("Boost cap must not be below the neutral multiplier")
    return settings


def _load_tier_settings(config_dir: str) -> TierSettings:
    payload = _read_json_config(os.path.join(config_dir, "tiers.json"))
    mode = str(payload.get("simplified_mode", "strips")).strip().lower()
    if mode not in _SIMPLIFIED_MODES:
        raise SettingsError(f"Unknown simplified mode {mode!r}")
    settings = TierSettings(
        narrow_width=int(payload["narrow_width"]),
        full_copies=int(payload.get("full_copies", 3)),
        simplified_copies=int(payload.get("simplified_copies", 2)),
        simplified_mode=mode,
        portrait_stage_scale=float(payload.get("portrait_stage_scale", 1.0)),
        strip_image_size=float(payload.get("strip_image_size", 180.0)),
        strip_period_ms=float(payload.get("strip_period_ms", 40000.0)),
    )
    if settings.full_copies < 1 or settings.simplified_copies < 1:
        raise SettingsError("Replication counts must be at least one")
    return settings


def _load_asset_settings(config_dir: str) -> AssetSettings:
    payload = _read_json_config(os.path.join(config_dir, "assets.json"))
    catalog = tuple(str(item) for item in payload["catalog"])
    if not catalog:
        raise SettingsError("Image catalog must not be empty")
    return AssetSettings(
        catalog=catalog,
        background_video=str(payload.get("background_video", "")),
        link_target=str(payload["link_target"]),
        cta_lines=tuple(str(line) for line in payload.get("cta_lines", ())),
        preload_timeout_s=float(payload.get("preload_timeout_s", 4.0)),
    )


# //7.- Public helper assembling the full settings bundle.
def load_gallery_settings(config_dir: str | None = None) -> GallerySettings:
    directory = config_dir or _default_config_directory()
    try:
        return GallerySettings(
            corridor=_load_corridor_settings(directory),
            camera=_load_camera_settings(directory),
            tiers=_load_tier_settings(directory),
            assets=_load_asset_settings(directory),
        )
    except (KeyError, TypeError) as exc:
        raise SettingsError(f"Missing or invalid setting: {exc}") from exc
