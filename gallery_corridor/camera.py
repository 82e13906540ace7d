"""Time-based camera advance along the corridor axis."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional

LOGGER = logging.getLogger(__name__)

NEUTRAL_MULTIPLIER = 1.0


@dataclass(frozen=True)
class CameraParams:
    base_speed: float = 55.0
    decay_rate: float = 0.02
    time_scaled_decay: bool = False
    reference_frame_ms: float = 1000.0 / 60.0
    perspective_base: float = 800.0
    perspective_min: float = 700.0
    perspective_per_unit: float = 25.0
    sphere_radius: float = 22.0

    @classmethod
    def from_settings(cls, settings) -> "CameraParams":
        return cls(
            base_speed=settings.base_speed,
            decay_rate=settings.decay_rate,
            time_scaled_decay=settings.time_scaled_decay,
            reference_frame_ms=settings.reference_frame_ms,
            perspective_base=settings.perspective_base,
            perspective_min=settings.perspective_min,
            perspective_per_unit=settings.perspective_per_unit,
            sphere_radius=settings.sphere_radius,
        )


@dataclass(frozen=True)
class CameraState:
    position: float
    total_distance: float
    speed_multiplier: float


def initial_position(row_count: int, row_depth: float, rng: Optional[random.Random] = None) -> float:
    """Pick a uniformly random row boundary to open the walk on."""

    source = rng or random.Random()
    return math.floor(source.random() * row_count) * row_depth


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(value, maximum))


class CameraLoop:
    """Single owner of the camera position, travelled distance and speed multiplier."""

    def __init__(self, loop_length: float, params: CameraParams, *, position: float = 0.0) -> None:
        if loop_length <= 0:
            raise ValueError("Loop length must be positive")
        self._loop_length = float(loop_length)
        self._params = params
        self._position = math.fmod(max(0.0, float(position)), self._loop_length)
        self._total_distance = 0.0
        self._speed_multiplier = NEUTRAL_MULTIPLIER
        self._last_frame_ms: Optional[float] = None
        self._perspective = params.perspective_base

    @classmethod
    def at_random_row(
        cls,
        row_count: int,
        row_depth: float,
        params: CameraParams,
        rng: Optional[random.Random] = None,
    ) -> "CameraLoop":
        start = initial_position(row_count, row_depth, rng)
        LOGGER.debug("Camera opens at row boundary %.1f", start)
        return cls(row_count * row_depth, params, position=start)

    @property
    def position(self) -> float:
        return self._position

    @property
    def total_distance(self) -> float:
        return self._total_distance

    @property
    def speed_multiplier(self) -> float:
        return self._speed_multiplier

    @property
    def loop_length(self) -> float:
        return self._loop_length

    @property
    def perspective(self) -> float:
        return self._perspective

    @property
    def sphere_rotation(self) -> float:
        """Rolling accessory rotation in degrees derived from travelled distance."""

        circumference = 2.0 * math.pi * self._params.sphere_radius
        return self._total_distance / circumference * 360.0

    def state(self) -> CameraState:
        return CameraState(self._position, self._total_distance, self._speed_multiplier)

    def boost(self, step: float, cap: float) -> float:
        """Raise the multiplier by ``step`` without exceeding ``cap``."""

        self._speed_multiplier = max(0.0, min(self._speed_multiplier + step, cap))
        return self._speed_multiplier

    def _decay_factor(self, delta_ms: float) -> float:
        rate = self._params.decay_rate
        if not self._params.time_scaled_decay:
            return rate
        return 1.0 - pow(1.0 - rate, delta_ms / max(1e-6, self._params.reference_frame_ms))

    def tick(self, delta_ms: float) -> CameraState:
        """Advance the simulation by ``delta_ms`` milliseconds."""

        if not math.isfinite(delta_ms) or delta_ms < 0.0:
            LOGGER.debug("Ignoring invalid frame delta %r", delta_ms)
            delta_ms = 0.0
        # //1.- Ease the multiplier toward neutral; never crosses 1.0.
        self._speed_multiplier += (NEUTRAL_MULTIPLIER - self._speed_multiplier) * self._decay_factor(delta_ms)
        # //2.- Integrate travel and wrap by modulo so long stalls still land inside the loop.
        advance = self._params.base_speed * self._speed_multiplier * delta_ms / 1000.0
        self._total_distance += advance
        self._position = (self._position + advance) % self._loop_length
        # //3.- Faster travel narrows the perspective within a bounded range.
        params = self._params
        self._perspective = _clamp(
            params.perspective_base - (self._speed_multiplier - NEUTRAL_MULTIPLIER) * params.perspective_per_unit,
            params.perspective_min,
            params.perspective_base,
        )
        return self.state()

    def frame(self, now_ms: float) -> CameraState:
        """Tick from a display timestamp; the first frame has a zero delta."""

        if self._last_frame_ms is None:
            self._last_frame_ms = now_ms
        delta = now_ms - self._last_frame_ms
        self._last_frame_ms = now_ms
        return self.tick(delta)
