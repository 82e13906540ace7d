"""Wheel input handling: scrolling forward speeds the walk up."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .camera import CameraLoop
from .events import WheelEvent

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoostParams:
    step: float = 0.5
    cap: float = 5.0


class InputController:
    """Turns scroll-forward gestures into capped boosts of the camera speed.

    Scrolling backward is ignored: speed returns to neutral only
    through the camera's passive decay.
    """

    def __init__(self, camera: CameraLoop, params: BoostParams | None = None) -> None:
        self._camera = camera
        self._params = params or BoostParams()

    def handle_wheel(self, event: WheelEvent) -> None:
        event.prevent_default()
        if event.delta_y < 0:
            multiplier = self._camera.boost(self._params.step, self._params.cap)
            LOGGER.debug("Scroll boost, speed multiplier now %.2f", multiplier)
